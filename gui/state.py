"""Sleep tracker view state.

SleepTrackerState sits between the tracker screen and the night store. Each
user action launches background work on the holder's TaskScope; results come
back on the foreground thread and are published through LiveValues that
the screen observes.

Session lifecycle: no night -> open night (tonight set) -> stopped night
awaiting a rating (tonight still set, quality navigation signalled) -> no
night again once the rating is saved or initialize() re-checks the store.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future
from typing import Callable, List, Optional

from sleeptracker.database.store import SleepNightStore, Subscription
from sleeptracker.errors import (
    InvalidQualityError,
    NightNotFoundError,
    NightNotRateableError,
    SessionAlreadyOpenError,
)
from sleeptracker.formatting import format_nights
from sleeptracker.models.night import MAX_QUALITY, MIN_QUALITY, SleepNight, now_millis
from gui.utils.async_tasks import TaskScope
from gui.utils.live_value import LiveValue, OneShotSignal


class SleepTrackerState:
    """Holds tonight's night and the history listing for the tracker screen."""

    def __init__(
        self,
        store: SleepNightStore,
        scope: TaskScope,
        clock: Callable[[], int] = now_millis,
        on_error: Optional[Callable[[BaseException], None]] = None,
    ):
        self.store = store
        self._scope = scope
        self._clock = clock
        self._on_error = on_error
        self._subscription: Optional[Subscription] = None
        self._subscription_lock = threading.Lock()

        self.tonight: LiveValue[Optional[SleepNight]] = LiveValue(None)
        self.nights: LiveValue[List[SleepNight]] = LiveValue([])

        self.nights_text = self.nights.map(format_nights)
        self.start_enabled = self.tonight.map(lambda night: night is None)
        self.stop_enabled = self.tonight.map(lambda night: night is not None)
        self.clear_enabled = self.nights.map(lambda nights: bool(nights))

        self.navigate_to_sleep_quality: OneShotSignal[int] = OneShotSignal(
            "navigate_to_sleep_quality"
        )
        self.show_snackbar_event: OneShotSignal[bool] = OneShotSignal(
            "show_snackbar_event"
        )

        self._scope.launch(self._subscribe, on_error=self._report)
        self.initialize()

    # ── derived flags ───────────────────────────────────────────────

    @property
    def can_start(self) -> bool:
        return self.start_enabled.value

    @property
    def can_stop(self) -> bool:
        return self.stop_enabled.value

    @property
    def can_clear(self) -> bool:
        return self.clear_enabled.value

    # ── live listing ────────────────────────────────────────────────

    def _subscribe(self) -> None:
        subscription = self.store.observe_all(self._on_nights_changed)
        with self._subscription_lock:
            self._subscription = subscription
        # close() may have run while subscribing.
        if self._scope.cancelled:
            self._drop_subscription()

    def _on_nights_changed(self, nights: List[SleepNight]) -> None:
        # Called on whichever thread wrote to the store.
        self._scope.post(lambda: self.nights.set(nights))

    # ── actions ─────────────────────────────────────────────────────

    def initialize(self) -> Future:
        """Re-read the newest night and adopt it as tonight if still open."""
        return self._scope.launch(
            self._get_tonight_from_database,
            on_done=self.tonight.set,
            on_error=self._report,
        )

    def _get_tonight_from_database(self) -> Optional[SleepNight]:
        night = self.store.get_tonight()
        if night is None or not night.is_open:
            return None
        return night

    def start_tracking(self) -> Future:
        current = self.tonight.value
        if current is not None:
            raise SessionAlreadyOpenError(current.night_id)

        new_night = SleepNight(start_time_milli=self._clock())

        def work() -> Optional[SleepNight]:
            self.store.insert(new_night)
            return self._get_tonight_from_database()

        return self._scope.launch(work, on_done=self.tonight.set, on_error=self._report)

    def stop_tracking(self) -> Optional[Future]:
        """Close tonight's night and ask the screen to collect a rating.

        Does nothing when no night is open.
        """
        old_night = self.tonight.value
        if old_night is None or not old_night.is_open:
            return None

        closed = old_night.model_copy(
            update={
                "end_time_milli": max(self._clock(), old_night.start_time_milli + 1)
            }
        )

        def work() -> SleepNight:
            if not self.store.update(closed):
                raise NightNotFoundError(closed.night_id)
            return closed

        def done(night: SleepNight) -> None:
            self.tonight.set(night)
            self.navigate_to_sleep_quality.fire(night.night_id)

        return self._scope.launch(work, on_done=done, on_error=self._report)

    def on_clear(self) -> Future:
        def done(_: None) -> None:
            self.tonight.set(None)
            self.show_snackbar_event.fire(True)

        return self._scope.launch(self.store.clear, on_done=done, on_error=self._report)

    def set_quality(self, night_id: int, quality: int) -> Future:
        """Store the rating for a stopped night, then re-check tonight."""
        if not MIN_QUALITY <= quality <= MAX_QUALITY:
            raise InvalidQualityError(
                f"quality must be between {MIN_QUALITY} and {MAX_QUALITY}, got {quality}"
            )

        def work() -> Optional[SleepNight]:
            night = self.store.get(night_id)
            if night is None:
                raise NightNotFoundError(night_id)
            if night.is_open:
                raise NightNotRateableError(night_id, "still being tracked")
            if night.is_rated:
                raise NightNotRateableError(night_id, "already rated")
            night.sleep_quality = quality
            if not self.store.update(night):
                raise NightNotFoundError(night_id)
            return self._get_tonight_from_database()

        return self._scope.launch(work, on_done=self.tonight.set, on_error=self._report)

    # ── signal acknowledgement ──────────────────────────────────────

    def done_navigating(self) -> None:
        self.navigate_to_sleep_quality.acknowledge()

    def done_showing_snackbar(self) -> None:
        self.show_snackbar_event.acknowledge()

    # ── teardown ────────────────────────────────────────────────────

    def close(self) -> None:
        """Cancel outstanding work and stop listening to the store."""
        self._scope.cancel()
        self._drop_subscription()

    def _drop_subscription(self) -> None:
        with self._subscription_lock:
            subscription, self._subscription = self._subscription, None
        if subscription is not None:
            subscription.unsubscribe()

    def _report(self, exc: BaseException) -> None:
        # TaskScope already logged the failure.
        if self._on_error is not None:
            self._on_error(exc)
