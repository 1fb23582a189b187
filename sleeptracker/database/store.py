"""Sleep night store.

Wraps the repository helpers with one short-lived session per call and
publishes the full, newest-first listing to subscribers after every write
that changed the table.

Every method may raise StorageError when the database fails. Lookups that
find nothing return None.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from sleeptracker.errors import StorageError
from sleeptracker.models.night import SleepNight
from sleeptracker.utils.logger import get_logger

from . import repository

logger = get_logger(__name__)

NightsListener = Callable[[List[SleepNight]], None]


class Subscription:
    """Handle returned by observe_all; call unsubscribe() to stop updates."""

    def __init__(self, store: "SleepNightStore", listener: NightsListener):
        self._store = store
        self.listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._store._remove(self)


class SleepNightStore:
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory
        self._subscriptions: List[Subscription] = []
        self._lock = threading.RLock()

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Sleep store %s failed: %s", action, exc)
            raise StorageError(f"Could not {action}: {exc}") from exc
        finally:
            db.close()

    # ── writes ──────────────────────────────────────────────────────

    def insert(self, night: SleepNight) -> None:
        """Persist a new night. night.night_id is ignored."""
        with self._session("insert night") as db:
            record = repository.insert_night(db, night)
            logger.debug("Inserted night %s", record.night_id)
        self._publish()

    def update(self, night: SleepNight) -> bool:
        """Overwrite the stored night with the same id.

        Returns False, without notifying subscribers, when the id is unknown.
        """
        with self._session("update night") as db:
            found = repository.update_night(db, night)
        if not found:
            logger.warning("Update skipped: night %s not found", night.night_id)
            return False
        self._publish()
        return True

    def clear(self) -> None:
        """Delete every night. Irreversible."""
        with self._session("clear nights") as db:
            deleted = repository.delete_all_nights(db)
        logger.info("Cleared %d nights", deleted)
        self._publish()

    # ── reads ───────────────────────────────────────────────────────

    def get(self, night_id: int) -> Optional[SleepNight]:
        with self._session("get night") as db:
            record = repository.get_night(db, night_id)
            return SleepNight.model_validate(record) if record else None

    def get_tonight(self) -> Optional[SleepNight]:
        """Return the most recently created night, open or not."""
        with self._session("get latest night") as db:
            record = repository.get_latest_night(db)
            return SleepNight.model_validate(record) if record else None

    def get_all_nights(self) -> List[SleepNight]:
        with self._session("list nights") as db:
            return [SleepNight.model_validate(r) for r in repository.get_all_nights(db)]

    # ── live listing ────────────────────────────────────────────────

    def observe_all(self, listener: NightsListener) -> Subscription:
        """Subscribe to the newest-first listing of all nights.

        The listener is called right away with the current listing, then
        again after each write, on the thread that performed the write.
        """
        subscription = Subscription(self, listener)
        with self._lock:
            self._subscriptions.append(subscription)
            self._deliver(subscription, self.get_all_nights())
        return subscription

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    def _publish(self) -> None:
        with self._lock:
            if not self._subscriptions:
                return
            try:
                nights = self.get_all_nights()
            except StorageError:
                # The write is already committed; subscribers catch up on the next one.
                logger.warning("Could not refresh nights listing after write")
                return
            for subscription in list(self._subscriptions):
                self._deliver(subscription, list(nights))

    @staticmethod
    def _deliver(subscription: Subscription, nights: List[SleepNight]) -> None:
        if not subscription.active:
            return
        try:
            subscription.listener(nights)
        except Exception:
            logger.exception("Nights listener %r raised", subscription.listener)
