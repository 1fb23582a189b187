"""Main GUI application object.

SleepTrackerApp is the single owner of process-wide resources: settings,
the database, the background I/O pool and the queue of foreground
callbacks. Screens get their state holders from it instead of reaching for
globals.
"""

from __future__ import annotations

import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from sleeptracker.config import Settings, get_settings
from sleeptracker.database.engine import SleepDatabase
from sleeptracker.utils.logger import configure_logging, get_logger
from gui.state import SleepTrackerState
from gui.utils.async_tasks import ForegroundQueue, TaskScope

logger = get_logger(__name__)


@dataclass
class SleepTrackerApp:
    settings: Settings = field(default_factory=get_settings)
    executor: Optional[Executor] = None
    foreground: ForegroundQueue = field(default_factory=ForegroundQueue)

    _database: Optional[SleepDatabase] = field(default=None, init=False, repr=False)
    _database_lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _states: List[SleepTrackerState] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        configure_logging(self.settings)
        if self.executor is None:
            self.executor = ThreadPoolExecutor(
                max_workers=max(1, self.settings.io_workers),
                thread_name_prefix="sleep-io",
            )

    @property
    def database(self) -> SleepDatabase:
        """The one database handle, opened on first access."""
        if self._database is None:
            with self._database_lock:
                if self._database is None:
                    self._database = SleepDatabase(self.settings.database_url)
        return self._database

    def create_tracker_state(
        self, on_error: Optional[Callable[[BaseException], None]] = None
    ) -> SleepTrackerState:
        state = SleepTrackerState(
            self.database.store,
            TaskScope(self.executor, dispatch=self.foreground),
            on_error=on_error,
        )
        self._states.append(state)
        return state

    def release_tracker_state(self, state: SleepTrackerState) -> None:
        """Tear down a state holder when its screen goes away."""
        state.close()
        if state in self._states:
            self._states.remove(state)

    def process_events(self) -> int:
        """Run foreground callbacks queued by background work."""
        return self.foreground.drain()

    def shutdown(self) -> None:
        for state in list(self._states):
            self.release_tracker_state(state)
        self.executor.shutdown(wait=True)
        if self._database is not None:
            self._database.dispose()
            self._database = None
        logger.info("Sleep tracker shut down")
