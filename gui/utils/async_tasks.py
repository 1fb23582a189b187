"""Async helpers.

Storage work runs on a background executor; its result is handed back to
the foreground (UI) thread through a dispatch callable. A TaskScope groups
the work owned by one component so it can all be cancelled together.

For tests, `run_async` dispatches by executing the callable immediately and
`InlineExecutor` runs submitted work on the calling thread.
"""

from __future__ import annotations

import queue
import threading
from concurrent.futures import Executor, Future, wait
from typing import Any, Callable, Optional, Set

from sleeptracker.errors import ScopeCancelledError
from gui.utils.logging import log

Dispatch = Callable[[Callable[[], Any]], Any]


def run_async(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    return fn(*args, **kwargs)


class InlineExecutor(Executor):
    """Executor that runs each submitted callable before submit() returns."""

    def __init__(self):
        self._shutdown = False

    def submit(self, fn, /, *args, **kwargs) -> Future:
        if self._shutdown:
            raise RuntimeError("cannot schedule new futures after shutdown")
        future: Future = Future()
        future.set_running_or_notify_cancel()
        try:
            result = fn(*args, **kwargs)
        except BaseException as exc:
            future.set_exception(exc)
        else:
            future.set_result(result)
        return future

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        self._shutdown = True


class ForegroundQueue:
    """Callbacks posted from worker threads, run later on the UI thread.

    A Tk front-end drains it from an `after` loop; tests call drain()
    directly.
    """

    def __init__(self):
        self._pending: "queue.SimpleQueue[Callable[[], Any]]" = queue.SimpleQueue()

    def __call__(self, callback: Callable[[], Any]) -> None:
        self._pending.put(callback)

    def drain(self) -> int:
        """Run every queued callback on the calling thread; return how many ran."""
        ran = 0
        while True:
            try:
                callback = self._pending.get_nowait()
            except queue.Empty:
                return ran
            callback()
            ran += 1

    def empty(self) -> bool:
        return self._pending.empty()


class TaskScope:
    """Background work owned by a single component.

    launch() submits work to the executor. The worker posts the continuation
    through `dispatch` before the returned future resolves, so once
    future.result() returns the foreground callback is already queued.
    cancel() drops every pending task and suppresses continuations of tasks
    already running.
    """

    def __init__(self, executor: Executor, dispatch: Dispatch = run_async):
        self._executor = executor
        self._dispatch = dispatch
        self._futures: Set[Future] = set()
        self._lock = threading.RLock()
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def launch(
        self,
        work: Callable[[], Any],
        on_done: Optional[Callable[[Any], Any]] = None,
        on_error: Optional[Callable[[BaseException], Any]] = None,
    ) -> Future:
        with self._lock:
            if self._cancelled:
                raise ScopeCancelledError("task scope has been cancelled")
            future = self._executor.submit(self._run, work, on_done, on_error)
            self._futures.add(future)
        future.add_done_callback(self._forget)
        return future

    def _run(self, work, on_done, on_error) -> Any:
        try:
            result = work()
        except BaseException as exc:
            if not self._cancelled:
                log(f"Background task failed: {exc!r}", "ERROR")
                if on_error is not None:
                    self.post(lambda: on_error(exc))
            raise
        if on_done is not None:
            self.post(lambda: on_done(result))
        return result

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._futures.discard(future)

    def post(self, callback: Callable[[], Any]) -> None:
        """Run callback on the foreground unless the scope gets cancelled first."""
        if not self._cancelled:
            self._dispatch(self._guard(callback))

    def _guard(self, continuation: Callable[[], Any]) -> Callable[[], Any]:
        # Cancellation can land between dispatch and the foreground running it.
        def run() -> Any:
            if not self._cancelled:
                return continuation()
            return None

        return run

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
            pending = list(self._futures)
            self._futures.clear()
        for future in pending:
            future.cancel()
        if pending:
            log(f"Cancelled {len(pending)} background task(s)", "DEBUG")

    def pending(self) -> int:
        with self._lock:
            return len(self._futures)

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until every task launched so far has finished."""
        with self._lock:
            outstanding = list(self._futures)
        if outstanding:
            wait(outstanding, timeout=timeout)
