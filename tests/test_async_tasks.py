import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from sleeptracker.errors import ScopeCancelledError
from gui.utils.async_tasks import ForegroundQueue, InlineExecutor, TaskScope, run_async


def test_run_async_executes_immediately():
    assert run_async(lambda a, b=0: a + b, 2, b=3) == 5


def test_inline_executor_captures_result_and_exception():
    executor = InlineExecutor()
    assert executor.submit(lambda: 7).result() == 7

    def fail():
        raise KeyError("missing")

    future = executor.submit(fail)
    assert isinstance(future.exception(), KeyError)

    executor.shutdown()
    with pytest.raises(RuntimeError):
        executor.submit(lambda: 1)


def test_foreground_queue_runs_callbacks_in_order_on_caller_thread():
    foreground = ForegroundQueue()
    calls = []
    foreground(lambda: calls.append(("a", threading.get_ident())))
    foreground(lambda: calls.append(("b", threading.get_ident())))

    assert foreground.drain() == 2
    assert [name for name, _ in calls] == ["a", "b"]
    assert all(ident == threading.get_ident() for _, ident in calls)
    assert foreground.empty()


def test_work_runs_off_the_foreground_thread():
    foreground = ForegroundQueue()
    main = threading.get_ident()
    seen = {}

    with ThreadPoolExecutor(max_workers=1) as executor:
        scope = TaskScope(executor, dispatch=foreground)
        future = scope.launch(
            lambda: threading.get_ident(),
            on_done=lambda worker: seen.update(worker=worker, done=threading.get_ident()),
        )
        future.result(timeout=5)

        assert seen == {}
        foreground.drain()

    assert seen["worker"] != main
    assert seen["done"] == main


def test_error_continuation_receives_exception():
    errors = []
    scope = TaskScope(InlineExecutor())

    def fail():
        raise ValueError("boom")

    future = scope.launch(fail, on_done=lambda _: errors.append("done"), on_error=errors.append)

    assert isinstance(future.exception(), ValueError)
    assert len(errors) == 1
    assert isinstance(errors[0], ValueError)


def test_cancel_suppresses_queued_continuations_and_pending_work():
    foreground = ForegroundQueue()
    started = threading.Event()
    release = threading.Event()
    done = []

    def block():
        started.set()
        return release.wait(5)

    with ThreadPoolExecutor(max_workers=1) as executor:
        scope = TaskScope(executor, dispatch=foreground)
        first = scope.launch(block, on_done=done.append)
        second = scope.launch(lambda: "never", on_done=done.append)
        assert started.wait(5)
        assert scope.pending() == 2

        scope.cancel()
        release.set()
        first.result(timeout=5)

        assert second.cancelled()
        foreground.drain()

    assert done == []
    assert scope.cancelled
    with pytest.raises(ScopeCancelledError):
        scope.launch(lambda: None)


def test_wait_blocks_until_outstanding_work_finishes():
    results = []
    with ThreadPoolExecutor(max_workers=2) as executor:
        scope = TaskScope(executor, dispatch=run_async)
        for i in range(4):
            scope.launch(lambda i=i: i * i, on_done=results.append)
        scope.wait(timeout=5)

    assert sorted(results) == [0, 1, 4, 9]
