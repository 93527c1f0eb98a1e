from __future__ import annotations

import queue
import threading
import time
from concurrent.futures import CancelledError
from typing import Any

import pytest

from lib_message_console.adapters.render_thread import InlineScheduler, RenderThread
from lib_message_console.application.ports.scheduler import ScheduledTask
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


def test_invoke_and_wait_returns_result_from_render_thread(render_thread: RenderThread) -> None:
    seen: list[str] = []

    def action() -> str:
        seen.append(threading.current_thread().name)
        return "done"

    assert render_thread.invoke_and_wait(ScheduledTask(action)) == "done"
    assert seen == ["message-console-render"]


def test_invoke_and_wait_reraises_task_exception(render_thread: RenderThread) -> None:
    def fail() -> None:
        raise ValueError("bad task")

    with pytest.raises(ValueError, match="bad task"):
        render_thread.invoke_and_wait(ScheduledTask(fail))
    assert render_thread.invoke_and_wait(ScheduledTask(lambda: 1)) == 1


def test_tasks_run_in_submission_order(render_thread: RenderThread) -> None:
    processed: list[int] = []
    for index in range(10):
        render_thread.invoke_later(ScheduledTask(lambda index=index: processed.append(index)))
    assert render_thread.wait_until_idle(timeout=2.0)
    assert processed == list(range(10))


def test_nested_invoke_and_wait_runs_inline(render_thread: RenderThread) -> None:
    def outer() -> str:
        return render_thread.invoke_and_wait(ScheduledTask(lambda: "inner"))

    assert render_thread.invoke_and_wait(ScheduledTask(outer)) == "inner"


def test_invoke_later_from_render_thread_runs_after_current_task(render_thread: RenderThread) -> None:
    order: list[str] = []

    def outer() -> None:
        render_thread.invoke_later(ScheduledTask(lambda: order.append("later")))
        order.append("outer")

    render_thread.invoke_and_wait(ScheduledTask(outer))
    assert render_thread.wait_until_idle(timeout=2.0)
    assert order == ["outer", "later"]


def test_unawaited_failure_is_reported_and_thread_survives() -> None:
    reports: list[tuple[str, dict[str, Any]]] = []
    render = RenderThread(diagnostic=lambda name, payload: reports.append((name, payload)))
    render.start()
    try:

        def fail() -> None:
            raise RuntimeError("scroll failed")

        render.invoke_later(ScheduledTask(fail, name="scroll"))
        assert render.wait_until_idle(timeout=2.0)
        assert render.failed_tasks == 1
        assert reports[0][0] == "render_task_error"
        assert reports[0][1]["task"] == "scroll"
        assert render.invoke_and_wait(ScheduledTask(lambda: "alive")) == "alive"
    finally:
        render.stop()


def test_posting_to_stopped_scheduler_raises() -> None:
    render = RenderThread()
    with pytest.raises(RuntimeError, match="not running"):
        render.invoke_and_wait(ScheduledTask(lambda: None))


def test_stop_drains_pending_tasks() -> None:
    processed: list[int] = []
    render = RenderThread()
    render.start()
    for index in range(5):
        render.invoke_later(ScheduledTask(lambda index=index: processed.append(index)))
    render.stop(drain=True)
    assert processed == list(range(5))
    assert render.running is False


def test_stop_without_drain_cancels_pending_tasks() -> None:
    started = threading.Event()
    release = threading.Event()
    render = RenderThread()
    render.start()

    def blocker() -> None:
        started.set()
        release.wait(timeout=2.0)

    render.invoke_later(ScheduledTask(blocker))
    assert started.wait(timeout=2.0)
    pending = ScheduledTask(lambda: "never")
    render.invoke_later(pending)

    stopper = threading.Thread(target=lambda: render.stop(drain=False, timeout=2.0))
    stopper.start()
    # The worker is still blocked, so cancellation must happen before release.
    deadline = time.monotonic() + 2.0
    while not pending.future.cancelled() and time.monotonic() < deadline:
        time.sleep(0.01)
    release.set()
    stopper.join(timeout=3.0)

    assert pending.future.cancelled()
    with pytest.raises(CancelledError):
        pending.future.result()
    assert render.running is False


class GatedQueue(queue.Queue):
    """Queue whose task puts pause until ``gate`` opens."""

    def __init__(self) -> None:
        super().__init__()
        self.entered = threading.Event()
        self.gate = threading.Event()

    def put(self, item, block=True, timeout=None):  # type: ignore[override]
        if item is not None:
            self.entered.set()
            self.gate.wait(timeout=2.0)
        super().put(item, block, timeout)


def test_stop_racing_a_post_never_strands_the_producer() -> None:
    render = RenderThread()
    gated = GatedQueue()
    render._queue = gated
    render.start()
    results: list[str] = []

    producer = threading.Thread(target=lambda: results.append(render.invoke_and_wait(ScheduledTask(lambda: "ran"))))
    producer.start()
    assert gated.entered.wait(timeout=2.0)

    stopper = threading.Thread(target=lambda: render.stop(drain=True, timeout=2.0))
    stopper.start()
    # Give stop() the chance to run ahead of the pending put.
    time.sleep(0.1)
    gated.gate.set()

    stopper.join(timeout=3.0)
    producer.join(timeout=3.0)
    assert not stopper.is_alive()
    assert not producer.is_alive()
    assert results == ["ran"]
    assert render.running is False


def test_start_is_idempotent_and_restartable() -> None:
    render = RenderThread()
    render.start()
    render.start()
    render.stop()
    render.start()
    try:
        assert render.invoke_and_wait(ScheduledTask(lambda: "again")) == "again"
    finally:
        render.stop()


def test_inline_scheduler_runs_immediately() -> None:
    scheduler = InlineScheduler()
    assert scheduler.is_render_thread() is True
    assert scheduler.invoke_and_wait(ScheduledTask(lambda: 5)) == 5
    calls: list[str] = []
    scheduler.invoke_later(ScheduledTask(lambda: calls.append("now")))
    assert calls == ["now"]


def test_inline_scheduler_logs_unawaited_failure(caplog: pytest.LogCaptureFixture) -> None:
    def fail() -> None:
        raise RuntimeError("ignored")

    InlineScheduler().invoke_later(ScheduledTask(fail, name="best-effort"))
    assert "best-effort" in caplog.text
