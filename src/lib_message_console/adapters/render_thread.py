"""Thread-based scheduler serializing document work on one rendering thread.

Purpose
-------
Give producer threads a way to run document mutations on a single consumer
thread, either waiting for the result (sink flushes, limiter swaps) or
fire-and-forget (viewport scrolling).

Contents
--------
* :class:`RenderThread` - background worker implementation of :class:`SchedulerPort`.
* :class:`InlineScheduler` - runs every task in the calling thread; for
  single-threaded hosts and tests.

System Role
-----------
The queue is the only serialization point: no lock guards the document, so
producers never contend with the rendering thread for one. Tasks posted from
the rendering thread itself run inline to avoid waiting on ourselves.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from concurrent.futures import CancelledError
from typing import Any, Callable

from lib_message_console.application.ports.scheduler import ScheduledTask, SchedulerPort


LOGGER = logging.getLogger(__name__)


class RenderThread(SchedulerPort):
    """Execute scheduled tasks on a dedicated background thread.

    Examples
    --------
    >>> render = RenderThread()
    >>> render.start()
    >>> render.invoke_and_wait(ScheduledTask(lambda: "done"))
    'done'
    >>> render.stop(drain=True)
    """

    def __init__(
        self,
        *,
        name: str = "message-console-render",
        stop_timeout: float | None = 5.0,
        diagnostic: Callable[[str, dict[str, Any]], None] | None = None,
    ) -> None:
        """Create the scheduler; call :meth:`start` before posting tasks.

        Parameters
        ----------
        name:
            Thread name, visible in debuggers and log records.
        stop_timeout:
            Default drain deadline (seconds) applied when :meth:`stop` is
            called without an explicit ``timeout``. ``None`` waits forever.
        diagnostic:
            Optional ``(name, payload)`` callback informed about failing
            fire-and-forget tasks and shutdown timeouts.
        """
        self._name = name
        self._queue: queue.Queue[ScheduledTask | None] = queue.Queue()
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        # Guards the running check plus enqueue against a concurrent stop signal.
        self._post_lock = threading.Lock()
        self._drop_pending = False
        self._drain_event = threading.Event()
        self._drain_event.set()
        self._stop_timeout = stop_timeout
        self._diagnostic = diagnostic
        self._failed_tasks = 0

    @property
    def running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    @property
    def failed_tasks(self) -> int:
        """Number of fire-and-forget tasks that raised."""

        return self._failed_tasks

    def start(self) -> None:
        """Start the rendering thread if it is not already running."""
        if self.running:
            return
        self._stop_event.clear()
        self._drop_pending = False
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()

    def stop(self, *, drain: bool = True, timeout: float | None = None) -> None:
        """Stop the rendering thread, optionally running queued tasks first.

        Parameters
        ----------
        drain:
            When ``True`` queued tasks run before the thread exits. When
            ``False`` they are cancelled; producers waiting on them receive
            :class:`concurrent.futures.CancelledError`.
        timeout:
            Per-call override for the drain deadline.

        Raises
        ------
        RuntimeError
            When called from the rendering thread or when the thread does not
            exit before the deadline.
        """
        thread = self._thread
        if thread is None:
            return
        if threading.current_thread() is thread:
            raise RuntimeError("RenderThread.stop() cannot be called from the rendering thread")

        effective_timeout = timeout if timeout is not None else self._stop_timeout
        deadline = time.monotonic() + effective_timeout if effective_timeout is not None else None

        def remaining_time() -> float | None:
            if deadline is None:
                return None
            return max(0.0, deadline - time.monotonic())

        with self._post_lock:
            self._drop_pending = not drain
            self._stop_event.set()
            self._drain_event.clear()
            self._queue.put(None)

        drain_completed = True
        if drain:
            drain_completed = self._drain_event.wait(remaining_time())
        if not drain or not drain_completed:
            self._cancel_pending_tasks()

        thread.join(remaining_time())
        # Tasks that raced the stop signal would otherwise block their producers forever.
        self._cancel_pending_tasks()
        if thread.is_alive():
            self._emit_diagnostic("render_shutdown_timeout", {"timeout": effective_timeout, "drain_completed": drain_completed})
            raise RuntimeError("Render thread failed to stop within the allotted timeout")
        self._thread = None
        self._stop_event.clear()
        self._drop_pending = False

    def is_render_thread(self) -> bool:
        return self._thread is not None and threading.current_thread() is self._thread

    def invoke_and_wait(self, task: ScheduledTask) -> Any:
        """Run ``task`` on the rendering thread and return its result.

        Blocks the caller until the task ran; there is no timeout. Exceptions
        raised by the task are re-raised here.
        """
        task.awaited = True
        if self.is_render_thread():
            task.run()
            return task.future.result()
        self._post(task)
        return task.future.result()

    def invoke_later(self, task: ScheduledTask) -> None:
        """Post ``task`` for asynchronous execution and return immediately."""
        if self.is_render_thread():
            # Still queued: the current task finishes before this one starts.
            self._queue.put(task)
            self._drain_event.clear()
            return
        self._post(task)

    def wait_until_idle(self, timeout: float | None = None) -> bool:
        """Block until every queued task ran or ``timeout`` elapses.

        Returns ``True`` when the queue drained, ``False`` on timeout.
        """

        if self._queue.unfinished_tasks == 0:
            return True
        return self._drain_event.wait(timeout)

    def _post(self, task: ScheduledTask) -> None:
        with self._post_lock:
            if not self.running or self._stop_event.is_set():
                raise RuntimeError(f"Render thread is not running; cannot schedule {task.name!r}")
            self._drain_event.clear()
            self._queue.put(task)

    def _run(self) -> None:
        """Worker loop draining the queue until stopped."""
        while True:
            task = self._queue.get()
            try:
                if task is None:
                    if self._stop_event.is_set():
                        break
                    continue
                if self._drop_pending:
                    task.future.cancel()
                    continue
                task.run()
                if not task.awaited:
                    self._report_unawaited_failure(task)
            finally:
                self._queue.task_done()
                if self._queue.unfinished_tasks == 0:
                    self._drain_event.set()

            if self._stop_event.is_set() and self._queue.empty():
                break
        self._drain_event.set()

    def _report_unawaited_failure(self, task: ScheduledTask) -> None:
        """Log failures nobody waits for without tearing down the thread."""
        try:
            exc = task.future.exception(timeout=0)
        except CancelledError:
            return
        if exc is None:
            return
        self._failed_tasks += 1
        LOGGER.error("Scheduled task %r raised an exception; continuing", task.name, exc_info=exc)
        self._emit_diagnostic("render_task_error", {"task": task.name, "exception": repr(exc)})

    def _emit_diagnostic(self, name: str, payload: dict[str, Any]) -> None:
        """Invoke the diagnostic hook while guarding against callback failures."""

        if self._diagnostic is None:
            return
        try:
            self._diagnostic(name, payload)
        except Exception as diagnostic_exc:  # noqa: BLE001
            LOGGER.error("Render diagnostic hook raised while reporting %s", name, exc_info=diagnostic_exc)

    def _cancel_pending_tasks(self) -> None:
        """Cancel tasks left in the queue after a non-draining stop."""

        while True:
            try:
                pending = self._queue.get_nowait()
            except queue.Empty:
                break
            else:
                if pending is not None:
                    pending.future.cancel()
                self._queue.task_done()
        self._drain_event.set()


class InlineScheduler(SchedulerPort):
    """Run every task immediately in the calling thread.

    Only suitable when a single thread produces output and owns the document.
    Failures of fire-and-forget tasks are logged, not raised.
    """

    def invoke_and_wait(self, task: ScheduledTask) -> Any:
        task.awaited = True
        task.run()
        return task.future.result()

    def invoke_later(self, task: ScheduledTask) -> None:
        task.run()
        exc = task.future.exception()
        if exc is not None:
            LOGGER.error("Scheduled task %r raised an exception; continuing", task.name, exc_info=exc)

    def is_render_thread(self) -> bool:
        return True


__all__ = ["InlineScheduler", "RenderThread"]
