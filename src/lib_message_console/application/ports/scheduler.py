"""Port describing how work is marshalled onto the rendering thread.

Purpose
-------
Make rendering-thread dispatch an explicit seam: a :class:`ScheduledTask`
(a callable plus the future carrying its outcome) is posted to a
:class:`SchedulerPort`, either synchronously or fire-and-forget.

Contents
--------
* :class:`ScheduledTask` - callable with an attached :class:`~concurrent.futures.Future`.
* :class:`SchedulerPort` - runtime-checkable protocol implemented by
  :class:`~lib_message_console.adapters.render_thread.RenderThread` and
  :class:`~lib_message_console.adapters.render_thread.InlineScheduler`.
"""

from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol, runtime_checkable


@dataclass(slots=True)
class ScheduledTask:
    """Unit of work executed on the rendering thread.

    Examples
    --------
    >>> task = ScheduledTask(lambda: 41 + 1, name="answer")
    >>> task.run()
    >>> task.future.result()
    42
    """

    action: Callable[[], Any]
    name: str = "task"
    awaited: bool = False
    future: Future = field(default_factory=Future)

    def run(self) -> None:
        """Execute ``action`` and record its outcome on :attr:`future`."""
        if not self.future.set_running_or_notify_cancel():
            return
        try:
            result = self.action()
        except Exception as exc:  # noqa: BLE001 - outcome is carried by the future
            self.future.set_exception(exc)
        else:
            self.future.set_result(result)


@runtime_checkable
class SchedulerPort(Protocol):
    """Serialize document and viewport work on a single rendering thread."""

    def invoke_and_wait(self, task: ScheduledTask) -> Any:
        """Run ``task`` on the rendering thread and block until it finished.

        Returns the task result or re-raises its exception.
        """

    def invoke_later(self, task: ScheduledTask) -> None:
        """Post ``task`` without waiting for it."""

    def is_render_thread(self) -> bool:
        """Return ``True`` when called from the rendering thread."""


__all__ = ["ScheduledTask", "SchedulerPort"]
