"""Debounced input stage for rapidly-changing text (search boxes).

Every push restarts the quiet-period timer; only the last value of a
burst is emitted, exactly once, `delay_seconds` after the last push.

The emit callback may be a plain function or a coroutine function. A
coroutine result is scheduled as a task owned by the stage, so close()
can cancel it together with any pending timer.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

import structlog

logger = structlog.get_logger()

V = TypeVar("V")

EmitCallback = Callable[[V], Awaitable[object] | object]


class DebouncedInput(Generic[V]):
    """Single-shot restartable timer around an emit callback.

    Must be used from within a running event loop.

    Attributes:
        delay_seconds: Quiet period before a value is emitted.
    """

    def __init__(
        self,
        on_emit: EmitCallback[V],
        delay_seconds: float = 0.5,
    ) -> None:
        if delay_seconds < 0:
            raise ValueError(f"delay_seconds must be >= 0, got {delay_seconds}")
        self.delay_seconds = delay_seconds
        self._on_emit = on_emit
        self._handle: asyncio.TimerHandle | None = None
        self._pending_value: V | None = None
        self._tasks: set[asyncio.Task[object]] = set()
        self._closed = False

    @property
    def pending(self) -> bool:
        """True while a value is waiting for its quiet period to elapse."""
        return self._handle is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, value: V) -> None:
        """Record a raw value and restart the quiet period.

        Pushes after close() are ignored.
        """
        if self._closed:
            logger.debug("debounce_push_after_close")
            return
        if self._handle is not None:
            self._handle.cancel()
        self._pending_value = value
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay_seconds, self._fire)

    def flush(self) -> bool:
        """Emit the pending value now instead of waiting.

        Returns:
            True if a value was emitted.
        """
        if self._handle is None:
            return False
        self._handle.cancel()
        self._fire()
        return True

    def cancel(self) -> None:
        """Drop the pending value without emitting it."""
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._pending_value = None

    def close(self) -> None:
        """Cancel the timer and any emission still running.

        After close() no value ever reaches the callback.
        """
        self._closed = True
        self.cancel()
        for task in list(self._tasks):
            task.cancel()

    async def wait_idle(self) -> None:
        """Wait for emissions already started to finish."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def _fire(self) -> None:
        self._handle = None
        if self._closed:
            return
        value = self._pending_value
        self._pending_value = None
        outcome = self._on_emit(value)  # type: ignore[arg-type]
        if inspect.isawaitable(outcome):
            task = asyncio.ensure_future(outcome)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
