from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Cancellable quiescence timer.

    Each ``call`` restarts the countdown; the callback runs once, with the most
    recent arguments, after ``delay`` seconds without a new call. A callback
    that has already started is left to finish.
    """

    def __init__(self, delay: float, callback: Callable[..., Any | Awaitable[Any]]) -> None:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self.delay = delay
        self.callback = callback
        self._timer: asyncio.Task | None = None
        self._pending_args: tuple[Any, ...] | None = None
        # Strong references to timers whose callback may still be running
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def call(self, *args: Any) -> None:
        """Schedule the callback; must be called from inside a running event loop."""
        self.cancel()
        self._pending_args = args
        self._timer = asyncio.get_running_loop().create_task(self._wait_then_fire())
        self._tasks.add(self._timer)
        self._timer.add_done_callback(self._tasks.discard)

    def cancel(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None
        self._pending_args = None

    async def flush(self) -> None:
        """Fire a pending call immediately instead of waiting for the delay."""
        if not self.pending or self._pending_args is None:
            return
        args = self._pending_args
        self.cancel()
        await self._fire(args)

    async def _wait_then_fire(self) -> None:
        await asyncio.sleep(self.delay)
        args = self._pending_args
        # Detach before firing so a new call() starts a fresh timer
        # instead of cancelling this in-flight callback.
        self._timer = None
        self._pending_args = None
        if args is not None:
            await self._fire(args)

    async def _fire(self, args: tuple[Any, ...]) -> None:
        try:
            result = self.callback(*args)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Debounced callback failed")
