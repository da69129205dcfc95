"""Debouncer — runs a trigger once input has been quiet for a fixed delay."""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Callable

from fieldsuggest.models.options import DEFAULT_DEBOUNCE_DELAY


class Debouncer:
    """Coalesces rapid schedule() calls into one trigger per quiet period.

    Each schedule() replaces the armed timer. A trigger returning an awaitable
    runs as a task; cancel() disarms the timer but never stops a trigger that
    has already started.
    """

    def __init__(self, delay: float = DEFAULT_DEBOUNCE_DELAY) -> None:
        self.delay = delay
        self._handle: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, trigger: Callable[[], Any]) -> None:
        """Arm the timer for ``trigger``, replacing any pending one."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, trigger)

    def cancel(self) -> None:
        """Disarm the pending timer, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, trigger: Callable[[], Any]) -> None:
        self._handle = None
        result = trigger()
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for triggers that have already started."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
