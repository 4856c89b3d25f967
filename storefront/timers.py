"""Cancellable one-shot timers driven by an injectable sleep function."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

LOGGER = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[Any]]
TimerCallback = Callable[[], Awaitable[Any]]


class TaskTimers:
    """Own delayed callbacks as asyncio tasks so they can be awaited or cancelled."""

    def __init__(self, *, sleep: SleepFn | None = None) -> None:
        self._sleep: SleepFn = sleep or asyncio.sleep
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> int:
        return sum(1 for task in self._tasks if not task.done())

    def call_later(self, delay: float, callback: TimerCallback, *, name: str) -> asyncio.Task[Any]:
        async def _fire() -> Any:
            await self._sleep(max(float(delay), 0.0))
            return await callback()

        task = asyncio.create_task(_fire(), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            LOGGER.debug("timer.cancelled", extra={"timer": task.get_name()})
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.error(
                "timer.callback_failed",
                extra={"timer": task.get_name(), "error": str(exc)},
                exc_info=exc,
            )

    async def join(self) -> None:
        """Wait until every scheduled timer has fired or been cancelled."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def cancel_all(self) -> None:
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()


__all__ = ["SleepFn", "TaskTimers", "TimerCallback"]
