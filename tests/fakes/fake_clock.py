"""Manual clock for driving timers without wall-clock waits."""

from __future__ import annotations

import asyncio


class ManualClock:
    """Callable clock plus an async ``sleep`` that only wakes on :meth:`advance`."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = float(start)
        self._sleepers: list[tuple[float, asyncio.Future[None]]] = []

    def __call__(self) -> float:
        return self.now

    @property
    def sleepers(self) -> int:
        return sum(1 for _, future in self._sleepers if not future.done())

    async def sleep(self, delay: float) -> None:
        if delay <= 0:
            await asyncio.sleep(0)
            return
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._sleepers.append((self.now + delay, future))
        await future

    async def advance(self, seconds: float) -> None:
        self.now += seconds
        remaining: list[tuple[float, asyncio.Future[None]]] = []
        for deadline, future in self._sleepers:
            if future.done():
                continue
            if deadline <= self.now:
                future.set_result(None)
            else:
                remaining.append((deadline, future))
        self._sleepers = remaining
        await self.settle()

    @staticmethod
    async def settle(rounds: int = 20) -> None:
        for _ in range(rounds):
            await asyncio.sleep(0)
