"""
Tick driver: delivers one tick per interval on the asyncio event loop.

Control calls and ticks share the loop thread, so transitions never race.
"""

import asyncio
import logging
from collections.abc import Callable

from studyflow.domain.constants import TICK_INTERVAL

logger = logging.getLogger(__name__)


class Ticker:
    """
    Repeating one-per-interval callback.

    Each wake-up delivers exactly one tick. If the loop falls behind, the
    missed ticks are dropped rather than replayed.
    """

    def __init__(self, callback: Callable[[], None], interval: float = TICK_INTERVAL):
        self.callback = callback
        self.interval = interval
        self.ticks = 0
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, max_ticks: int | None = None) -> asyncio.Task:
        if self.running:
            raise RuntimeError("Ticker already running")
        self._task = asyncio.get_running_loop().create_task(self._run(max_ticks))
        return self._task

    async def _run(self, max_ticks: int | None) -> None:
        delivered = 0
        while max_ticks is None or delivered < max_ticks:
            await asyncio.sleep(self.interval)
            self.callback()
            delivered += 1
            self.ticks += 1

    async def run_for(self, n: int) -> None:
        """Deliver `n` ticks and return."""
        await self.start(max_ticks=n)

    async def stop(self) -> None:
        """Cancel the driver and wait for it to finish."""
        task = self._task
        self._task = None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug(f"Ticker stopped after {self.ticks} ticks")
