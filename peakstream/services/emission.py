"""Periodic emission of readings for one session"""
import asyncio
import time
from typing import Awaitable, Callable, Optional

from peakstream.config.logger import logger
from peakstream.models.schemas import Reading, SensorSeries


def now_ms() -> int:
    """Current epoch time in milliseconds"""
    return int(time.time() * 1000)


def next_reading(series: SensorSeries, cursor: int, timestamp: int) -> tuple[Reading, int]:
    """Build the reading at `cursor` and return it with the wrapped next cursor"""
    reading = Reading(
        timestamp=timestamp,
        value=series.readings[cursor],
        zscore=series.z_scores[cursor],
    )
    return reading, (cursor + 1) % len(series.readings)


class PeriodicTask:
    """
    Cancellable asyncio task calling `tick` every `interval` seconds.
    The first call happens one interval after `start()`.
    """

    def __init__(self, name: str, interval: float, tick: Callable[[], Awaitable[object]]):
        self.name = name
        self.interval = interval
        self._tick = tick
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)

    def cancel(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self):
        # Ticks are due at fixed deadlines on the loop clock, however long a send takes
        loop = asyncio.get_running_loop()
        next_at = loop.time()
        while True:
            next_at += self.interval
            await asyncio.sleep(max(0.0, next_at - loop.time()))
            try:
                await self._tick()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                # One failing session must not stop its own timer nor touch the others
                logger.error(f"Emission failed for {self.name}: {type(e).__name__}: {e}", exc_info=True)
