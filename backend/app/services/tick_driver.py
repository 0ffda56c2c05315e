"""Tick Driver — fixed-cadence asyncio loop that invokes the controller tick.

Invariants:
    - Tick deadlines advance by whole intervals on the loop's monotonic clock,
      so a slow tick never shifts later ticks (no accumulated drift)
    - A tick that overruns skips the missed deadlines instead of bursting
    - A failing tick is logged and never ends the loop
    - stop() returns only after the loop task has finished

Design Decisions:
    - asyncio.Event as stop signal, waited with a timeout as the sleep: stop
      takes effect immediately instead of after the current sleep
    - Owned by the FastAPI lifespan: started after init_db, stopped before close_db
"""

import asyncio
import logging
import math
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class TickDriver:
    """Runs `tick` every `interval` seconds until stopped."""

    def __init__(
        self, tick: Callable[[], Awaitable[object]], interval: float = 1.0,
    ):
        if interval <= 0:
            raise ValueError("Tick interval must be positive")
        self._tick = tick
        self._interval = interval
        self._stop = asyncio.Event()
        self._task: asyncio.Task | None = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if self.running:
            raise RuntimeError("Tick driver already running")
        self._stop.clear()
        self._task = asyncio.create_task(self.run(), name="tick-driver")
        return self._task

    async def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._task is None:
            return
        try:
            await asyncio.wait_for(self._task, timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("Tick driver did not stop in time, cancelled")
        finally:
            self._task = None

    async def run(self) -> None:
        loop = asyncio.get_running_loop()
        next_at = loop.time()
        logger.info(f"Tick driver started (interval={self._interval}s)")
        while not self._stop.is_set():
            try:
                await self._tick()
            except Exception as exc:
                logger.error(f"Tick failed: {exc}", exc_info=True)
            self.ticks += 1

            next_at += self._interval
            delay = next_at - loop.time()
            if delay < 0:
                skipped = math.floor(-delay / self._interval) + 1
                next_at += skipped * self._interval
                delay = next_at - loop.time()
                logger.warning(f"Tick overran, skipped {skipped} deadline(s)")
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=delay)
            except asyncio.TimeoutError:
                pass
        logger.info("Tick driver stopped")
