"""Fixed-interval driver for the price monitor."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Protocol

logger = logging.getLogger(__name__)


class ScanCycle(Protocol):
    def run_scan_cycle(self) -> Awaitable[Any]: ...


class Scheduler:
    """Runs ``monitor.run_scan_cycle()`` once per interval on a background task.

    Cycles are awaited inline, so two never overlap. When a cycle outlasts one
    or more ticks, the missed ticks are dropped and the schedule realigns to
    the next future tick.
    """

    def __init__(self, monitor: ScanCycle, *, interval: float = 60.0, run_immediately: bool = False) -> None:
        if interval <= 0:
            raise ValueError("interval must be greater than 0")
        self.monitor = monitor
        self.interval = interval
        self.run_immediately = run_immediately
        self.cycles_run = 0
        self.ticks_skipped = 0
        self._task: asyncio.Task | None = None
        self._stopping: asyncio.Event | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if self.running:
            raise RuntimeError("scheduler already running")
        self._stopping = asyncio.Event()
        self._task = asyncio.get_running_loop().create_task(self._run(), name="price-monitor")
        logger.info("Price monitor started (interval %.0fs)", self.interval)
        return self._task

    async def stop(self) -> None:
        """Stop ticking; an in-flight cycle is allowed to finish."""
        if self._task is None:
            return
        assert self._stopping is not None
        self._stopping.set()
        await self._task
        self._task = None
        logger.info("Price monitor stopped after %s cycles", self.cycles_run)

    async def _run(self) -> None:
        assert self._stopping is not None
        loop = asyncio.get_running_loop()
        next_tick = loop.time() if self.run_immediately else loop.time() + self.interval
        while not self._stopping.is_set():
            delay = max(0.0, next_tick - loop.time())
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=delay)
            except asyncio.TimeoutError:
                pass
            else:
                return
            await self._run_cycle()
            next_tick += self.interval
            now = loop.time()
            if next_tick <= now:
                missed = int((now - next_tick) // self.interval) + 1
                self.ticks_skipped += missed
                next_tick += missed * self.interval
                logger.warning("Scan cycle overran the interval; skipped %s tick(s)", missed)

    async def _run_cycle(self) -> None:
        try:
            await self.monitor.run_scan_cycle()
        except Exception:
            logger.exception("Scan cycle failed; retrying on next tick")
        finally:
            self.cycles_run += 1
