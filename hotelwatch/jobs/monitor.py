"""Price monitor process wiring and entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from dataclasses import dataclass
from typing import Sequence

import httpx
from sqlalchemy.engine import Engine

from hotelwatch.config import MonitorSettings
from hotelwatch.db.session import create_engine_from_env
from hotelwatch.errors import ConfigurationError
from hotelwatch.jobs.scheduler import Scheduler
from hotelwatch.liteapi import build_session
from hotelwatch.liteapi.hotel_details import HotelInfoClient
from hotelwatch.liteapi.min_rates import PriceSourceClient
from hotelwatch.monitor.alerts import AlertSink
from hotelwatch.monitor.price_monitor import PriceMonitor, ScanReport
from hotelwatch.store.repository import FavoriteRepository
from hotelwatch.utils.log import configure_logging

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MonitorService:
    monitor: PriceMonitor
    scheduler: Scheduler
    session: httpx.AsyncClient

    @classmethod
    def from_settings(
        cls,
        settings: MonitorSettings,
        *,
        engine: Engine | None = None,
        sinks: Sequence[AlertSink] | None = None,
    ) -> MonitorService:
        session = build_session(settings)
        repository = FavoriteRepository(engine or create_engine_from_env(settings.database_url))
        monitor = PriceMonitor(
            repository,
            PriceSourceClient(settings, session=session),
            HotelInfoClient(settings, session=session),
            settings,
            sinks=sinks,
        )
        scheduler = Scheduler(monitor, interval=settings.interval_seconds)
        return cls(monitor=monitor, scheduler=scheduler, session=session)

    def start(self) -> None:
        self.scheduler.start()

    async def run_once(self) -> ScanReport:
        return await self.monitor.run_scan_cycle()

    async def stop(self) -> None:
        await self.scheduler.stop()
        await self.session.aclose()


async def run_monitor(settings: MonitorSettings, *, once: bool = False) -> None:
    service = MonitorService.from_settings(settings)
    if once:
        try:
            report = await service.run_once()
        finally:
            await service.session.aclose()
        logger.info(
            "Cycle finished: %s favorites, %s quotes, %s alerts, %s skipped",
            report.favorites,
            len(report.quotes),
            len(report.alerts),
            len(report.skipped),
        )
        return

    stop_requested = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_requested.set)
    service.start()
    try:
        await stop_requested.wait()
    finally:
        logger.info("Shutdown requested; waiting for the current cycle")
        await service.stop()


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Watch favorite hotels for price drops.")
    parser.add_argument("--once", action="store_true", help="run a single scan cycle and exit")
    args = parser.parse_args(argv)
    try:
        settings = MonitorSettings.from_env()
        settings.require_api_key()
    except ConfigurationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        sys.exit(1)
    configure_logging(settings.log_level)
    asyncio.run(run_monitor(settings, once=args.once))


if __name__ == "__main__":
    main()
