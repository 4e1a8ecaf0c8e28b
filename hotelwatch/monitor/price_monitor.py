"""One scan cycle over every tracked favorite."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Protocol, Sequence

from hotelwatch.config import MonitorSettings
from hotelwatch.errors import ListFetchError, NameResolutionError, NoPriceDataError, PriceLookupError
from hotelwatch.liteapi.hotel_details import PLACEHOLDER_HOTEL_NAME
from hotelwatch.liteapi.models import PriceQuote
from hotelwatch.logic.signals import should_alert
from hotelwatch.monitor.alerts import AlertEvent, AlertSink, LogAlertSink
from hotelwatch.store.models import Favorite
from hotelwatch.utils.dates import LookupWindow, now_in_tz, stay_window

logger = logging.getLogger(__name__)


class FavoriteSource(Protocol):
    def list_all(self) -> list[Favorite]: ...


class PriceSource(Protocol):
    async def get_min_price(self, hotel_id: str, check_in: str, check_out: str) -> float: ...


class HotelNames(Protocol):
    async def lookup(self, hotel_id: str) -> str: ...


@dataclass(slots=True)
class ScanReport:
    started_at: datetime
    window: LookupWindow
    favorites: int = 0
    quotes: list[PriceQuote] = field(default_factory=list)
    alerts: list[AlertEvent] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    aborted: bool = False


class PriceMonitor:
    def __init__(
        self,
        repository: FavoriteSource,
        price_client: PriceSource,
        hotel_client: HotelNames,
        settings: MonitorSettings,
        *,
        sinks: Sequence[AlertSink] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.repository = repository
        self.price_client = price_client
        self.hotel_client = hotel_client
        self.settings = settings
        self.sinks = list(sinks) if sinks is not None else [LogAlertSink()]
        self._clock = clock or (lambda: now_in_tz(settings.timezone))

    async def run_scan_cycle(self) -> ScanReport:
        now = self._clock()
        window = stay_window(
            now,
            lookahead_days=self.settings.lookahead_days,
            stay_nights=self.settings.stay_nights,
        )
        report = ScanReport(started_at=now, window=window)
        try:
            favorites = await asyncio.get_running_loop().run_in_executor(None, self.repository.list_all)
        except ListFetchError as exc:
            logger.error("Scan cycle aborted: %s", exc)
            report.aborted = True
            return report

        report.favorites = len(favorites)
        logger.info(
            "Checking %s favorites for stays %s to %s",
            len(favorites),
            window.check_in_iso,
            window.check_out_iso,
        )
        for favorite in favorites:
            try:
                await self._process(favorite, window, report)
            except Exception:
                logger.exception("Unexpected failure checking hotel %s", favorite.hotel_id)
                report.skipped.append(favorite.hotel_id)
        return report

    async def _process(self, favorite: Favorite, window: LookupWindow, report: ScanReport) -> None:
        logger.info(
            "Checking price for hotel %s (user %s, target %.2f)",
            favorite.hotel_id,
            favorite.user_id,
            favorite.target_price,
        )
        hotel_name = await self._resolve_name(favorite.hotel_id)
        try:
            min_price = await self.price_client.get_min_price(
                favorite.hotel_id, window.check_in_iso, window.check_out_iso
            )
        except NoPriceDataError:
            logger.info("No price data found for hotel %s", favorite.hotel_id)
            report.skipped.append(favorite.hotel_id)
            return
        except PriceLookupError as exc:
            logger.warning("Error getting price for hotel %s: %s", favorite.hotel_id, exc.reason)
            report.skipped.append(favorite.hotel_id)
            return

        quote = PriceQuote(
            hotel_id=favorite.hotel_id,
            hotel_name=hotel_name,
            min_price=min_price,
            currency=self.settings.currency,
            check_in=window.check_in_iso,
            check_out=window.check_out_iso,
        )
        report.quotes.append(quote)
        logger.info("Found price for %s: %.2f %s", hotel_name, min_price, quote.currency)

        if not should_alert(quote.min_price, favorite.target_price):
            return
        event = AlertEvent(
            user_id=favorite.user_id,
            hotel_id=favorite.hotel_id,
            hotel_name=hotel_name,
            current_price=min_price,
            target_price=favorite.target_price,
            currency=quote.currency,
            triggered_at=self._clock(),
        )
        report.alerts.append(event)
        await self._emit(event)

    async def _resolve_name(self, hotel_id: str) -> str:
        try:
            return await self.hotel_client.lookup(hotel_id)
        except NameResolutionError as exc:
            logger.info("Hotel name unavailable, using placeholder: %s", exc.reason)
            return PLACEHOLDER_HOTEL_NAME
        except Exception:
            logger.warning("Hotel name lookup for %s failed, using placeholder", hotel_id, exc_info=True)
            return PLACEHOLDER_HOTEL_NAME

    async def _emit(self, event: AlertEvent) -> None:
        for sink in self.sinks:
            try:
                await sink.emit(event)
            except Exception:
                logger.exception("Alert sink %s failed for hotel %s", type(sink).__name__, event.hotel_id)
