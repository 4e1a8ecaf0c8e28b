"""Minimum-rate lookups against LiteAPI."""

from __future__ import annotations

import logging

import httpx

from hotelwatch.config import MonitorSettings
from hotelwatch.errors import (
    MalformedPriceResponseError,
    NoPriceDataError,
    PriceSourceConnectionError,
    PriceSourceStatusError,
)
from hotelwatch.liteapi import build_session
from hotelwatch.liteapi.models import MinRateSearchRequest, MinRatesResponse, Occupancy
from hotelwatch.logic.signals import extract_min_price

logger = logging.getLogger(__name__)

MIN_RATES_PATH = "/hotels/min-rates"


class PriceSourceClient:
    def __init__(
        self,
        settings: MonitorSettings,
        *,
        session: httpx.AsyncClient | None = None,
        api_key: str | None = None,
    ) -> None:
        self.settings = settings
        self._owns_session = session is None
        self._session = session or build_session(settings, api_key)

    async def close(self) -> None:
        if self._owns_session:
            await self._session.aclose()

    def build_request(self, hotel_id: str, check_in: str, check_out: str) -> MinRateSearchRequest:
        return MinRateSearchRequest(
            hotel_ids=[hotel_id],
            checkin=check_in,
            checkout=check_out,
            occupancies=[Occupancy(adults=self.settings.adults, children=[])],
            currency=self.settings.currency,
            guest_nationality=self.settings.guest_nationality,
            timeout=int(self.settings.request_timeout),
        )

    async def fetch_min_rates(self, hotel_id: str, check_in: str, check_out: str) -> MinRatesResponse:
        request = self.build_request(hotel_id, check_in, check_out)
        logger.debug("Requesting min rates for %s (%s to %s)", hotel_id, check_in, check_out)
        try:
            response = await self._session.post(
                MIN_RATES_PATH,
                json=request.to_payload(),
                headers={"content-type": "application/json"},
            )
        except httpx.HTTPError as exc:
            raise PriceSourceConnectionError(hotel_id, f"failed to send request: {exc!r}") from exc
        if not response.is_success:
            raise PriceSourceStatusError(hotel_id, response.status_code)
        try:
            return MinRatesResponse.model_validate(response.json())
        except ValueError as exc:
            raise MalformedPriceResponseError(hotel_id, f"failed to parse response: {exc}") from exc

    async def get_min_price(self, hotel_id: str, check_in: str, check_out: str) -> float:
        """Lowest nightly rate for the stay; raises ``NoPriceDataError`` when there is none."""
        rates = await self.fetch_min_rates(hotel_id, check_in, check_out)
        min_price = extract_min_price(rates.data)
        if min_price is None:
            raise NoPriceDataError(hotel_id)
        return min_price
