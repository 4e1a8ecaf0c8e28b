"""Hotel name resolution and city hotel search against LiteAPI static data."""

from __future__ import annotations

import logging

import httpx

from hotelwatch.config import MonitorSettings
from hotelwatch.errors import HotelSearchError, NameResolutionError
from hotelwatch.liteapi import build_session
from hotelwatch.liteapi.models import HotelDetailsResponse, HotelsResponse, HotelSummary

logger = logging.getLogger(__name__)

HOTEL_DETAILS_PATH = "/data/hotel"
HOTELS_PATH = "/data/hotels"
PLACEHOLDER_HOTEL_NAME = "not identified hotel"


class HotelInfoClient:
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

    async def lookup(self, hotel_id: str) -> str:
        try:
            response = await self._session.get(HOTEL_DETAILS_PATH, params={"hotelId": hotel_id})
        except httpx.HTTPError as exc:
            raise NameResolutionError(hotel_id, f"failed to get hotel details: {exc!r}") from exc
        if not response.is_success:
            raise NameResolutionError(hotel_id, f"upstream returned status {response.status_code}")
        try:
            details = HotelDetailsResponse.model_validate(response.json())
        except ValueError as exc:
            raise NameResolutionError(hotel_id, f"failed to parse response: {exc}") from exc
        if details.data is None or not details.data.name:
            raise NameResolutionError(hotel_id, "response has no hotel name")
        return details.data.name

    async def lookup_or_placeholder(self, hotel_id: str) -> str:
        try:
            return await self.lookup(hotel_id)
        except NameResolutionError as exc:
            logger.info("Using placeholder name: %s", exc)
            return PLACEHOLDER_HOTEL_NAME

    async def search_hotels(
        self, country_code: str, city_name: str, *, offset: int = 0, limit: int = 20
    ) -> list[HotelSummary]:
        """Hotels listed for a city, tagged with the requested country code."""
        params = {"countryCode": country_code, "cityName": city_name, "offset": offset, "limit": limit}
        try:
            response = await self._session.get(HOTELS_PATH, params=params)
        except httpx.HTTPError as exc:
            raise HotelSearchError(f"failed to fetch hotels: {exc!r}") from exc
        if not response.is_success:
            raise HotelSearchError(f"upstream returned status {response.status_code}")
        try:
            hotels = HotelsResponse.model_validate(response.json())
        except ValueError as exc:
            raise HotelSearchError(f"failed to parse response: {exc}") from exc
        return [hotel.model_copy(update={"country_code": country_code}) for hotel in hotels.data]
