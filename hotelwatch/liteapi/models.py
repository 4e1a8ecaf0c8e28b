"""Request and response schemas for the LiteAPI endpoints."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Occupancy(BaseModel):
    adults: int = 1
    children: list[int] = Field(default_factory=list)


class MinRateSearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    hotel_ids: list[str] = Field(alias="hotelIds")
    checkin: str
    checkout: str
    occupancies: list[Occupancy]
    currency: str
    guest_nationality: str = Field(alias="guestNationality")
    timeout: int | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class MinRateOffer(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    hotel_id: str | None = Field(default=None, alias="hotelId")
    price: float | None = None

    @field_validator("hotel_id", mode="before")
    @classmethod
    def _string_id(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator("price", mode="before")
    @classmethod
    def _numeric_price(cls, value: Any) -> float | None:
        # Strings, booleans, NaN and integers beyond float range never count as a price.
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        try:
            price = float(value)
        except OverflowError:
            return None
        if not math.isfinite(price):
            return None
        return price


class MinRatesResponse(BaseModel):
    data: list[MinRateOffer] = Field(default_factory=list)

    @field_validator("data", mode="before")
    @classmethod
    def _offer_records(cls, value: Any) -> list[Any]:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict)]


class HotelDetails(BaseModel):
    id: str | None = None
    name: str | None = None

    @field_validator("id", "name", mode="before")
    @classmethod
    def _strings_only(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None


class HotelDetailsResponse(BaseModel):
    data: HotelDetails | None = None

    @field_validator("data", mode="before")
    @classmethod
    def _record(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else None


class HotelSummary(BaseModel):
    hotel_id: str | None = Field(default=None, validation_alias="id")
    name: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    country_code: str | None = None
    stars: float | None = None
    latitude: float | None = None
    longitude: float | None = None

    @field_validator("hotel_id", "name", "address", "city", "country", "country_code", mode="before")
    @classmethod
    def _strings_only(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator("stars", "latitude", "longitude", mode="before")
    @classmethod
    def _numbers_only(cls, value: Any) -> float | None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        try:
            return float(value)
        except OverflowError:
            return None


class HotelsResponse(BaseModel):
    data: list[HotelSummary] = Field(default_factory=list)

    @field_validator("data", mode="before")
    @classmethod
    def _hotel_records(cls, value: Any) -> list[Any]:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict)]


@dataclass(slots=True)
class PriceQuote:
    hotel_id: str
    hotel_name: str
    min_price: float | None
    currency: str
    check_in: str
    check_out: str
