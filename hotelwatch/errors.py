"""Error taxonomy for the price monitor."""

from __future__ import annotations


class HotelWatchError(Exception):
    pass


class ConfigurationError(HotelWatchError):
    pass


class ListFetchError(HotelWatchError):
    """The favorites worklist could not be loaded; the scan cycle is abandoned."""


class DuplicateEmailError(HotelWatchError):
    pass


class DuplicateFavoriteError(HotelWatchError):
    pass


class HotelSearchError(HotelWatchError):
    """The hotel listing lookup failed."""


class NameResolutionError(HotelWatchError):
    def __init__(self, hotel_id: str, reason: str) -> None:
        super().__init__(f"could not resolve name for hotel {hotel_id}: {reason}")
        self.hotel_id = hotel_id
        self.reason = reason


class PriceLookupError(HotelWatchError):
    """Base class for failed min-rate lookups."""

    def __init__(self, hotel_id: str, reason: str) -> None:
        super().__init__(f"price lookup failed for hotel {hotel_id}: {reason}")
        self.hotel_id = hotel_id
        self.reason = reason


class PriceSourceConnectionError(PriceLookupError):
    pass


class PriceSourceStatusError(PriceLookupError):
    def __init__(self, hotel_id: str, status_code: int) -> None:
        super().__init__(hotel_id, f"upstream returned status {status_code}")
        self.status_code = status_code


class MalformedPriceResponseError(PriceLookupError):
    pass


class NoPriceDataError(HotelWatchError):
    """Upstream answered but had no usable offer. Not a fault."""

    def __init__(self, hotel_id: str) -> None:
        super().__init__(f"no price data found for hotel {hotel_id}")
        self.hotel_id = hotel_id
