"""Price extraction and alert predicates."""

from __future__ import annotations

from typing import Iterable

from hotelwatch.liteapi.models import MinRateOffer


def extract_min_price(offers: Iterable[MinRateOffer]) -> float | None:
    """Lowest positive price across ``offers``, or ``None`` when there is none.

    A price of zero or below is indistinguishable from "unset" and never
    becomes the minimum.
    """
    minimum: float | None = None
    for offer in offers:
        price = offer.price
        if price is None or price <= 0:
            continue
        if minimum is None or price < minimum:
            minimum = price
    return minimum


def should_alert(min_price: float | None, target_price: float) -> bool:
    if min_price is None or min_price <= 0:
        return False
    return min_price <= target_price
