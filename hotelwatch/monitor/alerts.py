"""Alert events and the sinks that receive them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class AlertEvent:
    user_id: int
    hotel_id: str
    hotel_name: str
    current_price: float
    target_price: float
    currency: str
    triggered_at: datetime


class AlertSink(Protocol):
    async def emit(self, event: AlertEvent) -> None: ...


class LogAlertSink:
    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logger

    async def emit(self, event: AlertEvent) -> None:
        self.log.info(
            "ALERT: user %s - hotel %s (%s) - current price %.2f %s is at or below target %.2f",
            event.user_id,
            event.hotel_name,
            event.hotel_id,
            event.current_price,
            event.currency,
            event.target_price,
        )
