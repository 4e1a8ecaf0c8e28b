"""Persistence records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class User:
    id: int
    name: str
    email: str
    created_at: datetime


@dataclass(slots=True)
class Favorite:
    id: int
    user_id: int
    hotel_id: str
    target_price: float
    created_at: datetime
