"""Database engine helpers."""

from __future__ import annotations

import os

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from hotelwatch.config import DEFAULT_DATABASE_URL


def create_engine_from_env(url: str | None = None) -> Engine:
    """Create an engine for ``url``, falling back to the DATABASE_URL environment variable."""
    url = url or os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)
    return create_engine(url, pool_pre_ping=True, future=True)
