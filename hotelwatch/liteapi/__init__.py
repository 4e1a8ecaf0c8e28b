"""LiteAPI clients."""

from __future__ import annotations

import httpx

from hotelwatch.config import MonitorSettings

USER_AGENT = "hotelwatch/1.0"


def build_session(settings: MonitorSettings, api_key: str | None = None) -> httpx.AsyncClient:
    """Shared authenticated session for the min-rate and hotel-details clients."""
    key = api_key or settings.require_api_key()
    return httpx.AsyncClient(
        base_url=settings.api_base_url,
        timeout=settings.request_timeout,
        headers={
            "accept": "application/json",
            "X-API-Key": key,
            "User-Agent": USER_AGENT,
        },
    )
