"""Runtime configuration for the monitor, clients and API."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

import pendulum
from dotenv import load_dotenv

from hotelwatch.errors import ConfigurationError

DEFAULT_API_BASE_URL = "https://api.liteapi.travel/v3.0"
DEFAULT_DATABASE_URL = "postgresql://user:pass@db:5432/hotelwatch"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(slots=True)
class MonitorSettings:
    api_key: str | None = None
    api_base_url: str = DEFAULT_API_BASE_URL
    database_url: str = DEFAULT_DATABASE_URL
    interval_seconds: float = 60.0
    lookahead_days: int = 30
    stay_nights: int = 1
    adults: int = 1
    currency: str = "USD"
    guest_nationality: str = "US"
    request_timeout: float = 30.0
    timezone: str = "UTC"
    monitor_enabled: bool = True
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.interval_seconds <= 0:
            raise ConfigurationError("interval_seconds must be greater than 0")
        if self.lookahead_days < 0:
            raise ConfigurationError("lookahead_days must not be negative")
        if self.stay_nights < 1:
            raise ConfigurationError("stay_nights must be at least 1")
        if self.adults < 1:
            raise ConfigurationError("adults must be at least 1")
        if self.request_timeout <= 0:
            raise ConfigurationError("request_timeout must be greater than 0")
        try:
            pendulum.timezone(self.timezone)
        except (ValueError, LookupError) as exc:
            raise ConfigurationError(f"unknown timezone: {self.timezone!r}") from exc

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> MonitorSettings:
        """Build settings from the process environment (after loading ``.env``)."""
        if environ is None:
            load_dotenv()
            environ = os.environ
        return cls(
            api_key=environ.get("LITE_API_KEY") or None,
            api_base_url=environ.get("LITE_API_URL", DEFAULT_API_BASE_URL),
            database_url=environ.get("DATABASE_URL", DEFAULT_DATABASE_URL),
            interval_seconds=_number(environ, "MONITOR_INTERVAL_SECONDS", 60.0, float),
            lookahead_days=_number(environ, "MONITOR_LOOKAHEAD_DAYS", 30, int),
            stay_nights=_number(environ, "MONITOR_STAY_NIGHTS", 1, int),
            adults=_number(environ, "MONITOR_ADULTS", 1, int),
            currency=environ.get("PRICE_CURRENCY", "USD"),
            guest_nationality=environ.get("GUEST_NATIONALITY", "US"),
            request_timeout=_number(environ, "LITE_API_TIMEOUT", 30.0, float),
            timezone=environ.get("TIMEZONE", "UTC"),
            monitor_enabled=_flag(environ, "MONITOR_ENABLED", True),
            log_level=environ.get("LOG_LEVEL", "INFO").upper(),
        )

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError("Environment variable LITE_API_KEY is not set")
        return self.api_key


def _number(environ: Mapping[str, str], name: str, default, cast):
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


def _flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, got {raw!r}")
