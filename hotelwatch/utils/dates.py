"""Datetime helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

import pendulum

@dataclass(slots=True, frozen=True)
class LookupWindow:
    check_in: date
    check_out: date

    @property
    def check_in_iso(self) -> str:
        return format_date(self.check_in)

    @property
    def check_out_iso(self) -> str:
        return format_date(self.check_out)


def now_in_tz(tz_name: str) -> pendulum.DateTime:
    return pendulum.now(pendulum.timezone(tz_name))


def format_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def stay_window(now: datetime, *, lookahead_days: int, stay_nights: int) -> LookupWindow:
    """Check-in ``lookahead_days`` after ``now``, check-out ``stay_nights`` later."""
    check_in = pendulum.instance(now).add(days=lookahead_days)
    check_out = check_in.add(days=stay_nights)
    return LookupWindow(check_in=check_in.date(), check_out=check_out.date())
