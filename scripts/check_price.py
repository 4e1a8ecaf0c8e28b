"""Look up the current minimum rate for one hotel and print it."""

from __future__ import annotations

import argparse
import asyncio

from hotelwatch.config import MonitorSettings
from hotelwatch.errors import NoPriceDataError, PriceLookupError
from hotelwatch.liteapi import build_session
from hotelwatch.liteapi.hotel_details import HotelInfoClient
from hotelwatch.liteapi.min_rates import PriceSourceClient
from hotelwatch.utils.dates import now_in_tz, stay_window


async def main(hotel_id: str) -> None:
    settings = MonitorSettings.from_env()
    window = stay_window(
        now_in_tz(settings.timezone),
        lookahead_days=settings.lookahead_days,
        stay_nights=settings.stay_nights,
    )
    async with build_session(settings) as session:
        name = await HotelInfoClient(settings, session=session).lookup_or_placeholder(hotel_id)
        try:
            price = await PriceSourceClient(settings, session=session).get_min_price(
                hotel_id, window.check_in_iso, window.check_out_iso
            )
        except (NoPriceDataError, PriceLookupError) as exc:
            raise SystemExit(str(exc)) from exc
    print(f"{name} ({hotel_id}): {price:.2f} {settings.currency} for {window.check_in_iso} to {window.check_out_iso}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("hotel_id")
    asyncio.run(main(parser.parse_args().hotel_id))
