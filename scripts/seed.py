"""Seed the database with demo users and favorites."""

from __future__ import annotations

from dotenv import load_dotenv

from hotelwatch.config import MonitorSettings
from hotelwatch.db.session import create_engine_from_env
from hotelwatch.errors import DuplicateEmailError
from hotelwatch.store.repository import FavoriteRepository, UserRepository

DEMO_USERS = [
    {"name": "Ada Demo", "email": "ada@example.com"},
    {"name": "Grace Demo", "email": "grace@example.com"},
]

DEMO_FAVORITES = {
    "ada@example.com": [("lp19b70", 150.00), ("lp1897", 95.00)],
    "grace@example.com": [("lp24373", 210.00)],
}


def main() -> None:
    load_dotenv()
    settings = MonitorSettings.from_env()
    engine = create_engine_from_env(settings.database_url)
    users = UserRepository(engine)
    favorites = FavoriteRepository(engine)
    for demo in DEMO_USERS:
        try:
            user = users.insert(demo["name"], demo["email"])
        except DuplicateEmailError:
            print(f"Skipping {demo['email']}: already seeded")
            continue
        for hotel_id, target_price in DEMO_FAVORITES.get(demo["email"], []):
            favorites.insert(user.id, hotel_id, target_price)
    print("Seed complete")


if __name__ == "__main__":
    main()
