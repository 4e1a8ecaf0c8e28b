from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from sqlalchemy import Column, DateTime, ForeignKey, Integer, MetaData, Numeric, Table, Text, UniqueConstraint, create_engine
from sqlalchemy.pool import StaticPool

from hotelwatch.config import MonitorSettings

FIXTURES = Path(__file__).parent / "fixtures" / "http"
API_BASE = "https://liteapi.test/v3.0"

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("email", Text, nullable=False, unique=True),
    Column("created_at", DateTime, nullable=False),
)

users_favorites = Table(
    "users_favorites",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.id"), nullable=False),
    Column("hotel_id", Text, nullable=False),
    Column("target_price", Numeric(10, 2), nullable=False),
    Column("created_at", DateTime, nullable=False),
    UniqueConstraint("user_id", "hotel_id"),
)


def load_fixture(path: str) -> str:
    return (FIXTURES / path).read_text()


@pytest.fixture()
def settings():
    return MonitorSettings(
        api_key="test-key",
        api_base_url=API_BASE,
        database_url="sqlite://",
        interval_seconds=60,
        request_timeout=5,
        monitor_enabled=False,
    )


@pytest.fixture()
def engine():
    # One shared connection so executor threads see the same in-memory database.
    engine = create_engine(
        "sqlite://",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def seeded_engine(engine):
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    with engine.begin() as conn:
        conn.execute(users.insert(), [
            {"name": "Ada", "email": "ada@example.com", "created_at": base},
            {"name": "Grace", "email": "grace@example.com", "created_at": base},
        ])
        conn.execute(users_favorites.insert(), [
            {"user_id": 1, "hotel_id": "H1", "target_price": 100, "created_at": base + timedelta(minutes=3)},
            {"user_id": 1, "hotel_id": "H2", "target_price": 50, "created_at": base + timedelta(minutes=2)},
            {"user_id": 2, "hotel_id": "H3", "target_price": 30, "created_at": base + timedelta(minutes=1)},
        ])
    return engine
