"""SQL access for users and their favorite hotels."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Integer, String, bindparam
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.sql import text

from hotelwatch.errors import DuplicateEmailError, DuplicateFavoriteError, ListFetchError
from hotelwatch.store.models import Favorite, User

logger = logging.getLogger(__name__)

_FAVORITE_COLUMNS = dict(id=Integer, user_id=Integer, hotel_id=String, target_price=Float, created_at=DateTime)
_USER_COLUMNS = dict(id=Integer, name=String, email=String, created_at=DateTime)


class FavoriteRepository:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def insert(self, user_id: int, hotel_id: str, target_price: float) -> Favorite:
        if not hotel_id:
            raise ValueError("hotel_id is required")
        if target_price <= 0:
            raise ValueError("target_price must be greater than 0")
        created_at = datetime.now(timezone.utc)
        try:
            with self.engine.begin() as conn:
                existing = conn.execute(
                    text("SELECT 1 FROM users_favorites WHERE user_id = :user_id AND hotel_id = :hotel_id"),
                    {"user_id": user_id, "hotel_id": hotel_id},
                ).scalar_one_or_none()
                if existing is not None:
                    raise DuplicateFavoriteError(f"hotel {hotel_id} already in favorites of user {user_id}")
                result = conn.execute(
                    text(
                        """
                        INSERT INTO users_favorites (user_id, hotel_id, target_price, created_at)
                        VALUES (:user_id, :hotel_id, :target_price, :created_at)
                        RETURNING id
                        """
                    ).bindparams(bindparam("created_at", type_=DateTime)),
                    {
                        "user_id": user_id,
                        "hotel_id": hotel_id,
                        "target_price": target_price,
                        "created_at": created_at,
                    },
                )
                favorite_id = int(result.scalar_one())
        except IntegrityError as exc:
            raise DuplicateFavoriteError(f"hotel {hotel_id} already in favorites of user {user_id}") from exc
        return Favorite(
            id=favorite_id,
            user_id=user_id,
            hotel_id=hotel_id,
            target_price=float(target_price),
            created_at=created_at,
        )

    def list_for_user(self, user_id: int) -> list[Favorite]:
        stmt = text(
            """
            SELECT id, user_id, hotel_id, target_price, created_at
            FROM users_favorites
            WHERE user_id = :user_id
            ORDER BY created_at DESC, id DESC
            """
        ).columns(**_FAVORITE_COLUMNS)
        with self.engine.connect() as conn:
            return [_favorite(row) for row in conn.execute(stmt, {"user_id": user_id}).mappings()]

    def list_all(self) -> list[Favorite]:
        """Every tracked favorite, newest first.

        Raises ``ListFetchError`` for any database failure so callers can
        abandon the whole scan.
        """
        stmt = text(
            """
            SELECT id, user_id, hotel_id, target_price, created_at
            FROM users_favorites
            ORDER BY created_at DESC, id DESC
            """
        ).columns(**_FAVORITE_COLUMNS)
        try:
            with self.engine.connect() as conn:
                return [_favorite(row) for row in conn.execute(stmt).mappings()]
        except SQLAlchemyError as exc:
            raise ListFetchError(f"error getting favorites: {exc}") from exc


class UserRepository:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def insert(self, name: str, email: str) -> User:
        created_at = datetime.now(timezone.utc)
        try:
            with self.engine.begin() as conn:
                result = conn.execute(
                    text(
                        """
                        INSERT INTO users (name, email, created_at)
                        VALUES (:name, :email, :created_at)
                        RETURNING id
                        """
                    ).bindparams(bindparam("created_at", type_=DateTime)),
                    {"name": name, "email": email.lower(), "created_at": created_at},
                )
                user_id = int(result.scalar_one())
        except IntegrityError as exc:
            raise DuplicateEmailError(f"duplicate email: {email}") from exc
        return User(id=user_id, name=name, email=email.lower(), created_at=created_at)

    def exists(self, user_id: int) -> bool:
        with self.engine.connect() as conn:
            found = conn.execute(
                text("SELECT 1 FROM users WHERE id = :id"), {"id": user_id}
            ).scalar_one_or_none()
        return found is not None

    def list(self, limit: int = 20, offset: int = 0) -> tuple[list[User], int]:
        stmt = text(
            """
            SELECT id, name, email, created_at
            FROM users
            ORDER BY id
            LIMIT :limit OFFSET :offset
            """
        ).columns(**_USER_COLUMNS)
        with self.engine.connect() as conn:
            total = int(conn.execute(text("SELECT COUNT(*) FROM users")).scalar_one())
            rows = conn.execute(stmt, {"limit": limit, "offset": offset}).mappings()
            users = [User(**dict(row)) for row in rows]
        return users, total


def _favorite(row) -> Favorite:
    return Favorite(
        id=row["id"],
        user_id=row["user_id"],
        hotel_id=row["hotel_id"],
        target_price=float(row["target_price"]),
        created_at=row["created_at"],
    )
