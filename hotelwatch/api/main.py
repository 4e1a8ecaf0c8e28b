"""FastAPI application for users, favorites, hotel search and on-demand price quotes."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, AsyncIterator

from fastapi import Depends, FastAPI, Header, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.engine import Engine

from hotelwatch.config import MonitorSettings
from hotelwatch.db.session import create_engine_from_env
from hotelwatch.errors import (
    DuplicateEmailError,
    DuplicateFavoriteError,
    HotelSearchError,
    NoPriceDataError,
    PriceLookupError,
)
from hotelwatch.jobs.monitor import MonitorService
from hotelwatch.liteapi.hotel_details import HotelInfoClient
from hotelwatch.liteapi.min_rates import PriceSourceClient
from hotelwatch.store.repository import FavoriteRepository, UserRepository
from hotelwatch.utils.dates import now_in_tz, stay_window
from hotelwatch.utils.log import configure_logging

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@lru_cache
def get_settings() -> MonitorSettings:
    return MonitorSettings.from_env()


@lru_cache
def get_engine() -> Engine:
    return create_engine_from_env(get_settings().database_url)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging(settings.log_level)
    service: MonitorService | None = None
    if settings.monitor_enabled:
        service = MonitorService.from_settings(settings, engine=get_engine())
        service.start()
    try:
        yield
    finally:
        if service is not None:
            await service.stop()


app = FastAPI(title="Hotel Watch API", version=VERSION, lifespan=lifespan)


class CreateUserRequest(BaseModel):
    name: str = Field(min_length=1, max_length=500)
    email: EmailStr


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime


class UsersResponse(BaseModel):
    users: list[UserOut]
    total: int
    limit: int
    offset: int


class CreateFavoriteRequest(BaseModel):
    hotel_id: str = Field(min_length=1)
    target_price: float = Field(gt=0)


class FavoriteOut(BaseModel):
    id: int
    user_id: int
    hotel_id: str
    target_price: float
    created_at: datetime


def get_user_repository(engine: Engine = Depends(get_engine)) -> UserRepository:
    return UserRepository(engine)


def get_favorite_repository(engine: Engine = Depends(get_engine)) -> FavoriteRepository:
    return FavoriteRepository(engine)


def get_api_key(
    x_api_key: str | None = Header(default=None),
    authorization: str | None = Header(default=None),
) -> str:
    api_key = x_api_key or authorization
    if not api_key:
        raise HTTPException(status_code=401, detail="API key is required")
    return api_key


async def get_price_client(
    api_key: str = Depends(get_api_key), settings: MonitorSettings = Depends(get_settings)
) -> AsyncIterator[PriceSourceClient]:
    client = PriceSourceClient(settings, api_key=api_key)
    try:
        yield client
    finally:
        await client.close()


async def get_hotel_client(
    api_key: str = Depends(get_api_key), settings: MonitorSettings = Depends(get_settings)
) -> AsyncIterator[HotelInfoClient]:
    client = HotelInfoClient(settings, api_key=api_key)
    try:
        yield client
    finally:
        await client.close()


@app.get("/v1/healthcheck")
async def healthcheck(settings: MonitorSettings = Depends(get_settings)) -> dict[str, Any]:
    return {
        "data": {
            "status": "available",
            "system_info": {"version": VERSION, "monitor_enabled": settings.monitor_enabled},
        }
    }


@app.get("/v1/hotels")
async def list_hotels(
    country_code: str = Query(..., alias="countryCode", min_length=1),
    city_name: str = Query(..., alias="cityName", min_length=1),
    offset: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    hotels: HotelInfoClient = Depends(get_hotel_client),
) -> dict[str, Any]:
    try:
        found = await hotels.search_hotels(country_code, city_name, offset=offset, limit=limit)
    except HotelSearchError as exc:
        logger.warning("Hotel search for %s/%s failed: %s", country_code, city_name, exc)
        raise HTTPException(status_code=502, detail="failed to fetch hotels from LiteAPI") from exc
    return {
        "data": {
            "hotels": [hotel.model_dump(mode="json") for hotel in found],
            "total": len(found),
            "offset": offset,
            "limit": limit,
        }
    }


@app.get("/v1/hotels/{hotel_id}")
async def hotel_price(
    hotel_id: str,
    settings: MonitorSettings = Depends(get_settings),
    prices: PriceSourceClient = Depends(get_price_client),
    hotels: HotelInfoClient = Depends(get_hotel_client),
) -> dict[str, Any]:
    now = now_in_tz(settings.timezone)
    window = stay_window(now, lookahead_days=settings.lookahead_days, stay_nights=settings.stay_nights)
    try:
        price = await prices.get_min_price(hotel_id, window.check_in_iso, window.check_out_iso)
    except NoPriceDataError as exc:
        raise HTTPException(status_code=404, detail="no price data found for this hotel") from exc
    except PriceLookupError as exc:
        logger.warning("Price lookup for %s failed: %s", hotel_id, exc)
        raise HTTPException(status_code=502, detail="failed to get hotel rates") from exc
    hotel_name = await hotels.lookup_or_placeholder(hotel_id)
    return {
        "data": {
            "hotel_id": hotel_id,
            "hotel_name": hotel_name,
            "price": price,
            "currency": settings.currency,
            "check_in": window.check_in_iso,
            "check_out": window.check_out_iso,
            "adults": settings.adults,
            "updated_at": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        }
    }


@app.post("/v1/users", status_code=201)
async def create_user(payload: CreateUserRequest, users: UserRepository = Depends(get_user_repository)) -> JSONResponse:
    try:
        user = users.insert(payload.name, payload.email)
    except DuplicateEmailError as exc:
        raise HTTPException(status_code=409, detail="a user with this email address already exists") from exc
    body = {"data": {"user": UserOut.model_validate(user, from_attributes=True).model_dump(mode="json")}}
    return JSONResponse(body, status_code=201, headers={"Location": f"/v1/users/{user.id}"})


@app.get("/v1/users")
async def list_users(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    users: UserRepository = Depends(get_user_repository),
) -> dict[str, Any]:
    rows, total = users.list(limit=limit, offset=offset)
    page = UsersResponse(
        users=[UserOut.model_validate(row, from_attributes=True) for row in rows],
        total=total,
        limit=limit,
        offset=offset,
    )
    return {"data": page.model_dump(mode="json")}


@app.post("/v1/favorites/{user_id}", status_code=201)
async def create_favorite(
    user_id: int,
    payload: CreateFavoriteRequest,
    users: UserRepository = Depends(get_user_repository),
    favorites: FavoriteRepository = Depends(get_favorite_repository),
) -> dict[str, Any]:
    if user_id <= 0:
        raise HTTPException(status_code=400, detail="invalid user_id parameter")
    if not users.exists(user_id):
        raise HTTPException(status_code=404, detail="user not found")
    try:
        favorite = favorites.insert(user_id, payload.hotel_id, payload.target_price)
    except DuplicateFavoriteError as exc:
        raise HTTPException(status_code=409, detail="hotel already in favorites") from exc
    body = FavoriteOut.model_validate(favorite, from_attributes=True).model_dump(mode="json")
    return {"data": {"favorite": body}}


@app.get("/v1/favorites/{user_id}")
async def list_favorites(
    user_id: int,
    users: UserRepository = Depends(get_user_repository),
    favorites: FavoriteRepository = Depends(get_favorite_repository),
) -> dict[str, Any]:
    if not users.exists(user_id):
        raise HTTPException(status_code=404, detail="user not found")
    rows = favorites.list_for_user(user_id)
    return {
        "data": {
            "favorites": [
                FavoriteOut.model_validate(row, from_attributes=True).model_dump(mode="json") for row in rows
            ]
        }
    }
