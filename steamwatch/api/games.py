"""Game catalog API endpoints."""
import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from steamwatch.api.deps import get_steam_client
from steamwatch.clients.steam import SteamStoreClient
from steamwatch.currency import AVAILABLE_CURRENCIES, get_steam_country_code
from steamwatch.database import get_session
from steamwatch.services import catalog
from steamwatch.services.catalog import GameNotFoundError

router = APIRouter(prefix="/games", tags=["games"])


class PriceSnapshotResponse(BaseModel):
    """One recorded price."""
    id: uuid.UUID
    currency: str
    initial_price: int
    final_price: int
    discount_percent: Optional[int]
    is_on_sale: bool
    recorded_at: datetime

    class Config:
        from_attributes = True


class CurrentPriceResponse(BaseModel):
    currency: str
    initial_price: int
    final_price: int
    discount_percent: Optional[int]
    is_on_sale: bool

    class Config:
        from_attributes = True


class GameSearchResult(BaseModel):
    id: uuid.UUID
    steam_app_id: int
    name: str
    header_image: Optional[str]
    current_price: Optional[CurrentPriceResponse]


class GameDetailResponse(BaseModel):
    """Game with its recent price history, newest first."""
    id: uuid.UUID
    steam_app_id: int
    name: str
    type: Optional[str]
    header_image: Optional[str]
    developers: list[str]
    publishers: list[str]
    release_date: Optional[str]
    genres: list[dict]
    short_description: Optional[str]
    price_history: list[PriceSnapshotResponse]


class SaleItemResponse(BaseModel):
    app_id: int
    name: str
    discount_percent: int
    original_price: int
    final_price: int
    currency: str
    header_image: Optional[str]
    large_capsule_image: Optional[str]


class CurrencyResponse(BaseModel):
    country_code: str
    currency: str
    name: str


@router.get("/popular", response_model=list[SaleItemResponse])
async def get_popular_on_sale(
    limit: int = Query(50, ge=1, le=100),
    country_code: Optional[str] = Query(None, max_length=2),
    client: SteamStoreClient = Depends(get_steam_client),
):
    """Popular discounted games, priced for the requested region."""
    region = get_steam_country_code(country_code) if country_code else None
    games = await client.get_popular_games_on_sale(limit, region)
    return [game.to_dict() for game in games]


@router.get("/search", response_model=list[GameSearchResult])
async def search_games(
    query: str = Query(..., min_length=1),
    limit: int = Query(20, ge=1, le=50),
    db: AsyncSession = Depends(get_session),
):
    """Search stored games by name."""
    hits = await catalog.search_games(db, query, limit)
    return [
        GameSearchResult(
            id=game.id,
            steam_app_id=game.steam_app_id,
            name=game.name,
            header_image=game.header_image,
            current_price=CurrentPriceResponse.model_validate(snapshot) if snapshot else None,
        )
        for game, snapshot in hits
    ]


@router.get("/currencies", response_model=list[CurrencyResponse])
async def get_currencies():
    """Regions and currencies available for pricing."""
    return [
        CurrencyResponse(country_code=code, currency=currency, name=name)
        for code, currency, name in AVAILABLE_CURRENCIES
    ]


@router.get("/{app_id}", response_model=GameDetailResponse)
async def get_game(
    app_id: int,
    sync: bool = False,
    country_code: Optional[str] = Query(None, max_length=2),
    db: AsyncSession = Depends(get_session),
    client: SteamStoreClient = Depends(get_steam_client),
):
    """Get a game by Steam app id, fetching it from Steam when unknown or when ``sync`` is set."""
    try:
        game, history = await catalog.get_game(
            db, client, app_id, sync=sync, country_code=get_steam_country_code(country_code)
        )
    except GameNotFoundError:
        raise HTTPException(status_code=404, detail="Game not found")

    return GameDetailResponse(
        id=game.id,
        steam_app_id=game.steam_app_id,
        name=game.name,
        type=game.type,
        header_image=game.header_image,
        developers=game.developers or [],
        publishers=game.publishers or [],
        release_date=game.release_date,
        genres=game.genres or [],
        short_description=game.short_description,
        price_history=[PriceSnapshotResponse.model_validate(s) for s in history],
    )


@router.get("/{app_id}/prices", response_model=list[PriceSnapshotResponse])
async def get_price_history(
    app_id: int,
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_session),
):
    """Price history for a game, newest first."""
    try:
        return await catalog.get_price_history(db, app_id, limit)
    except GameNotFoundError:
        raise HTTPException(status_code=404, detail="Game not found")


@router.post("/{app_id}/sync")
async def sync_game(
    app_id: int,
    db: AsyncSession = Depends(get_session),
    client: SteamStoreClient = Depends(get_steam_client),
):
    """Refresh a game and today's price from Steam."""
    try:
        game = await catalog.sync_game(db, client, app_id)
    except GameNotFoundError:
        raise HTTPException(status_code=404, detail="Game not found on Steam")

    return {"success": True, "game_id": str(game.id)}
