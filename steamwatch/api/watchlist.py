"""Watchlist API endpoints."""
import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.ext.asyncio import AsyncSession

from steamwatch.api.games import CurrentPriceResponse
from steamwatch.database import get_session
from steamwatch.services import watchlist
from steamwatch.services.catalog import GameNotFoundError

router = APIRouter(prefix="/watchlist", tags=["watchlist"])


class SubscribeRequest(BaseModel):
    """Watch a game, optionally with thresholds."""
    app_id: int
    email: EmailStr
    min_discount_percent: Optional[int] = Field(None, ge=0, le=100)
    target_price: Optional[int] = Field(None, ge=0)  # Minor currency units


class UnsubscribeRequest(BaseModel):
    app_id: int
    email: EmailStr


class WatchlistThresholds(BaseModel):
    id: uuid.UUID
    min_discount_percent: Optional[int]
    target_price: Optional[int]

    class Config:
        from_attributes = True


class WatchlistStatusResponse(BaseModel):
    is_watching: bool
    watchlist: Optional[WatchlistThresholds] = None


class WatchedGame(BaseModel):
    id: uuid.UUID
    steam_app_id: int
    name: str
    header_image: Optional[str]


class WatchlistItemResponse(BaseModel):
    id: uuid.UUID
    game: WatchedGame
    current_price: Optional[CurrentPriceResponse]
    min_discount_percent: Optional[int]
    target_price: Optional[int]
    created_at: datetime


@router.post("")
async def subscribe(
    request: SubscribeRequest,
    db: AsyncSession = Depends(get_session),
):
    """Add or update a watchlist entry."""
    try:
        entry = await watchlist.subscribe(
            db,
            request.app_id,
            request.email,
            min_discount_percent=request.min_discount_percent,
            target_price=request.target_price,
        )
    except GameNotFoundError:
        raise HTTPException(status_code=404, detail="Game not found")

    return {"success": True, "watchlist_id": str(entry.id)}


@router.post("/remove")
async def unsubscribe(
    request: UnsubscribeRequest,
    db: AsyncSession = Depends(get_session),
):
    """Stop watching a game."""
    await watchlist.unsubscribe(db, request.app_id, request.email)
    return {"success": True}


@router.get("/status", response_model=WatchlistStatusResponse)
async def get_status(
    app_id: int,
    email: Optional[EmailStr] = Query(None),
    db: AsyncSession = Depends(get_session),
):
    """Whether an email is watching a game."""
    if not email:
        return WatchlistStatusResponse(is_watching=False)

    try:
        entry = await watchlist.get_status(db, app_id, email)
    except GameNotFoundError:
        raise HTTPException(status_code=404, detail="Game not found")

    if entry is None:
        return WatchlistStatusResponse(is_watching=False)
    return WatchlistStatusResponse(
        is_watching=True,
        watchlist=WatchlistThresholds.model_validate(entry),
    )


@router.get("", response_model=list[WatchlistItemResponse])
async def list_watchlist(
    email: EmailStr = Query(...),
    db: AsyncSession = Depends(get_session),
):
    """All games an email is watching."""
    rows = await watchlist.list_by_email(db, email)
    return [
        WatchlistItemResponse(
            id=entry.id,
            game=WatchedGame(
                id=game.id,
                steam_app_id=game.steam_app_id,
                name=game.name,
                header_image=game.header_image,
            ),
            current_price=CurrentPriceResponse.model_validate(snapshot) if snapshot else None,
            min_discount_percent=entry.min_discount_percent,
            target_price=entry.target_price,
            created_at=entry.created_at,
        )
        for entry, game, snapshot in rows
    ]
