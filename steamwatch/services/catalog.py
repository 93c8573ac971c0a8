"""Game catalog: upserts, daily price snapshots, search and history."""
import logging
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from steamwatch.clients.steam import PriceQuote, SteamStoreClient, price_quote_from_details
from steamwatch.models import Game, PriceSnapshot
from steamwatch.timeutils import start_of_local_day, utcnow

logger = logging.getLogger(__name__)


class GameNotFoundError(LookupError):
    """Raised when a game is neither in the catalog nor on Steam."""

    def __init__(self, app_id: int):
        super().__init__(f"Game not found: {app_id}")
        self.app_id = app_id


async def get_game_by_app_id(db: AsyncSession, app_id: int) -> Game | None:
    result = await db.execute(select(Game).where(Game.steam_app_id == app_id))
    return result.scalar_one_or_none()


async def upsert_game(db: AsyncSession, details: dict[str, Any], app_id: int | None = None) -> Game:
    """Create or update a game from a Steam appdetails payload.

    The game is keyed by the requested ``app_id``; Steam may answer with a
    different ``steam_appid`` for redirected apps.
    """
    if app_id is None:
        app_id = int(details["steam_appid"])
    game = await get_game_by_app_id(db, app_id)

    fields = {
        "name": details.get("name") or f"Unknown ({app_id})",
        "type": details.get("type"),
        "header_image": details.get("header_image"),
        "developers": details.get("developers"),
        "publishers": details.get("publishers"),
        "release_date": (details.get("release_date") or {}).get("date"),
        "genres": details.get("genres"),
        "short_description": details.get("short_description"),
    }

    if game is None:
        game = Game(steam_app_id=app_id, **fields)
        db.add(game)
        logger.info(f"Created game record for {game.name} ({app_id})")
    else:
        for key, value in fields.items():
            setattr(game, key, value)
        game.updated_at = utcnow()

    await db.flush()
    return game


async def record_daily_snapshot(
    db: AsyncSession,
    game: Game,
    quote: PriceQuote,
    now: datetime | None = None,
) -> PriceSnapshot | None:
    """Append a snapshot unless the game already has one since local midnight.

    Returns the new snapshot, or None when today's price was already recorded.
    """
    now = now or utcnow()
    existing = await db.execute(
        select(PriceSnapshot.id)
        .where(PriceSnapshot.game_id == game.id)
        .where(PriceSnapshot.recorded_at >= start_of_local_day(now))
        .limit(1)
    )
    if existing.scalar_one_or_none() is not None:
        return None

    snapshot = PriceSnapshot(
        game_id=game.id,
        currency=quote.currency,
        initial_price=quote.initial_price,
        final_price=quote.final_price,
        discount_percent=quote.discount_percent,
        is_on_sale=quote.is_on_sale,
        recorded_at=now,
    )
    db.add(snapshot)
    await db.flush()
    return snapshot


async def store_app_details(
    db: AsyncSession,
    details: dict[str, Any],
    now: datetime | None = None,
    app_id: int | None = None,
) -> Game:
    """Upsert the game and record today's price, if Steam reports one."""
    game = await upsert_game(db, details, app_id)
    quote = price_quote_from_details(details)
    if quote is not None:
        await record_daily_snapshot(db, game, quote, now)
    return game


async def sync_game(
    db: AsyncSession,
    client: SteamStoreClient,
    app_id: int,
    country_code: str = "us",
) -> Game:
    """Refresh one game and its price from Steam."""
    details = await client.get_app_details(app_id, country_code)
    if details is None:
        raise GameNotFoundError(app_id)

    game = await store_app_details(db, details, app_id=app_id)
    await db.commit()
    return game


async def latest_snapshots(db: AsyncSession, game_id: uuid.UUID, limit: int = 2) -> list[PriceSnapshot]:
    """Newest-first snapshots for a game."""
    result = await db.execute(
        select(PriceSnapshot)
        .where(PriceSnapshot.game_id == game_id)
        .order_by(PriceSnapshot.recorded_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def get_game(
    db: AsyncSession,
    client: SteamStoreClient,
    app_id: int,
    sync: bool = False,
    country_code: str = "us",
    history_limit: int = 100,
) -> tuple[Game, list[PriceSnapshot]]:
    """Game with recent price history, fetched from Steam when missing or on request."""
    game = await get_game_by_app_id(db, app_id)

    if game is None or sync:
        game = await sync_game(db, client, app_id, country_code)

    history = await latest_snapshots(db, game.id, history_limit)
    return game, history


async def search_games(
    db: AsyncSession,
    query: str,
    limit: int = 20,
) -> list[tuple[Game, PriceSnapshot | None]]:
    """Case-insensitive substring search over game names, most recently updated first."""
    result = await db.execute(
        select(Game)
        .where(func.lower(Game.name).contains(query.lower(), autoescape=True))
        .order_by(Game.updated_at.desc())
        .limit(limit)
    )
    games = result.scalars().all()

    hits = []
    for game in games:
        snapshots = await latest_snapshots(db, game.id, 1)
        hits.append((game, snapshots[0] if snapshots else None))
    return hits


async def get_price_history(db: AsyncSession, app_id: int, limit: int = 100) -> list[PriceSnapshot]:
    """Newest-first price history for a game in the catalog."""
    game = await get_game_by_app_id(db, app_id)
    if game is None:
        raise GameNotFoundError(app_id)
    return await latest_snapshots(db, game.id, limit)
