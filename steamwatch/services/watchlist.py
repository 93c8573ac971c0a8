"""Watchlist subscriptions keyed by (email, game)."""
import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from steamwatch.models import Game, PriceSnapshot, WatchlistEntry
from steamwatch.services.catalog import GameNotFoundError, get_game_by_app_id, latest_snapshots
from steamwatch.timeutils import utcnow

logger = logging.getLogger(__name__)


async def _require_game(db: AsyncSession, app_id: int) -> Game:
    game = await get_game_by_app_id(db, app_id)
    if game is None:
        raise GameNotFoundError(app_id)
    return game


async def subscribe(
    db: AsyncSession,
    app_id: int,
    email: str,
    min_discount_percent: int | None = None,
    target_price: int | None = None,
) -> WatchlistEntry:
    """Watch a game. Re-subscribing reactivates the entry and replaces its thresholds."""
    game = await _require_game(db, app_id)

    result = await db.execute(
        select(WatchlistEntry)
        .where(WatchlistEntry.email == email)
        .where(WatchlistEntry.game_id == game.id)
    )
    entry = result.scalar_one_or_none()

    if entry is None:
        entry = WatchlistEntry(
            email=email,
            game_id=game.id,
            min_discount_percent=min_discount_percent,
            target_price=target_price,
            is_active=True,
        )
        db.add(entry)
        logger.info(f"{email} started watching {game.name}")
    else:
        entry.min_discount_percent = min_discount_percent
        entry.target_price = target_price
        entry.is_active = True
        entry.updated_at = utcnow()

    await db.commit()
    return entry


async def unsubscribe(db: AsyncSession, app_id: int, email: str) -> None:
    """Remove the subscription, if any."""
    game = await get_game_by_app_id(db, app_id)
    if game is None:
        return

    await db.execute(
        delete(WatchlistEntry)
        .where(WatchlistEntry.email == email)
        .where(WatchlistEntry.game_id == game.id)
    )
    await db.commit()


async def get_status(db: AsyncSession, app_id: int, email: str) -> WatchlistEntry | None:
    """Active subscription of ``email`` to a game, if any."""
    game = await _require_game(db, app_id)
    result = await db.execute(
        select(WatchlistEntry)
        .where(WatchlistEntry.email == email)
        .where(WatchlistEntry.game_id == game.id)
        .where(WatchlistEntry.is_active.is_(True))
    )
    return result.scalar_one_or_none()


async def list_by_email(
    db: AsyncSession,
    email: str,
) -> list[tuple[WatchlistEntry, Game, PriceSnapshot | None]]:
    """All active subscriptions of an email, newest first, with current prices."""
    result = await db.execute(
        select(WatchlistEntry, Game)
        .join(Game, WatchlistEntry.game_id == Game.id)
        .where(WatchlistEntry.email == email)
        .where(WatchlistEntry.is_active.is_(True))
        .order_by(WatchlistEntry.created_at.desc())
    )

    rows = []
    for entry, game in result.all():
        snapshots = await latest_snapshots(db, game.id, 1)
        rows.append((entry, game, snapshots[0] if snapshots else None))
    return rows
