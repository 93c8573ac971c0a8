"""Price-drop evaluation and notification job."""
import logging
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import select, update

from steamwatch.jobs.base import BaseJob
from steamwatch.models import Game, PriceSnapshot, WatchlistEntry
from steamwatch.notifications.base import Notifier, PriceDropEmail
from steamwatch.services.catalog import latest_snapshots
from steamwatch.services.price_rules import DEFAULT_COOLDOWN, evaluate_price_drop

logger = logging.getLogger(__name__)

STEAM_STORE_APP_URL = "https://store.steampowered.com/app/{app_id}"


@dataclass(frozen=True)
class PriceDropResult:
    checked: int
    notifications_sent: int
    errors: int
    total: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class WatchTarget:
    """Plain copy of an active entry and its game, detached from the session."""

    entry_id: uuid.UUID
    email: str
    min_discount_percent: int | None
    target_price: int | None
    last_notified_at: datetime | None
    game_id: uuid.UUID
    app_id: int
    game_name: str


class PriceDropJob(BaseJob):
    """Notify watchers of every active entry whose latest prices are worth an email."""

    name = "price_drops"

    def __init__(
        self,
        session,
        notifier: Notifier,
        app_url: str,
        cooldown: timedelta = DEFAULT_COOLDOWN,
        **kwargs,
    ):
        super().__init__(session, **kwargs)
        self.notifier = notifier
        self.app_url = app_url.rstrip("/")
        self.cooldown = cooldown

    async def run(self) -> PriceDropResult:
        await self.start_run()
        checked = 0
        sent = 0
        errors = 0
        total = 0
        error = None
        now = self.clock()

        try:
            targets = await self._load_targets()
            total = len(targets)

            for target in targets:
                checked += 1
                try:
                    snapshots = await latest_snapshots(self.db, target.game_id, 2)
                    current = snapshots[0] if snapshots else None
                    previous = snapshots[1] if len(snapshots) > 1 else None

                    decision = evaluate_price_drop(
                        current,
                        previous,
                        min_discount_percent=target.min_discount_percent,
                        target_price=target.target_price,
                        last_notified_at=target.last_notified_at,
                        now=now,
                        cooldown=self.cooldown,
                    )
                    if decision is None or not decision.notify:
                        continue

                    if await self._notify(target, current, previous):
                        await self._stamp_notified(target.entry_id, now)
                        sent += 1
                        logger.info(
                            f"Sent price drop notification to {target.email} "
                            f"for {target.game_name}: {decision.reason}"
                        )
                    else:
                        errors += 1
                        logger.error(f"Failed to send email to {target.email} for {target.game_name}")

                except Exception as e:
                    await self.db.rollback()
                    logger.error(f"Error checking watchlist entry {target.entry_id}: {e}")
                    errors += 1

        except Exception as e:
            error = str(e)
            logger.error(f"Price drop check failed: {e}", exc_info=True)
            await self.db.rollback()
            raise
        finally:
            await self.complete_run(checked, errors, error)

        return PriceDropResult(checked=checked, notifications_sent=sent, errors=errors, total=total)

    async def _load_targets(self) -> list[WatchTarget]:
        result = await self.db.execute(
            select(WatchlistEntry, Game)
            .join(Game, WatchlistEntry.game_id == Game.id)
            .where(WatchlistEntry.is_active.is_(True))
        )
        return [
            WatchTarget(
                entry_id=entry.id,
                email=entry.email,
                min_discount_percent=entry.min_discount_percent,
                target_price=entry.target_price,
                last_notified_at=entry.last_notified_at,
                game_id=game.id,
                app_id=game.steam_app_id,
                game_name=game.name,
            )
            for entry, game in result.all()
        ]

    async def _notify(self, target: WatchTarget, current: PriceSnapshot, previous: PriceSnapshot | None) -> bool:
        payload = PriceDropEmail(
            game_name=target.game_name,
            game_url=f"{self.app_url}/game/{target.app_id}",
            steam_url=STEAM_STORE_APP_URL.format(app_id=target.app_id),
            current_price=current.final_price,
            currency=current.currency,
            discount_percent=current.discount_percent,
            previous_price=previous.final_price if previous else None,
            target_price=target.target_price,
            min_discount_percent=target.min_discount_percent,
        )
        return await self.notifier.send(target.email, payload)

    async def _stamp_notified(self, entry_id: uuid.UUID, now: datetime):
        await self.db.execute(
            update(WatchlistEntry)
            .where(WatchlistEntry.id == entry_id)
            # updated_at tracks subscriber edits only
            .values(last_notified_at=now, updated_at=WatchlistEntry.updated_at)
        )
        await self.db.commit()
