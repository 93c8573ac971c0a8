"""Daily price sync for popular games on sale."""
import asyncio
import logging
from dataclasses import asdict, dataclass
from typing import Any

from steamwatch.clients.steam import SteamStoreClient
from steamwatch.jobs.base import BaseJob
from steamwatch.services.catalog import store_app_details

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceSyncResult:
    synced: int
    errors: int
    total: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class PriceSyncJob(BaseJob):
    """Upsert popular on-sale games and append one price snapshot per game per day."""

    name = "price_sync"

    def __init__(
        self,
        session,
        client: SteamStoreClient,
        limit: int = 100,
        country_code: str = "us",
        fetch_concurrency: int = 4,
        **kwargs,
    ):
        super().__init__(session, **kwargs)
        self.client = client
        self.limit = limit
        self.country_code = country_code
        self.fetch_concurrency = max(1, fetch_concurrency)

    async def run(self) -> PriceSyncResult:
        await self.start_run()
        synced = 0
        errors = 0
        total = 0
        error = None

        try:
            games = await self.client.get_popular_games_on_sale(self.limit)
            total = len(games)
            logger.info(f"Syncing prices for {total} games on sale")

            app_ids = [game.app_id for game in games]
            fetched = await self._fetch_details(app_ids)

            # Writes stay serial on the one session
            for app_id, details in zip(app_ids, fetched):
                if isinstance(details, Exception):
                    logger.error(f"Error fetching game {app_id}: {details}")
                    errors += 1
                    continue
                if details is None:
                    errors += 1
                    continue

                try:
                    await store_app_details(self.db, details, self.clock(), app_id=app_id)
                    await self.db.commit()
                    synced += 1
                except Exception as e:
                    await self.db.rollback()
                    logger.error(f"Error syncing game {app_id}: {e}")
                    errors += 1

        except Exception as e:
            error = str(e)
            logger.error(f"Price sync failed: {e}", exc_info=True)
            await self.db.rollback()
            raise
        finally:
            await self.complete_run(synced, errors, error)

        return PriceSyncResult(synced=synced, errors=errors, total=total)

    async def _fetch_details(self, app_ids: list[int]) -> list[Any]:
        """Fetch app details concurrently; failures come back as exceptions in place."""
        semaphore = asyncio.Semaphore(self.fetch_concurrency)

        async def fetch(app_id: int):
            async with semaphore:
                return await self.client.get_app_details(app_id, self.country_code)

        return await asyncio.gather(*(fetch(app_id) for app_id in app_ids), return_exceptions=True)
