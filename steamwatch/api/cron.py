"""Scheduled job triggers.

Meant to be hit by an external scheduler (cron, CI, a hosted cron service).
Overlapping invocations are not guarded against here.
"""
import logging
from datetime import timedelta

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from steamwatch.api.auth import verify_cron_secret
from steamwatch.api.deps import get_notifier, get_steam_client
from steamwatch.clients.steam import SteamStoreClient
from steamwatch.config import Settings, get_settings
from steamwatch.database import get_session
from steamwatch.jobs import PriceDropJob, PriceSyncJob
from steamwatch.notifications.base import Notifier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cron", tags=["cron"], dependencies=[Depends(verify_cron_secret)])


@router.api_route("/sync-prices", methods=["GET", "POST"])
async def sync_prices(
    db: AsyncSession = Depends(get_session),
    client: SteamStoreClient = Depends(get_steam_client),
    settings: Settings = Depends(get_settings),
):
    """Sync today's prices for popular games on sale."""
    job = PriceSyncJob(
        db,
        client,
        limit=settings.sync_limit,
        country_code=settings.steam_default_country,
        fetch_concurrency=settings.sync_fetch_concurrency,
    )
    try:
        result = await job.run()
    except Exception as e:
        logger.error(f"Error in sync-prices cron: {e}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    return {"success": True, **result.to_dict()}


@router.api_route("/check-price-drops", methods=["GET", "POST"])
async def check_price_drops(
    db: AsyncSession = Depends(get_session),
    notifier: Notifier = Depends(get_notifier),
    settings: Settings = Depends(get_settings),
):
    """Email watchers whose games just dropped in price."""
    job = PriceDropJob(
        db,
        notifier,
        app_url=settings.app_url,
        cooldown=timedelta(hours=settings.notification_cooldown_hours),
    )
    try:
        result = await job.run()
    except Exception as e:
        logger.error(f"Error in check-price-drops cron: {e}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    return {"success": True, **result.to_dict()}
