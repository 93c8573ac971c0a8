"""Optional in-process scheduler for the price jobs.

Disabled unless ``SCHEDULER_ENABLED`` is set; an external cron hitting
``/api/cron/*`` is the default trigger.
"""
import logging
from datetime import timedelta

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from steamwatch.clients.steam import SteamStoreClient
from steamwatch.config import get_settings
from steamwatch.database import async_session_maker
from steamwatch.jobs import PriceDropJob, PriceDropResult, PriceSyncJob, PriceSyncResult
from steamwatch.notifications.email import ResendNotifier

logger = logging.getLogger(__name__)
settings = get_settings()

scheduler = AsyncIOScheduler()


async def sync_prices() -> PriceSyncResult:
    """Scheduled job: record today's prices for popular games on sale."""
    logger.info("Starting scheduled price sync")
    async with async_session_maker() as session:
        async with SteamStoreClient(timeout=settings.http_timeout_seconds) as client:
            job = PriceSyncJob(
                session,
                client,
                limit=settings.sync_limit,
                country_code=settings.steam_default_country,
                fetch_concurrency=settings.sync_fetch_concurrency,
            )
            return await job.run()


async def check_price_drops() -> PriceDropResult:
    """Scheduled job: notify watchers of price drops."""
    logger.info("Starting scheduled price drop check")
    async with async_session_maker() as session:
        async with ResendNotifier(
            api_key=settings.resend_api_key,
            sender=settings.email_from,
            timeout=settings.http_timeout_seconds,
        ) as notifier:
            job = PriceDropJob(
                session,
                notifier,
                app_url=settings.app_url,
                cooldown=timedelta(hours=settings.notification_cooldown_hours),
            )
            return await job.run()


def start_scheduler():
    """Start the background scheduler if enabled."""
    if not settings.scheduler_enabled:
        logger.info("Scheduler disabled; waiting for external cron triggers")
        return

    scheduler.add_job(
        sync_prices,
        trigger=IntervalTrigger(hours=settings.sync_interval_hours),
        id="sync_prices",
        name="Sync Prices",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    scheduler.add_job(
        check_price_drops,
        trigger=IntervalTrigger(hours=settings.price_drop_interval_hours),
        id="check_price_drops",
        name="Check Price Drops",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    scheduler.start()
    logger.info("Scheduler started with jobs: sync_prices, check_price_drops")


def stop_scheduler():
    """Stop the scheduler."""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler stopped")
