"""Scheduled batch jobs."""
from steamwatch.jobs.price_drops import PriceDropJob, PriceDropResult
from steamwatch.jobs.sync_prices import PriceSyncJob, PriceSyncResult

__all__ = [
    "PriceDropJob",
    "PriceDropResult",
    "PriceSyncJob",
    "PriceSyncResult",
]
