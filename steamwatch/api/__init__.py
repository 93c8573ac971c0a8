"""API routes."""
from steamwatch.api.cron import router as cron_router
from steamwatch.api.games import router as games_router
from steamwatch.api.watchlist import router as watchlist_router

__all__ = [
    "cron_router",
    "games_router",
    "watchlist_router",
]
