"""SQLAlchemy models."""
from steamwatch.models.game import Game, PriceSnapshot
from steamwatch.models.watchlist import WatchlistEntry
from steamwatch.models.system import JobRun

__all__ = [
    "Game",
    "PriceSnapshot",
    "WatchlistEntry",
    "JobRun",
]
