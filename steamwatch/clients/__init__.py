"""External API clients."""
from steamwatch.clients.steam import PriceQuote, SaleItem, SteamStoreClient

__all__ = [
    "PriceQuote",
    "SaleItem",
    "SteamStoreClient",
]
