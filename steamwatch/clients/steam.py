"""Steam Store API client.

Public endpoints, no authentication required:

- ``/api/appdetails?appids={id}&cc={region}``
- ``/api/featuredcategories``
"""
import asyncio
import logging
from dataclasses import asdict, dataclass, replace
from typing import Any

import httpx
from cachetools import TTLCache

logger = logging.getLogger(__name__)

# 5-minute cache for the featured categories payload
featured_cache: TTLCache = TTLCache(maxsize=1, ttl=300)


@dataclass(slots=True)
class PriceQuote:
    """Normalized price for one app in one region, in minor units."""

    currency: str
    initial_price: int
    final_price: int
    discount_percent: int

    @property
    def is_on_sale(self) -> bool:
        return self.discount_percent > 0


@dataclass(slots=True)
class SaleItem:
    """A discounted game from the featured categories."""

    app_id: int
    name: str
    discount_percent: int
    original_price: int
    final_price: int
    currency: str
    header_image: str | None = None
    large_capsule_image: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class SteamStoreClient:
    """Thin async wrapper around the Steam Store API."""

    STORE_BASE = "https://store.steampowered.com/api"
    GAME_TYPE = 0  # featuredcategories item type for games

    def __init__(self, timeout: float = 30.0, client: httpx.AsyncClient | None = None):
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        await self.client.aclose()

    async def fetch_json(self, url: str, **kwargs) -> Any | None:
        """Fetch JSON from URL, returning None on any transport or decode error."""
        try:
            response = await self.client.get(url, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            logger.error(f"HTTP error fetching {url}: {e}")
            return None
        except ValueError as e:
            logger.error(f"Invalid JSON from {url}: {e}")
            return None

    async def get_app_details(self, app_id: int, country_code: str = "us") -> dict[str, Any] | None:
        """Get detailed info for a specific app, priced for ``country_code``."""
        data = await self.fetch_json(
            f"{self.STORE_BASE}/appdetails",
            params={"appids": app_id, "cc": country_code},
        )

        if not isinstance(data, dict):
            return None

        app_data = data.get(str(app_id))
        if not app_data or not app_data.get("success") or not app_data.get("data"):
            logger.warning(f"No app details for {app_id} ({country_code})")
            return None

        return app_data["data"]

    async def get_featured_categories(self) -> dict[str, Any] | None:
        """Get specials, top sellers and coming soon lists."""
        if "featured" in featured_cache:
            return featured_cache["featured"]

        data = await self.fetch_json(f"{self.STORE_BASE}/featuredcategories")
        if not isinstance(data, dict):
            return None

        featured_cache["featured"] = data
        return data

    async def fetch_snapshot(self, app_id: int, country_code: str = "us") -> PriceQuote | None:
        """Current price for an app, or None when unavailable or free."""
        details = await self.get_app_details(app_id, country_code)
        if details is None:
            return None
        return price_quote_from_details(details)

    async def get_popular_games_on_sale(self, limit: int = 50, country_code: str | None = None) -> list[SaleItem]:
        """Discounted games from specials and top sellers, biggest discount first.

        When a non-US region is requested, each game is re-priced from that
        region's app details; games whose lookup fails keep the featured price.
        """
        categories = await self.get_featured_categories()
        if not categories:
            return []

        games: list[SaleItem] = []
        seen: set[int] = set()
        for key in ("specials", "top_sellers"):
            for item in (categories.get(key) or {}).get("items", []):
                if not item.get("discounted") or item.get("type") != self.GAME_TYPE:
                    continue
                if item.get("id") in seen:
                    continue
                seen.add(item["id"])
                games.append(
                    SaleItem(
                        app_id=item["id"],
                        name=item.get("name", ""),
                        discount_percent=item.get("discount_percent", 0),
                        original_price=item.get("original_price", 0),
                        final_price=item.get("final_price", 0),
                        currency=item.get("currency", "USD"),
                        header_image=item.get("header_image"),
                        large_capsule_image=item.get("large_capsule_image"),
                    )
                )

        if country_code and country_code.lower() != "us":
            games = await asyncio.gather(
                *(self._reprice(game, country_code) for game in games[:limit])
            )

        games = sorted(games, key=lambda g: g.discount_percent, reverse=True)
        return list(games[:limit])

    async def _reprice(self, game: SaleItem, country_code: str) -> SaleItem:
        quote = await self.fetch_snapshot(game.app_id, country_code)
        if quote is None:
            return game
        return replace(
            game,
            original_price=quote.initial_price,
            final_price=quote.final_price,
            discount_percent=quote.discount_percent,
            currency=quote.currency,
        )


def price_quote_from_details(details: dict[str, Any]) -> PriceQuote | None:
    """Extract the ``price_overview`` block of an appdetails payload."""
    overview = details.get("price_overview")
    if not overview:
        return None
    return PriceQuote(
        currency=overview["currency"],
        initial_price=int(overview["initial"]),
        final_price=int(overview["final"]),
        discount_percent=int(overview.get("discount_percent") or 0),
    )
