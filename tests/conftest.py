"""Shared fixtures: in-memory database, fake Steam client, recording notifier."""
import time
from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from steamwatch.clients.steam import SaleItem, featured_cache
from steamwatch.database import Base
from steamwatch.models import Game, PriceSnapshot, WatchlistEntry
from steamwatch.notifications.base import Notifier, PriceDropEmail

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def new_york_process_tz(monkeypatch):
    """Run the test with the process timezone set to America/New_York."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture(autouse=True)
def clear_featured_cache():
    featured_cache.clear()
    yield
    featured_cache.clear()


@pytest.fixture
def make_game(db):
    async def _make_game(app_id: int = 620, name: str = "Portal 2") -> Game:
        game = Game(steam_app_id=app_id, name=name, type="game")
        db.add(game)
        await db.commit()
        return game

    return _make_game


@pytest.fixture
def add_snapshot(db):
    async def _add_snapshot(
        game: Game,
        final_price: int,
        discount_percent: int | None = 0,
        recorded_at: datetime = NOW,
        initial_price: int | None = None,
        currency: str = "USD",
    ) -> PriceSnapshot:
        snapshot = PriceSnapshot(
            game_id=game.id,
            currency=currency,
            initial_price=initial_price if initial_price is not None else final_price,
            final_price=final_price,
            discount_percent=discount_percent,
            is_on_sale=bool(discount_percent),
            recorded_at=recorded_at,
        )
        db.add(snapshot)
        await db.commit()
        return snapshot

    return _add_snapshot


@pytest.fixture
def make_entry(db):
    async def _make_entry(
        game: Game,
        email: str = "player@example.com",
        min_discount_percent: int | None = None,
        target_price: int | None = None,
        last_notified_at: datetime | None = None,
        is_active: bool = True,
    ) -> WatchlistEntry:
        entry = WatchlistEntry(
            email=email,
            game_id=game.id,
            min_discount_percent=min_discount_percent,
            target_price=target_price,
            last_notified_at=last_notified_at,
            is_active=is_active,
        )
        db.add(entry)
        await db.commit()
        return entry

    return _make_entry


class RecordingNotifier(Notifier):
    def __init__(self, result: bool = True, fail_for: set[str] | None = None) -> None:
        self.result = result
        self.fail_for = fail_for or set()
        self.sent: list[tuple[str, PriceDropEmail]] = []

    async def send(self, to: str, payload: PriceDropEmail) -> bool:
        if to in self.fail_for:
            raise RuntimeError(f"mailbox unavailable: {to}")
        self.sent.append((to, payload))
        return self.result


def app_details(
    app_id: int,
    name: str,
    final: int | None = None,
    initial: int | None = None,
    discount: int = 0,
    currency: str = "USD",
) -> dict:
    """Minimal appdetails ``data`` block."""
    details = {
        "type": "game",
        "name": name,
        "steam_appid": app_id,
        "header_image": f"https://cdn.example.com/{app_id}/header.jpg",
        "developers": ["Valve"],
        "publishers": ["Valve"],
        "release_date": {"coming_soon": False, "date": "18 Apr, 2011"},
        "genres": [{"id": "1", "description": "Action"}],
        "short_description": f"{name} description",
    }
    if final is not None:
        details["price_overview"] = {
            "currency": currency,
            "initial": initial if initial is not None else final,
            "final": final,
            "discount_percent": discount,
        }
    return details


class FakeSteamClient:
    """Stands in for SteamStoreClient with canned responses."""

    def __init__(self, details: dict[int, dict | None | Exception]) -> None:
        self.details = details
        self.detail_calls: list[tuple[int, str]] = []

    async def get_popular_games_on_sale(self, limit: int = 50, country_code: str | None = None) -> list[SaleItem]:
        items = [
            SaleItem(
                app_id=app_id,
                name=f"Game {app_id}",
                discount_percent=50,
                original_price=2000,
                final_price=1000,
                currency="USD",
            )
            for app_id in self.details
        ]
        return items[:limit]

    async def get_app_details(self, app_id: int, country_code: str = "us") -> dict | None:
        self.detail_calls.append((app_id, country_code))
        value = self.details.get(app_id)
        if isinstance(value, Exception):
            raise value
        return value
