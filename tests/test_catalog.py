"""Catalog and watchlist service tests."""
from datetime import timedelta

import pytest
from sqlalchemy import select

from conftest import NOW, FakeSteamClient, app_details
from steamwatch.jobs import PriceSyncJob
from steamwatch.models import Game, WatchlistEntry
from steamwatch.services import watchlist
from steamwatch.services.catalog import (
    GameNotFoundError,
    get_game,
    get_price_history,
    search_games,
    sync_game,
)


async def test_search_is_case_insensitive_substring(db, make_game, add_snapshot):
    portal = await make_game(620, "Portal 2")
    await make_game(400, "Portal")
    await make_game(570, "Dota 2")
    await add_snapshot(portal, final_price=999)

    hits = await search_games(db, "PORTAL")

    by_app = {game.steam_app_id: snapshot for game, snapshot in hits}
    assert set(by_app) == {620, 400}
    assert by_app[620].final_price == 999
    assert by_app[400] is None


async def test_search_honours_limit(db, make_game):
    for app_id in range(1, 6):
        await make_game(app_id, f"Puzzle {app_id}")

    assert len(await search_games(db, "puzzle", limit=3)) == 3


async def test_search_treats_wildcards_literally(db, make_game):
    await make_game(1, "100% Orange Juice")
    await make_game(2, "Half-Life")

    hits = await search_games(db, "0%")

    assert [game.steam_app_id for game, _ in hits] == [1]


async def test_price_history_is_newest_first_and_bounded(db, make_game, add_snapshot):
    game = await make_game()
    for days_ago, price in ((3, 4000), (2, 3500), (1, 3000), (0, 2500)):
        await add_snapshot(game, final_price=price, recorded_at=NOW - timedelta(days=days_ago))

    history = await get_price_history(db, 620, limit=3)

    assert [s.final_price for s in history] == [2500, 3000, 3500]


async def test_price_history_for_unknown_game_raises(db):
    with pytest.raises(GameNotFoundError):
        await get_price_history(db, 999)


async def test_get_game_fetches_missing_game_from_steam(db):
    client = FakeSteamClient({620: app_details(620, "Portal 2", final=999)})

    game, history = await get_game(db, client, 620)

    assert game.name == "Portal 2"
    assert [s.final_price for s in history] == [999]
    assert client.detail_calls == [(620, "us")]


async def test_get_game_uses_catalog_without_sync(db, make_game):
    await make_game(620, "Portal 2")
    client = FakeSteamClient({})

    game, history = await get_game(db, client, 620)

    assert game.name == "Portal 2"
    assert history == []
    assert client.detail_calls == []


async def test_sync_unknown_game_raises(db):
    with pytest.raises(GameNotFoundError) as excinfo:
        await sync_game(db, FakeSteamClient({620: None}), 620)
    assert excinfo.value.app_id == 620
    assert (await db.execute(select(Game))).scalars().all() == []


async def test_subscribe_requires_known_game(db):
    with pytest.raises(GameNotFoundError):
        await watchlist.subscribe(db, 620, "player@example.com")


async def test_resubscribe_reactivates_and_replaces_thresholds(db, make_game, make_entry):
    game = await make_game()
    existing = await make_entry(game, min_discount_percent=50, is_active=False)
    existing_id = existing.id

    entry = await watchlist.subscribe(db, 620, "player@example.com", target_price=1999)

    assert entry.id == existing_id
    assert entry.is_active is True
    assert entry.min_discount_percent is None
    assert entry.target_price == 1999
    count = len((await db.execute(select(WatchlistEntry))).scalars().all())
    assert count == 1


async def test_status_and_unsubscribe(db, make_game):
    await make_game()
    await watchlist.subscribe(db, 620, "player@example.com", min_discount_percent=30)

    status = await watchlist.get_status(db, 620, "player@example.com")
    assert status.min_discount_percent == 30
    assert await watchlist.get_status(db, 620, "other@example.com") is None

    await watchlist.unsubscribe(db, 620, "player@example.com")
    assert await watchlist.get_status(db, 620, "player@example.com") is None


async def test_unsubscribe_unknown_game_is_noop(db):
    await watchlist.unsubscribe(db, 12345, "player@example.com")


async def test_list_by_email_includes_current_price(db, make_game, add_snapshot, make_entry):
    portal = await make_game(620, "Portal 2")
    dota = await make_game(570, "Dota 2")
    await add_snapshot(portal, final_price=199, discount_percent=80)
    await make_entry(portal)
    await make_entry(dota)
    await make_entry(dota, email="other@example.com")

    rows = await watchlist.list_by_email(db, "player@example.com")

    by_name = {game.name: snapshot for _, game, snapshot in rows}
    assert set(by_name) == {"Portal 2", "Dota 2"}
    assert by_name["Portal 2"].final_price == 199
    assert by_name["Dota 2"] is None


async def test_game_is_stored_under_requested_app_id(db):
    details = app_details(620, "Portal 2", final=999)
    details["steam_appid"] = 621
    client = FakeSteamClient({620: details})

    first, _ = await get_game(db, client, 620)
    second, _ = await get_game(db, client, 620)

    assert first.steam_app_id == 620
    assert second.id == first.id
    assert client.detail_calls == [(620, "us")]


async def test_sync_job_stores_games_under_requested_app_id(db):
    details = app_details(400, "Portal", final=98, initial=979, discount=90)
    details["steam_appid"] = 401

    await PriceSyncJob(db, FakeSteamClient({400: details}), clock=lambda: NOW).run()

    app_ids = (await db.execute(select(Game.steam_app_id))).scalars().all()
    assert app_ids == [400]
