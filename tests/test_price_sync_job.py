"""Price sync job tests."""
from datetime import datetime, timedelta, timezone

import httpx
from sqlalchemy import func, select

from conftest import NOW, FakeSteamClient, app_details
from steamwatch.jobs import PriceSyncJob, PriceSyncResult
from steamwatch.models import Game, JobRun, PriceSnapshot


def make_job(db, client, now=NOW, **kwargs):
    return PriceSyncJob(db, client, clock=lambda: now, **kwargs)


async def snapshot_count(db) -> int:
    return (await db.execute(select(func.count()).select_from(PriceSnapshot))).scalar_one()


async def test_sync_upserts_games_and_records_prices(db):
    client = FakeSteamClient({
        620: app_details(620, "Portal 2", final=199, initial=999, discount=80),
        400: app_details(400, "Portal", final=98, initial=979, discount=90),
    })

    result = await make_job(db, client).run()

    assert result == PriceSyncResult(synced=2, errors=0, total=2)
    games = (await db.execute(select(Game).order_by(Game.steam_app_id))).scalars().all()
    assert [g.name for g in games] == ["Portal", "Portal 2"]
    assert games[1].developers == ["Valve"]
    assert games[1].release_date == "18 Apr, 2011"

    snapshot = (await db.execute(
        select(PriceSnapshot).where(PriceSnapshot.game_id == games[1].id)
    )).scalar_one()
    assert snapshot.initial_price == 999
    assert snapshot.final_price == 199
    assert snapshot.discount_percent == 80
    assert snapshot.is_on_sale is True
    assert snapshot.currency == "USD"


async def test_sync_twice_same_day_records_one_snapshot(db):
    client = FakeSteamClient({620: app_details(620, "Portal 2", final=199, initial=999, discount=80)})

    await make_job(db, client).run()
    second = await make_job(db, client, now=NOW + timedelta(minutes=5)).run()

    assert second == PriceSyncResult(synced=1, errors=0, total=1)
    assert await snapshot_count(db) == 1


async def test_sync_next_day_records_another_snapshot(db):
    client = FakeSteamClient({620: app_details(620, "Portal 2", final=199, initial=999, discount=80)})

    await make_job(db, client).run()
    await make_job(db, client, now=NOW + timedelta(days=1)).run()

    assert await snapshot_count(db) == 2


async def test_sync_updates_existing_game(db, make_game):
    await make_game(620, "Portal 2 (old name)")
    client = FakeSteamClient({620: app_details(620, "Portal 2", final=999)})

    await make_job(db, client).run()

    names = (await db.execute(select(Game.name))).scalars().all()
    assert names == ["Portal 2"]


async def test_missing_details_and_fetch_errors_are_counted(db):
    client = FakeSteamClient({
        1: None,
        2: httpx.ConnectTimeout("timed out"),
        3: app_details(3, "Works", final=500, initial=1000, discount=50),
    })

    result = await make_job(db, client, fetch_concurrency=2).run()

    assert result == PriceSyncResult(synced=1, errors=2, total=3)
    assert await snapshot_count(db) == 1


async def test_game_without_price_is_synced_without_snapshot(db):
    client = FakeSteamClient({570: app_details(570, "Dota 2")})

    result = await make_job(db, client).run()

    assert result == PriceSyncResult(synced=1, errors=0, total=1)
    assert await snapshot_count(db) == 0


async def test_sync_respects_limit_and_region(db):
    client = FakeSteamClient({
        app_id: app_details(app_id, f"Game {app_id}", final=100, initial=200, discount=50)
        for app_id in (10, 20, 30)
    })

    result = await make_job(db, client, limit=2, country_code="br").run()

    assert result.total == 2
    assert sorted(client.detail_calls) == [(10, "br"), (20, "br")]


async def test_sync_run_is_recorded(db):
    client = FakeSteamClient({1: None})

    await make_job(db, client).run()

    run = (await db.execute(select(JobRun).execution_options(populate_existing=True))).scalar_one()
    assert run.job_name == "price_sync"
    assert run.status == "completed"
    assert run.records_processed == 0
    assert run.error_count == 1


async def test_one_snapshot_per_local_day_on_fall_back_day(db, new_york_process_tz):
    client = FakeSteamClient({620: app_details(620, "Portal 2", final=199, initial=999, discount=80)})
    # 23:30 EDT on Oct 31, then 00:30 EDT and 12:00 EST on Nov 1
    evening_before = datetime(2026, 11, 1, 3, 30, tzinfo=timezone.utc)
    after_midnight = datetime(2026, 11, 1, 4, 30, tzinfo=timezone.utc)
    noon = datetime(2026, 11, 1, 17, 0, tzinfo=timezone.utc)

    for now in (evening_before, after_midnight, noon):
        await make_job(db, client, now=now).run()

    assert await snapshot_count(db) == 2


async def test_one_snapshot_per_local_day_on_spring_forward_day(db, new_york_process_tz):
    client = FakeSteamClient({620: app_details(620, "Portal 2", final=199, initial=999, discount=80)})
    # 23:30 EST on Mar 7, then 12:00 EDT on Mar 8
    await make_job(db, client, now=datetime(2026, 3, 8, 4, 30, tzinfo=timezone.utc)).run()
    await make_job(db, client, now=datetime(2026, 3, 8, 16, 0, tzinfo=timezone.utc)).run()

    assert await snapshot_count(db) == 2
