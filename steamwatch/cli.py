"""Command-line entry point for running the jobs once.

    python -m steamwatch sync-prices
    python -m steamwatch check-price-drops
"""
import argparse
import asyncio
import json
import logging

from steamwatch.database import init_db
from steamwatch.scheduler import check_price_drops, sync_prices

JOBS = {
    "sync-prices": sync_prices,
    "check-price-drops": check_price_drops,
}


async def run_job(name: str) -> dict:
    await init_db()
    result = await JOBS[name]()
    return {"success": True, **result.to_dict()}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="steamwatch", description="Run a steamwatch job once.")
    parser.add_argument("job", choices=sorted(JOBS))
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    summary = asyncio.run(run_job(args.job))
    print(json.dumps(summary))
    return 0
