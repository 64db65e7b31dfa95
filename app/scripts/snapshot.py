# app/scripts/snapshot.py
from __future__ import annotations

import argparse
import asyncio
import json
from typing import List, Optional

from app.config.log import configure_logging
from app.models.market import AssetRecord
from app.services.dashboard import DashboardController, DashboardStatus
from app.services.formatting import (
    format_large_number,
    format_percentage,
    format_price,
    format_rank,
)


def format_line(asset: AssetRecord) -> str:
    return " | ".join(
        [
            f"{format_rank(asset.market_cap_rank):>5}",
            f"{asset.name} ({asset.symbol.upper()})",
            f"${format_price(asset.current_price)}",
            f"cap ${format_large_number(asset.market_cap)}",
            f"vol ${format_large_number(asset.total_volume)}",
            f"1h {format_percentage(asset.price_change_percentage_1h)}",
            f"24h {format_percentage(asset.price_change_percentage_24h)}",
            f"7d {format_percentage(asset.price_change_percentage_7d)}",
        ]
    )


async def run_snapshot(controller: DashboardController, search: Optional[str], as_json: bool) -> int:
    await controller.refresh()
    if search:
        controller.set_search_term(search)

    view = controller.snapshot()
    if view.status is DashboardStatus.ERROR:
        print("Failed to load cryptocurrency data.")
        return 1

    if as_json:
        print(json.dumps(view.to_dict(), indent=2))
        return 0

    if not view.assets:
        print("No cryptocurrencies found matching your search.")
        return 0

    for asset in view.assets:
        print(format_line(asset))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Fetch one market snapshot and print it.")
    parser.add_argument("--search", default=None, help="Filter by name or symbol (case-insensitive).")
    parser.add_argument("--json", action="store_true", help="Print the dashboard view as JSON.")
    args = parser.parse_args(argv)
    configure_logging()

    return asyncio.run(run_snapshot(DashboardController(), args.search, args.json))


if __name__ == "__main__":
    raise SystemExit(main())
