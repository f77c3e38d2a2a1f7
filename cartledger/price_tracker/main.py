"""CLI entry point for the price tracker module.

Usage:
    # Create the database schema:
    python -m cartledger.price_tracker.main init-db

    # Run the tracking sweep every SWEEP_INTERVAL_HOURS (default 6):
    python -m cartledger.price_tracker.main sweep

    # Run a single sweep and exit:
    python -m cartledger.price_tracker.main sweep --once

    # Check one cart item now:
    python -m cartledger.price_tracker.main check 42

    # Ask the LLM for a shopping tip for one cart item:
    python -m cartledger.price_tracker.main suggest 42
"""

from __future__ import annotations

import argparse
import json
import sys

from ..cart.advisor import ShoppingAdvisor
from ..cart.store import CartStore
from ..common.config import Config
from ..common.database import init_db
from ..common.logging import setup_logging
from .checker import PriceChecker
from .fetcher import ScraperApiFetcher
from .sweep import TrackingSweep, run_periodically

logger = setup_logging(module_name="cartledger")


def _run_sweep(config: Config, *, once: bool) -> None:
    store = CartStore(config)
    with ScraperApiFetcher(config) as fetcher:
        sweep = TrackingSweep(store, PriceChecker(store, fetcher))
        if once:
            report = sweep.run()
            print(json.dumps(report.to_dict()))
            return
        logger.info(
            "Tracking sweep scheduled every %.1f hours", config.sweep_interval_hours
        )
        run_periodically(sweep, config.sweep_interval_seconds)


def _run_check(config: Config, item_id: int) -> int:
    store = CartStore(config)
    item = store.get_item(item_id)
    if item is None:
        logger.error("Cart item %s not found", item_id)
        return 1
    if not item.product_url:
        logger.error("Cart item %s has no product URL to check", item_id)
        return 1

    with ScraperApiFetcher(config) as fetcher:
        result = PriceChecker(store, fetcher).check(item.id, item.product_url)

    print(result.model_dump_json(indent=2))
    return 0 if result.success else 1


def _run_suggest(config: Config, item_id: int) -> int:
    store = CartStore(config)
    item = store.get_item(item_id)
    if item is None:
        logger.error("Cart item %s not found", item_id)
        return 1

    suggestion = ShoppingAdvisor(config).find_best_prices_for_item(
        store, item.id, item.name
    )
    print(suggestion)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Cart price tracker")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create the database schema")

    sweep_parser = subparsers.add_parser("sweep", help="Check all tracked items")
    sweep_parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single sweep instead of looping",
    )

    check_parser = subparsers.add_parser("check", help="Check one item's price now")
    check_parser.add_argument("item_id", type=int)

    suggest_parser = subparsers.add_parser("suggest", help="Get a shopping tip")
    suggest_parser.add_argument("item_id", type=int)

    args = parser.parse_args(argv)

    config = Config.load()
    setup_logging(config.log_level)
    init_db(config)

    if args.command == "sweep":
        _run_sweep(config, once=args.once)
    elif args.command == "check":
        return _run_check(config, args.item_id)
    elif args.command == "suggest":
        return _run_suggest(config, args.item_id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
