"""CLI entry point for the expenses module.

Usage:
    python -m cartledger.expenses.main import-csv user-1 data/expenses.csv
    python -m cartledger.expenses.main summary user-1
    python -m cartledger.expenses.main set-budget user-1 50000
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from ..common.config import Config
from ..common.database import init_db
from ..common.logging import setup_logging
from .csv_import import CsvImportError, import_expenses_csv
from .settings import SettingsStore
from .store import ExpenseStore
from .summary import summarize_expenses

logger = setup_logging(module_name="cartledger")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Expense ledger")
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import-csv", help="Import expenses from CSV")
    import_parser.add_argument("user_id")
    import_parser.add_argument("path", type=Path)

    summary_parser = subparsers.add_parser("summary", help="Print expense summary")
    summary_parser.add_argument("user_id")

    budget_parser = subparsers.add_parser("set-budget", help="Set or clear the budget")
    budget_parser.add_argument("user_id")
    budget_parser.add_argument(
        "amount",
        nargs="?",
        type=float,
        help="Total budget (omit to clear)",
    )

    args = parser.parse_args(argv)

    config = Config.load()
    setup_logging(config.log_level)
    init_db(config)

    if args.command == "import-csv":
        try:
            report = import_expenses_csv(
                ExpenseStore(config),
                args.user_id,
                args.path.read_text(encoding="utf-8"),
            )
        except CsvImportError as exc:
            logger.error("%s", exc)
            return 1
        print(report.message)
        return 0 if report.added else 1

    if args.command == "summary":
        settings = SettingsStore(config).get_settings(args.user_id)
        summary = summarize_expenses(
            ExpenseStore(config).list_expenses(args.user_id),
            settings.total_budget if settings else None,
        )
        print(summary.model_dump_json(indent=2))
        return 0

    if args.command == "set-budget":
        try:
            SettingsStore(config).update_budget(args.user_id, args.amount)
        except ValueError as exc:
            logger.error("%s", exc)
            return 1
        return 0

    return 0


if __name__ == "__main__":
    sys.exit(main())
