"""Expenses Module - expense ledger, budget settings, CSV import and summaries."""

from .csv_import import CsvImportError, ImportReport, import_expenses_csv
from .settings import SettingsStore
from .store import ExpenseStore
from .summary import summarize_expenses

__all__ = [
    "CsvImportError",
    "ExpenseStore",
    "ImportReport",
    "SettingsStore",
    "import_expenses_csv",
    "summarize_expenses",
]
