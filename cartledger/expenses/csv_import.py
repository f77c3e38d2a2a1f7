"""Bulk expense import from CSV.

Expected headers: ``name, amount, category, date, isPurchased``. Header
names are trimmed. Rows that fail validation are skipped and logged with
every reason found; valid rows are inserted in chunks.
"""

from __future__ import annotations

import csv
import io
import logging
import math
import re
from dataclasses import dataclass, field
from datetime import datetime

from pydantic import ValidationError

from ..common.models import NewExpense
from .store import ExpenseStore

logger = logging.getLogger(__name__)

EXPECTED_HEADERS = ("name", "amount", "category", "date", "isPurchased")

_DATE_FORMATS = (
    "%Y.%m.%d",
    "%Y%m%d",
    "%d/%m/%Y",
    "%m/%d/%Y",
    "%d-%m-%Y",
    "%d %b %Y",
    "%b %d, %Y",
)


class CsvImportError(ValueError):
    """The CSV text could not be read at all."""


@dataclass
class ImportReport:
    """Result of one CSV import."""

    added: int = 0
    skipped: list[tuple[int, str]] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.added:
            return f"Successfully processed and added {self.added} expenses from the CSV."
        if self.skipped:
            return (
                "No valid expenses found in the CSV file after validation. "
                f"Expected columns: {', '.join(EXPECTED_HEADERS)}; amount must be "
                "numeric, isPurchased must be true/false and date a recognizable date."
            )
        return "No data rows found in the CSV file."


def parse_amount(value: str | None) -> float | None:
    """Parse an amount, tolerating currency symbols and grouping separators."""
    if value is None:
        return None
    try:
        amount = float(value.strip())
    except ValueError:
        cleaned = re.sub(r"[^0-9.\-]+", "", value)
        try:
            amount = float(cleaned)
        except ValueError:
            return None
    return amount if math.isfinite(amount) else None


def parse_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def parse_date(value: str | None) -> str | None:
    """Parse a date in one of the common formats to an ISO 8601 string."""
    if not value or not value.strip():
        return None
    text = value.strip()
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        parsed = None
        for fmt in _DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return None
    if parsed.time() == datetime.min.time() and parsed.tzinfo is None:
        return parsed.date().isoformat()
    return parsed.isoformat()


def validate_row(row: dict[str, str | None]) -> tuple[NewExpense | None, str]:
    """Validate one CSV row.

    Returns:
        (expense, "") for a valid row, (None, reasons) otherwise.
    """
    reasons: list[str] = []

    name = (row.get("name") or "").strip()
    if not name:
        reasons.append("Field 'name' is missing or empty.")

    category = (row.get("category") or "").strip()
    if not category:
        reasons.append("Field 'category' is missing or empty.")

    amount = parse_amount(row.get("amount"))
    if amount is None:
        reasons.append(f"Field 'amount' ({row.get('amount')!r}) is not a number.")

    is_purchased = parse_bool(row.get("isPurchased"))
    if is_purchased is None:
        reasons.append(
            f"Field 'isPurchased' ({row.get('isPurchased')!r}) is not 'true' or 'false'."
        )

    raw_date = row.get("date")
    date_text = parse_date(raw_date)
    if not raw_date:
        reasons.append("Field 'date' is missing.")
    elif date_text is None:
        reasons.append(f"Field 'date' ({raw_date!r}) is not a valid date.")

    if reasons:
        return None, " ".join(reasons)

    try:
        expense = NewExpense(
            name=name,
            amount=amount,
            category=category,
            date=date_text,
            is_purchased=is_purchased,
        )
    except ValidationError as exc:
        return None, str(exc)
    return expense, ""


def read_rows(csv_text: str) -> list[dict[str, str | None]]:
    """Read CSV text into dict rows with trimmed headers, dropping blank lines."""
    try:
        reader = csv.DictReader(io.StringIO(csv_text))
        if reader.fieldnames:
            reader.fieldnames = [h.strip() for h in reader.fieldnames]
        rows = list(reader)
    except csv.Error as exc:
        raise CsvImportError(f"Error parsing CSV: {exc}") from exc

    return [
        row for row in rows
        if any((value or "").strip() for key, value in row.items() if key is not None)
    ]


def import_expenses_csv(
    store: ExpenseStore,
    user_id: str,
    csv_text: str,
    chunk_size: int = 500,
) -> ImportReport:
    """Validate CSV rows and add the valid ones as expenses for a user."""
    report = ImportReport()
    rows = read_rows(csv_text)
    if not rows:
        logger.info("No data rows found in the CSV file")
        return report

    valid: list[NewExpense] = []
    for row_number, row in enumerate(rows, start=1):
        expense, reason = validate_row(row)
        if expense is None:
            logger.warning("Row %d: Skipped. Reasons: %s | Row: %s", row_number, reason, row)
            report.skipped.append((row_number, reason))
            continue
        valid.append(expense)

    for start in range(0, len(valid), chunk_size):
        report.added += store.batch_add(user_id, valid[start:start + chunk_size])

    logger.info(
        "CSV import for user %s: %d added, %d skipped",
        user_id,
        report.added,
        len(report.skipped),
    )
    return report
