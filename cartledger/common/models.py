"""Shared Pydantic data models for cartledger.

These models define the data contracts between the stores, the price
tracker and the CLI. All modules import from here.
"""

from __future__ import annotations

import sqlite3
from enum import Enum

from pydantic import BaseModel, Field


# === Enums ===

class TrackingStatus(str, Enum):
    """Price tracking status of a cart item.

    An absent status (``None``) means the item is not tracked or its
    tracking fields are incomplete.
    """
    TRACKING = "TRACKING"
    TRACKING_UPDATED = "TRACKING_UPDATED"
    BELOW_DESIRED = "BELOW_DESIRED"
    ERROR_FETCHING = "ERROR_FETCHING"
    ERROR_FETCHING_OR_PARSING = "ERROR_FETCHING_OR_PARSING"
    ERROR_ACTION_FAILED = "ERROR_ACTION_FAILED"
    ERROR_CRON_PROCESSING = "ERROR_CRON_PROCESSING"

    @property
    def is_error(self) -> bool:
        return self.value.startswith("ERROR_")


# Statuses picked up by the tracking sweep (plus an absent status).
SWEEP_ELIGIBLE_STATUSES = frozenset({
    TrackingStatus.TRACKING,
    TrackingStatus.TRACKING_UPDATED,
    TrackingStatus.ERROR_FETCHING,
})


# === Cart ===

class CartItem(BaseModel):
    """A shopping-cart entry, optionally tracked for price drops."""
    id: int
    user_id: str
    name: str
    quantity: int = Field(ge=0, default=1)
    estimated_price: float | None = None
    found_price: str | None = Field(default=None, description="Shopping advice text")
    product_url: str | None = None
    desired_price: float | None = None
    current_price: float | None = None
    price_check_status: TrackingStatus | None = None
    last_checked: int | None = Field(default=None, description="Epoch milliseconds")

    @property
    def is_tracking_active(self) -> bool:
        return bool(self.product_url) and self.desired_price is not None

    @property
    def is_sweep_eligible(self) -> bool:
        if not self.product_url:
            return False
        return (
            self.price_check_status is None
            or self.price_check_status in SWEEP_ELIGIBLE_STATUSES
        )

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> CartItem:
        return cls(**dict(row))


class PriceCheckResult(BaseModel):
    """Outcome of one price check for one cart item."""
    item_id: int
    success: bool
    status: TrackingStatus | None = None
    current_price: float | None = None
    last_checked: int | None = None


# === Expenses ===

class Expense(BaseModel):
    """A logged expense."""
    id: int
    user_id: str
    name: str
    amount: float
    category: str
    date: str = Field(description="ISO 8601 date or datetime")
    is_purchased: bool = False
    event_id: int | None = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> Expense:
        data = dict(row)
        data["is_purchased"] = bool(data["is_purchased"])
        return cls(**data)


class NewExpense(BaseModel):
    """Expense fields before insertion (no id, no owner)."""
    name: str = Field(min_length=1)
    amount: float
    category: str = Field(min_length=1)
    date: str
    is_purchased: bool = False
    event_id: int | None = None


class UserSettings(BaseModel):
    """Per-user settings."""
    user_id: str
    total_budget: float | None = Field(default=None, ge=0)


class ExpenseSummary(BaseModel):
    """Aggregated expense figures for charts and budget tracking."""
    total: float = 0.0
    purchased_total: float = 0.0
    unpurchased_total: float = 0.0
    by_category: dict[str, float] = Field(default_factory=dict)
    by_month: dict[str, float] = Field(default_factory=dict)
    total_budget: float | None = None
    remaining_budget: float | None = None
    expense_count: int = 0
