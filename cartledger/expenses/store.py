"""Expense persistence."""

from __future__ import annotations

import logging
import sqlite3
from typing import Iterable

from ..common.config import Config
from ..common.database import get_connection
from ..common.models import Expense, NewExpense

logger = logging.getLogger(__name__)

_INSERT_EXPENSE_SQL = """
INSERT INTO expenses (user_id, name, amount, category, date, is_purchased, event_id)
VALUES (?, ?, ?, ?, ?, ?, ?)
"""


def _expense_params(user_id: str, expense: NewExpense) -> tuple:
    return (
        user_id,
        expense.name,
        expense.amount,
        expense.category,
        expense.date,
        int(expense.is_purchased),
        expense.event_id,
    )


class ExpenseStore:
    """SQLite-backed store for a user's expenses."""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()

    def _connect(self) -> sqlite3.Connection:
        return get_connection(self.config)

    def add_expense(self, user_id: str, expense: NewExpense) -> int:
        conn = self._connect()
        try:
            cursor = conn.execute(_INSERT_EXPENSE_SQL, _expense_params(user_id, expense))
            conn.commit()
            return cursor.lastrowid  # type: ignore[return-value]
        finally:
            conn.close()

    def batch_add(self, user_id: str, expenses: Iterable[NewExpense]) -> int:
        """Insert many expenses in one transaction, returning the count."""
        params = [_expense_params(user_id, e) for e in expenses]
        conn = self._connect()
        try:
            conn.executemany(_INSERT_EXPENSE_SQL, params)
            conn.commit()
        finally:
            conn.close()

        logger.info("Inserted %d expenses for user %s", len(params), user_id)
        return len(params)

    def list_expenses(self, user_id: str) -> list[Expense]:
        """List a user's expenses, newest first."""
        conn = self._connect()
        try:
            rows = conn.execute(
                "SELECT * FROM expenses WHERE user_id = ? ORDER BY id DESC",
                (user_id,),
            ).fetchall()
        finally:
            conn.close()
        return [Expense.from_row(row) for row in rows]

    def list_unpurchased(self, user_id: str) -> list[Expense]:
        conn = self._connect()
        try:
            rows = conn.execute(
                """
                SELECT * FROM expenses
                WHERE user_id = ? AND is_purchased = 0
                ORDER BY id DESC
                """,
                (user_id,),
            ).fetchall()
        finally:
            conn.close()
        return [Expense.from_row(row) for row in rows]

    def delete_expense(self, user_id: str, expense_id: int) -> None:
        """Delete an expense.

        Raises:
            ValueError: If the expense does not exist or belongs to another user.
        """
        conn = self._connect()
        try:
            self._get_owned(conn, user_id, expense_id)
            conn.execute("DELETE FROM expenses WHERE id = ?", (expense_id,))
            conn.commit()
        finally:
            conn.close()

    def set_purchased(self, user_id: str, expense_id: int, is_purchased: bool) -> None:
        conn = self._connect()
        try:
            self._get_owned(conn, user_id, expense_id)
            conn.execute(
                "UPDATE expenses SET is_purchased = ? WHERE id = ?",
                (int(is_purchased), expense_id),
            )
            conn.commit()
        finally:
            conn.close()

    def move_to_cart(self, user_id: str, expense_id: int) -> int:
        """Turn an unpurchased expense into a cart item.

        The expense amount becomes the item's estimated price and the
        quantity is 1. Both writes happen in one transaction.

        Returns:
            The new cart item id.

        Raises:
            ValueError: If the expense is missing, not owned, or already purchased.
        """
        conn = self._connect()
        try:
            row = self._get_owned(conn, user_id, expense_id)
            if row["is_purchased"]:
                raise ValueError("Cannot move a purchased expense to cart.")

            cursor = conn.execute(
                """
                INSERT INTO cart_items (user_id, name, estimated_price, quantity)
                VALUES (?, ?, ?, 1)
                """,
                (user_id, row["name"], row["amount"]),
            )
            conn.execute("DELETE FROM expenses WHERE id = ?", (expense_id,))
            conn.commit()
            cart_item_id = cursor.lastrowid
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

        logger.info("Moved expense %s (%s) to cart item %s", expense_id, row["name"], cart_item_id)
        return cart_item_id  # type: ignore[return-value]

    @staticmethod
    def _get_owned(conn: sqlite3.Connection, user_id: str, expense_id: int) -> sqlite3.Row:
        row = conn.execute(
            "SELECT * FROM expenses WHERE id = ?", (expense_id,)
        ).fetchone()
        if row is None or row["user_id"] != user_id:
            raise ValueError(f"Expense not found or user not authorized: {expense_id}")
        return row
