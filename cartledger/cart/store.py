"""Cart item persistence, including the price tracking fields.

Usage:
    store = CartStore(config)
    item_id = store.add_item("user-1", "Kindle", 1, product_url=url, desired_price=9000)
    for item in store.items_for_price_tracking():
        ...
"""

from __future__ import annotations

import logging
import sqlite3

from pydantic import ValidationError

from ..common.config import Config
from ..common.database import get_connection
from ..common.models import CartItem, TrackingStatus

logger = logging.getLogger(__name__)


def _initial_status(
    product_url: str | None, desired_price: float | None
) -> TrackingStatus | None:
    """Tracking is active iff both the URL and the desired price are present."""
    if product_url and desired_price is not None:
        return TrackingStatus.TRACKING
    return None


def resolve_status(
    current_price: float | None,
    desired_price: float | None,
    status: TrackingStatus,
) -> TrackingStatus:
    """Apply the threshold comparison to a checker-computed status.

    A successful read at or below the desired price always becomes
    BELOW_DESIRED; any other successful read becomes TRACKING_UPDATED.
    Failed reads keep the error status they were reported with.
    """
    if current_price is not None:
        if desired_price is not None and current_price <= desired_price:
            return TrackingStatus.BELOW_DESIRED
        return TrackingStatus.TRACKING_UPDATED
    return status


class CartStore:
    """SQLite-backed store for cart items.

    Every tracking write is a single-row update scoped to one item id; no
    item-level locking is done, so concurrent writers to the same item are
    last-write-wins.
    """

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()

    def _connect(self) -> sqlite3.Connection:
        return get_connection(self.config)

    # --- User-facing operations ---

    def add_item(
        self,
        user_id: str,
        name: str,
        quantity: int,
        estimated_price: float | None = None,
        product_url: str | None = None,
        desired_price: float | None = None,
    ) -> int:
        """Add a cart item and return its id.

        Raises:
            ValueError: If the quantity is not a non-negative integer.
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
            raise ValueError(f"Quantity must be a non-negative integer: {quantity!r}")

        status = _initial_status(product_url, desired_price)
        conn = self._connect()
        try:
            cursor = conn.execute(
                """
                INSERT INTO cart_items
                    (user_id, name, estimated_price, quantity, product_url,
                     desired_price, price_check_status)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id,
                    name,
                    estimated_price,
                    quantity,
                    product_url,
                    desired_price,
                    status.value if status else None,
                ),
            )
            conn.commit()
            item_id = cursor.lastrowid
        finally:
            conn.close()

        logger.info("Added cart item %s (%s) for user %s", item_id, name, user_id)
        return item_id  # type: ignore[return-value]

    def update_tracking(
        self,
        user_id: str,
        item_id: int,
        product_url: str | None,
        desired_price: float | None,
    ) -> None:
        """Replace an item's tracking fields and reset its observed price.

        Raises:
            ValueError: If the item does not exist or belongs to another user.
        """
        status = _initial_status(product_url, desired_price)
        conn = self._connect()
        try:
            self._get_owned(conn, user_id, item_id)
            conn.execute(
                """
                UPDATE cart_items
                SET product_url = ?, desired_price = ?, price_check_status = ?,
                    current_price = NULL, last_checked = NULL
                WHERE id = ?
                """,
                (
                    product_url,
                    desired_price,
                    status.value if status else None,
                    item_id,
                ),
            )
            conn.commit()
        finally:
            conn.close()

        logger.info(
            "Updated tracking for cart item %s (status: %s)",
            item_id,
            status.value if status else "none",
        )

    def list_items(self, user_id: str) -> list[CartItem]:
        """List a user's cart items, newest first."""
        conn = self._connect()
        try:
            rows = conn.execute(
                "SELECT * FROM cart_items WHERE user_id = ? ORDER BY id DESC",
                (user_id,),
            ).fetchall()
        finally:
            conn.close()
        return [CartItem.from_row(row) for row in rows]

    def remove_item(self, user_id: str, item_id: int) -> None:
        """Delete a cart item.

        Raises:
            ValueError: If the item does not exist or belongs to another user.
        """
        conn = self._connect()
        try:
            self._get_owned(conn, user_id, item_id)
            conn.execute("DELETE FROM cart_items WHERE id = ?", (item_id,))
            conn.commit()
        finally:
            conn.close()

        logger.info("Removed cart item %s", item_id)

    # --- Lookups ---

    def get_item(self, item_id: int) -> CartItem | None:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT * FROM cart_items WHERE id = ?", (item_id,)
            ).fetchone()
        finally:
            conn.close()
        return CartItem.from_row(row) if row else None

    def find_by_product_url(self, product_url: str) -> list[CartItem]:
        conn = self._connect()
        try:
            rows = conn.execute(
                "SELECT * FROM cart_items WHERE product_url = ?", (product_url,)
            ).fetchall()
        finally:
            conn.close()
        return [CartItem.from_row(row) for row in rows]

    def all_items(self) -> list[CartItem]:
        conn = self._connect()
        try:
            rows = conn.execute("SELECT * FROM cart_items").fetchall()
        finally:
            conn.close()
        return [CartItem.from_row(row) for row in rows]

    def items_for_price_tracking(self) -> list[CartItem]:
        """Items the tracking sweep should check.

        An item qualifies when it has a product URL and its status is
        TRACKING, TRACKING_UPDATED, ERROR_FETCHING or absent. Items in any
        other error status stay out until their tracking fields are edited.
        Rows that do not load as a CartItem are logged and left out.
        """
        conn = self._connect()
        try:
            rows = conn.execute("SELECT * FROM cart_items").fetchall()
        finally:
            conn.close()

        items = []
        for row in rows:
            try:
                item = CartItem.from_row(row)
            except ValidationError as exc:
                logger.error("Skipping unreadable cart item %s: %s", row["id"], exc)
                continue
            if item.is_sweep_eligible:
                items.append(item)
        return items

    # --- Internal writes ---

    def update_price_details(
        self,
        item_id: int,
        current_price: float | None,
        status: TrackingStatus,
        last_checked: int,
    ) -> TrackingStatus | None:
        """Persist the outcome of one price check.

        Args:
            item_id: Cart item id.
            current_price: Observed price, or None when the read failed.
            status: Status computed by the caller.
            last_checked: Check time in epoch milliseconds.

        Returns:
            The status actually stored, or None if the item no longer exists.
        """
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT desired_price FROM cart_items WHERE id = ?", (item_id,)
            ).fetchone()
            if row is None:
                logger.error("Cart item %s not found while saving price details", item_id)
                return None

            final_status = resolve_status(current_price, row["desired_price"], status)
            conn.execute(
                """
                UPDATE cart_items
                SET current_price = ?, price_check_status = ?, last_checked = ?
                WHERE id = ?
                """,
                (current_price, final_status.value, last_checked, item_id),
            )
            conn.commit()
        finally:
            conn.close()

        logger.debug(
            "Saved price details for cart item %s: price=%s status=%s",
            item_id,
            current_price,
            final_status.value,
        )
        return final_status

    def update_price_suggestion(self, item_id: int, suggestion: str) -> None:
        conn = self._connect()
        try:
            conn.execute(
                "UPDATE cart_items SET found_price = ? WHERE id = ?",
                (suggestion, item_id),
            )
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _get_owned(conn: sqlite3.Connection, user_id: str, item_id: int) -> sqlite3.Row:
        row = conn.execute(
            "SELECT * FROM cart_items WHERE id = ?", (item_id,)
        ).fetchone()
        if row is None or row["user_id"] != user_id:
            raise ValueError(f"Cart item not found or user not authorized: {item_id}")
        return row
