"""Per-user settings (currently the total budget)."""

from __future__ import annotations

import logging
import math

from ..common.config import Config
from ..common.database import get_connection
from ..common.models import UserSettings

logger = logging.getLogger(__name__)


class SettingsStore:
    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()

    def get_settings(self, user_id: str) -> UserSettings | None:
        conn = get_connection(self.config)
        try:
            row = conn.execute(
                "SELECT user_id, total_budget FROM user_settings WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        finally:
            conn.close()
        return UserSettings(**dict(row)) if row else None

    def update_budget(self, user_id: str, total_budget: float | None) -> None:
        """Set or clear (``None``) the user's total budget.

        Raises:
            ValueError: If the budget is negative or not a finite number.
        """
        if total_budget is not None and (
            not math.isfinite(total_budget) or total_budget < 0
        ):
            raise ValueError(f"Budget must be a non-negative number: {total_budget}")

        conn = get_connection(self.config)
        try:
            conn.execute(
                """
                INSERT INTO user_settings (user_id, total_budget) VALUES (?, ?)
                ON CONFLICT(user_id) DO UPDATE SET total_budget = excluded.total_budget
                """,
                (user_id, total_budget),
            )
            conn.commit()
        finally:
            conn.close()

        logger.info("Updated budget for user %s: %s", user_id, total_budget)
