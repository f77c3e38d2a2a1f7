"""Scheduled tracking sweep over every eligible cart item.

The sweep processes items one at a time. A failure on one item is
recorded as ERROR_CRON_PROCESSING on that item and never stops the rest
of the sweep.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from ..cart.store import CartStore
from ..common.models import TrackingStatus
from .checker import PriceChecker, now_ms

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    """Counts from one sweep, for logging."""

    checked: int = 0
    failed: list[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"checked": self.checked, "failed": list(self.failed)}


class TrackingSweep:
    """Run the price checker over all items eligible for tracking."""

    def __init__(
        self,
        store: CartStore,
        checker: PriceChecker,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.store = store
        self.checker = checker
        self.clock = clock

    def run(self) -> SweepReport:
        logger.info("Starting tracking sweep")
        report = SweepReport()
        items = self.store.items_for_price_tracking()

        if not items:
            logger.info("No items currently marked for price tracking")
            return report

        logger.info("Found %d items to check", len(items))

        for item in items:
            if not item.product_url:
                continue
            try:
                self.checker.check(item.id, item.product_url)
                report.checked += 1
            except Exception:
                logger.exception("Error processing item %s (%s)", item.id, item.name)
                report.failed.append(item.id)
                self._mark_failed(item.id)

        logger.info(
            "Finished tracking sweep: %d checked, %d failed",
            report.checked,
            len(report.failed),
        )
        return report

    def _mark_failed(self, item_id: int) -> None:
        try:
            self.store.update_price_details(
                item_id, None, TrackingStatus.ERROR_CRON_PROCESSING, self.clock()
            )
        except Exception:
            logger.exception("Could not record sweep failure for item %s", item_id)


def run_periodically(
    sweep: TrackingSweep,
    interval_seconds: float,
    max_runs: int | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Run the sweep on a fixed interval.

    Args:
        sweep: Sweep to run.
        interval_seconds: Pause between the start of consecutive sweeps.
        max_runs: Stop after this many sweeps (None runs forever).
        sleep: Sleep function, replaceable in tests.

    Returns:
        Number of sweeps run.
    """
    runs = 0
    while max_runs is None or runs < max_runs:
        started = time.monotonic()
        try:
            sweep.run()
        except Exception:
            logger.exception("Tracking sweep aborted")
        runs += 1

        if max_runs is not None and runs >= max_runs:
            break

        remaining = max(0.0, interval_seconds - (time.monotonic() - started))
        logger.info("Next tracking sweep in %.1f minutes", remaining / 60)
        sleep(remaining)
    return runs
