"""Per-item price check: fetch, extract, persist.

Used both by the scheduled tracking sweep and by the manual
"check price now" command.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Protocol

from ..cart.store import CartStore
from ..common.models import PriceCheckResult, TrackingStatus
from .extractors import extract_price

logger = logging.getLogger(__name__)


class PageFetcher(Protocol):
    def fetch(self, product_url: str) -> str | None: ...


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


class PriceChecker:
    """Check the price of one tracked cart item and record the outcome.

    Every call to :meth:`check` writes to the store exactly once, success
    or failure, so the item's ``last_checked`` always advances.
    """

    def __init__(
        self,
        store: CartStore,
        fetcher: PageFetcher,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.store = store
        self.fetcher = fetcher
        self.clock = clock

    def read_price(self, product_url: str) -> tuple[float | None, TrackingStatus]:
        """Fetch and extract the price, mapping each failure to its status."""
        html = self.fetcher.fetch(product_url)
        if html is None:
            return None, TrackingStatus.ERROR_FETCHING

        price = extract_price(html, product_url)
        if price is None:
            return None, TrackingStatus.ERROR_FETCHING_OR_PARSING

        return price, TrackingStatus.TRACKING_UPDATED

    def check(self, item_id: int, product_url: str) -> PriceCheckResult:
        """Run one price check for a cart item.

        Args:
            item_id: Cart item id.
            product_url: Product page URL to scrape.

        Returns:
            PriceCheckResult with the status the store persisted.
            ``success`` is False only if the item no longer exists.
        """
        current_price: float | None = None
        try:
            current_price, status = self.read_price(product_url)
        except Exception:
            logger.exception("Price check failed for item %s (%s)", item_id, product_url)
            current_price, status = None, TrackingStatus.ERROR_ACTION_FAILED

        last_checked = self.clock()
        final_status = self.store.update_price_details(
            item_id, current_price, status, last_checked
        )

        return PriceCheckResult(
            item_id=item_id,
            success=final_status is not None,
            status=final_status,
            current_price=current_price,
            last_checked=last_checked,
        )
