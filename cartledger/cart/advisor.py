"""LLM-generated shopping tips for cart items.

Uses an OpenAI-compatible chat completion endpoint to suggest where and
when to look for the best price on Amazon or Flipkart. Provider failures
never propagate: a fixed fallback tip is returned instead.
"""

from __future__ import annotations

import logging

from ..common.config import Config
from .store import CartStore

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful shopping assistant. For the given item, provide a concise "
    "suggestion on how to find the best price, focusing on checking Amazon and "
    "Flipkart. If possible, mention any common deal patterns or specific sections "
    "to check on these sites for the item type. For example: 'Check Amazon's daily "
    "deals or Flipkart's Big Billion Days for electronics. Compare prices between "
    "sellers.' or 'For books, look at used options on Amazon or compare with "
    "Flipkart's listed price during sale events.' Keep the suggestion to 1-2 sentences."
)

EMPTY_SUGGESTION_FALLBACK = (
    "Could not fetch a specific suggestion for Amazon/Flipkart at this time. "
    "Try checking both sites directly."
)
ERROR_SUGGESTION_FALLBACK = (
    "Error fetching suggestion. Please check Amazon/Flipkart manually."
)


def build_user_prompt(item_name: str) -> str:
    return (
        f'Where can I find the best price for "{item_name}", '
        "specifically on Amazon or Flipkart?"
    )


class ShoppingAdvisor:
    """Suggest how to find the best price for an item.

    Usage:
        advisor = ShoppingAdvisor(config)
        tip = advisor.suggest("Noise cancelling headphones")
    """

    def __init__(self, config: Config | None = None, client=None) -> None:
        self.config = config or Config()
        self._client = client

    def _get_client(self):
        """Lazy-initialize the OpenAI client."""
        if self._client is None:
            from openai import OpenAI

            self._client = OpenAI(
                api_key=self.config.openai_api_key,
                base_url=self.config.openai_base_url or None,
            )
        return self._client

    def suggest(self, item_name: str) -> str:
        """Return a short shopping tip, or a fallback string on failure."""
        try:
            client = self._get_client()
            response = client.chat.completions.create(
                model=self.config.suggestion_model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_user_prompt(item_name)},
                ],
                max_tokens=self.config.suggestion_max_tokens,
            )
        except Exception:
            logger.exception("Error fetching price suggestion for '%s'", item_name)
            return ERROR_SUGGESTION_FALLBACK

        content = ""
        if response.choices:
            content = (response.choices[0].message.content or "").strip()
        return content or EMPTY_SUGGESTION_FALLBACK

    def find_best_prices_for_item(
        self, store: CartStore, item_id: int, item_name: str
    ) -> str:
        """Generate a tip for a cart item and save it on the item."""
        suggestion = self.suggest(item_name)
        store.update_price_suggestion(item_id, suggestion)
        logger.info("Saved shopping tip for cart item %s", item_id)
        return suggestion
