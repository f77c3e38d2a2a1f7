"""Product page fetcher backed by the ScraperAPI proxy service.

A failed fetch is terminal for the invocation: there is no retry and
no backoff. Every failure is logged and reported as ``None``.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

import requests

from ..common.config import Config

logger = logging.getLogger(__name__)

# Amount of an error response body kept in the logs.
_ERROR_BODY_LOG_CHARS = 500


class ScraperApiFetcher:
    """Fetch raw product page markup through ScraperAPI.

    Usage:
        with ScraperApiFetcher(config) as fetcher:
            html = fetcher.fetch("https://www.amazon.in/dp/B0XXXXXXX")
    """

    def __init__(
        self,
        config: Config | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config or Config()
        self._session = session or requests.Session()

    def build_request_url(self, product_url: str) -> str:
        """Build the proxied request URL for a product page."""
        return (
            f"{self.config.scraper_api_url}"
            f"?api_key={self.config.scraper_api_key}"
            f"&url={quote(product_url, safe='')}"
            f"&country_code={self.config.scraper_country_code}"
        )

    def fetch(self, product_url: str) -> str | None:
        """Return the page markup, or None if it could not be fetched."""
        if not product_url:
            logger.warning("Empty product URL, nothing to fetch")
            return None

        if not self.config.scraper_api_key:
            logger.error("SCRAPER_API_KEY is not set; cannot fetch %s", product_url)
            return None

        logger.info("Fetching URL via ScraperAPI: %s", product_url)
        try:
            resp = self._session.get(
                self.build_request_url(product_url),
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as exc:
            logger.error("ScraperAPI request error for %s: %s", product_url, exc)
            return None

        if not 200 <= resp.status_code < 300:
            logger.error(
                "ScraperAPI request failed for %s with status: %s %s",
                product_url,
                resp.status_code,
                resp.reason,
            )
            logger.error(
                "ScraperAPI error body: %s", resp.text[:_ERROR_BODY_LOG_CHARS]
            )
            return None

        logger.debug("Received %d characters for %s", len(resp.text), product_url)
        return resp.text

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()

    def __enter__(self) -> ScraperApiFetcher:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
