"""Retailer-specific price extraction from raw product page markup.

Each retailer maps to an ordered list of regex patterns. Patterns are tried
in order and the first match wins, so more specific markup shapes come
before generic ones. No HTML parse tree is built.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class Retailer(str, Enum):
    """Supported retailers, valued by the URL fragment that identifies them."""
    AMAZON_IN = "amazon.in"
    FLIPKART = "flipkart.com"


@dataclass(frozen=True)
class PricePattern:
    """A markup matcher paired with the decoder that turns its match into price text."""

    name: str
    regex: re.Pattern[str]
    decode: Callable[[re.Match[str]], str | None]

    def search(self, html: str) -> re.Match[str] | None:
        return self.regex.search(html)


def _single_group(match: re.Match[str]) -> str | None:
    return match.group(1) or None


def _whole_and_fraction(match: re.Match[str]) -> str | None:
    whole, fraction = match.group(1), match.group(2)
    if whole and fraction:
        return f"{whole}.{fraction}"
    return None


def _pattern(name: str, regex: str, decode=_single_group) -> PricePattern:
    return PricePattern(name, re.compile(regex, re.IGNORECASE), decode)


RETAILER_PATTERNS: dict[Retailer, tuple[PricePattern, ...]] = {
    Retailer.AMAZON_IN: (
        _pattern(
            "whole_fraction",
            r'<span[^>]*class="a-price-whole"[^>]*>([\d,]+)</span>\s*'
            r'<span[^>]*class="a-price-fraction"[^>]*>(\d+)</span>',
            _whole_and_fraction,
        ),
        _pattern(
            "offscreen",
            r'<span[^>]*class="a-offscreen"[^>]*>₹\s*([\d,]+(?:\.\d{2})?)</span>',
        ),
        _pattern(
            "priceblock_ourprice",
            r'id="priceblock_ourprice"[^>]*>₹\s*([\d,]+(?:\.\d{2})?)<',
        ),
        _pattern(
            "priceblock_dealprice",
            r'id="priceblock_dealprice"[^>]*>₹\s*([\d,]+(?:\.\d{2})?)<',
        ),
        _pattern(
            "xl_price_block",
            r'<span[^>]*data-a-size="xl"[^>]*>\s*'
            r'<span[^>]*class="a-price-symbol"[^>]*>₹</span>\s*'
            r'<span[^>]*class="a-price-whole"[^>]*>([\d,]+(?:\.\d{0,2})?)</span>\s*</span>',
        ),
    ),
    Retailer.FLIPKART: (
        _pattern(
            "price_div",
            r'<div[^>]*class="_30jeq3 _16Jk6d"[^>]*>₹\s*([\d,]+(?:\.\d{2})?)</div>',
        ),
        _pattern(
            "price_div_2024",
            r'<div[^>]*class="Nx9bqj CxhGGd"[^>]*>₹\s*([\d,]+(?:\.\d{2})?)</div>',
        ),
    ),
}


def detect_retailer(url: str) -> Retailer | None:
    """Identify the retailer from a product URL by substring match."""
    for retailer in Retailer:
        if retailer.value in url:
            return retailer
    return None


def parse_price_text(text: str) -> float | None:
    """Parse a matched price string like ``"1,234.56"`` into a number.

    Grouping commas are removed first. Returns None if the remainder is
    not numeric.
    """
    cleaned = text.replace(",", "").strip()
    try:
        return float(cleaned)
    except ValueError:
        return None


def find_price_text(html: str, retailer: Retailer) -> str | None:
    """Return the price text from the first pattern that matches, if any."""
    for pattern in RETAILER_PATTERNS.get(retailer, ()):
        match = pattern.search(html)
        if not match:
            continue
        text = pattern.decode(match)
        if text:
            logger.debug("Price text %r matched by %s/%s", text, retailer.name, pattern.name)
            return text
    return None


def extract_price(html: str, url: str) -> float | None:
    """Extract the product price from page markup.

    Args:
        html: Raw page markup.
        url: Product page URL, used to pick the retailer pattern set.

    Returns:
        The parsed price, or None if the retailer is unknown, no pattern
        matched, or the matched text is not numeric.
    """
    retailer = detect_retailer(url)
    if retailer is None:
        logger.warning("No price patterns for retailer of %s", url)
        return None

    text = find_price_text(html, retailer)
    if text is None:
        logger.warning(
            "Price pattern not found in HTML for %s. Check the page markup.", url
        )
        return None

    price = parse_price_text(text)
    if price is None:
        logger.warning("Could not parse price string %r to number for %s", text, url)
        return None

    logger.info("Parsed price for %s: %s", url, price)
    return price
