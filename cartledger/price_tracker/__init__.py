"""Price Tracker Module - periodic price checks for tracked cart items."""

from .checker import PriceChecker
from .extractors import Retailer, detect_retailer, extract_price, parse_price_text
from .fetcher import ScraperApiFetcher
from .sweep import SweepReport, TrackingSweep, run_periodically

__all__ = [
    "PriceChecker",
    "Retailer",
    "ScraperApiFetcher",
    "SweepReport",
    "TrackingSweep",
    "detect_retailer",
    "extract_price",
    "parse_price_text",
    "run_periodically",
]
