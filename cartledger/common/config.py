"""Configuration management for cartledger.

Values come from environment variables (a project-root ``.env`` is loaded
first) and may be overridden by ``config/settings.yaml``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# === Paths ===
PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONFIG_DIR = PROJECT_ROOT / "config"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")


@dataclass
class Config:
    """Central configuration loaded from environment variables."""

    # Database
    database_path: str = field(
        default_factory=lambda: os.getenv("DATABASE_PATH", "data/cartledger.db")
    )

    # Page fetch provider (ScraperAPI)
    scraper_api_key: str = field(
        default_factory=lambda: os.getenv("SCRAPER_API_KEY", "")
    )
    scraper_api_url: str = "http://api.scraperapi.com"
    scraper_country_code: str = "in"
    request_timeout: int = 70

    # Text-suggestion provider (OpenAI-compatible)
    openai_api_key: str = field(
        default_factory=lambda: os.getenv("OPENAI_API_KEY", "")
    )
    openai_base_url: str = field(
        default_factory=lambda: os.getenv("OPENAI_BASE_URL", "")
    )
    suggestion_model: str = "gpt-4o-mini"
    suggestion_max_tokens: int = 70

    # Tracking sweep
    sweep_interval_hours: float = 6.0

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    def __post_init__(self) -> None:
        """Load overrides from environment."""
        if url := os.getenv("SCRAPER_API_URL"):
            self.scraper_api_url = url
        if country := os.getenv("SCRAPER_COUNTRY_CODE"):
            self.scraper_country_code = country
        if timeout := os.getenv("REQUEST_TIMEOUT"):
            self.request_timeout = int(timeout)
        if model := os.getenv("SUGGESTION_MODEL"):
            self.suggestion_model = model
        if hours := os.getenv("SWEEP_INTERVAL_HOURS"):
            self.sweep_interval_hours = float(hours)

    @classmethod
    def load(cls, path: Path | None = None) -> Config:
        """Build a Config, applying ``config/settings.yaml`` on top if present."""
        config = cls()
        settings_path = path or CONFIG_DIR / "settings.yaml"
        if not settings_path.exists():
            return config

        with open(settings_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        known = {f.name for f in fields(cls)}
        for key, value in data.items():
            if key not in known:
                logger.warning("Ignoring unknown setting %r in %s", key, settings_path)
                continue
            setattr(config, key, value)
        return config

    @property
    def database_abs_path(self) -> Path:
        """Resolve database path relative to project root."""
        p = Path(self.database_path)
        if p.is_absolute():
            return p
        return PROJECT_ROOT / p

    @property
    def sweep_interval_seconds(self) -> float:
        return self.sweep_interval_hours * 3600
