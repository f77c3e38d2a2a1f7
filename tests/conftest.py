"""Shared test fixtures for cartledger."""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Ensure the package is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from cartledger.cart.store import CartStore
from cartledger.common.config import Config
from cartledger.common.database import get_connection, init_db


AMAZON_WHOLE_FRACTION_HTML = (
    '<div id="corePrice"><span class="a-price-whole">1,234</span>'
    '<span class="a-price-fraction">56</span></div>'
)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def temp_db(tmp_path):
    """Provide a Config pointing to a temporary SQLite database."""
    db_file = tmp_path / "test_cartledger.db"
    config = Config(
        database_path=str(db_file),
        scraper_api_key="test-key",
        openai_api_key="test-openai-key",
    )
    init_db(config)
    return config


@pytest.fixture
def db_conn(temp_db):
    """Provide an initialized SQLite connection from temp_db."""
    conn = get_connection(temp_db)
    yield conn
    conn.close()


@pytest.fixture
def cart_store(temp_db) -> CartStore:
    return CartStore(temp_db)


@pytest.fixture
def fake_fetcher() -> MagicMock:
    """A page fetcher whose markup is set per test via ``return_value``."""
    fetcher = MagicMock()
    fetcher.fetch.return_value = AMAZON_WHOLE_FRACTION_HTML
    return fetcher


@pytest.fixture
def fixed_clock():
    return lambda: 1_700_000_000_000
