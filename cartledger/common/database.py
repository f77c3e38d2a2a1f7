"""SQLite database utilities for cartledger.

Provides connection management and table initialization.
All stores use this for data persistence.
"""

from __future__ import annotations

import logging
import sqlite3

from .config import Config

logger = logging.getLogger(__name__)

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS events (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    budget REAL NOT NULL,
    organizer_id TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_events_organizer
    ON events(organizer_id);

CREATE TABLE IF NOT EXISTS expenses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    name TEXT NOT NULL,
    amount REAL NOT NULL,
    category TEXT NOT NULL,
    date TEXT NOT NULL,
    is_purchased INTEGER NOT NULL DEFAULT 0,
    event_id INTEGER,
    FOREIGN KEY (event_id) REFERENCES events(id)
);

CREATE INDEX IF NOT EXISTS idx_expenses_user
    ON expenses(user_id);

CREATE TABLE IF NOT EXISTS cart_items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    name TEXT NOT NULL,
    estimated_price REAL,
    quantity INTEGER NOT NULL DEFAULT 1,
    found_price TEXT,
    product_url TEXT,
    desired_price REAL,
    current_price REAL,
    price_check_status TEXT,
    last_checked INTEGER
);

CREATE INDEX IF NOT EXISTS idx_cart_items_user
    ON cart_items(user_id);

CREATE INDEX IF NOT EXISTS idx_cart_items_product_url
    ON cart_items(product_url);

CREATE TABLE IF NOT EXISTS user_settings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL UNIQUE,
    total_budget REAL
);
"""


def get_connection(config: Config | None = None) -> sqlite3.Connection:
    """Get a SQLite connection with row factory enabled.

    Args:
        config: Optional Config. Uses defaults if not provided.

    Returns:
        sqlite3.Connection with Row factory.
    """
    config = config or Config()
    db_path = config.database_abs_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def init_db(config: Config | None = None) -> None:
    """Initialize database schema (idempotent).

    Args:
        config: Optional Config. Uses defaults if not provided.
    """
    config = config or Config()
    conn = get_connection(config)
    try:
        conn.executescript(_SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema initialized at %s", config.database_abs_path)
    finally:
        conn.close()
