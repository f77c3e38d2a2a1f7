"""Tests for shared common modules: models, database, config, logging."""

import io
import logging
import sqlite3

import pytest

from cartledger.common.config import Config, PROJECT_ROOT
from cartledger.common.database import get_connection, init_db
from cartledger.common.logging import resolve_level, setup_logging
from cartledger.common.models import (
    CartItem,
    Expense,
    SWEEP_ELIGIBLE_STATUSES,
    TrackingStatus,
    UserSettings,
)


class TestTrackingStatus:
    def test_values_round_trip_from_strings(self):
        assert TrackingStatus("BELOW_DESIRED") is TrackingStatus.BELOW_DESIRED

    def test_error_statuses(self):
        errors = {s for s in TrackingStatus if s.is_error}
        assert errors == {
            TrackingStatus.ERROR_FETCHING,
            TrackingStatus.ERROR_FETCHING_OR_PARSING,
            TrackingStatus.ERROR_ACTION_FAILED,
            TrackingStatus.ERROR_CRON_PROCESSING,
        }

    def test_sweep_eligible_statuses(self):
        assert SWEEP_ELIGIBLE_STATUSES == {
            TrackingStatus.TRACKING,
            TrackingStatus.TRACKING_UPDATED,
            TrackingStatus.ERROR_FETCHING,
        }

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError):
            TrackingStatus("MANUAL_CHECK_NEEDED")


class TestCartItem:
    def _item(self, **kwargs) -> CartItem:
        data = {"id": 1, "user_id": "u1", "name": "Kettle"}
        data.update(kwargs)
        return CartItem(**data)

    def test_tracking_active_needs_url_and_desired_price(self):
        assert self._item(product_url="https://www.amazon.in/x", desired_price=100).is_tracking_active
        assert not self._item(product_url="https://www.amazon.in/x").is_tracking_active
        assert not self._item(desired_price=100).is_tracking_active

    def test_zero_desired_price_still_counts(self):
        assert self._item(product_url="https://www.amazon.in/x", desired_price=0).is_tracking_active

    @pytest.mark.parametrize("status", [
        None,
        TrackingStatus.TRACKING,
        TrackingStatus.TRACKING_UPDATED,
        TrackingStatus.ERROR_FETCHING,
    ])
    def test_eligible(self, status):
        item = self._item(product_url="https://www.amazon.in/x", price_check_status=status)
        assert item.is_sweep_eligible

    @pytest.mark.parametrize("status", [
        TrackingStatus.BELOW_DESIRED,
        TrackingStatus.ERROR_FETCHING_OR_PARSING,
        TrackingStatus.ERROR_ACTION_FAILED,
        TrackingStatus.ERROR_CRON_PROCESSING,
    ])
    def test_not_eligible(self, status):
        item = self._item(product_url="https://www.amazon.in/x", price_check_status=status)
        assert not item.is_sweep_eligible

    def test_no_url_never_eligible(self):
        assert not self._item(price_check_status=TrackingStatus.TRACKING).is_sweep_eligible
        assert not self._item(product_url="").is_sweep_eligible


class TestExpenseAndSettings:
    def test_expense_from_row_converts_purchased_flag(self, db_conn):
        db_conn.execute(
            "INSERT INTO expenses (user_id, name, amount, category, date, is_purchased) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            ("u1", "Rent", 12000, "Housing", "2026-01-01", 1),
        )
        db_conn.commit()
        row = db_conn.execute("SELECT * FROM expenses").fetchone()
        expense = Expense.from_row(row)
        assert expense.is_purchased is True
        assert expense.amount == 12000

    def test_negative_budget_rejected(self):
        with pytest.raises(Exception):
            UserSettings(user_id="u1", total_budget=-1)


class TestDatabase:
    def test_init_creates_tables(self, db_conn):
        tables = {
            row["name"]
            for row in db_conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table'"
            ).fetchall()
        }
        assert {"cart_items", "expenses", "user_settings", "events"} <= tables

    def test_init_creates_cart_indices(self, db_conn):
        indices = {
            row["name"]
            for row in db_conn.execute(
                "SELECT name FROM sqlite_master WHERE type='index'"
            ).fetchall()
        }
        assert "idx_cart_items_user" in indices
        assert "idx_cart_items_product_url" in indices

    def test_init_is_idempotent(self, temp_db):
        init_db(temp_db)
        init_db(temp_db)

    def test_foreign_keys_enabled(self, db_conn):
        row = db_conn.execute("PRAGMA foreign_keys").fetchone()
        assert row[0] == 1

    def test_wal_mode(self, db_conn):
        row = db_conn.execute("PRAGMA journal_mode").fetchone()
        assert row[0] == "wal"

    def test_user_settings_unique_per_user(self, db_conn):
        db_conn.execute("INSERT INTO user_settings (user_id, total_budget) VALUES ('u1', 10)")
        db_conn.commit()
        with pytest.raises(sqlite3.IntegrityError):
            db_conn.execute("INSERT INTO user_settings (user_id, total_budget) VALUES ('u1', 20)")


class TestConfig:
    def test_relative_database_path_resolves_to_project_root(self):
        config = Config(database_path="data/x.db")
        assert config.database_abs_path == PROJECT_ROOT / "data" / "x.db"

    def test_absolute_database_path_kept(self, tmp_path):
        config = Config(database_path=str(tmp_path / "y.db"))
        assert config.database_abs_path == tmp_path / "y.db"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("SCRAPER_COUNTRY_CODE", "us")
        monkeypatch.setenv("SWEEP_INTERVAL_HOURS", "2")
        config = Config()
        assert config.scraper_country_code == "us"
        assert config.sweep_interval_seconds == 7200

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("SWEEP_INTERVAL_HOURS", raising=False)
        monkeypatch.delenv("SCRAPER_API_URL", raising=False)
        config = Config()
        assert config.sweep_interval_hours == 6.0
        assert config.scraper_api_url == "http://api.scraperapi.com"
        assert config.suggestion_max_tokens == 70

    def test_load_yaml_overrides(self, tmp_path):
        settings = tmp_path / "settings.yaml"
        settings.write_text(
            "scraper_country_code: uk\nsuggestion_model: gpt-4o\nunknown_key: 1\n",
            encoding="utf-8",
        )
        config = Config.load(settings)
        assert config.scraper_country_code == "uk"
        assert config.suggestion_model == "gpt-4o"
        assert not hasattr(config, "unknown_key")

    def test_load_without_file_uses_defaults(self, tmp_path):
        config = Config.load(tmp_path / "missing.yaml")
        assert isinstance(config, Config)

    def test_get_connection_uses_row_factory(self, temp_db):
        conn = get_connection(temp_db)
        try:
            row = conn.execute("SELECT 1 AS one").fetchone()
            assert row["one"] == 1
        finally:
            conn.close()

    def test_log_level_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert Config().log_level == "debug"


class TestLogging:
    def test_resolve_level(self):
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level(" WARNING ") == logging.WARNING
        assert resolve_level(logging.ERROR) == logging.ERROR
        with pytest.raises(ValueError, match="Unknown log level"):
            resolve_level("loud")

    def test_single_handler_and_level_update(self):
        stream = io.StringIO()
        logger = setup_logging("INFO", module_name="cartledger.test_setup", stream=stream)
        try:
            setup_logging("WARNING", module_name="cartledger.test_setup", stream=stream)
            assert len(logger.handlers) == 1
            assert logger.level == logging.WARNING

            logger.info("hidden")
            logger.warning("shown")
            output = stream.getvalue()
            assert "hidden" not in output
            assert "[WARNING] cartledger.test_setup: shown" in output
        finally:
            for handler in list(logger.handlers):
                logger.removeHandler(handler)

    def test_defaults_to_stderr(self, capsys):
        logger = setup_logging(module_name="cartledger.test_stderr")
        try:
            logger.error("to stderr")
            captured = capsys.readouterr()
            assert "to stderr" in captured.err
            assert "to stderr" not in captured.out
        finally:
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
