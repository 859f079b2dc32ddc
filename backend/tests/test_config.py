# backend/tests/test_config.py
"""
Tests for Settings validation.
"""

import pytest
from pydantic import ValidationError

from portfolio_tracker.config import Settings


class TestSettings:
    """Environment-dependent validation."""

    def test_test_environment_defaults(self):
        s = Settings(environment="test", database_url=None, scheduler_enabled=True)

        assert s.database_url == "sqlite:///:memory:"
        assert s.is_sqlite
        assert s.scheduler_enabled is False

    def test_quote_and_snapshot_defaults(self):
        s = Settings(environment="test")

        assert s.quote_timeout_seconds == 10
        assert s.quote_max_redirects == 5
        assert s.snapshot_schedule == "17:00 America/Chicago"

    def test_database_url_required_outside_test(self):
        with pytest.raises(ValidationError, match="DATABASE_URL"):
            Settings(environment="development", database_url=None)

    def test_production_requires_postgres(self):
        with pytest.raises(ValidationError, match="PostgreSQL"):
            Settings(environment="production", database_url="sqlite:///./p.db")

    def test_production_accepts_postgres(self):
        s = Settings(environment="production", database_url="postgresql://u:p@db:5432/portfolio")

        assert not s.is_sqlite

    def test_development_sqlite_warns(self):
        with pytest.warns(UserWarning, match="SQLite"):
            Settings(environment="development", database_url="sqlite:///./dev.db")

    def test_unknown_timezone_rejected(self):
        with pytest.raises(ValidationError, match="SNAPSHOT_TIMEZONE"):
            Settings(environment="test", snapshot_timezone="Mars/Olympus")

    @pytest.mark.parametrize("field,value", [
        ("snapshot_hour", 24),
        ("snapshot_minute", -1),
        ("quote_max_workers", 0),
        ("quote_timeout_seconds", 0),
    ])
    def test_out_of_range_values(self, field, value):
        with pytest.raises(ValidationError):
            Settings(environment="test", **{field: value})
