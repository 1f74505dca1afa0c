"""
Unit tests for application settings and logging setup.
"""

import logging
import pytest
from pathlib import Path
from zoneinfo import ZoneInfo

import structlog
from pydantic import ValidationError

from rnba_admin.core.config import Settings, get_settings
from rnba_admin.core.logging import configure_logging


class TestSettings:
    """Test Settings validation and derived properties."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.DASHBOARD_CACHE_TTL_SECONDS == 300
        assert settings.REGISTRATIONS_CACHE_TTL_SECONDS == 1800
        assert settings.VISITOR_DATA_CACHE_TTL_SECONDS == 300
        assert settings.REFERENCE_DATA_CACHE_TTL_SECONDS == 86400
        assert settings.DEFAULT_EVENT_ID == 2024
        assert settings.SUPABASE_SCHEMA == "test_schema"

    def test_placeholder_credentials_not_configured(self):
        settings = Settings(
            _env_file=None,
            SUPABASE_URL="https://your-project.supabase.co",
            SUPABASE_KEY="your-anon-key",
        )

        assert not settings.is_configured

    def test_configured(self, settings):
        assert settings.is_configured

    def test_environment_from_env(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("PREVIEW_MODE", "true")

        settings = Settings(_env_file=None)

        assert settings.is_production
        assert not settings.is_development
        assert settings.PREVIEW_MODE

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, ENVIRONMENT="qa")

    def test_log_settings_normalized(self):
        settings = Settings(_env_file=None, LOG_LEVEL="debug", LOG_FORMAT="JSON")

        assert settings.LOG_LEVEL == "DEBUG"
        assert settings.LOG_FORMAT == "json"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, LOG_LEVEL="LOUD")

    def test_supabase_url_validation(self):
        settings = Settings(_env_file=None, SUPABASE_URL="https://abc.supabase.co/")
        assert settings.SUPABASE_URL == "https://abc.supabase.co"

        with pytest.raises(ValidationError):
            Settings(_env_file=None, SUPABASE_URL="abc.supabase.co")

    def test_ttl_bounds(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, DASHBOARD_CACHE_TTL_SECONDS=0)

    def test_cache_dir_expanded(self):
        settings = Settings(_env_file=None, CACHE_DIR="~/rnba-cache")

        assert settings.cache_dir == Path.home() / "rnba-cache"

    def test_event_timezone(self):
        settings = Settings(_env_file=None, EVENT_TIMEZONE="Europe/Berlin")
        assert settings.event_timezone == ZoneInfo("Europe/Berlin")

        with pytest.raises(ValidationError):
            Settings(_env_file=None, EVENT_TIMEZONE="Mars/Olympus")

    def test_get_settings_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()


class TestConfigureLogging:
    @pytest.mark.parametrize("log_format", ["console", "json"])
    def test_configure_logging(self, settings, log_format):
        settings = settings.model_copy(
            update={"LOG_FORMAT": log_format, "LOG_LEVEL": "WARNING"}
        )

        configure_logging(settings)

        assert logging.getLogger().level == logging.WARNING
        assert structlog.is_configured()
        structlog.reset_defaults()
