"""
Unit Tests for Application Settings Configuration

Tests for:
- Default values for every settings group
- Custom validators (database URL, log level)
- Range validation on numeric fields
- Field aliases
- Loading from environment variables, including nested ``__`` keys
- Settings caching and clearing
"""

import pytest
from pydantic import ValidationError

from viewpoints.config.settings import (
    DatabaseSettings,
    IdentitySettings,
    Settings,
    VotingSettings,
    WebSettings,
    clear_settings_cache,
    get_settings,
)

# =============================================================================
# DatabaseSettings Tests
# =============================================================================


class TestDatabaseSettings:
    """Unit tests for DatabaseSettings configuration."""

    def test_create_with_defaults(self):
        db = DatabaseSettings()

        assert db.url == "sqlite:///data/viewpoints.db"
        assert db.busy_timeout_ms == 5000
        assert db.connection_timeout_s == 10

    def test_in_memory_url(self):
        assert DatabaseSettings(url="sqlite:///:memory:").url == "sqlite:///:memory:"

    def test_non_sqlite_url_raises_error(self):
        """Should raise ValidationError for anything but SQLite."""
        with pytest.raises(ValidationError, match="Database URL must start with sqlite://"):
            DatabaseSettings(url="postgresql://localhost/db")

    def test_busy_timeout_validation_minimum(self):
        with pytest.raises(ValidationError, match="greater than or equal to 1000"):
            DatabaseSettings(busy_timeout_ms=999)

    def test_busy_timeout_validation_maximum(self):
        with pytest.raises(ValidationError, match="less than or equal to 30000"):
            DatabaseSettings(busy_timeout_ms=30001)

    def test_connection_timeout_validation(self):
        with pytest.raises(ValidationError, match="greater than or equal to 1"):
            DatabaseSettings(connection_timeout_s=0)
        with pytest.raises(ValidationError, match="less than or equal to 60"):
            DatabaseSettings(connection_timeout_s=61)

    def test_url_aliases(self):
        assert DatabaseSettings(database_url="sqlite:///a.db").url == "sqlite:///a.db"
        assert DatabaseSettings(db_url="sqlite:///b.db").url == "sqlite:///b.db"

    def test_immutability(self):
        db = DatabaseSettings()

        with pytest.raises(ValidationError):
            db.url = "sqlite:///new.db"


# =============================================================================
# WebSettings and IdentitySettings Tests
# =============================================================================


class TestWebSettings:
    """Unit tests for the HTTP server settings."""

    def test_create_with_defaults(self):
        web = WebSettings()

        assert web.host == "127.0.0.1"
        assert web.port == 3000
        assert web.localhost_address == "localhost:3000"

    def test_port_range(self):
        with pytest.raises(ValidationError):
            WebSettings(port=0)
        with pytest.raises(ValidationError):
            WebSettings(port=70000)

    def test_localhost_alias(self):
        assert WebSettings(localhost="127.0.0.1:8080").localhost_address == "127.0.0.1:8080"


class TestIdentitySettings:
    """Unit tests for voter identity settings."""

    def test_create_with_defaults(self):
        identity = IdentitySettings()

        assert identity.session_cookie_name == "session_id"
        assert identity.user_id_header == "X-User-Id"
        assert identity.session_cookie_max_age_s == 60 * 60 * 24 * 365
        assert identity.secure_cookies is False

    def test_empty_cookie_name_rejected(self):
        with pytest.raises(ValidationError, match="at least 1 character"):
            IdentitySettings(session_cookie_name="")

    def test_cookie_max_age_minimum(self):
        with pytest.raises(ValidationError, match="greater than or equal to 60"):
            IdentitySettings(session_cookie_max_age_s=59)


class TestVotingSettings:
    """Unit tests for voting session limits."""

    def test_create_with_defaults(self):
        assert VotingSettings().max_sessions == 10_000

    def test_max_sessions_minimum(self):
        with pytest.raises(ValidationError, match="greater than or equal to 1"):
            VotingSettings(max_sessions=0)


# =============================================================================
# Settings Tests
# =============================================================================


class TestSettings:
    """Unit tests for the top-level Settings."""

    def test_create_with_all_defaults(self, monkeypatch):
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("DATABASE__URL", raising=False)

        settings = Settings()

        assert settings.environment == "development"
        assert settings.log_level == "INFO"
        assert isinstance(settings.database, DatabaseSettings)
        assert isinstance(settings.web, WebSettings)
        assert isinstance(settings.identity, IdentitySettings)
        assert isinstance(settings.voting, VotingSettings)

    def test_load_from_environment_variables(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("LOG_LEVEL", "WARNING")

        settings = Settings()

        assert settings.environment == "production"
        assert settings.log_level == "WARNING"

    def test_load_nested_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("DATABASE__URL", "sqlite:///env.db")
        monkeypatch.setenv("WEB__HOST", "0.0.0.0")
        monkeypatch.setenv("IDENTITY__USER_ID_HEADER", "X-Auth-User")

        settings = Settings()

        assert settings.database.url == "sqlite:///env.db"
        assert settings.web.host == "0.0.0.0"
        assert settings.identity.user_id_header == "X-Auth-User"

    def test_environment_validation(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "staging")

        with pytest.raises(ValidationError):
            Settings()

    def test_log_level_validation_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")

        assert Settings().log_level == "DEBUG"

    def test_log_level_validation_invalid(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")

        with pytest.raises(ValidationError, match="Invalid log level"):
            Settings()

    def test_nested_validation_propagates(self, monkeypatch):
        monkeypatch.setenv("DATABASE__URL", "mysql://localhost/db")

        with pytest.raises(ValidationError, match="Database URL must start with"):
            Settings()

    def test_explicit_nested_settings(self):
        settings = Settings(database=DatabaseSettings(url="sqlite:///:memory:"))

        assert settings.database.url == "sqlite:///:memory:"


# =============================================================================
# Caching Tests
# =============================================================================


class TestSettingsCaching:
    """Tests for get_settings() and clear_settings_cache()."""

    def test_get_settings_returns_cached_instance(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "test")
        clear_settings_cache()

        try:
            assert get_settings() is get_settings()
        finally:
            clear_settings_cache()

    def test_clear_settings_cache(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "test")
        clear_settings_cache()

        try:
            first = get_settings()
            monkeypatch.setenv("ENVIRONMENT", "production")
            clear_settings_cache()
            second = get_settings()

            assert first.environment == "test"
            assert second.environment == "production"
        finally:
            clear_settings_cache()
