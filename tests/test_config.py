"""Tests for configuration settings."""

import pytest
from pydantic import ValidationError

from github_issue_sync.config import DEFAULT_REPOS, Settings, get_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep variables from the developer's shell out of Settings."""
    for name in (
        "DATABASE_URL",
        "GITHUB_TOKEN",
        "ENVIRONMENT",
        "LOG_LEVEL",
        "REPOS",
        "PRIVATE_REPOS",
        "PAGINATION_MODE",
    ):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    """Tests for Settings class."""

    def test_settings_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite+aiosqlite:///./issue_sync.db"
        assert settings.github_token == ""
        assert settings.environment == "development"
        assert settings.log_level == "INFO"
        assert settings.pagination_mode == "offset"
        assert settings.repos == DEFAULT_REPOS

    def test_sync_defaults(self):
        sync = Settings(_env_file=None).sync

        assert sync.page_size == 100
        assert sync.max_concurrent_sources == 3
        assert sync.max_fetch_retries == 3
        assert sync.retry_backoff_seconds == 5.0
        assert sync.max_retry_wait_seconds == 900.0

    def test_settings_tracked_repos(self):
        settings = Settings(_env_file=None)

        assert settings.tracked_repos == [
            "elastic/kibana",
            "elastic/eui",
            "elastic/elastic-charts",
        ]

    def test_private_repos_are_appended_once(self):
        settings = Settings(
            _env_file=None,
            repos="elastic/eui, elastic/kibana",
            private_repos="elastic/secret,elastic/eui,",
        )

        assert settings.tracked_repos == ["elastic/eui", "elastic/kibana", "elastic/secret"]

    def test_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
        monkeypatch.setenv("GITHUB_TOKEN", "test_token_123")
        monkeypatch.setenv("PAGINATION_MODE", "cursor")
        monkeypatch.setenv("REPOS", "elastic/eui")

        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite+aiosqlite:///./test.db"
        assert settings.github_token == "test_token_123"
        assert settings.pagination_mode == "cursor"
        assert settings.tracked_repos == ["elastic/eui"]

    def test_nested_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("SYNC__PAGE_SIZE", "50")
        monkeypatch.setenv("SYNC__MAX_CONCURRENT_SOURCES", "8")
        monkeypatch.setenv("RATE_LIMIT__WARNING_THRESHOLD_PCT", "30")
        monkeypatch.setenv("LOGGING__LOG_FILE", "/tmp/sync.log")

        settings = Settings(_env_file=None)

        assert settings.sync.page_size == 50
        assert settings.sync.max_concurrent_sources == 8
        assert settings.rate_limit.warning_threshold_pct == 30.0
        assert settings.logging.log_file == "/tmp/sync.log"

    def test_page_size_above_api_maximum_is_rejected(self, monkeypatch):
        monkeypatch.setenv("SYNC__PAGE_SIZE", "500")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_invalid_pagination_mode_is_rejected(self, monkeypatch):
        monkeypatch.setenv("PAGINATION_MODE", "keyset")

        with pytest.raises(ValueError):
            Settings(_env_file=None)

    def test_settings_log_level_validation(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "INVALID")

        with pytest.raises(ValueError):
            Settings(_env_file=None)

    def test_settings_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("database_url", "sqlite+aiosqlite:///./lower.db")
        monkeypatch.setenv("GITHUB_TOKEN", "upper_token")

        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite+aiosqlite:///./lower.db"
        assert settings.github_token == "upper_token"


class TestGetSettings:
    """Tests for get_settings function."""

    def test_get_settings_cached(self):
        get_settings.cache_clear()

        settings1 = get_settings()
        settings2 = get_settings()

        assert isinstance(settings1, Settings)
        assert settings1 is settings2
        get_settings.cache_clear()
