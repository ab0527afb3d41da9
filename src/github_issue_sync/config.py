"""Configuration settings for GitHub Issue Sync."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REPOS = "elastic/kibana,elastic/eui,elastic/elastic-charts"


class RateLimitConfig(BaseModel):
    """Configuration for rate limit reporting.

    Controls thresholds used to classify the quota reported with each
    fetched page.
    """

    healthy_threshold_pct: float = Field(
        default=50.0,
        ge=0.0,
        le=100.0,
        description="% remaining above which status is HEALTHY",
    )
    warning_threshold_pct: float = Field(
        default=20.0,
        ge=0.0,
        le=100.0,
        description="% remaining above which status is WARNING (below healthy)",
    )
    critical_threshold_pct: float = Field(
        default=5.0,
        ge=0.0,
        le=100.0,
        description="% remaining above which status is CRITICAL (below warning)",
    )


class SyncConfig(BaseModel):
    """Configuration for the incremental sync loop.

    Controls page size, how many sources are synced in parallel and how
    transient fetch failures are retried.
    """

    page_size: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Records requested per page (GitHub maximum is 100)",
    )
    max_concurrent_sources: int = Field(
        default=3,
        ge=1,
        le=32,
        description="Maximum sources synced in parallel",
    )

    # Retry behavior for rate limits and transient failures
    max_fetch_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Retries for a page after a retryable fetch error",
    )
    retry_backoff_seconds: float = Field(
        default=5.0,
        ge=0.0,
        description="Initial backoff between retries (doubles per attempt)",
    )
    max_retry_wait_seconds: float = Field(
        default=900.0,
        ge=0.0,
        description="Upper bound for a single retry wait (incl. rate limit resets)",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging behavior.

    Controls file logging, rotation, and output format.
    """

    log_file: str | None = Field(
        default=None,
        description="Optional path for file logging (enables rotation)",
    )
    rotation: str = Field(
        default="10 MB",
        description="When to rotate log file (e.g., '10 MB', '1 day')",
    )
    retention: str = Field(
        default="7 days",
        description="How long to keep rotated logs",
    )
    serialize: bool = Field(
        default=False,
        description="If True, output JSON format to file",
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # Document store
    # --------------------------------------------------------------------------
    database_url: str = Field(
        default="sqlite+aiosqlite:///./issue_sync.db",
        description="Async SQLAlchemy connection string for the document store",
    )

    # --------------------------------------------------------------------------
    # GitHub API
    # --------------------------------------------------------------------------
    github_token: str = Field(
        default="",
        description="GitHub personal access token",
    )

    # --------------------------------------------------------------------------
    # Application
    # --------------------------------------------------------------------------
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # --------------------------------------------------------------------------
    # Tracked sources
    # --------------------------------------------------------------------------
    repos: str = Field(
        default=DEFAULT_REPOS,
        description="Comma-separated owner/repo list to sync",
    )
    private_repos: str = Field(
        default="",
        description="Comma-separated private owner/repo list, appended to repos",
    )
    pagination_mode: Literal["offset", "cursor"] = Field(
        default="offset",
        description="offset = REST pages with ETag caching, cursor = GraphQL search",
    )

    # --------------------------------------------------------------------------
    # Nested configuration
    # --------------------------------------------------------------------------
    rate_limit: RateLimitConfig = Field(
        default_factory=RateLimitConfig,
        description="Rate limit reporting configuration",
    )
    sync: SyncConfig = Field(
        default_factory=SyncConfig,
        description="Sync loop configuration",
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration (file output, rotation)",
    )

    @property
    def tracked_repos(self) -> list[str]:
        """Public and private repositories to sync, in configured order."""
        tracked: list[str] = []
        for raw in (self.repos, self.private_repos):
            for entry in raw.split(","):
                entry = entry.strip()
                if entry and entry not in tracked:
                    tracked.append(entry)
        return tracked


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
