"""Result objects for sync operations.

Structured results provide consistent interfaces for monitoring,
error handling, and CLI output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from github_issue_sync.github.rate_limit import PoolRateLimit
from github_issue_sync.schemas import PaginationMode, Source


@dataclass
class SourceSyncResult:
    """Result of syncing a single source.

    A source either completes (every page fetched and either skipped or
    committed) or fails with the error that stopped it. Pages committed
    before a failure stay committed.
    """

    source: Source
    """The source that was synced."""

    pages_fetched: int = 0
    """Pages requested from the API (retries not counted)."""

    pages_skipped: int = 0
    """Pages answered as not modified."""

    pages_written: int = 0
    """Pages whose documents and cache entry were committed."""

    documents_written: int = 0
    """Documents upserted across all pages."""

    records_skipped: int = 0
    """Malformed records dropped during transformation."""

    retries: int = 0
    """Fetch attempts repeated after a retryable error."""

    error: Exception | None = None
    """Exception that failed the source, if any."""

    started_at: datetime | None = None
    completed_at: datetime | None = None

    rate_limit: PoolRateLimit | None = None
    """Last rate limit pool seen for this source."""

    @property
    def success(self) -> bool:
        """Check if the source completed without errors."""
        return self.error is None

    @property
    def duration_seconds(self) -> float:
        """Time taken to sync this source."""
        if self.started_at is None or self.completed_at is None:
            return 0.0
        return (self.completed_at - self.started_at).total_seconds()

    @property
    def reason(self) -> str | None:
        """Human-readable failure reason."""
        if self.error is None:
            return None
        return f"{type(self.error).__name__}: {self.error}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "repository": self.source.full_name,
            "mode": PaginationMode(self.source.mode).value,
            "success": self.success,
            "pages_fetched": self.pages_fetched,
            "pages_skipped": self.pages_skipped,
            "pages_written": self.pages_written,
            "documents_written": self.documents_written,
            "records_skipped": self.records_skipped,
            "retries": self.retries,
            "duration_seconds": round(self.duration_seconds, 2),
        }

        if self.rate_limit is not None:
            result["rate_limit"] = {
                "pool": self.rate_limit.pool.value,
                "remaining": self.rate_limit.remaining,
                "limit": self.rate_limit.limit,
            }

        if self.error:
            result["error"] = str(self.error)
            result["error_type"] = type(self.error).__name__

        return result


@dataclass
class SyncRunResult:
    """Result of syncing multiple sources.

    Aggregates results from all source syncs.
    """

    source_results: list[SourceSyncResult] = field(default_factory=list)
    """Results for each source, in input order."""

    duration_seconds: float = 0.0
    """Total wall time for the run."""

    @property
    def completed(self) -> list[SourceSyncResult]:
        """Sources that finished every page."""
        return [r for r in self.source_results if r.success]

    @property
    def failed(self) -> list[SourceSyncResult]:
        """Sources that stopped on an error."""
        return [r for r in self.source_results if not r.success]

    @property
    def success(self) -> bool:
        return not self.failed

    @property
    def total_documents(self) -> int:
        return sum(r.documents_written for r in self.source_results)

    @property
    def total_pages_skipped(self) -> int:
        return sum(r.pages_skipped for r in self.source_results)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "summary": {
                "total_sources": len(self.source_results),
                "completed": [r.source.full_name for r in self.completed],
                "failed": {r.source.full_name: r.reason for r in self.failed},
                "documents_written": self.total_documents,
                "pages_skipped": self.total_pages_skipped,
                "duration_seconds": round(self.duration_seconds, 2),
            },
            "sources": [r.to_dict() for r in self.source_results],
        }
