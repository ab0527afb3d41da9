"""GitHub API client module.

This module provides:
- GitHubClient: Async GitHub API client (REST issue pages, GraphQL search)
- Page fetchers: OffsetPageFetcher, CursorPageFetcher
- Rate limit snapshots: RateLimitSnapshot, RateLimitStatus, etc.
- Sync: SyncOrchestrator, RecordTransformer
"""

from .client import GitHubClient
from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubRetryableError,
    GitHubSearchLimitError,
    GitHubTransientError,
)
from .pagination import (
    CursorPageFetcher,
    OffsetPageFetcher,
    PageFetcher,
    PageResult,
    create_fetcher,
)
from .rate_limit import (
    PoolRateLimit,
    RateLimitPool,
    RateLimitSnapshot,
    RateLimitStatus,
)
from .sync import (
    OutputFormat,
    RecordTransformer,
    SourceSyncResult,
    SyncOrchestrator,
    SyncRunResult,
)

__all__ = [
    # Client
    "GitHubClient",
    # Exceptions
    "GitHubAuthenticationError",
    "GitHubClientError",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
    "GitHubRetryableError",
    "GitHubSearchLimitError",
    "GitHubTransientError",
    # Pagination
    "CursorPageFetcher",
    "OffsetPageFetcher",
    "PageFetcher",
    "PageResult",
    "create_fetcher",
    # Rate limits
    "PoolRateLimit",
    "RateLimitPool",
    "RateLimitSnapshot",
    "RateLimitStatus",
    # Sync
    "OutputFormat",
    "RecordTransformer",
    "SourceSyncResult",
    "SyncOrchestrator",
    "SyncRunResult",
]
