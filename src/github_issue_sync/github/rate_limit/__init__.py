"""Rate limit accounting for GitHub API responses.

Every fetched page carries a snapshot of the quota it consumed, which the
sync loop reports for operational visibility.
"""

from .schemas import (
    PoolRateLimit,
    RateLimitPool,
    RateLimitSnapshot,
    RateLimitStatus,
)

__all__ = [
    "PoolRateLimit",
    "RateLimitPool",
    "RateLimitSnapshot",
    "RateLimitStatus",
]
