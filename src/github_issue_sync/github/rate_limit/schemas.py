"""Pydantic schemas for GitHub API rate limit data.

These schemas represent rate limit information from:
- x-ratelimit-* response headers (REST)
- the ``rateLimit`` object selected in GraphQL queries
- GET /rate_limit API endpoint
"""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Self

from pydantic import BaseModel, Field, computed_field


class RateLimitPool(StrEnum):
    """GitHub rate limit resource pools used by the sync.

    Each pool has its own separate quota.
    See: https://docs.github.com/en/rest/rate-limit/rate-limit
    """

    CORE = "core"
    SEARCH = "search"
    GRAPHQL = "graphql"


class RateLimitStatus(StrEnum):
    """Rate limit health status.

    Defaults:
    - HEALTHY: > 50% remaining
    - WARNING: 20-50% remaining
    - CRITICAL: below 20% remaining
    - EXHAUSTED: 0 remaining
    """

    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"
    EXHAUSTED = "exhausted"


class PoolRateLimit(BaseModel):
    """Rate limit information for a single resource pool."""

    pool: RateLimitPool = Field(description="Resource pool name")
    limit: int = Field(ge=0, description="Maximum requests (or points) per hour")
    remaining: int = Field(ge=0, description="Requests remaining in current window")
    used: int = Field(ge=0, description="Requests used in current window")
    reset_at: datetime = Field(description="UTC datetime when limit resets")
    cost: int | None = Field(
        default=None, ge=0, description="Points charged for the last query (GraphQL only)"
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def usage_percent(self) -> float:
        """Percentage of rate limit consumed (0.0 to 100.0)."""
        if self.limit == 0:
            return 100.0
        return (self.used / self.limit) * 100

    @computed_field  # type: ignore[prop-decorator]
    @property
    def remaining_percent(self) -> float:
        """Percentage of rate limit remaining (0.0 to 100.0)."""
        if self.limit == 0:
            return 0.0
        return (self.remaining / self.limit) * 100

    @property
    def seconds_until_reset(self) -> int:
        """Seconds until rate limit resets (0 if already past)."""
        delta = self.reset_at - datetime.now(UTC)
        return max(0, int(delta.total_seconds()))

    def get_status(
        self,
        healthy_threshold: float = 50.0,
        warning_threshold: float = 20.0,
        critical_threshold: float = 5.0,
    ) -> RateLimitStatus:
        """Determine rate limit health status.

        Args:
            healthy_threshold: % remaining above which is HEALTHY
            warning_threshold: % remaining above which is WARNING (below healthy)
            critical_threshold: % remaining kept for symmetry with config;
                anything under warning_threshold is CRITICAL

        Returns:
            RateLimitStatus enum value
        """
        if self.remaining == 0:
            return RateLimitStatus.EXHAUSTED
        if self.remaining_percent >= healthy_threshold:
            return RateLimitStatus.HEALTHY
        if self.remaining_percent >= warning_threshold:
            return RateLimitStatus.WARNING
        return RateLimitStatus.CRITICAL


class RateLimitSnapshot(BaseModel):
    """Point-in-time rate limit view, attached to every fetched page."""

    timestamp: datetime = Field(description="When this snapshot was taken")
    pools: dict[RateLimitPool, PoolRateLimit] = Field(
        default_factory=dict, description="Rate limits by pool"
    )

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> Self:
        """Parse from GitHub /rate_limit API response.

        Args:
            data: Raw API response dict with 'resources' key
        """
        pools: dict[RateLimitPool, PoolRateLimit] = {}
        resources = data.get("resources", {})

        for pool in RateLimitPool:
            if pool.value in resources:
                r = resources[pool.value]
                pools[pool] = PoolRateLimit(
                    pool=pool,
                    limit=r["limit"],
                    remaining=r["remaining"],
                    used=r["used"],
                    reset_at=datetime.fromtimestamp(r["reset"], tz=UTC),
                )

        return cls(timestamp=datetime.now(UTC), pools=pools)

    @classmethod
    def from_response_headers(
        cls,
        headers: dict[str, str],
        default_pool: RateLimitPool = RateLimitPool.CORE,
    ) -> Self | None:
        """Parse from REST response headers.

        GitHub includes x-ratelimit-limit, -remaining, -used, -reset and
        -resource on every response, including 304s.

        Returns:
            Snapshot with a single pool, or None when the headers are absent
        """
        if "x-ratelimit-limit" not in headers and "x-ratelimit-remaining" not in headers:
            return None

        resource = headers.get("x-ratelimit-resource", default_pool.value)
        try:
            actual_pool = RateLimitPool(resource)
        except ValueError:
            actual_pool = default_pool

        limit = int(headers.get("x-ratelimit-limit", "5000"))
        remaining = int(headers.get("x-ratelimit-remaining", "5000"))
        used = int(headers.get("x-ratelimit-used", str(max(0, limit - remaining))))
        reset_ts = int(headers.get("x-ratelimit-reset", "0"))

        reset_at = datetime.fromtimestamp(reset_ts, tz=UTC) if reset_ts > 0 else datetime.now(UTC)

        return cls(
            timestamp=datetime.now(UTC),
            pools={
                actual_pool: PoolRateLimit(
                    pool=actual_pool,
                    limit=limit,
                    remaining=remaining,
                    used=used,
                    reset_at=reset_at,
                )
            },
        )

    @classmethod
    def from_graphql(cls, data: dict[str, Any] | None) -> Self | None:
        """Parse the ``rateLimit { cost remaining limit used resetAt }`` selection."""
        if not data:
            return None

        limit = int(data.get("limit", 5000))
        remaining = int(data.get("remaining", limit))
        reset_raw = data.get("resetAt")
        reset_at = (
            datetime.fromisoformat(reset_raw.replace("Z", "+00:00"))
            if reset_raw
            else datetime.now(UTC)
        )

        return cls(
            timestamp=datetime.now(UTC),
            pools={
                RateLimitPool.GRAPHQL: PoolRateLimit(
                    pool=RateLimitPool.GRAPHQL,
                    limit=limit,
                    remaining=remaining,
                    used=int(data.get("used", max(0, limit - remaining))),
                    reset_at=reset_at,
                    cost=data.get("cost"),
                )
            },
        )

    def get_pool(self, pool: RateLimitPool) -> PoolRateLimit | None:
        """Get rate limit for a specific pool."""
        return self.pools.get(pool)

    def get_core(self) -> PoolRateLimit | None:
        """Convenience accessor for core pool (most common)."""
        return self.pools.get(RateLimitPool.CORE)

    def primary(self) -> PoolRateLimit | None:
        """The pool this snapshot was taken for (first entry)."""
        return next(iter(self.pools.values()), None)
