"""Contract tests for rate limit Pydantic schemas.

These tests verify that schemas correctly parse GitHub API responses,
response headers and the GraphQL rateLimit selection.
"""

from datetime import UTC, datetime, timedelta

from github_issue_sync.github.rate_limit.schemas import (
    PoolRateLimit,
    RateLimitPool,
    RateLimitSnapshot,
    RateLimitStatus,
)
from tests.fixtures.rate_limit_responses import (
    HEADERS_CRITICAL,
    HEADERS_EXHAUSTED,
    HEADERS_HEALTHY,
    HEADERS_PARTIAL,
    HEADERS_SEARCH_POOL,
    HEADERS_WARNING,
    RATE_LIMIT_RESPONSE_EXHAUSTED,
    RATE_LIMIT_RESPONSE_HEALTHY,
    RATE_LIMIT_RESPONSE_MINIMAL,
    make_graphql_rate_limit,
)


def make_pool(limit: int, remaining: int) -> PoolRateLimit:
    return PoolRateLimit(
        pool=RateLimitPool.CORE,
        limit=limit,
        remaining=remaining,
        used=limit - remaining,
        reset_at=datetime.now(UTC) + timedelta(hours=1),
    )


class TestPoolRateLimit:
    """Tests for PoolRateLimit model."""

    def test_usage_percent_calculation(self) -> None:
        limit = make_pool(5000, 4000)

        assert limit.usage_percent == 20.0
        assert limit.remaining_percent == 80.0

    def test_zero_limit_avoids_division_by_zero(self) -> None:
        limit = make_pool(0, 0)

        assert limit.usage_percent == 100.0
        assert limit.remaining_percent == 0.0

    def test_seconds_until_reset_never_negative(self) -> None:
        limit = PoolRateLimit(
            pool=RateLimitPool.CORE,
            limit=5000,
            remaining=0,
            used=5000,
            reset_at=datetime.now(UTC) - timedelta(minutes=5),
        )

        assert limit.seconds_until_reset == 0

    def test_status_thresholds(self) -> None:
        assert make_pool(5000, 4500).get_status() == RateLimitStatus.HEALTHY
        assert make_pool(5000, 1500).get_status() == RateLimitStatus.WARNING
        assert make_pool(5000, 250).get_status() == RateLimitStatus.CRITICAL
        assert make_pool(5000, 0).get_status() == RateLimitStatus.EXHAUSTED

    def test_custom_thresholds(self) -> None:
        pool = make_pool(5000, 2000)  # 40% remaining

        assert pool.get_status(healthy_threshold=30.0) == RateLimitStatus.HEALTHY
        assert pool.get_status(healthy_threshold=60.0) == RateLimitStatus.WARNING


class TestSnapshotFromApiResponse:
    """Tests for RateLimitSnapshot.from_api_response."""

    def test_parses_known_pools(self) -> None:
        snapshot = RateLimitSnapshot.from_api_response(RATE_LIMIT_RESPONSE_HEALTHY)

        assert set(snapshot.pools) == {
            RateLimitPool.CORE,
            RateLimitPool.SEARCH,
            RateLimitPool.GRAPHQL,
        }
        core = snapshot.get_core()
        assert core is not None
        assert core.remaining == 4500
        assert core.limit == 5000

    def test_minimal_response(self) -> None:
        snapshot = RateLimitSnapshot.from_api_response(RATE_LIMIT_RESPONSE_MINIMAL)

        assert snapshot.get_core() is not None
        assert snapshot.get_pool(RateLimitPool.SEARCH) is None

    def test_exhausted(self) -> None:
        snapshot = RateLimitSnapshot.from_api_response(RATE_LIMIT_RESPONSE_EXHAUSTED)

        core = snapshot.get_core()
        assert core is not None
        assert core.get_status() == RateLimitStatus.EXHAUSTED


class TestSnapshotFromHeaders:
    """Tests for RateLimitSnapshot.from_response_headers."""

    def test_healthy_headers(self) -> None:
        snapshot = RateLimitSnapshot.from_response_headers(HEADERS_HEALTHY)

        assert snapshot is not None
        core = snapshot.primary()
        assert core is not None
        assert core.pool == RateLimitPool.CORE
        assert core.remaining == 4500
        assert core.used == 500

    def test_status_progression(self) -> None:
        statuses = []
        for headers in (HEADERS_HEALTHY, HEADERS_WARNING, HEADERS_CRITICAL, HEADERS_EXHAUSTED):
            snapshot = RateLimitSnapshot.from_response_headers(headers)
            assert snapshot is not None
            pool = snapshot.primary()
            assert pool is not None
            statuses.append(pool.get_status())

        assert statuses == [
            RateLimitStatus.HEALTHY,
            RateLimitStatus.WARNING,
            RateLimitStatus.CRITICAL,
            RateLimitStatus.EXHAUSTED,
        ]

    def test_resource_header_selects_pool(self) -> None:
        snapshot = RateLimitSnapshot.from_response_headers(HEADERS_SEARCH_POOL)

        assert snapshot is not None
        assert snapshot.get_pool(RateLimitPool.SEARCH) is not None
        assert snapshot.get_core() is None

    def test_partial_headers_fill_defaults(self) -> None:
        snapshot = RateLimitSnapshot.from_response_headers(HEADERS_PARTIAL)

        assert snapshot is not None
        core = snapshot.get_core()
        assert core is not None
        assert core.remaining == 100
        assert core.used == 4900

    def test_unknown_resource_falls_back_to_default_pool(self) -> None:
        headers = {**HEADERS_HEALTHY, "x-ratelimit-resource": "code_scanning_upload"}

        snapshot = RateLimitSnapshot.from_response_headers(headers)

        assert snapshot is not None
        assert snapshot.get_core() is not None

    def test_no_headers_is_none(self) -> None:
        assert RateLimitSnapshot.from_response_headers({"etag": 'W/"abc"'}) is None


class TestSnapshotFromGraphQL:
    """Tests for RateLimitSnapshot.from_graphql."""

    def test_parses_cost_and_reset(self) -> None:
        snapshot = RateLimitSnapshot.from_graphql(
            make_graphql_rate_limit(remaining=4000, cost=3, reset_in_seconds=600)
        )

        assert snapshot is not None
        pool = snapshot.get_pool(RateLimitPool.GRAPHQL)
        assert pool is not None
        assert pool.remaining == 4000
        assert pool.used == 1000
        assert pool.cost == 3
        assert 0 < pool.seconds_until_reset <= 600

    def test_missing_selection_is_none(self) -> None:
        assert RateLimitSnapshot.from_graphql(None) is None
        assert RateLimitSnapshot.from_graphql({}) is None
