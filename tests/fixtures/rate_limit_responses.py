"""Mock GitHub rate limit fixtures.

Covers the three places quota information arrives from:
- GET /rate_limit (``resources`` per pool)
- x-ratelimit-* headers on every REST response (304s included)
- the ``rateLimit`` object selected in GraphQL queries

See: https://docs.github.com/en/rest/rate-limit/rate-limit
"""

import time
from datetime import UTC, datetime, timedelta


def future_reset_timestamp(seconds_from_now: int = 3600) -> int:
    """Generate a Unix timestamp for reset time in the future."""
    return int(time.time()) + seconds_from_now


def _pool(limit: int, remaining: int, reset_in: int) -> dict[str, int]:
    return {
        "limit": limit,
        "remaining": remaining,
        "used": limit - remaining,
        "reset": future_reset_timestamp(reset_in),
    }


# -----------------------------------------------------------------------------
# Full Rate Limit API Response (GET /rate_limit)
# -----------------------------------------------------------------------------
RATE_LIMIT_RESPONSE_HEALTHY = {
    "resources": {
        "core": _pool(5000, 4500, 3600),
        "search": _pool(30, 28, 60),
        "graphql": _pool(5000, 4800, 3600),
        "code_search": _pool(10, 10, 60),
    },
    "rate": _pool(5000, 4500, 3600),
}

RATE_LIMIT_RESPONSE_EXHAUSTED = {
    "resources": {
        "core": _pool(5000, 0, 300),
        "search": _pool(30, 0, 60),
        "graphql": _pool(5000, 0, 300),
    },
    "rate": _pool(5000, 0, 300),
}

RATE_LIMIT_RESPONSE_MINIMAL = {
    "resources": {"core": _pool(5000, 4000, 3600)},
    "rate": _pool(5000, 4000, 3600),
}


# -----------------------------------------------------------------------------
# Response Headers (returned on every API call)
# -----------------------------------------------------------------------------
def make_rate_limit_headers(
    remaining: int = 4999,
    limit: int = 5000,
    used: int = 1,
    reset_in_seconds: int = 3600,
    resource: str = "core",
) -> dict[str, str]:
    """Create rate limit headers as returned by GitHub API.

    Returns:
        Dict of header name -> value (all strings)
    """
    return {
        "x-ratelimit-limit": str(limit),
        "x-ratelimit-remaining": str(remaining),
        "x-ratelimit-used": str(used),
        "x-ratelimit-reset": str(int(time.time()) + reset_in_seconds),
        "x-ratelimit-resource": resource,
    }


HEADERS_HEALTHY = make_rate_limit_headers(remaining=4500, used=500)
HEADERS_WARNING = make_rate_limit_headers(remaining=1500, used=3500, reset_in_seconds=1800)
HEADERS_CRITICAL = make_rate_limit_headers(remaining=250, used=4750, reset_in_seconds=600)
HEADERS_EXHAUSTED = make_rate_limit_headers(remaining=0, used=5000, reset_in_seconds=300)
HEADERS_SEARCH_POOL = make_rate_limit_headers(
    remaining=28, limit=30, used=2, reset_in_seconds=60, resource="search"
)

# Missing used, reset and resource
HEADERS_PARTIAL = {
    "x-ratelimit-remaining": "100",
    "x-ratelimit-limit": "5000",
}


# -----------------------------------------------------------------------------
# GraphQL rateLimit selection
# -----------------------------------------------------------------------------
def make_graphql_rate_limit(
    remaining: int = 4990, limit: int = 5000, cost: int = 1, reset_in_seconds: int = 3600
) -> dict[str, object]:
    """Create the ``rateLimit`` object of a GraphQL response."""
    reset_at = datetime.now(UTC) + timedelta(seconds=reset_in_seconds)
    return {
        "cost": cost,
        "remaining": remaining,
        "limit": limit,
        "used": limit - remaining,
        "resetAt": reset_at.strftime("%Y-%m-%dT%H:%M:%SZ"),
    }
