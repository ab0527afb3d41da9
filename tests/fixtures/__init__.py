"""Test fixtures for GitHub Issue Sync."""

from .github_responses import (
    GITHUB_ISSUE_RESPONSE,
    GITHUB_PR_ISSUE_RESPONSE,
    GRAPHQL_ISSUE_NODE,
    GRAPHQL_PR_NODE,
    GRAPHQL_SEARCH_LAST_PAGE,
    GRAPHQL_SEARCH_RESPONSE,
)
from .rate_limit_responses import make_graphql_rate_limit, make_rate_limit_headers

__all__ = [
    # Mock GitHub API responses
    "GITHUB_ISSUE_RESPONSE",
    "GITHUB_PR_ISSUE_RESPONSE",
    "GRAPHQL_ISSUE_NODE",
    "GRAPHQL_PR_NODE",
    "GRAPHQL_SEARCH_LAST_PAGE",
    "GRAPHQL_SEARCH_RESPONSE",
    # Rate limit helpers
    "make_graphql_rate_limit",
    "make_rate_limit_headers",
]
