"""Async GitHub API client wrapper using githubkit.

This module provides a typed async interface to the two issue listing
surfaces the sync engine pages through:
- REST ``GET /repos/{owner}/{repo}/issues`` with conditional requests (ETag)
- GraphQL ``search(type: ISSUE)`` with continuation cursors

Both return one page per call. Retrying is left to the caller.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from githubkit import GitHub
from githubkit.exception import GraphQLFailed, RequestError, RequestFailed, RequestTimeout
from pydantic import BaseModel, Field

from github_issue_sync.config import get_settings
from github_issue_sync.logging import get_logger

from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubTransientError,
)
from .rate_limit.schemas import PoolRateLimit, RateLimitSnapshot

logger = get_logger(__name__)

SEARCH_ISSUES_QUERY = """
query SearchIssues($query: String!, $first: Int!, $after: String) {
  rateLimit {
    cost
    remaining
    limit
    used
    resetAt
  }
  search(query: $query, type: ISSUE, first: $first, after: $after) {
    issueCount
    pageInfo {
      endCursor
      hasNextPage
    }
    nodes {
      __typename
      ... on Issue {
        id
        databaseId
        number
        title
        body
        url
        state
        locked
        authorAssociation
        createdAt
        updatedAt
        closedAt
        author { login }
        comments { totalCount }
        labels(first: 50) { totalCount nodes { name } }
        assignees(first: 20) { totalCount nodes { login } }
        reactions { totalCount }
        reactionGroups { content reactors { totalCount } }
      }
      ... on PullRequest {
        id
        databaseId
        number
        title
        body
        url
        state
        locked
        authorAssociation
        createdAt
        updatedAt
        closedAt
        author { login }
        comments { totalCount }
        labels(first: 50) { totalCount nodes { name } }
        assignees(first: 20) { totalCount nodes { login } }
        reactions { totalCount }
        reactionGroups { content reactors { totalCount } }
        additions
        deletions
        changedFiles
        commits { totalCount }
        merged
        mergedBy { login }
        reviews(first: 100) { totalCount nodes { author { login } } }
      }
    }
  }
}
"""


class RestIssuesPage(BaseModel):
    """One page of the REST issues listing."""

    records: list[dict[str, Any]] = Field(default_factory=list)
    etag: str | None = Field(default=None, description="ETag of this page, if returned")
    has_next: bool = Field(default=False, description='Link header carried rel="next"')
    not_modified: bool = Field(default=False, description="Server answered 304")
    rate_limit: RateLimitSnapshot | None = None


class GraphQLSearchPage(BaseModel):
    """One page of the GraphQL issue search connection."""

    nodes: list[dict[str, Any]] = Field(default_factory=list)
    end_cursor: str | None = None
    has_next_page: bool = False
    issue_count: int = 0
    rate_limit: RateLimitSnapshot | None = None


def _header_dict(headers: Any) -> dict[str, str]:
    """Normalize httpx headers to a lower-cased plain dict."""
    if headers is None:
        return {}
    items = headers.items() if hasattr(headers, "items") else headers
    return {str(k).lower(): str(v) for k, v in items}


def has_next_link(link_header: str | None) -> bool:
    """Whether an RFC 5988 Link header advertises a next page."""
    if not link_header:
        return False
    for part in link_header.split(","):
        params = part.split(";")[1:]
        for param in params:
            key, _, value = param.strip().partition("=")
            if key.strip() == "rel" and "next" in value.strip('"').split():
                return True
    return False


class GitHubClient:
    """Async GitHub API client for issue page retrieval.

    Usage:
        async with GitHubClient() as client:
            page = await client.get_issues_page("elastic", "eui", page=1)
            for record in page.records:
                print(record["title"])
    """

    def __init__(self, token: str | None = None) -> None:
        """Initialize the GitHub client.

        Args:
            token: GitHub PAT. If not provided, uses GITHUB_TOKEN from settings.

        Raises:
            GitHubAuthenticationError: If no token is available.
        """
        self._token = token or get_settings().github_token
        if not self._token:
            raise GitHubAuthenticationError(
                "GitHub token required. Set GITHUB_TOKEN environment variable."
            )
        self._client: GitHub[Any] | None = None

    @property
    def _github(self) -> GitHub[Any]:
        """Get or create the githubkit client instance."""
        if self._client is None:
            # 304s must reach the caller and retries belong to the orchestrator
            self._client = GitHub(self._token, http_cache=False, auto_retry=False)
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client = None

    async def __aenter__(self) -> GitHubClient:
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    # -------------------------------------------------------------------------
    # Rate Limit Info
    # -------------------------------------------------------------------------
    async def get_rate_limit(self) -> RateLimitSnapshot:
        """Get current rate limit status for all pools."""
        try:
            resp = await self._github.rest.rate_limit.async_get()
        except RequestFailed as e:
            raise self._handle_error(e) from e
        except (RequestError, RequestTimeout) as e:
            raise GitHubTransientError(f"Rate limit request failed: {e}") from e
        return RateLimitSnapshot.from_api_response(resp.json())

    # -------------------------------------------------------------------------
    # Issue Pages
    # -------------------------------------------------------------------------
    async def get_issues_page(
        self,
        owner: str,
        repo: str,
        *,
        page: int,
        per_page: int = 100,
        etag: str | None = None,
    ) -> RestIssuesPage:
        """Fetch one page of issues (pull requests included), oldest first.

        Args:
            owner: Repository owner (org or user)
            repo: Repository name
            page: 1-based page number
            per_page: Results per page (max 100)
            etag: Freshness token from a previous fetch of this page

        Returns:
            RestIssuesPage. ``not_modified`` is set when the server answered
            304 to the conditional request; records are then empty.

        Raises:
            GitHubClientError: Or a subclass, for any non-304 failure
        """
        headers = {"If-None-Match": etag} if etag else None
        try:
            resp = await self._github.rest.issues.async_list_for_repo(
                owner=owner,
                repo=repo,
                state="all",
                sort="created",
                direction="asc",
                per_page=per_page,
                page=page,
                headers=headers,
            )
        except RequestFailed as e:
            if e.response.status_code == 304:
                return self._not_modified_page(e.response.headers)
            raise self._handle_error(e) from e
        except (RequestError, RequestTimeout) as e:
            raise GitHubTransientError(
                f"Request for {owner}/{repo} page {page} failed: {e}"
            ) from e

        if resp.status_code == 304:
            return self._not_modified_page(resp.headers)

        header_dict = _header_dict(resp.headers)
        records = resp.json() or []
        logger.debug(
            "Fetched {} records for {}/{} page {}", len(records), owner, repo, page
        )
        return RestIssuesPage(
            records=records,
            etag=header_dict.get("etag"),
            has_next=has_next_link(header_dict.get("link")),
            rate_limit=RateLimitSnapshot.from_response_headers(header_dict),
        )

    def _not_modified_page(self, headers: Any) -> RestIssuesPage:
        header_dict = _header_dict(headers)
        return RestIssuesPage(
            etag=header_dict.get("etag"),
            has_next=True,
            not_modified=True,
            rate_limit=RateLimitSnapshot.from_response_headers(header_dict),
        )

    async def search_issues(
        self,
        owner: str,
        repo: str,
        *,
        cursor: str | None = None,
        page_size: int = 100,
    ) -> GraphQLSearchPage:
        """Fetch one page of the issue search connection, oldest first.

        Args:
            owner: Repository owner
            repo: Repository name
            cursor: Continuation cursor, None for the first page
            page_size: Nodes per page (max 100)

        Returns:
            GraphQLSearchPage with raw nodes and the next cursor
        """
        variables = {
            "query": f"repo:{owner}/{repo} sort:created-asc",
            "first": page_size,
            "after": cursor,
        }
        try:
            data = await self._github.async_graphql(SEARCH_ISSUES_QUERY, variables)
        except GraphQLFailed as e:
            raise self._handle_graphql_error(e) from e
        except RequestFailed as e:
            raise self._handle_error(e) from e
        except (RequestError, RequestTimeout) as e:
            raise GitHubTransientError(f"Search for {owner}/{repo} failed: {e}") from e

        search = data.get("search") or {}
        page_info = search.get("pageInfo") or {}
        nodes = [node for node in search.get("nodes") or [] if node]
        logger.debug(
            "Fetched {} nodes for {}/{} after cursor {}", len(nodes), owner, repo, cursor
        )
        return GraphQLSearchPage(
            nodes=nodes,
            end_cursor=page_info.get("endCursor"),
            has_next_page=bool(page_info.get("hasNextPage")),
            issue_count=search.get("issueCount") or 0,
            rate_limit=RateLimitSnapshot.from_graphql(data.get("rateLimit")),
        )

    # -------------------------------------------------------------------------
    # Error Handling
    # -------------------------------------------------------------------------
    def _handle_error(self, error: RequestFailed) -> GitHubClientError:
        """Convert githubkit exceptions to our custom exceptions."""
        status = error.response.status_code
        headers = _header_dict(error.response.headers)

        if status == 401:
            return GitHubAuthenticationError("Invalid GitHub token")
        elif status in (403, 429):
            remaining = headers.get("x-ratelimit-remaining")
            if status == 429 or remaining == "0" or "retry-after" in headers:
                return GitHubRateLimitError(
                    "GitHub rate limit exceeded",
                    reset_at=self._reset_time(headers),
                )
            return GitHubClientError(f"Access forbidden: {error}")
        elif status == 404:
            return GitHubNotFoundError(str(error))
        elif status >= 500:
            return GitHubTransientError(f"GitHub server error ({status}): {error}")
        else:
            return GitHubClientError(f"GitHub API error ({status}): {error}")

    def _handle_graphql_error(self, error: GraphQLFailed) -> GitHubClientError:
        errors = getattr(error.response, "errors", None) or []
        if any(getattr(err, "type", None) == "RATE_LIMITED" for err in errors):
            return GitHubRateLimitError(f"GraphQL rate limit exceeded: {error}")
        return GitHubClientError(f"GraphQL query failed: {error}")

    @staticmethod
    def _reset_time(headers: dict[str, str]) -> datetime | None:
        retry_after = headers.get("retry-after")
        if retry_after and retry_after.isdigit():
            return datetime.fromtimestamp(
                datetime.now(UTC).timestamp() + int(retry_after), tz=UTC
            )
        reset_ts = int(headers.get("x-ratelimit-reset", "0") or 0)
        return datetime.fromtimestamp(reset_ts, tz=UTC) if reset_ts else None


def describe_pool(pool: PoolRateLimit) -> str:
    """One-line human summary of a rate limit pool."""
    return (
        f"{pool.pool.value}: {pool.remaining}/{pool.limit} remaining "
        f"({pool.remaining_percent:.1f}%), resets in {pool.seconds_until_reset}s"
    )
