"""Page fetchers: one abstraction over the two pagination schemes.

The sync loop only ever talks to a PageFetcher. It asks for the first
position, fetches, and asks for the next position until ``has_more`` is
False. Positions are page numbers in offset mode and continuation cursors
in cursor mode; the loop never inspects them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from github_issue_sync.schemas import PaginationMode, Source, position_key

from .client import GitHubClient
from .rate_limit.schemas import RateLimitSnapshot

Position = int | str | None


@dataclass
class PageResult:
    """Outcome of fetching one page."""

    records: list[dict[str, Any]] = field(default_factory=list)
    token: str | None = None
    """New freshness token (offset) or next cursor (cursor)."""

    has_more: bool = False
    not_modified: bool = False
    total: int | None = None
    """Records the whole listing reports, when the scheme tells (cursor)."""

    rate_limit: RateLimitSnapshot | None = None


class PageFetcher(ABC):
    """Fetches pages for one pagination scheme."""

    mode: PaginationMode

    def __init__(self, client: GitHubClient, page_size: int = 100) -> None:
        self._client = client
        self._page_size = page_size

    @property
    def page_size(self) -> int:
        return self._page_size

    @abstractmethod
    def initial_position(self) -> Position:
        """Position of the first page."""

    def cached_token(self, cache: Mapping[str, str], position: Position) -> str | None:
        """Token to condition the request for ``position`` on, if any."""
        return None

    @abstractmethod
    def next_position(self, position: Position, result: PageResult) -> Position:
        """Position following ``position`` once ``result`` is known."""

    @abstractmethod
    async def fetch(self, source: Source, position: Position, token: str | None) -> PageResult:
        """Fetch the page at ``position``.

        Raises:
            GitHubClientError: Or a subclass; fetchers never retry
        """


class OffsetPageFetcher(PageFetcher):
    """Numbered REST pages conditioned on cached ETags."""

    mode = PaginationMode.OFFSET

    def initial_position(self) -> int:
        return 1

    def cached_token(self, cache: Mapping[str, str], position: Position) -> str | None:
        return cache.get(position_key(position))

    def next_position(self, position: Position, result: PageResult) -> int:
        return int(position or 0) + 1

    async def fetch(self, source: Source, position: Position, token: str | None) -> PageResult:
        page = await self._client.get_issues_page(
            source.owner,
            source.name,
            page=int(position or 1),
            per_page=self._page_size,
            etag=token,
        )
        if page.not_modified:
            return PageResult(
                records=[],
                token=token,
                has_more=True,
                not_modified=True,
                rate_limit=page.rate_limit,
            )
        return PageResult(
            records=page.records,
            token=page.etag,
            has_more=page.has_next,
            rate_limit=page.rate_limit,
        )


class CursorPageFetcher(PageFetcher):
    """GraphQL search pages chained by continuation cursors.

    Cursors carry no freshness information, so every page is fetched and
    every run starts from the null cursor.
    """

    mode = PaginationMode.CURSOR

    def initial_position(self) -> None:
        return None

    def next_position(self, position: Position, result: PageResult) -> str | None:
        return result.token

    async def fetch(self, source: Source, position: Position, token: str | None) -> PageResult:
        cursor = None if position is None else str(position)
        page = await self._client.search_issues(
            source.owner,
            source.name,
            cursor=cursor,
            page_size=self._page_size,
        )
        return PageResult(
            records=page.nodes,
            token=page.end_cursor,
            has_more=page.has_next_page and page.end_cursor is not None,
            total=page.issue_count,
            rate_limit=page.rate_limit,
        )


def create_fetcher(
    mode: PaginationMode | str, client: GitHubClient, page_size: int = 100
) -> PageFetcher:
    """Build the fetcher for a pagination mode."""
    mode = PaginationMode(mode)
    if mode is PaginationMode.CURSOR:
        return CursorPageFetcher(client, page_size)
    return OffsetPageFetcher(client, page_size)
