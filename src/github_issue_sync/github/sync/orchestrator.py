"""Sync Orchestrator - incremental, resumable sync of many sources.

Per source:
    load cache -> { fetch page -> skip (not modified) | transform + write } -> done

Each page's documents and cache entry are committed before the next page
is requested, so an interrupted run resumes with every committed page
already conditioned on its stored token. Sources run concurrently on a
bounded worker pool and never share a session.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Sequence
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from github_issue_sync.config import Settings, get_settings
from github_issue_sync.db.repositories import BulkIndexer, CursorStore
from github_issue_sync.github.client import GitHubClient, describe_pool
from github_issue_sync.github.exceptions import (
    GitHubRateLimitError,
    GitHubRetryableError,
    GitHubSearchLimitError,
)
from github_issue_sync.github.pagination import PageFetcher, PageResult, Position, create_fetcher
from github_issue_sync.github.rate_limit import RateLimitStatus
from github_issue_sync.logging import bind_source, get_logger
from github_issue_sync.schemas import BulkOperation, PaginationMode, Source, position_key

from .results import SourceSyncResult, SyncRunResult
from .transformer import RecordTransformer

if TYPE_CHECKING:
    from loguru import Logger

logger = get_logger(__name__)

FetcherFactory = Callable[[PaginationMode], PageFetcher]
Sleeper = Callable[[float], Awaitable[None]]


class SyncOrchestrator:
    """Drives the page loop for every source.

    Usage:
        engine = create_engine(settings.database_url)
        async with GitHubClient(settings.github_token) as client:
            orchestrator = SyncOrchestrator(client, create_session_factory(engine))
            result = await orchestrator.sync_all(sources)
    """

    def __init__(
        self,
        client: GitHubClient,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        settings: Settings | None = None,
        fetcher_factory: FetcherFactory | None = None,
        transformer: RecordTransformer | None = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            client: GitHub API client shared by all fetchers
            session_factory: Creates one session per source
            settings: Application settings (defaults to get_settings())
            fetcher_factory: Builds the PageFetcher for a pagination mode
            transformer: Record transformer (defaults to RecordTransformer())
            sleep: Awaitable used for retry waits
        """
        self._client = client
        self._session_factory = session_factory
        self._settings = settings or get_settings()
        self._config = self._settings.sync
        self._fetcher_factory = fetcher_factory or (
            lambda mode: create_fetcher(mode, client, self._config.page_size)
        )
        self._transformer = transformer or RecordTransformer()
        self._sleep = sleep

    async def sync_all(self, sources: Sequence[Source]) -> SyncRunResult:
        """Sync every source, at most ``max_concurrent_sources`` at a time.

        A failing source never affects the others; all workers are joined
        before returning.

        Returns:
            SyncRunResult with one entry per source, in input order
        """
        start_time = time.monotonic()
        semaphore = asyncio.Semaphore(self._config.max_concurrent_sources)

        async def worker(source: Source) -> SourceSyncResult:
            async with semaphore:
                return await self.sync_source(source)

        logger.info(
            "Starting sync of {} sources (concurrency={})",
            len(sources),
            self._config.max_concurrent_sources,
        )
        source_results = await asyncio.gather(*(worker(source) for source in sources))

        result = SyncRunResult(
            source_results=list(source_results),
            duration_seconds=time.monotonic() - start_time,
        )
        logger.info(
            "Sync complete: completed={}, failed={}, documents={}, pages_skipped={} ({:.1f}s)",
            len(result.completed),
            len(result.failed),
            result.total_documents,
            result.total_pages_skipped,
            result.duration_seconds,
        )
        return result

    async def sync_source(self, source: Source) -> SourceSyncResult:
        """Sync a single source to completion or failure.

        Any error ends this source only; it is recorded on the result.
        """
        log = bind_source(source.owner, source.name)
        result = SourceSyncResult(source=source, started_at=datetime.now(UTC))
        fetcher = self._fetcher_factory(PaginationMode(source.mode))

        log.info("Starting {} sync", fetcher.mode.value)
        try:
            async with self._session_factory() as session:
                await self._run_pages(source, fetcher, session, result, log)
        except Exception as e:
            result.error = e
            log.error("Sync failed after {} pages: {}", result.pages_fetched, result.reason)
        else:
            log.info(
                "Sync done: pages={}, skipped={}, written={}, documents={}",
                result.pages_fetched,
                result.pages_skipped,
                result.pages_written,
                result.documents_written,
            )
        finally:
            result.completed_at = datetime.now(UTC)

        return result

    async def _run_pages(
        self,
        source: Source,
        fetcher: PageFetcher,
        session: AsyncSession,
        result: SourceSyncResult,
        log: Logger,
    ) -> None:
        cursor_store = CursorStore(session)
        indexer = BulkIndexer(session)

        cache = await cursor_store.load(source)
        position = fetcher.initial_position()
        received = 0

        while True:
            token = fetcher.cached_token(cache, position)
            page = await self._fetch_with_retry(fetcher, source, position, token, result, log)
            result.pages_fetched += 1
            self._report_rate_limit(page, result, log)
            received += len(page.records)

            if page.not_modified:
                result.pages_skipped += 1
                log.info("Page {} not modified, skipping", position_key(position))
            elif page.records:
                documents, skipped = self._transformer.convert_page(page.records, source)
                result.records_skipped += skipped

                cache_updates: list[BulkOperation] = []
                if page.token is not None:
                    cache_updates.append(cursor_store.stage(source, position, page.token))

                written = await indexer.write(documents, cache_updates)
                result.pages_written += 1
                result.documents_written += written.documents
                log.info(
                    "Page {}: wrote {} documents ({} skipped)",
                    position_key(position),
                    written.documents,
                    skipped,
                )
            else:
                log.debug("Page {} is empty", position_key(position))

            if not page.has_more:
                self._check_complete(page, received)
                break
            position = fetcher.next_position(position, page)

    @staticmethod
    def _check_complete(last_page: PageResult, received: int) -> None:
        """Fail a listing that ended short of the total it reported.

        Raises:
            GitHubSearchLimitError: If fewer records arrived than reported
        """
        if last_page.total is not None and received < last_page.total:
            raise GitHubSearchLimitError(
                f"Listing ended after {received} of {last_page.total} records",
                returned=received,
                total=last_page.total,
            )

    async def _fetch_with_retry(
        self,
        fetcher: PageFetcher,
        source: Source,
        position: Position,
        token: str | None,
        result: SourceSyncResult,
        log: Logger,
    ) -> PageResult:
        attempt = 0
        while True:
            try:
                return await fetcher.fetch(source, position, token)
            except GitHubRetryableError as e:
                attempt += 1
                if attempt > self._config.max_fetch_retries:
                    raise
                delay = self.retry_delay(e, attempt)
                result.retries += 1
                log.warning(
                    "Page {} failed ({}), retry {}/{} in {:.1f}s",
                    position_key(position),
                    e,
                    attempt,
                    self._config.max_fetch_retries,
                    delay,
                )
                await self._sleep(delay)

    def retry_delay(self, error: GitHubRetryableError, attempt: int) -> float:
        """Seconds to wait before retry number ``attempt`` (1-based).

        Rate limit errors wait until the quota resets; everything else
        backs off exponentially. Both are capped by max_retry_wait_seconds.
        """
        if isinstance(error, GitHubRateLimitError) and error.reset_at is not None:
            delay = max(0.0, (error.reset_at - datetime.now(UTC)).total_seconds())
        else:
            delay = self._config.retry_backoff_seconds * 2 ** (attempt - 1)
        return min(delay, self._config.max_retry_wait_seconds)

    def _report_rate_limit(
        self, page: PageResult, result: SourceSyncResult, log: Logger
    ) -> None:
        if page.rate_limit is None:
            return
        pool = page.rate_limit.primary()
        if pool is None:
            return
        result.rate_limit = pool

        thresholds = self._settings.rate_limit
        status = pool.get_status(
            thresholds.healthy_threshold_pct,
            thresholds.warning_threshold_pct,
            thresholds.critical_threshold_pct,
        )
        if status in (RateLimitStatus.CRITICAL, RateLimitStatus.EXHAUSTED):
            log.warning("Rate limit {}: {}", status.value, describe_pool(pool))
        else:
            log.debug("Rate limit {}: {}", status.value, describe_pool(pool))
