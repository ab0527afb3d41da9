"""Bulk Indexer - one-transaction upserts of documents and cache entries.

Every page the sync loop processes ends in exactly one ``write`` call: the
page's documents plus the cache entry certifying them. Both commit
together or not at all, so a page's freshness token is never recorded
without its documents.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from github_issue_sync.db.exceptions import WriteError
from github_issue_sync.db.models import StoredDocument
from github_issue_sync.logging import get_logger
from github_issue_sync.schemas import (
    CACHE_COLLECTION,
    BulkOperation,
    IssueDocument,
    issues_collection,
)

from .base import BaseRepository

logger = get_logger(__name__)

# Keeps bound parameters per statement under SQLite's variable limit
_ROWS_PER_STATEMENT = 100


@dataclass
class BulkWriteResult:
    """Counts of what one committed batch contained."""

    documents: int = 0
    """Issue documents upserted."""

    cache_entries: int = 0
    """Cache entries upserted."""

    @property
    def total(self) -> int:
        return self.documents + self.cache_entries


def document_operation(document: IssueDocument) -> BulkOperation:
    """Build the upsert for one issue document, keyed by its issue number."""
    return BulkOperation(
        collection=issues_collection(document.owner, document.repo),
        doc_id=document.key,
        owner=document.owner,
        repo=document.repo,
        document=document.to_store(),
    )


def _dedupe(operations: Iterable[BulkOperation]) -> list[BulkOperation]:
    """Collapse repeated keys, last write wins, first-seen order kept."""
    latest: dict[tuple[str, str], BulkOperation] = {}
    for op in operations:
        latest[(op.collection, op.doc_id)] = op
    return list(latest.values())


class BulkIndexer(BaseRepository[StoredDocument]):
    """Writes batches of documents and cache updates as upserts.

    Upserts replace the stored body entirely (no merge). Supported
    dialects are SQLite and PostgreSQL, both through
    ``INSERT ... ON CONFLICT DO UPDATE``.

    Usage:
        indexer = BulkIndexer(session)
        result = await indexer.write(documents, [cursor_store.stage(source, 1, etag)])
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, StoredDocument)

    def _insert(self) -> Any:
        dialect = self.dialect_name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        else:
            raise WriteError(f"Bulk upsert is not supported on dialect '{dialect}'")
        return insert

    async def write(
        self,
        documents: Sequence[IssueDocument],
        cache_updates: Sequence[BulkOperation] = (),
    ) -> BulkWriteResult:
        """Upsert documents and cache entries in a single transaction.

        Args:
            documents: Canonical documents to upsert
            cache_updates: Pending cache writes from CursorStore.stage

        Returns:
            BulkWriteResult with the committed counts

        Raises:
            WriteError: If any statement or the commit fails. The whole
                batch is rolled back.
        """
        operations = _dedupe(
            [document_operation(doc) for doc in documents] + list(cache_updates)
        )
        if not operations:
            return BulkWriteResult()

        insert = self._insert()
        now = datetime.now(UTC).replace(tzinfo=None)
        rows = [
            {
                "collection": op.collection,
                "doc_id": op.doc_id,
                "owner": op.owner,
                "repo": op.repo,
                "body": op.document,
                "created_at": now,
                "updated_at": now,
            }
            for op in operations
        ]

        try:
            for start in range(0, len(rows), _ROWS_PER_STATEMENT):
                stmt = insert(StoredDocument).values(rows[start : start + _ROWS_PER_STATEMENT])
                stmt = stmt.on_conflict_do_update(
                    index_elements=[StoredDocument.collection, StoredDocument.doc_id],
                    set_={
                        "owner": stmt.excluded.owner,
                        "repo": stmt.excluded.repo,
                        "body": stmt.excluded.body,
                        "updated_at": stmt.excluded.updated_at,
                    },
                )
                await self._session.execute(stmt)
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error("Bulk write of {} operations failed: {}", len(operations), e)
            raise WriteError(
                f"Bulk write of {len(operations)} operations failed: {e}",
                operations=len(operations),
            ) from e

        cache_count = sum(1 for op in operations if op.collection == CACHE_COLLECTION)
        result = BulkWriteResult(
            documents=len(operations) - cache_count,
            cache_entries=cache_count,
        )
        logger.debug(
            "Committed batch: documents={}, cache_entries={}",
            result.documents,
            result.cache_entries,
        )
        return result
