"""Cursor store - per-source page position to freshness token mapping."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from github_issue_sync.db.models import StoredDocument
from github_issue_sync.logging import get_logger
from github_issue_sync.schemas import CACHE_COLLECTION, BulkOperation, Source, position_key

from .base import BaseRepository

logger = get_logger(__name__)


class CursorStore(BaseRepository[StoredDocument]):
    """Reads cache entries and stages their updates.

    Entries live in the ``cache`` collection with id
    ``{owner}_{repo}_{position}`` and body ``{owner, repo, position, key}``.
    There is no direct write method: ``stage`` returns a BulkOperation that
    only takes effect when BulkIndexer commits it together with the
    documents of the page it certifies.

    Usage:
        store = CursorStore(session)
        cache = await store.load(source)        # {"1": '"etag-1"', ...}
        op = store.stage(source, 2, '"etag-2"')
        await indexer.write(documents, [op])
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, StoredDocument)

    async def load(self, source: Source) -> dict[str, str]:
        """Load all cache entries for a source.

        Returns:
            Mapping of position (as string) to token; empty if none exist
        """
        stmt = select(StoredDocument.body).where(
            StoredDocument.collection == CACHE_COLLECTION,
            StoredDocument.owner == source.owner,
            StoredDocument.repo == source.name,
        )
        result = await self._session.execute(stmt)

        cache: dict[str, str] = {}
        for body in result.scalars().all():
            position = body.get("position")
            key = body.get("key")
            if position is None or key is None:
                logger.warning("Ignoring malformed cache entry for {}: {}", source.full_name, body)
                continue
            cache[str(position)] = str(key)

        logger.debug("Loaded {} cache entries for {}", len(cache), source.full_name)
        return cache

    def stage(self, source: Source, position: int | str | None, token: str) -> BulkOperation:
        """Build the pending upsert of one cache entry."""
        key = position_key(position)
        return BulkOperation(
            collection=CACHE_COLLECTION,
            doc_id=source.cache_id(position),
            owner=source.owner,
            repo=source.name,
            document={
                "owner": source.owner,
                "repo": source.name,
                "position": key,
                "key": token,
            },
        )
