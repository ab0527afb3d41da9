"""Read access to stored documents."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from github_issue_sync.db.models import StoredDocument
from github_issue_sync.schemas import CACHE_COLLECTION, Source, StoredDocumentRead

from .base import BaseRepository


class DocumentRepository(BaseRepository[StoredDocument]):
    """Queries over the documents table.

    Writes never go through this class; they are batched by BulkIndexer.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, StoredDocument)

    async def get(self, collection: str, doc_id: str | int) -> StoredDocumentRead | None:
        """Get one document by collection and id."""
        stored = await self.get_by_key(collection, str(doc_id))
        return StoredDocumentRead.from_orm(stored) if stored else None

    async def list_collection(
        self,
        collection: str,
        limit: int | None = None,
    ) -> list[StoredDocumentRead]:
        """All documents in a collection, ordered by key."""
        stmt = (
            select(StoredDocument)
            .where(StoredDocument.collection == collection)
            .order_by(StoredDocument.doc_id)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return StoredDocumentRead.from_orm_list(list(result.scalars().all()))

    async def count_collection(self, collection: str) -> int:
        """Number of documents in a collection."""
        return await self._count_where(StoredDocument.collection == collection)

    async def count_for_source(self, source: Source) -> int:
        """Number of issue documents stored for a source.

        Scoped by owner and repo as well, since two repositories can share
        a collection name (``a-b/c`` and ``a/b-c``).
        """
        return await self._count_where(
            StoredDocument.collection == source.collection,
            StoredDocument.owner == source.owner,
            StoredDocument.repo == source.name,
        )

    async def count_cache_entries(self, source: Source) -> int:
        """Number of cached page positions recorded for a source."""
        return await self._count_where(
            StoredDocument.collection == CACHE_COLLECTION,
            StoredDocument.owner == source.owner,
            StoredDocument.repo == source.name,
        )
