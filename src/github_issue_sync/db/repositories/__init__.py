"""Repository pattern implementation for document store access.

- CursorStore: per-source cache entries (read + staged writes)
- BulkIndexer: transactional upserts of documents and cache entries
- DocumentRepository: read-side queries
"""

from .base import BaseRepository
from .bulk_indexer import BulkIndexer, BulkWriteResult, document_operation
from .cursor_store import CursorStore
from .documents import DocumentRepository

__all__ = [
    "BaseRepository",
    "BulkIndexer",
    "BulkWriteResult",
    "CursorStore",
    "DocumentRepository",
    "document_operation",
]
