"""Document store module for GitHub Issue Sync."""

from github_issue_sync.db.engine import (
    create_engine,
    create_session_factory,
    create_tables,
    drop_tables,
)
from github_issue_sync.db.exceptions import WriteError
from github_issue_sync.db.models import Base, StoredDocument
from github_issue_sync.db.repositories import (
    BaseRepository,
    BulkIndexer,
    BulkWriteResult,
    CursorStore,
    DocumentRepository,
)

__all__ = [
    # Models
    "Base",
    "StoredDocument",
    # Engine
    "create_engine",
    "create_session_factory",
    "create_tables",
    "drop_tables",
    # Repositories
    "BaseRepository",
    "BulkIndexer",
    "BulkWriteResult",
    "CursorStore",
    "DocumentRepository",
    # Errors
    "WriteError",
]
