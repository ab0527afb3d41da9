"""Base repository pattern implementation for async SQLAlchemy.

Provides common session handling and query helpers shared by the store
repositories.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from github_issue_sync.db.models import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Base repository with common async session handling.

    Usage:
        class DocumentRepository(BaseRepository[StoredDocument]):
            def __init__(self, session: AsyncSession) -> None:
                super().__init__(session, StoredDocument)

    The caller owns the session lifecycle. Sessions are not shared between
    concurrently running source workers.
    """

    def __init__(self, session: AsyncSession, model_class: type[ModelT]) -> None:
        """Initialize the repository with a session.

        Args:
            session: Async SQLAlchemy session (caller manages lifecycle)
            model_class: The SQLAlchemy model class this repository manages
        """
        self._session = session
        self._model_class = model_class

    @property
    def session(self) -> AsyncSession:
        """Access the underlying session."""
        return self._session

    @property
    def dialect_name(self) -> str:
        """Name of the database dialect behind the session (sqlite, postgresql)."""
        return self._session.get_bind().dialect.name

    # -------------------------------------------------------------------------
    # Common Read Operations
    # -------------------------------------------------------------------------

    async def get_by_key(self, *key: Any) -> ModelT | None:
        """Get an entity by its (possibly composite) primary key."""
        identity = key[0] if len(key) == 1 else tuple(key)
        return await self._session.get(self._model_class, identity)

    async def _count_where(self, *criteria: Any) -> int:
        stmt = select(func.count()).select_from(self._model_class)
        if criteria:
            stmt = stmt.where(*criteria)
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    async def count(self) -> int:
        """Count total entities of this type."""
        return await self._count_where()
