"""SQLAlchemy ORM models for the document store."""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Index, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import JSON


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


# ------------------------------------------------------------------------------
# StoredDocument model
# ------------------------------------------------------------------------------
class StoredDocument(Base):
    """One document in a named collection.

    Issue documents live in ``issues-{owner}-{repo}`` collections keyed by
    the issue number; cache entries live in the ``cache`` collection
    keyed by ``{owner}_{repo}_{position}``. Writes are upserts on the
    composite primary key, so re-ingesting a key replaces its body.
    """

    __tablename__ = "documents"

    collection: Mapped[str] = mapped_column(String(255), primary_key=True)
    doc_id: Mapped[str] = mapped_column(String(1024), primary_key=True)

    # Source linkage, used to query a source's cache entries
    owner: Mapped[str] = mapped_column(String(100))
    repo: Mapped[str] = mapped_column(String(100))

    body: Mapped[dict[str, Any]] = mapped_column(JSON)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    __table_args__ = (Index("ix_documents_collection_owner_repo", "collection", "owner", "repo"),)

    def __repr__(self) -> str:
        return f"<StoredDocument(collection='{self.collection}', doc_id='{self.doc_id}')>"
