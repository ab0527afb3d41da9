"""Pydantic schemas for canonical documents and store operations.

``IssueDocument`` is the storage shape shared by both pagination modes;
``BulkOperation`` is one pending upsert handed to the bulk indexer.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .base import SchemaBase


class EnrichedDate(BaseModel):
    """A timestamp plus the calendar facets analytics group by."""

    time: str = Field(description="ISO-8601 instant in UTC")
    weekday: str = Field(description="Abbreviated weekday name (Mon, Tue, ...)")
    weekday_number: int = Field(ge=0, le=6, description="0 = Sunday ... 6 = Saturday")
    hour_of_day: int = Field(ge=0, le=23, description="Hour of day (UTC)")


class ReactionSummary(BaseModel):
    """Totals for the six tracked reaction kinds."""

    total: int = Field(default=0, ge=0)
    up_vote: int = Field(default=0, ge=0)
    down_vote: int = Field(default=0, ge=0)
    laugh: int = Field(default=0, ge=0)
    hooray: int = Field(default=0, ge=0)
    confused: int = Field(default=0, ge=0)
    heart: int = Field(default=0, ge=0)


class PullRequestDetails(BaseModel):
    """Fields only pull requests carry."""

    additions: int = Field(default=0, ge=0)
    deletions: int = Field(default=0, ge=0)
    changed_files: int = Field(default=0, ge=0)
    commits: int = Field(default=0, ge=0)
    merged: bool = False
    merged_by: str | None = None
    reviewers: list[str] = Field(
        default_factory=list, description="Distinct reviewer logins, unordered"
    )


class IssueDocument(BaseModel):
    """Normalized, storage-ready issue or pull request.

    ``key`` (the issue number) is the upsert key inside the source's
    collection. REST and GraphQL agree on it for pull requests too, where
    their numeric ids differ. ``assignees`` is None when there are none, so
    consumers can tell it apart from a populated list.
    """

    model_config = ConfigDict(frozen=True)

    id: int | str = Field(description="REST id or GraphQL databaseId of the record")
    owner: str
    repo: str
    state: str | None = Field(default=None, description="open or closed")
    title: str | None = None
    number: int | None = None
    url: str | None = Field(
        default=None,
        description="Browser URL (html_url) rather than the API url, so both modes agree",
    )
    locked: bool = False
    comments: int = 0
    created_at: EnrichedDate | None = None
    updated_at: EnrichedDate | None = None
    closed_at: EnrichedDate | None = None
    author_association: str | None = None
    user: str | None = None
    body: str | None = None
    labels: list[str] = Field(default_factory=list)
    is_pull_request: bool = False
    assignees: list[str] | None = None
    reactions: ReactionSummary | None = None
    time_to_resolve: int | None = Field(default=None, description="closed - created, in ms")
    pull_request: PullRequestDetails | None = None

    @property
    def key(self) -> str:
        """Upsert key: the issue number, or the id when no number is known."""
        return str(self.number) if self.number is not None else str(self.id)

    def to_store(self) -> dict[str, Any]:
        """JSON-compatible body written to the store."""
        return self.model_dump(mode="json")


class BulkOperation(BaseModel):
    """One pending upsert of ``document`` at ``(collection, doc_id)``."""

    model_config = ConfigDict(frozen=True)

    collection: str
    doc_id: str
    owner: str
    repo: str
    document: dict[str, Any]


class StoredDocumentRead(SchemaBase):
    """A document as read back from the store."""

    collection: str
    doc_id: str
    owner: str
    repo: str
    body: dict[str, Any]
    created_at: datetime
    updated_at: datetime
