"""Pydantic schema for a tracked source repository."""

from pydantic import Field

from .base import SchemaBase
from .enums import PaginationMode

CACHE_COLLECTION = "cache"
"""Fixed collection holding every source's cache entries."""

START_POSITION = "start"
"""Cache position recorded for the first (null) cursor in cursor mode."""


class Source(SchemaBase, frozen=True):
    """One tracked repository and the pagination strategy used for it."""

    owner: str = Field(min_length=1, max_length=100, description="GitHub org or user")
    name: str = Field(min_length=1, max_length=100, description="Repository name")
    mode: PaginationMode = Field(default=PaginationMode.OFFSET, description="Pagination mode")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def collection(self) -> str:
        """Document collection for this source's issues."""
        return issues_collection(self.owner, self.name)

    def cache_id(self, position: int | str | None) -> str:
        """Cache entry id for a page number or cursor position."""
        return f"{self.owner}_{self.name}_{position_key(position)}"

    @classmethod
    def parse(cls, full_name: str, mode: PaginationMode = PaginationMode.OFFSET) -> "Source":
        """
        Factory method to create from a full repository name.

        Args:
            full_name: Repo path like 'elastic/kibana'
            mode: Pagination mode for this source

        Raises:
            ValueError: If the string is not in owner/name format
        """
        owner, name = parse_repo_string(full_name)
        return cls(owner=owner, name=name, mode=mode)


def position_key(position: int | str | None) -> str:
    """Normalize a page number or cursor into the string used as cache key."""
    if position is None:
        return START_POSITION
    return str(position)


def parse_repo_string(repo: str) -> tuple[str, str]:
    """Split 'owner/name' into its parts.

    Raises:
        ValueError: If the format is invalid
    """
    parts = repo.strip().split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ValueError(f"Repository must be in owner/name format, got '{repo}'")
    return parts[0], parts[1]


def issues_collection(owner: str, repo: str) -> str:
    """Collection name holding a repository's issue documents."""
    return f"issues-{owner}-{repo}"
