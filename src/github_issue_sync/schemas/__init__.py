"""Pydantic schemas for GitHub Issue Sync.

Raw GitHub payload models, the canonical document shape and store
operations, and tracked source definitions.
"""

from .base import SchemaBase
from .document import (
    BulkOperation,
    EnrichedDate,
    IssueDocument,
    PullRequestDetails,
    ReactionSummary,
    StoredDocumentRead,
)
from .enums import PaginationMode, ReactionKind
from .github_api import (
    GitHubIssue,
    GitHubLabel,
    GitHubUser,
    GraphQLIssueNode,
)
from .source import (
    CACHE_COLLECTION,
    START_POSITION,
    Source,
    issues_collection,
    parse_repo_string,
    position_key,
)

__all__ = [
    # Base
    "SchemaBase",
    # Canonical documents
    "BulkOperation",
    "EnrichedDate",
    "IssueDocument",
    "PullRequestDetails",
    "ReactionSummary",
    "StoredDocumentRead",
    # Enums
    "PaginationMode",
    "ReactionKind",
    # GitHub API
    "GitHubIssue",
    "GitHubLabel",
    "GitHubUser",
    "GraphQLIssueNode",
    # Sources
    "CACHE_COLLECTION",
    "START_POSITION",
    "Source",
    "issues_collection",
    "parse_repo_string",
    "position_key",
]
