"""Pydantic schemas for parsing GitHub API responses.

Two raw shapes reach the sync engine:
- REST issues: GET /repos/{owner}/{repo}/issues (pull requests included,
  marked by a ``pull_request`` key)
- GraphQL search nodes: ``Issue`` and ``PullRequest`` objects returned by
  ``search(type: ISSUE)``

Models are deliberately lenient. Only the record identifiers are required;
everything else degrades to None or an empty value.

See: https://docs.github.com/en/rest/issues/issues
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ------------------------------------------------------------------------------
# REST
# ------------------------------------------------------------------------------
class GitHubUser(BaseModel):
    """GitHub user object from REST responses."""

    login: str = Field(description="GitHub username")
    id: int | None = Field(default=None, description="GitHub user ID")


class GitHubLabel(BaseModel):
    """GitHub label object from REST responses."""

    name: str = Field(description="Label name")
    color: str | None = Field(default=None, description="Label color (hex without #)")


class GitHubIssue(BaseModel):
    """Issue (or pull request) from the REST issues endpoint."""

    id: int = Field(description="Global numeric ID of the issue")
    number: int = Field(description="Issue number, unique within the repository")
    state: str | None = Field(default=None, description="open or closed")
    title: str | None = None
    body: str | None = None
    url: str | None = Field(default=None, description="API URL")
    html_url: str | None = Field(default=None, description="Browser URL")
    locked: bool = False
    comments: int = 0

    user: GitHubUser | None = None
    author_association: str | None = None

    created_at: datetime | None = None
    updated_at: datetime | None = None
    closed_at: datetime | None = None

    labels: list[GitHubLabel | str] = Field(default_factory=list)
    assignees: list[GitHubUser] | None = None
    reactions: dict[str, Any] | None = Field(
        default=None, description="Rollup keyed by reaction name (+1, -1, laugh, ...)"
    )
    pull_request: dict[str, Any] | None = Field(
        default=None, description="Present only when the issue is a pull request"
    )


# ------------------------------------------------------------------------------
# GraphQL
# ------------------------------------------------------------------------------
class GraphQLModel(BaseModel):
    """Base for camelCase GraphQL payloads."""

    model_config = ConfigDict(populate_by_name=True)


class GraphQLActor(GraphQLModel):
    login: str


class GraphQLTotalCount(GraphQLModel):
    total_count: int = Field(default=0, alias="totalCount")


class GraphQLLabel(GraphQLModel):
    name: str


class GraphQLConnection(GraphQLModel):
    """A ``first: N`` connection; ``totalCount`` tells whether it was cut off."""

    nodes: list[Any] = Field(default_factory=list)
    total_count: int | None = Field(default=None, alias="totalCount")

    @property
    def returned(self) -> int:
        return len(self.nodes)

    @property
    def truncated(self) -> bool:
        return self.total_count is not None and self.total_count > self.returned


class GraphQLLabelConnection(GraphQLConnection):
    nodes: list[GraphQLLabel | None] = Field(default_factory=list)


class GraphQLActorConnection(GraphQLConnection):
    nodes: list[GraphQLActor | None] = Field(default_factory=list)


class GraphQLReview(GraphQLModel):
    author: GraphQLActor | None = None


class GraphQLReviewConnection(GraphQLConnection):
    nodes: list[GraphQLReview | None] = Field(default_factory=list)


class GraphQLReactionGroup(GraphQLModel):
    content: str
    reactors: GraphQLTotalCount | None = None


class GraphQLIssueNode(GraphQLModel):
    """``Issue`` or ``PullRequest`` node from the search connection."""

    typename: str = Field(default="Issue", alias="__typename")
    node_id: str | None = Field(default=None, alias="id")
    database_id: int | None = Field(default=None, alias="databaseId")

    number: int | None = None
    title: str | None = None
    body: str | None = None
    url: str | None = None
    state: str | None = None
    locked: bool = False

    author: GraphQLActor | None = None
    author_association: str | None = Field(default=None, alias="authorAssociation")

    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    closed_at: datetime | None = Field(default=None, alias="closedAt")

    comments: GraphQLTotalCount | None = None
    labels: GraphQLLabelConnection | None = None
    assignees: GraphQLActorConnection | None = None
    reactions: GraphQLTotalCount | None = None
    reaction_groups: list[GraphQLReactionGroup] | None = Field(
        default=None, alias="reactionGroups"
    )

    # Pull request only
    additions: int | None = None
    deletions: int | None = None
    changed_files: int | None = Field(default=None, alias="changedFiles")
    commits: GraphQLTotalCount | None = None
    merged: bool | None = None
    merged_by: GraphQLActor | None = Field(default=None, alias="mergedBy")
    reviews: GraphQLReviewConnection | None = None

    @property
    def has_pull_request_data(self) -> bool:
        """Whether the node carries pull request fields."""
        if self.typename == "PullRequest":
            return True
        return self.merged is not None or self.changed_files is not None

    def truncated_connections(self) -> dict[str, tuple[int, int]]:
        """Connections cut off by their ``first:`` limit, name -> (returned, total)."""
        connections = {
            "labels": self.labels,
            "assignees": self.assignees,
            "reviews": self.reviews,
        }
        return {
            name: (connection.returned, connection.total_count or 0)
            for name, connection in connections.items()
            if connection is not None and connection.truncated
        }

