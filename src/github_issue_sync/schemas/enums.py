"""Enums for Pydantic schemas."""

from enum import Enum


class PaginationMode(str, Enum):
    """How a source's issues are paged through."""

    OFFSET = "offset"
    """REST pages numbered from 1, conditioned on a cached ETag per page."""

    CURSOR = "cursor"
    """GraphQL search pages linked by opaque continuation cursors."""


class ReactionKind(str, Enum):
    """The six reaction kinds summarized on each document.

    Values are the REST payload keys; ``graphql_content`` maps to the
    GraphQL ``ReactionContent`` enum.
    """

    UP_VOTE = "+1"
    DOWN_VOTE = "-1"
    LAUGH = "laugh"
    HOORAY = "hooray"
    CONFUSED = "confused"
    HEART = "heart"

    @property
    def graphql_content(self) -> str:
        return _GRAPHQL_CONTENT[self]


_GRAPHQL_CONTENT = {
    ReactionKind.UP_VOTE: "THUMBS_UP",
    ReactionKind.DOWN_VOTE: "THUMBS_DOWN",
    ReactionKind.LAUGH: "LAUGH",
    ReactionKind.HOORAY: "HOORAY",
    ReactionKind.CONFUSED: "CONFUSED",
    ReactionKind.HEART: "HEART",
}
