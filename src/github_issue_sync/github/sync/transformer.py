"""Record Transformer - raw API records to canonical IssueDocuments.

Everything here apart from warning logs is pure: the same raw record
always yields an identical document.

Handles both record shapes:
- REST issues (snake_case, ``pull_request`` key on pull requests)
- GraphQL search nodes (camelCase, ``__typename`` of Issue/PullRequest)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import ValidationError

from github_issue_sync.logging import get_logger
from github_issue_sync.schemas import (
    EnrichedDate,
    GitHubIssue,
    GraphQLIssueNode,
    IssueDocument,
    PullRequestDetails,
    ReactionKind,
    ReactionSummary,
    Source,
)
from github_issue_sync.schemas.github_api import GitHubLabel, GraphQLReactionGroup

logger = get_logger(__name__)

WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

_SUMMARY_FIELDS = {
    ReactionKind.UP_VOTE: "up_vote",
    ReactionKind.DOWN_VOTE: "down_vote",
    ReactionKind.LAUGH: "laugh",
    ReactionKind.HOORAY: "hooray",
    ReactionKind.CONFUSED: "confused",
    ReactionKind.HEART: "heart",
}


class MalformedRecordError(ValueError):
    """Raised when a raw record cannot be turned into a document at all."""


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps from the API are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def enrich_date(value: datetime | None) -> EnrichedDate | None:
    """Expand a timestamp into its calendar facets (UTC).

    Example:
        2021-03-15T10:00:00Z -> weekday "Mon", weekday_number 1, hour_of_day 10
    """
    if value is None:
        return None
    utc = _as_utc(value)
    weekday_number = (utc.weekday() + 1) % 7
    return EnrichedDate(
        time=utc.isoformat().replace("+00:00", "Z"),
        weekday=WEEKDAY_NAMES[weekday_number],
        weekday_number=weekday_number,
        hour_of_day=utc.hour,
    )


def time_to_resolve_ms(created_at: datetime | None, closed_at: datetime | None) -> int | None:
    """Milliseconds from creation to close, None unless both are known."""
    if created_at is None or closed_at is None:
        return None
    delta = _as_utc(closed_at) - _as_utc(created_at)
    return delta // timedelta(milliseconds=1)


def summarize_reactions(
    rollup: Mapping[str, Any] | None = None,
    groups: Sequence[GraphQLReactionGroup] | None = None,
    total: int | None = None,
) -> ReactionSummary | None:
    """Build the six-kind reaction summary.

    Args:
        rollup: REST ``reactions`` object keyed by ``+1``, ``-1``, ``laugh``...
        groups: GraphQL ``reactionGroups``
        total: GraphQL ``reactions.totalCount``

    Returns:
        None when neither shape is present. Otherwise every kind resolves
        to a count, zero when the payload does not report it.
    """
    if rollup is None and groups is None and total is None:
        return None

    counts: dict[str, int] = dict.fromkeys(_SUMMARY_FIELDS.values(), 0)
    if rollup is not None:
        for kind, field_name in _SUMMARY_FIELDS.items():
            counts[field_name] = int(rollup.get(kind.value) or 0)
        total = rollup.get("total_count", total)
    if groups is not None:
        by_content = {
            group.content: group.reactors.total_count if group.reactors else 0
            for group in groups
        }
        for kind, field_name in _SUMMARY_FIELDS.items():
            counts[field_name] = by_content.get(kind.graphql_content, counts[field_name])

    if total is None:
        total = sum(counts.values())
    return ReactionSummary(total=int(total), **counts)


def _label_names(labels: Iterable[GitHubLabel | str | None]) -> list[str]:
    names: list[str] = []
    for label in labels:
        if label is None:
            continue
        name = label if isinstance(label, str) else label.name
        if name not in names:
            names.append(name)
    return names


def _state(value: str | None) -> str | None:
    # GraphQL reports merged pull requests as MERGED, REST as closed
    if not value:
        return None
    state = value.lower()
    return "closed" if state == "merged" else state


def convert_rest_issue(raw: Mapping[str, Any], owner: str, repo: str) -> IssueDocument:
    """Convert a REST issue (or pull request) into a document.

    Raises:
        MalformedRecordError: If the record has no id or number
    """
    try:
        issue = GitHubIssue.model_validate(raw)
    except ValidationError as e:
        raise MalformedRecordError(f"Invalid REST issue record: {e}") from e

    return IssueDocument(
        id=issue.id,
        owner=owner,
        repo=repo,
        state=_state(issue.state),
        title=issue.title,
        number=issue.number,
        url=issue.html_url or issue.url,
        locked=issue.locked,
        comments=issue.comments,
        created_at=enrich_date(issue.created_at),
        updated_at=enrich_date(issue.updated_at),
        closed_at=enrich_date(issue.closed_at),
        author_association=issue.author_association,
        user=issue.user.login if issue.user else None,
        body=issue.body,
        labels=_label_names(issue.labels),
        is_pull_request=issue.pull_request is not None,
        assignees=[a.login for a in issue.assignees] if issue.assignees else None,
        reactions=summarize_reactions(rollup=issue.reactions),
        time_to_resolve=time_to_resolve_ms(issue.created_at, issue.closed_at),
    )


def convert_graphql_node(raw: Mapping[str, Any], owner: str, repo: str) -> IssueDocument:
    """Convert a GraphQL ``Issue``/``PullRequest`` node into a document.

    The document is keyed by ``number`` like its REST counterpart. ``id``
    is ``databaseId``, or the node id when that is missing. Connections cut
    off by their ``first:`` limit are logged.

    Raises:
        MalformedRecordError: If the node has no number or neither id
    """
    try:
        node = GraphQLIssueNode.model_validate(raw)
    except ValidationError as e:
        raise MalformedRecordError(f"Invalid GraphQL node: {e}") from e

    doc_id: int | str | None = node.database_id if node.database_id is not None else node.node_id
    if doc_id is None:
        raise MalformedRecordError("GraphQL node has neither databaseId nor id")
    if node.number is None:
        raise MalformedRecordError("GraphQL node has no number")
    for name, (returned, total) in node.truncated_connections().items():
        logger.warning(
            "{}/{}#{}: {} truncated to {} of {}", owner, repo, node.number, name, returned, total
        )

    assignees = (
        [a.login for a in node.assignees.nodes if a is not None] if node.assignees else []
    )
    is_pull_request = node.has_pull_request_data

    pull_request = None
    if is_pull_request:
        reviewers = {
            review.author.login
            for review in (node.reviews.nodes if node.reviews else [])
            if review is not None and review.author is not None
        }
        pull_request = PullRequestDetails(
            additions=node.additions or 0,
            deletions=node.deletions or 0,
            changed_files=node.changed_files or 0,
            commits=node.commits.total_count if node.commits else 0,
            merged=bool(node.merged),
            merged_by=node.merged_by.login if node.merged_by else None,
            reviewers=sorted(reviewers),
        )

    return IssueDocument(
        id=doc_id,
        owner=owner,
        repo=repo,
        state=_state(node.state),
        title=node.title,
        number=node.number,
        url=node.url,
        locked=node.locked,
        comments=node.comments.total_count if node.comments else 0,
        created_at=enrich_date(node.created_at),
        updated_at=enrich_date(node.updated_at),
        closed_at=enrich_date(node.closed_at),
        author_association=node.author_association,
        user=node.author.login if node.author else None,
        body=node.body,
        labels=_label_names(node.labels.nodes if node.labels else []),
        is_pull_request=is_pull_request,
        assignees=assignees or None,
        reactions=summarize_reactions(
            groups=node.reaction_groups,
            total=node.reactions.total_count if node.reactions else None,
        ),
        time_to_resolve=time_to_resolve_ms(node.created_at, node.closed_at),
        pull_request=pull_request,
    )


def convert_record(raw: Mapping[str, Any], owner: str, repo: str) -> IssueDocument:
    """Convert either record shape, dispatching on ``__typename``."""
    if not isinstance(raw, Mapping):
        raise MalformedRecordError(f"Expected a JSON object, got {type(raw).__name__}")
    if "__typename" in raw:
        return convert_graphql_node(raw, owner, repo)
    return convert_rest_issue(raw, owner, repo)


class RecordTransformer:
    """Converts whole pages, skipping records that cannot be parsed.

    Usage:
        transformer = RecordTransformer()
        documents, skipped = transformer.convert_page(result.records, source)
    """

    def convert(self, raw: Mapping[str, Any], source: Source) -> IssueDocument:
        return convert_record(raw, source.owner, source.name)

    def convert_page(
        self, records: Iterable[Mapping[str, Any]], source: Source
    ) -> tuple[list[IssueDocument], int]:
        """Convert every record of a page.

        Returns:
            Tuple of (documents, number of malformed records skipped)
        """
        documents: list[IssueDocument] = []
        skipped = 0
        for raw in records:
            try:
                documents.append(self.convert(raw, source))
            except MalformedRecordError as e:
                skipped += 1
                logger.warning("Skipping malformed record from {}: {}", source.full_name, e)
        return documents, skipped
