"""Issue Sync module - GitHub to document store synchronization.

Services:
- SyncOrchestrator: per-source page loop and bounded multi-source fan-out
- RecordTransformer: raw records to canonical IssueDocuments
"""

from .enums import OutputFormat
from .orchestrator import SyncOrchestrator
from .results import SourceSyncResult, SyncRunResult
from .transformer import (
    MalformedRecordError,
    RecordTransformer,
    convert_graphql_node,
    convert_record,
    convert_rest_issue,
    enrich_date,
    summarize_reactions,
    time_to_resolve_ms,
)

__all__ = [
    # Orchestration
    "SyncOrchestrator",
    "SourceSyncResult",
    "SyncRunResult",
    # Transformation
    "MalformedRecordError",
    "RecordTransformer",
    "convert_graphql_node",
    "convert_record",
    "convert_rest_issue",
    "enrich_date",
    "summarize_reactions",
    "time_to_resolve_ms",
    # CLI
    "OutputFormat",
]
