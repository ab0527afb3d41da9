"""GitHub Issue Sync - incremental issue/PR history sync into a document store."""

__version__ = "0.1.0"
