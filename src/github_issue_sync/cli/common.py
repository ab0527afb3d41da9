"""Common CLI option factories and helpers.

This module centralizes reusable CLI options to reduce duplication
and consolidate noqa comments for Typer's required function call pattern.

It also provides:
- `run_async_command`: Unified async execution with error handling for CLI commands
- `resolve_sources`: Repository list (option or settings) to Source objects
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Annotated, TypeVar

import typer
from rich.console import Console

from github_issue_sync.config import Settings
from github_issue_sync.github.sync.enums import OutputFormat
from github_issue_sync.schemas import PaginationMode, Source, parse_repo_string

# Shared console instance for CLI output
console = Console()

T = TypeVar("T")


def run_async_command(
    coro: Coroutine[object, object, T],
    *,
    error_prefix: str = "Error",
) -> T:
    """Execute async code from synchronous CLI command with unified error handling.

    Uses asyncio.run() for clean event loop management. Catches exceptions,
    prints user-friendly error messages, and exits with code 1.

    Args:
        coro: Async coroutine to execute
        error_prefix: Prefix for error messages (default: "Error")

    Returns:
        Result from the coroutine

    Raises:
        typer.Exit: Re-raised from deliberate exits, or raised with code 1 on error
    """
    try:
        return asyncio.run(coro)
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]{error_prefix}:[/red] {e}")
        raise typer.Exit(1) from None


# Typer requires function calls as default arguments, which triggers B008.
# Using Annotated with a centralized type alias keeps the noqa in one place.

OutputFormatOption = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Output format",
    ),
]
"""Output format option type for CLI commands.

Usage:
    def command(output_format: OutputFormatOption = OutputFormat.TEXT):
"""

ReposListOption = Annotated[
    str | None,
    typer.Option(
        "--repos",
        "-r",
        help="Comma-separated list of repos (owner/repo). "
        "If not specified, uses REPOS and PRIVATE_REPOS from settings.",
    ),
]
"""Comma-separated repository list override option."""

PaginationModeOption = Annotated[
    PaginationMode | None,
    typer.Option(
        "--mode",
        "-m",
        help="Pagination mode (defaults to PAGINATION_MODE from settings)",
    ),
]
"""Pagination mode override option."""


def validate_repo_list(repos_str: str | None) -> list[str] | None:
    """Parse and validate comma-separated repository list.

    Args:
        repos_str: Comma-separated repos or None

    Returns:
        List of validated repo strings, or None if input was None

    Raises:
        typer.Exit(1): If any repo format is invalid
    """
    if repos_str is None:
        return None

    repo_list = [r.strip() for r in repos_str.split(",") if r.strip()]

    for repo in repo_list:
        try:
            parse_repo_string(repo)
        except ValueError:
            console.print(f"[red]Error:[/red] Repository '{repo}' must be in owner/name format")
            raise typer.Exit(1) from None

    return repo_list


def resolve_sources(
    settings: Settings,
    repos_str: str | None = None,
    mode: PaginationMode | None = None,
) -> list[Source]:
    """Build the sources to operate on.

    Raises:
        typer.Exit(1): If a repo is malformed or the list is empty
    """
    repo_list = validate_repo_list(repos_str)
    if repo_list is None:
        repo_list = validate_repo_list(",".join(settings.tracked_repos)) or []
    if not repo_list:
        console.print("[red]Error:[/red] No repositories to sync")
        raise typer.Exit(1)

    effective_mode = mode or PaginationMode(settings.pagination_mode)
    return [Source.parse(repo, effective_mode) for repo in repo_list]
