"""Sync commands for GitHub Issue Sync."""

from __future__ import annotations

import json
from typing import Any

import typer
from rich.table import Table

from github_issue_sync.cli.common import (
    OutputFormatOption,
    PaginationModeOption,
    ReposListOption,
    console,
    resolve_sources,
    run_async_command,
)
from github_issue_sync.config import Settings, get_settings
from github_issue_sync.db import (
    DocumentRepository,
    create_engine,
    create_session_factory,
    create_tables,
)
from github_issue_sync.github import GitHubClient, OutputFormat, SyncOrchestrator, SyncRunResult
from github_issue_sync.schemas import Source

app = typer.Typer(help="Sync issues from GitHub into the document store")


async def _run_sync(sources: list[Source], settings: Settings) -> SyncRunResult:
    """Create the engine, client and orchestrator, then sync every source."""
    engine = create_engine(settings=settings)
    try:
        await create_tables(engine)
        async with GitHubClient(settings.github_token) as client:
            orchestrator = SyncOrchestrator(
                client,
                create_session_factory(engine),
                settings=settings,
            )
            return await orchestrator.sync_all(sources)
    finally:
        await engine.dispose()


async def _collect_status(sources: list[Source], settings: Settings) -> list[dict[str, Any]]:
    engine = create_engine(settings=settings)
    try:
        await create_tables(engine)
        async with create_session_factory(engine)() as session:
            documents = DocumentRepository(session)
            return [
                {
                    "repository": source.full_name,
                    "collection": source.collection,
                    "documents": await documents.count_for_source(source),
                    "cached_pages": await documents.count_cache_entries(source),
                }
                for source in sources
            ]
    finally:
        await engine.dispose()


def _print_summary(result: dict[str, Any]) -> None:
    summary = result.get("summary", {})
    failed = summary.get("failed", {})

    console.print("[bold]Issue Sync Complete[/bold]")
    console.print()
    console.print(f"  [bold]Sources:[/bold]           {summary.get('total_sources', 0)}")
    console.print(f"    [green]Completed:[/green]       {len(summary.get('completed', []))}")
    if failed:
        console.print(f"    [red]Failed:[/red]          {len(failed)}")
    console.print()
    console.print(f"  Documents written: {summary.get('documents_written', 0)}")
    console.print(f"  Pages not modified: {summary.get('pages_skipped', 0)}")
    console.print(f"  Duration: {summary.get('duration_seconds', 0):.1f}s")

    console.print()
    console.print("[bold]Per-Source Details:[/bold]")
    for source in result.get("sources", []):
        status = "[green]OK[/green]" if source.get("success") else "[red]FAILED[/red]"
        console.print(
            f"  {source.get('repository', '?')}: "
            f"{source.get('documents_written', 0)} docs, "
            f"{source.get('pages_written', 0)} written / "
            f"{source.get('pages_skipped', 0)} skipped pages "
            f"({status}) [{source.get('duration_seconds', 0):.1f}s]"
        )

    if failed:
        console.print()
        console.print("[bold red]Failed sources:[/bold red]")
        for name, reason in failed.items():
            console.print(f"  {name}: {reason}")


@app.command("run")
def sync_run(
    repos: ReposListOption = None,
    mode: PaginationModeOption = None,
    concurrency: int | None = typer.Option(
        None,
        "--concurrency",
        "-c",
        min=1,
        help="Maximum sources synced in parallel (defaults to SYNC__MAX_CONCURRENT_SOURCES)",
    ),
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Incrementally sync issues and pull requests of every tracked source.

    Pages unchanged since the last run are skipped. Exits with code 1 if
    any source failed.

    Examples:
        ghissues sync run
        ghissues sync run --repos elastic/eui,elastic/elastic-charts
        ghissues sync run --mode cursor --concurrency 1
        ghissues -v sync run --format json
    """
    settings = get_settings()
    if concurrency is not None:
        settings = settings.model_copy(
            update={
                "sync": settings.sync.model_copy(update={"max_concurrent_sources": concurrency})
            }
        )
    sources = resolve_sources(settings, repos, mode)

    if output_format == OutputFormat.TEXT:
        console.print(f"[dim]Syncing {len(sources)} sources...[/dim]")
        for source in sources:
            console.print(f"[dim]  - {source.full_name} ({source.mode.value})[/dim]")
        console.print()

    run_result = run_async_command(_run_sync(sources, settings), error_prefix="Sync failed")
    result = run_result.to_dict()

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(result))
    else:
        _print_summary(result)

    if not run_result.success:
        raise typer.Exit(1)


@app.command("status")
def sync_status(
    repos: ReposListOption = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Show stored document and cached page counts per source.

    Examples:
        ghissues sync status
        ghissues sync status --repos elastic/eui --format json
    """
    settings = get_settings()
    sources = resolve_sources(settings, repos)
    rows = run_async_command(_collect_status(sources, settings), error_prefix="Status failed")

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(rows))
        return

    table = Table(title="Sync Status")
    table.add_column("Repository", style="cyan")
    table.add_column("Collection")
    table.add_column("Documents", justify="right")
    table.add_column("Cached Pages", justify="right")
    for row in rows:
        table.add_row(
            row["repository"],
            row["collection"],
            str(row["documents"]),
            str(row["cached_pages"]),
        )
    console.print(table)
