"""Main CLI application for GitHub Issue Sync."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from github_issue_sync import __version__
from github_issue_sync.cli import github as github_cmd
from github_issue_sync.cli import sync as sync_cmd
from github_issue_sync.config import get_settings
from github_issue_sync.logging import setup_logging

app = typer.Typer(
    name="ghissues",
    help="Incrementally sync GitHub issues and pull requests into a document store.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"ghissues version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-error output (WARNING level).",
        ),
    ] = False,
) -> None:
    """GitHub Issue Sync - keep a searchable copy of repository issues."""
    settings = get_settings()
    log_config = settings.logging

    setup_logging(
        level=settings.log_level,
        verbose=verbose,
        quiet=quiet,
        log_file=Path(log_config.log_file) if log_config.log_file else None,
        rotation=log_config.rotation,
        retention=log_config.retention,
        serialize=log_config.serialize,
    )


app.add_typer(github_cmd.app, name="github")
app.add_typer(sync_cmd.app, name="sync")


if __name__ == "__main__":
    app()
