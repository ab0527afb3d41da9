"""GitHub API verification commands."""

import typer
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table

from github_issue_sync.cli.common import console, run_async_command
from github_issue_sync.config import get_settings
from github_issue_sync.github import (
    GitHubAuthenticationError,
    GitHubClient,
    RateLimitPool,
    RateLimitSnapshot,
    RateLimitStatus,
)

app = typer.Typer(help="GitHub API commands")


def _get_status_style(status: RateLimitStatus) -> str:
    """Get rich style for status."""
    match status:
        case RateLimitStatus.HEALTHY:
            return "[green]HEALTHY[/green]"
        case RateLimitStatus.WARNING:
            return "[yellow]WARNING[/yellow]"
        case RateLimitStatus.CRITICAL:
            return "[red]CRITICAL[/red]"
        case RateLimitStatus.EXHAUSTED:
            return "[bold red]EXHAUSTED[/bold red]"
        case _:
            return str(status)


def _format_time_remaining(seconds: int) -> str:
    """Format seconds as human-readable time."""
    if seconds <= 0:
        return "Now"
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m {seconds % 60}s"
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    return f"{hours}h {minutes}m"


@app.command("rate-limit")
def show_rate_limit(
    all_pools: bool = typer.Option(
        False,
        "--all",
        "-a",
        help="Show the search and graphql pools as well as core",
    ),
) -> None:
    """Show current GitHub API rate limit status.

    Examples:
        ghissues github rate-limit
        ghissues github rate-limit --all
    """
    settings = get_settings()
    if not settings.github_token:
        console.print("[red]Error:[/red] GITHUB_TOKEN not set in environment")
        raise typer.Exit(1)

    async def _check() -> RateLimitSnapshot:
        try:
            async with GitHubClient(settings.github_token) as client:
                return await client.get_rate_limit()
        except GitHubAuthenticationError:
            console.print("[red]Error:[/red] Invalid GitHub token")
            raise typer.Exit(1) from None

    snapshot = run_async_command(_check(), error_prefix="Rate limit check failed")
    thresholds = settings.rate_limit

    pools_to_show = list(RateLimitPool) if all_pools else [RateLimitPool.CORE]

    table = Table(title="GitHub API Rate Limits")
    table.add_column("Pool", style="bold")
    table.add_column("Status")
    table.add_column("Remaining", justify="right")
    table.add_column("Limit", justify="right")
    table.add_column("Used %", justify="right")
    table.add_column("Resets In", justify="right")

    for pool in pools_to_show:
        pool_limit = snapshot.get_pool(pool)
        if pool_limit is None:
            continue

        status = pool_limit.get_status(
            thresholds.healthy_threshold_pct,
            thresholds.warning_threshold_pct,
            thresholds.critical_threshold_pct,
        )

        usage_pct = pool_limit.usage_percent
        if usage_pct < 50:
            usage_str = f"[green]{usage_pct:.1f}%[/green]"
        elif usage_pct < 80:
            usage_str = f"[yellow]{usage_pct:.1f}%[/yellow]"
        else:
            usage_str = f"[red]{usage_pct:.1f}%[/red]"

        table.add_row(
            pool.value,
            _get_status_style(status),
            str(pool_limit.remaining),
            str(pool_limit.limit),
            usage_str,
            _format_time_remaining(pool_limit.seconds_until_reset),
        )

    console.print()
    console.print(table)

    core_limit = snapshot.get_core()
    if core_limit:
        console.print()
        remaining_pct = core_limit.remaining_percent
        with Progress(
            TextColumn("[bold]Core quota:[/bold]"),
            BarColumn(bar_width=40, complete_style="green", finished_style="green"),
            TextColumn(f"{remaining_pct:.1f}% remaining"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("", total=100)
            progress.update(task, completed=remaining_pct)
            progress.refresh()

        if core_limit.remaining == 0:
            console.print(
                f"\n[red]Rate limit exhausted![/red] "
                f"Wait {_format_time_remaining(core_limit.seconds_until_reset)} before syncing."
            )
