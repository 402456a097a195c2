"""Command-line interface for the Personal Dashboard.

Provides commands for:
- Showing cached repositories and contributions
- Refreshing from GitHub, once or on an interval
- Saving GitHub settings
- Managing app launchers and the local cache
"""

import asyncio
import logging
import re
import sys
from dataclasses import dataclass
from datetime import UTC, datetime

import click
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from personal_dashboard import __version__
from personal_dashboard.dashboard import Dashboard
from personal_dashboard.exceptions import LauncherValidationError
from personal_dashboard.models import init_db
from personal_dashboard.models.github import ContributionDay, Credentials, DataKind
from personal_dashboard.sync.state import DashboardState
from personal_dashboard.utils.config import Config, load_config

console = Console()

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


# --- Utility Functions ---


def get_language_style(language: str | None) -> str:
    """Get rich style for a repository language."""
    styles = {
        "swift": "orange1",
        "python": "blue",
        "javascript": "yellow",
        "typescript": "blue",
        "java": "red",
        "c#": "purple",
        "c++": "hot_pink",
        "html": "orange1",
        "css": "blue",
    }
    return styles.get((language or "").lower(), "grey50")


def format_updated(updated_at: str) -> str:
    """Format a GitHub timestamp as a short date, or 'Unknown'."""
    try:
        parsed = datetime.fromisoformat(updated_at.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return "Unknown"
    return parsed.strftime("%Y-%m-%d")


def format_age(fetched_at: datetime | None, now: datetime | None = None) -> str:
    """Format how long ago something was fetched."""
    if fetched_at is None:
        return "never"

    now = now or datetime.now(UTC)
    seconds = max(0, int((now - fetched_at).total_seconds()))

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60} min ago"
    if seconds < 86400:
        return f"{seconds // 3600} h ago"
    return f"{seconds // 86400} d ago"


@dataclass
class ContributionSummary:
    """Headline numbers for the contribution calendar."""

    total: int = 0
    active_days: int = 0
    busiest_day: ContributionDay | None = None
    recent_days: tuple[ContributionDay, ...] = ()


def summarize_contributions(days: tuple[ContributionDay, ...] | list[ContributionDay], recent: int = 14) -> ContributionSummary:
    """Summarize a contribution calendar."""
    if not days:
        return ContributionSummary()

    busiest = max(days, key=lambda day: day.count)
    return ContributionSummary(
        total=sum(day.count for day in days),
        active_days=sum(1 for day in days if day.count > 0),
        busiest_day=busiest if busiest.count > 0 else None,
        recent_days=tuple(days[-recent:]),
    )


def format_status_line(state: DashboardState) -> str:
    """One-line description of a state snapshot, for watch mode."""
    timestamp = datetime.now().strftime("%H:%M:%S")
    line = (
        f"[dim]{timestamp}[/dim] {len(state.repositories)} repositories, "
        f"{state.total_contributions} contributions"
    )
    if state.is_loading:
        line += " [cyan](refreshing...)[/cyan]"
    if state.last_error is not None:
        line += f" [red]{state.last_error.kind.value} error: {state.last_error}[/red]"
    return line


def render_repositories(state: DashboardState) -> None:
    """Print the recent repositories table."""
    if not state.repositories:
        console.print("[dim]No repositories cached.[/dim]")
        return

    table = Table(title="Recent Repositories")
    table.add_column("Name", style="white", min_width=15, max_width=30)
    table.add_column("Language", width=12)
    table.add_column("Updated", width=10)
    table.add_column("Description", style="dim", max_width=40)

    for repository in state.repositories:
        language = repository.language or "-"
        table.add_row(
            repository.name,
            Text(language, style=get_language_style(repository.language)),
            format_updated(repository.updated_at),
            (repository.description or "")[:40],
        )

    console.print(table)


def render_contributions(state: DashboardState) -> None:
    """Print the contribution summary panel."""
    summary = summarize_contributions(state.contributions)
    if not state.contributions:
        console.print("[dim]No contributions cached.[/dim]")
        return

    recent = Text()
    for day in summary.recent_days:
        style = day.color if _HEX_COLOR.match(day.color) else "dim"
        recent.append("■ ", style=style)

    busiest = (
        f"{summary.busiest_day.date} ({summary.busiest_day.count})" if summary.busiest_day else "-"
    )
    body = Text.assemble(
        f"Total: {summary.total} contributions on {summary.active_days} days\n",
        f"Busiest day: {busiest}\n",
        f"Last {len(summary.recent_days)} days: ",
        recent,
    )
    console.print(Panel(body, title="GitHub Contributions"))


def render_state(state: DashboardState) -> None:
    """Print everything the dashboard knows."""
    render_contributions(state)
    render_repositories(state)


def build_dashboard(config: Config) -> Dashboard:
    """Create the dashboard used by CLI commands."""
    return Dashboard.create(config)


def _warn_missing_credentials() -> None:
    console.print("[yellow]GitHub username or token not configured.[/yellow]")
    console.print("[dim]Use 'dashboard configure' to set them.[/dim]")


async def _refresh_once(dashboard: Dashboard, force: bool) -> bool:
    """Run one refresh to completion. Returns True if anything was fetched."""
    try:
        task = dashboard.coordinator.refresh(force_refresh=force)
        await dashboard.coordinator.wait_idle()
        return task is not None
    finally:
        await dashboard.close()


async def _save_settings(dashboard: Dashboard, credentials: Credentials) -> None:
    try:
        dashboard.save_settings(credentials)
        await dashboard.coordinator.wait_idle()
    finally:
        await dashboard.close()


async def _watch(dashboard: Dashboard, interval: int) -> None:
    """Refresh on an interval until cancelled."""

    async def tick() -> None:
        dashboard.coordinator.refresh()

    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        tick,
        trigger=IntervalTrigger(seconds=interval),
        id="refresh_dashboard",
        name="Refresh stale dashboard data",
        replace_existing=True,
    )
    scheduler.start()

    try:
        await tick()
        await asyncio.Event().wait()
    finally:
        scheduler.shutdown(wait=False)
        await dashboard.close()


# --- Main CLI Group ---


@click.group()
@click.version_option(version=__version__, prog_name="Personal Dashboard")
@click.option("--config", "-c", type=click.Path(exists=True), help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, config, verbose):
    """Personal Dashboard - GitHub activity and app launchers at a glance.

    Use 'dashboard <command> --help' for more information about a command.
    """
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Load configuration
    ctx.obj["config"] = load_config(config)

    # Initialize database
    init_db(ctx.obj["config"])


# --- Dashboard Commands ---


@cli.command("show")
@click.pass_context
def show(ctx):
    """Show cached data without contacting GitHub."""
    dashboard = build_dashboard(ctx.obj["config"])

    if not dashboard.credentials.get().is_complete:
        _warn_missing_credentials()

    render_state(dashboard.state.state)

    for kind in DataKind:
        age = format_age(dashboard.cache.fetched_at(kind))
        console.print(f"[dim]{kind.value.capitalize()} fetched {age}[/dim]")


@cli.command("refresh")
@click.option("--force", "-f", is_flag=True, help="Ignore cache age and fetch everything")
@click.pass_context
def refresh(ctx, force):
    """Refresh stale data from GitHub and show the result."""
    dashboard = build_dashboard(ctx.obj["config"])

    if not dashboard.credentials.get().is_complete:
        _warn_missing_credentials()
        return

    fetched = asyncio.run(_refresh_once(dashboard, force))
    if not fetched:
        console.print("[dim]Cached data is still fresh. Use --force to refresh anyway.[/dim]")

    state = dashboard.state.state
    render_state(state)

    if state.last_error is not None:
        console.print(f"[red]Refresh failed ({state.last_error.kind.value}): {state.last_error}[/red]")
        console.print("[dim]Showing the last cached data.[/dim]")
        sys.exit(1)


@cli.command("watch")
@click.option("--interval", "-i", type=click.IntRange(min=10), help="Seconds between refresh checks")
@click.pass_context
def watch(ctx, interval):
    """Keep the cache fresh, printing a line whenever the data changes."""
    config = ctx.obj["config"]
    interval = interval or config.watch.interval_seconds
    dashboard = build_dashboard(config)

    if not dashboard.credentials.get().is_complete:
        _warn_missing_credentials()
        return

    console.print(Panel(
        f"[green]Watching GitHub data[/green]\n"
        f"Check interval: [cyan]{interval} seconds[/cyan]",
        title="Personal Dashboard",
    ))
    console.print(format_status_line(dashboard.state.state))

    unsubscribe = dashboard.state.subscribe(lambda state: console.print(format_status_line(state)))
    try:
        asyncio.run(_watch(dashboard, interval))
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped watching.[/yellow]")
    finally:
        unsubscribe()


@cli.command("configure")
@click.option("--username", "-u", prompt="GitHub username", help="GitHub login")
@click.option("--token", "-t", prompt="GitHub token", hide_input=True, help="Personal access token")
@click.option("--no-refresh", is_flag=True, help="Save without fetching")
@click.pass_context
def configure(ctx, username, token, no_refresh):
    """Save GitHub settings and refresh everything."""
    dashboard = build_dashboard(ctx.obj["config"])
    credentials = Credentials(username=username, token=token)

    if no_refresh:
        saved = dashboard.credentials.set(credentials)
        console.print(f"[green]✓[/green] Saved settings for {saved.username}")
        return

    asyncio.run(_save_settings(dashboard, credentials))

    saved = dashboard.credentials.get()
    if not saved.is_complete:
        console.print("[yellow]Settings saved, but username or token is empty.[/yellow]")
        return

    console.print(f"[green]✓[/green] Saved settings for {saved.username}")
    state = dashboard.state.state
    if state.last_error is not None:
        console.print(f"[red]Refresh failed ({state.last_error.kind.value}): {state.last_error}[/red]")
    else:
        render_state(state)


# --- Launcher Commands ---


@cli.group()
def launchers():
    """Manage custom app launchers."""
    pass


@launchers.command("list")
@click.pass_context
def launchers_list(ctx):
    """List app launchers."""
    dashboard = build_dashboard(ctx.obj["config"])
    entries = dashboard.launchers.get_launchers()

    if not entries:
        console.print("[dim]No app launchers configured.[/dim]")
        return

    table = Table(title=f"App Launchers ({len(entries)})")
    table.add_column("#", style="dim", width=3)
    table.add_column("Name", style="white")
    table.add_column("Icon", style="cyan")
    table.add_column("Opens", style="green")

    for position, launcher in enumerate(entries, start=1):
        table.add_row(str(position), launcher.name, launcher.image_identifier, launcher.target)

    console.print(table)


@launchers.command("add")
@click.argument("name")
@click.option("--image", "-i", "image_identifier", default="app", help="Icon identifier")
@click.option("--app-path", "-a", help="Application path, e.g. /Applications/Safari.app")
@click.option("--url", "-u", "url_string", help="URL to open")
@click.pass_context
def launchers_add(ctx, name, image_identifier, app_path, url_string):
    """Add an app launcher."""
    dashboard = build_dashboard(ctx.obj["config"])
    try:
        launcher = dashboard.launchers.add(
            name=name,
            image_identifier=image_identifier,
            app_path=app_path,
            url_string=url_string,
        )
    except LauncherValidationError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    console.print(f"[green]✓[/green] Added launcher '{launcher.name}' -> {launcher.target}")


@launchers.command("remove")
@click.argument("position", type=int)
@click.pass_context
def launchers_remove(ctx, position):
    """Remove the app launcher at POSITION (as shown by 'launchers list')."""
    dashboard = build_dashboard(ctx.obj["config"])
    removed = dashboard.launchers.remove(position - 1)

    if removed is None:
        console.print(f"[red]No launcher at position {position}.[/red]")
        return

    console.print(f"[green]✓[/green] Removed launcher '{removed.name}'")


# --- Cache Commands ---


@cli.group()
def cache():
    """Manage the local GitHub data cache."""
    pass


@cache.command("clear")
@click.option("--kind", "-k", type=click.Choice([k.value for k in DataKind]), help="Only clear this kind")
@click.pass_context
def cache_clear(ctx, kind):
    """Delete cached GitHub data so the next refresh fetches it again."""
    dashboard = build_dashboard(ctx.obj["config"])
    cleared = dashboard.cache.clear(DataKind(kind) if kind else None)

    if not cleared:
        console.print("[dim]Nothing to clear.[/dim]")
        return

    console.print(f"[green]✓[/green] Cleared {', '.join(k.value for k in cleared)} cache")


# --- Entry Point ---


def main():
    """Main entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
