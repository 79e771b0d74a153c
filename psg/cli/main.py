"""
Typer CLI for the psg learning-style engine.

Commands:
    psg refresh                 - Recompute module styles and learner scores
    psg refresh --course 12     - Refresh a single course
    psg profile 12 34           - Show a learner's style and course ordering
    psg db init                 - Create psg tables
    psg privacy export 34       - Export a learner's stored scores
    psg privacy delete 34       - Delete a learner's stored scores
    psg config                  - Show ordering configuration
    psg version                 - Show version information

Usage:
    psg --help
    psg refresh --dry-run
"""

from __future__ import annotations

import json

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from config import get_settings
from psg import __version__
from psg.logging_setup import configure_logging

app = typer.Typer(
    help="psg: learning-style personalised ordering of course content",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
) -> None:
    configure_logging(level="DEBUG" if verbose else None)


# ========================================
# Context Builder (Dependency Injection)
# ========================================


class CLIContext:
    """
    Dependency injection container for CLI commands.

    Lazily builds the record store and Moodle collaborators.
    """

    def __init__(self, dry_run: bool = False):
        self.settings = get_settings()
        self.dry_run = dry_run or self.settings.dry_run
        self._store = None
        self._catalog = None
        self._content = None
        self._analytics = None

    @property
    def store(self):
        if self._store is None:
            from psg.db.store import SqlRecordStore

            self._store = SqlRecordStore()
        return self._store

    @property
    def catalog(self):
        if self._catalog is None:
            from psg.db.moodle_source import MoodleCourseCatalog

            self._catalog = MoodleCourseCatalog(settings=self.settings)
        return self._catalog

    @property
    def content(self):
        if self._content is None:
            from psg.db.moodle_source import MoodleContentSource

            self._content = MoodleContentSource(settings=self.settings)
        return self._content

    @property
    def analytics(self):
        if self._analytics is None:
            from psg.db.moodle_source import BehaviourAnalyticsSource

            self._analytics = BehaviourAnalyticsSource(settings=self.settings)
        return self._analytics


def _build_context(dry_run: bool = False) -> CLIContext:
    return CLIContext(dry_run=dry_run)


# ========================================
# Refresh
# ========================================


@app.command("refresh")
def refresh(
    course: list[int] | None = typer.Option(None, "--course", "-c", help="Course ID (repeatable); default all"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Compute without writing to the database"),
) -> None:
    """
    Recompute module learning styles and learner relevance scores.

    Examples:
        psg refresh                  # Every course using the psg format
        psg refresh -c 12 -c 14      # Selected courses
        psg refresh --dry-run        # Preview without writing
    """
    from psg.tasks.refresh_job import RefreshJob

    ctx = _build_context(dry_run=dry_run)
    rprint("\n[bold cyan]Learning Style Refresh[/bold cyan]")
    rprint(f"  Dry run: {ctx.dry_run}\n")

    job = RefreshJob(
        store=ctx.store,
        catalog=ctx.catalog,
        content_source=ctx.content,
        survey_source=ctx.analytics,
        analytics_source=ctx.analytics,
        settings=ctx.settings,
        dry_run=ctx.dry_run,
    )
    stats = job.run(course or None)

    table = Table(title="Refresh Results", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    for key, value in stats.to_dict().items():
        table.add_row(key.replace("_", " "), str(value))
    console.print(table)

    rprint("\n[bold green]✓ Refresh complete![/bold green]")


# ========================================
# Profile
# ========================================


@app.command("profile")
def profile(
    course_id: int = typer.Argument(..., help="Course ID"),
    user_id: int = typer.Argument(..., help="Learner user ID"),
) -> None:
    """Show a learner's style and their personalised course ordering."""
    from psg.adaptive.learner_profile import LearnerProfileService

    ctx = _build_context()
    service = LearnerProfileService(ctx.store, ctx.catalog, ctx.analytics, ctx.analytics, ctx.settings)
    page = service.course_page(course_id, user_id)
    learner = page.profile

    if learner.needs_prediction_notice:
        rprint("[red]No analysis has been selected for prediction in this course.[/red]")
    if learner.style is None:
        reason = "personalisation off" if not learner.personalised else "no style data"
        rprint(f"[yellow]⚠[/yellow] No learner style ({reason}); course order unchanged")
    else:
        style_table = Table(title=f"Learner Style ({learner.source.name.lower()})")
        style_table.add_column("Axis", style="cyan")
        style_table.add_column("First", justify="right")
        style_table.add_column("Second", justify="right")
        for axis, first, second in learner.style.pairs():
            style_table.add_row(axis.value.replace("_", " / "), f"{first:g}", f"{second:g}")
        console.print(style_table)

    order_table = Table(title="Course Ordering")
    order_table.add_column("Section", justify="right", style="cyan")
    order_table.add_column("Score", justify="right")
    order_table.add_column("Modules (id:score)")
    for section in page.sections:
        modules = ", ".join(f"{m.module_id}:{m.score}" for m in section.modules) or "-"
        order_table.add_row(str(section.number), f"{section.score:.2f}", modules)
    console.print(order_table)


# ========================================
# Database
# ========================================

db_app = typer.Typer(help="Database management")
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init() -> None:
    """
    Create the psg tables if they don't exist.

    Safe to run multiple times (idempotent).
    """
    from psg.db.database import init_db

    logger.info("Initializing database tables...")
    init_db()
    rprint("[green]✓[/green] Database initialized!")


# ========================================
# Privacy
# ========================================

privacy_app = typer.Typer(help="Learner data export and removal")
app.add_typer(privacy_app, name="privacy")


@privacy_app.command("export")
def privacy_export(user_id: int = typer.Argument(..., help="Learner user ID")) -> None:
    """Print a learner's stored scores as JSON."""
    from psg import privacy

    ctx = _build_context()
    console.print_json(json.dumps(privacy.export_user_data(ctx.store, user_id)))


@privacy_app.command("delete")
def privacy_delete(
    user_id: int = typer.Argument(..., help="Learner user ID"),
    course: int | None = typer.Option(None, "--course", "-c", help="Only this course"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a learner's stored scores."""
    from psg import privacy

    if not yes:
        typer.confirm(f"Delete stored scores of user {user_id}?", abort=True)
    ctx = _build_context()
    removed = privacy.delete_user_data(ctx.store, user_id, course)
    rprint(f"[green]✓[/green] Removed {removed} scores")


# ========================================
# Info
# ========================================


@app.command("config")
def show_config() -> None:
    """Show ordering configuration."""
    settings = get_settings()
    table = Table(title="Ordering Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for name, value in settings.get_ordering_config().items():
        table.add_row(name, "[green]on[/green]" if value else "[dim]off[/dim]")
    table.add_row("course format", settings.course_format)
    table.add_row("survey items", str(settings.survey_max_items))
    console.print(table)


@app.command("version")
def show_version() -> None:
    """Show version information."""
    rprint(f"[bold]psg-engine[/bold] v{__version__}")
    rprint("  Learning style personalised course ordering")


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
