"""CLI commands for guitarlab.

Commands:
- init-db: Create the SQLite store
- serve: Run the Web API with uvicorn
- catalog: Print lessons with their forward links and backlinks
- evaluate: Re-run badge evaluation for a user
- summary: Show a user's streak, completed lessons and badges
- menu: Show a user's daily practice menu
"""

import json
import logging
import sys

import structlog
import typer
from rich.console import Console
from rich.table import Table

from guitarlab.config.app_config import load_app_config
from guitarlab.config.badges import get_badge
from guitarlab.core.achievements import evaluate_and_unlock, progress_summary
from guitarlab.core.catalog import build_catalog
from guitarlab.core.daily_menu import generate_daily_menu
from guitarlab.db.achievements_repository import list_achievements
from guitarlab.db.database import init_db

app = typer.Typer(
    name="guitarlab",
    help="Personal guitar practice tracker: lessons, progress, streaks and badges.",
    no_args_is_help=True,
)

console = Console()

REASON_STYLES = {
    "continue": "[cyan]continue[/cyan]",
    "review": "[yellow]review[/yellow]",
    "new": "[green]new[/green]",
}


def _stderr_logger(*args) -> structlog.PrintLogger:
    # Looked up per call so redirected streams are honoured
    return structlog.PrintLogger(file=sys.stderr)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show info-level logs"),
) -> None:
    """Send logs to stderr so command output stays parseable."""
    level = logging.INFO if verbose else logging.WARNING
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=_stderr_logger,
    )


def _init_store() -> None:
    """Make sure the configured database exists."""
    init_db(load_app_config().db_path)


@app.command(name="init-db")
def init_database() -> None:
    """Create the database and its tables."""
    config = load_app_config()
    init_db(config.db_path)
    console.print(f"[green]✓ Database ready:[/green] {config.db_path}")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(5000, "--port", "-p", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the Web API."""
    import uvicorn

    uvicorn.run("guitarlab.web.api:app", host=host, port=port, reload=reload)


@app.command()
def catalog(
    category: str = typer.Option(None, "--category", "-c", help="Only this category"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
) -> None:
    """Print the lesson catalog with its link graph."""
    items_by_category = build_catalog()

    if category is not None:
        if category not in items_by_category:
            console.print(f"[red]✗ Unknown category '{category}'[/red]")
            console.print("\nCategories: " + ", ".join(items_by_category))
            raise typer.Exit(code=1)
        items_by_category = {category: items_by_category[category]}

    if as_json:
        data = {
            name: [item.to_dict() for item in items]
            for name, items in items_by_category.items()
        }
        typer.echo(json.dumps(data, ensure_ascii=False, indent=2))
        return

    for name, items in items_by_category.items():
        table = Table(title=f"{name} ({len(items)})")
        table.add_column("ID", style="cyan")
        table.add_column("Title")
        table.add_column("Links to")
        table.add_column("Linked from")
        for item in items:
            table.add_row(
                item.id,
                item.title,
                ", ".join(item.forward_links) or "-",
                ", ".join(item.backlinks) or "-",
            )
        console.print(table)


@app.command()
def evaluate(user_id: str = typer.Argument(..., help="User identifier")) -> None:
    """Unlock any badge the user has earned."""
    _init_store()
    new_badges = evaluate_and_unlock(user_id)

    if not new_badges:
        console.print("[dim]No new badges.[/dim]")
        return

    for badge_id in new_badges:
        badge = get_badge(badge_id)
        console.print(f"{badge.emoji} [bold]{badge.name}[/bold] unlocked: {badge.description}")


@app.command()
def summary(user_id: str = typer.Argument(..., help="User identifier")) -> None:
    """Show streak, completed lessons per category and unlocked badges."""
    _init_store()
    config = load_app_config()
    result = progress_summary(user_id, config=config)

    console.print(f"\n[bold]Streak:[/bold] {result.streak} day(s)")

    table = Table(title="Completed lessons")
    table.add_column("Category")
    table.add_column("Done", justify="right")
    table.add_column("Total", justify="right")
    for name, done in result.completed.items():
        table.add_row(name, str(done), str(config.categories[name].total))
    console.print(table)

    achievements = list_achievements(user_id)
    if achievements:
        console.print("\n[bold]Badges:[/bold]")
        for a in achievements:
            badge = get_badge(a.badge_id)
            console.print(f"  {badge.emoji} {badge.name} [dim]({a.unlocked_at[:10]})[/dim]")


@app.command()
def menu(user_id: str = typer.Argument(..., help="User identifier")) -> None:
    """Show today's practice recommendations."""
    _init_store()
    items = generate_daily_menu(user_id)

    if not items:
        console.print("[dim]Nothing to recommend today.[/dim]")
        return

    for i, entry in enumerate(items, 1):
        title = entry.title or ""
        console.print(f"{i}. {REASON_STYLES[entry.reason]} {entry.article_id} {title}".rstrip())


if __name__ == "__main__":
    app()
