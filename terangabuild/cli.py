"""TerangaBuild CLI.

Commands:
- init: Create database tables on the configured backend
- seed-demo: Copy the demo dataset into the configured backend
- project-status: Show progress, checklist and schedule delay for a project
- search-users: Look up profiles by name, email or company
- web serve: Run the JSON API
"""

from __future__ import annotations

import asyncio
from datetime import date, datetime, timezone

import typer
from rich.console import Console
from rich.table import Table

from terangabuild.backends.base import BackendError
from terangabuild.backends.demo_data import build_dataset
from terangabuild.config import get_config
from terangabuild.core.logging import configure_logging
from terangabuild.formatting import format_currency, format_date, status_label
from terangabuild.services import ChecklistService, DatabaseService

app = typer.Typer(
    name="terangabuild",
    help="TerangaBuild - construction project tracking",
    no_args_is_help=True,
)
web_cli = typer.Typer(help="Web API")
app.add_typer(web_cli, name="web")

console = Console()


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Override LOG_LEVEL"),
):
    configure_logging(level=log_level)


def _require_backend():
    config = get_config()
    if config.demo_mode:
        console.print(
            "[yellow]No backend configured[/yellow] "
            "(set TERANGA_BACKEND_URL and TERANGA_BACKEND_KEY); running on demo fixtures only."
        )
        raise typer.Exit(code=1)
    from terangabuild.backends.sql import SQLBackend

    return SQLBackend.from_config(config)


@app.command()
def init(
    drop: bool = typer.Option(False, "--drop", help="Drop existing tables"),
):
    """Create database tables."""
    backend = _require_backend()
    console.print(f"[bold]Initializing database:[/bold] {get_config().backend.url}")

    async def _init():
        try:
            if drop:
                console.print("[yellow]Dropping existing tables...[/yellow]")
                await backend.drop_tables()
            console.print("[green]Creating tables...[/green]")
            await backend.create_tables()
        finally:
            await backend.close()

    try:
        asyncio.run(_init())
    except BackendError as e:
        console.print(f"[red]✗ Database initialization failed:[/red] {e}")
        raise typer.Exit(code=1)
    console.print("[bold green]✓[/bold green] Database initialized")


@app.command(name="seed-demo")
def seed_demo():
    """Copy the demo dataset into the configured backend (existing ids are skipped)."""
    backend = _require_backend()

    async def _seed():
        inserted: dict[str, int] = {}
        skipped = 0
        try:
            await backend.create_tables()
            for entity, rows in build_dataset().items():
                count = 0
                for row in rows:
                    if await backend.get(entity, row["id"], embed=False) is not None:
                        skipped += 1
                        continue
                    await backend.insert(entity, row)
                    count += 1
                inserted[entity.value] = count
        finally:
            await backend.close()
        return inserted, skipped

    try:
        inserted, skipped = asyncio.run(_seed())
    except BackendError as e:
        console.print(f"[red]✗ Seeding failed:[/red] {e}")
        raise typer.Exit(code=1)

    table = Table(title="Demo data")
    table.add_column("Table")
    table.add_column("Inserted", justify="right")
    for name, count in inserted.items():
        table.add_row(name, str(count))
    console.print(table)
    if skipped:
        console.print(f"[dim]{skipped} existing records skipped[/dim]")


@app.command(name="project-status")
def project_status(
    project_id: str = typer.Argument(..., help="Project ID"),
    at: str | None = typer.Option(None, "--at", help="Reference date (YYYY-MM-DD), defaults to now"),
):
    """Show progress, schedule delay and checklist for a project."""
    now = None
    if at:
        now = datetime.combine(date.fromisoformat(at), datetime.min.time(), tzinfo=timezone.utc)

    async def _status():
        db = DatabaseService()
        try:
            return await ChecklistService(db).project_summary(project_id, now=now)
        finally:
            await db.close()

    summary = asyncio.run(_status())
    if summary is None:
        console.print(f"[red]Project not found:[/red] {project_id}")
        raise typer.Exit(code=1)

    project = summary.project
    console.print(f"\n[bold]{project.name}[/bold] ({status_label(project.status)})")
    console.print(f"  Budget: {format_currency(project.budget)}  Spent: {format_currency(project.spent)}")
    if project.start_date and project.end_date:
        console.print(f"  Schedule: {format_date(project.start_date)} - {format_date(project.end_date)}")
    console.print(
        f"  Progress: {project.progress}% stored, {summary.progress}% from checklist "
        f"({summary.completed_count}/{len(summary.checklist)} steps)"
    )
    delay = summary.delay
    if delay.is_delayed:
        console.print(
            f"  [red]Delayed by {delay.delay_days} days[/red] "
            f"(schedule {delay.time_progress:.1f}% elapsed)"
        )
    else:
        console.print(f"  [green]On schedule[/green] (schedule {delay.time_progress:.1f}% elapsed)")

    table = Table(title="Checklist")
    table.add_column("#", justify="right")
    table.add_column("Step")
    table.add_column("Priority")
    table.add_column("Done", justify="center")
    for item in summary.checklist:
        done = "[green]✓[/green]" if item.is_completed else ""
        if item.id in summary.waiting_on:
            done = "[dim]waiting[/dim]"
        table.add_row(str(item.order_index), item.title, status_label(item.priority), done)
    console.print(table)


@app.command(name="search-users")
def search_users(
    query: str = typer.Argument(..., help="Name, email or company fragment (3+ characters)"),
):
    """Search user profiles."""

    async def _search():
        db = DatabaseService()
        try:
            return await db.search_users(query)
        finally:
            await db.close()

    profiles = asyncio.run(_search())
    if not profiles:
        console.print("[yellow]No matching users[/yellow]")
        return

    table = Table(title=f"Users matching '{query}'")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Company")
    table.add_column("Type")
    for profile in profiles:
        table.add_row(
            profile.id,
            profile.full_name or "",
            profile.email,
            profile.company_name or "",
            profile.user_type,
        )
    console.print(table)


@web_cli.command("serve")
def web_serve(
    host: str = typer.Option("0.0.0.0", help="Host to bind"),
    port: int = typer.Option(8000, help="Port to bind"),
    reload: bool = typer.Option(False, help="Enable autoreload (dev only)"),
):
    """Run the FastAPI JSON API."""
    import uvicorn

    typer.echo(f"Starting TerangaBuild API on http://{host}:{port}")
    uvicorn.run("terangabuild.web.app:app", host=host, port=port, reload=reload, workers=1)


if __name__ == "__main__":
    app()
