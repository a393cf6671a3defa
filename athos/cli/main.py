"""CLI Entry Point - Operational commands for the Athos service.

Commands:
    athos serve                      Run the API with uvicorn
    athos catalog seed FILE          Load a JSON catalog document
    athos progress show USER_ID      Show a learner's progress
    athos path prune USER_ID         Remove stale suggestions
    athos token USER_ID              Issue a development bearer token
"""

import asyncio
from pathlib import Path
from uuid import UUID

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from athos.shared.config import get_settings
from athos.shared.curriculum import get_curriculum
from athos.shared.exceptions import AthosError

app = typer.Typer(
    name="athos",
    help="Mount Athos Explorer - adaptive progress and recommendation service",
    no_args_is_help=True,
)
catalog_app = typer.Typer(help="Catalog commands")
progress_app = typer.Typer(help="Learner progress commands")
path_app = typer.Typer(help="Learning path commands")

app.add_typer(catalog_app, name="catalog")
app.add_typer(progress_app, name="progress")
app.add_typer(path_app, name="path")

console = Console()


def run_async(coro):
    """Helper to run async functions in sync context."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def _parse_user_id(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        console.print(f"[red]Invalid user id:[/red] {value}")
        raise typer.Exit(1)


async def _with_services(operation):
    """Build services, run ``operation(services)``, then close connections."""
    from athos.shared.database import shutdown, startup
    from athos.shared.service_registry import build_services

    services = build_services()
    await startup(use_database=services.uses_database, use_redis=services.uses_redis)
    try:
        return await operation(services)
    finally:
        await services.analytics.flush_all()
        await shutdown()


@app.command("serve")
def serve(
    host: str = typer.Option(None, help="Bind address (default from settings)"),
    port: int = typer.Option(None, help="Port (default from settings)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "athos.api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
    )


@app.command("token")
def token(user_id: str = typer.Argument(..., help="Learner id (UUID)")) -> None:
    """Issue a development bearer token for a learner."""
    from athos.shared.tokens import create_access_token

    settings = get_settings()
    if settings.is_production:
        console.print("[red]Refusing to issue tokens in production[/red]")
        raise typer.Exit(1)
    console.print(create_access_token(_parse_user_id(user_id), settings))


@catalog_app.command("seed")
def seed(file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Catalog JSON document")) -> None:
    """Load content items and quizzes from a JSON document."""
    from athos.modules.catalog.service import load_catalog_document, seed_catalog

    try:
        content, quizzes = load_catalog_document(file)
    except AthosError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    async def _seed(services) -> bool:
        await seed_catalog(services.catalog, content, quizzes)
        return services.uses_database

    stored = run_async(_with_services(_seed))
    if not stored:
        console.print("[yellow]Database persistence is off; the catalog was validated but not stored.[/yellow]")
    console.print(f"[green]Seeded {len(content)} content items and {len(quizzes)} quizzes[/green]")


@progress_app.command("show")
def show_progress(user_id: str = typer.Argument(..., help="Learner id (UUID)")) -> None:
    """Show a learner's completion by module and section."""
    learner = _parse_user_id(user_id)

    async def _status(services):
        return await services.progress.get_overview(learner)

    overview = run_async(_with_services(_status))
    status = overview.status

    console.print(Panel.fit(
        f"[bold cyan]Progress for {learner}[/bold cyan]\n"
        f"Overall: [bold]{status.overall_completion}%[/bold]   "
        f"Time spent: {status.total_time_spent // 60} minutes",
        border_style="cyan",
    ))

    table = Table()
    table.add_column("Module", style="bold")
    table.add_column("Section")
    table.add_column("Completion", justify="right")

    by_ref = {
        (s.module_id, s.section_id): s.completion
        for s in (*status.completed_sections, *status.in_progress_sections, *status.not_started_sections)
    }
    curriculum = get_curriculum()
    for module_id, completion in status.module_completion.items():
        table.add_row(module_id, "", f"{completion}%")
        for section_id in curriculum.sections(module_id):
            table.add_row("", section_id, f"{by_ref.get((module_id, section_id), 0)}%")

    console.print(table)
    if overview.next_section is not None:
        console.print(f"Next: {overview.next_section.module_id}/{overview.next_section.section_id}")
    if overview.achievements:
        console.print(f"Achievements: {', '.join(a.title for a in overview.achievements)}")


@path_app.command("prune")
def prune(
    user_id: str = typer.Argument(..., help="Learner id (UUID)"),
    days: int = typer.Option(None, "--days", min=0, help="Age limit (default from settings)"),
) -> None:
    """Remove old suggestions the learner never clicked or completed."""
    learner = _parse_user_id(user_id)

    async def _prune(services) -> int:
        return await services.learning_paths.prune_suggestions(learner, days)

    removed = run_async(_with_services(_prune))
    console.print(f"Removed {removed} suggestions")


if __name__ == "__main__":
    app()
