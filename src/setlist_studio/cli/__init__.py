"""Management CLI: database setup, sample data and provider status."""

import typer
from rich.console import Console
from rich.table import Table

from src.setlist_studio.api.utils.app_startup import configure_logging
from src.setlist_studio.core.services import DatabaseInitializer, DbSessionService
from src.setlist_studio.core.services.database.dev_seed import seed_development_data
from src.setlist_studio.runtime.context import get_config
from src.setlist_studio.runtime.init_db import init_db

console = Console()

app = typer.Typer(help="Setlist Studio management commands", no_args_is_help=True)
db_app = typer.Typer(help="Database setup")
app.add_typer(db_app, name="db")


@app.callback()
def main_callback() -> None:
    configure_logging()


@db_app.command("init")
def db_init() -> None:
    """Create the schema for the configured database."""
    try:
        init_db()
    except Exception as e:
        console.print(f"[red]Database initialization failed: {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print("[green]Database ready[/green]")


@db_app.command("seed")
def db_seed() -> None:
    """Load the sample library when the database has no songs."""
    config = get_config()
    db_service = DbSessionService(config.database, config.app.environment)
    try:
        DatabaseInitializer(db_service).initialize()
        with db_service.session_scope() as session:
            seeded = seed_development_data(session)
    except Exception as e:
        console.print(f"[red]Seeding failed: {e}[/red]")
        raise typer.Exit(code=1) from e
    finally:
        db_service.dispose()

    if seeded:
        console.print("[green]Sample data created[/green]")
    else:
        console.print("[yellow]Songs already exist; nothing seeded[/yellow]")


@app.command("providers")
def list_providers() -> None:
    """Show which external sign-in providers have usable credentials."""
    providers = get_config().authentication.providers

    table = Table(title="External login providers")
    table.add_column("Scheme", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Callback", style="blue")
    table.add_column("Enabled", style="yellow")
    for name, provider in providers.items():
        table.add_row(
            name,
            provider.display_name,
            provider.callback_path,
            "yes" if provider.is_configured else "no",
        )
    console.print(table)


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (defaults to config)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port (defaults to config)"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    """Run the web application with uvicorn."""
    import uvicorn

    config = get_config()
    uvicorn.run(
        "src.setlist_studio.api.http.app:app",
        host=host or config.app.host,
        port=port or config.app.port,
        reload=reload,
        access_log=False,
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
