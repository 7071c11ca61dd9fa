"""Launchpad operator CLI."""

import asyncio

import typer
from rich.console import Console
from rich.table import Table


console = Console()

app = typer.Typer(
    name="launchpad",
    help="Operate the launch identity service.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.command(name="launch-url")
def launch_url(
    location: str = typer.Argument(..., help="External location identifier"),
    user: str = typer.Argument(..., help="External user identifier"),
    base_url: str | None = typer.Option(
        None, "--base-url", "-b", help="Dashboard URL (defaults to LAUNCH_BASE_URL)"
    ),
    minutes: int | None = typer.Option(
        None, "--minutes", "-m", min=1, help="Token lifetime in minutes"
    ),
) -> None:
    """Print a signed launch URL for one location/user pair."""
    from app.modules.embedding.services import build_launch_url

    result = build_launch_url(
        location, user, base_url=base_url, expires_minutes=minutes
    )

    table = Table(show_header=False, box=None)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", overflow="fold")
    table.add_row("URL", result.url)
    table.add_row("Expires", result.expires_at.isoformat())

    console.print()
    console.print(table)
    console.print()


@app.command(name="init-db")
def init_db() -> None:
    """Create all tables for local development.

    This is not a migration tool: existing tables are left untouched.
    """
    from app.core.database import Base, async_engine
    from app.modules import load_models

    load_models()

    async def _create() -> None:
        async with async_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        await async_engine.dispose()

    asyncio.run(_create())
    console.print(
        f"[green]Created[/green] {len(Base.metadata.tables)} tables: "
        + ", ".join(sorted(Base.metadata.tables))
    )


@app.command(name="serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("app.main:create_app", host=host, port=port, reload=reload, factory=True)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
