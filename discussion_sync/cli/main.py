"""CLI entry point for Discussion Sync Server."""

import asyncio
from enum import Enum

import typer
from rich.console import Console

from discussion_sync.logging_config import configure_logging
from discussion_sync.seed import clear_all, reseed_all, seed_all, seed_sources_only
from discussion_sync.services.crypto import generate_encryption_key

app = typer.Typer(
    name="dss",
    help="Discussion Sync Server CLI",
    add_completion=False,
)

console = Console()


class SeedCommand(str, Enum):
    """Seeding operations."""

    all = "all"
    clear = "clear"
    reset = "reset"
    sources = "sources"


def run_async(coro):
    """Helper to run async code from sync CLI."""
    return asyncio.run(coro)


def _seed_operation(command: SeedCommand):
    if command is SeedCommand.clear:
        return clear_all()
    if command is SeedCommand.reset:
        return reseed_all()
    if command is SeedCommand.sources:
        return seed_sources_only()
    return seed_all()


@app.callback()
def main() -> None:
    """Discussion Sync Server CLI."""


@app.command()
def seed(
    command: SeedCommand = typer.Argument(
        SeedCommand.all,
        help="all: run every seed, clear: delete seeded data, "
        "reset: clear then seed, sources: seed only sources",
    ),
):
    """Seed the database with base data."""
    configure_logging()

    try:
        run_async(_seed_operation(command))
    except Exception as e:
        console.print(f"[red]✗ Seed command '{command.value}' failed:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]✓ Seed command '{command.value}' completed[/green]")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
):
    """Start the API server."""
    import uvicorn

    console.print("[green]Starting Discussion Sync Server API...[/green]")
    console.print(f"  Host: {host}")
    console.print(f"  Port: {port}")
    console.print(f"  Docs: http://localhost:{port}/api/docs")

    uvicorn.run(
        "discussion_sync.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


@app.command("generate-key")
def generate_key():
    """Print a new random ENCRYPTION_KEY for source config credentials."""
    key = generate_encryption_key()
    console.print("[green]Generated encryption key.[/green] Add it to your environment:")
    console.print(f"ENCRYPTION_KEY={key}", markup=False, highlight=False)


if __name__ == "__main__":
    app()
