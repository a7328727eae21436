"""
Tableside CLI.

Operator commands for a running deployment and its database:

    tableside db-init
    tableside db-seed
    tableside tables --url http://localhost:8000
    tableside watch --table 3
"""

import asyncio
import json
import sys
import time
from typing import Optional

import httpx
import typer
import websockets
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="tableside",
    help="Tableside live table coordinator CLI",
    add_completion=False,
)
console = Console()

DEFAULT_API_URL = "http://localhost:8000"
DEFAULT_WS_URL = "ws://localhost:8000/ws/tables"


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def db_init():
    """Create missing tables."""
    from shared.infrastructure.db import engine
    from rest_api.models import Base

    Base.metadata.create_all(bind=engine)
    console.print(f"[green]✓ Tables ready on {engine.dialect.name}[/green]")


@app.command()
def db_seed(
    force: bool = typer.Option(False, "--force", "-f", help="Allow seeding in production"),
):
    """Insert the demo menu and store config into empty tables."""
    from shared.config.settings import settings
    from shared.infrastructure.db import SessionLocal, engine
    from rest_api.models import Base
    from rest_api.seed import seed

    if settings.environment == "production" and not force:
        console.print("[red]Refusing to seed production without --force[/red]")
        raise typer.Exit(1)

    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        inserted = seed(db)

    table = Table(title="Seeded rows")
    table.add_column("Table", style="cyan")
    table.add_column("Inserted", style="green")
    for name, count in inserted.items():
        table.add_row(name, str(count))
    console.print(table)


@app.command()
def config_check():
    """Validate the current environment configuration."""
    from shared.config.settings import settings

    errors = settings.validate_production_settings()

    table = Table(title=f"Configuration ({settings.environment})")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Database", settings.database_url.split("@")[-1])
    table.add_row("Default tables", str(settings.default_total_tables))
    table.add_row("Order rate limit", settings.order_create_rate_limit)
    table.add_row("WS queue size", str(settings.ws_send_queue_size))
    table.add_row("Occupancy lookup timeout", f"{settings.occupancy_lookup_timeout}s")
    console.print(table)

    if errors:
        for error in errors:
            console.print(f"[red]✗ {error}[/red]")
        raise typer.Exit(1)
    console.print("[green]✓ Configuration OK[/green]")


# =============================================================================
# Live Commands
# =============================================================================

@app.command()
def health(
    url: str = typer.Option(DEFAULT_API_URL, help="REST API base URL"),
):
    """Check a running server's dependencies and live channel."""
    start = time.perf_counter()
    try:
        response = httpx.get(f"{url}/api/health/detailed", timeout=5.0)
    except httpx.HTTPError as e:
        console.print(f"[red]✗ {url} unreachable: {type(e).__name__}[/red]")
        raise typer.Exit(1)
    elapsed = (time.perf_counter() - start) * 1000

    body = response.json()
    table = Table(title=f"Service Health ({elapsed:.0f}ms)")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Detail", style="yellow")

    for name, result in body.get("dependencies", {}).items():
        mark = "✓" if result["status"] == "healthy" else "✗"
        table.add_row(name, f"{mark} {result['status']}", result.get("error", ""))

    live = body.get("live_tables", {})
    connections = live.get("connections", {})
    presence = live.get("presence", {})
    table.add_row(
        "live channel",
        f"{connections.get('total_connections', '?')} clients",
        f"{presence.get('viewers', '?')} viewers at {presence.get('tracked_tables', '?')} tables",
    )
    console.print(table)

    if response.status_code != 200:
        raise typer.Exit(1)


@app.command()
def tables(
    url: str = typer.Option(DEFAULT_API_URL, help="REST API base URL"),
):
    """Show which tables are occupied."""
    try:
        response = httpx.get(f"{url}/api/tables/status", timeout=5.0)
        response.raise_for_status()
    except httpx.HTTPError as e:
        console.print(f"[red]✗ Could not load table status: {e}[/red]")
        raise typer.Exit(1)

    status = response.json()
    occupied = status["occupied_tables"]
    named = [t for t in occupied if isinstance(t, str)]

    table = Table(title=f"Tables ({len(occupied)} occupied)")
    table.add_column("Table", style="cyan")
    table.add_column("Status")
    for number in range(1, status["total_tables"] + 1):
        busy = number in occupied
        table.add_row(str(number), "[red]occupied[/red]" if busy else "[green]free[/green]")
    for name in named:
        table.add_row(name, "[red]occupied[/red]")
    console.print(table)


@app.command()
def watch(
    url: str = typer.Option(DEFAULT_WS_URL, help="Live channel URL"),
    table: Optional[str] = typer.Option(None, "--table", "-t", help="Join this table while watching"),
    limit: int = typer.Option(0, help="Stop after this many events (0 = forever)"),
):
    """Print live table and order events."""

    async def _watch():
        async with websockets.connect(url, close_timeout=5) as ws:
            console.print(f"[blue]Connected to {url}[/blue]")
            if table is not None:
                await ws.send(json.dumps({"type": "JOIN_TABLE", "table_id": table}))
                console.print(f"[blue]Joined table {table}[/blue]")

            received = 0
            async for raw in ws:
                event = json.loads(raw)
                kind = event.pop("type", "?")
                console.print(f"[cyan]{kind:22}[/cyan] {json.dumps(event, default=str)}")
                received += 1
                if limit and received >= limit:
                    break

    try:
        asyncio.run(_watch())
    except KeyboardInterrupt:
        console.print("[yellow]Stopped[/yellow]")
    except (OSError, websockets.exceptions.WebSocketException) as e:
        console.print(f"[red]✗ Connection failed: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def version():
    """Show version information."""
    from rest_api.main import app as api

    table = Table(title="Tableside Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")
    table.add_row("API", api.version)
    table.add_row("Python", sys.version.split()[0])
    console.print(table)


if __name__ == "__main__":
    app()
