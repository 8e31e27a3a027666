"""
Latebites CLI.

Command-line interface for operating the API and for browsing the catalog
from a terminal using the device location cache.
"""

import asyncio
import sys
import time
from typing import Optional

import httpx
import typer
from rich.console import Console
from rich.table import Table

from latebites_shared.config.settings import settings
from latebites_shared.infrastructure.db import engine, get_db_context
from latebites_shared.utils.geo import Coordinates, format_distance
from latebites_api.models import Base
from latebites_api.services.catalog import CatalogService, CatalogUnavailable
from latebites_api.services.domain import ReservationService
from latebites_api.services.location import (
    FixedPositionProvider,
    IpGeolocationProvider,
    LocationCache,
    LocationError,
    LocationService,
)

app = typer.Typer(
    name="latebites",
    help="Latebites food rescue CLI",
    add_completion=False,
)
console = Console()


# =============================================================================
# Server & Database Commands
# =============================================================================

@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    port: int = typer.Option(settings.rest_api_port, help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the REST API with uvicorn."""
    import uvicorn

    uvicorn.run("latebites_api.main:app", host=host, port=port, reload=reload)


@app.command()
def db_init():
    """Create database tables that do not exist yet."""
    console.print("[blue]Creating tables...[/blue]")
    Base.metadata.create_all(bind=engine)
    console.print("[green]✓ Tables created/verified[/green]")


@app.command()
def reconcile_inventory():
    """Retry inventory updates for orders whose reservation partially failed."""
    with get_db_context() as db:
        report = ReservationService(db).reconcile_partial_reservations()

    if not report.adjusted and not report.stranded:
        console.print("[green]✓ No orders awaiting reconciliation[/green]")
        return

    table = Table(title="Reconciliation Results")
    table.add_column("Order", style="cyan")
    table.add_column("Result")

    for order_id in report.adjusted:
        table.add_row(order_id, "[green]inventory updated[/green]")
    for order_id in report.stranded:
        table.add_row(order_id, "[red]bag has no units left, review manually[/red]")

    console.print(table)
    if report.stranded:
        raise typer.Exit(1)


# =============================================================================
# Location Commands
# =============================================================================

@app.command()
def locate(
    lat: Optional[float] = typer.Option(None, "--lat", help="Latitude of a known position"),
    lng: Optional[float] = typer.Option(None, "--lng", help="Longitude of a known position"),
    customer_id: Optional[str] = typer.Option(None, "--customer-id", help="Also store on this customer"),
):
    """Record the current position in the location cache."""
    if (lat is None) != (lng is None):
        console.print("[red]Pass both --lat and --lng, or neither[/red]")
        raise typer.Exit(2)

    if lat is not None:
        provider = FixedPositionProvider(Coordinates(lat, lng))
    else:
        provider = IpGeolocationProvider()

    service = LocationService(cache=LocationCache())
    try:
        coords = asyncio.run(service.request_live_location(provider, customer_id=customer_id))
    except LocationError as e:
        console.print(f"[red]✗ {e.message}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Location saved: {coords.latitude:.4f}, {coords.longitude:.4f}[/green]")


@app.command()
def forget_location():
    """Clear the location cache."""
    LocationCache().clear()
    console.print("[green]✓ Location cache cleared[/green]")


@app.command()
def browse(
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Filter by restaurant name"),
    cuisine: Optional[str] = typer.Option(None, "--cuisine", "-c", help="Filter by cuisine"),
):
    """List restaurants with rescue bags near the cached location."""
    origin = LocationCache().load()
    if origin is None:
        console.print("[yellow]No saved location; showing all restaurants. Run `latebites locate` first.[/yellow]")

    try:
        with get_db_context() as db:
            result = CatalogService(db).query(origin, search=search, cuisine=cuisine)
            rows = [
                (
                    entry.restaurant.name,
                    format_distance(entry.distance_km) if entry.distance_km is not None else "-",
                    ", ".join(entry.restaurant.cuisine_types),
                    sum(1 for bag in entry.bags if bag.is_available),
                )
                for entry in result.entries
            ]
    except CatalogUnavailable as e:
        console.print(f"[red]✗ {e.message}[/red]")
        raise typer.Exit(1)

    if not rows:
        console.print("[yellow]No restaurants found[/yellow]")
        return

    table = Table(title="Rescue bags near you" if origin else "Rescue bags")
    table.add_column("Restaurant", style="cyan")
    table.add_column("Distance", style="yellow")
    table.add_column("Cuisine")
    table.add_column("Bags available", style="green", justify="right")
    for name, distance, cuisines, available in rows:
        table.add_row(name, distance, cuisines, str(available))
    console.print(table)


# =============================================================================
# Health Commands
# =============================================================================

@app.command()
def health(
    url: str = typer.Option(f"http://localhost:{settings.rest_api_port}/api/health/detailed", help="Health URL"),
):
    """Check API health."""
    table = Table(title="Service Health")
    table.add_column("Service", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Response Time", style="yellow")

    start = time.time()
    try:
        response = httpx.get(url, timeout=5.0)
        elapsed = (time.time() - start) * 1000
        if response.status_code == 200:
            table.add_row("REST API", "✓ Healthy", f"{elapsed:.0f}ms")
        else:
            table.add_row("REST API", f"✗ Status {response.status_code}", f"{elapsed:.0f}ms")
    except httpx.HTTPError as e:
        table.add_row("REST API", f"✗ {type(e).__name__}", "-")

    console.print(table)


@app.command()
def version():
    """Show version information."""
    table = Table(title="Latebites Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("API", "0.1.0")
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


if __name__ == "__main__":
    app()
