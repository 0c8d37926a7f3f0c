"""CLI commands for exploring the station network."""

import json
import sys

import click
from rich.console import Console

from ..core.exceptions import StationNotFoundError
from .common import error_console, get_calculator
from .formatters import (
    format_connections_table,
    format_route_station_table,
    format_station_table,
    route_title,
)

console = Console()


@click.group()
def stations() -> None:
    """Station network commands."""
    pass


@stations.command("list")
@click.option("--route", "-r", help="Only stations of this route, in km order")
@click.pass_context
def list_stations(ctx: click.Context, route: str | None) -> None:
    """List stations of the network or of one route.

    Examples:
        green-per-km stations list
        green-per-km stations list --route tokaido-line
    """
    calculator = get_calculator(ctx)

    if route:
        route_stations = calculator.route_stations(route)
        if not route_stations:
            error_console.print(f"[yellow]No stations on route:[/yellow] {route}")
            error_console.print(f"Known routes: {', '.join(calculator.routes())}")
            sys.exit(1)
        format_route_station_table(route_stations, route)
        return

    format_station_table(calculator.stations, title=f"Stations ({len(calculator.stations)})")


@stations.command("routes")
@click.argument("from_station", required=False)
@click.argument("to_station", required=False)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def show_routes(
    ctx: click.Context,
    from_station: str | None,
    to_station: str | None,
    as_json: bool,
) -> None:
    """Show routes shared by two stations, or all routes.

    Examples:
        green-per-km stations routes
        green-per-km stations routes 東京 横浜
        green-per-km stations routes 大宮 横浜 --json
    """
    calculator = get_calculator(ctx)

    if not from_station or not to_station:
        for route in calculator.routes():
            console.print(f"• {route}  [dim]{route_title(route)}[/dim]")
        return

    routes = calculator.common_routes(from_station, to_station)
    connections = calculator.through_service_routes(from_station, to_station)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "from": from_station,
                    "to": to_station,
                    "routes": routes,
                    "operatingConnections": [
                        c.model_dump(by_alias=True) for c in connections
                    ],
                },
                ensure_ascii=False,
                indent=2,
            )
        )
        return

    if not routes and not connections:
        error_console.print(
            f"[yellow]No shared route:[/yellow] {from_station} → {to_station}"
        )
        sys.exit(1)

    if routes:
        console.print(f"[bold]Routes {from_station} → {to_station}:[/bold]")
        for route in routes:
            console.print(f"• {route}  [dim]{route_title(route)}[/dim]")
    if connections:
        console.print()
        format_connections_table(connections)


@stations.command("compatible")
@click.argument("station_name")
@click.pass_context
def compatible(ctx: click.Context, station_name: str) -> None:
    """List stations reachable from a station without changing trains.

    Examples:
        green-per-km stations compatible 東京
    """
    calculator = get_calculator(ctx)

    try:
        calculator.station(station_name)
    except StationNotFoundError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    reachable = [
        s for s in calculator.compatible_stations(station_name) if s.name != station_name
    ]
    format_station_table(
        reachable, title=f"Reachable from {station_name} ({len(reachable)})"
    )
