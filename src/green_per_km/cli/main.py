"""CLI main entry point for Green Car fare calculation."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from .. import __version__
from ..config import Settings
from ..core.exceptions import (
    DataIntegrityError,
    DataLoadError,
    FareTableParseError,
    GreenFareError,
    RouteNotFoundError,
    StationNotFoundError,
    ValidationError,
)
from ..core.ranking import filter_rankings_by_station, top_rankings
from ..core.validation import (
    route_length,
    route_lengths,
    validate_fare_table,
    validate_operating_systems,
    validate_stations,
)
from ..data.fare_table_parser import JR_EAST_GREEN_FARE_URL, parse_fare_table_html
from ..data.loader import (
    load_fare_table,
    load_operating_systems,
    load_stations,
    save_fare_table,
)
from .common import error_console, get_calculator, get_settings
from .formatters import (
    format_fare_table,
    format_quote_json,
    format_quote_table,
    format_rankings_json,
    format_rankings_table,
)
from .station_commands import stations

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--data-dir",
    "-D",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory with the JSON data [env: GREEN_PER_KM_DATA_DIR]",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, data_dir: Path | None, verbose: bool) -> None:
    """Green per km - Green Car fares per km and per minute."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = Settings.from_env(data_dir=data_dir)
    except ValidationError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("from_station")
@click.argument("to_station")
@click.option(
    "--method",
    "-m",
    type=click.Choice(["suica", "ticket"]),
    help="Payment method (default from configuration)",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
@click.pass_context
def fare(
    ctx: click.Context,
    from_station: str,
    to_station: str,
    method: str | None,
    output_format: str,
) -> None:
    """Calculate the Green Car fare between two stations.

    Examples:
        green-per-km fare 東京 横浜
        green-per-km fare 大宮 横浜 --format json
        green-per-km fare 東京 熱海 --method ticket
    """
    calculator = get_calculator(ctx)
    method = method or get_settings(ctx).default_method

    try:
        quote = calculator.quote(from_station, to_station, method=method)
    except ValidationError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    except StationNotFoundError as e:
        error_console.print(f"[red]Unknown station:[/red] {e.station}")
        sys.exit(1)
    except RouteNotFoundError as e:
        error_console.print(f"[yellow]No route found:[/yellow] {e}")
        sys.exit(1)
    except GreenFareError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if output_format == "json":
        click.echo(format_quote_json(quote))
    else:
        format_quote_table(quote)


@cli.command()
@click.option(
    "--by",
    type=click.Choice(["km", "minute"]),
    default="km",
    help="Rank by yen per km or yen per minute",
)
@click.option(
    "--order",
    type=click.Choice(["expensive", "cheap"]),
    default="expensive",
    help="Most expensive or cheapest unit price first",
)
@click.option("--station", "-s", help="Only pairs including this station")
@click.option(
    "--route", "-r", "routes", multiple=True, help="Restrict to route (repeatable)"
)
@click.option(
    "--top", "-n", type=click.IntRange(min=1), help="Number of entries to show"
)
@click.option("--method", "-m", type=click.Choice(["suica", "ticket"]))
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
@click.pass_context
def ranking(
    ctx: click.Context,
    by: str,
    order: str,
    station: str | None,
    routes: tuple[str, ...],
    top: int | None,
    method: str | None,
    output_format: str,
) -> None:
    """Rank station pairs by Green Car unit price.

    Examples:
        green-per-km ranking
        green-per-km ranking --by minute --order cheap
        green-per-km ranking --station 東京 --top 10
        green-per-km ranking --route tokaido-line --route yokosuka-line
    """
    settings = get_settings(ctx)
    calculator = get_calculator(ctx)
    method = method or settings.default_method
    key = "minute_price" if by == "minute" else "unit_price"
    top = top or settings.ranking_size

    try:
        items = calculator.rankings(method, route_filter=routes or None, by=key)
    except GreenFareError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if station:
        items = filter_rankings_by_station(items, station)
    items = top_rankings(items, top, key=key, descending=order == "expensive")

    if output_format == "json":
        click.echo(format_rankings_json(items))
        return

    unit = "分単価" if key == "minute_price" else "km単価"
    label = "高い順" if order == "expensive" else "安い順"
    scope = f"「{station}」を含む区間" if station else f"TOP{top}"
    format_rankings_table(items, title=f"{unit}ランキング {label} ({scope})", by=key)


@cli.command()
@click.option(
    "--expect",
    "-e",
    "expectations",
    multiple=True,
    help="Expected route length as ROUTE=KM (repeatable)",
)
@click.pass_context
def verify(ctx: click.Context, expectations: tuple[str, ...]) -> None:
    """Validate the data documents.

    Examples:
        green-per-km verify
        green-per-km verify --expect chuo-rapid=53.1
    """
    settings = get_settings(ctx)
    failures = 0

    try:
        station_data = load_stations(settings.stations_path)
        fare_table = load_fare_table(settings.fare_table_path)
        systems = (
            load_operating_systems(settings.operating_systems_path)
            if settings.operating_systems_path.exists()
            else None
        )
    except DataLoadError as e:
        error_console.print(f"[red]Data error:[/red] {e}")
        sys.exit(1)

    checks = [
        ("Fare table", lambda: validate_fare_table(fare_table)),
        ("Stations", lambda: validate_stations(station_data)),
    ]
    if systems is not None:
        checks.append(
            (
                "Operating systems",
                lambda: validate_operating_systems(systems, station_data),
            )
        )

    for name, check in checks:
        try:
            check()
            console.print(f"[green]✓[/green] {name}")
        except DataIntegrityError as e:
            failures += 1
            error_console.print(f"[red]✗ {name}[/red]\n{e}")

    for expectation in expectations:
        route, _, expected = expectation.partition("=")
        try:
            expected_km = float(expected)
            actual = route_length(station_data, route)
        except ValueError:
            error_console.print(f"[red]Invalid expectation:[/red] {expectation}")
            sys.exit(1)
        except DataIntegrityError as e:
            failures += 1
            error_console.print(f"[red]✗[/red] {e}")
            continue
        if actual != round(expected_km, 1):
            failures += 1
            error_console.print(
                f"[red]✗ {route}[/red] total {actual}km, expected {expected_km:g}km"
            )
        else:
            console.print(f"[green]✓[/green] {route} total = {actual}km")

    table = Table(title="Route lengths", show_header=True, header_style="bold magenta")
    table.add_column("Route", style="cyan")
    table.add_column("km", justify="right", style="green")
    for route, length in route_lengths(station_data).items():
        table.add_row(route, f"{length:.1f}")
    console.print(table)

    if failures:
        sys.exit(1)


@cli.command("parse-fare-table")
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--source", default=JR_EAST_GREEN_FARE_URL, help="Source URL to record")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output JSON path (default: fare table in the data directory)",
)
@click.pass_context
def parse_fare_table(
    ctx: click.Context, html_file: Path, source: str, output: Path | None
) -> None:
    """Build the fare table document from a saved JR East charge page.

    Examples:
        green-per-km parse-fare-table charge.html
        green-per-km parse-fare-table charge.html -o data/green-fare.table.json
    """
    output = output or get_settings(ctx).fare_table_path

    try:
        table = parse_fare_table_html(html_file.read_text(encoding="utf-8"), source)
        validate_fare_table(table)
    except (FareTableParseError, DataIntegrityError) as e:
        error_console.print(f"[red]Parse error:[/red] {e}")
        sys.exit(1)

    save_fare_table(table, output)
    format_fare_table(table)
    console.print(f"[green]Wrote[/green] {output}")


@cli.group()
def config() -> None:
    """Configuration management."""
    pass


@config.command("show")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Show current configuration."""
    settings = get_settings(ctx)
    console.print("[bold]Current Configuration:[/bold]")
    console.print(f"• Data directory: {settings.data_dir}")
    console.print(f"• Stations: {settings.stations_path}")
    console.print(f"• Fare table: {settings.fare_table_path}")
    console.print(f"• Operating systems: {settings.operating_systems_path}")
    console.print(f"• Default method: {settings.default_method}")
    console.print(f"• Ranking size: {settings.ranking_size}")


cli.add_command(stations)


if __name__ == "__main__":
    cli()
