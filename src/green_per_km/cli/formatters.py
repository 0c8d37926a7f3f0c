"""Output formatters for CLI display."""

import json
from collections.abc import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core.models import (
    FareQuote,
    FareTable,
    OperatingConnection,
    RankingItem,
    Station,
    UnifiedStation,
)

console = Console()

ROUTE_TITLES = {
    "chuo-rapid": "中央線快速（東京〜高尾）",
    "utsunomiya-line": "宇都宮線（東京〜宇都宮）",
    "tokaido-line": "東海道線（東京〜熱海）",
    "shonan-shinjuku-line": "湘南新宿ライン（宇都宮・高崎〜小田原・逗子）",
    "takasaki-line": "高崎線（東京〜高崎）",
    "joban-line": "常磐線（東京・上野〜水戸）",
    "yokosuka-line": "横須賀線（東京〜久里浜）",
    "ueno-tokyo-line": "上野東京ライン（直通運転）",
    "shonan-shinjuku-line-direct": "湘南新宿ライン（直通運転）",
}


def route_title(route: str | None) -> str:
    """Display name of a route or operating system."""
    if route is None:
        return "-"
    return ROUTE_TITLES.get(route, route)


def _price(value: float, unit: str) -> str:
    if value == float("inf"):
        return "-"
    return f"{value:.1f} {unit}"


def format_quote_table(quote: FareQuote) -> None:
    """Display a fare quote as a rich table."""
    table = Table(
        title=f"Green Car: {quote.from_station} → {quote.to_station}",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    via = route_title(quote.route) if quote.route else "直通運転（乗り換えなし）"
    if quote.alternatives:
        via += f" (他{quote.alternatives}経路対応)"
    table.add_row("Route", via)
    table.add_row("Distance", f"{quote.distance:.1f} km")
    table.add_row("Time", f"{quote.minutes:g} 分")
    table.add_row(f"Fare ({quote.method})", f"¥{quote.fare:,}")
    table.add_row("Per km", _price(quote.unit_price, "円/km"))
    table.add_row("Per minute", _price(quote.minute_price, "円/分"))

    console.print(table)

    if quote.connection is not None:
        console.print()
        format_connections_table([quote.connection])


def format_quote_json(quote: FareQuote) -> str:
    """Format a fare quote as JSON."""
    return json.dumps(quote.model_dump(by_alias=True), ensure_ascii=False, indent=2)


def _position_style(index: int) -> str:
    return {0: "bold yellow", 1: "bold white", 2: "bold dark_orange3"}.get(index, "dim")


def format_rankings_table(
    items: Sequence[RankingItem], title: str, by: str = "unit_price"
) -> None:
    """Display ranking items as a rich table."""
    if not items:
        console.print("No ranking entries.")
        return

    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right")
    table.add_column("From → To", style="cyan")
    table.add_column("Route", style="yellow")
    if by == "minute_price":
        table.add_column("Time", justify="right", style="magenta")
    else:
        table.add_column("Distance", justify="right", style="magenta")
    table.add_column("Fare", justify="right", style="green")
    table.add_column("Unit price", justify="right", style="bold green")

    for index, item in enumerate(items):
        if by == "minute_price":
            measure = f"{item.minutes:g}分"
            unit = _price(item.minute_price, "円/分")
        else:
            measure = f"{item.distance:.1f}km"
            unit = _price(item.unit_price, "円/km")
        table.add_row(
            f"[{_position_style(index)}]{index + 1}[/]",
            f"{item.from_station} → {item.to_station}",
            route_title(item.route),
            measure,
            f"¥{item.fare:,}",
            unit,
        )

    console.print(table)


def format_rankings_json(items: Sequence[RankingItem]) -> str:
    """Format ranking items as JSON."""
    return json.dumps(
        [item.model_dump(by_alias=True) for item in items],
        ensure_ascii=False,
        indent=2,
    )


def format_station_table(
    stations: Sequence[UnifiedStation], title: str = "Stations"
) -> None:
    """Display unified stations with their route memberships."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Reading", style="green")
    table.add_column("Routes", style="yellow")

    for station in stations:
        reading = " / ".join(r for r in (station.hiragana, station.romaji) if r)
        routes = ", ".join(
            f"{line.route} {line.km:g}km" for line in station.lines
        )
        table.add_row(station.name, reading or "-", routes)

    console.print(table)


def format_route_station_table(stations: Sequence[Station], route: str) -> None:
    """Display the stations of one route in distance order."""
    table = Table(
        title=route_title(route), show_header=True, header_style="bold magenta"
    )
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("km", justify="right", style="green")
    table.add_column("Minutes", justify="right", style="magenta")

    for station in stations:
        minutes = f"{station.minutes:g}" if station.minutes is not None else "-"
        table.add_row(station.name, f"{station.km:.1f}", minutes)

    console.print(table)


def format_connections_table(connections: Sequence[OperatingConnection]) -> None:
    """Display through-service connections segment by segment."""
    for connection in connections:
        table = Table(
            title=(
                f"直通運転: {connection.from_station} → {connection.to_station} "
                f"({connection.total_km:g}km・{connection.total_minutes:g}分)"
            ),
            show_header=True,
            header_style="bold blue",
        )
        table.add_column("Route", style="yellow")
        table.add_column("From", style="cyan")
        table.add_column("To", style="cyan")
        table.add_column("km", justify="right", style="green")
        table.add_column("Minutes", justify="right", style="magenta")

        for segment in connection.route_segments:
            table.add_row(
                route_title(segment.route),
                segment.from_station,
                segment.to_station,
                f"{segment.km:g}",
                f"{segment.minutes:g}",
            )
        console.print(table)


def format_fare_table(table: FareTable) -> None:
    """Display fare bands."""
    summary = Table(
        title="Green Car fare bands", show_header=True, header_style="bold magenta"
    )
    summary.add_column("Distance", style="cyan")
    summary.add_column("Suica", justify="right", style="green")
    summary.add_column("Ticket", justify="right", style="green")

    lower = 0.0
    for band in table.fare_bands:
        if band.max_km is None:
            label = f"{lower:g}km〜"
        else:
            label = f"〜{band.max_km:g}km"
            lower = band.max_km
        summary.add_row(label, f"¥{band.suica:,}", f"¥{band.ticket:,}")

    console.print(summary)
    if table.source:
        console.print(
            Panel(
                f"[bold]Source:[/bold] {table.source}\n"
                f"[bold]Updated:[/bold] {table.updated_at or '-'}",
                border_style="blue",
            )
        )
