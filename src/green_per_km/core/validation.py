"""Integrity checks for the static fare and station documents."""

from collections import defaultdict

from .compatibility import OperatingSystems, iter_systems
from .exceptions import DataIntegrityError
from .models import FareTable, UnifiedStationData

TOTAL_TOLERANCE = 0.05


def _raise_if_problems(kind: str, problems: list[str]) -> None:
    if problems:
        details = "\n".join(f"  - {p}" for p in problems)
        raise DataIntegrityError(f"Invalid {kind}:\n{details}")


def validate_fare_table(table: FareTable) -> None:
    """Check that bands ascend and end with exactly one open-ended band.

    Raises:
        DataIntegrityError: Listing every problem found
    """
    problems = []
    bands = table.fare_bands

    if not bands:
        problems.append("fare table has no bands")
    elif bands[-1].max_km is not None:
        problems.append(
            f"last band must be open-ended, got maxKm={bands[-1].max_km:g}"
        )

    previous = None
    for index, band in enumerate(bands):
        if band.max_km is None and index != len(bands) - 1:
            problems.append(f"band {index} is open-ended but is not the last band")
        if band.max_km is not None:
            if previous is not None and band.max_km <= previous:
                problems.append(
                    f"band {index} maxKm={band.max_km:g} does not exceed {previous:g}"
                )
            previous = band.max_km
        if band.suica < 0 or band.ticket < 0:
            problems.append(f"band {index} has a negative price")

    _raise_if_problems("fare table", problems)


def validate_stations(data: UnifiedStationData) -> None:
    """Check unique names and strictly increasing km/minutes along every route.

    Raises:
        DataIntegrityError: Listing every problem found
    """
    problems = []
    seen: set[str] = set()
    last_seen: dict[str, tuple[str, float, float | None]] = {}

    for station in data.stations:
        if station.name in seen:
            problems.append(f"duplicate station name: {station.name}")
        seen.add(station.name)

        if not station.lines:
            problems.append(f"{station.name} belongs to no route")

        for line in station.lines:
            previous = last_seen.get(line.route)
            if previous is not None:
                prev_name, prev_km, prev_minutes = previous
                if line.km <= prev_km:
                    problems.append(
                        f"{line.route}: km does not increase from "
                        f"{prev_name} ({prev_km:g}) to {station.name} ({line.km:g})"
                    )
                if (
                    line.minutes is not None
                    and prev_minutes is not None
                    and line.minutes <= prev_minutes
                ):
                    problems.append(
                        f"{line.route}: minutes do not increase from "
                        f"{prev_name} ({prev_minutes:g}) to {station.name} "
                        f"({line.minutes:g})"
                    )
            last_seen[line.route] = (station.name, line.km, line.minutes)

    _raise_if_problems("station data", problems)


def validate_operating_systems(
    systems: OperatingSystems, stations: UnifiedStationData | None = None
) -> None:
    """Check segment chaining, totals and (optionally) endpoint existence.

    Raises:
        DataIntegrityError: Listing every problem found
    """
    problems = []
    known = {s.name for s in stations.stations} if stations is not None else None

    for system in iter_systems(systems):
        for connection in system.operating_connections:
            label = f"{system.id}: {connection.from_station}→{connection.to_station}"
            segments = connection.route_segments

            if not segments:
                problems.append(f"{label} has no route segments")
                continue

            if segments[0].from_station != connection.from_station:
                problems.append(
                    f"{label} first segment starts at {segments[0].from_station}"
                )
            if segments[-1].to_station != connection.to_station:
                problems.append(f"{label} last segment ends at {segments[-1].to_station}")
            for previous, segment in zip(segments, segments[1:]):
                if previous.to_station != segment.from_station:
                    problems.append(
                        f"{label} segments break between {previous.to_station} "
                        f"and {segment.from_station}"
                    )

            total_km = sum(seg.km for seg in segments)
            if abs(total_km - connection.total_km) > TOTAL_TOLERANCE:
                problems.append(
                    f"{label} totalKm {connection.total_km:g} != segment sum {total_km:g}"
                )
            total_minutes = sum(seg.minutes for seg in segments)
            if abs(total_minutes - connection.total_minutes) > TOTAL_TOLERANCE:
                problems.append(
                    f"{label} totalMinutes {connection.total_minutes:g} "
                    f"!= segment sum {total_minutes:g}"
                )

            if known is not None:
                for endpoint in (connection.from_station, connection.to_station):
                    if endpoint not in known:
                        problems.append(f"{label} endpoint {endpoint} is not a station")

    _raise_if_problems("operating systems", problems)


def route_length(data: UnifiedStationData, route: str) -> float:
    """Length of a route in km (last station minus first), to 0.1 km."""
    kms = [
        line.km for station in data.stations for line in station.lines
        if line.route == route
    ]
    if not kms:
        raise DataIntegrityError(f"Route {route} has no stations")
    return round(max(kms) - min(kms), 1)


def route_lengths(data: UnifiedStationData) -> dict[str, float]:
    """Length of every route, keyed by route identifier."""
    lengths: dict[str, list[float]] = defaultdict(list)
    for station in data.stations:
        for line in station.lines:
            lengths[line.route].append(line.km)
    return {route: round(max(kms) - min(kms), 1) for route, kms in lengths.items()}
