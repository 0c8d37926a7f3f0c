"""Which stations can be reached from a station without changing trains."""

from collections.abc import Iterable, Sequence

from .models import (
    OperatingConnection,
    OperatingSystem,
    OperatingSystemData,
    UnifiedStation,
)

OperatingSystems = OperatingSystemData | Iterable[OperatingSystem]


def iter_systems(systems: OperatingSystems | None) -> Iterable[OperatingSystem]:
    if systems is None:
        return []
    if isinstance(systems, OperatingSystemData):
        return systems.operating_systems.values()
    return systems


def iter_connections(systems: OperatingSystems | None) -> Iterable[OperatingConnection]:
    """Every operating connection of every operating system."""
    for system in iter_systems(systems):
        yield from system.operating_connections


def compatible_stations(
    stations: Sequence[UnifiedStation], station_name: str
) -> list[UnifiedStation]:
    """Stations sharing at least one physical route with a station.

    The station itself is included. An unknown station yields an empty list.
    """
    origin = next((s for s in stations if s.name == station_name), None)
    if origin is None:
        return []

    origin_routes = set(origin.routes)
    return [s for s in stations if origin_routes.intersection(s.routes)]


def through_service_partners(
    systems: OperatingSystems | None, station_name: str
) -> set[str]:
    """Names of stations linked to a station by any operating connection."""
    partners: set[str] = set()
    for connection in iter_connections(systems):
        if station_name in (connection.from_station, connection.to_station):
            partners.add(connection.from_station)
            partners.add(connection.to_station)
    return partners


def compatible_stations_with_through_service(
    stations: Sequence[UnifiedStation],
    systems: OperatingSystems | None,
    station_name: str,
) -> list[UnifiedStation]:
    """Stations reachable by a shared physical route or a through service.

    Connection direction is not significant here: both endpoints count.
    Results keep the order of ``stations``.
    """
    names = {s.name for s in compatible_stations(stations, station_name)}
    names |= through_service_partners(systems, station_name)
    return [s for s in stations if s.name in names]


def through_service_routes(
    systems: OperatingSystems | None, from_station: str, to_station: str
) -> list[OperatingConnection]:
    """Operating connections between two stations, in either direction.

    A connection stored the other way round is returned reversed. A
    connection matching both directions is returned twice.
    """
    matches: list[OperatingConnection] = []
    for connection in iter_connections(systems):
        if (
            connection.from_station == from_station
            and connection.to_station == to_station
        ):
            matches.append(connection)
        if (
            connection.from_station == to_station
            and connection.to_station == from_station
        ):
            matches.append(connection.reversed())
    return matches


def system_for_connection(
    systems: OperatingSystems | None, connection: OperatingConnection
) -> OperatingSystem | None:
    """Find the operating system owning a connection (or its reverse)."""
    for system in iter_systems(systems):
        for candidate in system.operating_connections:
            if candidate == connection or candidate.reversed() == connection:
                return system
    return None
