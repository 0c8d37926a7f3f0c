"""Distance and time between stations, per route."""

from collections.abc import Sequence
from typing import TypeVar

from .exceptions import RouteNotFoundForStationError, StationNotFoundError
from .models import RouteMembership, Station, UnifiedStation

_S = TypeVar("_S", Station, UnifiedStation)


def find_station(stations: Sequence[_S], name: str) -> _S:
    """Get the first station with the given name.

    Raises:
        StationNotFoundError: If no station has that name
    """
    for station in stations:
        if station.name == name:
            return station
    raise StationNotFoundError(name)


def segment_km(stations: Sequence[Station], from_station: str, to_station: str) -> float:
    """Distance between two stations of a single route."""
    start = find_station(stations, from_station)
    end = find_station(stations, to_station)
    return abs(end.km - start.km)


def segment_minutes(
    stations: Sequence[Station], from_station: str, to_station: str
) -> float:
    """Travel time between two stations of a single route.

    A station without a time value counts as 0 minutes.
    """
    start = find_station(stations, from_station)
    end = find_station(stations, to_station)
    return abs((end.minutes or 0) - (start.minutes or 0))


def _memberships(
    stations: Sequence[UnifiedStation], from_station: str, to_station: str, route: str
) -> tuple[RouteMembership, RouteMembership]:
    start = find_station(stations, from_station)
    end = find_station(stations, to_station)

    start_line = start.membership(route)
    if start_line is None:
        raise RouteNotFoundForStationError(start.name, route)
    end_line = end.membership(route)
    if end_line is None:
        raise RouteNotFoundForStationError(end.name, route)
    return start_line, end_line


def segment_km_for_route(
    stations: Sequence[UnifiedStation], from_station: str, to_station: str, route: str
) -> float:
    """Distance between two stations measured along one route.

    Raises:
        StationNotFoundError: If either station is unknown
        RouteNotFoundForStationError: If either station is not on the route
    """
    start, end = _memberships(stations, from_station, to_station, route)
    return abs(end.km - start.km)


def segment_minutes_for_route(
    stations: Sequence[UnifiedStation], from_station: str, to_station: str, route: str
) -> float:
    """Travel time between two stations measured along one route."""
    start, end = _memberships(stations, from_station, to_station, route)
    return abs((end.minutes or 0) - (start.minutes or 0))


def find_common_routes(
    stations: Sequence[UnifiedStation], from_station: str, to_station: str
) -> list[str]:
    """Routes shared by two stations, in the first station's membership order.

    Unknown stations share nothing, so an empty list is returned for them.
    """
    try:
        start = find_station(stations, from_station)
        end = find_station(stations, to_station)
    except StationNotFoundError:
        return []

    end_routes = set(end.routes)
    common: list[str] = []
    for route in start.routes:
        if route in end_routes and route not in common:
            common.append(route)
    return common


def convert_to_route_stations(
    stations: Sequence[UnifiedStation], route: str
) -> list[Station]:
    """Project the stations of one route into the single-route shape."""
    projected = []
    for station in stations:
        line = station.membership(route)
        if line is None:
            continue
        projected.append(
            Station(
                name=station.name,
                hiragana=station.hiragana,
                romaji=station.romaji,
                km=line.km,
                minutes=line.minutes,
            )
        )
    return sorted(projected, key=lambda s: s.km)


def list_routes(stations: Sequence[UnifiedStation]) -> list[str]:
    """All route identifiers, in order of first appearance."""
    routes: list[str] = []
    for station in stations:
        for route in station.routes:
            if route not in routes:
                routes.append(route)
    return routes
