"""Pairwise Green Car fare efficiency rankings."""

import logging
from collections.abc import Collection, Iterable, Sequence
from typing import Literal

from .compatibility import OperatingSystems, iter_systems, through_service_routes
from .distance import (
    find_common_routes,
    segment_km_for_route,
    segment_minutes_for_route,
)
from .exceptions import RouteNotFoundForStationError, StationNotFoundError
from .fare import resolve_fare
from .models import FareTable, RankingItem, Station, UnifiedStation

logger = logging.getLogger(__name__)

RankingKey = Literal["unit_price", "minute_price"]


def _make_item(
    from_station: str,
    to_station: str,
    distance: float,
    minutes: float,
    fare_table: FareTable,
    method: str,
    route: str | None = None,
) -> RankingItem:
    fare = resolve_fare(distance, fare_table, method)
    return RankingItem(
        from_station=from_station,
        to_station=to_station,
        distance=distance,
        minutes=minutes,
        fare=fare,
        unit_price=fare / distance,
        minute_price=fare / minutes,
        route=route,
    )


def _sort_by(items: Iterable[RankingItem], key: RankingKey, descending: bool = True):
    return sorted(items, key=lambda item: getattr(item, key), reverse=descending)


def generate_rankings(
    stations: Sequence[Station], fare_table: FareTable, method: str = "suica"
) -> list[RankingItem]:
    """Rank every station pair of a single route by yen per km, highest first.

    Pairs with zero distance or zero minutes are left out.
    """
    rankings = []
    for i, start in enumerate(stations):
        for end in stations[i + 1 :]:
            distance = abs(end.km - start.km)
            minutes = abs((end.minutes or 0) - (start.minutes or 0))
            if distance == 0 or minutes == 0:
                continue
            rankings.append(
                _make_item(start.name, end.name, distance, minutes, fare_table, method)
            )
    return _sort_by(rankings, "unit_price")


def generate_minute_rankings(
    stations: Sequence[Station], fare_table: FareTable, method: str = "suica"
) -> list[RankingItem]:
    """Single-route rankings ordered by yen per minute, highest first."""
    return _sort_by(generate_rankings(stations, fare_table, method), "minute_price")


def _route_candidates(
    stations: Sequence[UnifiedStation],
    start: UnifiedStation,
    end: UnifiedStation,
    route_filter: Collection[str] | None,
) -> Iterable[tuple[str, float, float]]:
    routes = find_common_routes(stations, start.name, end.name)
    if route_filter is not None:
        routes = [route for route in routes if route in route_filter]

    for route in routes:
        try:
            distance = segment_km_for_route(stations, start.name, end.name, route)
            minutes = segment_minutes_for_route(stations, start.name, end.name, route)
        except (StationNotFoundError, RouteNotFoundForStationError) as e:
            logger.debug(f"Skipping {route} for {start.name}-{end.name}: {e}")
            continue
        yield route, distance, minutes


def _through_service_candidates(
    systems: OperatingSystems, start: UnifiedStation, end: UnifiedStation
) -> Iterable[tuple[str, float, float]]:
    for system in iter_systems(systems):
        for connection in through_service_routes([system], start.name, end.name):
            yield system.id, connection.total_km, connection.total_minutes


def generate_unified_rankings(
    stations: Sequence[UnifiedStation],
    fare_table: FareTable,
    method: str = "suica",
    route_filter: Collection[str] | None = None,
    operating_systems: OperatingSystems | None = None,
) -> list[RankingItem]:
    """Rank every station pair of the network by yen per km, highest first.

    Each pair ``(i, j)`` with ``i`` before ``j`` in ``stations`` is priced on
    the shortest of its shared routes; ties keep the first route. With
    ``route_filter`` only the listed routes are considered. Through-service
    connections of ``operating_systems`` are extra candidates when no route
    filter is given.

    Raises:
        DataIntegrityError: If the fare table cannot price a distance
    """
    best: dict[tuple[str, str], RankingItem] = {}

    for i, start in enumerate(stations):
        for end in stations[i + 1 :]:
            candidates = list(_route_candidates(stations, start, end, route_filter))
            if operating_systems is not None and route_filter is None:
                candidates.extend(
                    _through_service_candidates(operating_systems, start, end)
                )

            key = (start.name, end.name)
            for route, distance, minutes in candidates:
                if distance == 0 or minutes == 0:
                    continue
                current = best.get(key)
                if current is not None and current.distance <= distance:
                    continue
                best[key] = _make_item(
                    start.name, end.name, distance, minutes, fare_table, method, route
                )

    logger.debug(f"Ranked {len(best)} station pairs from {len(stations)} stations")
    return _sort_by(best.values(), "unit_price")


def generate_unified_minute_rankings(
    stations: Sequence[UnifiedStation],
    fare_table: FareTable,
    method: str = "suica",
    route_filter: Collection[str] | None = None,
    operating_systems: OperatingSystems | None = None,
) -> list[RankingItem]:
    """Network rankings ordered by yen per minute, highest first."""
    rankings = generate_unified_rankings(
        stations, fare_table, method, route_filter, operating_systems
    )
    return sort_rankings(rankings, "minute_price")


def sort_rankings(
    items: Iterable[RankingItem], key: RankingKey = "unit_price", descending: bool = True
) -> list[RankingItem]:
    """Re-sort ranking items without recomputing them."""
    return _sort_by(items, key, descending)


def filter_rankings_by_station(
    items: Iterable[RankingItem], station_name: str
) -> list[RankingItem]:
    """Items touching a station, with that station moved to the ``from`` side."""
    filtered = []
    for item in items:
        if item.from_station == station_name:
            filtered.append(item)
        elif item.to_station == station_name:
            filtered.append(item.swapped())
    return filtered


def top_rankings(
    items: Iterable[RankingItem],
    n: int = 30,
    key: RankingKey = "unit_price",
    descending: bool = True,
) -> list[RankingItem]:
    """The first ``n`` items after sorting by ``key``."""
    return _sort_by(items, key, descending)[:n]
