"""Green Car fare calculator over a loaded station network."""

import logging
from collections.abc import Collection

from .compatibility import (
    compatible_stations_with_through_service,
    system_for_connection,
    through_service_routes,
)
from .distance import (
    convert_to_route_stations,
    find_common_routes,
    find_station,
    list_routes,
    segment_km_for_route,
    segment_minutes_for_route,
)
from .exceptions import RouteNotFoundError, ValidationError
from .fare import resolve_fare, unit_price_per_km, unit_price_per_minute
from .models import (
    PAYMENT_METHODS,
    FareQuote,
    FareTable,
    OperatingConnection,
    OperatingSystem,
    OperatingSystemData,
    RankingItem,
    Station,
    UnifiedStation,
    UnifiedStationData,
)
from .ranking import RankingKey, generate_unified_rankings, sort_rankings

logger = logging.getLogger(__name__)


class GreenFareCalculator:
    """Calculate Green Car fares and rankings for a station network."""

    def __init__(
        self,
        stations: UnifiedStationData,
        fare_table: FareTable,
        operating_systems: OperatingSystemData | None = None,
    ):
        """Initialize the calculator.

        Args:
            stations: Unified station database
            fare_table: Green Car fare table
            operating_systems: Optional through-service database
        """
        self.stations_data = stations
        self.fare_table = fare_table
        self.operating_systems = operating_systems or OperatingSystemData()
        self._rankings_cache: dict[
            tuple[str, tuple[str, ...] | None, str], list[RankingItem]
        ] = {}

    @property
    def stations(self) -> list[UnifiedStation]:
        return self.stations_data.stations

    def station(self, name: str) -> UnifiedStation:
        """Get a station by exact name.

        Raises:
            StationNotFoundError: If the station is unknown
        """
        return find_station(self.stations, name)

    def routes(self) -> list[str]:
        """All route identifiers of the network."""
        return list_routes(self.stations)

    def route_stations(self, route: str) -> list[Station]:
        """Stations of one route, ordered by distance."""
        return convert_to_route_stations(self.stations, route)

    def common_routes(self, from_station: str, to_station: str) -> list[str]:
        return find_common_routes(self.stations, from_station, to_station)

    def through_service_routes(
        self, from_station: str, to_station: str
    ) -> list[OperatingConnection]:
        return through_service_routes(self.operating_systems, from_station, to_station)

    def operating_system_for(
        self, connection: OperatingConnection
    ) -> OperatingSystem | None:
        return system_for_connection(self.operating_systems, connection)

    def compatible_stations(self, station_name: str) -> list[UnifiedStation]:
        """Stations reachable from a station without changing trains."""
        return compatible_stations_with_through_service(
            self.stations, self.operating_systems, station_name
        )

    def quote(
        self, from_station: str, to_station: str, method: str = "suica"
    ) -> FareQuote:
        """Calculate the Green Car fare between two stations.

        A shared physical route is preferred; a through-service connection is
        used only when the stations share no route.

        Args:
            from_station: Departure station name
            to_station: Destination station name
            method: Payment method, "suica" or "ticket"

        Returns:
            FareQuote with distance, time, fare and unit prices

        Raises:
            ValidationError: If a name is empty, both names are equal or the
                payment method is unknown
            StationNotFoundError: If a station is unknown
            RouteNotFoundError: If the stations share no route or connection
        """
        if not from_station or not from_station.strip():
            raise ValidationError("Departure station name cannot be empty")
        if not to_station or not to_station.strip():
            raise ValidationError("Destination station name cannot be empty")
        if from_station == to_station:
            raise ValidationError("Departure and destination must differ")
        if method not in PAYMENT_METHODS:
            raise ValidationError(f"Unknown payment method: {method}")

        self.station(from_station)
        self.station(to_station)

        routes = self.common_routes(from_station, to_station)
        connections = self.through_service_routes(from_station, to_station)

        route: str | None = None
        connection: OperatingConnection | None = None
        if routes:
            route = routes[0]
            distance = segment_km_for_route(
                self.stations, from_station, to_station, route
            )
            minutes = segment_minutes_for_route(
                self.stations, from_station, to_station, route
            )
            alternatives = len(routes) - 1
        elif connections:
            connection = connections[0]
            distance = connection.total_km
            minutes = connection.total_minutes
            alternatives = len(connections) - 1
        else:
            raise RouteNotFoundError(
                f"No Green Car route from {from_station} to {to_station}"
            )

        fare = resolve_fare(distance, self.fare_table, method)
        logger.info(
            f"Quoted {from_station} → {to_station} via "
            f"{route or 'through service'}: {distance:g}km ¥{fare}"
        )

        return FareQuote(
            from_station=from_station,
            to_station=to_station,
            method=method,
            route=route,
            connection=connection,
            alternatives=alternatives,
            distance=distance,
            minutes=minutes,
            fare=fare,
            unit_price=unit_price_per_km(distance, fare),
            minute_price=unit_price_per_minute(minutes, fare),
        )

    def rankings(
        self,
        method: str = "suica",
        route_filter: Collection[str] | None = None,
        by: RankingKey = "unit_price",
    ) -> list[RankingItem]:
        """Rankings of every station pair, highest unit price first.

        Results are cached per method, route filter and sort key. Without a
        route filter, through-service connections are also considered.
        """
        if method not in PAYMENT_METHODS:
            raise ValidationError(f"Unknown payment method: {method}")

        routes_key = tuple(sorted(route_filter)) if route_filter is not None else None
        cache_key = (method, routes_key, by)
        if cache_key in self._rankings_cache:
            return list(self._rankings_cache[cache_key])

        base_key = (method, routes_key, "unit_price")
        if base_key not in self._rankings_cache:
            logger.info(
                f"Generating {method} rankings for {len(self.stations)} stations"
            )
            self._rankings_cache[base_key] = generate_unified_rankings(
                self.stations,
                self.fare_table,
                method,
                route_filter=routes_key,
                operating_systems=self.operating_systems,
            )
        if by != "unit_price":
            self._rankings_cache[cache_key] = sort_rankings(
                self._rankings_cache[base_key], by
            )
        return list(self._rankings_cache[cache_key])
