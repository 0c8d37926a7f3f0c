"""Data models for Green Car fare calculation."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ValidationError

PaymentMethod = Literal["suica", "ticket"]
PAYMENT_METHODS: tuple[str, ...] = ("suica", "ticket")


class FrozenModel(BaseModel):
    """Immutable model accepting both field names and JSON aliases."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Station(FrozenModel):
    """A station as seen from a single route."""

    name: str = Field(..., description="Station name in Japanese")
    hiragana: str | None = Field(None, description="Reading in hiragana")
    romaji: str | None = Field(None, description="Reading in romaji")
    km: float = Field(..., ge=0, description="Cumulative distance from route origin")
    minutes: float | None = Field(
        None, description="Cumulative travel time from route origin"
    )

    def __str__(self) -> str:
        return self.name


class RouteMembership(FrozenModel):
    """Position of a station on one physical route."""

    route: str = Field(..., description="Route identifier (e.g. 'tokaido-line')")
    km: float = Field(..., ge=0, description="Cumulative distance on this route")
    minutes: float | None = Field(None, description="Cumulative time on this route")


class UnifiedStation(FrozenModel):
    """A station across the whole network, with one membership per route."""

    name: str = Field(..., description="Station name, unique across the network")
    hiragana: str | None = Field(None, description="Reading in hiragana")
    romaji: str | None = Field(None, description="Reading in romaji")
    lines: list[RouteMembership] = Field(
        default_factory=list, description="Route memberships"
    )

    @property
    def routes(self) -> list[str]:
        """Route identifiers in membership order."""
        return [line.route for line in self.lines]

    def membership(self, route: str) -> RouteMembership | None:
        """Get the first membership for a route, if any."""
        for line in self.lines:
            if line.route == route:
                return line
        return None

    def __str__(self) -> str:
        return self.name


class UnifiedStationData(FrozenModel):
    """Unified station database document."""

    last_updated: str | None = Field(None, alias="lastUpdated")
    stations: list[UnifiedStation] = Field(default_factory=list)


class FareBand(FrozenModel):
    """A distance bracket with a fixed price per payment method."""

    max_km: float | None = Field(
        ..., alias="maxKm", description="Upper bound in km, None for open-ended"
    )
    suica: int = Field(..., description="Price when paid with Suica (yen)")
    ticket: int = Field(..., description="Price for a paper ticket (yen)")

    def price(self, method: str) -> int:
        """Get the price for a payment method."""
        if method not in PAYMENT_METHODS:
            raise ValidationError(
                f"Unknown payment method: {method}. "
                f"Expected one of: {', '.join(PAYMENT_METHODS)}"
            )
        return getattr(self, method)

    def __str__(self) -> str:
        bound = f"≤{self.max_km:g}km" if self.max_km is not None else "open"
        return f"{bound}: Suica ¥{self.suica} / ticket ¥{self.ticket}"


class FareTable(FrozenModel):
    """Green Car fare table document."""

    source: str = Field("", description="Where the fare table came from")
    updated_at: str | None = Field(None, alias="updatedAt")
    fare_bands: list[FareBand] = Field(default_factory=list, alias="fareBands")


class RouteSegment(FrozenModel):
    """One same-route leg of a through-service connection."""

    route: str
    from_station: str = Field(..., alias="from")
    to_station: str = Field(..., alias="to")
    km: float
    minutes: float

    def reversed(self) -> "RouteSegment":
        """Get the same segment travelled in the other direction."""
        return RouteSegment(
            route=self.route,
            from_station=self.to_station,
            to_station=self.from_station,
            km=self.km,
            minutes=self.minutes,
        )

    def __str__(self) -> str:
        return f"{self.from_station} → {self.to_station} ({self.route})"


class OperatingConnection(FrozenModel):
    """A through-service path crossing route boundaries without a transfer."""

    from_station: str = Field(..., alias="fromStation")
    to_station: str = Field(..., alias="toStation")
    route_segments: list[RouteSegment] = Field(
        default_factory=list, alias="routeSegments"
    )
    total_km: float = Field(..., alias="totalKm")
    total_minutes: float = Field(..., alias="totalMinutes")

    def reversed(self) -> "OperatingConnection":
        """Get the connection queried from its canonical destination."""
        return OperatingConnection(
            from_station=self.to_station,
            to_station=self.from_station,
            route_segments=[seg.reversed() for seg in reversed(self.route_segments)],
            total_km=self.total_km,
            total_minutes=self.total_minutes,
        )

    def __str__(self) -> str:
        return f"{self.from_station} ⇒ {self.to_station} ({self.total_km:g}km)"


class OperatingSystem(FrozenModel):
    """A named bundle of routes offering through-service connections."""

    id: str
    title_ja: str = Field("", alias="titleJa")
    description: str = ""
    physical_routes: list[str] = Field(default_factory=list, alias="physicalRoutes")
    operating_connections: list[OperatingConnection] = Field(
        default_factory=list, alias="operatingConnections"
    )


class OperatingSystemData(FrozenModel):
    """Operating system database document."""

    last_updated: str | None = Field(None, alias="lastUpdated")
    operating_systems: dict[str, OperatingSystem] = Field(
        default_factory=dict, alias="operatingSystems"
    )


class RankingItem(FrozenModel):
    """Fare efficiency figures for one station pair."""

    from_station: str = Field(..., alias="from")
    to_station: str = Field(..., alias="to")
    distance: float = Field(..., description="Distance in km")
    minutes: float = Field(..., description="Travel time in minutes")
    fare: int = Field(..., description="Green Car fare in yen")
    unit_price: float = Field(..., alias="unitPrice", description="Yen per km")
    minute_price: float = Field(..., alias="minutePrice", description="Yen per minute")
    route: str | None = Field(
        None, description="Route or through-service system used for the figures"
    )

    def swapped(self) -> "RankingItem":
        """Get the same item with its endpoints exchanged."""
        return self.model_copy(
            update={"from_station": self.to_station, "to_station": self.from_station}
        )

    def __str__(self) -> str:
        return (
            f"{self.from_station} → {self.to_station} "
            f"({self.distance:.1f}km, ¥{self.fare}, {self.unit_price:.1f}円/km)"
        )


class FareQuote(FrozenModel):
    """Green Car fare and efficiency for a requested trip."""

    from_station: str = Field(..., alias="from")
    to_station: str = Field(..., alias="to")
    method: PaymentMethod = "suica"
    route: str | None = Field(None, description="Physical route used, if any")
    connection: OperatingConnection | None = Field(
        None, description="Through-service connection used, if any"
    )
    alternatives: int = Field(
        0, description="Number of other routes or connections serving the pair"
    )
    distance: float
    minutes: float
    fare: int
    unit_price: float = Field(..., alias="unitPrice")
    minute_price: float = Field(..., alias="minutePrice")

    @property
    def is_through_service(self) -> bool:
        return self.route is None and self.connection is not None

    def summary(self) -> str:
        """Get quote summary."""
        via = self.route or "直通運転"
        return (
            f"{self.from_station} → {self.to_station} ({via})\n"
            f"距離: {self.distance:.1f}km\n"
            f"乗車時間: {self.minutes:g}分\n"
            f"グリーン料金: ¥{self.fare:,}\n"
            f"km単価: {self.unit_price:.1f}円/km\n"
            f"分単価: {self.minute_price:.1f}円/分"
        )
