"""Unit tests for data models."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from green_per_km.core.exceptions import ValidationError
from green_per_km.core.models import (
    FareBand,
    FareQuote,
    FareTable,
    OperatingConnection,
    OperatingSystemData,
    RouteMembership,
    RouteSegment,
    Station,
    UnifiedStation,
    UnifiedStationData,
)


class TestStation:
    """Test Station model."""

    def test_station_creation(self):
        """Test station creation."""
        station = Station(name="東京", km=0)
        assert station.name == "東京"
        assert station.minutes is None
        assert station.hiragana is None
        assert str(station) == "東京"

    def test_negative_km_rejected(self):
        """Test negative km rejected."""
        with pytest.raises(PydanticValidationError):
            Station(name="東京", km=-1)

    def test_station_is_immutable(self):
        """Test station is immutable."""
        station = Station(name="東京", km=0)
        with pytest.raises(PydanticValidationError):
            station.km = 5


class TestUnifiedStation:
    """Test UnifiedStation model."""

    def test_routes_and_membership(self):
        """Test routes and membership."""
        station = UnifiedStation(
            name="横浜",
            lines=[
                RouteMembership(route="tokaido-line", km=28.8, minutes=26),
                RouteMembership(route="yokosuka-line", km=28.8, minutes=29),
            ],
        )
        assert station.routes == ["tokaido-line", "yokosuka-line"]
        assert station.membership("yokosuka-line").minutes == 29
        assert station.membership("chuo-rapid") is None

    def test_document_aliases(self, stations_data):
        """Test document aliases."""
        data = UnifiedStationData.model_validate(stations_data)
        assert data.last_updated == "2025-08-20T00:00:00+09:00"
        assert len(data.stations) == 7
        assert data.stations[0].romaji == "tokyo"


class TestFareTable:
    """Test fare table models."""

    def test_aliases(self, fare_table_data):
        """Test parsing the document field names."""
        table = FareTable.model_validate(fare_table_data)
        assert table.updated_at == "2025-08-20T00:00:00+09:00"
        assert [band.max_km for band in table.fare_bands] == [50, 100, None]

    def test_band_price(self):
        """Test band price."""
        band = FareBand(max_km=50, suica=780, ticket=1040)
        assert band.price("suica") == 780
        assert band.price("ticket") == 1040
        with pytest.raises(ValidationError):
            band.price("cash")

    def test_dump_by_alias(self, fare_table):
        """Test dump by alias."""
        dumped = fare_table.model_dump(by_alias=True)
        assert dumped["fareBands"][2]["maxKm"] is None
        assert "updatedAt" in dumped


class TestOperatingConnection:
    """Test operating connection models."""

    def test_segment_aliases(self, operating_systems_data):
        """Test segment aliases."""
        data = OperatingSystemData.model_validate(operating_systems_data)
        system = data.operating_systems["ueno-tokyo-line"]
        assert system.title_ja == "上野東京ライン"
        assert system.physical_routes == ["utsunomiya-line", "tokaido-line"]
        segment = system.operating_connections[0].route_segments[0]
        assert segment.from_station == "大宮"
        assert segment.to_station == "東京"

    def test_reversed(self, operating_systems):
        """Test reversing a connection."""
        connection = operating_systems.operating_systems[
            "ueno-tokyo-line"
        ].operating_connections[0]
        reversed_connection = connection.reversed()

        assert reversed_connection.from_station == "横浜"
        assert reversed_connection.to_station == "大宮"
        assert [str(s) for s in reversed_connection.route_segments] == [
            "横浜 → 東京 (tokaido-line)",
            "東京 → 大宮 (utsunomiya-line)",
        ]
        assert reversed_connection.total_km == connection.total_km
        assert reversed_connection.total_minutes == connection.total_minutes
        assert reversed_connection.reversed() == connection

    def test_segment_reversed(self):
        """Test segment reversed."""
        segment = RouteSegment(
            route="r1", from_station="X", to_station="M", km=10, minutes=15
        )
        back = segment.reversed()
        assert (back.from_station, back.to_station) == ("M", "X")
        assert (back.km, back.minutes) == (10, 15)

    def test_dump_uses_document_names(self):
        """Test dump uses document names."""
        connection = OperatingConnection(
            from_station="X", to_station="Y", total_km=1, total_minutes=2
        )
        dumped = connection.model_dump(by_alias=True)
        assert dumped["fromStation"] == "X"
        assert dumped["totalKm"] == 1


class TestFareQuote:
    """Test FareQuote model."""

    def test_summary(self):
        """Test quote summary text."""
        quote = FareQuote(
            from_station="東京",
            to_station="横浜",
            route="tokaido-line",
            distance=28.8,
            minutes=26,
            fare=780,
            unit_price=780 / 28.8,
            minute_price=30.0,
        )
        summary = quote.summary()
        assert "東京 → 横浜 (tokaido-line)" in summary
        assert "¥780" in summary
        assert "27.1円/km" in summary
        assert not quote.is_through_service
