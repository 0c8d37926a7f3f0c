"""Unit tests for pairwise rankings."""

import pytest

from green_per_km.core import ranking
from green_per_km.core.exceptions import (
    DataIntegrityError,
    RouteNotFoundForStationError,
    StationNotFoundError,
)
from green_per_km.core.models import (
    FareBand,
    FareTable,
    RankingItem,
    RouteMembership,
    Station,
    UnifiedStation,
)
from green_per_km.core.ranking import (
    filter_rankings_by_station,
    generate_minute_rankings,
    generate_rankings,
    generate_unified_minute_rankings,
    generate_unified_rankings,
    sort_rankings,
    top_rankings,
)


def _pairs(items):
    return [(item.from_station, item.to_station) for item in items]


def _by_pair(items):
    return {(item.from_station, item.to_station): item for item in items}


class TestSingleRouteRankings:
    """Test single-route rankings."""

    @pytest.fixture
    def route(self):
        """Chuo Rapid style route with a duplicate-km stop at the end."""
        return [
            Station(name="東京", km=0, minutes=0),
            Station(name="新宿", km=10.3, minutes=14),
            Station(name="三鷹", km=24.1, minutes=29),
            Station(name="高尾", km=53.1, minutes=58),
            Station(name="臨時", km=53.1, minutes=60),
        ]

    def test_all_pairs_except_zero_distance(self, route, fare_table):
        """Test all pairs except zero distance."""
        items = generate_rankings(route, fare_table)
        # 5 stations -> 10 pairs, minus 高尾-臨時 at the same km
        assert len(items) == 9
        assert ("高尾", "臨時") not in _pairs(items)

    def test_sorted_by_unit_price(self, route, fare_table):
        """Test sorted by unit price."""
        items = generate_rankings(route, fare_table)
        prices = [item.unit_price for item in items]
        assert prices == sorted(prices, reverse=True)
        assert _pairs(items)[0] == ("東京", "新宿")
        assert items[0].fare == 780
        assert items[0].unit_price == pytest.approx(780 / 10.3)

    def test_minute_rankings_same_items(self, route, fare_table):
        """Test minute rankings same items."""
        by_km = generate_rankings(route, fare_table)
        by_minute = generate_minute_rankings(route, fare_table)
        assert sorted(_pairs(by_km)) == sorted(_pairs(by_minute))
        prices = [item.minute_price for item in by_minute]
        assert prices == sorted(prices, reverse=True)

    def test_missing_minutes_pair_skipped(self, fare_table):
        """Test missing minutes pair skipped."""
        route = [Station(name="A", km=0), Station(name="B", km=10)]
        assert generate_rankings(route, fare_table) == []


class TestUnifiedRankings:
    """Test network rankings over the sample network."""

    def test_pair_count(self, stations, fare_table):
        """Test number of ranked pairs."""
        items = generate_unified_rankings(stations.stations, fare_table)
        assert len(items) == 15

    def test_no_duplicate_pairs(self, stations, fare_table, operating_systems):
        """Test no duplicate pairs."""
        items = generate_unified_rankings(
            stations.stations, fare_table, operating_systems=operating_systems
        )
        pairs = _pairs(items)
        assert len(pairs) == len(set(pairs))

    def test_pair_direction_follows_station_order(self, stations, fare_table):
        """Test pair direction follows station order."""
        items = generate_unified_rankings(stations.stations, fare_table)
        pairs = _by_pair(items)
        assert ("東京", "横浜") in pairs
        assert ("横浜", "東京") not in pairs

    def test_tie_keeps_first_route(self, stations, fare_table):
        """Test that equal distances keep the first common route."""
        items = _by_pair(generate_unified_rankings(stations.stations, fare_table))
        item = items[("東京", "品川")]
        assert item.route == "tokaido-line"
        assert item.minutes == 8

    def test_top_entry(self, stations, fare_table):
        """Test the most expensive pair per km."""
        items = generate_unified_rankings(stations.stations, fare_table)
        top = items[0]
        assert (top.from_station, top.to_station) == ("大船", "鎌倉")
        assert top.distance == pytest.approx(4.5)
        assert top.minutes == 6
        assert top.fare == 780
        assert top.unit_price == pytest.approx(780 / 4.5)
        assert top.minute_price == pytest.approx(130.0)

    def test_route_filter(self, stations, fare_table):
        """Test route filter."""
        items = generate_unified_rankings(
            stations.stations, fare_table, route_filter=["yokosuka-line"]
        )
        assert len(items) == 10
        assert {item.route for item in items} == {"yokosuka-line"}
        assert _by_pair(items)[("東京", "品川")].minutes == 9

    def test_unknown_route_filter(self, stations, fare_table):
        """Test unknown route filter."""
        assert generate_unified_rankings(
            stations.stations, fare_table, route_filter=["joban-line"]
        ) == []

    def test_through_service_candidates(self, stations, fare_table, operating_systems):
        """Test through service candidates."""
        items = _by_pair(
            generate_unified_rankings(
                stations.stations, fare_table, operating_systems=operating_systems
            )
        )
        assert len(items) == 16
        item = items[("横浜", "大宮")]
        assert item.route == "ueno-tokyo-line"
        assert item.distance == pytest.approx(59.1)
        assert item.minutes == 59
        assert item.fare == 1000

    def test_route_filter_disables_through_service(
        self, stations, fare_table, operating_systems
    ):
        """Test route filter disables through service."""
        items = generate_unified_rankings(
            stations.stations,
            fare_table,
            route_filter=["tokaido-line", "utsunomiya-line"],
            operating_systems=operating_systems,
        )
        assert ("横浜", "大宮") not in _by_pair(items)

    def test_ticket_method(self, stations, fare_table):
        """Test ticket method."""
        items = _by_pair(generate_unified_rankings(stations.stations, fare_table, "ticket"))
        assert items[("東京", "熱海")].fare == 1810

    def test_idempotent(self, stations, fare_table, operating_systems):
        """Test that repeated calls give identical output."""
        first = generate_unified_rankings(
            stations.stations, fare_table, operating_systems=operating_systems
        )
        second = generate_unified_rankings(
            stations.stations, fare_table, operating_systems=operating_systems
        )
        assert first == second

    def test_minute_rankings_are_a_resort(self, stations, fare_table):
        """Test that minute rankings re-sort the same items."""
        by_km = generate_unified_rankings(stations.stations, fare_table)
        by_minute = generate_unified_minute_rankings(stations.stations, fare_table)
        assert sorted(by_km, key=lambda i: (i.from_station, i.to_station)) == sorted(
            by_minute, key=lambda i: (i.from_station, i.to_station)
        )
        prices = [item.minute_price for item in by_minute]
        assert prices == sorted(prices, reverse=True)

    @pytest.mark.parametrize(
        "error",
        [
            RouteNotFoundForStationError("横浜", "tokaido-line"),
            StationNotFoundError("横浜"),
        ],
    )
    def test_failing_route_is_skipped(self, monkeypatch, stations, fare_table, error):
        """Test that a route failing for one pair does not stop the enumeration."""
        real_segment_km = ranking.segment_km_for_route

        def segment_km(station_list, from_station, to_station, route):
            if route == "tokaido-line":
                raise error
            return real_segment_km(station_list, from_station, to_station, route)

        monkeypatch.setattr(ranking, "segment_km_for_route", segment_km)
        items = _by_pair(generate_unified_rankings(stations.stations, fare_table))

        # pairs served by both lines fall back to the Yokosuka line
        assert items[("東京", "横浜")].route == "yokosuka-line"
        assert items[("東京", "横浜")].minutes == 29
        # pairs only on the Tokaido line drop out
        assert ("東京", "熱海") not in items
        assert ("大船", "熱海") not in items
        # other routes are unaffected
        assert items[("東京", "大宮")].route == "utsunomiya-line"
        assert len(items) == 11

    def test_broken_fare_table_propagates(self, stations):
        """Test broken fare table propagates."""
        table = FareTable(fare_bands=[FareBand(max_km=50, suica=780, ticket=1040)])
        with pytest.raises(DataIntegrityError):
            generate_unified_rankings(stations.stations, table)


class TestShortestRouteSelection:
    """Test keep-shortest reduction across routes of different lengths."""

    @pytest.fixture
    def network(self):
        """Two overlapping routes of different lengths."""
        return [
            UnifiedStation(
                name="A",
                lines=[
                    RouteMembership(route="long", km=0, minutes=0),
                    RouteMembership(route="short", km=0, minutes=0),
                ],
            ),
            UnifiedStation(
                name="B",
                lines=[
                    RouteMembership(route="long", km=30, minutes=30),
                    RouteMembership(route="short", km=20, minutes=25),
                ],
            ),
            UnifiedStation(
                name="C",
                lines=[
                    RouteMembership(route="long", km=30, minutes=40),
                    RouteMembership(route="short", km=20),
                ],
            ),
        ]

    def test_shorter_later_route_wins(self, network, fare_table):
        """Test shorter later route wins."""
        items = _by_pair(generate_unified_rankings(network, fare_table))
        assert items[("A", "B")].route == "short"
        assert items[("A", "B")].distance == 20

    def test_zero_segments_skipped(self, network, fare_table):
        """Test that zero-distance and zero-minute routes are not viable."""
        items = _by_pair(generate_unified_rankings(network, fare_table))
        # B-C: both routes place B and C at the same km
        assert ("B", "C") not in items
        # A-C: short has 0 minutes, so long is used
        assert items[("A", "C")].route == "long"

    def test_filter_keeps_listed_routes(self, network, fare_table):
        """Test filter keeps listed routes."""
        items = _by_pair(
            generate_unified_rankings(network, fare_table, route_filter={"long"})
        )
        assert items[("A", "B")].route == "long"


class TestRankingViews:
    """Test filtering and top-N views."""

    @pytest.fixture
    def items(self, stations, fare_table):
        """Rankings over the sample network."""
        return generate_unified_rankings(stations.stations, fare_table)

    def test_filter_normalises_station_to_from(self, items):
        """Test filter normalises station to from."""
        filtered = filter_rankings_by_station(items, "横浜")
        assert len(filtered) == 5
        assert all(item.from_station == "横浜" for item in filtered)
        partners = {item.to_station for item in filtered}
        assert partners == {"東京", "品川", "大船", "鎌倉", "熱海"}

    def test_filter_keeps_figures(self, items):
        """Test filter keeps figures."""
        original = _by_pair(items)[("東京", "横浜")]
        swapped = _by_pair(filter_rankings_by_station(items, "横浜"))[("横浜", "東京")]
        assert swapped.distance == original.distance
        assert swapped.fare == original.fare
        assert swapped.unit_price == original.unit_price

    def test_filter_unknown_station(self, items):
        """Test filter unknown station."""
        assert filter_rankings_by_station(items, "大阪") == []

    def test_top_expensive_and_cheap(self, items):
        """Test top expensive and cheap."""
        expensive = top_rankings(items, 3)
        cheap = top_rankings(items, 3, descending=False)
        assert len(expensive) == 3
        assert expensive[0].unit_price >= expensive[-1].unit_price
        assert cheap[0].unit_price <= cheap[-1].unit_price
        assert cheap[0].unit_price == min(item.unit_price for item in items)

    def test_top_by_minute_price(self, items):
        """Test top by minute price."""
        top = top_rankings(items, 1, key="minute_price")
        assert top[0].minute_price == max(item.minute_price for item in items)

    def test_sort_rankings_does_not_mutate(self, items):
        """Test sort rankings does not mutate."""
        snapshot = list(items)
        sort_rankings(items, "minute_price", descending=False)
        assert items == snapshot

    def test_ranking_item_swapped(self):
        """Test ranking item swapped."""
        item = RankingItem(
            from_station="A",
            to_station="B",
            distance=10,
            minutes=12,
            fare=780,
            unit_price=78.0,
            minute_price=65.0,
            route="r",
        )
        swapped = item.swapped()
        assert (swapped.from_station, swapped.to_station) == ("B", "A")
        assert swapped.route == "r"
        assert item.from_station == "A"
