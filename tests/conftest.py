"""Test configuration and fixtures."""

import json

import pytest

from green_per_km.config import Settings
from green_per_km.core.calculator import GreenFareCalculator
from green_per_km.core.models import FareTable, OperatingSystemData, UnifiedStationData


def _line(route, km, minutes):
    return {"route": route, "km": km, "minutes": minutes}


@pytest.fixture
def fare_table_data():
    """Green Car fare table document."""
    return {
        "source": "https://www.jreast.co.jp/railway/train/green/charge/",
        "updatedAt": "2025-08-20T00:00:00+09:00",
        "fareBands": [
            {"maxKm": 50, "suica": 780, "ticket": 1040},
            {"maxKm": 100, "suica": 1000, "ticket": 1260},
            {"maxKm": None, "suica": 1550, "ticket": 1810},
        ],
    }


@pytest.fixture
def stations_data():
    """Unified station document: Tokaido, Yokosuka and Utsunomiya lines."""
    return {
        "lastUpdated": "2025-08-20T00:00:00+09:00",
        "stations": [
            {
                "name": "東京",
                "hiragana": "とうきょう",
                "romaji": "tokyo",
                "lines": [
                    _line("tokaido-line", 0, 0),
                    _line("yokosuka-line", 0, 0),
                    _line("utsunomiya-line", 0, 0),
                ],
            },
            {
                "name": "品川",
                "hiragana": "しながわ",
                "romaji": "shinagawa",
                "lines": [
                    _line("tokaido-line", 6.8, 8),
                    _line("yokosuka-line", 6.8, 9),
                ],
            },
            {
                "name": "横浜",
                "hiragana": "よこはま",
                "romaji": "yokohama",
                "lines": [
                    _line("tokaido-line", 28.8, 26),
                    _line("yokosuka-line", 28.8, 29),
                ],
            },
            {
                "name": "大船",
                "lines": [
                    _line("tokaido-line", 46.5, 42),
                    _line("yokosuka-line", 46.5, 45),
                ],
            },
            {"name": "鎌倉", "lines": [_line("yokosuka-line", 51.0, 51)]},
            {"name": "熱海", "lines": [_line("tokaido-line", 104.6, 97)]},
            {"name": "大宮", "lines": [_line("utsunomiya-line", 30.3, 33)]},
        ],
    }


@pytest.fixture
def operating_systems_data():
    """Operating system document with one Ueno-Tokyo Line connection."""
    return {
        "lastUpdated": "2025-08-20T00:00:00+09:00",
        "operatingSystems": {
            "ueno-tokyo-line": {
                "id": "ueno-tokyo-line",
                "titleJa": "上野東京ライン",
                "description": "宇都宮線と東海道線の直通運転",
                "physicalRoutes": ["utsunomiya-line", "tokaido-line"],
                "operatingConnections": [
                    {
                        "fromStation": "大宮",
                        "toStation": "横浜",
                        "routeSegments": [
                            {
                                "route": "utsunomiya-line",
                                "from": "大宮",
                                "to": "東京",
                                "km": 30.3,
                                "minutes": 33,
                            },
                            {
                                "route": "tokaido-line",
                                "from": "東京",
                                "to": "横浜",
                                "km": 28.8,
                                "minutes": 26,
                            },
                        ],
                        "totalKm": 59.1,
                        "totalMinutes": 59,
                    }
                ],
            }
        },
    }


@pytest.fixture
def fare_table(fare_table_data):
    """Parsed sample fare table."""
    return FareTable.model_validate(fare_table_data)


@pytest.fixture
def stations(stations_data):
    """Parsed sample station network."""
    return UnifiedStationData.model_validate(stations_data)


@pytest.fixture
def operating_systems(operating_systems_data):
    """Parsed sample operating systems."""
    return OperatingSystemData.model_validate(operating_systems_data)


@pytest.fixture
def calculator(stations, fare_table, operating_systems):
    """Calculator over the sample network."""
    return GreenFareCalculator(stations, fare_table, operating_systems)


@pytest.fixture
def data_dir(tmp_path, stations_data, fare_table_data, operating_systems_data):
    """Temporary data directory holding the three JSON documents."""
    directory = tmp_path / "data"
    directory.mkdir()
    settings = Settings(data_dir=directory)
    for path, document in (
        (settings.stations_path, stations_data),
        (settings.fare_table_path, fare_table_data),
        (settings.operating_systems_path, operating_systems_data),
    ):
        path.write_text(json.dumps(document, ensure_ascii=False), encoding="utf-8")
    return directory
