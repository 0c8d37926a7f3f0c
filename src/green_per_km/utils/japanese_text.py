"""Station reading generation (hiragana / romaji)."""

import threading
from typing import Any

import jaconv
import pykakasi

from ..core.models import UnifiedStation, UnifiedStationData

STATION_SUFFIX = "駅"


class StationReadingConverter:
    """Converts station names into hiragana and romaji readings."""

    def __init__(self) -> None:
        """Initialize the converter with lazy pykakasi initialization."""
        self._kks: Any = None
        self._lock = threading.Lock()

    def _get_kakasi(self) -> Any:
        """Get pykakasi converter with thread-safe lazy initialization."""
        if self._kks is None:
            with self._lock:
                if self._kks is None:
                    self._kks = pykakasi.kakasi()
        return self._kks

    @staticmethod
    def _strip_suffix(name: str) -> str:
        name = name.strip()
        if len(name) > 1 and name.endswith(STATION_SUFFIX):
            return name[: -len(STATION_SUFFIX)]
        return name

    def to_hiragana(self, name: str) -> str:
        """Reading of a station name in hiragana."""
        text = jaconv.kata2hira(self._strip_suffix(name))
        result = self._get_kakasi().convert(text)
        return "".join(item["hira"] for item in result)

    def to_romaji(self, name: str) -> str:
        """Reading of a station name in Hepburn romaji, lower case."""
        result = self._get_kakasi().convert(self._strip_suffix(name))
        return "".join(item["hepburn"] for item in result).lower()

    def fill_station(self, station: UnifiedStation) -> UnifiedStation:
        """Station with missing readings generated; existing ones are kept."""
        updates = {}
        if not station.hiragana:
            updates["hiragana"] = self.to_hiragana(station.name)
        if not station.romaji:
            updates["romaji"] = self.to_romaji(station.name)
        if not updates:
            return station
        return station.model_copy(update=updates)


_converter: StationReadingConverter | None = None
_converter_lock = threading.Lock()


def get_converter() -> StationReadingConverter:
    """Get a thread-safe singleton instance of the reading converter."""
    global _converter
    if _converter is None:
        with _converter_lock:
            if _converter is None:
                _converter = StationReadingConverter()
    return _converter


def fill_missing_readings(data: UnifiedStationData) -> UnifiedStationData:
    """Copy of the station database with every missing reading generated."""
    converter = get_converter()
    stations = [converter.fill_station(station) for station in data.stations]
    return data.model_copy(update={"stations": stations})
