"""Core fare, distance and ranking functionality."""

from .calculator import GreenFareCalculator
from .exceptions import (
    DataIntegrityError,
    DataLoadError,
    FareTableParseError,
    GreenFareError,
    RouteNotFoundError,
    RouteNotFoundForStationError,
    StationNotFoundError,
    ValidationError,
)
from .models import (
    FareBand,
    FareQuote,
    FareTable,
    OperatingConnection,
    OperatingSystem,
    OperatingSystemData,
    RankingItem,
    RouteMembership,
    RouteSegment,
    Station,
    UnifiedStation,
    UnifiedStationData,
)

__all__ = [
    "GreenFareCalculator",
    "FareBand",
    "FareQuote",
    "FareTable",
    "OperatingConnection",
    "OperatingSystem",
    "OperatingSystemData",
    "RankingItem",
    "RouteMembership",
    "RouteSegment",
    "Station",
    "UnifiedStation",
    "UnifiedStationData",
    "GreenFareError",
    "StationNotFoundError",
    "RouteNotFoundForStationError",
    "RouteNotFoundError",
    "DataIntegrityError",
    "DataLoadError",
    "FareTableParseError",
    "ValidationError",
]
