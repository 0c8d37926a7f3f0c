"""Data document loading and parsing."""

from .fare_table_parser import JR_EAST_GREEN_FARE_URL, parse_fare_table_html
from .loader import (
    load_calculator,
    load_dataset,
    load_fare_table,
    load_operating_systems,
    load_stations,
    save_fare_table,
)

__all__ = [
    "JR_EAST_GREEN_FARE_URL",
    "parse_fare_table_html",
    "load_calculator",
    "load_dataset",
    "load_fare_table",
    "load_operating_systems",
    "load_stations",
    "save_fare_table",
]
