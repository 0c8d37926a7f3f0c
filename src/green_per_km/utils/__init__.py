"""Utility modules for green-per-km."""

from .japanese_text import (
    StationReadingConverter,
    fill_missing_readings,
    get_converter,
)

__all__ = [
    "StationReadingConverter",
    "fill_missing_readings",
    "get_converter",
]
