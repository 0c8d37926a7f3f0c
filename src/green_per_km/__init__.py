"""Green per km

A Python package for computing JR East Green Car fares per km and per minute
over a multi-route station network, with CLI and MCP server front ends.
"""

__version__ = "0.1.0"

from .core.calculator import GreenFareCalculator
from .core.models import FareQuote, FareTable, RankingItem, UnifiedStation

__all__ = [
    "FareQuote",
    "FareTable",
    "GreenFareCalculator",
    "RankingItem",
    "UnifiedStation",
]
