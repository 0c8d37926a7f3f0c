"""Green Car fare band resolution."""

import math

from .exceptions import DataIntegrityError
from .models import FareBand, FareTable


def find_fare_band(distance: float, table: FareTable) -> FareBand:
    """Find the fare band covering a distance.

    Args:
        distance: Distance in km; negative values are treated as 0
        table: Fare table with bands in ascending order

    Returns:
        The first band whose upper bound is open or not below the distance

    Raises:
        DataIntegrityError: If the table has no band covering the distance
    """
    d = max(0.0, float(distance))
    for band in table.fare_bands:
        if band.max_km is None or d <= band.max_km:
            return band
    raise DataIntegrityError(
        f"No fare band matched {d}km; the fare table must end with an open band"
    )


def resolve_fare(distance: float, table: FareTable, method: str = "suica") -> int:
    """Get the Green Car fare for a distance and payment method."""
    return find_fare_band(distance, table).price(method)


def unit_price_per_km(distance: float, fare: float) -> float:
    """Yen per km; infinite for a non-positive distance."""
    if distance <= 0:
        return math.inf
    return fare / distance


def unit_price_per_minute(minutes: float, fare: float) -> float:
    """Yen per minute; infinite for a non-positive time."""
    if minutes <= 0:
        return math.inf
    return fare / minutes
