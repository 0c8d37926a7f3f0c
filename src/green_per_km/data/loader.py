"""Load the fare table, station and operating system documents."""

import json
import logging
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..config import Settings
from ..core.calculator import GreenFareCalculator
from ..core.exceptions import DataLoadError
from ..core.models import FareTable, OperatingSystemData, UnifiedStationData
from ..utils.japanese_text import fill_missing_readings

logger = logging.getLogger(__name__)

_M = TypeVar("_M", bound=BaseModel)


def _load_document(path: Path | str, model: type[_M]) -> _M:
    """Read a JSON document and validate it against a model.

    Raises:
        DataLoadError: If the file is missing, unreadable or does not match
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DataLoadError(f"Failed to read {path}: {e}") from e

    try:
        return model.model_validate_json(raw)
    except PydanticValidationError as e:
        raise DataLoadError(f"Invalid {model.__name__} document {path}: {e}") from e


def load_fare_table(path: Path | str) -> FareTable:
    """Load the Green Car fare table document."""
    table = _load_document(path, FareTable)
    logger.info(f"Loaded {len(table.fare_bands)} fare bands from {path}")
    return table


def load_stations(path: Path | str, fill_readings: bool = False) -> UnifiedStationData:
    """Load the unified station database.

    Args:
        path: JSON document path
        fill_readings: Generate hiragana/romaji for stations lacking them
    """
    data = _load_document(path, UnifiedStationData)
    if fill_readings:
        data = fill_missing_readings(data)
    logger.info(f"Loaded {len(data.stations)} stations from {path}")
    return data


def load_operating_systems(path: Path | str) -> OperatingSystemData:
    """Load the operating system (through-service) database."""
    data = _load_document(path, OperatingSystemData)
    connections = sum(
        len(system.operating_connections)
        for system in data.operating_systems.values()
    )
    logger.info(
        f"Loaded {len(data.operating_systems)} operating systems "
        f"({connections} connections) from {path}"
    )
    return data


def load_dataset(
    settings: Settings, fill_readings: bool = False
) -> tuple[UnifiedStationData, FareTable, OperatingSystemData]:
    """Load all three documents from the configured data directory.

    The operating system document is optional; an empty database is used
    when it does not exist.
    """
    stations = load_stations(settings.stations_path, fill_readings=fill_readings)
    fare_table = load_fare_table(settings.fare_table_path)

    if settings.operating_systems_path.exists():
        systems = load_operating_systems(settings.operating_systems_path)
    else:
        logger.warning(
            f"No operating system data at {settings.operating_systems_path}; "
            "through services are disabled"
        )
        systems = OperatingSystemData()

    return stations, fare_table, systems


def load_calculator(settings: Settings) -> GreenFareCalculator:
    """Build a calculator from the configured data directory."""
    stations, fare_table, systems = load_dataset(settings)
    return GreenFareCalculator(stations, fare_table, systems)


def save_fare_table(table: FareTable, path: Path | str) -> None:
    """Write a fare table document using its JSON field names."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(table.model_dump(by_alias=True), f, ensure_ascii=False, indent=2)
        f.write("\n")
    logger.info(f"Saved fare table to {path}")
