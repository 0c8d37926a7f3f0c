"""Runtime configuration for green-per-km."""

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.exceptions import ValidationError
from .core.models import PaymentMethod

ENV_PREFIX = "GREEN_PER_KM_"


class Settings(BaseSettings):
    """Where the data documents live and the default query options.

    Values come from ``GREEN_PER_KM_*`` environment variables
    (``GREEN_PER_KM_DATA_DIR``, ``GREEN_PER_KM_METHOD``,
    ``GREEN_PER_KM_RANKING_SIZE``); keyword arguments win over them.
    """

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX)

    data_dir: Path = Field(Path("data"), description="Directory holding the JSON data")
    stations_file: str = "stations-unified.json"
    fare_table_file: str = "green-fare.table.json"
    operating_systems_file: str = "operating-systems.json"
    default_method: PaymentMethod = Field(
        "suica",
        validation_alias=AliasChoices("default_method", f"{ENV_PREFIX}METHOD"),
    )
    ranking_size: int = Field(
        30,
        ge=1,
        validation_alias=AliasChoices("ranking_size", f"{ENV_PREFIX}RANKING_SIZE"),
        description="Rows shown per ranking",
    )

    @property
    def stations_path(self) -> Path:
        return self.data_dir / self.stations_file

    @property
    def fare_table_path(self) -> Path:
        return self.data_dir / self.fare_table_file

    @property
    def operating_systems_path(self) -> Path:
        return self.data_dir / self.operating_systems_file

    @classmethod
    def from_env(cls, **overrides: object) -> "Settings":
        """Build settings from the environment.

        Keyword overrides that are not None win over the environment.

        Raises:
            ValidationError: If a value is invalid
        """
        try:
            return cls(**{k: v for k, v in overrides.items() if v is not None})
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid configuration: {e}") from e
