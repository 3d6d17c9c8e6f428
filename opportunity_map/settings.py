"""Opportunity Map configuration settings using Pydantic.

All values can be overridden with ``OPPMAP_*`` environment variables or a
``.env`` file in the working directory.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from opportunity_map.utils import hsl_to_hex


class OpportunityMapSettings(BaseSettings):
    """Central configuration for the opportunity matrix."""

    model_config = SettingsConfigDict(
        env_prefix="OPPMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # --- Project Paths ---
    @computed_field
    @property
    def project_root(self) -> Path:
        """Root directory of the project."""
        return Path(__file__).parent.parent

    # --- Data Source ---
    data_source: str = Field(
        default="data/bertin_matrix_projects_vs_capabilities_clustered_for_webpage.csv"
    )
    fetch_timeout: float = 30.0

    # --- Column Conventions ---
    # Every column not listed here is treated as an AI capability.
    metadata_columns: str = (
        "solution_id,solution_short_name,solution_short_desc,submission_languages"
    )
    id_column: str = "solution_id"
    name_column: str = "solution_short_name"
    description_column: str = "solution_short_desc"

    # --- Colour Scale ---
    color_hue: float = Field(default=205, ge=0, le=360)
    color_saturation: float = Field(default=60, ge=0, le=100)
    lightness_light: float = Field(default=95, ge=0, le=100)
    lightness_dark: float = Field(default=50, ge=0, le=100)
    missing_cell_color: str = "#FFFFFF"

    # --- Interaction ---
    device_mode: Literal["auto", "touch", "pointer"] = "auto"

    # --- Logging ---
    log_level: str = "INFO"

    @model_validator(mode="after")
    def validate_color_scale(self) -> "OpportunityMapSettings":
        # Higher scores must render darker, and a zero score must stay
        # distinguishable from a missing cell.
        if self.lightness_light < self.lightness_dark:
            raise ValueError(
                f"lightness_light ({self.lightness_light:g}) must not be below "
                f"lightness_dark ({self.lightness_dark:g})"
            )
        light_hex = hsl_to_hex(self.color_hue, self.color_saturation, self.lightness_light)
        if light_hex.upper() == self.missing_cell_color.strip().upper():
            raise ValueError(
                f"Light end of the colour scale ({light_hex}) matches missing_cell_color"
            )
        return self

    @property
    def metadata_columns_list(self) -> list[str]:
        """Parse comma-separated metadata columns.

        The identifier, name and description columns are always included.
        """
        columns = [c.strip() for c in self.metadata_columns.split(",") if c.strip()]
        for required in (self.id_column, self.name_column, self.description_column):
            if required not in columns:
                columns.append(required)
        return columns

    def resolve_source(self) -> str:
        """Return the data source, anchoring relative paths at the project root."""
        if self.data_source.startswith(("http://", "https://")):
            return self.data_source
        path = Path(self.data_source)
        if not path.is_absolute() and not path.exists():
            path = self.project_root / path
        return str(path)


# Singleton instance
settings = OpportunityMapSettings()


def get_settings() -> OpportunityMapSettings:
    """Return the process-wide settings instance."""
    return settings
