from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """
    Application configuration loaded from environment variables.
    """

    # Project metadata
    PROJECT_NAME: str = "UK Accident Analytics API"
    VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = Field("INFO", description="Root logging level")

    # CORS origins allowed to call the API (dashboard front end)
    CORS_ORIGINS: List[str] = ["*"]

    # Source tables
    DATA_DIR: Path = Field(
        Path("data"),
        description="Directory holding the accident CSV tables"
    )
    ACCIDENTS_FILE: str = Field(
        "uk_accidents_cleaned.csv",
        description="Primary (cleaned) accident table, relative to DATA_DIR"
    )
    SUPPLEMENTAL_FILE: str = Field(
        "UK/Accidents0515.csv",
        description="Supplemental 2005-2015 accident table, relative to DATA_DIR"
    )
    AUTHORITY_FILE: str = Field(
        "UK/contextCSVs/Local_Authority_Highway.csv",
        description="Local Authority (Highway) code/label table, relative to DATA_DIR"
    )

    # Supplemental year window
    SUPPLEMENTAL_MIN_YEAR: int = 2010
    SUPPLEMENTAL_MAX_YEAR: int = 2015
    MULTI_YEAR_SPAN: int = Field(
        default=6, ge=1, description="Max consecutive years shown on multi-year charts"
    )

    # Severity reconciliation
    RECONCILE_PRECISION: int = Field(
        default=3, ge=0, description="Decimal places of the coordinate join key (~100m)"
    )

    # Hot spot clustering
    HOTSPOT_GRID_SIZE: float = Field(
        default=0.01, gt=0, description="Grid cell size in degrees (~1.1km latitude)"
    )
    HOTSPOT_MIN_ACCIDENTS: int = Field(
        default=5, ge=1, description="Minimum accidents in a cell to count as a hot spot"
    )
    HOTSPOT_TOP_N: int = Field(default=50, ge=1)
    HOTSPOT_DETAIL_COUNT: int = Field(default=10, ge=1)
    AREA_MATCH_TOLERANCE: float = Field(
        default=0.001, gt=0, description="Degrees for supplemental area-name matching"
    )

    # Trends
    WEATHER_TOP_N: int = Field(default=10, ge=1)

    # Correlation
    CORRELATION_REPORT_THRESHOLD: float = Field(
        default=0.3, ge=0.0, le=1.0, description="|r| above which a pair is reported"
    )

    # Parallel analysis
    ANALYSIS_MAX_WORKERS: int = Field(
        default=4, ge=1, description="Threads used to run the analysis engines"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Allow extra fields from .env
    )

    @property
    def accidents_path(self) -> Path:
        return self.DATA_DIR / self.ACCIDENTS_FILE

    @property
    def supplemental_path(self) -> Path:
        return self.DATA_DIR / self.SUPPLEMENTAL_FILE

    @property
    def authority_path(self) -> Path:
        return self.DATA_DIR / self.AUTHORITY_FILE


# Export a singleton for easy import
settings = Settings()
