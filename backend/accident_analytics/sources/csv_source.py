"""
CSV table sources for the accident tables.

Cells are read as raw strings (no NA coercion) so that the record loader
sees exactly what the file holds and applies its own per-field fallbacks.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

import pandas as pd

from ..core.config import Settings
from .base import TableSource, SourceMetadata, SourceHealthStatus
from .exceptions import SourceUnavailableError, SourceSchemaError

logger = logging.getLogger(__name__)

ACCIDENT_COLUMNS = frozenset({"Latitude", "Longitude", "SeverityNumeric", "Severity"})
SUPPLEMENTAL_COLUMNS = frozenset({"Date", "Latitude", "Longitude", "Accident_Severity"})
AUTHORITY_COLUMNS = frozenset({"Code", "Label"})


class CsvTableSource(TableSource):
    """
    Table source backed by a local CSV file.

    Config keys:
        name (str): Source identifier used in logs and errors
        path (str | Path): CSV file location
        description (str): Optional description
        required_columns (Iterable[str]): Columns that must be present
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.path = Path(config["path"])

    def _init_metadata(self) -> SourceMetadata:
        return SourceMetadata(
            name=self.config.get("name", "csv"),
            description=self.config.get("description", "CSV table"),
            required_columns=frozenset(self.config.get("required_columns", ())),
        )

    def read(self) -> pd.DataFrame:
        logger.info(f"→ Reading {self.name} table from {self.path}")
        try:
            df = pd.read_csv(self.path, dtype=str, keep_default_na=False)
        except FileNotFoundError as e:
            raise SourceUnavailableError(self.name, f"file not found: {self.path}", e)
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise SourceUnavailableError(self.name, str(e), e)

        missing = self.metadata.required_columns - set(df.columns)
        if missing:
            raise SourceSchemaError(self.name, missing)

        logger.info(f"✓ Read {len(df)} rows from {self.name}")
        return df

    def health_check(self) -> SourceHealthStatus:
        now = datetime.now()
        if not self.path.is_file():
            return SourceHealthStatus(
                healthy=False,
                message=f"File not found: {self.path}",
                last_check=now,
            )

        try:
            header = pd.read_csv(self.path, dtype=str, nrows=0)
        except Exception as e:
            return SourceHealthStatus(
                healthy=False,
                message=f"Unreadable CSV: {e}",
                last_check=now,
            )

        missing = self.metadata.required_columns - set(header.columns)
        if missing:
            return SourceHealthStatus(
                healthy=False,
                message=f"Missing columns: {', '.join(sorted(missing))}",
                last_check=now,
                details={"path": str(self.path)},
            )

        return SourceHealthStatus(
            healthy=True,
            message="CSV readable",
            last_check=now,
            details={"path": str(self.path), "size_bytes": self.path.stat().st_size},
        )


def create_sources_from_settings(settings: Settings) -> Dict[str, CsvTableSource]:
    """
    Build the three CSV sources the pipeline needs from application settings.

    Returns:
        Dict with 'accidents', 'supplemental' and 'authorities' sources.
    """
    return {
        "accidents": CsvTableSource({
            "name": "accidents",
            "path": settings.accidents_path,
            "description": "Cleaned UK accident records",
            "required_columns": ACCIDENT_COLUMNS,
        }),
        "supplemental": CsvTableSource({
            "name": "supplemental",
            "path": settings.supplemental_path,
            "description": "UK accidents 2005-2015 (STATS19)",
            "required_columns": SUPPLEMENTAL_COLUMNS,
        }),
        "authorities": CsvTableSource({
            "name": "authorities",
            "path": settings.authority_path,
            "description": "Local Authority (Highway) code lookup",
            "required_columns": AUTHORITY_COLUMNS,
        }),
    }
