"""
Abstract base class for tabular data sources.

Every table the pipeline reads (primary accidents, supplemental accidents,
authority lookup) is exposed through this interface so the loader never
depends on where the rows come from.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, FrozenSet, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict


class SourceMetadata(BaseModel):
    """
    Metadata describing a table source.

    Attributes:
        name: Unique identifier for the source
        description: Human-readable description
        required_columns: Columns that must be present in the table
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    required_columns: FrozenSet[str] = frozenset()


class SourceHealthStatus(BaseModel):
    """
    Result of a source health check.

    Attributes:
        healthy: Whether the table can be read
        message: Human-readable status message
        last_check: Timestamp of the health check
        details: Additional diagnostic information (optional)
    """

    healthy: bool
    message: str
    last_check: datetime
    details: Optional[Dict[str, Any]] = None


class TableSource(ABC):
    """
    Abstract base class for all table sources.

    Example:
        class AuthoritySource(TableSource):
            def _init_metadata(self):
                return SourceMetadata(
                    name="authorities",
                    description="Local Authority (Highway) lookup",
                    required_columns=frozenset({"Code", "Label"}),
                )

            def read(self):
                return pd.read_csv(...)

            def health_check(self):
                return SourceHealthStatus(healthy=True, ...)
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize source with configuration.

        Args:
            config: Source-specific configuration dictionary
        """
        self.config = config
        self.metadata = self._init_metadata()

    @abstractmethod
    def _init_metadata(self) -> SourceMetadata:
        """Return source metadata."""
        pass

    @abstractmethod
    def read(self) -> pd.DataFrame:
        """
        Read the whole table.

        Returns:
            DataFrame of raw string cells, one row per table row.

        Raises:
            SourceUnavailableError: If the table cannot be read
            SourceSchemaError: If required columns are missing
        """
        pass

    @abstractmethod
    def health_check(self) -> SourceHealthStatus:
        """
        Verify the table is reachable without reading it in full.

        Should NOT raise exceptions (return unhealthy status instead).
        """
        pass

    @property
    def name(self) -> str:
        return self.metadata.name

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<{self.__class__.__name__}(name='{self.metadata.name}')>"
