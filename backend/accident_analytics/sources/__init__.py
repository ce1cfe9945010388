"""
Table sources for the accident analytics pipeline.

Usage:
    from accident_analytics.sources import create_sources_from_settings

    sources = create_sources_from_settings(settings)
    df = sources['accidents'].read()
"""

from .base import TableSource, SourceMetadata, SourceHealthStatus
from .csv_source import CsvTableSource, create_sources_from_settings
from .exceptions import DataSourceError, SourceUnavailableError, SourceSchemaError

__all__ = [
    "TableSource",
    "SourceMetadata",
    "SourceHealthStatus",
    "CsvTableSource",
    "create_sources_from_settings",
    "DataSourceError",
    "SourceUnavailableError",
    "SourceSchemaError",
]
