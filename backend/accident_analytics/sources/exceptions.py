"""
Exception classes for the table source layer.
"""


class DataSourceError(Exception):
    """Base exception for all table-source errors."""

    pass


class SourceUnavailableError(DataSourceError):
    """
    Raised when a required table cannot be read.

    This is fatal for the whole pipeline: no analysis runs on a
    partially loaded dataset.
    """

    def __init__(self, source_name: str, message: str, original_error: Exception = None):
        self.source_name = source_name
        self.original_error = original_error
        super().__init__(f"Source '{source_name}' unavailable: {message}")


class SourceSchemaError(DataSourceError):
    """
    Raised when a table is readable but lacks required columns.
    """

    def __init__(self, source_name: str, missing_columns):
        self.source_name = source_name
        self.missing_columns = sorted(missing_columns)
        super().__init__(
            f"Source '{source_name}' is missing columns: {', '.join(self.missing_columns)}"
        )
