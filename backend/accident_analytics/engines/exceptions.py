"""
Exception classes for the analysis engines.
"""


class AnalysisEngineError(Exception):
    """
    Raised when an analysis engine fails on a dataset.

    Carries the engine name and the original error so callers can report
    which panel of the dashboard could not be produced.
    """

    def __init__(self, engine_name: str, message: str, original_error: Exception = None):
        self.engine_name = engine_name
        self.original_error = original_error
        super().__init__(f"Engine '{engine_name}' failed: {message}")
