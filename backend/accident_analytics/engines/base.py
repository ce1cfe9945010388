"""
Abstract base class for analysis engines.

Each engine reads a finalized AccidentDataset and produces one panel of
the dashboard. Engines never modify the dataset.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from ..models.accident import AccidentDataset


class EngineMetadata(BaseModel):
    """
    Metadata describing an analysis engine.

    Attributes:
        name: Unique identifier for the engine
        description: Human-readable description
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str


class AnalysisEngine(ABC):
    """
    Abstract base class for all analysis engines.

    Example:
        class HourlyEngine(AnalysisEngine):
            def _init_metadata(self):
                return EngineMetadata(name="hourly", description="Accidents by hour")

            def run(self, dataset):
                return hourly_trend(dataset.accidents)
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Args:
            config: Engine-specific configuration dictionary
        """
        self.config = config or {}
        self.metadata = self._init_metadata()

    @abstractmethod
    def _init_metadata(self) -> EngineMetadata:
        """Return engine metadata."""
        pass

    @abstractmethod
    def run(self, dataset: AccidentDataset) -> Any:
        """
        Analyze the dataset.

        Args:
            dataset: Read-only snapshot of the loaded records

        Returns:
            Engine result (plain data: schema objects, dataclasses, lists)
        """
        pass

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<{self.__class__.__name__}("
            f"name='{self.metadata.name}')>"
        )
