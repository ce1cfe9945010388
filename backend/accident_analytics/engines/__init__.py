"""
Analysis engines for the accident dashboard.

Usage:
    from accident_analytics.engines import create_default_registry

    registry = create_default_registry()
    results = registry.run_all(dataset)
"""

from .base import AnalysisEngine, EngineMetadata
from .builtin import (
    CorrelationEngine,
    HotSpotEngine,
    StatisticsEngine,
    TrendEngine,
    create_default_registry,
)
from .exceptions import AnalysisEngineError
from .registry import EngineRegistry

__all__ = [
    "AnalysisEngine",
    "EngineMetadata",
    "EngineRegistry",
    "AnalysisEngineError",
    "StatisticsEngine",
    "HotSpotEngine",
    "TrendEngine",
    "CorrelationEngine",
    "create_default_registry",
]
