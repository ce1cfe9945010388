"""
The four dashboard analysis engines.
"""

from typing import List

from ..core.config import Settings, settings as default_settings
from ..models.accident import AccidentDataset
from ..models.analysis import HotSpotCluster
from ..schemas.analytics import CorrelationReport, DescriptiveStatistics, TrendReport
from ..services.correlation_service import CorrelationAnalysisService
from ..services.hotspot_service import identify_hotspots
from ..services.statistics_service import calculate_descriptive_stats
from ..services.trend_service import analyze_trends
from .base import AnalysisEngine, EngineMetadata
from .registry import EngineRegistry


class StatisticsEngine(AnalysisEngine):
    def _init_metadata(self) -> EngineMetadata:
        return EngineMetadata(
            name="statistics",
            description="Descriptive statistics and categorical counts",
        )

    def run(self, dataset: AccidentDataset) -> DescriptiveStatistics:
        return calculate_descriptive_stats(dataset.accidents)


class HotSpotEngine(AnalysisEngine):
    """
    Config keys (all optional, default to settings):
        grid_size (float), min_accidents (int), top_n (int)
    """

    def _init_metadata(self) -> EngineMetadata:
        return EngineMetadata(
            name="hotspots",
            description="Grid-based accident hot spots",
        )

    def run(self, dataset: AccidentDataset) -> List[HotSpotCluster]:
        return identify_hotspots(
            dataset.accidents,
            dataset.authorities,
            dataset.supplemental,
            grid_size=self.config.get("grid_size"),
            min_accidents=self.config.get("min_accidents"),
            top_n=self.config.get("top_n"),
        )


class TrendEngine(AnalysisEngine):
    def _init_metadata(self) -> EngineMetadata:
        return EngineMetadata(
            name="trends",
            description="Monthly, yearly, hourly and weather trends",
        )

    def run(self, dataset: AccidentDataset) -> TrendReport:
        return analyze_trends(dataset)


class CorrelationEngine(AnalysisEngine):
    """
    Config keys:
        report_threshold (float): |r| above which a pair is a key correlation
    """

    def _init_metadata(self) -> EngineMetadata:
        return EngineMetadata(
            name="correlation",
            description="Pearson correlation matrix of numeric fields",
        )

    def run(self, dataset: AccidentDataset) -> CorrelationReport:
        service = CorrelationAnalysisService(
            report_threshold=self.config.get("report_threshold")
        )
        return service.analyze(dataset.accidents)


def create_default_registry(settings: Settings = default_settings) -> EngineRegistry:
    """Registry with the statistics, hot spot, trend and correlation engines."""
    registry = EngineRegistry(max_workers=settings.ANALYSIS_MAX_WORKERS)
    registry.register("statistics", StatisticsEngine())
    registry.register("hotspots", HotSpotEngine({"top_n": settings.HOTSPOT_TOP_N}))
    registry.register("trends", TrendEngine())
    registry.register("correlation", CorrelationEngine({
        "report_threshold": settings.CORRELATION_REPORT_THRESHOLD,
    }))
    return registry
