"""
Analysis pipeline - load, reconcile, snapshot, analyze.

Loading is strictly sequential and must finish before any engine runs:
severity reconciliation and hot spot area names both need the full
supplemental table. Any source failure aborts the whole pipeline.
"""

import logging
from datetime import datetime
from typing import Mapping, Optional

from ..core.config import Settings, settings as default_settings
from ..engines import AnalysisEngineError, EngineRegistry, create_default_registry
from ..models.accident import AccidentDataset
from ..schemas.analytics import DashboardResponse
from ..sources import TableSource, create_sources_from_settings
from .authority_lookup import build_authority_map
from .hotspot_service import summarize_hotspots, to_hotspot_read
from .record_loader import load_accident_records, load_supplemental_records
from .severity_reconciler import reconcile_severity
from .statistics_service import summarize_dataset

logger = logging.getLogger(__name__)

DASHBOARD_ENGINES = ("statistics", "hotspots", "trends", "correlation")


def load_dataset(
    sources: Optional[Mapping[str, TableSource]] = None,
    settings: Settings = default_settings,
) -> AccidentDataset:
    """
    Read all tables and return the finalized dataset snapshot.

    Args:
        sources: Mapping with 'accidents', 'supplemental' and 'authorities'
            table sources (defaults to the CSV files named in settings)
        settings: Application settings

    Returns:
        AccidentDataset with reconciled severities

    Raises:
        SourceUnavailableError: If any table cannot be read
        SourceSchemaError: If any table lacks required columns
    """
    sources = sources or create_sources_from_settings(settings)

    authorities = build_authority_map(sources["authorities"].read())
    supplemental = load_supplemental_records(sources["supplemental"].read())
    accidents = load_accident_records(sources["accidents"].read())
    accidents = reconcile_severity(accidents, supplemental, settings.RECONCILE_PRECISION)

    dataset = AccidentDataset(
        accidents=accidents,
        supplemental=supplemental,
        authorities=authorities,
        loaded_at=datetime.now(),
    )
    logger.info(
        f"✓ Dataset ready: {len(accidents)} accidents, "
        f"{len(supplemental)} supplemental, {len(authorities)} authorities"
    )
    return dataset


def build_dashboard(
    dataset: AccidentDataset,
    registry: Optional[EngineRegistry] = None,
    settings: Settings = default_settings,
) -> DashboardResponse:
    """
    Run every analysis engine over the dataset and assemble the dashboard.

    Raises:
        AnalysisEngineError: If any engine fails or a dashboard engine is
            not registered
    """
    registry = registry or create_default_registry(settings)
    results = registry.run_all(dataset)

    missing = [name for name in DASHBOARD_ENGINES if name not in results]
    if missing:
        raise AnalysisEngineError(
            "dashboard", f"no result from engines: {', '.join(missing)}"
        )

    clusters = results["hotspots"]
    return DashboardResponse(
        summary=summarize_dataset(dataset),
        statistics=results["statistics"],
        hotspots=[to_hotspot_read(c, rank) for rank, c in enumerate(clusters, start=1)],
        hotspot_summary=summarize_hotspots(clusters),
        trends=results["trends"],
        correlation=results["correlation"],
    )
