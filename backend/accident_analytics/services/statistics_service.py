"""
Descriptive statistics over the accident records.

Provides per-field numeric summaries (mean, median, spread, quartiles),
categorical counts and a summary of distinct dataset values.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from ..models.accident import AccidentDataset, AccidentRecord
from ..schemas.analytics import (
    CategoricalCounts,
    DatasetSummary,
    DescriptiveStatistics,
    FieldSummary,
)

logger = logging.getLogger(__name__)


def _all(attr: str) -> Callable[[Sequence[AccidentRecord]], List[float]]:
    return lambda records: [getattr(r, attr) for r in records]


def _positive(attr: str) -> Callable[[Sequence[AccidentRecord]], List[float]]:
    return lambda records: [getattr(r, attr) for r in records if getattr(r, attr) > 0]


def _present(attr: str) -> Callable[[Sequence[AccidentRecord]], List[float]]:
    return lambda records: [getattr(r, attr) for r in records if getattr(r, attr) is not None]


# Field name -> extractor returning the eligible values for that field
NUMERIC_FIELDS = {
    "severity_numeric": _all("severity_numeric"),
    "vehicles": _all("vehicles"),
    "casualties": _all("casualties"),
    "speed_limit": _positive("speed_limit"),
    "casualty_rate": _positive("casualty_rate"),
    "hour": _present("hour"),
}


def summarize_values(values: Sequence[float]) -> Optional[FieldSummary]:
    """
    Summarize a list of numbers.

    Standard deviation is the population form (divisor N). Quartiles use
    linear interpolation between closest ranks.

    Returns:
        FieldSummary, or None when `values` is empty
    """
    if len(values) == 0:
        return None

    arr = np.asarray(values, dtype=float)
    q1, q3 = np.quantile(arr, [0.25, 0.75], method="linear")
    return FieldSummary(
        count=len(arr),
        mean=float(arr.mean()),
        median=float(np.median(arr)),
        min=float(arr.min()),
        max=float(arr.max()),
        std_dev=float(arr.std(ddof=0)),
        q1=float(q1),
        q3=float(q3),
    )


def count_categories(records: Sequence[AccidentRecord]) -> CategoricalCounts:
    return CategoricalCounts(
        total_accidents=len(records),
        unique_regions=len({r.region for r in records}),
        unique_severities=len({r.severity for r in records}),
        rush_hour_accidents=sum(1 for r in records if r.is_rush_hour),
        weekend_accidents=sum(1 for r in records if r.is_weekend),
        urban_accidents=sum(1 for r in records if r.is_urban),
        fatal_accidents=sum(1 for r in records if r.is_fatal),
        serious_accidents=sum(1 for r in records if r.is_serious),
        multi_vehicle_accidents=sum(1 for r in records if r.is_multi_vehicle),
    )


def calculate_descriptive_stats(records: Sequence[AccidentRecord]) -> DescriptiveStatistics:
    """
    Compute numeric summaries and categorical counts.

    A field with no eligible values is left out of `fields`.

    Args:
        records: Primary accident records

    Returns:
        DescriptiveStatistics
    """
    fields: Dict[str, FieldSummary] = {}
    for name, extract in NUMERIC_FIELDS.items():
        summary = summarize_values(extract(records))
        if summary is None:
            logger.debug(f"⊘ No eligible values for {name} - omitted")
            continue
        fields[name] = summary

    return DescriptiveStatistics(fields=fields, categorical=count_categories(records))


def summarize_dataset(dataset: AccidentDataset) -> DatasetSummary:
    """Distinct years, months, regions, severities and weather codes."""
    accidents = dataset.accidents
    return DatasetSummary(
        total_accidents=len(accidents),
        supplemental_accidents=len(dataset.supplemental),
        local_authorities=len(dataset.authorities),
        years=sorted({r.year for r in accidents if r.year is not None}),
        months=sorted({r.month for r in accidents if r.month is not None}),
        regions=sorted({r.region for r in accidents}),
        severities=sorted({r.severity for r in accidents}),
        weather_codes=sorted({r.weather for r in accidents}),
        loaded_at=dataset.loaded_at,
    )
