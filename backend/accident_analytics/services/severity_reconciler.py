"""
Severity reconciliation between the primary and supplemental tables.

The primary table sometimes lacks severity; the supplemental table is
denser and always carries it. Records are joined on coordinates rounded to
a fixed number of decimals (3 decimals ~ 100m at UK latitudes).
"""

import logging
import math
from dataclasses import replace
from typing import Dict, Iterable, Optional, Sequence, Tuple

from ..core.config import settings
from ..core.lookups import severity_label
from ..models.accident import AccidentRecord, SupplementalRecord

logger = logging.getLogger(__name__)

CoordinateKey = Tuple[float, float]


def _round_half_up(value: float, precision: int) -> float:
    factor = 10 ** precision
    return math.floor(value * factor + 0.5) / factor


def coordinate_key(latitude: float, longitude: float, precision: Optional[int] = None) -> CoordinateKey:
    """
    Join key for a position: both axes rounded half-up to `precision` decimals.
    """
    if precision is None:
        precision = settings.RECONCILE_PRECISION
    return (_round_half_up(latitude, precision), _round_half_up(longitude, precision))


def build_severity_index(
    supplemental: Iterable[SupplementalRecord], precision: Optional[int] = None
) -> Dict[CoordinateKey, int]:
    """
    Index supplemental severities by rounded coordinates.

    Only records with a non-zero severity, latitude and longitude are
    indexed. When two records share a key the first one seen is kept.
    """
    index: Dict[CoordinateKey, int] = {}
    for record in supplemental:
        if not (record.severity and record.latitude and record.longitude):
            continue
        key = coordinate_key(record.latitude, record.longitude, precision)
        if key not in index:
            index[key] = record.severity
    return index


def reconcile_severity(
    accidents: Sequence[AccidentRecord],
    supplemental: Sequence[SupplementalRecord],
    precision: Optional[int] = None,
) -> Tuple[AccidentRecord, ...]:
    """
    Fill unknown severities in the primary records from the supplemental table.

    A record is updated only when its severity is 0 or "Unknown", its own
    coordinates are valid, and a supplemental record exists at the same
    rounded position. Records with a known severity are returned unchanged,
    so running this twice gives the same result as running it once.

    Args:
        accidents: Primary records
        supplemental: Supplemental records
        precision: Decimal places of the join key (defaults to settings)

    Returns:
        New tuple of records, same order and length as `accidents`
    """
    index = build_severity_index(supplemental, precision)
    if not index:
        logger.info("Supplemental severity index is empty - skipping reconciliation")
        return tuple(accidents)

    reconciled = []
    filled = 0
    for record in accidents:
        if record.severity_unresolved and record.has_coordinates:
            found = index.get(coordinate_key(record.latitude, record.longitude, precision))
            if found:
                record = replace(
                    record,
                    severity_numeric=found,
                    severity=severity_label(found),
                )
                filled += 1
        reconciled.append(record)

    logger.info(
        f"✓ Reconciled severity for {filled} records "
        f"(index of {len(index)} supplemental positions)"
    )
    return tuple(reconciled)
