"""
Hot spot detection by fixed-resolution grid clustering.

Accidents are bucketed into square cells of HOTSPOT_GRID_SIZE degrees.
Cells holding at least HOTSPOT_MIN_ACCIDENTS records become hot spots,
ranked by accident count.
"""

import logging
import math
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..core.config import settings
from ..models.accident import AccidentRecord, AuthorityMap, SupplementalRecord
from ..models.analysis import HotSpotCluster
from ..schemas.analytics import HotSpotRead, HotSpotSummary

logger = logging.getLogger(__name__)

GridCell = Tuple[int, int]


def grid_cell(latitude: float, longitude: float, grid_size: float) -> GridCell:
    return (math.floor(latitude / grid_size), math.floor(longitude / grid_size))


class SupplementalLocator:
    """
    Finds the first supplemental record (in table order) lying strictly
    within `tolerance` degrees of a point on both axes.

    Records are bucketed on a tolerance-sized grid so a lookup only scans
    the 3x3 neighbourhood of the query cell.
    """

    def __init__(self, records: Sequence[SupplementalRecord], tolerance: float):
        self.tolerance = tolerance
        self._buckets: Dict[GridCell, List[Tuple[int, SupplementalRecord]]] = defaultdict(list)
        for position, record in enumerate(records):
            self._buckets[grid_cell(record.latitude, record.longitude, tolerance)].append(
                (position, record)
            )

    def find(self, latitude: float, longitude: float) -> Optional[SupplementalRecord]:
        lat_idx, lon_idx = grid_cell(latitude, longitude, self.tolerance)
        best: Optional[Tuple[int, SupplementalRecord]] = None
        for d_lat in (-1, 0, 1):
            for d_lon in (-1, 0, 1):
                for position, record in self._buckets.get((lat_idx + d_lat, lon_idx + d_lon), ()):
                    if best is not None and position >= best[0]:
                        break
                    if (
                        abs(record.latitude - latitude) < self.tolerance
                        and abs(record.longitude - longitude) < self.tolerance
                    ):
                        best = (position, record)
                        break
        return best[1] if best else None


def resolve_area_name(
    sample: AccidentRecord,
    authorities: AuthorityMap,
    locator: Optional[SupplementalLocator] = None,
) -> str:
    """
    Display name for the area around an accident.

    Tries, in order: the accident's own authority code, the authority code
    of the first supplemental accident at (almost) the same position, and
    finally the formatted coordinates.
    """
    name = authorities.get(sample.local_authority_code)
    if name:
        return name

    if locator is not None:
        match = locator.find(sample.latitude, sample.longitude)
        if match is not None:
            name = authorities.get(match.local_authority_code)
            if name:
                return name

    return f"{sample.latitude:.3f}, {sample.longitude:.3f}"


def group_by_cell(
    records: Sequence[AccidentRecord], grid_size: float
) -> Dict[GridCell, List[AccidentRecord]]:
    """Group records by grid cell, in order of first appearance."""
    cells: Dict[GridCell, List[AccidentRecord]] = {}
    skipped = 0
    for record in records:
        if not record.has_coordinates:
            skipped += 1
            continue
        cells.setdefault(grid_cell(record.latitude, record.longitude, grid_size), []).append(record)

    if skipped:
        logger.debug(f"⊘ {skipped} records without coordinates left out of the grid")
    return cells


def build_cluster(
    cell: GridCell,
    members: Sequence[AccidentRecord],
    authorities: AuthorityMap,
    locator: Optional[SupplementalLocator] = None,
) -> HotSpotCluster:
    return HotSpotCluster(
        cell=cell,
        members=tuple(members),
        count=len(members),
        latitude=float(np.mean([m.latitude for m in members])),
        longitude=float(np.mean([m.longitude for m in members])),
        avg_severity=float(np.mean([m.severity_numeric for m in members])),
        avg_vehicles=float(np.mean([m.vehicles for m in members])),
        avg_casualties=float(np.mean([m.casualties for m in members])),
        area_name=resolve_area_name(members[0], authorities, locator),
    )


def identify_hotspots(
    records: Sequence[AccidentRecord],
    authorities: AuthorityMap,
    supplemental: Sequence[SupplementalRecord] = (),
    grid_size: Optional[float] = None,
    min_accidents: Optional[int] = None,
    top_n: Optional[int] = None,
) -> List[HotSpotCluster]:
    """
    Find the busiest accident grid cells.

    Args:
        records: Primary accident records
        authorities: Authority code lookup for area names
        supplemental: Supplemental records used to find area codes by position
        grid_size: Cell size in degrees (default from settings)
        min_accidents: Minimum members for a cell to qualify (default from settings)
        top_n: Number of hot spots returned (default from settings)

    Returns:
        Hot spots sorted by count descending; equal counts keep discovery order
    """
    grid_size = grid_size or settings.HOTSPOT_GRID_SIZE
    min_accidents = min_accidents or settings.HOTSPOT_MIN_ACCIDENTS
    top_n = top_n or settings.HOTSPOT_TOP_N

    cells = group_by_cell(records, grid_size)
    qualifying = [(cell, members) for cell, members in cells.items() if len(members) >= min_accidents]
    qualifying.sort(key=lambda item: len(item[1]), reverse=True)
    top = qualifying[:top_n]

    locator = SupplementalLocator(supplemental, settings.AREA_MATCH_TOLERANCE) if supplemental else None
    clusters = [build_cluster(cell, members, authorities, locator) for cell, members in top]

    logger.info(
        f"✓ Found {len(qualifying)} hot spots in {len(cells)} grid cells "
        f"(returning top {len(clusters)})"
    )
    return clusters


def to_hotspot_read(cluster: HotSpotCluster, rank: int) -> HotSpotRead:
    lat_index, lon_index = cluster.cell
    return HotSpotRead(
        rank=rank,
        lat_index=lat_index,
        lon_index=lon_index,
        count=cluster.count,
        latitude=cluster.latitude,
        longitude=cluster.longitude,
        avg_severity=cluster.avg_severity,
        avg_vehicles=cluster.avg_vehicles,
        avg_casualties=cluster.avg_casualties,
        area_name=cluster.area_name,
    )


def summarize_hotspots(clusters: Sequence[HotSpotCluster], detail_count: Optional[int] = None) -> HotSpotSummary:
    """Headline figures: number of hot spots, the most active one, top-N details."""
    detail_count = detail_count or settings.HOTSPOT_DETAIL_COUNT
    reads = [to_hotspot_read(c, rank) for rank, c in enumerate(clusters, start=1)]
    return HotSpotSummary(
        total_hotspots=len(reads),
        total_accidents=sum(c.count for c in clusters),
        most_active=reads[0] if reads else None,
        details=reads[:detail_count],
    )
