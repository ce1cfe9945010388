from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .accident import AccidentRecord


@dataclass(frozen=True)
class HotSpotCluster:
    """
    Grid cell holding enough accidents to count as a hot spot.

    latitude/longitude are the centroid of the members, not the
    geometric centre of the cell.
    """

    cell: Tuple[int, int]
    members: Tuple[AccidentRecord, ...] = field(repr=False)
    count: int
    latitude: float
    longitude: float
    avg_severity: float
    avg_vehicles: float
    avg_casualties: float
    area_name: str


@dataclass(frozen=True)
class CorrelationMatrix:
    """Square Pearson matrix indexed by ``fields`` in order."""

    fields: List[str]
    matrix: List[List[float]]
    sample_sizes: Dict[str, int] = field(default_factory=dict)
