import math
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from ..core.lookups import UNKNOWN_LABEL


@dataclass(frozen=True)
class AccidentRecord:
    """
    Domain model for one accident in the primary (cleaned) table.

    Coordinates are NaN when the raw cell could not be parsed.
    A severity_numeric of 0 means the severity is still unresolved.
    """

    latitude: float
    longitude: float
    year: Optional[int] = None
    month: Optional[int] = None
    hour: Optional[int] = None
    severity_numeric: float = 0
    severity: str = UNKNOWN_LABEL
    vehicles: int = 0
    casualties: int = 0
    speed_limit: float = 0.0
    casualty_rate: float = 0.0
    is_rush_hour: bool = False
    is_weekend: bool = False
    is_urban: bool = False
    has_rain: bool = False
    has_snow: bool = False
    has_fog: bool = False
    is_clear: bool = False
    is_fatal: bool = False
    is_serious: bool = False
    is_multi_vehicle: bool = False
    has_casualties: bool = False
    weather: str = ""
    region: str = ""
    date: Optional[datetime] = None
    local_authority_code: Optional[str] = None

    @property
    def has_coordinates(self) -> bool:
        return not (math.isnan(self.latitude) or math.isnan(self.longitude))

    @property
    def severity_unresolved(self) -> bool:
        return self.severity_numeric == 0 or self.severity == UNKNOWN_LABEL


@dataclass(frozen=True)
class SupplementalRecord:
    """
    Domain model for one accident in the 2005-2015 supplemental table.

    Only records dated 2010-2015 are ever built; the local authority code is
    kept raw and resolved through an AuthorityMap.
    """

    latitude: float
    longitude: float
    year: int
    month: Optional[int] = None
    day: Optional[int] = None
    hour: Optional[int] = None
    severity: int = 0
    weather: str = UNKNOWN_LABEL
    vehicles: int = 0
    casualties: int = 0
    speed_limit: float = 0.0
    local_authority_code: str = ""
    date: Optional[datetime] = None


class AuthorityMap:
    """Read-only mapping of Local Authority (Highway) code to display name."""

    def __init__(self, entries: Mapping[str, str]):
        self._entries = MappingProxyType(dict(entries))

    def get(self, code: Optional[str]) -> Optional[str]:
        if not code:
            return None
        return self._entries.get(code)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"<AuthorityMap(entries={len(self._entries)})>"


@dataclass(frozen=True)
class AccidentDataset:
    """
    Finalized, read-only snapshot handed to every analysis engine.

    Built once by the pipeline after loading and severity reconciliation.
    """

    accidents: Tuple[AccidentRecord, ...]
    supplemental: Tuple[SupplementalRecord, ...]
    authorities: AuthorityMap
    loaded_at: datetime
