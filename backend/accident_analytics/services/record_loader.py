"""
Record loader - turns raw table rows into typed accident records.

Every cell is parsed with an explicit fallback: counts default to 0,
coordinates to NaN, temporal fields to None. Numeric cells are read by
their leading number ("30 mph" -> 30, "51.5N" -> 51.5), matching how the
tables were produced.
"""

import logging
import math
import re
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from ..core.config import settings
from ..core.lookups import UNKNOWN_LABEL
from ..models.accident import AccidentRecord, SupplementalRecord

logger = logging.getLogger(__name__)

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

# Raw column name -> AccidentRecord attribute
BOOLEAN_COLUMNS = {
    "IsRushHour": "is_rush_hour",
    "IsWeekend": "is_weekend",
    "IsUrban": "is_urban",
    "HasRain": "has_rain",
    "HasSnow": "has_snow",
    "HasFog": "has_fog",
    "IsClear": "is_clear",
    "IsFatal": "is_fatal",
    "IsSerious": "is_serious",
    "IsMultiVehicle": "is_multi_vehicle",
    "HasCasualties": "has_casualties",
}

AUTHORITY_CODE_COLUMNS = ("Local_Authority_(Highway)", "Local_Authority_Highway")


def _cell(row: Mapping[str, Any], column: str) -> str:
    value = row.get(column)
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value)


def parse_int(raw: Any) -> Optional[int]:
    """Parse the leading integer of a cell; None when there is none."""
    match = _INT_PREFIX.match(str(raw)) if raw is not None else None
    return int(match.group(1)) if match else None


def parse_float(raw: Any) -> float:
    """Parse the leading decimal number of a cell; NaN when there is none or it overflows."""
    match = _FLOAT_PREFIX.match(str(raw)) if raw is not None else None
    if not match:
        return math.nan
    value = float(match.group(1))
    return value if math.isfinite(value) else math.nan


def parse_count(raw: Any) -> int:
    """Integer count with 0 as fallback."""
    return parse_int(raw) or 0


def parse_amount(raw: Any) -> float:
    """Float with 0 as fallback for both unparseable and NaN cells."""
    value = parse_float(raw)
    return 0.0 if math.isnan(value) else value


def parse_flag(raw: Any) -> bool:
    """Flags are true only for the exact literal "True"."""
    return raw == "True"


def parse_accident_row(
    row: Mapping[str, Any], parsed_date: Optional[datetime] = None
) -> AccidentRecord:
    """
    Build an AccidentRecord from one primary-table row.

    Args:
        row: Mapping of column name to raw cell
        parsed_date: Date already parsed for this row (dates are parsed
            column-wise by load_accident_records)
    """
    authority_code = None
    for column in AUTHORITY_CODE_COLUMNS:
        if _cell(row, column):
            authority_code = _cell(row, column)
            break

    flags = {attr: parse_flag(row.get(column)) for column, attr in BOOLEAN_COLUMNS.items()}

    return AccidentRecord(
        latitude=parse_float(_cell(row, "Latitude")),
        longitude=parse_float(_cell(row, "Longitude")),
        year=parse_int(_cell(row, "Year")),
        month=parse_int(_cell(row, "Month")),
        hour=parse_int(_cell(row, "Hour")),
        severity_numeric=parse_amount(_cell(row, "SeverityNumeric")),
        severity=_cell(row, "Severity") or UNKNOWN_LABEL,
        vehicles=parse_count(_cell(row, "NumberOfVehicles")),
        casualties=parse_count(_cell(row, "NumberOfCasualties")),
        speed_limit=parse_amount(_cell(row, "SpeedLimit")),
        casualty_rate=parse_amount(_cell(row, "CasualtyRate")),
        weather=_cell(row, "Weather"),
        region=_cell(row, "Region"),
        date=parsed_date,
        local_authority_code=authority_code,
        **flags,
    )


def split_supplemental_date(raw: str) -> Tuple[Optional[int], Optional[int], Optional[int]]:
    """
    Split a DD/MM/YYYY cell into (year, month, day).

    Anything other than exactly three '/'-separated parts yields all None.
    """
    parts = raw.split("/") if raw else []
    if len(parts) != 3:
        return None, None, None
    return parse_int(parts[2]), parse_int(parts[1]), parse_int(parts[0])


def split_supplemental_hour(raw: str) -> Optional[int]:
    """Hour from an HH:MM cell; None when the cell is blank or not numeric."""
    if not raw:
        return None
    return parse_int(raw.split(":")[0])


def parse_supplemental_row(row: Mapping[str, Any]) -> Optional[SupplementalRecord]:
    """
    Build a SupplementalRecord from one supplemental-table row.

    Returns:
        The record, or None when the row has no usable year or falls
        outside the configured year window.
    """
    year, month, day = split_supplemental_date(_cell(row, "Date"))
    if year is None:
        return None
    if not settings.SUPPLEMENTAL_MIN_YEAR <= year <= settings.SUPPLEMENTAL_MAX_YEAR:
        return None

    date = None
    if month is not None and day is not None:
        try:
            date = datetime(year, month, day)
        except (ValueError, OverflowError):
            date = None

    return SupplementalRecord(
        latitude=parse_amount(_cell(row, "Latitude")),
        longitude=parse_amount(_cell(row, "Longitude")),
        year=year,
        month=month,
        day=day,
        hour=split_supplemental_hour(_cell(row, "Time")),
        severity=parse_count(_cell(row, "Accident_Severity")),
        weather=_cell(row, "Weather_Conditions") or UNKNOWN_LABEL,
        vehicles=parse_count(_cell(row, "Number_of_Vehicles")),
        casualties=parse_count(_cell(row, "Number_of_Casualties")),
        speed_limit=parse_amount(_cell(row, "Speed_limit")),
        local_authority_code=_cell(row, "Local_Authority_(Highway)"),
        date=date,
    )


def _parse_dates(df: pd.DataFrame) -> List[Optional[datetime]]:
    if "Date" not in df.columns:
        return [None] * len(df)
    parsed = pd.to_datetime(df["Date"], errors="coerce", format="mixed")
    return [None if pd.isna(ts) else ts.to_pydatetime() for ts in parsed]


def load_accident_records(df: pd.DataFrame) -> Tuple[AccidentRecord, ...]:
    """
    Parse the primary accident table.

    Args:
        df: Raw primary table (string cells)

    Returns:
        One AccidentRecord per row, in table order
    """
    rows: List[Dict[str, Any]] = df.to_dict("records")
    dates = _parse_dates(df)
    records = tuple(parse_accident_row(row, date) for row, date in zip(rows, dates))

    missing_coords = sum(1 for r in records if not r.has_coordinates)
    unresolved = sum(1 for r in records if r.severity_unresolved)
    logger.info(
        f"✓ Parsed {len(records)} accident records "
        f"({missing_coords} without coordinates, {unresolved} with unknown severity)"
    )
    return records


def load_supplemental_records(df: pd.DataFrame) -> Tuple[SupplementalRecord, ...]:
    """
    Parse the supplemental accident table, keeping only the configured years.

    Args:
        df: Raw supplemental table (string cells)

    Returns:
        SupplementalRecords dated within the year window, in table order
    """
    records = []
    for row in df.to_dict("records"):
        record = parse_supplemental_row(row)
        if record is not None:
            records.append(record)

    logger.info(
        f"✓ Kept {len(records)} of {len(df)} supplemental records "
        f"({settings.SUPPLEMENTAL_MIN_YEAR}-{settings.SUPPLEMENTAL_MAX_YEAR})"
    )
    return tuple(records)
