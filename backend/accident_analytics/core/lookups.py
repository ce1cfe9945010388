"""
Static lookup tables for STATS19-style accident codes.

Severity, weather and month tables are fixed; every lookup has an explicit
fallback for codes that are not in the table.
"""

from enum import IntEnum
from typing import Optional, Union

UNKNOWN_LABEL = "Unknown"


class SeverityLevel(IntEnum):
    """Accident severity code (1 = most severe)."""

    FATAL = 1
    SERIOUS = 2
    SLIGHT = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_code(cls, code: Union[int, float, None]) -> Optional["SeverityLevel"]:
        """Return the level for a numeric code, or None if it is not 1-3."""
        try:
            return cls(int(code))
        except (TypeError, ValueError):
            return None


def severity_label(code: Union[int, float, None]) -> str:
    """Map a severity code to its label; unmapped codes give "Unknown"."""
    level = SeverityLevel.from_code(code)
    if level is None or level != code:
        return UNKNOWN_LABEL
    return level.label


WEATHER_NAMES = {
    "1": "Fine",
    "2": "Raining",
    "3": "Snowing",
    "4": "Fine + Wind",
    "5": "Raining + Wind",
    "6": "Snowing + Wind",
    "7": "Fog/Mist",
    "8": "Other",
    "9": "Unknown",
}

# Other, Fog/Mist, Snowing, Snowing + Wind
EXCLUDED_WEATHER_CODES = frozenset({"3", "6", "7", "8"})

# Values that mean "no usable weather reading"
UNKNOWN_WEATHER_CODES = frozenset({"9", "-1", UNKNOWN_LABEL, ""})

# Fine, Raining, Fine + Wind, Raining + Wind, in display order
MULTI_YEAR_WEATHER_CODES = ("1", "2", "4", "5")


def weather_name(code) -> str:
    code = str(code).strip()
    return WEATHER_NAMES.get(code, f"Weather {code}")


def is_reportable_weather(code) -> bool:
    """True for weather codes that appear on the weather charts."""
    code = str(code).strip()
    return code not in UNKNOWN_WEATHER_CODES and code not in EXCLUDED_WEATHER_CODES


MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
