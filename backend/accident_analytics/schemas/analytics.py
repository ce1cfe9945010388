"""
Pydantic schemas for analytics results and endpoints.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# ============================================================================
# Dataset
# ============================================================================


class DatasetSummary(BaseModel):
    """Distinct values and sizes of the loaded dataset"""
    total_accidents: int = Field(..., ge=0)
    supplemental_accidents: int = Field(..., ge=0)
    local_authorities: int = Field(..., ge=0)
    years: List[int]
    months: List[int]
    regions: List[str]
    severities: List[str]
    weather_codes: List[str]
    loaded_at: datetime


# ============================================================================
# Descriptive statistics
# ============================================================================


class FieldSummary(BaseModel):
    """Summary statistics of one numeric field"""
    count: int = Field(..., ge=1, description="Values after filtering")
    mean: float
    median: float
    min: float
    max: float
    std_dev: float = Field(..., ge=0, description="Population standard deviation")
    q1: float
    q3: float


class CategoricalCounts(BaseModel):
    """Record counts per category / flag"""
    total_accidents: int
    unique_regions: int
    unique_severities: int
    rush_hour_accidents: int
    weekend_accidents: int
    urban_accidents: int
    fatal_accidents: int
    serious_accidents: int
    multi_vehicle_accidents: int


class DescriptiveStatistics(BaseModel):
    """Numeric summaries keyed by field name, plus categorical counts"""
    fields: Dict[str, FieldSummary]
    categorical: CategoricalCounts


# ============================================================================
# Hot spots
# ============================================================================


class HotSpotRead(BaseModel):
    """Hot spot returned to the client (members omitted)"""
    rank: int = Field(..., ge=1)
    lat_index: int
    lon_index: int
    count: int = Field(..., ge=1)
    latitude: float = Field(..., description="Centroid latitude of member accidents")
    longitude: float = Field(..., description="Centroid longitude of member accidents")
    avg_severity: float
    avg_vehicles: float
    avg_casualties: float
    area_name: str


class HotSpotSummary(BaseModel):
    """Headline figures for the hot spot panel"""
    total_hotspots: int
    total_accidents: int
    most_active: Optional[HotSpotRead] = None
    details: List[HotSpotRead] = Field(default_factory=list)


# ============================================================================
# Trends
# ============================================================================


class MonthlyTrendPoint(BaseModel):
    month: str
    month_num: int = Field(..., ge=1, le=12)
    count: int = Field(..., ge=0)
    avg_severity: float
    total_casualties: int


class YearlyTrendPoint(BaseModel):
    year: int
    count: int = Field(..., ge=0)


class MultiYearTrendPoint(BaseModel):
    """Yearly totals from the supplemental table"""
    year: int
    count: int = Field(..., ge=0)
    avg_severity: float
    total_casualties: int


class HourlyTrendPoint(BaseModel):
    hour: int
    count: int = Field(..., ge=0)
    avg_severity: float


class WeatherTrendPoint(BaseModel):
    weather_code: str
    weather_name: str
    count: int = Field(..., ge=0)
    avg_severity: float


class WeatherYearSeries(BaseModel):
    """Accident counts for one weather condition, aligned with `years`"""
    weather_code: str
    weather_name: str
    counts: List[int]


class MultiYearWeatherTrend(BaseModel):
    years: List[int]
    series: List[WeatherYearSeries]


class TrendInsights(BaseModel):
    """Derived comparisons shown next to the trend charts"""
    first_year: Optional[int] = None
    last_year: Optional[int] = None
    year_over_year_change_pct: Optional[float] = None
    first_half_avg: float
    second_half_avg: float
    half_year_change_pct: Optional[float] = None


class TrendReport(BaseModel):
    monthly: List[MonthlyTrendPoint]
    yearly: List[YearlyTrendPoint]
    hourly: List[HourlyTrendPoint]
    weather: List[WeatherTrendPoint]
    multi_year: List[MultiYearTrendPoint]
    multi_year_weather: MultiYearWeatherTrend
    insights: TrendInsights


# ============================================================================
# Correlation
# ============================================================================


class CorrelationStrength(str, Enum):
    STRONG = "Strong"
    MODERATE = "Moderate"
    WEAK = "Weak"


class CorrelationPair(BaseModel):
    field_a: str
    field_b: str
    coefficient: float = Field(..., ge=-1.0, le=1.0)


class KeyCorrelation(CorrelationPair):
    strength: CorrelationStrength
    direction: str = Field(..., description="'positive' or 'negative'")
    n_samples: int
    p_value: Optional[float] = Field(
        None, description="Two-sided p-value (None when it cannot be computed)"
    )


class CorrelationReport(BaseModel):
    fields: List[str]
    matrix: List[List[float]]
    pairs: List[CorrelationPair]
    key_correlations: List[KeyCorrelation]


# ============================================================================
# Dashboard
# ============================================================================


class DashboardResponse(BaseModel):
    """Every precomputed series the dashboard renders"""
    summary: DatasetSummary
    statistics: DescriptiveStatistics
    hotspots: List[HotSpotRead]
    hotspot_summary: HotSpotSummary
    trends: TrendReport
    correlation: CorrelationReport
