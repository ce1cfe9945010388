"""
Accident analytics API endpoints.

Serves the precomputed dashboard series. The dashboard is built once at
startup; if loading failed, every endpoint answers with the same 503.
"""

from fastapi import APIRouter, HTTPException, Query, Request
from typing import List
import logging

from ..core.config import settings
from ..schemas.analytics import (
    CorrelationReport,
    DashboardResponse,
    DatasetSummary,
    DescriptiveStatistics,
    HotSpotRead,
    HotSpotSummary,
    HourlyTrendPoint,
    MonthlyTrendPoint,
    MultiYearTrendPoint,
    MultiYearWeatherTrend,
    TrendInsights,
    WeatherTrendPoint,
    YearlyTrendPoint,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/analytics",
    tags=["Accident Analytics"]
)


def get_dashboard(request: Request) -> DashboardResponse:
    """Return the dashboard built at startup, or fail with a single 503."""
    dashboard = getattr(request.app.state, "dashboard", None)
    if dashboard is None:
        error = getattr(request.app.state, "load_error", None) or "Dashboard not loaded"
        raise HTTPException(status_code=503, detail=f"Error loading data: {error}")
    return dashboard


@router.get("/dashboard", response_model=DashboardResponse)
def get_full_dashboard(request: Request) -> DashboardResponse:
    """Every dashboard series in one response."""
    return get_dashboard(request)


@router.get("/summary", response_model=DatasetSummary)
def get_summary(request: Request) -> DatasetSummary:
    """Record counts and distinct years, months, regions, severities and weather codes."""
    return get_dashboard(request).summary


@router.get("/statistics", response_model=DescriptiveStatistics)
def get_statistics(request: Request) -> DescriptiveStatistics:
    """Mean, median, spread and quartiles per numeric field plus categorical counts."""
    return get_dashboard(request).statistics


@router.get("/hotspots", response_model=List[HotSpotRead])
def get_hotspots(
    request: Request,
    limit: int = Query(
        settings.HOTSPOT_TOP_N,
        ge=1,
        le=settings.HOTSPOT_TOP_N,
        description="Maximum number of hot spots to return"
    ),
) -> List[HotSpotRead]:
    """Hot spots ranked by accident count."""
    return get_dashboard(request).hotspots[:limit]


@router.get("/hotspots/summary", response_model=HotSpotSummary)
def get_hotspot_summary(request: Request) -> HotSpotSummary:
    """Most active hot spot and the top-10 details list."""
    return get_dashboard(request).hotspot_summary


@router.get("/trends/monthly", response_model=List[MonthlyTrendPoint])
def get_monthly_trend(request: Request) -> List[MonthlyTrendPoint]:
    return get_dashboard(request).trends.monthly


@router.get("/trends/yearly", response_model=List[YearlyTrendPoint])
def get_yearly_trend(request: Request) -> List[YearlyTrendPoint]:
    return get_dashboard(request).trends.yearly


@router.get("/trends/hourly", response_model=List[HourlyTrendPoint])
def get_hourly_trend(request: Request) -> List[HourlyTrendPoint]:
    return get_dashboard(request).trends.hourly


@router.get("/trends/weather", response_model=List[WeatherTrendPoint])
def get_weather_trend(request: Request) -> List[WeatherTrendPoint]:
    """Top weather conditions by accident count (unknown and excluded conditions removed)."""
    return get_dashboard(request).trends.weather


@router.get("/trends/insights", response_model=TrendInsights)
def get_trend_insights(request: Request) -> TrendInsights:
    return get_dashboard(request).trends.insights


@router.get("/trends/multi-year", response_model=List[MultiYearTrendPoint])
def get_multi_year_trend(request: Request) -> List[MultiYearTrendPoint]:
    """Yearly totals from the supplemental 2010-2015 table."""
    return get_dashboard(request).trends.multi_year


@router.get("/trends/multi-year/weather", response_model=MultiYearWeatherTrend)
def get_multi_year_weather(request: Request) -> MultiYearWeatherTrend:
    return get_dashboard(request).trends.multi_year_weather


@router.get("/correlation", response_model=CorrelationReport)
def get_correlation(request: Request) -> CorrelationReport:
    """Pearson matrix, pair listing and key correlations."""
    return get_dashboard(request).correlation
