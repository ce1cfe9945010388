"""
Temporal and weather trend aggregation.

Groups accidents by month, year, hour of day and weather condition, and
builds the multi-year series from the supplemental table.
"""

import logging
from collections import Counter, defaultdict
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..core.config import settings
from ..core.lookups import (
    MONTH_NAMES,
    MULTI_YEAR_WEATHER_CODES,
    is_reportable_weather,
    weather_name,
)
from ..models.accident import AccidentDataset, AccidentRecord, SupplementalRecord
from ..schemas.analytics import (
    HourlyTrendPoint,
    MonthlyTrendPoint,
    MultiYearTrendPoint,
    MultiYearWeatherTrend,
    TrendInsights,
    TrendReport,
    WeatherTrendPoint,
    WeatherYearSeries,
    YearlyTrendPoint,
)

logger = logging.getLogger(__name__)


def _mean(values: Sequence[float]) -> float:
    return float(np.mean(values)) if len(values) else 0.0


def monthly_trend(records: Sequence[AccidentRecord]) -> List[MonthlyTrendPoint]:
    """
    Accidents per calendar month, January to December.

    Months with no accidents are reported with zero count and zero severity.
    """
    by_month: Dict[int, List[AccidentRecord]] = defaultdict(list)
    for record in records:
        if record.month is not None:
            by_month[record.month].append(record)

    trend = []
    for month_num, name in enumerate(MONTH_NAMES, start=1):
        members = by_month.get(month_num, [])
        trend.append(MonthlyTrendPoint(
            month=name,
            month_num=month_num,
            count=len(members),
            avg_severity=_mean([m.severity_numeric for m in members]),
            total_casualties=sum(m.casualties for m in members),
        ))
    return trend


def yearly_trend(records: Sequence[AccidentRecord]) -> List[YearlyTrendPoint]:
    """Accident count per year of the primary table, ascending."""
    counts = Counter(r.year for r in records if r.year is not None)
    return [YearlyTrendPoint(year=year, count=counts[year]) for year in sorted(counts)]


def hourly_trend(records: Sequence[AccidentRecord]) -> List[HourlyTrendPoint]:
    """Accident count and mean severity per hour of day, for records with an hour."""
    by_hour: Dict[int, List[float]] = defaultdict(list)
    for record in records:
        if record.hour is not None:
            by_hour[record.hour].append(record.severity_numeric)

    return [
        HourlyTrendPoint(hour=hour, count=len(by_hour[hour]), avg_severity=_mean(by_hour[hour]))
        for hour in sorted(by_hour)
    ]


def weather_trend(records: Sequence[AccidentRecord], top_n: Optional[int] = None) -> List[WeatherTrendPoint]:
    """
    Accidents per reportable weather condition, most frequent first.

    Unknown codes and the excluded conditions (snow, snow + wind, fog/mist,
    other) never appear in the result.
    """
    top_n = top_n or settings.WEATHER_TOP_N

    by_code: Dict[str, List[float]] = {}
    for record in records:
        code = str(record.weather).strip()
        if is_reportable_weather(code):
            by_code.setdefault(code, []).append(record.severity_numeric)

    ranked = sorted(by_code.items(), key=lambda item: len(item[1]), reverse=True)
    return [
        WeatherTrendPoint(
            weather_code=code,
            weather_name=weather_name(code),
            count=len(severities),
            avg_severity=_mean(severities),
        )
        for code, severities in ranked[:top_n]
    ]


def display_years(years, min_year: Optional[int] = None, span: Optional[int] = None) -> List[int]:
    """Sorted years from `min_year` onwards, at most `span` of them."""
    min_year = settings.SUPPLEMENTAL_MIN_YEAR if min_year is None else min_year
    span = span or settings.MULTI_YEAR_SPAN
    return [year for year in sorted(set(years)) if year >= min_year][:span]


def multi_year_trend(records: Sequence[SupplementalRecord]) -> List[MultiYearTrendPoint]:
    """Yearly count, mean severity and total casualties from the supplemental table."""
    by_year: Dict[int, List[SupplementalRecord]] = defaultdict(list)
    for record in records:
        by_year[record.year].append(record)

    return [
        MultiYearTrendPoint(
            year=year,
            count=len(by_year[year]),
            avg_severity=_mean([r.severity for r in by_year[year]]),
            total_casualties=sum(r.casualties for r in by_year[year]),
        )
        for year in display_years(by_year)
    ]


def multi_year_weather_trend(records: Sequence[SupplementalRecord]) -> MultiYearWeatherTrend:
    """
    Yearly accident counts for Fine, Raining, Fine + Wind and Raining + Wind.

    Only conditions present in the data get a series; missing (year,
    condition) combinations count as zero.
    """
    counts: Dict[int, Counter] = defaultdict(Counter)
    seen_codes = set()
    for record in records:
        code = str(record.weather).strip()
        if not is_reportable_weather(code):
            continue
        counts[record.year][code] += 1
        seen_codes.add(code)

    years = display_years(counts)
    series = [
        WeatherYearSeries(
            weather_code=code,
            weather_name=weather_name(code),
            counts=[counts[year][code] for year in years],
        )
        for code in MULTI_YEAR_WEATHER_CODES
        if code in seen_codes
    ]
    return MultiYearWeatherTrend(years=years, series=series)


def _pct_change(old: float, new: float) -> Optional[float]:
    if not old:
        return None
    return (new - old) / old * 100


def trend_insights(
    monthly: Sequence[MonthlyTrendPoint], yearly: Sequence[YearlyTrendPoint]
) -> TrendInsights:
    """
    Year-over-year change between the first and last year, and the change
    between the first-half and second-half monthly averages.
    """
    counts = [point.count for point in monthly]
    first_half_avg = _mean(counts[:6])
    second_half_avg = _mean(counts[6:])

    insights = TrendInsights(
        first_half_avg=first_half_avg,
        second_half_avg=second_half_avg,
        half_year_change_pct=_pct_change(first_half_avg, second_half_avg),
    )
    if yearly:
        insights.first_year = yearly[0].year
        insights.last_year = yearly[-1].year
    if len(yearly) > 1:
        insights.year_over_year_change_pct = _pct_change(yearly[0].count, yearly[-1].count)
    return insights


def analyze_trends(dataset: AccidentDataset) -> TrendReport:
    """Run every trend aggregation over a dataset snapshot."""
    monthly = monthly_trend(dataset.accidents)
    yearly = yearly_trend(dataset.accidents)
    report = TrendReport(
        monthly=monthly,
        yearly=yearly,
        hourly=hourly_trend(dataset.accidents),
        weather=weather_trend(dataset.accidents),
        multi_year=multi_year_trend(dataset.supplemental),
        multi_year_weather=multi_year_weather_trend(dataset.supplemental),
        insights=trend_insights(monthly, yearly),
    )
    logger.info(
        f"✓ Trends: {len(report.yearly)} years, {len(report.hourly)} hours, "
        f"{len(report.weather)} weather conditions, {len(report.multi_year)} multi-year points"
    )
    return report
