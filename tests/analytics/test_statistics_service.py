"""
Unit tests for descriptive statistics.
"""

import pytest
import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../backend')))

from accident_analytics.services.statistics_service import (
    calculate_descriptive_stats,
    count_categories,
    summarize_dataset,
    summarize_values,
)
from record_factory import make_accident, make_dataset, make_supplemental


class TestSummarizeValues:
    """Test numeric summaries."""

    def test_population_std_dev(self):
        summary = summarize_values([2, 4, 4, 4, 5, 5, 7, 9])

        assert summary.count == 8
        assert summary.mean == pytest.approx(5.0)
        assert summary.std_dev == pytest.approx(2.0)

    def test_quartiles_interpolate_linearly(self):
        summary = summarize_values([1, 2, 3, 4])

        assert summary.q1 == pytest.approx(1.75)
        assert summary.median == pytest.approx(2.5)
        assert summary.q3 == pytest.approx(3.25)
        assert summary.min == 1.0
        assert summary.max == 4.0

    def test_single_value(self):
        summary = summarize_values([7])

        assert summary.std_dev == 0.0
        assert summary.q1 == summary.q3 == summary.median == 7.0

    def test_empty_returns_none(self):
        assert summarize_values([]) is None


class TestDescriptiveStats:
    """Test per-field statistics over accident records."""

    def test_speed_limit_ignores_non_positive_values(self):
        records = [
            make_accident(speed_limit=30.0),
            make_accident(speed_limit=70.0),
            make_accident(speed_limit=0.0),
        ]
        stats = calculate_descriptive_stats(records)

        assert stats.fields["speed_limit"].count == 2
        assert stats.fields["speed_limit"].mean == pytest.approx(50.0)

    def test_counts_include_zero_values(self):
        records = [make_accident(vehicles=0), make_accident(vehicles=2)]
        stats = calculate_descriptive_stats(records)

        assert stats.fields["vehicles"].count == 2
        assert stats.fields["vehicles"].mean == pytest.approx(1.0)

    def test_hour_skips_missing_values(self):
        records = [make_accident(hour=None), make_accident(hour=0), make_accident(hour=10)]
        stats = calculate_descriptive_stats(records)

        assert stats.fields["hour"].count == 2
        assert stats.fields["hour"].mean == pytest.approx(5.0)

    def test_field_without_values_is_omitted(self):
        records = [make_accident(casualty_rate=0.0), make_accident(casualty_rate=-1.0)]
        stats = calculate_descriptive_stats(records)

        assert "casualty_rate" not in stats.fields
        assert "severity_numeric" in stats.fields

    def test_empty_records(self):
        stats = calculate_descriptive_stats([])

        assert stats.fields == {}
        assert stats.categorical.total_accidents == 0


class TestCategoricalCounts:
    """Test flag and category counts."""

    def test_counts(self):
        records = [
            make_accident(region="London", severity="Slight", is_rush_hour=True, is_urban=True),
            make_accident(region="Leeds", severity="Fatal", is_fatal=True, is_weekend=True),
            make_accident(region="London", severity="Slight", is_multi_vehicle=True, is_urban=True),
        ]
        counts = count_categories(records)

        assert counts.total_accidents == 3
        assert counts.unique_regions == 2
        assert counts.unique_severities == 2
        assert counts.rush_hour_accidents == 1
        assert counts.weekend_accidents == 1
        assert counts.urban_accidents == 2
        assert counts.fatal_accidents == 1
        assert counts.serious_accidents == 0
        assert counts.multi_vehicle_accidents == 1


class TestDatasetSummary:
    """Test the dataset overview."""

    def test_summary(self):
        dataset = make_dataset(
            accidents=[
                make_accident(year=2014, month=3, weather="2"),
                make_accident(year=2015, month=1, region="Leeds"),
                make_accident(year=None, month=None),
            ],
            supplemental=[make_supplemental()],
            authorities={"E09000033": "Westminster"},
        )
        summary = summarize_dataset(dataset)

        assert summary.total_accidents == 3
        assert summary.supplemental_accidents == 1
        assert summary.local_authorities == 1
        assert summary.years == [2014, 2015]
        assert summary.months == [1, 3]
        assert summary.regions == ["Leeds", "London"]
        assert summary.weather_codes == ["1", "2"]
        assert summary.loaded_at == dataset.loaded_at
