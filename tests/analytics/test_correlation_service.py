"""
Unit tests for the correlation analysis service.
"""

import pytest
import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../backend')))

from accident_analytics.schemas.analytics import CorrelationStrength
from accident_analytics.services.correlation_service import (
    CorrelationAnalysisService,
    classify_strength,
    correlation_p_value,
    pearson_correlation,
)
from record_factory import make_accident


def entry(result, field_a, field_b):
    return result.matrix[result.fields.index(field_a)][result.fields.index(field_b)]


def varied_records(count=20):
    """Records whose fields vary in different, partly related ways."""
    return [
        make_accident(
            severity_numeric=1 + i % 3,
            vehicles=1 + i % 4,
            casualties=1 + (i * 7) % 5,
            speed_limit=20.0 + 10 * (i % 6),
            hour=(i * 5) % 24,
            casualty_rate=0.1 + 0.05 * ((i * 3) % 7),
        )
        for i in range(count)
    ]


class TestPearson:
    """Test the Pearson coefficient."""

    def test_perfect_positive(self):
        assert pearson_correlation([1, 2, 3, 4], [2, 4, 6, 8]) == pytest.approx(1.0)

    def test_perfect_negative(self):
        assert pearson_correlation([1, 2, 3, 4], [8, 6, 4, 2]) == pytest.approx(-1.0)

    def test_known_value(self):
        # sxy = 8, sxx = syy = 10
        assert pearson_correlation([1, 2, 3, 4, 5], [2, 1, 4, 3, 5]) == pytest.approx(0.8)

    def test_zero_variance_gives_zero(self):
        assert pearson_correlation([3, 3, 3], [1, 2, 3]) == 0.0

    def test_empty_gives_zero(self):
        assert pearson_correlation([], []) == 0.0


class TestStrength:
    """Test strength labels and p-values."""

    @pytest.mark.parametrize("r, label", [
        (0.71, CorrelationStrength.STRONG),
        (-0.9, CorrelationStrength.STRONG),
        (0.7, CorrelationStrength.MODERATE),
        (-0.51, CorrelationStrength.MODERATE),
        (0.5, CorrelationStrength.WEAK),
        (0.31, CorrelationStrength.WEAK),
    ])
    def test_classify(self, r, label):
        assert classify_strength(r) == label

    def test_p_value(self):
        assert correlation_p_value(0.0, 10) == pytest.approx(1.0)
        assert correlation_p_value(0.9, 30) < 0.001
        assert correlation_p_value(1.0, 10) == 0.0

    def test_p_value_needs_three_samples(self):
        assert correlation_p_value(0.5, 2) is None


class TestCorrelationMatrix:
    """Test the full correlation matrix."""

    def setup_method(self):
        self.service = CorrelationAnalysisService()

    def test_matrix_is_symmetric_and_bounded(self):
        result = self.service.compute_matrix(varied_records())
        size = len(result.fields)

        assert result.fields == [
            "severity_numeric", "vehicles", "casualties", "speed_limit", "hour", "casualty_rate",
        ]
        for i in range(size):
            assert result.matrix[i][i] == pytest.approx(1.0)
            for j in range(size):
                assert -1.0 <= result.matrix[i][j] <= 1.0
                assert result.matrix[i][j] == pytest.approx(result.matrix[j][i])

    def test_constant_field_has_zero_row(self):
        records = [make_accident(vehicles=v, speed_limit=30.0) for v in (1, 2, 3, 4)]

        result = self.service.compute_matrix(records)

        assert entry(result, "speed_limit", "vehicles") == 0.0
        assert entry(result, "speed_limit", "speed_limit") == 0.0

    def test_length_mismatch_gives_zero(self):
        records = [make_accident(hour=h, vehicles=h + 1) for h in (1, 2, 3, 4)]
        records.append(make_accident(hour=None, vehicles=9))

        result = self.service.compute_matrix(records)

        assert result.sample_sizes["hour"] == 4
        assert result.sample_sizes["vehicles"] == 5
        assert entry(result, "hour", "vehicles") == 0.0
        assert entry(result, "vehicles", "hour") == 0.0
        assert entry(result, "hour", "hour") == pytest.approx(1.0)

    def test_field_without_values_is_dropped(self):
        records = [make_accident(hour=None, vehicles=v) for v in (1, 2, 3)]

        result = self.service.compute_matrix(records)

        assert "hour" not in result.fields
        assert len(result.matrix) == len(result.fields) == 5

    def test_custom_fields(self):
        service = CorrelationAnalysisService(fields=["vehicles", "casualties"])
        records = [make_accident(vehicles=v, casualties=2 * v) for v in (1, 2, 3)]

        result = service.compute_matrix(records)

        assert result.fields == ["vehicles", "casualties"]
        assert entry(result, "vehicles", "casualties") == pytest.approx(1.0)


class TestKeyCorrelations:
    """Test the notable-pair report."""

    def test_report(self):
        service = CorrelationAnalysisService(fields=["vehicles", "casualties", "speed_limit"])
        records = [
            make_accident(vehicles=v, casualties=2 * v, speed_limit=100.0 - 10 * v + (v % 2) * 15)
            for v in range(1, 9)
        ]

        report = service.analyze(records)

        assert [(p.field_a, p.field_b) for p in report.pairs] == [
            ("vehicles", "casualties"),
            ("vehicles", "speed_limit"),
            ("casualties", "speed_limit"),
        ]
        by_pair = {(k.field_a, k.field_b): k for k in report.key_correlations}
        strong = by_pair[("vehicles", "casualties")]
        assert strong.strength == CorrelationStrength.STRONG
        assert strong.direction == "positive"
        assert strong.n_samples == 8
        assert strong.p_value == 0.0 or strong.p_value < 1e-6

        negative = by_pair[("vehicles", "speed_limit")]
        assert negative.direction == "negative"
        assert abs(negative.coefficient) > 0.3

    def test_threshold_is_exclusive(self):
        service = CorrelationAnalysisService(fields=["vehicles", "casualties"], report_threshold=1.0)
        records = [make_accident(vehicles=v, casualties=v) for v in (1, 2, 3)]

        assert service.analyze(records).key_correlations == []

    def test_weak_pairs_are_not_reported(self):
        service = CorrelationAnalysisService(fields=["vehicles", "casualties"])
        # sxy = 0
        records = [make_accident(vehicles=v, casualties=c) for v, c in [(1, 1), (2, 3), (3, 1), (2, 1)]]

        report = service.analyze(records)

        assert report.pairs[0].coefficient == pytest.approx(0.0, abs=1e-12)
        assert report.key_correlations == []
