"""
Correlation Analysis Service

Computes a Pearson correlation matrix over the numeric accident fields and
reports the pairs with a notable linear relationship.

Columns are filtered for missing values independently, so two columns of
different length cannot be paired; such entries are reported as 0 rather
than aligned record by record.
"""

import logging
import math
from typing import Dict, List, Optional, Sequence

import numpy as np
from scipy import stats

from ..core.config import settings
from ..models.accident import AccidentRecord
from ..models.analysis import CorrelationMatrix
from ..schemas.analytics import (
    CorrelationPair,
    CorrelationReport,
    CorrelationStrength,
    KeyCorrelation,
)

logger = logging.getLogger(__name__)

CORRELATION_FIELDS = [
    "severity_numeric",
    "vehicles",
    "casualties",
    "speed_limit",
    "hour",
    "casualty_rate",
]


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson coefficient of two equally long samples.

    Returns 0 for empty input or when either sample has zero variance.
    """
    n = min(len(x), len(y))
    if n == 0:
        return 0.0

    x_arr = np.asarray(x[:n], dtype=float)
    y_arr = np.asarray(y[:n], dtype=float)
    dx = x_arr - x_arr.mean()
    dy = y_arr - y_arr.mean()

    numerator = float(np.sum(dx * dy))
    denominator = math.sqrt(float(np.sum(dx * dx)) * float(np.sum(dy * dy)))
    if denominator == 0:
        return 0.0
    # Rounding can push |r| a hair past 1
    return max(-1.0, min(1.0, numerator / denominator))


def classify_strength(coefficient: float) -> CorrelationStrength:
    magnitude = abs(coefficient)
    if magnitude > 0.7:
        return CorrelationStrength.STRONG
    elif magnitude > 0.5:
        return CorrelationStrength.MODERATE
    return CorrelationStrength.WEAK


def correlation_p_value(coefficient: float, n_samples: int) -> Optional[float]:
    """Two-sided p-value of r under the t distribution with n-2 dof."""
    if n_samples <= 2:
        return None
    if abs(coefficient) >= 1.0:
        return 0.0
    t_stat = coefficient * math.sqrt((n_samples - 2) / (1.0 - coefficient ** 2))
    return float(2 * stats.t.sf(abs(t_stat), n_samples - 2))


class CorrelationAnalysisService:
    """Pearson correlation between the numeric accident fields."""

    def __init__(self, fields: Optional[List[str]] = None, report_threshold: Optional[float] = None):
        self.fields = list(fields or CORRELATION_FIELDS)
        self.report_threshold = (
            settings.CORRELATION_REPORT_THRESHOLD if report_threshold is None else report_threshold
        )

    def _columns(self, records: Sequence[AccidentRecord]) -> Dict[str, List[float]]:
        columns = {}
        for field in self.fields:
            values = [getattr(r, field) for r in records]
            columns[field] = [v for v in values if not _is_missing(v)]
        return columns

    def compute_matrix(self, records: Sequence[AccidentRecord]) -> CorrelationMatrix:
        """
        Full correlation matrix over every field that has at least one value.

        Fields with no values are left out of the matrix entirely. A pair
        whose filtered columns differ in length gets 0.

        Args:
            records: Primary accident records

        Returns:
            CorrelationMatrix
        """
        columns = self._columns(records)
        labels = [field for field in self.fields if columns[field]]
        dropped = [field for field in self.fields if not columns[field]]
        if dropped:
            logger.warning(f"⚠ No values for {', '.join(dropped)} - left out of correlation matrix")

        matrix = []
        for field_a in labels:
            row = []
            for field_b in labels:
                x, y = columns[field_a], columns[field_b]
                if len(x) != len(y):
                    row.append(0.0)
                    continue
                row.append(pearson_correlation(x, y))
            matrix.append(row)

        return CorrelationMatrix(
            fields=labels,
            matrix=matrix,
            sample_sizes={field: len(columns[field]) for field in labels},
        )

    def list_pairs(self, result: CorrelationMatrix) -> List[CorrelationPair]:
        """Every distinct field pair (upper triangle) with its coefficient."""
        pairs = []
        for i, field_a in enumerate(result.fields):
            for j in range(i + 1, len(result.fields)):
                pairs.append(CorrelationPair(
                    field_a=field_a,
                    field_b=result.fields[j],
                    coefficient=result.matrix[i][j],
                ))
        return pairs

    def key_correlations(self, result: CorrelationMatrix) -> List[KeyCorrelation]:
        """
        Pairs whose |r| exceeds the report threshold, labelled by strength.
        """
        key = []
        for pair in self.list_pairs(result):
            if abs(pair.coefficient) <= self.report_threshold:
                continue
            n_samples = result.sample_sizes.get(pair.field_a, 0)
            key.append(KeyCorrelation(
                field_a=pair.field_a,
                field_b=pair.field_b,
                coefficient=pair.coefficient,
                strength=classify_strength(pair.coefficient),
                direction="positive" if pair.coefficient > 0 else "negative",
                n_samples=n_samples,
                p_value=correlation_p_value(pair.coefficient, n_samples),
            ))
        return key

    def analyze(self, records: Sequence[AccidentRecord]) -> CorrelationReport:
        """Matrix, pair listing and key correlations in one report."""
        result = self.compute_matrix(records)
        key = self.key_correlations(result)
        logger.info(
            f"✓ Correlation matrix over {len(result.fields)} fields, "
            f"{len(key)} key correlations"
        )
        return CorrelationReport(
            fields=result.fields,
            matrix=result.matrix,
            pairs=self.list_pairs(result),
            key_correlations=key,
        )
