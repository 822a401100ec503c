"""
Correlation Analyzer - daily check-ins vs daily revenue.

Computes the Pearson correlation coefficient with the sum-of-products form:

    r = (n*Sxy - Sx*Sy) / sqrt((n*Sxx - Sx^2) * (n*Syy - Sy^2))

A series with zero variance (including the empty series) yields r = 0
instead of a division fault. Strength buckets on |r|:
    |r| > 0.7 -> strong, |r| > 0.4 -> moderate, otherwise weak.
"""

from typing import Sequence

import numpy as np
import structlog

from storepulse.models.dashboard import CorrelationResult
from storepulse.models.enums import CorrelationStrength

STRONG_THRESHOLD = 0.7
MODERATE_THRESHOLD = 0.4


class CorrelationAnalyzer:
    """
    Pearson correlation between two same-length daily series.

    Example:
        >>> analyzer = CorrelationAnalyzer()
        >>> result = analyzer.analyze([1, 2, 3, 4], [10.0, 20.0, 30.0, 40.0])
        >>> result.value, result.strength
        (1.0, <CorrelationStrength.STRONG: 'strong'>)
    """

    def __init__(self) -> None:
        self.logger = structlog.get_logger()

    def pearson(self, xs: Sequence[float], ys: Sequence[float]) -> float:
        """
        Pearson coefficient of `xs` and `ys`.

        Raises:
            ValueError: If the series lengths differ
        """
        if len(xs) != len(ys):
            raise ValueError(f"Series length mismatch: x={len(xs)}, y={len(ys)}")

        n = len(xs)
        if n == 0:
            return 0.0

        x = np.asarray(xs, dtype=np.float64)
        y = np.asarray(ys, dtype=np.float64)

        sum_x, sum_y = x.sum(), y.sum()
        var_x = n * np.dot(x, x) - sum_x * sum_x
        var_y = n * np.dot(y, y) - sum_y * sum_y

        # Relative tolerance absorbs cancellation error on constant series
        if var_x <= 1e-12 * max(1.0, n * np.dot(x, x)) or var_y <= 1e-12 * max(
            1.0, n * np.dot(y, y)
        ):
            self.logger.debug("constant_series_detected", length=n)
            return 0.0

        r = (n * np.dot(x, y) - sum_x * sum_y) / np.sqrt(var_x * var_y)
        return float(np.clip(r, -1.0, 1.0))

    @staticmethod
    def classify(r: float) -> CorrelationStrength:
        magnitude = abs(r)
        if magnitude > STRONG_THRESHOLD:
            return CorrelationStrength.STRONG
        if magnitude > MODERATE_THRESHOLD:
            return CorrelationStrength.MODERATE
        return CorrelationStrength.WEAK

    def summarize(self, r: float) -> CorrelationResult:
        """Coefficient (3 decimals) and its strength bucket."""
        return CorrelationResult(value=round(r, 3), strength=self.classify(r))

    def analyze(self, xs: Sequence[float], ys: Sequence[float]) -> CorrelationResult:
        return self.summarize(self.pearson(xs, ys))
