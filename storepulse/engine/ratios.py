"""
Ratio helpers shared by every aggregation.

All implicit divisions in the engine (growth, averages, efficiency,
productivity, month-over-month differences) go through these helpers so the
zero-denominator branch lives in exactly one place.
"""

import math


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """
    Divide, returning `default` when the denominator is zero or the result
    is not finite.

    Example:
        >>> safe_divide(300.0, 4)
        75.0
        >>> safe_divide(300.0, 0)
        0.0
    """
    if not denominator:
        return default
    result = numerator / denominator
    if not math.isfinite(result):
        return default
    return result


def growth_percent(current: float, previous: float) -> float:
    """
    Percentage change from `previous` to `current`.

    Returns 0 when `previous` is not positive, never NaN or infinity.

    Example:
        >>> growth_percent(300_000, 200_000)
        50.0
        >>> growth_percent(10, 0)
        0.0
    """
    if previous <= 0:
        return 0.0
    return safe_divide(current - previous, previous) * 100.0


def change_percent(current: float, previous: float) -> float:
    """
    Percentage change allowing a negative baseline (month-over-month diffs).

    Returns 0 when `previous` is zero.
    """
    return safe_divide(current - previous, previous) * 100.0


def round_currency(value: float) -> int:
    """Round to the nearest whole currency unit, halves rounding up."""
    return int(math.floor(value + 0.5))
