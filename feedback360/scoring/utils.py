"""
Statistics Primitives
feedback360/scoring/utils.py

Small, pure statistics used by the outlier detector, the confidence
calculator and the competency aggregator. Every primitive raises
EmptyInputError when handed zero values.
"""

import math
from collections import Counter
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

from feedback360.core.exceptions import DegenerateDistributionError, EmptyInputError


@dataclass(frozen=True)
class Quartiles:
    """Index-truncated quartiles (no interpolation between ranks)."""
    q1: float
    q3: float
    median: float


def _require_values(values: Sequence[float], operation: str) -> None:
    if len(values) == 0:
        raise EmptyInputError(operation)


def quartiles(values: Sequence[float]) -> Quartiles:
    """
    q1 = sorted[floor(0.25n)], q3 = sorted[floor(0.75n)], median = sorted[floor(0.5n)].

    Examples:
        >>> quartiles([5, 5, 4, 5, 1])
        Quartiles(q1=4, q3=5, median=5)
    """
    _require_values(values, "quartiles")
    ordered = sorted(values)
    n = len(ordered)
    return Quartiles(
        q1=ordered[math.floor(n * 0.25)],
        q3=ordered[math.floor(n * 0.75)],
        median=ordered[math.floor(n * 0.5)],
    )


def mean(values: Sequence[float]) -> float:
    _require_values(values, "mean")
    return sum(values) / len(values)


def variance(values: Sequence[float]) -> float:
    """Population variance: Σ(x − mean)² / n."""
    _require_values(values, "variance")
    mu = mean(values)
    return sum((v - mu) ** 2 for v in values) / len(values)


def std_dev(values: Sequence[float]) -> float:
    """Population standard deviation."""
    _require_values(values, "std_dev")
    return math.sqrt(variance(values))


def z_score(value: float, mu: float, sigma: float) -> float:
    """
    (value − mean) / std_dev.

    Raises DegenerateDistributionError when sigma is zero.
    """
    if sigma == 0:
        raise DegenerateDistributionError(value, mu)
    return (value - mu) / sigma


def mode(values: Sequence[float]) -> float:
    """Most frequent value; ties go to the smallest value."""
    _require_values(values, "mode")
    counts = Counter(sorted(values))
    best, best_count = None, 0
    for value, count in counts.items():
        if count > best_count:
            best, best_count = value, count
    return best


def round_half_up(value: float, places: int = 3) -> float:
    """Round with ROUND_HALF_UP semantics (2.0005 → 2.001, not banker's rounding)."""
    quantum = Decimal(10) ** -places
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def clamp(value: float, min_val: float = 0.0, max_val: float = 1.0) -> float:
    """Clamp value to range [min_val, max_val]."""
    return max(min_val, min(max_val, value))
