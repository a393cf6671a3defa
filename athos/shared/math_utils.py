"""Numeric helpers shared by completion, scoring and evaluation."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up.

    Percentages are rounded this way everywhere so that 12.5 becomes 13
    rather than Python's banker's rounding result of 12.
    """
    return int(math.floor(value + 0.5))


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def mean(values: list[float]) -> float:
    """Arithmetic mean, 0 for an empty list."""
    if not values:
        return 0.0
    return sum(values) / len(values)
