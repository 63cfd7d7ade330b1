"""Numeric helpers shared by the evaluators."""

import math
from typing import Iterable


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding towards +inf."""
    return int(math.floor(value + 0.5))


def mean(values: Iterable[float]) -> float:
    """Arithmetic mean, 0 for an empty input."""
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)
