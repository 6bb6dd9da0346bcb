from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, getcontext
from typing import Iterable, Sequence, Tuple

from .classifier import ToleranceWindow
from .errors import InvalidMeasurement

getcontext().prec = 12

DEFAULT_SAMPLE_SIZE = 10

FORMULAS = ("population", "legacy")


@dataclass(frozen=True)
class SampleStatistics:
    mean: float
    variance: float
    std_dev: float
    failure_count: int
    failure_rate: float


def round_half_up(value: float, decimals: int) -> float:
    q = Decimal(10) ** -decimals
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def make_sample(values: Iterable[float], size: int = DEFAULT_SAMPLE_SIZE) -> Tuple[float, ...]:
    sample = tuple(float(v) for v in values)
    if len(sample) != size:
        raise InvalidMeasurement(f"Expected {size} measurements, got {len(sample)}")
    for i, v in enumerate(sample, start=1):
        if math.isnan(v) or math.isinf(v):
            raise InvalidMeasurement(f"Measurement {i} is not a finite number")
        if v < 0:
            raise InvalidMeasurement(f"Measurement {i} is negative: {v}")
    return sample


def sample_mean(values: Sequence[float]) -> float:
    return math.fsum(values) / len(values)


def population_variance(values: Sequence[float], mean: float) -> float:
    # Divides by n, not n - 1.
    return math.fsum((x - mean) ** 2 for x in values) / len(values)


def count_failures(values: Iterable[float], window: ToleranceWindow) -> int:
    return sum(1 for v in values if not window.contains(v))


def failure_rate(failures: int, size: int) -> float:
    """Failed units on a 0-100 scale; each unit is worth 100 / size points."""
    return round_half_up(failures * (100 / size), 3)


def summarize_sample(
    values: Sequence[float],
    window: ToleranceWindow,
    formula: str = "population",
) -> SampleStatistics:
    """Statistics over the whole sample, out-of-tolerance units included.

    ``formula="legacy"`` keeps the historic log layout where the
    standard-deviation column held the variance and the variance column held
    its square root.
    """
    if formula not in FORMULAS:
        raise ValueError(f"Unknown statistics formula: {formula}")
    if not values:
        raise InvalidMeasurement("Sample is empty")

    mean = sample_mean(values)
    variance = population_variance(values, mean)
    std_dev = math.sqrt(variance)
    if formula == "legacy":
        variance, std_dev = std_dev, variance

    failures = count_failures(values, window)
    return SampleStatistics(
        mean=mean,
        variance=variance,
        std_dev=std_dev,
        failure_count=failures,
        failure_rate=failure_rate(failures, len(values)),
    )
