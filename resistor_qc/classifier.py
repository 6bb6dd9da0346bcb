from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional


@dataclass(frozen=True)
class ToleranceWindow:
    low: float
    high: float

    def contains(self, value: float) -> bool:
        return self.low <= value <= self.high


@dataclass
class ClassificationResult:
    verdict: str  # PASS, FAIL
    reason: Optional[str] = None


def tolerance_window(nominal: float, tolerance: float) -> ToleranceWindow:
    return ToleranceWindow(low=nominal - nominal * tolerance, high=nominal + nominal * tolerance)


def classify_value(value: float, window: ToleranceWindow) -> ClassificationResult:
    if value > window.high:
        return ClassificationResult("FAIL", f"{value} > {window.high}")
    if value < window.low:
        return ClassificationResult("FAIL", f"{value} < {window.low}")
    return ClassificationResult("PASS", f"{window.low} <= {value} <= {window.high}")


def classify_sample(values: Iterable[float], window: ToleranceWindow) -> List[ClassificationResult]:
    return [classify_value(v, window) for v in values]
