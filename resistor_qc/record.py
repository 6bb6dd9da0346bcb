from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping

from .bands import BandSet
from .classifier import tolerance_window
from .errors import RecordFormatError
from .nominal import nominal_from_bands
from .processing import DEFAULT_SAMPLE_SIZE, make_sample, summarize_sample


@dataclass(frozen=True)
class BatchRecord:
    company: str
    date: str  # ddMMyyyy
    failure_rate: float
    nominal_value: float
    tolerance: float
    mean_resistance: float
    std_deviation: float
    variance: float

    def to_row(self) -> Dict[str, str]:
        row = {}
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            # repr() keeps every float bit so a written row reads back unchanged.
            row[f.name] = value if isinstance(value, str) else repr(float(value))
        return row

    @classmethod
    def from_row(cls, row: Mapping[str, str]) -> "BatchRecord":
        kwargs = {}
        for f in dataclasses.fields(cls):
            raw = row.get(f.name)
            if raw is None:
                raise RecordFormatError(f"Missing field: {f.name}")
            if f.name in TEXT_FIELDS:
                kwargs[f.name] = raw
                continue
            try:
                kwargs[f.name] = float(raw)
            except ValueError:
                raise RecordFormatError(f"Field {f.name} is not a number: {raw!r}") from None
        return cls(**kwargs)


FIELD_NAMES = tuple(f.name for f in dataclasses.fields(BatchRecord))
TEXT_FIELDS = ("company", "date")

FIELD_LABELS = {
    "company": "Company",
    "date": "Date",
    "failure_rate": "Failure Rate (%)",
    "nominal_value": "Nominal Value (Ohms)",
    "tolerance": "Tolerance",
    "mean_resistance": "Mean (Ohms)",
    "std_deviation": "Standard Deviation",
    "variance": "Variance",
}


def assemble(
    company: str,
    date: str,
    nominal: float,
    tolerance: float,
    mean: float,
    std_dev: float,
    variance: float,
    failure_rate: float,
) -> BatchRecord:
    return BatchRecord(
        company=company,
        date=date,
        failure_rate=failure_rate,
        nominal_value=nominal,
        tolerance=tolerance,
        mean_resistance=mean,
        std_deviation=std_dev,
        variance=variance,
    )


def evaluate_batch(
    company: str,
    date: str,
    bands: BandSet,
    values: Iterable[float],
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    formula: str = "population",
) -> BatchRecord:
    """Decode *bands*, check *values* against the tolerance window and summarise."""
    sample = make_sample(values, size=sample_size)
    nominal = nominal_from_bands(bands)
    tolerance = bands.tolerance_value
    stats = summarize_sample(sample, tolerance_window(nominal, tolerance), formula=formula)
    return assemble(
        company,
        date,
        nominal,
        tolerance,
        stats.mean,
        stats.std_dev,
        stats.variance,
        stats.failure_rate,
    )
