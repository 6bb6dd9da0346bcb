from __future__ import annotations

from typing import Sequence

from .bands import BAND_LAYOUTS, BandRole, BandSet
from .errors import BandDecodeError


def compute_nominal(band_count: int, digits: Sequence[int], multiplier: float) -> float:
    """Nominal resistance in ohms for the decoded digits and multiplier.

    4-band codes carry two significant digits, 5- and 6-band codes carry
    three. The 6-band temperature coefficient plays no part here. The result
    is not rounded.
    """
    layout = BAND_LAYOUTS.get(band_count)
    if layout is None:
        raise BandDecodeError(f"Unsupported band count: {band_count}")
    expected = layout.count(BandRole.DIGIT)
    if len(digits) != expected:
        raise BandDecodeError(f"{band_count}-band resistor needs {expected} digits, got {len(digits)}")

    significand = 0
    for d in digits:
        if isinstance(d, bool) or not isinstance(d, int) or not 0 <= d <= 9:
            raise BandDecodeError(f"Digit out of range 0..9: {d!r}")
        significand = significand * 10 + d
    return significand * multiplier


def nominal_from_bands(bands: BandSet) -> float:
    return compute_nominal(bands.band_count, bands.digit_values, bands.multiplier_value)


def format_ohms(ohms: float) -> str:
    """Format *ohms* as a compact SI string (Ω / kΩ / MΩ), stripping '.0'."""
    if ohms >= 1_000_000:
        scaled, unit = ohms / 1_000_000, "MΩ"
    elif ohms >= 1_000:
        scaled, unit = ohms / 1_000, "kΩ"
    else:
        scaled, unit = ohms, "Ω"

    formatted = f"{scaled:.2f}".rstrip("0").rstrip(".")
    return f"{formatted}{unit}"
