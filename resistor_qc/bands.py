"""
Colour band palettes and decoding.

Every band role has its own ordered palette. Member order is the palette
order shown to the user, and member value is the numeric meaning in that
role, so "Red" decodes to digit 2 from DigitColor but to 0.02 from
ToleranceColor.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Type

from .errors import BandDecodeError


class DigitColor(enum.Enum):
    BLACK = 0
    BROWN = 1
    RED = 2
    ORANGE = 3
    YELLOW = 4
    GREEN = 5
    BLUE = 6
    VIOLET = 7
    GREY = 8
    WHITE = 9


class MultiplierColor(enum.Enum):
    SILVER = 0.01
    GOLD = 0.1
    BLACK = 1.0
    BROWN = 10.0
    RED = 100.0
    ORANGE = 1_000.0
    YELLOW = 10_000.0
    GREEN = 100_000.0
    BLUE = 1_000_000.0
    VIOLET = 10_000_000.0


class ToleranceColor(enum.Enum):
    SILVER = 0.1
    GOLD = 0.05
    BROWN = 0.01
    RED = 0.02
    GREEN = 0.005
    BLUE = 0.0025
    VIOLET = 0.001


class TempCoColor(enum.Enum):
    """Temperature coefficient in ppm/degC. Informational only."""

    BROWN = 100
    RED = 50
    ORANGE = 15
    YELLOW = 25


class BandRole(enum.Enum):
    DIGIT = "digit"
    MULTIPLIER = "multiplier"
    TOLERANCE = "tolerance"
    TEMP_COEFFICIENT = "temperature coefficient"


_PALETTES: dict[BandRole, Type[enum.Enum]] = {
    BandRole.DIGIT: DigitColor,
    BandRole.MULTIPLIER: MultiplierColor,
    BandRole.TOLERANCE: ToleranceColor,
    BandRole.TEMP_COEFFICIENT: TempCoColor,
}

# Band roles in physical order for each supported band count.
BAND_LAYOUTS: dict[int, Tuple[BandRole, ...]] = {
    4: (BandRole.DIGIT, BandRole.DIGIT, BandRole.MULTIPLIER, BandRole.TOLERANCE),
    5: (BandRole.DIGIT, BandRole.DIGIT, BandRole.DIGIT, BandRole.MULTIPLIER, BandRole.TOLERANCE),
    6: (
        BandRole.DIGIT,
        BandRole.DIGIT,
        BandRole.DIGIT,
        BandRole.MULTIPLIER,
        BandRole.TOLERANCE,
        BandRole.TEMP_COEFFICIENT,
    ),
}

SUPPORTED_BAND_COUNTS: Tuple[int, ...] = tuple(BAND_LAYOUTS)


def palette(role: BandRole) -> Tuple[enum.Enum, ...]:
    return tuple(_PALETTES[role])


def palette_names(role: BandRole) -> list[str]:
    return [color_name(c) for c in palette(role)]


def color_name(color: enum.Enum) -> str:
    return color.name.capitalize()


def color_at(role: BandRole, index: int) -> enum.Enum:
    """Return the palette member at *index* for *role*.

    Raises BandDecodeError for anything that is not an in-range integer;
    negative indexes are not treated as "from the end".
    """
    colors = palette(role)
    if isinstance(index, bool) or not isinstance(index, int):
        raise BandDecodeError(f"{role.value} band index must be an integer, got {index!r}")
    if not 0 <= index < len(colors):
        raise BandDecodeError(
            f"{role.value} band index {index} out of range 0..{len(colors) - 1}"
        )
    return colors[index]


def decode_digit(index: int) -> int:
    return color_at(BandRole.DIGIT, index).value


def decode_multiplier(index: int) -> float:
    return color_at(BandRole.MULTIPLIER, index).value


def decode_tolerance(index: int) -> float:
    return color_at(BandRole.TOLERANCE, index).value


def decode_temp_coefficient(index: int) -> int:
    return color_at(BandRole.TEMP_COEFFICIENT, index).value


@dataclass(frozen=True)
class BandSet:
    band_count: int
    digits: Tuple[DigitColor, ...]
    multiplier: MultiplierColor
    tolerance: ToleranceColor
    temp_coefficient: Optional[TempCoColor] = None

    def __post_init__(self) -> None:
        layout = BAND_LAYOUTS.get(self.band_count)
        if layout is None:
            raise BandDecodeError(f"Unsupported band count: {self.band_count}")
        if len(self.digits) != layout.count(BandRole.DIGIT):
            raise BandDecodeError(
                f"{self.band_count}-band resistor needs {layout.count(BandRole.DIGIT)} digit bands, "
                f"got {len(self.digits)}"
            )
        has_temp = BandRole.TEMP_COEFFICIENT in layout
        if has_temp != (self.temp_coefficient is not None):
            raise BandDecodeError(
                f"temperature coefficient band is {'required' if has_temp else 'not used'} "
                f"for {self.band_count}-band resistors"
            )

    @classmethod
    def from_indices(cls, band_count: int, indices: Sequence[int]) -> "BandSet":
        """Build a BandSet from palette indexes given in physical band order."""
        layout = BAND_LAYOUTS.get(band_count)
        if layout is None:
            raise BandDecodeError(f"Unsupported band count: {band_count}")
        if len(indices) != len(layout):
            raise BandDecodeError(
                f"{band_count}-band resistor needs {len(layout)} band indexes, got {len(indices)}"
            )

        colors = [color_at(role, idx) for role, idx in zip(layout, indices)]
        digits = tuple(c for role, c in zip(layout, colors) if role is BandRole.DIGIT)
        by_role = {role: c for role, c in zip(layout, colors) if role is not BandRole.DIGIT}
        return cls(
            band_count=band_count,
            digits=digits,  # type: ignore[arg-type]
            multiplier=by_role[BandRole.MULTIPLIER],  # type: ignore[arg-type]
            tolerance=by_role[BandRole.TOLERANCE],  # type: ignore[arg-type]
            temp_coefficient=by_role.get(BandRole.TEMP_COEFFICIENT),  # type: ignore[arg-type]
        )

    @property
    def digit_values(self) -> Tuple[int, ...]:
        return tuple(d.value for d in self.digits)

    @property
    def multiplier_value(self) -> float:
        return self.multiplier.value

    @property
    def tolerance_value(self) -> float:
        return self.tolerance.value

    @property
    def temp_coefficient_value(self) -> Optional[int]:
        return self.temp_coefficient.value if self.temp_coefficient is not None else None

    def describe(self) -> str:
        """Band names joined in physical order, e.g. 'Brown-Black-Red-Gold'."""
        colors: list[enum.Enum] = [*self.digits, self.multiplier, self.tolerance]
        if self.temp_coefficient is not None:
            colors.append(self.temp_coefficient)
        return "-".join(color_name(c) for c in colors)
