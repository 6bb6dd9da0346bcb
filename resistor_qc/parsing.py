from __future__ import annotations

import calendar
import math
import re

from .errors import InvalidDate, InvalidMeasurement, InvalidSelection

INT_RE = re.compile(r"[-+]?\d+", re.ASCII)
DATE_RE = re.compile(r"(\d{2})(\d{2})(\d{4})", re.ASCII)
MEASUREMENT_RE = re.compile(
    r"(?P<number>[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)\s*(?P<prefix>[kKM]?)\s*(?:(?i:ohms?)|Ω)?",
    re.ASCII,
)

SI_PREFIXES = {"": 1.0, "k": 1e3, "K": 1e3, "M": 1e6}


def parse_bounded_int(raw: str, low: int, high: int) -> int:
    text = (raw or "").strip()
    if not INT_RE.fullmatch(text):
        raise InvalidSelection("Only defined integer values will be accepted, please try again.")
    value = int(text)
    if not low <= value <= high:
        raise InvalidSelection(f"Please choose a value between {low} and {high}.")
    return value


def parse_date(raw: str) -> str:
    """Validate a ddMMyyyy date string and return it unchanged."""
    text = (raw or "").strip()
    m = DATE_RE.fullmatch(text)
    if not m:
        raise InvalidDate("Invalid date, please try again (format ddMMyyyy)")
    day, month, year = (int(g) for g in m.groups())
    if year < 1 or not 1 <= month <= 12:
        raise InvalidDate("Invalid date, please try again (format ddMMyyyy)")
    if not 1 <= day <= calendar.monthrange(year, month)[1]:
        raise InvalidDate("Invalid date, please try again (format ddMMyyyy)")
    return text


def parse_measurement(raw: str) -> float:
    """Parse a resistance reading such as '1000', '4.7k' or '2.2 MΩ' into ohms."""
    text = (raw or "").strip()
    m = MEASUREMENT_RE.fullmatch(text)
    if not m:
        raise InvalidMeasurement("Invalid value given, please try again")
    prefix = m.group("prefix")
    value = float(m.group("number")) * SI_PREFIXES[prefix]
    if math.isinf(value) or math.isnan(value):
        raise InvalidMeasurement("Invalid value given, please try again")
    if value < 0:
        raise InvalidMeasurement("Resistance cannot be negative, please try again")
    return value
