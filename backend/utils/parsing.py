# utils/parsing.py
import math
import re
from typing import Any

from constants.station_config import CURRENCY_DECIMALS, LITRE_DECIMALS, MAX_COUNT, MAX_DECIMAL

# leading numeric prefix, the way a form input's text is read ("12.5abc" -> 12.5)
_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")


def parse_decimal(raw: Any) -> float:
    """
    Coerce raw field input to a float, falling back to 0.0.

    Never raises: empty strings, words, None, NaN and absurdly large
    magnitudes all become 0.
    """
    if raw is None or isinstance(raw, bool):
        return 0.0
    if isinstance(raw, (int, float)):
        try:
            value = float(raw)
        except OverflowError:
            return 0.0
    else:
        match = _FLOAT_PREFIX.match(str(raw))
        if not match:
            return 0.0
        try:
            value = float(match.group(0))
        except (TypeError, ValueError, OverflowError):
            return 0.0
    if math.isnan(value) or math.isinf(value) or abs(value) > MAX_DECIMAL:
        return 0.0
    return value


def parse_count(raw: Any) -> int:
    """Coerce raw input to an integer note/item count, falling back to 0."""
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        if math.isnan(raw) or math.isinf(raw):
            return 0
        value = int(raw)
    else:
        match = _INT_PREFIX.match(str(raw))
        if not match:
            return 0
        digits = match.group(0).strip().lstrip("+-").lstrip("0")
        # anything this long is out of range; skip the big-int conversion
        if len(digits) > len(str(MAX_COUNT)):
            return 0
        value = int(match.group(0))
    if abs(value) > MAX_COUNT:
        return 0
    return value


def round_currency(value: float) -> float:
    return round(float(value or 0.0), CURRENCY_DECIMALS)


def round_litres(value: float) -> float:
    return round(float(value or 0.0), LITRE_DECIMALS)
