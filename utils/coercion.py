"""Lenient numeric parsing for user edits and model payloads.

Values that do not parse as numbers fall back to a safe default instead of
raising, so the computation engines stay total over well-typed input.
"""

import math
from typing import Any, Optional


def coerce_float(value: Any, default: float = 0.0) -> float:
    """Parse a float leniently.

    Accepts ints, floats, and numeric strings (a comma decimal separator is
    tolerated). Booleans, None, NaN, infinities and garbage return `default`.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str):
        text = value.strip().replace(" ", "").replace(" ", "").replace(",", ".")
        if not text:
            return default
        try:
            result = float(text)
        except ValueError:
            return default
    else:
        return default

    if math.isnan(result) or math.isinf(result):
        return default
    return result


def coerce_positive_int(value: Any, default: int, maximum: Optional[int] = None) -> int:
    """Parse a whole number >= 1, returning `default` otherwise.

    Fractional input is truncated toward zero ("45.7" -> 45). Values above
    `maximum`, when given, also return `default`.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        result = value
    else:
        parsed = coerce_float(value, default=float("nan"))
        if math.isnan(parsed):
            return default
        result = int(parsed)
    if result < 1 or (maximum is not None and result > maximum):
        return default
    return result
