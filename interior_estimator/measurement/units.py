"""
Unit Conversion Utilities
Site measurements are taken in centimetres; pricing is per square foot,
per running foot or per piece.

- cm x cm -> sq ft (divide by 929.03)
- cm -> running ft (divide by 30.48)
- Half-up rounding of square feet before pricing
"""

import math
from enum import Enum
from typing import Any

SQ_CM_PER_SQ_FOOT = 929.03
CM_PER_FOOT = 30.48


class RoundingMode(str, Enum):
    """Rounding applied to aggregated square feet."""
    WHOLE = "whole"  # half up to the next whole number
    HALF = "half"    # up to the next half


def safe_float(value: Any, default: float = 0.0) -> float:
    """
    Coerce form input to a finite float.

    Empty strings, None, non-numeric text, NaN and infinities all give
    `default`. Interactive editing passes through these states while the
    user types.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    return result if math.isfinite(result) else default


def safe_int(value: Any, default: int = 0) -> int:
    """Coerce to int by truncation ("4.7" -> 4)."""
    number = safe_float(value, float(default))
    return int(number)


def finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def cm_to_sq_feet(length_cm: Any, breadth_cm: Any) -> float:
    """
    Convert a length x breadth patch in centimetres to square feet.

    Args:
        length_cm: Length in cm
        breadth_cm: Breadth in cm

    Returns:
        Area in sq ft, or 0 if the result is not finite
    """
    sq_cm = safe_float(length_cm) * safe_float(breadth_cm)
    return finite_or_zero(sq_cm / SQ_CM_PER_SQ_FOOT)


def cm_to_feet(length_cm: Any) -> float:
    """Convert a running length in centimetres to feet."""
    return finite_or_zero(safe_float(length_cm) / CM_PER_FOOT)


def round_sq_feet(value: Any, mode: RoundingMode = RoundingMode.WHOLE) -> float:
    """
    Round aggregated square feet.

    WHOLE: floor, then step up to the next integer when the fraction is
    >= 0.5 (2.5 -> 3, 2.49999 -> 2). Not banker's rounding.

    HALF: floor, then step up to the next half (2.3 -> 2.5, 2.6 -> 3).

    Only area quantities are rounded; piece counts and running feet are not.
    """
    number = safe_float(value)
    floor_value = math.floor(number)
    fraction = number - floor_value

    mode = RoundingMode(mode)
    if mode is RoundingMode.HALF:
        if fraction == 0:
            return float(floor_value)
        if fraction <= 0.5:
            return floor_value + 0.5
        return float(floor_value + 1)

    if fraction >= 0.5:
        return float(floor_value + 1)
    return float(floor_value)
