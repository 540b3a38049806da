"""
Measurement Engine
Centimetre site measurements to square feet and running feet.

Modules:
- units: Conversion constants, conversions and the sq ft rounding policy
- aggregator: Multi-measurement aggregation per line item
"""

from .units import (
    CM_PER_FOOT,
    SQ_CM_PER_SQ_FOOT,
    RoundingMode,
    cm_to_feet,
    cm_to_sq_feet,
    round_sq_feet,
    safe_float,
    safe_int,
)
from .aggregator import (
    aggregate_area,
    aggregate_running,
    area_display_lines,
    running_display_lines,
)

__all__ = [
    "CM_PER_FOOT",
    "SQ_CM_PER_SQ_FOOT",
    "RoundingMode",
    "cm_to_feet",
    "cm_to_sq_feet",
    "round_sq_feet",
    "safe_float",
    "safe_int",
    "aggregate_area",
    "aggregate_running",
    "area_display_lines",
    "running_display_lines",
]
