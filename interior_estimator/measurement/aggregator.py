"""
Quantity Aggregator - Sum the measurements of one line item.

An area item may carry a primary length x breadth plus any number of extra
patches; a running item a primary length plus extra segments. Both are summed
in the item's native unit (sq ft / running ft). Piece counts need no
aggregation.
"""

from typing import Any, Iterable, List, Optional, Tuple

from .units import cm_to_feet, cm_to_sq_feet, safe_float


def _pair(primary: Any) -> Optional[Tuple[float, float]]:
    """Accept a (length, breadth) tuple or an object with those attributes."""
    if primary is None:
        return None
    if isinstance(primary, (tuple, list)):
        if len(primary) != 2:
            return None
        length, breadth = primary
    elif isinstance(primary, dict):
        length, breadth = primary.get("length"), primary.get("breadth")
    else:
        length = getattr(primary, "length", None)
        breadth = getattr(primary, "breadth", None)

    length, breadth = safe_float(length), safe_float(breadth)
    # Both dimensions must be present for the primary patch to count
    if not length or not breadth:
        return None
    return length, breadth


def _get(entry: Any, key: str) -> Any:
    if isinstance(entry, dict):
        return entry.get(key)
    return getattr(entry, key, None)


def aggregate_area(primary: Any, extras: Optional[Iterable[Any]] = None) -> float:
    """
    Total square feet of an area item.

    Args:
        primary: Optional (length, breadth) in cm
        extras: Additional measurements, each with length and breadth in cm

    Returns:
        Unrounded total in sq ft
    """
    total = 0.0
    pair = _pair(primary)
    if pair is not None:
        total += cm_to_sq_feet(*pair)
    for entry in extras or ():
        total += cm_to_sq_feet(_get(entry, "length"), _get(entry, "breadth"))
    return total


def aggregate_running(primary_length: Any, extras: Optional[Iterable[Any]] = None) -> float:
    """Total running feet from a primary length and extra segments (cm)."""
    total = cm_to_feet(primary_length) if safe_float(primary_length) else 0.0
    for entry in extras or ():
        total += cm_to_feet(_get(entry, "length"))
    return total


def _format_cm(value: float) -> str:
    return f"{value:g}"


def area_display_lines(item: Any) -> Tuple[List[str], List[str]]:
    """
    Length and breadth cell lines for an area item.

    The primary pair comes first, then every extra measurement in entry order.
    """
    lengths: List[str] = []
    breadths: List[str] = []
    pair = _pair((getattr(item, "length", None), getattr(item, "breadth", None)))
    if pair is not None:
        lengths.append(_format_cm(pair[0]))
        breadths.append(_format_cm(pair[1]))
    for m in getattr(item, "measurements", None) or ():
        lengths.append(_format_cm(safe_float(_get(m, "length"))))
        breadths.append(_format_cm(safe_float(_get(m, "breadth"))))
    return lengths, breadths


def running_display_lines(item: Any) -> List[str]:
    """Running length cell lines: primary first, then the extra segments."""
    lines: List[str] = []
    primary = safe_float(getattr(item, "running_length", None))
    if primary:
        lines.append(_format_cm(primary))
    for m in getattr(item, "running_measurements", None) or ():
        lines.append(_format_cm(safe_float(_get(m, "length"))))
    return lines
