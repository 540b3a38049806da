"""
Document formatting helpers: money, dates and document identifiers.
"""

from datetime import date, datetime
from typing import Any, Optional, Union

from ..measurement.units import safe_float

DateLike = Union[date, datetime, None]


def format_money(value: Any, decimals: int = 2, prefix: str = "Rs ") -> str:
    """Fixed-precision amount with a literal currency prefix ("Rs 3250.00")."""
    return f"{prefix}{safe_float(value):.{decimals}f}"


def format_indian_amount(value: Any, decimals: int = 0) -> str:
    """
    Group digits the Indian way: last three, then pairs.

        1234567 -> "12,34,567"
        100000  -> "1,00,000"
    """
    number = round(safe_float(value), decimals)
    sign = "-" if number < 0 else ""
    text = f"{abs(number):.{decimals}f}"
    whole, _, fraction = text.partition(".")

    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        pairs = []
        while len(head) > 2:
            pairs.insert(0, head[-2:])
            head = head[:-2]
        if head:
            pairs.insert(0, head)
        whole = ",".join(pairs + [tail])

    return f"{sign}{whole}.{fraction}" if fraction else f"{sign}{whole}"


def _as_datetime(when: DateLike) -> datetime:
    if when is None:
        return datetime.now()
    if isinstance(when, datetime):
        return when
    return datetime(when.year, when.month, when.day)


def format_date(when: DateLike = None) -> str:
    return _as_datetime(when).strftime("%d/%m/%Y")


def _last6(document_id: Any) -> str:
    return str(document_id or "")[-6:].upper()


def estimate_number(estimate: Any) -> str:
    """EST-{year of creation}-{last six characters of the id}."""
    year = _as_datetime(getattr(estimate, "created_at", None)).year
    return f"EST-{year}-{_last6(getattr(estimate, 'id', ''))}"


def receipt_number(document_id: Any, when: DateLike = None, consolidated: bool = False) -> str:
    """RCP-{year}-{id} for one phase, RCP-ALL-{year}-{id} for all payments of an estimate."""
    year = _as_datetime(when).year
    prefix = "RCP-ALL" if consolidated else "RCP"
    return f"{prefix}-{year}-{_last6(document_id)}"


def document_filename(client_name: Optional[str], suffix: str, prefix: str = "") -> str:
    """
    File name for a generated document.

    Whitespace runs in the client name become underscores:
    ("John  Doe", "estimate") -> "John_Doe_estimate.pdf"
    """
    slug = "_".join((client_name or "").split()) or "client"
    return f"{prefix}{slug}_{suffix}.pdf"
