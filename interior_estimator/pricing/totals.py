"""
Estimate Totals - Subtotal, discount and grand total.

Percentage discounts are not clamped to [0, 100] and fixed discounts are not
capped at the subtotal, so a grand total can go negative. Such estimates are
logged, not corrected.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable

from ..measurement.units import safe_float
from ..models.estimate_schema import DiscountType, Estimate
from .pricer import reprice

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EstimateTotals:
    """Totals of an estimate."""
    subtotal: float = 0.0
    discount_amount: float = 0.0
    grand_total: float = 0.0

    def to_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "discount_amount": self.discount_amount,
            "grand_total": self.grand_total,
        }


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def calculate_discount(subtotal: float, discount: Any, discount_type: Any) -> float:
    discount = safe_float(discount)
    if DiscountType(discount_type or DiscountType.PERCENTAGE) is DiscountType.PERCENTAGE:
        return _finite(subtotal * discount / 100)
    return discount


def calculate_totals(items: Iterable[Any], discount: Any = 0, discount_type: Any = DiscountType.PERCENTAGE) -> EstimateTotals:
    """
    Compute totals from the items' cached totals.

    Args:
        items: Line items (their `total_amount` is summed)
        discount: Percentage or fixed amount
        discount_type: "percentage" or "fixed"

    Returns:
        EstimateTotals
    """
    subtotal = _finite(sum(safe_float(getattr(item, "total_amount", 0)) for item in items))
    discount_amount = calculate_discount(subtotal, discount, discount_type)
    grand_total = _finite(subtotal - discount_amount)

    if DiscountType(discount_type or DiscountType.PERCENTAGE) is DiscountType.PERCENTAGE:
        pct = safe_float(discount)
        if pct < 0 or pct > 100:
            logger.warning(f"Percentage discount {pct} is outside 0-100")
    if grand_total < 0:
        logger.warning(
            f"Grand total is negative ({grand_total:.2f}): discount {discount_amount:.2f} "
            f"exceeds subtotal {subtotal:.2f}"
        )

    return EstimateTotals(
        subtotal=subtotal,
        discount_amount=discount_amount,
        grand_total=grand_total,
    )


def estimate_totals(estimate: Estimate) -> EstimateTotals:
    """Totals of an estimate, from freshly priced items (stored item totals are ignored)."""
    items = [reprice(item) for item in estimate.items]
    return calculate_totals(items, estimate.discount, estimate.discount_type)


def apply_totals(estimate: Estimate) -> Estimate:
    """
    Copy of the estimate with every item repriced and the cached
    `total_amount` set to the grand total.
    """
    items = [reprice(item) for item in estimate.items]
    totals = calculate_totals(items, estimate.discount, estimate.discount_type)
    return estimate.model_copy(update={"items": items, "total_amount": totals.grand_total})
