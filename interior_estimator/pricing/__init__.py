"""
Pricing Engine - Line item totals and estimate totals.

This module:
- Prices area, pieces and running items from their measurements
- Seeds new items from catalog sections or custom entries
- Sums items and applies percentage or fixed discounts
"""

from .pricer import (
    billable_quantity,
    calculate_item_total,
    item_quantity,
    new_custom_item,
    new_item_from_section,
    reprice,
)
from .totals import EstimateTotals, apply_totals, calculate_totals, estimate_totals

__all__ = [
    "billable_quantity",
    "calculate_item_total",
    "item_quantity",
    "new_custom_item",
    "new_item_from_section",
    "reprice",
    "EstimateTotals",
    "apply_totals",
    "calculate_totals",
    "estimate_totals",
]
