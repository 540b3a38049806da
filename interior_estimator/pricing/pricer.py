"""
Line-Item Pricer - Derive a line item's total from its measurements.

    area:    round_sq_feet(aggregate sq ft) x amount per sq ft
    pieces:  pieces x amount per piece
    running: aggregate running ft x amount per ft (never rounded)

`reprice` is the only place a line item's `total_amount` is written.
"""

import logging
import math
from typing import Any, Optional

from ..errors import UnsupportedItemTypeError
from ..measurement.aggregator import aggregate_area, aggregate_running
from ..measurement.units import RoundingMode, round_sq_feet, safe_float, safe_int
from ..models.estimate_schema import (
    AreaItem,
    CatalogSection,
    ItemType,
    LineItemBase,
    PiecesItem,
    RunningItem,
    parse_line_item,
)

logger = logging.getLogger(__name__)


def item_quantity(item: LineItemBase) -> float:
    """
    Quantity in the item's native unit, before rounding.

    Raises:
        UnsupportedItemTypeError: item is not one of the three line item models
    """
    if isinstance(item, AreaItem):
        return aggregate_area((item.length, item.breadth), item.measurements)
    if isinstance(item, PiecesItem):
        return float(item.pieces)
    if isinstance(item, RunningItem):
        return aggregate_running(item.running_length, item.running_measurements)
    raise UnsupportedItemTypeError(item)


def billable_quantity(item: LineItemBase) -> float:
    """Quantity the price is multiplied by; only area is rounded."""
    quantity = item_quantity(item)
    if isinstance(item, AreaItem):
        return round_sq_feet(quantity, RoundingMode.WHOLE)
    return quantity


def calculate_item_total(item: LineItemBase) -> float:
    """Total cost of one item. Never NaN or infinite."""
    total = billable_quantity(item) * safe_float(item.amount_per_unit)
    return total if math.isfinite(total) else 0.0


def reprice(item: LineItemBase, **changes: Any) -> LineItemBase:
    """
    Apply field changes to an item and recompute its total.

    Changes use field names (`length`, `pieces`, `amount_per_unit`, ...) and
    go through the same coercion as persisted data. Any `total_amount` in
    `changes` is ignored.

    Returns:
        New item with `total_amount` consistent with its quantities
    """
    changes.pop("total_amount", None)
    data = item.model_dump()
    data.update(changes)
    updated = parse_line_item(data)
    total = calculate_item_total(updated)
    return updated.model_copy(update={"total_amount": total})


def new_item_from_section(section: CatalogSection, item_id: Optional[str] = None) -> LineItemBase:
    """
    Seed a line item from a catalog section.

    The section amount becomes the unit price. Area and running items start
    with no dimensions; a pieces item starts at one piece.
    """
    data = {
        "section_id": section.id,
        "section_name": section.material,
        "category_name": section.category_name,
        "subcategory_name": section.subcategory_name,
        "material_name": section.material,
        "description": section.description,
        "amount_per_unit": section.amount,
        "type": section.type.value,
    }
    if item_id:
        data["id"] = item_id
    if section.type is ItemType.PIECES:
        data["pieces"] = 1

    item = reprice(parse_line_item(data))
    logger.debug(f"Seeded {section.type.value} item '{section.material}' from section {section.id}")
    return item


def new_custom_item(
    item_type: Any,
    category_name: str,
    subcategory_name: str,
    material_name: str,
    description: str = "",
    amount_per_unit: Any = 0,
    length: Any = None,
    breadth: Any = None,
    pieces: Any = None,
    running_length: Any = None,
    measurements: Optional[list] = None,
    item_id: Optional[str] = None,
) -> LineItemBase:
    """Build a custom (non-catalog) item from raw form values and price it."""
    data = {
        "section_id": "custom",
        "section_name": material_name,
        "category_name": category_name,
        "subcategory_name": subcategory_name,
        "material_name": material_name,
        "description": description,
        "amount_per_unit": amount_per_unit,
        "type": item_type,
    }
    if item_id:
        data["id"] = item_id

    item = parse_line_item(data)
    if isinstance(item, AreaItem):
        return reprice(item, length=length, breadth=breadth, measurements=measurements or [])
    if isinstance(item, PiecesItem):
        return reprice(item, pieces=safe_int(pieces))
    return reprice(item, running_length=running_length)
