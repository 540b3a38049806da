"""
Estimate Editing Session

An in-progress estimate is an immutable `EstimateDraft`. Each edit handler
returns a new draft; nothing is mutated in place and there is no module-level
state. Item totals are always produced by `pricing.pricer.reprice` and the
estimate totals are recomputed on every access.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Tuple

from ..measurement.units import safe_float
from ..models.estimate_schema import (
    AreaItem,
    CatalogSection,
    DiscountType,
    Estimate,
    LineItemBase,
    Measurement,
    RunningItem,
    RunningMeasurement,
)
from ..pricing.pricer import new_custom_item, new_item_from_section, reprice
from ..pricing.totals import EstimateTotals, calculate_totals

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EstimateDraft:
    """Editable estimate state."""
    items: Tuple[LineItemBase, ...] = field(default_factory=tuple)
    discount: float = 0.0
    discount_type: DiscountType = DiscountType.PERCENTAGE

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------

    @property
    def totals(self) -> EstimateTotals:
        return calculate_totals(self.items, self.discount, self.discount_type)

    def get_item(self, item_id: str) -> LineItemBase:
        for item in self.items:
            if item.id == item_id:
                return item
        raise KeyError(f"No item with id {item_id!r}")

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    def add_section(self, section: CatalogSection, item_id: Optional[str] = None) -> "EstimateDraft":
        """Append a line item seeded from a catalog section."""
        item = new_item_from_section(section, item_id=item_id)
        return replace(self, items=self.items + (item,))

    def add_custom_item(self, item_type: Any, **fields: Any) -> "EstimateDraft":
        """Append a custom item built from raw form values."""
        item = new_custom_item(item_type, **fields)
        return replace(self, items=self.items + (item,))

    def remove_item(self, item_id: str) -> "EstimateDraft":
        remaining = tuple(item for item in self.items if item.id != item_id)
        if len(remaining) == len(self.items):
            logger.debug(f"remove_item: no item with id {item_id}")
        return replace(self, items=remaining)

    def update_item(self, item_id: str, **changes: Any) -> "EstimateDraft":
        """
        Change fields of one item and reprice it.

        Raises:
            KeyError: no item has `item_id`
        """
        self.get_item(item_id)
        items = tuple(
            reprice(item, **changes) if item.id == item_id else item
            for item in self.items
        )
        return replace(self, items=items)

    def add_measurement(self, item_id: str, length: Any, breadth: Any) -> "EstimateDraft":
        """Add an extra length x breadth patch to an area item."""
        item = self.get_item(item_id)
        if not isinstance(item, AreaItem):
            raise TypeError(f"Item {item_id} is {item.type}, measurements need an area item")
        patch = Measurement(length=length, breadth=breadth)
        return self.update_item(item_id, measurements=list(item.measurements) + [patch])

    def remove_measurement(self, item_id: str, measurement_id: str) -> "EstimateDraft":
        item = self.get_item(item_id)
        if not isinstance(item, AreaItem):
            raise TypeError(f"Item {item_id} is {item.type}, measurements need an area item")
        kept = [m for m in item.measurements if m.id != measurement_id]
        return self.update_item(item_id, measurements=kept)

    def add_running_measurement(self, item_id: str, length: Any) -> "EstimateDraft":
        """Add an extra linear segment to a running item."""
        item = self.get_item(item_id)
        if not isinstance(item, RunningItem):
            raise TypeError(f"Item {item_id} is {item.type}, running segments need a running item")
        segment = RunningMeasurement(length=length)
        return self.update_item(
            item_id, running_measurements=list(item.running_measurements) + [segment]
        )

    def remove_running_measurement(self, item_id: str, measurement_id: str) -> "EstimateDraft":
        item = self.get_item(item_id)
        if not isinstance(item, RunningItem):
            raise TypeError(f"Item {item_id} is {item.type}, running segments need a running item")
        kept = [m for m in item.running_measurements if m.id != measurement_id]
        return self.update_item(item_id, running_measurements=kept)

    def set_discount(self, discount: Any, discount_type: Any = None) -> "EstimateDraft":
        new_type = DiscountType(discount_type) if discount_type else self.discount_type
        return replace(self, discount=safe_float(discount), discount_type=new_type)

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    @classmethod
    def from_estimate(cls, estimate: Estimate) -> "EstimateDraft":
        """Start an editing session from a persisted estimate, repricing every item."""
        return cls(
            items=tuple(reprice(item) for item in estimate.items),
            discount=estimate.discount,
            discount_type=estimate.discount_type,
        )

    def to_estimate(self, base: Optional[Estimate] = None) -> Estimate:
        """Persistable estimate with `total_amount` set to the grand total."""
        base = base or Estimate()
        return base.model_copy(update={
            "items": list(self.items),
            "discount": self.discount,
            "discount_type": self.discount_type,
            "total_amount": self.totals.grand_total,
        })
