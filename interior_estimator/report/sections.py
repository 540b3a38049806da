"""
Document Section Organizer

Groups line items into category -> subcategory -> items (first-seen order)
and decides the table columns for each subcategory.

`prepare_for_export` is the boundary between an editable estimate and one
that can be rendered: it reprices every item, recomputes totals and runs the
structural checks. Nothing downstream of it raises on data problems.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from ..errors import EmptyGroupError, UnsupportedItemTypeError
from ..measurement.aggregator import area_display_lines, running_display_lines
from ..measurement.units import round_sq_feet
from ..models.estimate_schema import (
    AreaItem,
    Estimate,
    ItemType,
    LineItemBase,
    PiecesItem,
    RunningItem,
)
from ..pricing.pricer import item_quantity
from ..pricing.totals import EstimateTotals, apply_totals, estimate_totals
from .formatting import format_money
from .profile import DocumentProfile

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"
OTHER_SUBCATEGORY = "Other"
EMPTY_CELL = "-"

SectionMap = Dict[str, Dict[str, List[LineItemBase]]]


# =============================================================================
# COLUMN LAYOUT
# =============================================================================

# (header, relative width) per item type, in display order
COLUMN_GROUPS: Dict[ItemType, Tuple[Tuple[str, float], ...]] = {
    ItemType.AREA: (("Length (cm)", 22.0), ("Breadth (cm)", 22.0), ("Sq Ft", 16.0)),
    ItemType.PIECES: (("Pieces", 16.0),),
    ItemType.RUNNING: (("Run (cm)", 22.0), ("Feet", 16.0)),
}

RATE_HEADERS = {
    ItemType.AREA: "Amount per sq ft",
    ItemType.PIECES: "Amount per piece",
    ItemType.RUNNING: "Amount per ft",
}

DESCRIPTION_COLUMN = ("Description", 70.0)
TOTAL_COLUMN = ("Total", 26.0)
RATE_WIDTH = 26.0


def item_kind(item: Any) -> ItemType:
    """
    Item type of a line item model.

    Raises:
        UnsupportedItemTypeError: not an area, pieces or running item
    """
    if isinstance(item, AreaItem):
        return ItemType.AREA
    if isinstance(item, PiecesItem):
        return ItemType.PIECES
    if isinstance(item, RunningItem):
        return ItemType.RUNNING
    raise UnsupportedItemTypeError(item)


@dataclass(frozen=True)
class TableLayout:
    """Columns of one subcategory table."""
    item_types: Tuple[ItemType, ...]
    headers: Tuple[str, ...]
    weights: Tuple[float, ...]

    @property
    def is_mixed(self) -> bool:
        return len(self.item_types) > 1

    def column_index(self, header: str) -> int:
        return self.headers.index(header)

    def column_widths(self, total_width: float) -> List[float]:
        """Split `total_width` across the columns by weight."""
        scale = total_width / sum(self.weights)
        return [w * scale for w in self.weights]


def select_columns(items: Sequence[Any], group: str = "") -> TableLayout:
    """
    Union of the columns needed by the item types in a group.

    Raises:
        EmptyGroupError: no items
        UnsupportedItemTypeError: an item outside area/pieces/running
    """
    if not items:
        raise EmptyGroupError(group)

    present = {item_kind(item) for item in items}
    item_types = tuple(t for t in ItemType if t in present)

    columns = [DESCRIPTION_COLUMN]
    for item_type in item_types:
        columns.extend(COLUMN_GROUPS[item_type])
    rate_header = RATE_HEADERS[item_types[0]] if len(item_types) == 1 else "Rate"
    columns.append((rate_header, RATE_WIDTH))
    columns.append(TOTAL_COLUMN)

    return TableLayout(
        item_types=item_types,
        headers=tuple(header for header, _ in columns),
        weights=tuple(weight for _, weight in columns),
    )


def _description_cell(item: LineItemBase) -> str:
    text = item.description
    if item.material_name:
        material = f"Material: {item.material_name}"
        text = f"{text}\n{material}" if text else material
    return text


def build_table_rows(items: Sequence[LineItemBase], layout: TableLayout,
                     profile: DocumentProfile) -> List[List[str]]:
    """
    Body rows (strings) for one subcategory table.

    Multi-measurement cells hold one value per line, primary first.
    Columns an item does not use hold "-".
    """
    rows = []
    for item in items:
        cells = {header: EMPTY_CELL for header in layout.headers}
        cells["Description"] = _description_cell(item)
        kind = item_kind(item)

        if kind is ItemType.AREA:
            lengths, breadths = area_display_lines(item)
            sq_ft = round_sq_feet(item_quantity(item), profile.area_display_rounding)
            cells["Length (cm)"] = "\n".join(lengths) or EMPTY_CELL
            cells["Breadth (cm)"] = "\n".join(breadths) or EMPTY_CELL
            cells["Sq Ft"] = f"{sq_ft:.1f}"
        elif kind is ItemType.PIECES:
            cells["Pieces"] = str(item.pieces)
        else:
            runs = running_display_lines(item)
            cells["Run (cm)"] = "\n".join(runs) or EMPTY_CELL
            cells["Feet"] = f"{item_quantity(item):.2f}"

        rate = format_money(item.amount_per_unit, profile.table_decimals, profile.currency_prefix)
        cells[layout.headers[-2]] = rate
        cells["Total"] = format_money(item.total_amount, profile.table_decimals, profile.currency_prefix)
        rows.append([cells[header] for header in layout.headers])
    return rows


# =============================================================================
# SECTION GROUPING
# =============================================================================

def organize_sections(items: Sequence[LineItemBase]) -> SectionMap:
    """Group items by category then subcategory, in first-seen order."""
    sections: SectionMap = {}
    for item in items:
        category = item.category_name or UNCATEGORIZED
        subcategory = item.subcategory_name or OTHER_SUBCATEGORY
        sections.setdefault(category, {}).setdefault(subcategory, []).append(item)
    return sections


@dataclass(frozen=True)
class SectionBlock:
    """One subcategory table as it will be placed on the page."""
    category: str
    subcategory: str
    items: Tuple[LineItemBase, ...]
    layout: TableLayout
    first_in_category: bool


@dataclass(frozen=True)
class ExportReadyEstimate:
    """An estimate that passed every structural check and can be rendered."""
    estimate: Estimate
    totals: EstimateTotals
    sections: SectionMap = field(default_factory=dict)
    blocks: Tuple[SectionBlock, ...] = ()


def prepare_for_export(estimate: Estimate) -> ExportReadyEstimate:
    """
    Validate and normalize an estimate for document output.

    Raises:
        UnsupportedItemTypeError: an item of unknown type
        EmptyGroupError: a section group without items
    """
    for item in estimate.items:
        item_kind(item)

    ready = apply_totals(estimate)
    totals = estimate_totals(ready)
    sections = organize_sections(ready.items)

    blocks = []
    for category, subcategories in sections.items():
        for index, (subcategory, group) in enumerate(subcategories.items()):
            layout = select_columns(group, group=f"{category} / {subcategory}")
            blocks.append(SectionBlock(
                category=category,
                subcategory=subcategory,
                items=tuple(group),
                layout=layout,
                first_in_category=index == 0,
            ))

    logger.debug(
        f"Prepared estimate {ready.id}: {len(ready.items)} items, {len(sections)} categories, "
        f"{len(blocks)} tables"
    )
    return ExportReadyEstimate(
        estimate=ready,
        totals=totals,
        sections=sections,
        blocks=tuple(blocks),
    )
