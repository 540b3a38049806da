"""
Excel export of an estimate: one row per line item, then the totals.
"""

import io
import logging

import pandas as pd

from ..models.estimate_schema import Estimate
from ..pricing.pricer import billable_quantity
from ..pricing.totals import apply_totals, estimate_totals
from ..report.sections import OTHER_SUBCATEGORY, UNCATEGORIZED, item_kind

logger = logging.getLogger(__name__)

UNITS = {
    "area": "sq ft",
    "pieces": "pcs",
    "running": "ft",
}

SHEET_NAME = "Estimate"


def _cell_text(value) -> str:
    return "" if pd.isna(value) else str(value)


def estimate_to_dataframe(estimate: Estimate) -> pd.DataFrame:
    """Item rows followed by Sub Total / Discount / Grand Total rows."""
    estimate = apply_totals(estimate)
    rows = []
    for i, item in enumerate(estimate.items, 1):
        kind = item_kind(item).value
        rows.append({
            "S.No": i,
            "Category": item.category_name or UNCATEGORIZED,
            "Subcategory": item.subcategory_name or OTHER_SUBCATEGORY,
            "Material": item.material_name,
            "Description": item.description,
            "Type": kind,
            "Quantity": round(billable_quantity(item), 2),
            "Unit": UNITS[kind],
            "Rate": item.amount_per_unit,
            "Total": round(item.total_amount, 2),
        })

    totals = estimate_totals(estimate)
    for label, value in (
        ("Sub Total", totals.subtotal),
        ("Discount", -totals.discount_amount),
        ("Grand Total", totals.grand_total),
    ):
        rows.append({"S.No": None, "Description": label, "Total": round(value, 2)})

    columns = ["S.No", "Category", "Subcategory", "Material", "Description",
               "Type", "Quantity", "Unit", "Rate", "Total"]
    return pd.DataFrame(rows, columns=columns)


def export_estimate_to_excel(estimate: Estimate) -> io.BytesIO:
    """
    Export an estimate to Excel.

    Args:
        estimate: Estimate to export

    Returns:
        BytesIO buffer containing the Excel file
    """
    df = estimate_to_dataframe(estimate)

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
        df.to_excel(writer, sheet_name=SHEET_NAME, index=False)

        # Auto-adjust column widths
        worksheet = writer.sheets[SHEET_NAME]
        for idx, col in enumerate(df.columns):
            # Totals rows leave most cells empty (NaN)
            max_length = max(
                df[col].map(_cell_text).map(len).max(),
                len(col)
            ) + 2
            worksheet.column_dimensions[chr(65 + idx)].width = min(max_length, 50)

    buffer.seek(0)
    logger.debug(f"Exported estimate {estimate.id} to Excel: {len(estimate.items)} items")
    return buffer
