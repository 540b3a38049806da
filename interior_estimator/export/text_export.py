"""
Plain-text estimate for sharing outside the PDF.
"""

from datetime import datetime
from typing import List, Optional

from ..models.estimate_schema import (
    AreaItem,
    Client,
    DiscountType,
    Estimate,
    LineItemBase,
    PiecesItem,
    RunningItem,
)
from ..pricing.totals import apply_totals, estimate_totals
from ..report.formatting import format_date, format_money
from ..report.profile import DocumentProfile, load_document_profile

RULE = "-" * 80
TITLE_RULE = "=" * 80


def _cm(value: float) -> str:
    return f"{value:g}cm"


def item_dimensions(item: LineItemBase) -> str:
    """'300cm x 200cm', '4 pieces' or '1000cm running'; every patch is listed."""
    if isinstance(item, AreaItem):
        patches = []
        if item.length and item.breadth:
            patches.append(f"{_cm(item.length)} x {_cm(item.breadth)}")
        patches += [f"{_cm(m.length)} x {_cm(m.breadth)}" for m in item.measurements]
        return ", ".join(patches) or "-"
    if isinstance(item, PiecesItem):
        return f"{item.pieces} pieces"
    if isinstance(item, RunningItem):
        runs = [item.running_length] if item.running_length else []
        runs += [m.length for m in item.running_measurements]
        return ", ".join(f"{_cm(r)} running" for r in runs) or "-"
    return "-"


def render_estimate_text(estimate: Estimate, client: Optional[Client] = None,
                         profile: Optional[DocumentProfile] = None,
                         generated_at: Optional[datetime] = None) -> str:
    """
    Shareable plain-text version of an estimate.

    Amounts use the totals precision and currency prefix of the profile.
    """
    profile = profile or load_document_profile()
    estimate = apply_totals(estimate)
    totals = estimate_totals(estimate)

    def money(value: float) -> str:
        return format_money(value, profile.totals_decimals, profile.currency_prefix)

    lines: List[str] = [
        TITLE_RULE,
        "INTERIOR ESTIMATE".center(80).rstrip(),
        TITLE_RULE,
        "",
        "ESTIMATE DETAILS:",
        RULE,
        f"Estimate Name: {estimate.estimate_name}",
        f"Created Date: {format_date(estimate.created_at)}",
        f"Estimate ID: {estimate.id}",
        "",
    ]

    if client is not None:
        lines += [
            "CLIENT INFORMATION:",
            RULE,
            f"Name: {client.name}",
            f"Email: {client.email}",
            f"Phone: {client.phone}",
            f"Location: {client.location}",
            "",
        ]

    lines += ["ESTIMATE ITEMS:", RULE]
    for index, item in enumerate(estimate.items, 1):
        lines.append(f"{index:02d}. {item.material_name:<30} | {item_dimensions(item)}")
        lines.append(f"        Description: {item.description}")
        lines.append(f"        Amount: {money(item.total_amount)}")
        lines.append("")

    lines += ["SUMMARY:", RULE, f"Subtotal: {money(totals.subtotal)}"]
    if estimate.discount > 0:
        if estimate.discount_type is DiscountType.PERCENTAGE:
            label = f"{estimate.discount:g}%"
        else:
            label = money(estimate.discount)
        lines.append(f"Discount ({label}): -{money(totals.discount_amount)}")
    lines += [
        RULE,
        f"GRAND TOTAL: {money(totals.grand_total)}",
        RULE,
        "",
        f"Generated on: {(generated_at or datetime.now()).strftime('%d/%m/%Y %H:%M')}",
        f"{profile.company_name} | {profile.website} | {profile.email}",
    ]
    return "\n".join(lines)
