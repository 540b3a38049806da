"""
Payment Receipt PDFs

Two documents for an approved estimate's payment schedule:
- a receipt for one payment phase (with bank details when paid by bank)
- a consolidated receipt listing every completed phase

Both report the project total, the amount paid so far (completed phases
only) and the balance.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from reportlab.lib import colors
from reportlab.lib.units import mm
from reportlab.platypus import Table, TableStyle

from ..errors import DocumentStructureError, NoCompletedPaymentsError
from ..measurement.units import safe_float
from ..models.estimate_schema import (
    BankAccount,
    Client,
    Estimate,
    PaymentMethod,
    PaymentPhase,
    PaymentStatus,
)
from ..pricing.totals import estimate_totals
from .formatting import document_filename, format_date, format_indian_amount, receipt_number
from .layout import (
    BANK_BAND_BG,
    FONT,
    FONT_BOLD,
    FONT_ITALIC,
    GRID_GRAY,
    HEADER_BLUE,
    NOTICE_GRAY,
    PageCursor,
    RenderResult,
    draw_banner,
    draw_company_header,
    draw_details_panel,
    draw_text,
    fill_rect,
    new_document,
)
from .profile import DocumentProfile, load_document_profile

logger = logging.getLogger(__name__)

THANK_YOU = "Thank you for your payment!"
COMPUTER_GENERATED = "This is a computer generated receipt, no signature required."


@dataclass(frozen=True)
class PaymentSummary:
    total_project_amount: float
    total_paid: float
    balance: float


def completed_phases(phases: Sequence[PaymentPhase]) -> List[PaymentPhase]:
    return [p for p in phases if p.status is PaymentStatus.COMPLETED]


def payment_summary(estimate_total: float, phases: Sequence[PaymentPhase]) -> PaymentSummary:
    """Project total, amount paid (completed phases only) and balance."""
    total = safe_float(estimate_total)
    paid = sum(p.amount for p in completed_phases(phases))
    return PaymentSummary(total_project_amount=total, total_paid=paid, balance=total - paid)


def phase_number(phases: Sequence[PaymentPhase], phase: PaymentPhase) -> int:
    """1-based position of a phase in the schedule."""
    for index, candidate in enumerate(phases):
        if candidate.id == phase.id:
            return index + 1
    raise DocumentStructureError(f"Payment phase {phase.id} is not in the payment schedule")


# =============================================================================
# DRAWING
# =============================================================================

def _amount(value: float, profile: DocumentProfile) -> str:
    return f"{profile.receipt_currency_prefix}{format_indian_amount(value, profile.receipt_decimals)}"


def _payment_table(rows: List[Tuple[str, str]]) -> Table:
    table = Table(
        [["Description", "Amount"]] + [list(r) for r in rows],
        colWidths=[100 * mm, 90 * mm],
        repeatRows=1,
    )
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BLUE),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), FONT_BOLD),
        ("FONTNAME", (0, 1), (0, -1), FONT_BOLD),
        ("FONTNAME", (1, 1), (1, -1), FONT),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
        ("GRID", (0, 0), (-1, -1), 0.5, GRID_GRAY),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]))
    return table


def _bank_table(bank: BankAccount) -> Table:
    table = Table(
        [
            ["Bank Name", bank.bank_name],
            ["Account Name", bank.account_name],
            ["Account Number", bank.account_number],
            ["IFSC Code", bank.ifsc_code],
            ["UPI ID", bank.upi_id],
        ],
        colWidths=[60 * mm, 130 * mm],
    )
    table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (0, -1), FONT_BOLD),
        ("FONTNAME", (1, 0), (1, -1), FONT),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("TOPPADDING", (0, 0), (-1, -1), 2),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
        ("GRID", (0, 0), (-1, -1), 0.5, GRID_GRAY),
    ]))
    return table


def _summary_rows(summary: PaymentSummary, profile: DocumentProfile) -> List[Tuple[str, str]]:
    return [
        ("Total Project Amount", _amount(summary.total_project_amount, profile)),
        ("Total Amount Paid", _amount(summary.total_paid, profile)),
        ("Balance Amount", _amount(summary.balance, profile)),
    ]


def _party_lines(client: Optional[Client]) -> List[str]:
    if client is None:
        return []
    return [client.name, client.location, client.phone]


def _draw_closing(cursor: PageCursor) -> None:
    """Thank-you line and the computer-generated notice near the page bottom."""
    g = cursor.geometry
    if cursor.y_pos > g.page_end_y - 10:
        cursor.new_page("receipt footer")

    footer_y = max(cursor.y_pos + 10, g.page_end_y - 20)
    draw_text(cursor.canvas, 105, footer_y, THANK_YOU, FONT, 10, align="center")
    draw_text(cursor.canvas, 105, g.footer_y - 5, COMPUTER_GENERATED, FONT_ITALIC, 9,
              NOTICE_GRAY, align="center")
    cursor.record("closing", THANK_YOU)


def _receipt_total(estimate: Estimate) -> float:
    return estimate_totals(estimate).grand_total


# =============================================================================
# ENTRY POINTS
# =============================================================================

def render_phase_receipt(estimate: Estimate, client: Optional[Client],
                         phases: Sequence[PaymentPhase], phase: PaymentPhase,
                         bank: Optional[BankAccount] = None,
                         profile: Optional[DocumentProfile] = None,
                         issued_on: Optional[date] = None) -> RenderResult:
    """
    Receipt for one payment phase.

    Raises:
        DocumentStructureError: `phase` is not part of `phases`
    """
    profile = profile or load_document_profile()
    geometry = profile.geometry
    number = phase_number(phases, phase)
    summary = payment_summary(_receipt_total(estimate), phases)
    paid_on = phase.date or issued_on or datetime.now()

    c = new_document(geometry, f"Receipt Phase {number}")
    draw_company_header(c, profile)
    draw_details_panel(
        c,
        "RECEIPT DETAILS",
        [
            f"Receipt No: {receipt_number(phase.id, issued_on)}",
            f"Date: {format_date(paid_on)}",
            f"Payment Phase: Phase {number}",
        ],
        "PAID BY",
        _party_lines(client),
    )
    draw_banner(c, "PAYMENT RECEIPT")

    cursor = PageCursor(c, geometry, geometry.first_page_start_y)
    rows = [(f"Phase {number} Payment", _amount(phase.amount, profile))] + _summary_rows(summary, profile)
    cursor.draw_table(_payment_table(rows), 10, 190)
    cursor.record("payments", f"Phase {number}")
    cursor.y_pos += 10

    method = phase.method or PaymentMethod.CASH
    cursor.ensure_space(20, "payment method")
    draw_text(c, 15, cursor.y_pos, "Payment Method:", FONT_BOLD, 11)
    draw_text(c, 15, cursor.y_pos + 10, method.value.capitalize(), FONT, 10)
    cursor.y_pos += 20

    if method is PaymentMethod.BANK and bank is not None:
        cursor.ensure_space(40, "bank details")
        fill_rect(c, 5, cursor.y_pos, 200, 8, BANK_BAND_BG)
        draw_text(c, 10, cursor.y_pos + 5, "BANK DETAILS", FONT_BOLD, 10, HEADER_BLUE)
        cursor.record("bank", bank.bank_name)
        cursor.y_pos += 10
        cursor.draw_table(_bank_table(bank), 10, 190)
        cursor.y_pos += 5

    _draw_closing(cursor)
    return cursor.finish()


def render_all_payments_receipt(estimate: Estimate, client: Optional[Client],
                                phases: Sequence[PaymentPhase],
                                profile: Optional[DocumentProfile] = None,
                                issued_on: Optional[date] = None) -> RenderResult:
    """
    Consolidated receipt: one row per completed phase plus the summary rows.

    Raises:
        NoCompletedPaymentsError: no phase is completed
    """
    completed = completed_phases(phases)
    if not completed:
        raise NoCompletedPaymentsError("There are no completed payments to generate a receipt")

    profile = profile or load_document_profile()
    geometry = profile.geometry
    summary = payment_summary(_receipt_total(estimate), phases)

    c = new_document(geometry, "Receipt All Payments")
    draw_company_header(c, profile)
    draw_details_panel(
        c,
        "RECEIPT DETAILS",
        [
            f"Receipt No: {receipt_number(estimate.id, issued_on, consolidated=True)}",
            f"Date: {format_date(issued_on)}",
            f"Total Payments: {len(completed)}",
        ],
        "PAID BY",
        _party_lines(client),
    )
    draw_banner(c, "PAYMENT RECEIPT - ALL PAYMENTS")

    cursor = PageCursor(c, geometry, geometry.first_page_start_y)
    rows = [
        (f"Phase {phase_number(phases, p)} Payment", _amount(p.amount, profile))
        for p in completed
    ]
    rows += _summary_rows(summary, profile)
    cursor.draw_table(_payment_table(rows), 10, 190)
    cursor.record("payments", f"{len(completed)} payments")
    cursor.y_pos += 15

    _draw_closing(cursor)
    return cursor.finish()


def export_receipt_pdf(estimate: Estimate, client: Optional[Client],
                       phases: Sequence[PaymentPhase], phase_id: Optional[str] = None,
                       bank: Optional[BankAccount] = None,
                       output_path: Union[str, Path, None] = None,
                       profile: Optional[DocumentProfile] = None,
                       issued_on: Optional[date] = None) -> Optional[Path]:
    """
    Write a phase receipt (`phase_id` given) or the consolidated receipt.

    Returns:
        Path to the PDF, or None if the document could not be generated
    """
    profile = profile or load_document_profile()
    issued_on = issued_on or date.today()
    client_name = client.name if client else ""
    stamp = issued_on.strftime("%d-%m-%Y")

    try:
        if phase_id:
            phase = next((p for p in phases if p.id == phase_id), None)
            if phase is None:
                raise DocumentStructureError(f"No payment phase with id {phase_id}")
            result = render_phase_receipt(estimate, client, phases, phase, bank, profile, issued_on)
            file_name = document_filename(
                client_name, stamp, prefix=f"Receipt_Phase_{phase_number(phases, phase)}_"
            )
        else:
            result = render_all_payments_receipt(estimate, client, phases, profile, issued_on)
            file_name = document_filename(client_name, stamp, prefix="Receipt_All_Payments_")
    except DocumentStructureError:
        logger.exception(f"Failed to generate receipt for estimate {estimate.id}")
        return None

    pdf_path = Path(output_path) if output_path else Path(file_name)
    if pdf_path.is_dir():
        pdf_path = pdf_path / file_name

    try:
        pdf_path.parent.mkdir(parents=True, exist_ok=True)
        pdf_path.write_bytes(result.pdf)
    except OSError as e:
        logger.error(f"Failed to write receipt {pdf_path}: {e}")
        return None

    logger.info(f"Generated receipt PDF: {pdf_path}")
    return pdf_path
