"""
Estimate PDF Renderer

Lays out an export-ready estimate on A4 pages:

    page 1:  company header, estimate details, bill-to, "ESTIMATE" banner
    body:    per category, per subcategory: header bands + item table
    end:     totals, notes & terms, signatures
    all:     page frame and "Page i of N" footer (final pass)

A subcategory block moves to a new page when its estimated height does not
fit the remaining space, or when it opens a category and less than
`min_space_needed` remains. The estimate only decides page breaks; the cursor
always advances by the table's measured height.

Usage:
    from interior_estimator.report.pdf_estimate import export_estimate_pdf
    export_estimate_pdf(estimate, client, Path("out"))
"""

import logging
from pathlib import Path
from typing import Optional, Union
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, Table, TableStyle

from ..errors import DocumentStructureError
from ..models.estimate_schema import Client, DiscountType, Estimate
from .formatting import document_filename, estimate_number, format_date, format_money
from .layout import (
    FONT,
    FONT_BOLD,
    GRID_GRAY,
    HEADER_BLUE,
    SLATE,
    SUBCATEGORY_BG,
    TABLE_HEAD_BG,
    PageCursor,
    RenderResult,
    draw_banner,
    draw_company_header,
    draw_details_panel,
    draw_line,
    draw_text,
    fill_rect,
    new_document,
)
from .profile import DocumentProfile, PageGeometry, load_document_profile
from .sections import ExportReadyEstimate, SectionBlock, build_table_rows, prepare_for_export

logger = logging.getLogger(__name__)

TERMS_LINE_HEIGHT = 7.0


# =============================================================================
# PAGE-BREAK POLICY
# =============================================================================

def estimate_block_height(rows: int, geometry: PageGeometry) -> float:
    """Approximate height (mm) of a subcategory block with `rows` items."""
    return rows * geometry.row_height + geometry.subcategory_spacing + geometry.block_allowance


def needs_page_break(y_pos: float, block_height: float, first_in_category: bool,
                     geometry: PageGeometry) -> bool:
    """
    Whether a block starting at `y_pos` must move to a new page.

    Args:
        y_pos: Cursor position (mm from top)
        block_height: Estimated block height (mm)
        first_in_category: Block opens its category (category header goes with it)
        geometry: Page geometry

    Returns:
        True if a new page is needed
    """
    remaining = geometry.page_end_y - y_pos
    if remaining < block_height:
        return True
    return first_in_category and remaining < geometry.min_space_needed


def terms_block_height(profile: DocumentProfile) -> float:
    # header band, terms, gap, signature line + labels
    return 5 + 12 + len(profile.terms) * TERMS_LINE_HEIGHT + 12 + 7


# =============================================================================
# TABLES
# =============================================================================

_CELL_STYLE = ParagraphStyle("EstimateCell", fontName=FONT, fontSize=8, leading=10)


def _paragraph(text: str) -> Paragraph:
    return Paragraph(escape(text).replace("\n", "<br/>"), _CELL_STYLE)


def build_section_table(block: SectionBlock, profile: DocumentProfile, width_mm: float) -> Table:
    """Item table for one subcategory. The header row repeats on continuation pages."""
    rows = build_table_rows(block.items, block.layout, profile)
    data = [list(block.layout.headers)]
    for row in rows:
        data.append([_paragraph(row[0])] + row[1:])

    table = Table(
        data,
        colWidths=block.layout.column_widths(width_mm * mm),
        repeatRows=1,
    )
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), TABLE_HEAD_BG),
        ("FONTNAME", (0, 0), (-1, 0), FONT_BOLD),
        ("FONTNAME", (1, 1), (-1, -1), FONT),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
        ("GRID", (0, 0), (-1, -1), 0.5, GRID_GRAY),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
        ("LEFTPADDING", (0, 0), (-1, -1), 3),
        ("RIGHTPADDING", (0, 0), (-1, -1), 3),
    ]))
    return table


# =============================================================================
# BLOCKS
# =============================================================================

def _draw_first_page(c, estimate: Estimate, client: Optional[Client], profile: DocumentProfile) -> None:
    draw_company_header(c, profile)
    draw_details_panel(
        c,
        "ESTIMATE DETAILS",
        [f"Estimate No: {estimate_number(estimate)}", f"Date: {format_date(estimate.created_at)}"],
        "BILL TO",
        [client.name if client else "", client.location if client else ""],
    )
    draw_banner(c, "ESTIMATE")


def _draw_section_block(cursor: PageCursor, block: SectionBlock, profile: DocumentProfile) -> None:
    g = cursor.geometry
    c = cursor.canvas

    block_height = estimate_block_height(len(block.items), g)
    if needs_page_break(cursor.y_pos, block_height, block.first_in_category, g):
        cursor.new_page(f"{block.category} / {block.subcategory}")

    if block.first_in_category:
        cursor.y_pos += 5
        fill_rect(c, 10, cursor.y_pos - 5, 190, 10, HEADER_BLUE)
        draw_text(c, 20, cursor.y_pos, block.category, FONT_BOLD, 11, colors.white)
        cursor.record("category", block.category)
        cursor.y_pos += g.category_spacing

    fill_rect(c, 15, cursor.y_pos - 5, 180, 8, SUBCATEGORY_BG)
    draw_text(c, 25, cursor.y_pos, block.subcategory, FONT_BOLD, 10, SLATE)
    cursor.record("subcategory", block.subcategory)
    cursor.y_pos += g.subcategory_header_advance

    width = 210 - 2 * g.table_margin
    cursor.draw_table(build_section_table(block, profile, width), g.table_margin, width)
    cursor.y_pos += g.table_gap


def _draw_totals(cursor: PageCursor, ready: ExportReadyEstimate, profile: DocumentProfile) -> None:
    g = cursor.geometry
    c = cursor.canvas
    totals = ready.totals
    estimate = ready.estimate

    cursor.ensure_space(g.totals_threshold, "totals")
    cursor.record("totals", "totals")

    def money(value: float) -> str:
        return format_money(value, profile.totals_decimals, profile.currency_prefix)

    draw_line(c, 20, cursor.y_pos, 190)
    cursor.y_pos += 8

    draw_text(c, 149, cursor.y_pos, "Sub Total:", FONT, 10)
    draw_text(c, 191, cursor.y_pos, money(totals.subtotal), FONT, 10, align="right")

    if totals.discount_amount > 0:
        cursor.y_pos += 7
        label = "Discount:"
        if estimate.discount_type is DiscountType.PERCENTAGE:
            label = f"Discount ({estimate.discount:g}%):"
        draw_text(c, 191 - 60, cursor.y_pos, label, FONT, 10)
        draw_text(c, 191, cursor.y_pos, f"- {money(totals.discount_amount)}", FONT, 10, align="right")

    cursor.y_pos += 7
    draw_text(c, 135, cursor.y_pos, "Grand Total:", FONT_BOLD, 12)
    draw_text(c, 191, cursor.y_pos, money(totals.grand_total), FONT_BOLD, 12, align="right")
    cursor.y_pos += 15


def _draw_terms_and_signatures(cursor: PageCursor, profile: DocumentProfile) -> None:
    c = cursor.canvas
    cursor.ensure_space(terms_block_height(profile), "terms")
    cursor.record("terms", "Notes & Terms")

    fill_rect(c, 10, cursor.y_pos - 5, 190, 10, HEADER_BLUE)
    draw_text(c, 20, cursor.y_pos, "Notes & Terms", FONT_BOLD, 12, colors.white)
    cursor.y_pos += 12

    for term in profile.terms:
        draw_text(c, 25, cursor.y_pos, f"• {term}", FONT, 9, SLATE)
        cursor.y_pos += TERMS_LINE_HEIGHT

    cursor.y_pos += 12
    draw_line(c, 20, cursor.y_pos, 80)
    draw_line(c, 120, cursor.y_pos, 180)
    cursor.y_pos += 7
    draw_text(c, 20, cursor.y_pos, profile.customer_signature_label, FONT, 10)
    draw_text(c, 120, cursor.y_pos, profile.company_signature_label, FONT, 10)
    cursor.record("signatures", "signatures")


# =============================================================================
# ENTRY POINTS
# =============================================================================

def render_estimate_pdf(ready: ExportReadyEstimate, client: Optional[Client] = None,
                        profile: Optional[DocumentProfile] = None) -> RenderResult:
    """
    Render an export-ready estimate.

    Args:
        ready: Output of prepare_for_export
        client: Bill-to party
        profile: Document profile (defaults loaded from YAML)

    Returns:
        RenderResult with the PDF bytes and a record of every page
    """
    profile = profile or load_document_profile()
    geometry = profile.geometry
    estimate = ready.estimate

    c = new_document(geometry, f"Estimate {estimate_number(estimate)}")
    _draw_first_page(c, estimate, client, profile)

    cursor = PageCursor(c, geometry, geometry.first_page_start_y)
    for block in ready.blocks:
        _draw_section_block(cursor, block, profile)

    _draw_totals(cursor, ready, profile)
    _draw_terms_and_signatures(cursor, profile)

    result = cursor.finish()
    logger.debug(f"Rendered estimate {estimate.id}: {result.page_count} pages")
    return result


def export_estimate_pdf(estimate: Estimate, client: Optional[Client] = None,
                        output_path: Union[str, Path, None] = None,
                        profile: Optional[DocumentProfile] = None) -> Optional[Path]:
    """
    Prepare, render and write an estimate PDF.

    Args:
        estimate: Estimate as loaded or edited
        client: Bill-to party
        output_path: File or directory; defaults to {Client_Name}_estimate.pdf
        profile: Document profile

    Returns:
        Path to the PDF, or None if the document could not be generated
    """
    profile = profile or load_document_profile()
    try:
        ready = prepare_for_export(estimate)
        result = render_estimate_pdf(ready, client, profile)
    except DocumentStructureError:
        logger.exception(f"Failed to generate estimate PDF for {estimate.id}")
        return None

    file_name = document_filename(client.name if client else "", "estimate")
    pdf_path = Path(output_path) if output_path else Path(file_name)
    if pdf_path.is_dir():
        pdf_path = pdf_path / file_name

    try:
        pdf_path.parent.mkdir(parents=True, exist_ok=True)
        pdf_path.write_bytes(result.pdf)
    except OSError as e:
        logger.error(f"Failed to write estimate PDF {pdf_path}: {e}")
        return None

    logger.info(f"Generated estimate PDF ({result.page_count} pages): {pdf_path}")
    return pdf_path
