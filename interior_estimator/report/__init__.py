"""
Estimate Documents
Section organization, page layout and PDF output for estimates and receipts.

Modules:
- profile: Company identity, terms, geometry and money formats (YAML)
- formatting: Money, date and document number formatting
- sections: Category/subcategory grouping, column layout, export boundary
- layout: Numbered canvas, page cursor and shared page furniture
- pdf_estimate: Paginated estimate PDF
- pdf_receipt: Payment receipts
"""

from .formatting import (
    document_filename,
    estimate_number,
    format_indian_amount,
    format_money,
    receipt_number,
)
from .layout import NumberedCanvas, PageCursor, PageRecord, RenderResult
from .pdf_estimate import (
    estimate_block_height,
    export_estimate_pdf,
    needs_page_break,
    render_estimate_pdf,
)
from .pdf_receipt import (
    PaymentSummary,
    export_receipt_pdf,
    payment_summary,
    render_all_payments_receipt,
    render_phase_receipt,
)
from .profile import DocumentProfile, PageGeometry, load_document_profile
from .sections import (
    ExportReadyEstimate,
    SectionBlock,
    TableLayout,
    build_table_rows,
    organize_sections,
    prepare_for_export,
    select_columns,
)

__all__ = [
    "document_filename",
    "estimate_number",
    "format_indian_amount",
    "format_money",
    "receipt_number",
    "NumberedCanvas",
    "PageCursor",
    "PageRecord",
    "RenderResult",
    "estimate_block_height",
    "export_estimate_pdf",
    "needs_page_break",
    "render_estimate_pdf",
    "PaymentSummary",
    "export_receipt_pdf",
    "payment_summary",
    "render_all_payments_receipt",
    "render_phase_receipt",
    "DocumentProfile",
    "PageGeometry",
    "load_document_profile",
    "ExportReadyEstimate",
    "SectionBlock",
    "TableLayout",
    "build_table_rows",
    "organize_sections",
    "prepare_for_export",
    "select_columns",
]
