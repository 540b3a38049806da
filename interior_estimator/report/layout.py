"""
Page Layout Primitives

Shared by the estimate and receipt renderers:
- NumberedCanvas: keeps every page until save(), then draws the frame and
  "Page i of N" on each one
- PageCursor: vertical cursor over the usable band of a page, with page
  breaks and table splitting
- Drawing helpers working in millimetres from the top of an A4 page
"""

import io
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import Table

from .profile import DocumentProfile, PageGeometry

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4

# Colors
HEADER_BLUE = colors.HexColor("#003366")
ACCENT_BLUE = colors.HexColor("#00478E")
DETAILS_BG = colors.HexColor("#F5F5F5")
SUBCATEGORY_BG = colors.HexColor("#ECF0F1")
SLATE = colors.HexColor("#2C3E50")
TABLE_HEAD_BG = colors.HexColor("#F8FAFC")
GRID_GRAY = colors.HexColor("#CBD5E0")
NOTICE_GRAY = colors.HexColor("#646464")
BANK_BAND_BG = colors.HexColor("#F0F0F0")

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
FONT_ITALIC = "Helvetica-Oblique"


# =============================================================================
# RESULT RECORDS
# =============================================================================

@dataclass
class PageRecord:
    """What was placed on one page."""
    number: int
    framed: bool = False
    footer: str = ""
    blocks: List[Tuple[str, str]] = field(default_factory=list)  # (kind, label)


@dataclass
class RenderResult:
    """A rendered document and its page-by-page record."""
    pdf: bytes
    page_count: int
    pages: List[PageRecord] = field(default_factory=list)


# =============================================================================
# COORDINATES
# =============================================================================

def to_pt_y(y_mm: float) -> float:
    """Top-down millimetres to reportlab's bottom-up points."""
    return PAGE_HEIGHT - y_mm * mm


def draw_text(c: canvas.Canvas, x_mm: float, y_mm: float, text: str,
              font: str = FONT, size: float = 10, color=colors.black,
              align: str = "left") -> None:
    c.setFont(font, size)
    c.setFillColor(color)
    x, y = x_mm * mm, to_pt_y(y_mm)
    if align == "center":
        c.drawCentredString(x, y, text)
    elif align == "right":
        c.drawRightString(x, y, text)
    else:
        c.drawString(x, y, text)
    c.setFillColor(colors.black)


def fill_rect(c: canvas.Canvas, x_mm: float, y_mm: float, w_mm: float, h_mm: float,
              color, radius_mm: float = 0.0) -> None:
    """Filled rectangle whose top-left corner is (x_mm, y_mm)."""
    c.setFillColor(color)
    x, y = x_mm * mm, to_pt_y(y_mm + h_mm)
    if radius_mm:
        c.roundRect(x, y, w_mm * mm, h_mm * mm, radius_mm * mm, stroke=0, fill=1)
    else:
        c.rect(x, y, w_mm * mm, h_mm * mm, stroke=0, fill=1)
    c.setFillColor(colors.black)


def draw_line(c: canvas.Canvas, x1_mm: float, y_mm: float, x2_mm: float) -> None:
    c.setStrokeColor(colors.black)
    c.setLineWidth(0.5)
    c.line(x1_mm * mm, to_pt_y(y_mm), x2_mm * mm, to_pt_y(y_mm))


# =============================================================================
# CANVAS
# =============================================================================

class NumberedCanvas(canvas.Canvas):
    """
    Canvas that defers page output until save().

    The final pass re-draws the page frame and writes "Page i of N" on every
    page, once N is known.
    """

    def __init__(self, buffer: Optional[io.BytesIO] = None,
                 geometry: Optional[PageGeometry] = None, **kwargs):
        self.buffer = buffer if buffer is not None else io.BytesIO()
        kwargs.setdefault("pagesize", A4)
        super().__init__(self.buffer, **kwargs)
        self.geometry = geometry or PageGeometry()
        self._saved_page_states = []
        self.footers: List[str] = []
        self.framed_pages: List[int] = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        page_count = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self.draw_page_furniture(page_count)
            canvas.Canvas.showPage(self)
        canvas.Canvas.save(self)

    def draw_page_furniture(self, page_count: int) -> None:
        page_number = self.getPageNumber()
        x, y, w, h = self.geometry.frame

        self.setStrokeColor(colors.black)
        self.setLineWidth(1)
        self.rect(x * mm, to_pt_y(y + h), w * mm, h * mm, stroke=1, fill=0)
        self.framed_pages.append(page_number)

        footer = f"Page {page_number} of {page_count}"
        self.setFont(FONT, 8)
        self.setFillColor(SLATE)
        self.drawCentredString(PAGE_WIDTH / 2, to_pt_y(self.geometry.footer_y), footer)
        self.setFillColor(colors.black)
        self.footers.append(footer)


class PageCursor:
    """
    Vertical position (mm from top) within the usable band of the current page.
    """

    def __init__(self, c: NumberedCanvas, geometry: PageGeometry, start_y: float):
        self.canvas = c
        self.geometry = geometry
        self.y_pos = start_y
        self.pages: List[PageRecord] = [PageRecord(number=1)]

    @property
    def page_number(self) -> int:
        return len(self.pages)

    @property
    def remaining(self) -> float:
        return self.geometry.page_end_y - self.y_pos

    @property
    def at_page_start(self) -> bool:
        return self.y_pos <= self.geometry.page_start_y

    def new_page(self, reason: str = "") -> None:
        self.canvas.showPage()
        self.pages.append(PageRecord(number=len(self.pages) + 1))
        self.y_pos = self.geometry.page_start_y
        logger.debug(f"Page break -> page {self.page_number}{f' ({reason})' if reason else ''}")

    def ensure_space(self, height: float, reason: str = "") -> bool:
        """Start a new page if less than `height` mm remains. Returns True on a break."""
        if self.remaining < height:
            self.new_page(reason)
            return True
        return False

    def record(self, kind: str, label: str) -> None:
        self.pages[-1].blocks.append((kind, label))

    def draw_table(self, table: Table, x_mm: float, width_mm: float) -> None:
        """
        Draw a table at the cursor and advance to its measured bottom.

        A table that does not fit the remaining space is split across pages
        (header row repeated) when it has more than one body row; otherwise
        it moves to a fresh page.
        """
        width = width_mm * mm
        pending = [table]
        while pending:
            part = pending.pop(0)
            available = max(self.remaining, 0) * mm
            _, height = part.wrapOn(self.canvas, width, available)

            if height <= available:
                self._draw_part(part, x_mm, height)
                continue

            pieces = part.split(width, available) if available > 0 else []
            if len(pieces) > 1:
                head, rest = pieces[0], list(pieces[1:])
                _, head_height = head.wrapOn(self.canvas, width, available)
                self._draw_part(head, x_mm, head_height)
                self.new_page("table continues")
                pending = rest + pending
            elif not self.at_page_start:
                self.new_page("table does not fit")
                pending.insert(0, part)
            else:
                # Taller than a whole page and cannot be split
                self._draw_part(part, x_mm, height)

    def _draw_part(self, part: Table, x_mm: float, height: float) -> None:
        part.drawOn(self.canvas, x_mm * mm, to_pt_y(self.y_pos) - height)
        self.y_pos += height / mm

    def finish(self) -> RenderResult:
        """Close the last page, run the numbering pass and collect the result."""
        self.canvas.showPage()
        self.canvas.save()

        for record, footer in zip(self.pages, self.canvas.footers):
            record.footer = footer
        framed = set(self.canvas.framed_pages)
        for record in self.pages:
            record.framed = record.number in framed

        pdf = self.canvas.buffer.getvalue()
        return RenderResult(pdf=pdf, page_count=len(self.pages), pages=self.pages)


# =============================================================================
# PAGE FURNITURE
# =============================================================================

def draw_company_header(c: canvas.Canvas, profile: DocumentProfile) -> None:
    """Company band and contact band at the top of a first page."""
    fill_rect(c, 5, 5, 200, 45, HEADER_BLUE)
    fill_rect(c, 5, 45, 200, 20, ACCENT_BLUE)

    draw_text(c, 15, 20, profile.company_name, FONT_BOLD, 18, colors.white)
    for offset, line in enumerate(profile.address_lines[:3]):
        draw_text(c, 15, 30 + offset * 5, line, FONT, 9, colors.white)

    contact = [f"Website: {profile.website}", f"Email: {profile.email}", profile.phone_line]
    for offset, line in enumerate(contact):
        draw_text(c, 105, 52 + offset * 5, line, FONT, 9, colors.white, align="center")


def draw_details_panel(c: canvas.Canvas, left_title: str, left_lines: List[str],
                       right_title: str, right_lines: List[str]) -> None:
    """Grey panel with document details on the left and the party on the right."""
    fill_rect(c, 5, 75, 200, 45, DETAILS_BG, radius_mm=2)

    draw_text(c, 15, 85, left_title, FONT_BOLD, 11)
    for offset, line in enumerate(left_lines):
        draw_text(c, 15, 95 + offset * 10, line, FONT, 10)

    draw_text(c, 110, 85, right_title, FONT_BOLD, 11)
    for offset, line in enumerate(right_lines):
        draw_text(c, 110, 95 + offset * 10, line, FONT, 10)


def draw_banner(c: canvas.Canvas, title: str) -> None:
    fill_rect(c, 5, 130, 200, 12, HEADER_BLUE)
    draw_text(c, 105, 138, title, FONT_BOLD, 14, colors.white, align="center")


def new_document(geometry: PageGeometry, title: str) -> NumberedCanvas:
    """In-memory canvas for one document."""
    c = NumberedCanvas(geometry=geometry)
    c.setTitle(title)
    return c
