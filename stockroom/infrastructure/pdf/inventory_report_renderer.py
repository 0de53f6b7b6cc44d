"""
Inventory count report renderer using fpdf2.

Renders the header, summary counts and the per-item reconciliation table
with a status column, plus a page-numbered footer.
"""

import os
import unicodedata
from datetime import datetime

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from stockroom.config import get_logger
from stockroom.config.settings import ExportSettings
from stockroom.core.entities.base import utc_now
from stockroom.core.entities.inventory import (
    CountStatus,
    Inventory,
    InventoryItem,
    InventoryStatus,
)
from stockroom.core.interfaces.report import IInventoryReportRenderer

logger = get_logger(__name__)

REPORT_TITLE = "RAPORT INWENTARYZACJI"
FOOTER_TEXT = "Raport wygenerowany automatycznie przez System Zarządzania Magazynem"

INVENTORY_STATUS_LABELS: dict[InventoryStatus, str] = {
    InventoryStatus.DRAFT: "Szkic",
    InventoryStatus.IN_PROGRESS: "W trakcie",
    InventoryStatus.COMPLETED: "Zakończona",
}

COUNT_STATUS_LABELS: dict[CountStatus, str] = {
    CountStatus.NOT_COUNTED: "Nie policzono",
    CountStatus.OK: "OK",
    CountStatus.SURPLUS: "Nadwyżka",
    CountStatus.SHORTAGE: "Niedobór",
}

# Text colour per status
COUNT_STATUS_COLORS: dict[CountStatus, tuple[int, int, int]] = {
    CountStatus.NOT_COUNTED: (120, 120, 120),
    CountStatus.OK: (22, 128, 61),
    CountStatus.SURPLUS: (29, 78, 216),
    CountStatus.SHORTAGE: (185, 28, 28),
}

TABLE_HEADERS = [
    "Lp.",
    "Nazwa produktu",
    "Jednostka",
    "Oczekiwana ilość",
    "Policzono",
    "Różnica",
    "Status",
]
COLUMN_WIDTHS = [10, 62, 20, 28, 22, 20, 28]

# Letters NFKD cannot decompose to ASCII
_EXTRA_TRANSLITERATION = str.maketrans({"ł": "l", "Ł": "L", "đ": "d", "Đ": "D", "ß": "ss"})


def to_latin1(text: str) -> str:
    """Transliterate text so the core PDF fonts can encode it."""
    try:
        text.encode("latin-1")
        return text
    except UnicodeEncodeError:
        pass

    chars = []
    for char in text.translate(_EXTRA_TRANSLITERATION):
        try:
            char.encode("latin-1")
            chars.append(char)
        except UnicodeEncodeError:
            decomposed = unicodedata.normalize("NFKD", char)
            base = "".join(c for c in decomposed if not unicodedata.combining(c))
            chars.append(base if base.isascii() and base else "?")
    return "".join(chars)


def format_quantity(value: float | None) -> str:
    if value is None:
        return "-"
    return f"{value:g}"


def format_difference(value: float | None) -> str:
    if value is None:
        return "-"
    return f"{value:+g}" if value else "0"


def format_timestamp(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "-"


class _ReportPdf(FPDF):
    """FPDF subclass that renders a footer on every page."""

    def __init__(self, renderer: "Fpdf2InventoryReportRenderer") -> None:
        super().__init__()
        self._renderer = renderer

    def footer(self) -> None:
        self.set_y(-15)
        self._renderer._font(self, "I", 8)
        self.set_text_color(120, 120, 120)
        self.cell(0, 5, self._renderer._text(FOOTER_TEXT), align="L")
        self.set_x(-40)
        self.cell(0, 5, f"{self.page_no()} / {{nb}}", align="R")
        self.set_text_color(0, 0, 0)


class Fpdf2InventoryReportRenderer(IInventoryReportRenderer):
    """Renders inventory count reports to PDF bytes."""

    def __init__(self, settings: ExportSettings | None = None) -> None:
        self._settings = settings or ExportSettings()
        self._unicode_font = False

    def render(self, inventory: Inventory) -> bytes:
        """Render an inventory and its items into PDF bytes."""
        pdf = _ReportPdf(self)
        self._unicode_font = self._load_font(pdf)
        pdf.alias_nb_pages()
        pdf.set_auto_page_break(auto=True, margin=20)
        pdf.add_page()

        self._render_header(pdf, inventory)
        self._render_summary(pdf, inventory)
        self._render_items_table(pdf, inventory.items)

        logger.info(
            "inventory_report_rendered",
            inventory_id=inventory.id,
            items=len(inventory.items),
            pages=pdf.page_no(),
        )
        return bytes(pdf.output())

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------

    def _load_font(self, pdf: FPDF) -> bool:
        """Register the configured TTF font for full Polish glyph coverage."""
        font_path = self._settings.font_path
        if not font_path or not os.path.isfile(font_path):
            return False
        try:
            pdf.add_font("ReportFont", "", str(font_path))
        except (OSError, RuntimeError) as e:
            logger.warning("report_font_load_failed", font_path=str(font_path), error=str(e))
            return False
        return True

    def _font(self, pdf: FPDF, style: str = "", size: int = 10) -> None:
        if self._unicode_font:
            # Only the regular face is registered
            pdf.set_font("ReportFont", "", size)
        else:
            pdf.set_font("Helvetica", style, size)

    def _text(self, text: str) -> str:
        return text if self._unicode_font else to_latin1(text)

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _render_header(self, pdf: FPDF, inventory: Inventory) -> None:
        self._font(pdf, "", 9)
        pdf.set_text_color(120, 120, 120)
        pdf.cell(
            0, 5, self._text(self._settings.organisation),
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        pdf.set_text_color(0, 0, 0)

        self._font(pdf, "B", 18)
        pdf.cell(0, 12, self._text(REPORT_TITLE), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self._font(pdf, "", 13)
        pdf.cell(0, 8, self._text(inventory.name), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.ln(4)

        info = [
            ("Data utworzenia", format_timestamp(inventory.created_at)),
            ("Data zakończenia", format_timestamp(inventory.completed_at)),
            ("Status", INVENTORY_STATUS_LABELS[inventory.status]),
            ("Data raportu", format_timestamp(utc_now())),
        ]
        for label, value in info:
            self._font(pdf, "B", 10)
            pdf.cell(45, 6, self._text(f"{label}:"))
            self._font(pdf, "", 10)
            pdf.cell(0, 6, self._text(value), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        y = pdf.get_y() + 2
        pdf.set_draw_color(100, 100, 100)
        pdf.line(10, y, 200, y)
        pdf.set_draw_color(0, 0, 0)
        pdf.ln(6)

    def _render_summary(self, pdf: FPDF, inventory: Inventory) -> None:
        self._font(pdf, "B", 12)
        pdf.cell(0, 8, self._text("Podsumowanie"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self._font(pdf, "", 10)

        summary = [
            ("Liczba produktów", str(len(inventory.items))),
            ("Policzono", f"{inventory.counted_count} / {len(inventory.items)}"),
            ("Suma różnic", format_difference(inventory.total_difference)),
        ]
        for label, value in summary:
            pdf.cell(60, 6, self._text(f"{label}:"))
            pdf.cell(0, 6, value, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.ln(4)

    def _render_items_table(self, pdf: FPDF, items: list[InventoryItem]) -> None:
        self._font(pdf, "B", 8)
        pdf.set_fill_color(70, 70, 70)
        pdf.set_text_color(255, 255, 255)
        for width, header in zip(COLUMN_WIDTHS, TABLE_HEADERS, strict=True):
            pdf.cell(width, 7, self._text(header), border=1, fill=True, align="C")
        pdf.ln()
        pdf.set_text_color(0, 0, 0)

        self._font(pdf, "", 8)
        for idx, item in enumerate(items, 1):
            fill = idx % 2 == 0
            if fill:
                pdf.set_fill_color(240, 240, 240)

            status = item.count_status
            name = self._text((item.product_name or f"#{item.product_id}")[:40])
            cells = [
                (str(idx), "C"),
                (name, "L"),
                (self._text(item.product_unit or ""), "C"),
                (format_quantity(item.expected_quantity), "R"),
                (format_quantity(item.counted_quantity), "R"),
                (format_difference(item.difference), "R"),
            ]
            for (value, align), width in zip(cells, COLUMN_WIDTHS, strict=False):
                pdf.cell(width, 6, value, border=1, align=align, fill=fill)

            pdf.set_text_color(*COUNT_STATUS_COLORS[status])
            pdf.cell(
                COLUMN_WIDTHS[-1], 6, self._text(COUNT_STATUS_LABELS[status]),
                border=1, align="C", fill=fill,
            )
            pdf.set_text_color(0, 0, 0)
            pdf.ln()

        if not items:
            self._font(pdf, "I", 9)
            pdf.cell(sum(COLUMN_WIDTHS), 8, self._text("Brak pozycji"), border=1, align="C")
            pdf.ln()
