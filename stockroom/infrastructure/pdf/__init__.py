"""PDF report rendering."""

from stockroom.infrastructure.pdf.inventory_report_renderer import (
    Fpdf2InventoryReportRenderer,
)

__all__ = ["Fpdf2InventoryReportRenderer"]
