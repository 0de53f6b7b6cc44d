"""Domain services."""

from stockroom.core.services.invoice_parser import InvoiceParserService
from stockroom.core.services.invoice_totals import (
    add_blank_item,
    normalize_invoice,
    recalculate_item,
    recalculate_totals,
    remove_item,
    update_item,
)
from stockroom.core.services.inventory_workflow import (
    ensure_countable,
    ensure_transition,
    plan_corrections,
)
from stockroom.core.services.normalization import (
    normalize_date,
    parse_number,
    parse_percentage,
)

__all__ = [
    "InvoiceParserService",
    "add_blank_item",
    "ensure_countable",
    "ensure_transition",
    "normalize_date",
    "normalize_invoice",
    "parse_number",
    "parse_percentage",
    "plan_corrections",
    "recalculate_item",
    "recalculate_totals",
    "remove_item",
    "update_item",
]
