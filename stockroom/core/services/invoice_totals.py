"""
Invoice normalization and totals engine.

Every function returns a new ParsedInvoiceData; inputs are never mutated.
Totals are exact sums; rounding to 2 decimals is left to presentation.
"""

from datetime import date

from stockroom.core.entities.invoice import InvoiceItem, ParsedInvoiceData
from stockroom.core.services.normalization import normalize_date

DEFAULT_UNIT = "szt"
DEFAULT_VAT_RATE = 23
UNKNOWN_NUMBER = "UNKNOWN"
UNKNOWN_VENDOR = "UNKNOWN VENDOR"
UNKNOWN_ITEM = "Unknown item"


def recalculate_item(item: InvoiceItem) -> InvoiceItem:
    """Recompute line totals from quantity and unit prices."""
    return item.model_copy(
        update={
            "total_net": item.quantity * item.net_price,
            "total_gross": item.quantity * item.gross_price,
        }
    )


def recalculate_totals(data: ParsedInvoiceData) -> ParsedInvoiceData:
    """Recompute every line and the invoice sums over the current items."""
    items = [recalculate_item(item) for item in data.items]
    return data.model_copy(
        update={
            "items": items,
            "total_net": sum(i.total_net for i in items),
            "total_gross": sum(i.total_gross for i in items),
        }
    )


def blank_item(unit: str = DEFAULT_UNIT, vat_rate: int = DEFAULT_VAT_RATE) -> InvoiceItem:
    return InvoiceItem(
        name="",
        quantity=1,
        unit=unit,
        percentage=vat_rate,
        net_price=0.0,
        gross_price=0.0,
    )


def add_blank_item(
    data: ParsedInvoiceData,
    unit: str = DEFAULT_UNIT,
    vat_rate: int = DEFAULT_VAT_RATE,
) -> ParsedInvoiceData:
    """Append an empty line with default quantity, unit and VAT rate."""
    items = [*data.items, blank_item(unit, vat_rate)]
    return recalculate_totals(data.model_copy(update={"items": items}))


def remove_item(data: ParsedInvoiceData, index: int) -> ParsedInvoiceData:
    """Drop the line at index and re-sum."""
    if not 0 <= index < len(data.items):
        raise IndexError(f"No invoice item at position {index}")
    items = [item for i, item in enumerate(data.items) if i != index]
    return recalculate_totals(data.model_copy(update={"items": items}))


def update_item(data: ParsedInvoiceData, index: int, **changes: object) -> ParsedInvoiceData:
    """Apply field changes to one line; its totals are always recomputed."""
    if not 0 <= index < len(data.items):
        raise IndexError(f"No invoice item at position {index}")
    changes.pop("total_net", None)
    changes.pop("total_gross", None)
    items = list(data.items)
    items[index] = InvoiceItem.model_validate(items[index].model_dump() | changes)
    return recalculate_totals(data.model_copy(update={"items": items}))


def normalize_invoice(data: ParsedInvoiceData, today: date | None = None) -> ParsedInvoiceData:
    """
    Repair missing header fields and recompute totals.

    Blank number or vendor get the UNKNOWN defaults, the date is
    normalized to ISO, blank item names get a placeholder and negative
    quantities or prices are clamped to zero.
    """
    items = [
        item.model_copy(
            update={
                "name": item.name.strip() or UNKNOWN_ITEM,
                "unit": item.unit.strip() or DEFAULT_UNIT,
                "quantity": max(item.quantity, 0.0),
                "net_price": max(item.net_price, 0.0),
                "gross_price": max(item.gross_price, 0.0),
            }
        )
        for item in data.items
    ]
    repaired = data.model_copy(
        update={
            "invoice_number": data.invoice_number.strip() or UNKNOWN_NUMBER,
            "vendor": data.vendor.strip() or UNKNOWN_VENDOR,
            "date": normalize_date(data.date, today),
            "items": items,
        }
    )
    return recalculate_totals(repaired)
