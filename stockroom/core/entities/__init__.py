"""Domain entities."""

from stockroom.core.entities.inventory import (
    CountStatus,
    Inventory,
    InventoryItem,
    InventoryStatus,
)
from stockroom.core.entities.invoice import Invoice, InvoiceItem, ParsedInvoiceData
from stockroom.core.entities.product import (
    MovementType,
    Product,
    ReferenceType,
    StockMovement,
)
from stockroom.core.entities.sale import Sale, SaleItem

__all__ = [
    "CountStatus",
    "Inventory",
    "InventoryItem",
    "InventoryStatus",
    "Invoice",
    "InvoiceItem",
    "MovementType",
    "ParsedInvoiceData",
    "Product",
    "ReferenceType",
    "Sale",
    "SaleItem",
    "StockMovement",
]
