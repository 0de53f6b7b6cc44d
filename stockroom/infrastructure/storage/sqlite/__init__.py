"""SQLite storage implementations."""

from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool
from stockroom.infrastructure.storage.sqlite.inventory_store import SQLiteInventoryStore
from stockroom.infrastructure.storage.sqlite.invoice_store import SQLiteInvoiceStore
from stockroom.infrastructure.storage.sqlite.product_store import SQLiteProductStore
from stockroom.infrastructure.storage.sqlite.sales_store import SQLiteSalesStore

__all__ = [
    "ConnectionPool",
    "SQLiteInventoryStore",
    "SQLiteInvoiceStore",
    "SQLiteProductStore",
    "SQLiteSalesStore",
]
