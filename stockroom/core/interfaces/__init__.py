"""Abstract interfaces for infrastructure collaborators."""

from stockroom.core.interfaces.extractor import IInvoiceExtractor
from stockroom.core.interfaces.inventory_store import IInventoryStore
from stockroom.core.interfaces.invoice_store import IInvoiceStore, InvoiceSortField
from stockroom.core.interfaces.llm import HealthStatus, ILLMProvider, LLMProvider, LLMResponse
from stockroom.core.interfaces.product_store import IProductStore
from stockroom.core.interfaces.report import IInventoryReportRenderer
from stockroom.core.interfaces.sales_store import ISalesStore

__all__ = [
    "HealthStatus",
    "IInventoryReportRenderer",
    "IInventoryStore",
    "IInvoiceExtractor",
    "IInvoiceStore",
    "ILLMProvider",
    "IProductStore",
    "ISalesStore",
    "InvoiceSortField",
    "LLMProvider",
    "LLMResponse",
]
