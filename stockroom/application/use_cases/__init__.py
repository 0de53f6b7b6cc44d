"""Application use cases."""

from stockroom.application.use_cases.adjust_stock import AdjustStockUseCase
from stockroom.application.use_cases.confirm_invoice import ConfirmInvoiceUseCase
from stockroom.application.use_cases.export_inventory import (
    ExportInventoryResult,
    ExportInventoryUseCase,
)
from stockroom.application.use_cases.parse_invoice import ParseInvoiceResult, ParseInvoiceUseCase
from stockroom.application.use_cases.reconcile_inventory import (
    CompleteInventoryResult,
    ReconcileInventoryUseCase,
)
from stockroom.application.use_cases.record_sale import RecordSaleUseCase

__all__ = [
    "AdjustStockUseCase",
    "CompleteInventoryResult",
    "ConfirmInvoiceUseCase",
    "ExportInventoryResult",
    "ExportInventoryUseCase",
    "ParseInvoiceResult",
    "ParseInvoiceUseCase",
    "ReconcileInventoryUseCase",
    "RecordSaleUseCase",
]
