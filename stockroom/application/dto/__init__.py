"""Data transfer objects for the API boundary."""

from stockroom.application.dto.requests import (
    CreateInventoryRequest,
    CreateSaleRequest,
    InvoiceDraftRequest,
    InvoiceItemRequest,
    MovementUpdateRequest,
    ParseInvoiceTextRequest,
    ProductCreateRequest,
    ProductUpdateRequest,
    RecordCountRequest,
    SaleItemRequest,
    StockAdjustmentRequest,
)
from stockroom.application.dto.responses import (
    CompleteInventoryResponse,
    ErrorResponse,
    HealthResponse,
    InventoryItemResponse,
    InventoryListResponse,
    InventoryResponse,
    InvoiceItemResponse,
    InvoiceListResponse,
    InvoiceResponse,
    ParsedInvoiceResponse,
    ProductListResponse,
    ProductResponse,
    ProviderHealthResponse,
    SaleItemResponse,
    SaleListResponse,
    SaleResponse,
    StockMovementResponse,
)

__all__ = [
    "CompleteInventoryResponse",
    "CreateInventoryRequest",
    "CreateSaleRequest",
    "ErrorResponse",
    "HealthResponse",
    "InventoryItemResponse",
    "InventoryListResponse",
    "InventoryResponse",
    "InvoiceDraftRequest",
    "InvoiceItemRequest",
    "InvoiceItemResponse",
    "InvoiceListResponse",
    "InvoiceResponse",
    "MovementUpdateRequest",
    "ParseInvoiceTextRequest",
    "ParsedInvoiceResponse",
    "ProductCreateRequest",
    "ProductListResponse",
    "ProductResponse",
    "ProductUpdateRequest",
    "ProviderHealthResponse",
    "RecordCountRequest",
    "SaleItemRequest",
    "SaleItemResponse",
    "SaleListResponse",
    "SaleResponse",
    "StockAdjustmentRequest",
    "StockMovementResponse",
]
