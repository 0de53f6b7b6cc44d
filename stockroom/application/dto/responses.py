"""
JSON bodies returned by the API.

Routes build these from core entities; nothing else leaves the service.
"""

from datetime import date, datetime, timezone

from pydantic import BaseModel, Field


class InvoiceItemResponse(BaseModel):
    """Invoice line with computed totals."""

    id: int | None = None
    name: str
    quantity: float
    unit: str
    percentage: int = Field(..., description="VAT rate in percent")
    net_price: float
    gross_price: float
    total_net: float = Field(..., description="quantity * net_price")
    total_gross: float = Field(..., description="quantity * gross_price")


class ParsedInvoiceResponse(BaseModel):
    """Extraction result, ready for editing and confirmation."""

    invoice_number: str
    date: str
    vendor: str
    filename: str = ""
    items: list[InvoiceItemResponse] = Field(default_factory=list)
    total_net: float
    total_gross: float
    source: str = Field(..., description="Extractor that produced the data: ai or text")


class InvoiceResponse(BaseModel):
    """Confirmed invoice."""

    id: int
    filename: str
    invoice_number: str
    invoice_date: date
    vendor: str
    total_net: float
    total_gross: float
    processed_at: datetime
    items: list[InvoiceItemResponse] = Field(default_factory=list)


class InvoiceListResponse(BaseModel):
    invoices: list[InvoiceResponse]
    total: int


class ProductResponse(BaseModel):
    """Product with its ledger-derived stock."""

    id: int
    name: str
    unit: str
    current_stock: float
    min_stock_level: float
    last_purchase_price: float | None = None
    is_low_stock: bool = False
    created_at: datetime
    updated_at: datetime


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    total: int


class StockMovementResponse(BaseModel):
    """One ledger entry."""

    id: int
    product_id: int
    movement_type: str
    quantity: float
    reference_id: int | None = None
    reference_type: str | None = None
    notes: str = ""
    created_at: datetime


class SaleItemResponse(BaseModel):
    id: int | None = None
    product_id: int
    product_name: str | None = None
    quantity: float
    unit_price: float
    total_price: float


class SaleResponse(BaseModel):
    id: int
    sale_number: str
    sale_date: date
    customer: str
    total_amount: float
    created_at: datetime
    items: list[SaleItemResponse] = Field(default_factory=list)


class SaleListResponse(BaseModel):
    sales: list[SaleResponse]
    total: int


class InventoryItemResponse(BaseModel):
    """Count sheet line. difference is null until counted."""

    id: int
    product_id: int
    product_name: str | None = None
    product_unit: str | None = None
    expected_quantity: float
    counted_quantity: float | None = None
    difference: float | None = None
    status: str = Field(..., description="not_counted, ok, surplus or shortage")
    notes: str = ""


class InventoryResponse(BaseModel):
    id: int
    name: str
    status: str
    created_at: datetime
    completed_at: datetime | None = None
    counted_count: int = 0
    total_difference: float = 0.0
    items: list[InventoryItemResponse] = Field(default_factory=list)


class InventoryListResponse(BaseModel):
    inventories: list[InventoryResponse]
    total: int


class CompleteInventoryResponse(BaseModel):
    """Completed inventory with the correction movements it posted."""

    inventory: InventoryResponse
    movements: list[StockMovementResponse] = Field(default_factory=list)


class ProviderHealthResponse(BaseModel):
    """One dependency of the service."""

    name: str
    available: bool
    latency_ms: float | None = Field(default=None, description="Check round trip")
    error: str | None = Field(default=None, description="Why the check failed")


class HealthResponse(BaseModel):
    """Service health."""

    status: str = Field(..., description="healthy, degraded or unhealthy")
    version: str
    uptime_seconds: float
    database: ProviderHealthResponse
    llm: ProviderHealthResponse = Field(..., description="name is \"disabled\" when no provider is configured")


class ErrorResponse(BaseModel):
    """
    Body of every non-2xx response.

    Clients branch on ``error_code``; ``hint`` says what to try next.
    """

    error_code: str = Field(..., examples=["INVOICE_NOT_FOUND", "DUPLICATE_SALE"])
    message: str
    hint: str | None = None
    detail: str | None = Field(default=None, description="Offending values or field errors")
    path: str | None = Field(default=None, description="Request path that failed")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
