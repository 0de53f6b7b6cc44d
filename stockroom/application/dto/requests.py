"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date

from pydantic import BaseModel, Field


class ParseInvoiceTextRequest(BaseModel):
    """Raw invoice text to run through the extraction chain."""

    text: str = Field(..., description="Invoice text as extracted from the document")
    filename: str = Field(default="", description="Source filename, kept for confirmation")


class InvoiceItemRequest(BaseModel):
    """One editable invoice line. Totals sent by the client are ignored."""

    name: str = Field(default="", description="Product or service name")
    quantity: float = Field(default=1.0, description="Quantity")
    unit: str = Field(default="szt", description="Unit of measure", examples=["szt", "kg"])
    percentage: int = Field(default=23, description="VAT rate in percent")
    net_price: float = Field(default=0.0, description="Net unit price")
    gross_price: float = Field(default=0.0, description="Gross unit price")


class InvoiceItemChangesRequest(BaseModel):
    """Fields to change on one draft line; omitted fields stay as they are."""

    name: str | None = None
    quantity: float | None = None
    unit: str | None = None
    percentage: int | None = None
    net_price: float | None = None
    gross_price: float | None = None


class InvoiceDraftRequest(BaseModel):
    """Edited invoice data, as returned by parse and changed by the user."""

    invoice_number: str = Field(default="UNKNOWN", examples=["FV/2024/01/15"])
    date: str | None = Field(default=None, description="Invoice date, ISO or DD.MM.YYYY")
    vendor: str = Field(default="UNKNOWN VENDOR")
    filename: str = Field(default="")
    items: list[InvoiceItemRequest] = Field(default_factory=list)


class ProductCreateRequest(BaseModel):
    """Manually created product. Stock starts at zero."""

    name: str = Field(..., min_length=1)
    unit: str = Field(default="szt")
    min_stock_level: float = Field(default=0.0, ge=0)


class ProductUpdateRequest(BaseModel):
    """Editable product fields. Stock is changed only through movements."""

    name: str | None = Field(default=None, min_length=1)
    unit: str | None = None
    min_stock_level: float | None = Field(default=None, ge=0)


class StockAdjustmentRequest(BaseModel):
    """Manual, signed stock correction."""

    quantity: float = Field(..., description="Positive adds stock, negative removes it")
    notes: str = Field(default="")


class MovementUpdateRequest(BaseModel):
    """Change an existing ledger entry."""

    quantity: float | None = None
    notes: str | None = None


class SaleItemRequest(BaseModel):
    product_id: int
    quantity: float = Field(..., description="Quantity sold, positive")
    unit_price: float = Field(default=0.0, ge=0)


class CreateSaleRequest(BaseModel):
    """A sale; stock leaves the ledger when it is recorded."""

    sale_number: str = Field(..., min_length=1, examples=["S/2024/001"])
    sale_date: date | None = None
    customer: str = Field(default="")
    items: list[SaleItemRequest] = Field(default_factory=list)


class CreateInventoryRequest(BaseModel):
    """Start a stocktake over the selected products."""

    name: str = Field(..., min_length=1, examples=["Inwentaryzacja 2024-01"])
    product_ids: list[int] = Field(default_factory=list)


class RecordCountRequest(BaseModel):
    """Counted quantity for one item. None clears the count."""

    counted_quantity: float | None = None
    notes: str | None = None
