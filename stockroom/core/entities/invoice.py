"""Invoice domain entities."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from stockroom.core.entities.base import utc_now


class InvoiceItem(BaseModel):
    """A single invoice line. Totals are filled in by the totals engine."""

    id: int | None = None
    invoice_id: int | None = None
    name: str
    quantity: float = 1.0
    unit: str = "szt"
    percentage: int = 23  # VAT rate
    net_price: float = 0.0
    gross_price: float = 0.0
    total_net: float = 0.0
    total_gross: float = 0.0


class ParsedInvoiceData(BaseModel):
    """Canonical output of both extractors, editable before confirmation."""

    invoice_number: str = "UNKNOWN"
    date: str  # ISO YYYY-MM-DD
    vendor: str = "UNKNOWN VENDOR"
    items: list[InvoiceItem] = Field(default_factory=list)
    total_net: float = 0.0
    total_gross: float = 0.0
    source: str = "text"  # "ai" or "text"


class Invoice(BaseModel):
    """A confirmed, persisted invoice."""

    id: int | None = None
    filename: str = ""
    invoice_number: str
    invoice_date: date
    vendor: str
    total_net: float = 0.0
    total_gross: float = 0.0
    items: list[InvoiceItem] = Field(default_factory=list)
    processed_at: datetime = Field(default_factory=utc_now)
