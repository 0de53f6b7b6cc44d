"""Sale domain entities."""

from datetime import date, datetime

from pydantic import BaseModel, Field, model_validator

from stockroom.core.entities.base import utc_now


class SaleItem(BaseModel):
    """A single sold product line."""

    id: int | None = None
    sale_id: int | None = None
    product_id: int
    quantity: float
    unit_price: float
    total_price: float = 0.0
    product_name: str | None = None

    @model_validator(mode="after")
    def compute_total(self) -> "SaleItem":
        """total_price = quantity * unit_price."""
        self.total_price = self.quantity * self.unit_price
        return self


class Sale(BaseModel):
    """A sale with its items. Stock goes out on creation."""

    id: int | None = None
    sale_number: str
    sale_date: date = Field(default_factory=date.today)
    customer: str = ""
    total_amount: float = 0.0
    items: list[SaleItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)

    @model_validator(mode="after")
    def compute_total(self) -> "Sale":
        """Sum item totals when items are present."""
        if self.items:
            self.total_amount = sum(i.total_price for i in self.items)
        return self
