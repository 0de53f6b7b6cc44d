"""Product and stock ledger entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from stockroom.core.entities.base import utc_now


class MovementType(str, Enum):
    """Types of stock movements."""

    PURCHASE = "purchase"
    SALE = "sale"
    ADJUSTMENT = "adjustment"
    INVENTORY = "inventory"


class ReferenceType(str, Enum):
    """What a movement's reference_id points at."""

    INVOICE_ITEM = "invoice_item"
    SALE_ITEM = "sale_item"
    INVENTORY = "inventory"
    MANUAL = "manual"


class Product(BaseModel):
    """A stocked product. current_stock is maintained by the ledger."""

    id: int | None = None
    name: str
    unit: str = "szt"
    current_stock: float = 0.0
    min_stock_level: float = 0.0
    last_purchase_price: float | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock <= self.min_stock_level


class StockMovement(BaseModel):
    """
    One signed ledger entry.

    Positive quantity is stock in, negative is stock out.
    """

    id: int | None = None
    product_id: int
    movement_type: MovementType
    quantity: float
    reference_id: int | None = None
    reference_type: ReferenceType | None = None
    notes: str = ""
    created_at: datetime = Field(default_factory=utc_now)

    @model_validator(mode="after")
    def check_sign(self) -> "StockMovement":
        """Purchases add stock, sales remove it, nothing records zero."""
        if self.quantity == 0:
            raise ValueError("movement quantity must be nonzero")
        if self.movement_type == MovementType.PURCHASE and self.quantity < 0:
            raise ValueError("purchase quantity must be positive")
        if self.movement_type == MovementType.SALE and self.quantity > 0:
            raise ValueError("sale quantity must be stored negative")
        return self
