"""Inventory count (stocktake) entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from stockroom.core.entities.base import utc_now

# Stock is a REAL sum of decimal movements; noise below this is not a difference
QUANTITY_DECIMALS = 6


class InventoryStatus(str, Enum):
    """Forward-only inventory lifecycle."""

    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class CountStatus(str, Enum):
    """Per-item reconciliation outcome."""

    NOT_COUNTED = "not_counted"
    OK = "ok"
    SURPLUS = "surplus"
    SHORTAGE = "shortage"


class InventoryItem(BaseModel):
    """One product on a count sheet."""

    id: int | None = None
    inventory_id: int | None = None
    product_id: int
    expected_quantity: float = 0.0
    counted_quantity: float | None = None  # None = not counted yet
    notes: str = ""
    product_name: str | None = None
    product_unit: str | None = None
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_counted(self) -> bool:
        return self.counted_quantity is not None

    @property
    def difference(self) -> float | None:
        if self.counted_quantity is None:
            return None
        # + 0.0 turns -0.0 into 0.0
        return round(self.counted_quantity - self.expected_quantity, QUANTITY_DECIMALS) + 0.0

    @property
    def count_status(self) -> CountStatus:
        diff = self.difference
        if diff is None:
            return CountStatus.NOT_COUNTED
        if diff > 0:
            return CountStatus.SURPLUS
        if diff < 0:
            return CountStatus.SHORTAGE
        return CountStatus.OK


class Inventory(BaseModel):
    """A stocktake with its count sheet."""

    id: int | None = None
    name: str
    status: InventoryStatus = InventoryStatus.DRAFT
    created_at: datetime = Field(default_factory=utc_now)
    completed_at: datetime | None = None
    items: list[InventoryItem] = Field(default_factory=list)

    @property
    def counted_count(self) -> int:
        return sum(1 for i in self.items if i.is_counted)

    @property
    def total_difference(self) -> float:
        return sum(i.difference for i in self.items if i.difference is not None)
