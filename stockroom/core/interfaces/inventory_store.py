"""Abstract interface for inventory count storage."""

from abc import ABC, abstractmethod
from datetime import datetime

from stockroom.core.entities.inventory import Inventory, InventoryItem, InventoryStatus
from stockroom.core.entities.product import StockMovement


class IInventoryStore(ABC):
    """Interface for inventories and their count sheets."""

    @abstractmethod
    async def create_inventory(self, name: str, product_ids: list[int]) -> Inventory:
        """Create a draft with expected quantities snapshotted from current stock."""
        pass

    @abstractmethod
    async def get_inventory(self, inventory_id: int) -> Inventory | None:
        """Inventory with items joined to product name and unit."""
        pass

    @abstractmethod
    async def list_inventories(self, limit: int = 100, offset: int = 0) -> list[Inventory]:
        """List inventories without items."""
        pass

    @abstractmethod
    async def get_item(self, item_id: int) -> InventoryItem | None:
        pass

    @abstractmethod
    async def set_status(
        self,
        inventory_id: int,
        expected: InventoryStatus,
        new: InventoryStatus,
    ) -> bool:
        """Move from expected to new status. False when status was not expected."""
        pass

    @abstractmethod
    async def record_count(
        self, item_id: int, counted_quantity: float | None, notes: str | None = None
    ) -> bool:
        """Set a count while the inventory is in progress. False otherwise."""
        pass

    @abstractmethod
    async def complete_with_corrections(
        self, inventory_id: int, completed_at: datetime
    ) -> list[StockMovement] | None:
        """
        Complete an in-progress inventory and post one correction movement
        per counted item with a nonzero difference.

        Returns the movements written, or None when the inventory was not
        in progress.
        """
        pass

    @abstractmethod
    async def delete_inventory(self, inventory_id: int) -> bool:
        pass
