"""Abstract interface for inventory report rendering."""

from abc import ABC, abstractmethod

from stockroom.core.entities.inventory import Inventory


class IInventoryReportRenderer(ABC):
    """Interface for printable inventory reports."""

    @abstractmethod
    def render(self, inventory: Inventory) -> bytes:
        """Render an inventory with its items to document bytes."""
        pass
