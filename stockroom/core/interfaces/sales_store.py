"""Abstract interface for sales storage."""

from abc import ABC, abstractmethod

from stockroom.core.entities.sale import Sale


class ISalesStore(ABC):
    """Interface for sale persistence."""

    @abstractmethod
    async def create_sale(self, sale: Sale) -> Sale:
        """Insert sale, items and one negative sale movement per item atomically."""
        pass

    @abstractmethod
    async def get_sale(self, sale_id: int) -> Sale | None:
        pass

    @abstractmethod
    async def list_sales(self, limit: int = 100, offset: int = 0) -> list[Sale]:
        pass

    @abstractmethod
    async def delete_sale(self, sale_id: int) -> bool:
        """Delete a sale and its movements, returning the stock."""
        pass
