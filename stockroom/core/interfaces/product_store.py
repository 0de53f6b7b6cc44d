"""Abstract interface for product and stock ledger storage."""

from abc import ABC, abstractmethod

from stockroom.core.entities.product import Product, StockMovement


class IProductStore(ABC):
    """Interface for products and their movement ledger."""

    @abstractmethod
    async def create_product(self, product: Product) -> Product:
        """Create a product with zero stock."""
        pass

    @abstractmethod
    async def get_product(self, product_id: int) -> Product | None:
        pass

    @abstractmethod
    async def get_product_by_name(self, name: str) -> Product | None:
        """Exact, case-sensitive name lookup."""
        pass

    @abstractmethod
    async def list_products(
        self, search: str | None = None, limit: int = 100, offset: int = 0
    ) -> list[Product]:
        pass

    @abstractmethod
    async def list_low_stock(self, limit: int = 100) -> list[Product]:
        """Products with current_stock at or below min_stock_level."""
        pass

    @abstractmethod
    async def update_product(self, product: Product) -> Product:
        """Update name, unit and min_stock_level. Stock is never written."""
        pass

    @abstractmethod
    async def delete_product(self, product_id: int) -> bool:
        pass

    @abstractmethod
    async def add_movement(self, movement: StockMovement) -> StockMovement:
        """Append a ledger entry. Stock follows via the store."""
        pass

    @abstractmethod
    async def get_movement(self, movement_id: int) -> StockMovement | None:
        pass

    @abstractmethod
    async def update_movement(self, movement: StockMovement) -> StockMovement:
        """Change a movement's quantity or notes."""
        pass

    @abstractmethod
    async def delete_movement(self, movement_id: int) -> bool:
        """Remove a movement, reversing its effect on stock."""
        pass

    @abstractmethod
    async def get_movements(
        self, product_id: int, limit: int = 100
    ) -> list[StockMovement]:
        """Movements for a product, newest first."""
        pass

    @abstractmethod
    async def sum_movements(self, product_id: int) -> float:
        """Signed sum of all movements for a product."""
        pass
