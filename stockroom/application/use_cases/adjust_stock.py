"""Adjust Stock Use Case: manual ledger entries and their corrections."""

from pydantic import ValidationError as PydanticValidationError

from stockroom.application.dto.requests import MovementUpdateRequest, StockAdjustmentRequest
from stockroom.config import get_logger
from stockroom.core.entities.product import MovementType, ReferenceType, StockMovement
from stockroom.core.exceptions import (
    MovementNotFoundError,
    ProductNotFoundError,
    ValidationError,
)
from stockroom.core.interfaces.product_store import IProductStore

logger = get_logger(__name__)


class AdjustStockUseCase:
    """Post, edit and remove movements; stock follows through the ledger."""

    def __init__(self, product_store: IProductStore):
        self._product_store = product_store

    async def execute(self, product_id: int, request: StockAdjustmentRequest) -> StockMovement:
        """Record a signed manual adjustment."""
        if await self._product_store.get_product(product_id) is None:
            raise ProductNotFoundError(product_id)
        if request.quantity == 0:
            raise ValidationError("quantity", "adjustment quantity must be nonzero", 0)

        movement = await self._product_store.add_movement(
            StockMovement(
                product_id=product_id,
                movement_type=MovementType.ADJUSTMENT,
                quantity=request.quantity,
                reference_type=ReferenceType.MANUAL,
                notes=request.notes,
            )
        )
        logger.info(
            "stock_adjusted",
            product_id=product_id,
            quantity=request.quantity,
            movement_id=movement.id,
        )
        return movement

    async def update_movement(
        self, movement_id: int, request: MovementUpdateRequest
    ) -> StockMovement:
        """Change quantity or notes. Stock moves by the quantity delta."""
        existing = await self._product_store.get_movement(movement_id)
        if existing is None:
            raise MovementNotFoundError(movement_id)

        changes = request.model_dump(exclude_none=True)
        try:
            updated = StockMovement.model_validate(existing.model_dump() | changes)
        except PydanticValidationError as e:
            raise ValidationError(
                "quantity", e.errors()[0]["msg"], changes.get("quantity")
            ) from e

        return await self._product_store.update_movement(updated)

    async def delete_movement(self, movement_id: int) -> None:
        """Remove a movement, reversing its stock effect."""
        if not await self._product_store.delete_movement(movement_id):
            raise MovementNotFoundError(movement_id)
