"""Tests for AdjustStockUseCase."""

from unittest.mock import AsyncMock

import pytest

from stockroom.application.dto.requests import MovementUpdateRequest, StockAdjustmentRequest
from stockroom.application.use_cases.adjust_stock import AdjustStockUseCase
from stockroom.core.entities.product import MovementType, Product, ReferenceType, StockMovement
from stockroom.core.exceptions import (
    MovementNotFoundError,
    ProductNotFoundError,
    ValidationError,
)


@pytest.fixture
def mock_product_store():
    store = AsyncMock()
    store.get_product.return_value = Product(id=1, name="Cement")

    async def add(movement: StockMovement) -> StockMovement:
        movement.id = 10
        return movement

    store.add_movement.side_effect = add
    store.update_movement.side_effect = lambda m: m
    return store


@pytest.fixture
def use_case(mock_product_store):
    return AdjustStockUseCase(product_store=mock_product_store)


def purchase() -> StockMovement:
    return StockMovement(
        id=3,
        product_id=1,
        movement_type=MovementType.PURCHASE,
        quantity=10,
        reference_id=7,
        reference_type=ReferenceType.INVOICE_ITEM,
    )


class TestAdjust:
    async def test_manual_adjustment(self, use_case):
        movement = await use_case.execute(1, StockAdjustmentRequest(quantity=-2.5, notes="zniszczone"))
        assert movement.id == 10
        assert movement.movement_type == MovementType.ADJUSTMENT
        assert movement.reference_type == ReferenceType.MANUAL
        assert movement.quantity == -2.5

    async def test_unknown_product(self, use_case, mock_product_store):
        mock_product_store.get_product.return_value = None
        with pytest.raises(ProductNotFoundError):
            await use_case.execute(99, StockAdjustmentRequest(quantity=1))

    async def test_zero_rejected(self, use_case, mock_product_store):
        with pytest.raises(ValidationError):
            await use_case.execute(1, StockAdjustmentRequest(quantity=0))
        mock_product_store.add_movement.assert_not_called()


class TestEditMovement:
    async def test_update_quantity(self, use_case, mock_product_store):
        mock_product_store.get_movement.return_value = purchase()
        updated = await use_case.update_movement(3, MovementUpdateRequest(quantity=4))
        assert updated.quantity == 4
        assert updated.reference_id == 7

    async def test_update_keeps_sign_rules(self, use_case, mock_product_store):
        mock_product_store.get_movement.return_value = purchase()
        with pytest.raises(ValidationError):
            await use_case.update_movement(3, MovementUpdateRequest(quantity=-4))
        mock_product_store.update_movement.assert_not_called()

    async def test_update_missing(self, use_case, mock_product_store):
        mock_product_store.get_movement.return_value = None
        with pytest.raises(MovementNotFoundError):
            await use_case.update_movement(3, MovementUpdateRequest(notes="x"))

    async def test_delete_missing(self, use_case, mock_product_store):
        mock_product_store.delete_movement.return_value = False
        with pytest.raises(MovementNotFoundError):
            await use_case.delete_movement(3)
