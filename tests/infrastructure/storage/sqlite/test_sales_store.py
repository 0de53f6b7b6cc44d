"""Tests for SQLite sales store."""

from datetime import date

import pytest

from stockroom.core.entities.product import MovementType, ReferenceType
from stockroom.core.entities.sale import Sale, SaleItem
from stockroom.core.exceptions import DuplicateSaleError, ProductNotFoundError
from stockroom.infrastructure.storage.sqlite.sales_store import SALE_NOTE


def make_sale(number: str, *items: tuple[int, float, float]) -> Sale:
    return Sale(
        sale_number=number,
        sale_date=date(2024, 2, 1),
        customer="Jan Kowalski",
        items=[SaleItem(product_id=pid, quantity=qty, unit_price=price) for pid, qty, price in items],
    )


class TestCreateSale:
    async def test_posts_negative_movement(self, sales_store, product_store, cement):
        sale = await sales_store.create_sale(make_sale("S/1", (cement.id, 5, 30.0)))

        assert sale.id is not None
        assert sale.total_amount == 150.0
        assert sale.items[0].product_name == "Cement"

        movements = await product_store.get_movements(cement.id)
        assert len(movements) == 1
        assert movements[0].movement_type == MovementType.SALE
        assert movements[0].quantity == -5
        assert movements[0].reference_type == ReferenceType.SALE_ITEM
        assert movements[0].reference_id == sale.items[0].id
        assert movements[0].notes == SALE_NOTE.format(sale_number="S/1")
        assert (await product_store.get_product(cement.id)).current_stock == -5

    async def test_unknown_product_rolls_back(self, sales_store, product_store, cement):
        with pytest.raises(ProductNotFoundError):
            await sales_store.create_sale(make_sale("S/1", (cement.id, 1, 1.0), (9999, 1, 1.0)))

        assert await sales_store.list_sales() == []
        assert (await product_store.get_product(cement.id)).current_stock == 0

    async def test_duplicate_number(self, sales_store, cement):
        await sales_store.create_sale(make_sale("S/1", (cement.id, 1, 1.0)))
        with pytest.raises(DuplicateSaleError):
            await sales_store.create_sale(make_sale("S/1", (cement.id, 1, 1.0)))


class TestReadAndDelete:
    async def test_get_sale_keeps_stored_total(self, sales_store, cement, sand):
        created = await sales_store.create_sale(
            make_sale("S/1", (cement.id, 2, 10.0), (sand.id, 3, 1.5))
        )
        sale = await sales_store.get_sale(created.id)
        assert sale.total_amount == pytest.approx(24.5)
        assert [i.product_name for i in sale.items] == ["Cement", "Piasek"]
        assert sale.sale_date == date(2024, 2, 1)

    async def test_delete_restores_stock(self, sales_store, product_store, cement):
        sale = await sales_store.create_sale(make_sale("S/1", (cement.id, 4, 1.0)))
        assert await sales_store.delete_sale(sale.id) is True
        assert (await product_store.get_product(cement.id)).current_stock == 0
        assert await product_store.get_movements(cement.id) == []
        assert await sales_store.get_sale(sale.id) is None

    async def test_delete_missing(self, sales_store):
        assert await sales_store.delete_sale(1) is False
