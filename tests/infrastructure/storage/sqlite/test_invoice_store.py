"""Tests for SQLite invoice store: confirmation posts purchases."""

import pytest

from stockroom.core.entities.product import MovementType, ReferenceType
from stockroom.core.exceptions import DuplicateInvoiceError
from stockroom.infrastructure.storage.sqlite.invoice_store import PURCHASE_NOTE


class TestCreateWithPurchases:
    async def test_creates_products_and_movements(
        self, invoice_store, product_store, invoice_factory
    ):
        invoice = await invoice_store.create_with_purchases(
            invoice_factory("FV/1", ("Cement", 10, 25.5), ("Piasek", 2.5, 4.0))
        )
        assert invoice.id is not None
        assert all(item.id is not None for item in invoice.items)

        cement = await product_store.get_product_by_name("Cement")
        sand = await product_store.get_product_by_name("Piasek")
        assert cement.current_stock == 10
        assert sand.current_stock == 2.5
        assert cement.unit == "kg"

        movements = await product_store.get_movements(cement.id)
        assert len(movements) == 1
        assert movements[0].movement_type == MovementType.PURCHASE
        assert movements[0].reference_type == ReferenceType.INVOICE_ITEM
        assert movements[0].reference_id == invoice.items[0].id
        assert movements[0].notes == PURCHASE_NOTE.format(invoice_number="FV/1")

    async def test_sets_last_purchase_price(self, invoice_store, product_store, invoice_factory):
        await invoice_store.create_with_purchases(invoice_factory("FV/1", ("Cement", 1, 20.0)))
        await invoice_store.create_with_purchases(invoice_factory("FV/2", ("Cement", 1, 22.5)))
        cement = await product_store.get_product_by_name("Cement")
        assert cement.last_purchase_price == 22.5
        assert cement.current_stock == 2

    async def test_reuses_product_by_exact_name(
        self, invoice_store, product_store, invoice_factory, cement
    ):
        await invoice_store.create_with_purchases(
            invoice_factory("FV/1", ("Cement", 3, 10.0), ("cement", 4, 10.0))
        )
        assert (await product_store.get_product(cement.id)).current_stock == 3
        lower = await product_store.get_product_by_name("cement")
        assert lower is not None
        assert lower.id != cement.id
        assert lower.current_stock == 4

    async def test_duplicate_number_rolls_back(
        self, invoice_store, product_store, invoice_factory
    ):
        await invoice_store.create_with_purchases(invoice_factory("FV/1", ("Cement", 1, 1.0)))
        with pytest.raises(DuplicateInvoiceError):
            await invoice_store.create_with_purchases(
                invoice_factory("FV/1", ("Nowy produkt", 5, 1.0))
            )
        assert await product_store.get_product_by_name("Nowy produkt") is None
        assert len(await invoice_store.list_invoices()) == 1


class TestReadInvoices:
    async def test_get_invoice_with_items_in_order(self, invoice_store, invoice_factory):
        created = await invoice_store.create_with_purchases(
            invoice_factory("FV/1", ("B", 1, 1.0), ("A", 2, 2.0))
        )
        invoice = await invoice_store.get_invoice(created.id)
        assert [i.name for i in invoice.items] == ["B", "A"]
        assert invoice.items[1].total_net == 4.0
        assert invoice.invoice_date.isoformat() == "2024-01-15"

    async def test_get_by_number(self, invoice_store, invoice_factory):
        await invoice_store.create_with_purchases(invoice_factory("FV/7"))
        assert (await invoice_store.get_by_number("FV/7")).invoice_number == "FV/7"
        assert await invoice_store.get_by_number("FV/8") is None

    async def test_list_search_and_sort(self, invoice_store, invoice_factory):
        await invoice_store.create_with_purchases(invoice_factory("FV/1", ("A", 1, 10.0)))
        await invoice_store.create_with_purchases(invoice_factory("FV/2", ("B", 1, 50.0)))
        await invoice_store.create_with_purchases(invoice_factory("KOR/3", ("C", 1, 30.0)))

        found = await invoice_store.list_invoices(search="FV")
        assert {i.invoice_number for i in found} == {"FV/1", "FV/2"}

        by_total = await invoice_store.list_invoices(sort_by="total", descending=False)
        assert [i.invoice_number for i in by_total] == ["FV/1", "KOR/3", "FV/2"]


class TestDeleteInvoice:
    async def test_delete_reverses_purchases(
        self, invoice_store, product_store, invoice_factory
    ):
        invoice = await invoice_store.create_with_purchases(
            invoice_factory("FV/1", ("Cement", 10, 1.0))
        )
        assert await invoice_store.delete_invoice(invoice.id) is True

        cement = await product_store.get_product_by_name("Cement")
        assert cement is not None
        assert cement.current_stock == 0
        assert await product_store.get_movements(cement.id) == []
        assert await invoice_store.get_invoice(invoice.id) is None

    async def test_delete_can_keep_stock(self, invoice_store, product_store, invoice_factory):
        invoice = await invoice_store.create_with_purchases(
            invoice_factory("FV/1", ("Cement", 10, 1.0))
        )
        assert await invoice_store.delete_invoice(invoice.id, reverse_stock=False) is True
        cement = await product_store.get_product_by_name("Cement")
        assert cement.current_stock == 10

    async def test_delete_missing(self, invoice_store):
        assert await invoice_store.delete_invoice(404) is False
