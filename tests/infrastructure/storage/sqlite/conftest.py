"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from datetime import date
from pathlib import Path

import pytest

from stockroom.core.entities.invoice import Invoice, InvoiceItem
from stockroom.core.entities.product import Product
from stockroom.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteInventoryStore,
    SQLiteInvoiceStore,
    SQLiteProductStore,
    SQLiteSalesStore,
)
from stockroom.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def initialized_db(temp_db_path: Path) -> Path:
    """Temporary database with every migration applied."""
    results = await initialize_database(temp_db_path, create_backup_before=False)
    assert all(r.success for r in results)
    return temp_db_path


@pytest.fixture
async def pool(initialized_db: Path) -> AsyncGenerator[ConnectionPool, None]:
    pool = ConnectionPool(initialized_db, pool_size=2)
    await pool.initialize()
    yield pool
    await pool.close()


@pytest.fixture
def product_store(pool: ConnectionPool) -> SQLiteProductStore:
    return SQLiteProductStore(pool)


@pytest.fixture
def invoice_store(pool: ConnectionPool) -> SQLiteInvoiceStore:
    return SQLiteInvoiceStore(pool)


@pytest.fixture
def sales_store(pool: ConnectionPool) -> SQLiteSalesStore:
    return SQLiteSalesStore(pool)


@pytest.fixture
def inventory_store(pool: ConnectionPool) -> SQLiteInventoryStore:
    return SQLiteInventoryStore(pool)


@pytest.fixture
async def cement(product_store: SQLiteProductStore) -> Product:
    return await product_store.create_product(Product(name="Cement", unit="kg", min_stock_level=5))


@pytest.fixture
async def sand(product_store: SQLiteProductStore) -> Product:
    return await product_store.create_product(Product(name="Piasek", unit="kg"))


def make_invoice(number: str = "FV/1/2024", *items: tuple[str, float, float]) -> Invoice:
    """Invoice with (name, quantity, net_price) lines, totals filled in."""
    lines = items or (("Cement", 10, 25.5),)
    invoice_items = [
        InvoiceItem(
            name=name,
            quantity=qty,
            unit="kg",
            net_price=net,
            gross_price=net * 1.23,
            total_net=qty * net,
            total_gross=qty * net * 1.23,
        )
        for name, qty, net in lines
    ]
    return Invoice(
        invoice_number=number,
        invoice_date=date(2024, 1, 15),
        vendor="Hurtownia ABC",
        filename="fv.txt",
        total_net=sum(i.total_net for i in invoice_items),
        total_gross=sum(i.total_gross for i in invoice_items),
        items=invoice_items,
    )


@pytest.fixture
def invoice_factory():
    return make_invoice
