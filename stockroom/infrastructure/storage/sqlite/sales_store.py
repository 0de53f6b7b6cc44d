"""SQLite implementation of sales storage."""

import aiosqlite

from stockroom.config import get_logger
from stockroom.core.entities.product import MovementType, ReferenceType, StockMovement
from stockroom.core.entities.sale import Sale, SaleItem
from stockroom.core.exceptions import DuplicateSaleError, ProductNotFoundError
from stockroom.core.interfaces.sales_store import ISalesStore
from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool
from stockroom.infrastructure.storage.sqlite.product_store import insert_movement
from stockroom.infrastructure.storage.sqlite.rows import parse_day, parse_required_timestamp

logger = get_logger(__name__)

SALE_NOTE = "Sprzedaż {sale_number}"


class SQLiteSalesStore(ISalesStore):
    """Sales, their items, and the outgoing movements they post."""

    def __init__(self, pool: ConnectionPool):
        self.pool = pool

    async def create_sale(self, sale: Sale) -> Sale:
        try:
            async with self.pool.transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO sales (sale_number, sale_date, customer, total_amount, created_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        sale.sale_number,
                        sale.sale_date.isoformat(),
                        sale.customer,
                        sale.total_amount,
                        sale.created_at.isoformat(sep=" "),
                    ),
                )
                sale.id = cursor.lastrowid

                for item in sale.items:
                    cursor = await conn.execute(
                        "SELECT name FROM products WHERE id = ?", (item.product_id,)
                    )
                    product = await cursor.fetchone()
                    if product is None:
                        raise ProductNotFoundError(item.product_id)
                    item.product_name = product["name"]

                    cursor = await conn.execute(
                        """
                        INSERT INTO sale_items (sale_id, product_id, quantity, unit_price, total_price)
                        VALUES (?, ?, ?, ?, ?)
                        """,
                        (sale.id, item.product_id, item.quantity, item.unit_price, item.total_price),
                    )
                    item.id = cursor.lastrowid
                    item.sale_id = sale.id

                    # Sales are the one place the user-facing quantity flips sign
                    await insert_movement(
                        conn,
                        StockMovement(
                            product_id=item.product_id,
                            movement_type=MovementType.SALE,
                            quantity=-item.quantity,
                            reference_id=item.id,
                            reference_type=ReferenceType.SALE_ITEM,
                            notes=SALE_NOTE.format(sale_number=sale.sale_number),
                        ),
                    )
        except aiosqlite.IntegrityError as e:
            if "sale_number" in str(e):
                raise DuplicateSaleError(sale.sale_number) from e
            raise

        logger.info(
            "sale_recorded",
            sale_id=sale.id,
            sale_number=sale.sale_number,
            items=len(sale.items),
            total=sale.total_amount,
        )
        return sale

    async def get_sale(self, sale_id: int) -> Sale | None:
        async with self.pool.acquire() as conn:
            cursor = await conn.execute("SELECT * FROM sales WHERE id = ?", (sale_id,))
            row = await cursor.fetchone()
            if row is None:
                return None

            cursor = await conn.execute(
                """
                SELECT si.*, p.name AS product_name
                FROM sale_items si
                LEFT JOIN products p ON p.id = si.product_id
                WHERE si.sale_id = ?
                ORDER BY si.id
                """,
                (sale_id,),
            )
            item_rows = await cursor.fetchall()

        return self._row_to_sale(row, [self._row_to_item(r) for r in item_rows])

    async def list_sales(self, limit: int = 100, offset: int = 0) -> list[Sale]:
        async with self.pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM sales
                ORDER BY sale_date DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                (limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_sale(row) for row in rows]

    async def delete_sale(self, sale_id: int) -> bool:
        async with self.pool.transaction() as conn:
            cursor = await conn.execute(
                """
                DELETE FROM stock_movements
                WHERE reference_type = 'sale_item'
                  AND reference_id IN (SELECT id FROM sale_items WHERE sale_id = ?)
                """,
                (sale_id,),
            )
            reversed_count = cursor.rowcount
            cursor = await conn.execute("DELETE FROM sales WHERE id = ?", (sale_id,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info("sale_deleted", sale_id=sale_id, movements_reversed=reversed_count)
        return deleted

    @staticmethod
    def _row_to_sale(row: aiosqlite.Row, items: list[SaleItem] | None = None) -> Sale:
        sale = Sale(
            id=row["id"],
            sale_number=row["sale_number"],
            sale_date=parse_day(row["sale_date"]),
            customer=row["customer"],
            total_amount=float(row["total_amount"]),
            created_at=parse_required_timestamp(row["created_at"]),
        )
        # Stored total is authoritative; attach items without re-summing
        sale.items = items or []
        return sale

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> SaleItem:
        return SaleItem(
            id=row["id"],
            sale_id=row["sale_id"],
            product_id=row["product_id"],
            quantity=float(row["quantity"]),
            unit_price=float(row["unit_price"]),
            product_name=row["product_name"],
        )
