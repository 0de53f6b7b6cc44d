"""SQLite implementation of invoice storage."""

import aiosqlite

from stockroom.config import get_logger
from stockroom.core.entities.invoice import Invoice, InvoiceItem
from stockroom.core.entities.product import MovementType, ReferenceType, StockMovement
from stockroom.core.exceptions import DuplicateInvoiceError
from stockroom.core.interfaces.invoice_store import IInvoiceStore, InvoiceSortField
from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool
from stockroom.infrastructure.storage.sqlite.product_store import (
    find_or_create_product,
    insert_movement,
)
from stockroom.infrastructure.storage.sqlite.rows import parse_day, parse_required_timestamp

logger = get_logger(__name__)

SORT_COLUMNS: dict[str, str] = {
    "date": "invoice_date",
    "vendor": "vendor COLLATE NOCASE",
    "total": "total_gross",
}

PURCHASE_NOTE = "Zakup z faktury {invoice_number}"


class SQLiteInvoiceStore(IInvoiceStore):
    """Invoices, their items, and the purchase movements they create."""

    def __init__(self, pool: ConnectionPool):
        self.pool = pool

    async def create_with_purchases(self, invoice: Invoice) -> Invoice:
        created_products = 0
        try:
            async with self.pool.transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO invoices (
                        filename, invoice_number, invoice_date, vendor,
                        total_net, total_gross, processed_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        invoice.filename,
                        invoice.invoice_number,
                        invoice.invoice_date.isoformat(),
                        invoice.vendor,
                        invoice.total_net,
                        invoice.total_gross,
                        invoice.processed_at.isoformat(sep=" "),
                    ),
                )
                invoice.id = cursor.lastrowid

                for position, item in enumerate(invoice.items):
                    cursor = await conn.execute(
                        """
                        INSERT INTO invoice_items (
                            invoice_id, position, name, quantity, unit, percentage,
                            net_price, gross_price, total_net, total_gross
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            invoice.id,
                            position,
                            item.name,
                            item.quantity,
                            item.unit,
                            item.percentage,
                            item.net_price,
                            item.gross_price,
                            item.total_net,
                            item.total_gross,
                        ),
                    )
                    item.id = cursor.lastrowid
                    item.invoice_id = invoice.id

                    product_id, created = await find_or_create_product(conn, item.name, item.unit)
                    created_products += int(created)

                    await insert_movement(
                        conn,
                        StockMovement(
                            product_id=product_id,
                            movement_type=MovementType.PURCHASE,
                            quantity=item.quantity,
                            reference_id=item.id,
                            reference_type=ReferenceType.INVOICE_ITEM,
                            notes=PURCHASE_NOTE.format(invoice_number=invoice.invoice_number),
                        ),
                    )
        except aiosqlite.IntegrityError as e:
            if "invoice_number" in str(e):
                raise DuplicateInvoiceError(invoice.invoice_number) from e
            raise

        logger.info(
            "invoice_confirmed",
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            items=len(invoice.items),
            products_created=created_products,
        )
        return invoice

    async def get_invoice(self, invoice_id: int) -> Invoice | None:
        async with self.pool.acquire() as conn:
            cursor = await conn.execute("SELECT * FROM invoices WHERE id = ?", (invoice_id,))
            row = await cursor.fetchone()
            if row is None:
                return None

            cursor = await conn.execute(
                "SELECT * FROM invoice_items WHERE invoice_id = ? ORDER BY position, id",
                (invoice_id,),
            )
            item_rows = await cursor.fetchall()

        invoice = self._row_to_invoice(row)
        invoice.items = [self._row_to_item(r) for r in item_rows]
        return invoice

    async def get_by_number(self, invoice_number: str) -> Invoice | None:
        async with self.pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT id FROM invoices WHERE invoice_number = ?", (invoice_number,)
            )
            row = await cursor.fetchone()
        if row is None:
            return None
        return await self.get_invoice(row["id"])

    async def list_invoices(
        self,
        search: str | None = None,
        sort_by: InvoiceSortField = "date",
        descending: bool = True,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Invoice]:
        column = SORT_COLUMNS.get(sort_by, SORT_COLUMNS["date"])
        direction = "DESC" if descending else "ASC"

        query = "SELECT * FROM invoices"
        params: list = []
        if search:
            query += " WHERE invoice_number LIKE ? OR vendor LIKE ?"
            params.extend([f"%{search}%", f"%{search}%"])
        query += f" ORDER BY {column} {direction}, id {direction} LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with self.pool.acquire() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_invoice(row) for row in rows]

    async def delete_invoice(self, invoice_id: int, reverse_stock: bool = True) -> bool:
        reversed_count = 0
        async with self.pool.transaction() as conn:
            if reverse_stock:
                cursor = await conn.execute(
                    """
                    DELETE FROM stock_movements
                    WHERE reference_type = 'invoice_item'
                      AND reference_id IN (
                          SELECT id FROM invoice_items WHERE invoice_id = ?
                      )
                    """,
                    (invoice_id,),
                )
                reversed_count = cursor.rowcount

            cursor = await conn.execute("DELETE FROM invoices WHERE id = ?", (invoice_id,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info(
                "invoice_deleted",
                invoice_id=invoice_id,
                movements_reversed=reversed_count,
            )
        return deleted

    @staticmethod
    def _row_to_invoice(row: aiosqlite.Row) -> Invoice:
        """Convert a database row to an Invoice entity (without items)."""
        return Invoice(
            id=row["id"],
            filename=row["filename"],
            invoice_number=row["invoice_number"],
            invoice_date=parse_day(row["invoice_date"]),
            vendor=row["vendor"],
            total_net=float(row["total_net"]),
            total_gross=float(row["total_gross"]),
            processed_at=parse_required_timestamp(row["processed_at"]),
        )

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> InvoiceItem:
        return InvoiceItem(
            id=row["id"],
            invoice_id=row["invoice_id"],
            name=row["name"],
            quantity=float(row["quantity"]),
            unit=row["unit"],
            percentage=int(row["percentage"]),
            net_price=float(row["net_price"]),
            gross_price=float(row["gross_price"]),
            total_net=float(row["total_net"]),
            total_gross=float(row["total_gross"]),
        )
