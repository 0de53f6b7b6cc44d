"""SQLite implementation of product and stock ledger storage."""

import aiosqlite

from stockroom.config import get_logger
from stockroom.core.entities.product import (
    MovementType,
    Product,
    ReferenceType,
    StockMovement,
)
from stockroom.core.exceptions import (
    DuplicateProductError,
    MovementNotFoundError,
    ProductInUseError,
    ProductNotFoundError,
)
from stockroom.core.interfaces.product_store import IProductStore
from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool
from stockroom.infrastructure.storage.sqlite.rows import parse_required_timestamp

logger = get_logger(__name__)


async def insert_movement(conn: aiosqlite.Connection, movement: StockMovement) -> StockMovement:
    """Insert a movement on an open connection. Stock triggers fire on insert."""
    cursor = await conn.execute(
        """
        INSERT INTO stock_movements (
            product_id, movement_type, quantity,
            reference_id, reference_type, notes, created_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (
            movement.product_id,
            movement.movement_type.value,
            movement.quantity,
            movement.reference_id,
            movement.reference_type.value if movement.reference_type else None,
            movement.notes,
            movement.created_at.isoformat(sep=" "),
        ),
    )
    movement.id = cursor.lastrowid
    return movement


async def find_or_create_product(
    conn: aiosqlite.Connection, name: str, unit: str
) -> tuple[int, bool]:
    """
    Product id by exact name, creating it on first sight.

    Returns (product_id, created).
    """
    cursor = await conn.execute("SELECT id FROM products WHERE name = ?", (name,))
    row = await cursor.fetchone()
    if row is not None:
        return row["id"], False

    cursor = await conn.execute(
        "INSERT INTO products (name, unit) VALUES (?, ?)",
        (name, unit),
    )
    return cursor.lastrowid, True  # type: ignore[return-value]


class SQLiteProductStore(IProductStore):
    """Products plus the movement ledger that drives their stock."""

    def __init__(self, pool: ConnectionPool):
        self.pool = pool

    async def create_product(self, product: Product) -> Product:
        try:
            async with self.pool.transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO products (name, unit, min_stock_level)
                    VALUES (?, ?, ?)
                    """,
                    (product.name, product.unit, product.min_stock_level),
                )
                product_id = cursor.lastrowid
        except aiosqlite.IntegrityError as e:
            raise DuplicateProductError(product.name) from e

        logger.info("product_created", product_id=product_id, name=product.name)
        created = await self.get_product(product_id)  # type: ignore[arg-type]
        if created is None:
            raise ProductNotFoundError(product_id or 0)
        return created

    async def get_product(self, product_id: int) -> Product | None:
        async with self.pool.acquire() as conn:
            cursor = await conn.execute("SELECT * FROM products WHERE id = ?", (product_id,))
            row = await cursor.fetchone()
            return self._row_to_product(row) if row else None

    async def get_product_by_name(self, name: str) -> Product | None:
        async with self.pool.acquire() as conn:
            cursor = await conn.execute("SELECT * FROM products WHERE name = ?", (name,))
            row = await cursor.fetchone()
            return self._row_to_product(row) if row else None

    async def list_products(
        self, search: str | None = None, limit: int = 100, offset: int = 0
    ) -> list[Product]:
        query = "SELECT * FROM products"
        params: list = []
        if search:
            query += " WHERE name LIKE ?"
            params.append(f"%{search}%")
        query += " ORDER BY name LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with self.pool.acquire() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_product(row) for row in rows]

    async def list_low_stock(self, limit: int = 100) -> list[Product]:
        async with self.pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM products
                WHERE current_stock <= min_stock_level
                ORDER BY current_stock - min_stock_level, name
                LIMIT ?
                """,
                (limit,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_product(row) for row in rows]

    async def update_product(self, product: Product) -> Product:
        try:
            async with self.pool.transaction() as conn:
                cursor = await conn.execute(
                    """
                    UPDATE products SET
                        name = ?,
                        unit = ?,
                        min_stock_level = ?,
                        updated_at = datetime('now')
                    WHERE id = ?
                    """,
                    (product.name, product.unit, product.min_stock_level, product.id),
                )
                if cursor.rowcount == 0:
                    raise ProductNotFoundError(product.id or 0)
        except aiosqlite.IntegrityError as e:
            raise DuplicateProductError(product.name) from e

        logger.info("product_updated", product_id=product.id)
        updated = await self.get_product(product.id)  # type: ignore[arg-type]
        if updated is None:
            raise ProductNotFoundError(product.id or 0)
        return updated

    async def delete_product(self, product_id: int) -> bool:
        """
        Remove a product with its ledger.

        Raises:
            ProductInUseError: sale lines reference the product
        """
        async with self.pool.transaction() as conn:
            cursor = await conn.execute(
                "SELECT COUNT(*) FROM sale_items WHERE product_id = ?", (product_id,)
            )
            sale_lines = (await cursor.fetchone())[0]
            if sale_lines:
                raise ProductInUseError(product_id, sale_lines)

            await conn.execute("DELETE FROM stock_movements WHERE product_id = ?", (product_id,))
            cursor = await conn.execute("DELETE FROM products WHERE id = ?", (product_id,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info("product_deleted", product_id=product_id)
        return deleted

    async def add_movement(self, movement: StockMovement) -> StockMovement:
        async with self.pool.transaction() as conn:
            movement = await insert_movement(conn, movement)

        logger.info(
            "stock_movement_recorded",
            movement_id=movement.id,
            product_id=movement.product_id,
            type=movement.movement_type.value,
            qty=movement.quantity,
        )
        return movement

    async def get_movement(self, movement_id: int) -> StockMovement | None:
        async with self.pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM stock_movements WHERE id = ?", (movement_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_movement(row) if row else None

    async def update_movement(self, movement: StockMovement) -> StockMovement:
        async with self.pool.transaction() as conn:
            cursor = await conn.execute(
                "UPDATE stock_movements SET quantity = ?, notes = ? WHERE id = ?",
                (movement.quantity, movement.notes, movement.id),
            )
            if cursor.rowcount == 0:
                raise MovementNotFoundError(movement.id or 0)

        logger.info(
            "stock_movement_updated",
            movement_id=movement.id,
            qty=movement.quantity,
        )
        return movement

    async def delete_movement(self, movement_id: int) -> bool:
        async with self.pool.transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM stock_movements WHERE id = ?", (movement_id,)
            )
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info("stock_movement_deleted", movement_id=movement_id)
        return deleted

    async def get_movements(
        self, product_id: int, limit: int = 100
    ) -> list[StockMovement]:
        async with self.pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM stock_movements
                WHERE product_id = ?
                ORDER BY created_at DESC, id DESC
                LIMIT ?
                """,
                (product_id, limit),
            )
            rows = await cursor.fetchall()
            return [self._row_to_movement(row) for row in rows]

    async def sum_movements(self, product_id: int) -> float:
        async with self.pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT COALESCE(SUM(quantity), 0) FROM stock_movements WHERE product_id = ?",
                (product_id,),
            )
            row = await cursor.fetchone()
            return float(row[0])

    @staticmethod
    def _row_to_product(row: aiosqlite.Row) -> Product:
        """Convert a database row to a Product entity."""
        return Product(
            id=row["id"],
            name=row["name"],
            unit=row["unit"],
            current_stock=float(row["current_stock"]),
            min_stock_level=float(row["min_stock_level"]),
            last_purchase_price=row["last_purchase_price"],
            created_at=parse_required_timestamp(row["created_at"]),
            updated_at=parse_required_timestamp(row["updated_at"]),
        )

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> StockMovement:
        """Convert a database row to a StockMovement entity."""
        return StockMovement(
            id=row["id"],
            product_id=row["product_id"],
            movement_type=MovementType(row["movement_type"]),
            quantity=float(row["quantity"]),
            reference_id=row["reference_id"],
            reference_type=ReferenceType(row["reference_type"]) if row["reference_type"] else None,
            notes=row["notes"] or "",
            created_at=parse_required_timestamp(row["created_at"]),
        )
