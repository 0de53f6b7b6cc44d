"""SQLite implementation of inventory count storage."""

from datetime import datetime

import aiosqlite

from stockroom.config import get_logger
from stockroom.core.entities.inventory import Inventory, InventoryItem, InventoryStatus
from stockroom.core.entities.product import StockMovement
from stockroom.core.exceptions import InventoryNotFoundError, ProductNotFoundError
from stockroom.core.interfaces.inventory_store import IInventoryStore
from stockroom.core.services.inventory_workflow import plan_corrections
from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool
from stockroom.infrastructure.storage.sqlite.product_store import insert_movement
from stockroom.infrastructure.storage.sqlite.rows import (
    parse_required_timestamp,
    parse_timestamp,
)

logger = get_logger(__name__)

ITEMS_QUERY = """
    SELECT ii.*, p.name AS product_name, p.unit AS product_unit
    FROM inventory_items ii
    JOIN products p ON p.id = ii.product_id
    WHERE ii.inventory_id = ?
    ORDER BY p.name, ii.id
"""


class SQLiteInventoryStore(IInventoryStore):
    """Inventories, count sheets and their correction movements."""

    def __init__(self, pool: ConnectionPool):
        self.pool = pool

    async def create_inventory(self, name: str, product_ids: list[int]) -> Inventory:
        unique_ids = list(dict.fromkeys(product_ids))

        async with self.pool.transaction() as conn:
            cursor = await conn.execute(
                "INSERT INTO inventories (name, status) VALUES (?, ?)",
                (name, InventoryStatus.DRAFT.value),
            )
            inventory_id = cursor.lastrowid

            for product_id in unique_ids:
                cursor = await conn.execute(
                    "SELECT current_stock FROM products WHERE id = ?", (product_id,)
                )
                row = await cursor.fetchone()
                if row is None:
                    raise ProductNotFoundError(product_id)

                await conn.execute(
                    """
                    INSERT INTO inventory_items (inventory_id, product_id, expected_quantity)
                    VALUES (?, ?, ?)
                    """,
                    (inventory_id, product_id, float(row["current_stock"])),
                )

        logger.info(
            "inventory_created",
            inventory_id=inventory_id,
            items=len(unique_ids),
        )
        inventory = await self.get_inventory(inventory_id)  # type: ignore[arg-type]
        if inventory is None:
            raise InventoryNotFoundError(inventory_id or 0)
        return inventory

    async def get_inventory(self, inventory_id: int) -> Inventory | None:
        async with self.pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM inventories WHERE id = ?", (inventory_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None

            cursor = await conn.execute(ITEMS_QUERY, (inventory_id,))
            item_rows = await cursor.fetchall()

        inventory = self._row_to_inventory(row)
        inventory.items = [self._row_to_item(r) for r in item_rows]
        return inventory

    async def list_inventories(self, limit: int = 100, offset: int = 0) -> list[Inventory]:
        async with self.pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM inventories
                ORDER BY created_at DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                (limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_inventory(row) for row in rows]

    async def get_item(self, item_id: int) -> InventoryItem | None:
        async with self.pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT ii.*, p.name AS product_name, p.unit AS product_unit
                FROM inventory_items ii
                JOIN products p ON p.id = ii.product_id
                WHERE ii.id = ?
                """,
                (item_id,),
            )
            row = await cursor.fetchone()
            return self._row_to_item(row) if row else None

    async def set_status(
        self,
        inventory_id: int,
        expected: InventoryStatus,
        new: InventoryStatus,
    ) -> bool:
        async with self.pool.transaction() as conn:
            cursor = await conn.execute(
                "UPDATE inventories SET status = ? WHERE id = ? AND status = ?",
                (new.value, inventory_id, expected.value),
            )
            changed = cursor.rowcount > 0

        if changed:
            logger.info(
                "inventory_status_changed",
                inventory_id=inventory_id,
                from_status=expected.value,
                to_status=new.value,
            )
        return changed

    async def record_count(
        self, item_id: int, counted_quantity: float | None, notes: str | None = None
    ) -> bool:
        # Status guard in the same statement closes the window for late edits
        async with self.pool.transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE inventory_items SET
                    counted_quantity = ?,
                    notes = COALESCE(?, notes),
                    updated_at = datetime('now')
                WHERE id = ?
                  AND inventory_id IN (
                      SELECT id FROM inventories WHERE status = 'in_progress'
                  )
                """,
                (counted_quantity, notes, item_id),
            )
            return cursor.rowcount > 0

    async def complete_with_corrections(
        self, inventory_id: int, completed_at: datetime
    ) -> list[StockMovement] | None:
        async with self.pool.transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE inventories SET status = 'completed', completed_at = ?
                WHERE id = ? AND status = 'in_progress'
                """,
                (completed_at.isoformat(sep=" "), inventory_id),
            )
            if cursor.rowcount == 0:
                return None

            cursor = await conn.execute(ITEMS_QUERY, (inventory_id,))
            items = [self._row_to_item(r) for r in await cursor.fetchall()]

            movements = plan_corrections(inventory_id, items)
            for movement in movements:
                await insert_movement(conn, movement)

        logger.info(
            "inventory_completed",
            inventory_id=inventory_id,
            items=len(items),
            corrections=len(movements),
        )
        return movements

    async def delete_inventory(self, inventory_id: int) -> bool:
        reversed_count = 0
        async with self.pool.transaction() as conn:
            cursor = await conn.execute(
                """
                DELETE FROM stock_movements
                WHERE reference_type = 'inventory' AND reference_id = ?
                """,
                (inventory_id,),
            )
            reversed_count = cursor.rowcount
            cursor = await conn.execute("DELETE FROM inventories WHERE id = ?", (inventory_id,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info(
                "inventory_deleted",
                inventory_id=inventory_id,
                movements_reversed=reversed_count,
            )
        return deleted

    @staticmethod
    def _row_to_inventory(row: aiosqlite.Row) -> Inventory:
        return Inventory(
            id=row["id"],
            name=row["name"],
            status=InventoryStatus(row["status"]),
            created_at=parse_required_timestamp(row["created_at"]),
            completed_at=parse_timestamp(row["completed_at"]),
        )

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> InventoryItem:
        counted = row["counted_quantity"]
        return InventoryItem(
            id=row["id"],
            inventory_id=row["inventory_id"],
            product_id=row["product_id"],
            expected_quantity=float(row["expected_quantity"]),
            counted_quantity=float(counted) if counted is not None else None,
            notes=row["notes"] or "",
            product_name=row["product_name"],
            product_unit=row["product_unit"],
            updated_at=parse_required_timestamp(row["updated_at"]),
        )
