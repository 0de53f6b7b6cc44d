"""Reconcile Inventory Use Case: the stocktake state machine."""

from dataclasses import dataclass, field
from datetime import datetime

from stockroom.application.dto.mappers import inventory_to_response, movement_to_response
from stockroom.application.dto.requests import CreateInventoryRequest, RecordCountRequest
from stockroom.application.dto.responses import CompleteInventoryResponse
from stockroom.config import get_logger
from stockroom.core.entities.base import utc_now
from stockroom.core.entities.inventory import Inventory, InventoryItem, InventoryStatus
from stockroom.core.entities.product import StockMovement
from stockroom.core.exceptions import (
    InventoryItemNotFoundError,
    InventoryNotFoundError,
    InventoryStateError,
    ValidationError,
)
from stockroom.core.interfaces.inventory_store import IInventoryStore
from stockroom.core.services import ensure_countable, ensure_transition

logger = get_logger(__name__)


@dataclass
class CompleteInventoryResult:
    """Completed inventory and the corrections it posted."""

    inventory: Inventory
    movements: list[StockMovement] = field(default_factory=list)


class ReconcileInventoryUseCase:
    """
    draft -> in_progress -> completed.

    Counts change only while in progress. Completion posts one inventory
    movement per counted item whose count differs from the snapshot.
    """

    def __init__(self, inventory_store: IInventoryStore):
        self._inventory_store = inventory_store

    async def _get(self, inventory_id: int) -> Inventory:
        inventory = await self._inventory_store.get_inventory(inventory_id)
        if inventory is None:
            raise InventoryNotFoundError(inventory_id)
        return inventory

    async def create(self, request: CreateInventoryRequest) -> Inventory:
        """Create a draft with expected quantities taken from current stock."""
        if not request.product_ids:
            raise ValidationError("product_ids", "select at least one product", [])

        inventory = await self._inventory_store.create_inventory(
            request.name.strip(), request.product_ids
        )
        logger.info(
            "inventory_draft_created",
            inventory_id=inventory.id,
            items=len(inventory.items),
        )
        return inventory

    async def start(self, inventory_id: int) -> Inventory:
        """Open the count sheet for counting."""
        inventory = await self._get(inventory_id)
        ensure_transition(inventory, InventoryStatus.IN_PROGRESS)

        changed = await self._inventory_store.set_status(
            inventory_id, InventoryStatus.DRAFT, InventoryStatus.IN_PROGRESS
        )
        if not changed:
            # Someone else moved it first
            current = await self._get(inventory_id)
            raise InventoryStateError(inventory_id, current.status.value, "start")

        return await self._get(inventory_id)

    async def record_count(
        self, inventory_id: int, item_id: int, request: RecordCountRequest
    ) -> InventoryItem:
        """Set or clear one item's counted quantity."""
        inventory = await self._get(inventory_id)
        ensure_countable(inventory)

        if not any(item.id == item_id for item in inventory.items):
            raise InventoryItemNotFoundError(item_id)
        if request.counted_quantity is not None and request.counted_quantity < 0:
            raise ValidationError(
                "counted_quantity", "count cannot be negative", request.counted_quantity
            )

        recorded = await self._inventory_store.record_count(
            item_id, request.counted_quantity, request.notes
        )
        if not recorded:
            current = await self._get(inventory_id)
            raise InventoryStateError(inventory_id, current.status.value, "record counts on")

        item = await self._inventory_store.get_item(item_id)
        if item is None:
            raise InventoryItemNotFoundError(item_id)
        return item

    async def complete(
        self, inventory_id: int, completed_at: datetime | None = None
    ) -> CompleteInventoryResult:
        """Close the inventory and post correction movements."""
        inventory = await self._get(inventory_id)
        ensure_transition(inventory, InventoryStatus.COMPLETED)

        movements = await self._inventory_store.complete_with_corrections(
            inventory_id, completed_at or utc_now()
        )
        if movements is None:
            current = await self._get(inventory_id)
            raise InventoryStateError(inventory_id, current.status.value, "complete")

        uncounted = sum(1 for item in inventory.items if not item.is_counted)
        logger.info(
            "inventory_reconciled",
            inventory_id=inventory_id,
            corrections=len(movements),
            uncounted=uncounted,
        )
        return CompleteInventoryResult(
            inventory=await self._get(inventory_id),
            movements=movements,
        )

    async def delete(self, inventory_id: int) -> None:
        """Delete an inventory, reversing any corrections it posted."""
        if not await self._inventory_store.delete_inventory(inventory_id):
            raise InventoryNotFoundError(inventory_id)

    def to_response(self, result: CompleteInventoryResult) -> CompleteInventoryResponse:
        """Convert completion result to API response."""
        return CompleteInventoryResponse(
            inventory=inventory_to_response(result.inventory),
            movements=[movement_to_response(m) for m in result.movements],
        )
