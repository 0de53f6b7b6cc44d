"""
Inventory reconciliation state machine.

draft -> in_progress -> completed. No skips, no way back.
"""

from stockroom.core.entities.inventory import Inventory, InventoryItem, InventoryStatus
from stockroom.core.entities.product import MovementType, ReferenceType, StockMovement
from stockroom.core.exceptions import InventoryStateError

TRANSITIONS: dict[InventoryStatus, InventoryStatus] = {
    InventoryStatus.DRAFT: InventoryStatus.IN_PROGRESS,
    InventoryStatus.IN_PROGRESS: InventoryStatus.COMPLETED,
}

SURPLUS_NOTE = "Korekta inwentaryzacyjna: nadwyżka"
SHORTAGE_NOTE = "Korekta inwentaryzacyjna: niedobór"


def next_status(current: InventoryStatus) -> InventoryStatus | None:
    return TRANSITIONS.get(current)


def ensure_transition(inventory: Inventory, target: InventoryStatus) -> None:
    """Raise InventoryStateError unless target directly follows the current status."""
    if next_status(inventory.status) != target:
        action = "start" if target == InventoryStatus.IN_PROGRESS else "complete"
        raise InventoryStateError(inventory.id or 0, inventory.status.value, action)


def ensure_countable(inventory: Inventory) -> None:
    """Counts may only change while the inventory is in progress."""
    if inventory.status != InventoryStatus.IN_PROGRESS:
        raise InventoryStateError(inventory.id or 0, inventory.status.value, "record counts on")


def correction_note(difference: float) -> str:
    return SURPLUS_NOTE if difference > 0 else SHORTAGE_NOTE


def plan_corrections(inventory_id: int, items: list[InventoryItem]) -> list[StockMovement]:
    """
    One inventory movement per counted item with a nonzero difference.

    Uncounted items are skipped rather than treated as zero.
    """
    movements = []
    for item in items:
        diff = item.difference
        if diff is None or diff == 0:
            continue
        movements.append(
            StockMovement(
                product_id=item.product_id,
                movement_type=MovementType.INVENTORY,
                quantity=diff,
                reference_id=inventory_id,
                reference_type=ReferenceType.INVENTORY,
                notes=correction_note(diff),
            )
        )
    return movements
