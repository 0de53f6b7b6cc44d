"""Export Inventory Use Case: render a count sheet report to PDF."""

import re
import unicodedata
from dataclasses import dataclass

from stockroom.config import get_logger
from stockroom.core.exceptions import InventoryNotFoundError
from stockroom.core.interfaces.inventory_store import IInventoryStore
from stockroom.core.interfaces.report import IInventoryReportRenderer

logger = get_logger(__name__)


@dataclass
class ExportInventoryResult:
    """Rendered report."""

    content: bytes
    filename: str
    media_type: str = "application/pdf"


def report_filename(inventory_id: int, name: str) -> str:
    """ASCII-safe download name, e.g. inwentaryzacja_3_magazyn_glowny.pdf."""
    ascii_name = unicodedata.normalize("NFKD", name.replace("ł", "l").replace("Ł", "L"))
    ascii_name = ascii_name.encode("ascii", "ignore").decode()
    slug = re.sub(r"[^A-Za-z0-9]+", "_", ascii_name).strip("_").lower()[:40]
    return f"inwentaryzacja_{inventory_id}_{slug}.pdf" if slug else f"inwentaryzacja_{inventory_id}.pdf"


class ExportInventoryUseCase:
    """Read-only: never changes the inventory status."""

    def __init__(
        self,
        inventory_store: IInventoryStore,
        renderer: IInventoryReportRenderer,
    ):
        self._inventory_store = inventory_store
        self._renderer = renderer

    async def execute(self, inventory_id: int) -> ExportInventoryResult:
        inventory = await self._inventory_store.get_inventory(inventory_id)
        if inventory is None:
            raise InventoryNotFoundError(inventory_id)

        content = self._renderer.render(inventory)
        logger.info(
            "inventory_exported",
            inventory_id=inventory_id,
            size_bytes=len(content),
        )
        return ExportInventoryResult(
            content=content,
            filename=report_filename(inventory_id, inventory.name),
        )
