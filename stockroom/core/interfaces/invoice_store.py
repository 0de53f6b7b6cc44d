"""Abstract interface for invoice storage."""

from abc import ABC, abstractmethod
from typing import Literal

from stockroom.core.entities.invoice import Invoice

InvoiceSortField = Literal["date", "vendor", "total"]


class IInvoiceStore(ABC):
    """Interface for confirmed invoice persistence."""

    @abstractmethod
    async def create_with_purchases(self, invoice: Invoice) -> Invoice:
        """
        Persist an invoice, its items, and one purchase movement per item.

        Products missing by exact name are created. All writes share one
        transaction.
        """
        pass

    @abstractmethod
    async def get_invoice(self, invoice_id: int) -> Invoice | None:
        pass

    @abstractmethod
    async def get_by_number(self, invoice_number: str) -> Invoice | None:
        pass

    @abstractmethod
    async def list_invoices(
        self,
        search: str | None = None,
        sort_by: InvoiceSortField = "date",
        descending: bool = True,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Invoice]:
        """List invoices without items."""
        pass

    @abstractmethod
    async def delete_invoice(self, invoice_id: int, reverse_stock: bool = True) -> bool:
        pass
