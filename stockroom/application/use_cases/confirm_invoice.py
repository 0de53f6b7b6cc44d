"""Confirm Invoice Use Case: persist an invoice and receive its items into stock."""

from datetime import date

from stockroom.application.dto.mappers import invoice_to_response
from stockroom.application.dto.requests import InvoiceDraftRequest
from stockroom.application.dto.responses import InvoiceResponse
from stockroom.application.use_cases.parse_invoice import draft_to_parsed
from stockroom.config import get_logger
from stockroom.core.entities.invoice import Invoice
from stockroom.core.exceptions import DuplicateInvoiceError, ValidationError
from stockroom.core.interfaces.invoice_store import IInvoiceStore
from stockroom.core.services import normalize_invoice

logger = get_logger(__name__)


class ConfirmInvoiceUseCase:
    """
    Save confirmed invoice data.

    Each item finds or creates its product by exact name and posts one
    purchase movement; the whole invoice is one transaction.
    """

    def __init__(self, invoice_store: IInvoiceStore):
        self._invoice_store = invoice_store

    def validate(self, request: InvoiceDraftRequest) -> None:
        if not request.items:
            raise ValidationError("items", "invoice has no line items")
        for idx, item in enumerate(request.items):
            if not item.name.strip():
                raise ValidationError(f"items[{idx}].name", "item name is required")
            if item.quantity <= 0:
                raise ValidationError(
                    f"items[{idx}].quantity", "quantity must be positive", item.quantity
                )

    async def execute(self, request: InvoiceDraftRequest, today: date | None = None) -> Invoice:
        """Execute confirm invoice use case."""
        self.validate(request)

        # Totals are recomputed here whatever the client sent
        data = normalize_invoice(draft_to_parsed(request), today)

        if await self._invoice_store.get_by_number(data.invoice_number) is not None:
            raise DuplicateInvoiceError(data.invoice_number)

        invoice = Invoice(
            filename=request.filename,
            invoice_number=data.invoice_number,
            invoice_date=date.fromisoformat(data.date),
            vendor=data.vendor,
            total_net=data.total_net,
            total_gross=data.total_gross,
            items=data.items,
        )
        invoice = await self._invoice_store.create_with_purchases(invoice)

        logger.info(
            "confirm_invoice_complete",
            invoice_id=invoice.id,
            total_net=round(invoice.total_net, 2),
            total_gross=round(invoice.total_gross, 2),
        )
        return invoice

    def to_response(self, invoice: Invoice) -> InvoiceResponse:
        """Convert result to API response."""
        return invoice_to_response(invoice)
