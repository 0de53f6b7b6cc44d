"""
Invoice ingestion endpoints.

parse / upload -> edit + recalculate -> confirm.
"""

from fastapi import APIRouter, Body, Depends, File, Query, Response, UploadFile, status

from stockroom.api.dependencies import (
    get_app_settings,
    get_confirm_invoice_use_case,
    get_invoice_store,
    get_parse_invoice_use_case,
)
from stockroom.application.dto.mappers import invoice_to_response
from stockroom.application.dto.requests import (
    InvoiceDraftRequest,
    InvoiceItemChangesRequest,
    ParseInvoiceTextRequest,
)
from stockroom.application.dto.responses import (
    ErrorResponse,
    InvoiceListResponse,
    InvoiceResponse,
    ParsedInvoiceResponse,
)
from stockroom.application.use_cases import ConfirmInvoiceUseCase, ParseInvoiceUseCase
from stockroom.config import Settings
from stockroom.core.exceptions import InvoiceNotFoundError
from stockroom.core.interfaces import IInvoiceStore, InvoiceSortField

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


@router.post(
    "/parse",
    response_model=ParsedInvoiceResponse,
    responses={400: {"model": ErrorResponse}},
)
async def parse_invoice(
    request: ParseInvoiceTextRequest,
    use_case: ParseInvoiceUseCase = Depends(get_parse_invoice_use_case),
) -> ParsedInvoiceResponse:
    """
    Extract invoice data from text.

    Uses the AI extractor when configured and silently falls back to the
    pattern-based extractor.
    """
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.post(
    "/upload",
    response_model=ParsedInvoiceResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Unsupported or oversized file"},
        422: {"model": ErrorResponse, "description": "Text could not be extracted"},
    },
)
async def upload_invoice(
    file: UploadFile = File(...),
    use_case: ParseInvoiceUseCase = Depends(get_parse_invoice_use_case),
) -> ParsedInvoiceResponse:
    """Extract invoice data from an uploaded text file."""
    content = await file.read()
    result = await use_case.execute_upload(content, file.filename or "")
    return use_case.to_response(result)


@router.post("/recalculate", response_model=ParsedInvoiceResponse)
async def recalculate_invoice(
    request: InvoiceDraftRequest,
    use_case: ParseInvoiceUseCase = Depends(get_parse_invoice_use_case),
) -> ParsedInvoiceResponse:
    """Recompute line and invoice totals for edited data."""
    return use_case.to_response(use_case.recalculate(request))


@router.post("/draft/items", response_model=ParsedInvoiceResponse)
async def add_draft_item(
    request: InvoiceDraftRequest,
    use_case: ParseInvoiceUseCase = Depends(get_parse_invoice_use_case),
) -> ParsedInvoiceResponse:
    """Append a blank line to a draft."""
    return use_case.to_response(use_case.add_item(request))


@router.patch(
    "/draft/items/{index}",
    response_model=ParsedInvoiceResponse,
    responses={400: {"model": ErrorResponse, "description": "No line at index"}},
)
async def update_draft_item(
    index: int,
    draft: InvoiceDraftRequest = Body(...),
    changes: InvoiceItemChangesRequest = Body(...),
    use_case: ParseInvoiceUseCase = Depends(get_parse_invoice_use_case),
) -> ParsedInvoiceResponse:
    """Edit one draft line. Body: ``{"draft": {...}, "changes": {...}}``."""
    return use_case.to_response(use_case.update_item(draft, index, changes))


@router.post(
    "/draft/items/{index}/remove",
    response_model=ParsedInvoiceResponse,
    responses={400: {"model": ErrorResponse, "description": "No line at index"}},
)
async def remove_draft_item(
    index: int,
    request: InvoiceDraftRequest,
    use_case: ParseInvoiceUseCase = Depends(get_parse_invoice_use_case),
) -> ParsedInvoiceResponse:
    """Drop one draft line and re-sum."""
    return use_case.to_response(use_case.remove_item(request, index))


@router.post(
    "",
    response_model=InvoiceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse, "description": "Invoice number already saved"},
    },
)
async def confirm_invoice(
    request: InvoiceDraftRequest,
    use_case: ConfirmInvoiceUseCase = Depends(get_confirm_invoice_use_case),
) -> InvoiceResponse:
    """Save the invoice and receive its items into stock."""
    invoice = await use_case.execute(request)
    return use_case.to_response(invoice)


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    search: str | None = None,
    sort_by: InvoiceSortField = "date",
    descending: bool = True,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    store: IInvoiceStore = Depends(get_invoice_store),
) -> InvoiceListResponse:
    """List invoices, searching number and vendor."""
    invoices = await store.list_invoices(
        search=search,
        sort_by=sort_by,
        descending=descending,
        limit=limit,
        offset=offset,
    )
    return InvoiceListResponse(
        invoices=[invoice_to_response(i) for i in invoices],
        total=len(invoices),
    )


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_invoice(
    invoice_id: int,
    store: IInvoiceStore = Depends(get_invoice_store),
) -> InvoiceResponse:
    """Get an invoice with its items."""
    invoice = await store.get_invoice(invoice_id)
    if invoice is None:
        raise InvoiceNotFoundError(invoice_id)
    return invoice_to_response(invoice)


@router.delete(
    "/{invoice_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_invoice(
    invoice_id: int,
    store: IInvoiceStore = Depends(get_invoice_store),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """Delete an invoice; its purchase movements are reversed when configured."""
    deleted = await store.delete_invoice(
        invoice_id,
        reverse_stock=settings.ledger.reverse_purchases_on_invoice_delete,
    )
    if not deleted:
        raise InvoiceNotFoundError(invoice_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
