"""
Error responses.

Every failure leaves the API as the same JSON envelope (``ErrorResponse``):
a machine-readable ``error_code``, a ``message``, a ``hint`` telling the
client what to do next, and the request ``path``.
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from stockroom.application.dto.responses import ErrorResponse
from stockroom.config import get_logger
from stockroom.core.exceptions import (
    DuplicateError,
    InventoryStateError,
    LLMError,
    NotFoundError,
    ParserError,
    ProductInUseError,
    StockroomError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)


# First matching rule wins, so subclasses come before their bases
STATUS_RULES: list[tuple[type[Exception], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (DuplicateError, status.HTTP_409_CONFLICT),
    (InventoryStateError, status.HTTP_409_CONFLICT),
    (ProductInUseError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ParserError, 422),
    (LLMError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (ValueError, status.HTTP_400_BAD_REQUEST),
]

CODE_HINTS: dict[str, str] = {
    "PRODUCT_NOT_FOUND": "List products with GET /api/products.",
    "INVOICE_NOT_FOUND": "List saved invoices with GET /api/invoices.",
    "SALE_NOT_FOUND": "List recorded sales with GET /api/sales.",
    "INVENTORY_NOT_FOUND": "List inventories with GET /api/inventories.",
    "INVENTORY_ITEM_NOT_FOUND": "Item ids come from GET /api/inventories/{id}; the item must belong to that inventory.",
    "MOVEMENT_NOT_FOUND": "Movement ids come from GET /api/products/{id}/movements.",
    "DUPLICATE_INVOICE": "This invoice number is already saved. Delete it first to re-import.",
    "DUPLICATE_SALE": "Use a new sale number.",
    "DUPLICATE_PRODUCT": "Product names are unique and case-sensitive.",
    "PRODUCT_IN_USE": "Delete the sales that list this product first; sale history keeps its product.",
    "INVALID_INVENTORY_STATE": "Inventories move draft -> in_progress -> completed; counts change only while in_progress.",
    "EXTRACTION_ERROR": "Upload the invoice as extracted text (.txt, UTF-8 or CP1250).",
    "LLM_UNAVAILABLE": "AI extraction is unavailable; the text extractor still works.",
    "LLM_TIMEOUT": "The completion provider did not answer in time.",
    "CIRCUIT_BREAKER_OPEN": "The completion provider is cooling down after repeated failures.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
}

STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The request conflicts with the current state of the resource.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
    503: "The service is temporarily unavailable. Retry later.",
}


def status_for(exc: Exception) -> int:
    return next(
        (code for exc_type, code in STATUS_RULES if isinstance(exc, exc_type)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def envelope(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    detail: str | None = None,
    hint: str | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=hint or CODE_HINTS.get(error_code) or STATUS_HINTS.get(status_code, ""),
        detail=detail,
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def exception_response(request: Request, exc: Exception) -> JSONResponse:
    """Envelope for a domain error or an unexpected exception."""
    status_code = status_for(exc)
    if isinstance(exc, StockroomError):
        error_code, message = exc.code, exc.message
        detail = str(exc.details) if exc.details else None
    else:
        error_code, message, detail = type(exc).__name__, str(exc), None

    server_fault = status_code >= 500
    (logger.error if server_fault else logger.warning)(
        "request_error",
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
        error_type=error_code,
        error=message,
        traceback=traceback.format_exc() if server_fault else None,
    )
    return envelope(request, status_code, error_code, message, detail)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Last line: anything the exception handlers did not catch becomes an envelope."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return exception_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register envelope handlers for domain, validation and HTTP errors."""

    @app.exception_handler(StockroomError)
    async def domain_error(request: Request, exc: StockroomError) -> JSONResponse:
        return exception_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        problems = [
            f"{' -> '.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        return envelope(
            request,
            422,
            "VALIDATION_ERROR",
            "Request validation failed",
            detail="; ".join(problems),
            hint="Check the request body fields and types.",
        )

    @app.exception_handler(HTTPException)
    async def http_error(request: Request, exc: HTTPException) -> JSONResponse:
        error_code = "NOT_FOUND" if exc.status_code == status.HTTP_404_NOT_FOUND else "HTTP_ERROR"
        return envelope(request, exc.status_code, error_code, str(exc.detail or "An error occurred"))
