"""
Stockroom exceptions.

Each carries a stable ``code`` that the API puts in the error envelope and
a ``details`` dict with the values that explain it.
"""

from typing import Any


class StockroomError(Exception):
    """Root of every error the service raises on purpose."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or type(self).__name__
        self.details = details if details is not None else {}

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message, "details": self.details}


# --- storage ---------------------------------------------------------------


class StorageError(StockroomError):
    """The database refused or failed an operation."""


class DatabaseError(StorageError):
    def __init__(self, operation: str, error: str):
        super().__init__(
            f"{operation} failed: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class NotFoundError(StorageError):
    """No row with the given id. ``code`` is ``<ENTITY>_NOT_FOUND``."""

    def __init__(self, entity: str, entity_id: int):
        label = entity.replace("_", " ")
        super().__init__(
            f"No {label} with id {entity_id}",
            code=f"{entity.upper()}_NOT_FOUND",
            details={f"{entity}_id": entity_id},
        )


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: int):
        super().__init__("product", product_id)


class InvoiceNotFoundError(NotFoundError):
    def __init__(self, invoice_id: int):
        super().__init__("invoice", invoice_id)


class SaleNotFoundError(NotFoundError):
    def __init__(self, sale_id: int):
        super().__init__("sale", sale_id)


class InventoryNotFoundError(NotFoundError):
    def __init__(self, inventory_id: int):
        super().__init__("inventory", inventory_id)


class InventoryItemNotFoundError(NotFoundError):
    def __init__(self, item_id: int):
        super().__init__("inventory_item", item_id)


class MovementNotFoundError(NotFoundError):
    def __init__(self, movement_id: int):
        super().__init__("movement", movement_id)


class ProductInUseError(StorageError):
    """Sale lines still point at the product, so it cannot be removed."""

    def __init__(self, product_id: int, sale_lines: int):
        super().__init__(
            f"Product {product_id} appears on {sale_lines} sale line(s)",
            code="PRODUCT_IN_USE",
            details={"product_id": product_id, "sale_lines": sale_lines},
        )


class DuplicateError(StorageError):
    """A unique key is already taken. ``code`` is ``DUPLICATE_<ENTITY>``."""

    def __init__(self, entity: str, field: str, value: str):
        super().__init__(
            f"{entity.capitalize()} {field} '{value}' is already used",
            code=f"DUPLICATE_{entity.upper()}",
            details={"field": field, "value": value},
        )


class DuplicateInvoiceError(DuplicateError):
    def __init__(self, invoice_number: str):
        super().__init__("invoice", "invoice_number", invoice_number)


class DuplicateSaleError(DuplicateError):
    def __init__(self, sale_number: str):
        super().__init__("sale", "sale_number", sale_number)


class DuplicateProductError(DuplicateError):
    def __init__(self, name: str):
        super().__init__("product", "name", name)


# --- completion provider ----------------------------------------------------


class LLMError(StockroomError):
    """The completion provider failed. Extraction falls back to text patterns."""


class LLMUnavailableError(LLMError):
    def __init__(self, provider: str, reason: str | None = None):
        message = f"Completion provider '{provider}' is unreachable"
        super().__init__(
            f"{message}: {reason}" if reason else message,
            code="LLM_UNAVAILABLE",
            details={"provider": provider, "reason": reason},
        )


class LLMTimeoutError(LLMError):
    def __init__(self, timeout: int, operation: str = "completion"):
        super().__init__(
            f"No {operation} within {timeout}s",
            code="LLM_TIMEOUT",
            details={"timeout": timeout, "operation": operation},
        )


class LLMResponseError(LLMError):
    """The provider answered, but not with usable text."""

    def __init__(self, reason: str, response: str | None = None):
        super().__init__(
            f"Unusable completion: {reason}",
            code="LLM_RESPONSE_ERROR",
            details={"reason": reason, "response_preview": (response or "")[:200]},
        )


class CircuitBreakerOpenError(LLMError):
    def __init__(self, provider: str, cooldown_remaining: int):
        super().__init__(
            f"'{provider}' failed repeatedly; next attempt in {cooldown_remaining}s",
            code="CIRCUIT_BREAKER_OPEN",
            details={"provider": provider, "cooldown_remaining": cooldown_remaining},
        )


# --- invoice extraction -----------------------------------------------------


class ParserError(StockroomError):
    """Invoice input could not be read."""


class ExtractionError(ParserError):
    """An uploaded file yielded no usable text."""

    def __init__(self, filename: str, reason: str):
        super().__init__(
            f"Cannot read '{filename}': {reason}",
            code="EXTRACTION_ERROR",
            details={"filename": filename, "reason": reason},
        )


class AIExtractionError(ParserError):
    """Completion text held no usable invoice JSON."""

    def __init__(self, reason: str, response: str | None = None):
        super().__init__(
            f"AI extraction failed: {reason}",
            code="AI_EXTRACTION_FAILED",
            details={"reason": reason, "response_preview": (response or "")[:200]},
        )


# --- requests and workflow --------------------------------------------------


class ValidationError(StockroomError):
    """A request value breaks a business rule."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"{field}: {message}",
            code="VALIDATION_ERROR",
            details={"field": field, "message": message, "value": value},
        )


class InventoryStateError(StockroomError):
    """The inventory's status does not allow the action."""

    def __init__(self, inventory_id: int, status: str, action: str):
        super().__init__(
            f"Cannot {action} inventory {inventory_id} while it is {status}",
            code="INVALID_INVENTORY_STATE",
            details={"inventory_id": inventory_id, "status": status, "action": action},
        )
