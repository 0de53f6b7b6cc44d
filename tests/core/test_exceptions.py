"""Tests for the domain exception hierarchy."""

from stockroom.core.exceptions import (
    AIExtractionError,
    DuplicateError,
    DuplicateInvoiceError,
    InventoryStateError,
    NotFoundError,
    ParserError,
    ProductNotFoundError,
    StockroomError,
    ValidationError,
)


class TestExceptions:
    def test_not_found_code(self):
        exc = ProductNotFoundError(7)
        assert isinstance(exc, NotFoundError)
        assert exc.code == "PRODUCT_NOT_FOUND"
        assert exc.details["product_id"] == 7

    def test_duplicate_invoice(self):
        exc = DuplicateInvoiceError("FV/1")
        assert isinstance(exc, DuplicateError)
        assert exc.code == "DUPLICATE_INVOICE"
        assert "FV/1" in exc.message

    def test_inventory_state(self):
        exc = InventoryStateError(3, "completed", "start")
        assert exc.code == "INVALID_INVENTORY_STATE"
        assert "completed" in exc.message

    def test_validation_to_dict(self):
        data = ValidationError("quantity", "must be positive", -1).to_dict()
        assert data["error"] == "VALIDATION_ERROR"
        assert data["details"]["field"] == "quantity"

    def test_ai_extraction_is_parser_error(self):
        exc = AIExtractionError("no JSON")
        assert isinstance(exc, ParserError)
        assert isinstance(exc, StockroomError)
