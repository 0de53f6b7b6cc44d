"""Parse Invoice Use Case: raw text or uploaded file to editable invoice data."""

from dataclasses import dataclass
from datetime import date
from pathlib import Path

from stockroom.application.dto.mappers import parsed_invoice_to_response
from stockroom.application.dto.requests import (
    InvoiceDraftRequest,
    InvoiceItemChangesRequest,
    ParseInvoiceTextRequest,
)
from stockroom.application.dto.responses import ParsedInvoiceResponse
from stockroom.config import get_logger
from stockroom.config.settings import APISettings
from stockroom.core.entities.invoice import InvoiceItem, ParsedInvoiceData
from stockroom.core.exceptions import ExtractionError, ValidationError
from stockroom.core.services import (
    InvoiceParserService,
    add_blank_item,
    normalize_invoice,
    remove_item,
    update_item,
)

logger = get_logger(__name__)

TEXT_ENCODINGS = ("utf-8", "cp1250")


@dataclass
class ParseInvoiceResult:
    """Parsed data plus the file it came from."""

    data: ParsedInvoiceData
    filename: str = ""


def draft_to_parsed(request: InvoiceDraftRequest) -> ParsedInvoiceData:
    """Client-edited draft as ParsedInvoiceData. Client totals are dropped."""
    return ParsedInvoiceData(
        invoice_number=request.invoice_number,
        date=request.date or "",
        vendor=request.vendor,
        items=[InvoiceItem(**item.model_dump()) for item in request.items],
        source="manual",
    )


def decode_text(content: bytes, filename: str) -> str:
    """
    Decode an uploaded text file.

    PDF bytes are refused: only already-extracted text is accepted.
    """
    if not content.strip():
        raise ExtractionError(filename, "file is empty")
    if content.lstrip().startswith(b"%PDF"):
        raise ExtractionError(
            filename, "PDF text extraction is not supported, upload the extracted text"
        )

    for encoding in TEXT_ENCODINGS:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise ExtractionError(filename, "file is not valid UTF-8 or CP1250 text")


class ParseInvoiceUseCase:
    """Run the extraction chain over invoice text."""

    def __init__(
        self,
        parser: InvoiceParserService,
        api_settings: APISettings | None = None,
    ):
        self._parser = parser
        self._api_settings = api_settings or APISettings()

    async def execute(
        self, request: ParseInvoiceTextRequest, today: date | None = None
    ) -> ParseInvoiceResult:
        """Parse text sent in the request body."""
        if not request.text.strip():
            raise ValidationError("text", "invoice text is empty")

        data = await self._parser.parse(request.text, today)
        logger.info(
            "invoice_parsed",
            source=data.source,
            invoice_number=data.invoice_number,
            items=len(data.items),
        )
        return ParseInvoiceResult(data=data, filename=request.filename)

    async def execute_upload(
        self, content: bytes, filename: str, today: date | None = None
    ) -> ParseInvoiceResult:
        """Validate, decode and parse an uploaded file."""
        extension = Path(filename).suffix.lower()
        if extension not in self._api_settings.allowed_extensions:
            raise ValidationError(
                "file",
                f"unsupported file type, use {', '.join(self._api_settings.allowed_extensions)}",
                filename,
            )
        if len(content) > self._api_settings.max_upload_size:
            raise ValidationError(
                "file",
                f"file exceeds {self._api_settings.max_upload_size} bytes",
                len(content),
            )

        text = decode_text(content, filename)
        return await self.execute(ParseInvoiceTextRequest(text=text, filename=filename), today)

    def recalculate(
        self, request: InvoiceDraftRequest, today: date | None = None
    ) -> ParseInvoiceResult:
        """Recompute line and invoice totals for an edited draft."""
        data = normalize_invoice(draft_to_parsed(request), today)
        return ParseInvoiceResult(data=data, filename=request.filename)

    def add_item(self, request: InvoiceDraftRequest) -> ParseInvoiceResult:
        """Append a blank line (qty 1, szt, 23%, zero prices) to the draft."""
        data = add_blank_item(draft_to_parsed(request))
        return ParseInvoiceResult(data=data, filename=request.filename)

    def remove_item(self, request: InvoiceDraftRequest, index: int) -> ParseInvoiceResult:
        """Drop the line at ``index`` and re-sum."""
        try:
            data = remove_item(draft_to_parsed(request), index)
        except IndexError as e:
            raise ValidationError("index", str(e), index) from e
        return ParseInvoiceResult(data=data, filename=request.filename)

    def update_item(
        self,
        request: InvoiceDraftRequest,
        index: int,
        changes: InvoiceItemChangesRequest,
    ) -> ParseInvoiceResult:
        """Change one line; its totals and the invoice sums are recomputed."""
        try:
            data = update_item(
                draft_to_parsed(request), index, **changes.model_dump(exclude_none=True)
            )
        except IndexError as e:
            raise ValidationError("index", str(e), index) from e
        return ParseInvoiceResult(data=data, filename=request.filename)

    def to_response(self, result: ParseInvoiceResult) -> ParsedInvoiceResponse:
        """Convert result to API response."""
        return parsed_invoice_to_response(result.data, result.filename)
