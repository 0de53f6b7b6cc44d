"""
Invoice parsing service.

Runs the AI extractor first and falls back to the text extractor on any
failure, then normalizes the result.
"""

from datetime import date

from stockroom.config import get_logger
from stockroom.core.entities.invoice import ParsedInvoiceData
from stockroom.core.interfaces.extractor import IInvoiceExtractor
from stockroom.core.services.invoice_totals import normalize_invoice

logger = get_logger(__name__)


class InvoiceParserService:
    """
    Extraction chain over raw invoice text.

    The fallback extractor must never raise.
    """

    def __init__(
        self,
        fallback: IInvoiceExtractor,
        primary: IInvoiceExtractor | None = None,
    ):
        self.primary = primary
        self.fallback = fallback

    async def parse(self, text: str, today: date | None = None) -> ParsedInvoiceData:
        """Parse invoice text into normalized ParsedInvoiceData."""
        if self.primary is not None:
            try:
                data = await self.primary.extract(text, today)
                logger.info(
                    "invoice_extracted",
                    extractor=self.primary.name,
                    items=len(data.items),
                )
                return normalize_invoice(data, today)
            except Exception as e:
                logger.warning(
                    "ai_extraction_failed",
                    extractor=self.primary.name,
                    fallback=self.fallback.name,
                    error=str(e),
                    error_type=type(e).__name__,
                )

        data = await self.fallback.extract(text, today)
        logger.info(
            "invoice_extracted",
            extractor=self.fallback.name,
            items=len(data.items),
        )
        return normalize_invoice(data, today)
