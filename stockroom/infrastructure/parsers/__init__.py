"""Invoice text extractors."""

from stockroom.infrastructure.parsers.ai_extractor import AIInvoiceExtractor
from stockroom.infrastructure.parsers.text_extractor import TextInvoiceExtractor

__all__ = ["AIInvoiceExtractor", "TextInvoiceExtractor"]
