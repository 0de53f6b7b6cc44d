"""Abstract interface for invoice data extractors."""

from abc import ABC, abstractmethod
from datetime import date

from stockroom.core.entities.invoice import ParsedInvoiceData


class IInvoiceExtractor(ABC):
    """Turns raw invoice text into ParsedInvoiceData."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Extractor identifier used in logs and results."""
        pass

    @abstractmethod
    async def extract(self, text: str, today: date | None = None) -> ParsedInvoiceData:
        """
        Extract invoice data from text.

        today is the fallback for a missing or invalid invoice date.

        Implementations may raise; callers decide whether to fall back.
        """
        pass
