"""
AI-assisted invoice extractor.

Sends the invoice text to a text-completion provider with a strict JSON
schema in the prompt, then validates the returned object with Pydantic.
Every failure is raised so the parser service can fall back.
"""

import json
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from stockroom.config import get_logger
from stockroom.core.entities.invoice import InvoiceItem, ParsedInvoiceData
from stockroom.core.exceptions import AIExtractionError
from stockroom.core.interfaces.extractor import IInvoiceExtractor
from stockroom.core.interfaces.llm import ILLMProvider
from stockroom.core.services.invoice_totals import (
    DEFAULT_UNIT,
    DEFAULT_VAT_RATE,
    UNKNOWN_ITEM,
    UNKNOWN_NUMBER,
    UNKNOWN_VENDOR,
)
from stockroom.core.services.normalization import (
    normalize_date,
    parse_number,
    parse_percentage,
)

logger = get_logger(__name__)


SYSTEM_PROMPT = (
    "Jesteś ekspertem w analizie faktur. Zwracasz wyłącznie poprawny JSON, "
    "bez komentarzy i bez formatowania markdown."
)

EXTRACTION_PROMPT = """Przeanalizuj poniższy tekst faktury i wydobądź dane w formacie JSON.

TEKST FAKTURY:
{text}

Wydobądź dokładnie te informacje:
1. Numer faktury (szukaj: "Faktura", "FV", "Nr", "Number")
2. Data faktury (format: YYYY-MM-DD)
3. Nazwa dostawcy/sprzedawcy
4. Lista pozycji z faktury, dla każdej pozycji:
   - nazwa produktu/usługi
   - ilość
   - jednostka (szt, kg, m, l, godz)
   - procent VAT (zwykle 23, 8, 5, 0)
   - cena netto za jednostkę
   - cena brutto za jednostkę
   - suma netto (ilość × cena netto)
   - suma brutto (ilość × cena brutto)

Zwróć TYLKO poprawny JSON w tym formacie:
{{
  "invoiceNumber": "string",
  "date": "YYYY-MM-DD",
  "vendor": "string",
  "items": [
    {{
      "name": "string",
      "quantity": number,
      "unit": "string",
      "percentage": number,
      "net_price": number,
      "gross_price": number,
      "total_net": number,
      "total_gross": number
    }}
  ],
  "totalNet": number,
  "totalGross": number
}}

WAŻNE:
- Wszystkie kwoty jako liczby, nie napisy
- Data w formacie YYYY-MM-DD
- Procent VAT jako liczba całkowita (np. 23, nie 0.23)
"""


# ============================================================================
# Pydantic models for completion output
# ============================================================================


class AIInvoiceItem(BaseModel):
    """Lenient item shape; every numeric field falls back to a default."""

    name: str = UNKNOWN_ITEM
    quantity: float = 1.0
    unit: str = DEFAULT_UNIT
    percentage: int = DEFAULT_VAT_RATE
    net_price: float = 0.0
    gross_price: float = 0.0

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str:
        text = str(v).strip() if v is not None else ""
        return text or UNKNOWN_ITEM

    @field_validator("unit", mode="before")
    @classmethod
    def coerce_unit(cls, v: Any) -> str:
        text = str(v).strip() if v is not None else ""
        return text or DEFAULT_UNIT

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, v: Any) -> float:
        # zero, negative or unreadable quantities mean one unit
        quantity = parse_number(v, 1.0)
        return quantity if quantity > 0 else 1.0

    @field_validator("percentage", mode="before")
    @classmethod
    def coerce_percentage(cls, v: Any) -> int:
        return parse_percentage(v, DEFAULT_VAT_RATE)

    @field_validator("net_price", "gross_price", mode="before")
    @classmethod
    def coerce_price(cls, v: Any) -> float:
        return parse_number(v, 0.0)


class AIInvoiceResponse(BaseModel):
    """Top-level completion payload. Totals are recomputed, not trusted."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    invoice_number: str = Field(default=UNKNOWN_NUMBER, alias="invoiceNumber")
    date: str | None = None
    vendor: str = UNKNOWN_VENDOR
    items: list[AIInvoiceItem] = Field(default_factory=list)

    @field_validator("invoice_number", mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> str:
        text = str(v).strip() if v is not None else ""
        return text or UNKNOWN_NUMBER

    @field_validator("vendor", mode="before")
    @classmethod
    def coerce_vendor(cls, v: Any) -> str:
        text = str(v).strip() if v is not None else ""
        return text or UNKNOWN_VENDOR

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> str | None:
        return str(v) if v is not None else None

    @field_validator("items", mode="before")
    @classmethod
    def coerce_items(cls, v: Any) -> list:
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, dict)]


def extract_json_object(text: str) -> str | None:
    """
    First balanced {...} substring of text.

    Braces inside JSON strings are ignored.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for pos in range(start, len(text)):
            char = text[pos]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start : pos + 1]
        # Unbalanced from this brace; try the next one
        start = text.find("{", start + 1)
    return None


class AIInvoiceExtractor(IInvoiceExtractor):
    """Completion-backed extractor. Raises on any failure."""

    def __init__(
        self,
        llm: ILLMProvider,
        max_text_chars: int = 12000,
        temperature: float = 0.1,
        max_tokens: int = 1024,
    ):
        self.llm = llm
        self.max_text_chars = max_text_chars
        self.temperature = temperature
        self.max_tokens = max_tokens

    @property
    def name(self) -> str:
        return "ai"

    def build_prompt(self, text: str) -> str:
        return EXTRACTION_PROMPT.format(text=text[: self.max_text_chars])

    async def extract(self, text: str, today: date | None = None) -> ParsedInvoiceData:
        if not text or not text.strip():
            raise AIExtractionError("empty invoice text")

        response = await self.llm.generate(
            self.build_prompt(text),
            system_prompt=SYSTEM_PROMPT,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        return self.parse_response(response.text, today)

    def parse_response(self, text: str, today: date | None = None) -> ParsedInvoiceData:
        """Validate completion text into ParsedInvoiceData."""
        json_str = extract_json_object(text)
        if json_str is None:
            raise AIExtractionError("no JSON object in response", text)

        try:
            raw = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise AIExtractionError(f"invalid JSON: {e}", text) from e

        if not isinstance(raw, dict):
            raise AIExtractionError("JSON payload is not an object", text)

        try:
            parsed = AIInvoiceResponse.model_validate(raw)
        except ValidationError as e:
            raise AIExtractionError(f"schema validation failed: {e.error_count()} errors", text) from e

        items = [InvoiceItem(**item.model_dump()) for item in parsed.items]
        if not items:
            raise AIExtractionError("no line items in response", text)

        logger.debug(
            "ai_response_parsed",
            invoice_number=parsed.invoice_number,
            items=len(items),
        )

        return ParsedInvoiceData(
            invoice_number=parsed.invoice_number,
            date=normalize_date(parsed.date, today),
            vendor=parsed.vendor,
            items=items,
            source=self.name,
        )
