"""
Heuristic invoice text extractor.

Each field is pulled out by an ordered list of patterns where the first
match wins. Missing fields get conservative defaults; this extractor never
raises, so it is the last link of the extraction chain.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from stockroom.config import get_logger
from stockroom.core.entities.invoice import InvoiceItem, ParsedInvoiceData
from stockroom.core.interfaces.extractor import IInvoiceExtractor
from stockroom.core.services.invoice_totals import (
    DEFAULT_UNIT,
    DEFAULT_VAT_RATE,
    UNKNOWN_NUMBER,
    UNKNOWN_VENDOR,
    recalculate_totals,
)
from stockroom.core.services.normalization import find_date, parse_number

logger = get_logger(__name__)

_NUM = r"(\d+(?:[.,]\d+)?)"
_UNITS = r"(szt|kg|m|l|godz)"

# Tokens must contain a digit so words like "VAT" after "Faktura" are skipped
INVOICE_NUMBER_PATTERNS: list[re.Pattern[str]] = [
    re.compile(
        r"\b(?:faktura|invoice|nr|number)\b[:.\s#]*((?=[A-Z0-9/\-]*\d)[A-Z0-9/\-]{3,})",
        re.IGNORECASE,
    ),
    re.compile(r"\b((?:FV|INV)[/\-]?(?=[A-Z0-9/\-]*\d)[A-Z0-9/\-]{3,})", re.IGNORECASE),
    re.compile(r"\b([A-Z0-9]+/\d+/\d+)\b", re.IGNORECASE),
]

VENDOR_EXCLUDE = re.compile(r"faktura|invoice|data|date", re.IGNORECASE)
NUMERIC_ONLY = re.compile(r"^[\d\s.\-/]+$")

PLACEHOLDER_ITEM = InvoiceItem(
    name="Extracted item from PDF",
    quantity=1,
    unit="szt",
    percentage=23,
    net_price=100.0,
    gross_price=123.0,
    total_net=100.0,
    total_gross=123.0,
)


@dataclass(frozen=True)
class ItemPattern:
    """A line shape and how its groups map onto an invoice item."""

    name: str
    regex: re.Pattern[str]
    build: Callable[[re.Match[str]], InvoiceItem]


def _gross_from_net(net: float, percentage: int) -> float:
    return net * (1 + percentage / 100)


def _build_full(match: re.Match[str]) -> InvoiceItem:
    name, qty, unit, net, percentage, gross = match.groups()
    return InvoiceItem(
        name=name.strip(),
        quantity=parse_number(qty),
        unit=unit.lower(),
        percentage=int(percentage),
        net_price=parse_number(net),
        gross_price=parse_number(gross),
    )


def _build_simple(match: re.Match[str]) -> InvoiceItem:
    name, qty, price, _total = match.groups()
    net = parse_number(price)
    return InvoiceItem(
        name=name.strip(),
        quantity=parse_number(qty),
        unit=DEFAULT_UNIT,
        percentage=DEFAULT_VAT_RATE,
        net_price=net,
        gross_price=_gross_from_net(net, DEFAULT_VAT_RATE),
    )


ITEM_PATTERNS: list[ItemPattern] = [
    # name qty unit net vat% gross
    ItemPattern(
        "full",
        re.compile(
            rf"^(.+?)\s+{_NUM}\s+{_UNITS}\.?\s+{_NUM}\s+(\d+)\s*%\s+{_NUM}\s*$",
            re.IGNORECASE,
        ),
        _build_full,
    ),
    # name qty price total
    ItemPattern(
        "simple",
        re.compile(rf"^(.+?)\s+{_NUM}\s+{_NUM}\s+{_NUM}\s*$"),
        _build_simple,
    ),
]


def extract_invoice_number(text: str) -> str:
    for pattern in INVOICE_NUMBER_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return UNKNOWN_NUMBER


def extract_date(text: str, today: date | None = None) -> str:
    """ISO date of the first date-shaped token; today when absent or invalid."""
    parsed = find_date(text)
    if parsed is None:
        return (today or date.today()).isoformat()
    return parsed.isoformat()


def extract_vendor(text: str, scan_lines: int = 10) -> str:
    for raw in text.splitlines()[:scan_lines]:
        line = raw.strip()
        if not 5 < len(line) < 100:
            continue
        if VENDOR_EXCLUDE.search(line) or NUMERIC_ONLY.match(line):
            continue
        return line
    return UNKNOWN_VENDOR


def match_item_line(line: str) -> InvoiceItem | None:
    """Item for the first pattern matching the line, if any."""
    for pattern in ITEM_PATTERNS:
        match = pattern.regex.match(line.strip())
        if match:
            return pattern.build(match)
    return None


def extract_items(text: str) -> list[InvoiceItem]:
    """Matched line items, or the single placeholder when nothing matches."""
    items = [item for line in text.splitlines() if (item := match_item_line(line))]
    if not items:
        return [PLACEHOLDER_ITEM.model_copy()]
    return items


class TextInvoiceExtractor(IInvoiceExtractor):
    """Regex-cascade extractor over raw invoice text."""

    def __init__(self, vendor_scan_lines: int = 10):
        self.vendor_scan_lines = vendor_scan_lines

    @property
    def name(self) -> str:
        return "text"

    async def extract(self, text: str, today: date | None = None) -> ParsedInvoiceData:
        text = text or ""
        items = extract_items(text)
        data = ParsedInvoiceData(
            invoice_number=extract_invoice_number(text),
            date=extract_date(text, today),
            vendor=extract_vendor(text, self.vendor_scan_lines),
            items=items,
            source=self.name,
        )
        logger.debug(
            "text_extraction_complete",
            invoice_number=data.invoice_number,
            items=len(items),
            placeholder=items[0].name == PLACEHOLDER_ITEM.name and len(items) == 1,
        )
        return recalculate_totals(data)
