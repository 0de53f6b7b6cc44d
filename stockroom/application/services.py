"""
Service wiring for dependency injection.

Builds every store, provider and service once from an explicit Settings
object. The API lifespan keeps the resulting container on app.state;
nothing here is a module-level singleton.
"""

from dataclasses import dataclass

from stockroom.config import Settings, get_logger
from stockroom.core.interfaces import (
    IInventoryReportRenderer,
    IInventoryStore,
    IInvoiceStore,
    ILLMProvider,
    IProductStore,
    ISalesStore,
)
from stockroom.core.services import InvoiceParserService
from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool

logger = get_logger(__name__)


@dataclass
class ServiceContainer:
    """Everything a request handler may need."""

    settings: Settings
    pool: ConnectionPool
    products: IProductStore
    invoices: IInvoiceStore
    sales: ISalesStore
    inventories: IInventoryStore
    llm: ILLMProvider | None
    parser: InvoiceParserService
    report_renderer: IInventoryReportRenderer

    async def close(self) -> None:
        await self.pool.close()


def build_parser_service(
    settings: Settings, llm: ILLMProvider | None
) -> InvoiceParserService:
    """Text extractor always; AI extractor in front of it when enabled."""
    from stockroom.infrastructure.parsers import AIInvoiceExtractor, TextInvoiceExtractor

    fallback = TextInvoiceExtractor(vendor_scan_lines=settings.parser.vendor_scan_lines)
    primary = None
    if llm is not None and settings.parser.ai_enabled:
        primary = AIInvoiceExtractor(
            llm,
            max_text_chars=settings.parser.max_text_chars,
            temperature=settings.llm.temperature,
            max_tokens=settings.llm.max_tokens,
        )
    return InvoiceParserService(fallback=fallback, primary=primary)


def build_container(
    settings: Settings,
    llm: ILLMProvider | None = None,
) -> ServiceContainer:
    """
    Wire infrastructure implementations from settings.

    Args:
        settings: Application settings
        llm: Optional provider override; built from settings.llm otherwise

    Returns:
        ServiceContainer with an uninitialized connection pool
    """
    # Lazy import infrastructure to avoid circular imports
    from stockroom.infrastructure.llm import create_llm_provider
    from stockroom.infrastructure.pdf import Fpdf2InventoryReportRenderer
    from stockroom.infrastructure.storage.sqlite import (
        SQLiteInventoryStore,
        SQLiteInvoiceStore,
        SQLiteProductStore,
        SQLiteSalesStore,
    )

    pool = ConnectionPool.from_settings(settings.storage)

    if llm is None and settings.llm.enabled:
        llm = create_llm_provider(settings.llm)

    container = ServiceContainer(
        settings=settings,
        pool=pool,
        products=SQLiteProductStore(pool),
        invoices=SQLiteInvoiceStore(pool),
        sales=SQLiteSalesStore(pool),
        inventories=SQLiteInventoryStore(pool),
        llm=llm,
        parser=build_parser_service(settings, llm),
        report_renderer=Fpdf2InventoryReportRenderer(settings.export),
    )
    logger.info(
        "services_built",
        db_path=str(settings.storage.db_path),
        ai_extraction=container.parser.primary is not None,
    )
    return container
