"""
Dependency injection for FastAPI.

Route handlers receive stores and use cases built from the
ServiceContainer that the lifespan placed on app.state.
"""

from fastapi import Depends, Request

from stockroom.application.services import ServiceContainer
from stockroom.application.use_cases import (
    AdjustStockUseCase,
    ConfirmInvoiceUseCase,
    ExportInventoryUseCase,
    ParseInvoiceUseCase,
    ReconcileInventoryUseCase,
    RecordSaleUseCase,
)
from stockroom.config import Settings
from stockroom.core.interfaces import (
    IInventoryStore,
    IInvoiceStore,
    IProductStore,
    ISalesStore,
)


def get_container(request: Request) -> ServiceContainer:
    """Container created by the application lifespan."""
    return request.app.state.container


def get_app_settings(container: ServiceContainer = Depends(get_container)) -> Settings:
    return container.settings


# Store dependencies
def get_product_store(container: ServiceContainer = Depends(get_container)) -> IProductStore:
    return container.products


def get_invoice_store(container: ServiceContainer = Depends(get_container)) -> IInvoiceStore:
    return container.invoices


def get_sales_store(container: ServiceContainer = Depends(get_container)) -> ISalesStore:
    return container.sales


def get_inventory_store(
    container: ServiceContainer = Depends(get_container),
) -> IInventoryStore:
    return container.inventories


# Use case dependencies
def get_parse_invoice_use_case(
    container: ServiceContainer = Depends(get_container),
) -> ParseInvoiceUseCase:
    """Get parse invoice use case."""
    return ParseInvoiceUseCase(container.parser, container.settings.api)


def get_confirm_invoice_use_case(
    container: ServiceContainer = Depends(get_container),
) -> ConfirmInvoiceUseCase:
    """Get confirm invoice use case."""
    return ConfirmInvoiceUseCase(container.invoices)


def get_adjust_stock_use_case(
    container: ServiceContainer = Depends(get_container),
) -> AdjustStockUseCase:
    """Get adjust stock use case."""
    return AdjustStockUseCase(container.products)


def get_record_sale_use_case(
    container: ServiceContainer = Depends(get_container),
) -> RecordSaleUseCase:
    """Get record sale use case."""
    return RecordSaleUseCase(container.sales, container.products)


def get_reconcile_inventory_use_case(
    container: ServiceContainer = Depends(get_container),
) -> ReconcileInventoryUseCase:
    """Get inventory workflow use case."""
    return ReconcileInventoryUseCase(container.inventories)


def get_export_inventory_use_case(
    container: ServiceContainer = Depends(get_container),
) -> ExportInventoryUseCase:
    """Get inventory export use case."""
    return ExportInventoryUseCase(container.inventories, container.report_renderer)
