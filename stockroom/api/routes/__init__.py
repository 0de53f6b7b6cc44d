"""API route modules."""

from stockroom.api.routes.health import router as health_router
from stockroom.api.routes.inventories import router as inventories_router
from stockroom.api.routes.invoices import router as invoices_router
from stockroom.api.routes.movements import router as movements_router
from stockroom.api.routes.products import router as products_router
from stockroom.api.routes.sales import router as sales_router

__all__ = [
    "health_router",
    "invoices_router",
    "products_router",
    "movements_router",
    "sales_router",
    "inventories_router",
]
