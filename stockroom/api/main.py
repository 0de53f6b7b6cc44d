"""
HTTP application.

``create_app`` builds a FastAPI instance for a given configuration. Startup
migrates the database before the first request is served; shutdown closes
the connection pool. Run it with::

    uvicorn stockroom.api.main:create_app --factory
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockroom import __version__
from stockroom.api.middleware import ErrorHandlerMiddleware, RequestLoggingMiddleware
from stockroom.api.middleware.error_handler import setup_exception_handlers
from stockroom.api.routes import (
    health_router,
    inventories_router,
    invoices_router,
    movements_router,
    products_router,
    sales_router,
)
from stockroom.application.services import ServiceContainer, build_container
from stockroom.config import Settings, configure_logging, get_logger, get_settings
from stockroom.core.interfaces import ILLMProvider
from stockroom.infrastructure.storage.sqlite.migrations import run_migrations

logger = get_logger(__name__)

ROUTERS: tuple[APIRouter, ...] = (
    health_router,
    invoices_router,
    products_router,
    movements_router,
    sales_router,
    inventories_router,
)


async def _start(settings: Settings, llm: ILLMProvider | None) -> ServiceContainer:
    db_path = settings.storage.db_path
    results = await run_migrations(db_path)
    failed = next((r for r in results if not r.success), None)
    if failed is not None:
        raise RuntimeError(f"migration v{failed.version} ({failed.name}) failed: {failed.error}")
    logger.info("database_ready", db_path=str(db_path), migrations_applied=len(results))

    container = build_container(settings, llm=llm)
    await container.pool.initialize()
    return container


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    logger.info("application_starting", host=settings.api.host, port=settings.api.port)

    try:
        container = await _start(settings, app.state.llm_override)
    except Exception as e:
        logger.error("application_start_failed", error=str(e))
        raise

    app.state.container = container
    logger.info("application_started", ai_extraction=container.parser.primary is not None)
    try:
        yield
    finally:
        await container.close()
        logger.info("application_stopped")


def create_app(
    settings: Settings | None = None,
    llm: ILLMProvider | None = None,
) -> FastAPI:
    """
    Args:
        settings: Configuration, read from the environment when None
        llm: Completion provider to use instead of the configured one,
            e.g. a stub in tests
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Stockroom API",
        description="Invoice extraction, stock ledger and inventory counts",
        version=__version__,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.llm_override = llm

    # added last runs first: CORS, then error envelope, then request logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)
    for router in ROUTERS:
        app.include_router(router)

    @app.get("/health", tags=["health"])
    async def liveness() -> dict[str, str]:
        """Process is up. Dependencies are checked by /api/health."""
        return {"status": "healthy", "version": __version__}

    return app


def run() -> None:
    """Serve with uvicorn on the configured host and port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "stockroom.api.main:create_app",
        factory=True,
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )


if __name__ == "__main__":
    run()
