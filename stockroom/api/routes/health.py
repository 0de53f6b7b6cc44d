"""Dependency health: database always, completion provider when configured."""

import time

from fastapi import APIRouter, Depends

from stockroom import __version__
from stockroom.api.dependencies import get_container
from stockroom.application.dto.responses import HealthResponse, ProviderHealthResponse
from stockroom.application.services import ServiceContainer

router = APIRouter(prefix="/api/health", tags=["health"])

STARTED_AT = time.monotonic()


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


async def check_database(container: ServiceContainer) -> ProviderHealthResponse:
    started = time.perf_counter()
    try:
        async with container.pool.acquire() as conn:
            await conn.execute("SELECT 1")
    except Exception as e:
        return ProviderHealthResponse(name="sqlite", available=False, error=str(e))
    return ProviderHealthResponse(name="sqlite", available=True, latency_ms=_elapsed_ms(started))


async def check_llm(container: ServiceContainer) -> ProviderHealthResponse:
    if container.llm is None:
        return ProviderHealthResponse(name="disabled", available=False)

    started = time.perf_counter()
    try:
        report = await container.llm.check_health()
    except Exception as e:
        return ProviderHealthResponse(name=type(container.llm).__name__, available=False, error=str(e))
    return ProviderHealthResponse(
        name=report.provider,
        available=report.available,
        latency_ms=_elapsed_ms(started),
        error=report.error,
    )


@router.get("", response_model=HealthResponse)
async def health_check(
    container: ServiceContainer = Depends(get_container),
) -> HealthResponse:
    """
    ``unhealthy`` without a database. ``degraded`` when a configured
    completion provider is down, since invoices then go through the text
    extractor only.
    """
    database = await check_database(container)
    llm = await check_llm(container)

    if not database.available:
        overall = "unhealthy"
    elif container.llm is not None and not llm.available:
        overall = "degraded"
    else:
        overall = "healthy"

    return HealthResponse(
        status=overall,
        version=__version__,
        uptime_seconds=round(time.monotonic() - STARTED_AT, 1),
        database=database,
        llm=llm,
    )
