"""
Per-request logging.

Each request gets an id (the client's ``X-Request-ID`` when sent) bound into
the structlog context, so events logged by stores and use cases while the
request runs carry it too. The id and the elapsed time go back as headers.
"""

import time
import uuid
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from stockroom.config import get_logger

logger = get_logger(__name__)

# polled by load balancers, so logged at debug
QUIET_PATHS = frozenset({"/health", "/api/health"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        path = request.url.path
        emit = logger.debug if path in QUIET_PATHS else logger.info
        started = time.perf_counter()

        with structlog.contextvars.bound_contextvars(
            request_id=request_id, method=request.method, path=path
        ):
            emit("request_started", client=getattr(request.client, "host", "unknown"))
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error("request_failed", error=str(e), duration_ms=self._ms(started))
                raise

            duration_ms = self._ms(started)
            emit("request_completed", status=response.status_code, duration_ms=duration_ms)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        return response

    @staticmethod
    def _ms(started: float) -> float:
        return round((time.perf_counter() - started) * 1000, 2)
