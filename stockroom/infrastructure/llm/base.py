"""
Shared resilience for completion providers.

Transient transport failures are retried with exponential backoff. Failures
that survive the retries count against a circuit breaker, so a provider that
is down stops costing every invoice a full timeout before the text fallback
runs.
"""

import time
from abc import ABC
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from stockroom.config import get_logger
from stockroom.config.settings import LLMSettings
from stockroom.core.exceptions import (
    CircuitBreakerOpenError,
    LLMTimeoutError,
    LLMUnavailableError,
)
from stockroom.core.interfaces import HealthStatus, ILLMProvider, LLMResponse

logger = get_logger(__name__)

# Seconds a health check result is trusted by is_available()
HEALTH_TTL_SECONDS = 30.0


@dataclass
class CircuitBreakerState:
    """Consecutive-failure counter with a cooldown once the threshold is hit."""

    failure_threshold: int = 3
    cooldown_seconds: int = 60
    failures: int = 0
    opened_at: float | None = field(default=None)

    @property
    def is_open(self) -> bool:
        return self.opened_at is not None

    @property
    def cooldown_remaining(self) -> int:
        if self.opened_at is None:
            return 0
        return max(0, int(self.cooldown_seconds - (time.monotonic() - self.opened_at)))

    def check(self, provider: str) -> None:
        """Raise while cooling down. After the cooldown one trial call is let through."""
        if self.opened_at is None:
            return
        remaining = self.cooldown_remaining
        if remaining > 0:
            raise CircuitBreakerOpenError(provider, remaining)
        logger.info("circuit_breaker_half_open", provider=provider)

    def record_failure(self) -> None:
        self.failures += 1
        if self.failures < self.failure_threshold:
            return
        # a failed half-open trial restarts the cooldown
        self.opened_at = time.monotonic()
        logger.warning(
            "circuit_breaker_opened",
            failures=self.failures,
            cooldown=self.cooldown_seconds,
        )

    def record_success(self) -> None:
        if self.opened_at is not None:
            logger.info("circuit_breaker_closed")
        self.failures = 0
        self.opened_at = None


def _log_retry(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    logger.warning(
        "llm_retry",
        attempt=retry_state.attempt_number,
        error=str(outcome.exception()) if outcome is not None else None,
    )


class BaseLLMProvider(ILLMProvider, ABC):
    """
    Retry and circuit breaking around a provider's HTTP call.

    Subclasses raise TimeoutError or ConnectionError for failures worth
    retrying, LLMUnavailableError for failures that should count against the
    breaker without a retry, and anything else for bad responses.
    """

    provider_name = "llm"

    def __init__(self, settings: LLMSettings) -> None:
        self.settings = settings
        self.circuit_breaker = CircuitBreakerState(
            failure_threshold=settings.failure_threshold,
            cooldown_seconds=settings.cooldown_seconds,
        )
        self._last_health: HealthStatus | None = None
        self._last_health_at = 0.0

    def _retrying(self) -> AsyncRetrying:
        delay = self.settings.retry_delay
        return AsyncRetrying(
            stop=stop_after_attempt(max(1, self.settings.max_retries)),
            wait=wait_exponential(
                multiplier=delay,
                min=delay,
                max=delay * self.settings.retry_multiplier**3,
            ),
            retry=retry_if_exception_type((TimeoutError, ConnectionError)),
            before_sleep=_log_retry,
            reraise=True,
        )

    async def _resilient_call(
        self, request: Callable[[], Awaitable[LLMResponse]]
    ) -> LLMResponse:
        """
        Run one completion request under the breaker and the retry policy.

        Raises:
            CircuitBreakerOpenError: still cooling down
            LLMTimeoutError: every attempt timed out
            LLMUnavailableError: the provider could not be reached or refused
        """
        self.circuit_breaker.check(self.provider_name)

        try:
            async for attempt in self._retrying():
                with attempt:
                    response = await request()
        except TimeoutError as e:
            self.circuit_breaker.record_failure()
            raise LLMTimeoutError(self.settings.timeout) from e
        except (ConnectionError, OSError) as e:
            self.circuit_breaker.record_failure()
            raise LLMUnavailableError(self.provider_name, str(e)) from e
        except LLMUnavailableError:
            self.circuit_breaker.record_failure()
            raise
        except Exception as e:
            # malformed responses say nothing about reachability
            logger.error("llm_error", provider=self.provider_name, error=str(e), error_type=type(e).__name__)
            raise

        self.circuit_breaker.record_success()
        return response

    def is_available(self) -> bool:
        """Cheap check: breaker state, then the last health check while it is fresh."""
        if self.circuit_breaker.cooldown_remaining > 0:
            return False
        fresh = time.monotonic() - self._last_health_at < HEALTH_TTL_SECONDS
        if self._last_health is not None and fresh:
            return self._last_health.available
        return True

    def _remember_health(self, status: HealthStatus) -> HealthStatus:
        self._last_health = status
        self._last_health_at = time.monotonic()
        return status
