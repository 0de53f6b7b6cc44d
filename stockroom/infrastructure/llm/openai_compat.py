"""
OpenAI-compatible chat-completions provider.

Works with any endpoint exposing POST {base_url}/chat/completions with
Bearer authentication.
"""

import time

import httpx

from stockroom.config import get_logger
from stockroom.config.settings import LLMSettings
from stockroom.core.exceptions import LLMResponseError, LLMUnavailableError
from stockroom.core.interfaces import HealthStatus, LLMResponse
from stockroom.infrastructure.llm.base import BaseLLMProvider

logger = get_logger(__name__)


class OpenAICompatibleProvider(BaseLLMProvider):
    """Chat-completions HTTP provider."""

    provider_name = "openai"

    def __init__(
        self,
        settings: LLMSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(settings)
        self.base_url = settings.base_url.rstrip("/")
        self.api_key = settings.api_key
        self.model = settings.model_name
        self.timeout = settings.timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
        )

    async def _make_request(self, method: str, endpoint: str, payload: dict | None = None) -> dict:
        """Send a request, mapping transport failures to retryable builtins."""
        url = f"{self.base_url}/{endpoint}"
        try:
            async with self._client() as client:
                response = await client.request(method, url, json=payload)
        except httpx.TimeoutException as e:
            raise TimeoutError(f"{endpoint} timed out") from e
        except httpx.TransportError as e:
            raise ConnectionError(f"{endpoint}: {e}") from e

        if response.status_code == 429 or response.status_code >= 500:
            raise ConnectionError(f"HTTP {response.status_code}")

        if response.status_code >= 400:
            raise LLMUnavailableError(
                self.provider_name,
                f"HTTP {response.status_code}: {response.text[:200]}",
            )

        try:
            return response.json()
        except ValueError as e:
            raise LLMResponseError("response body is not JSON", response.text) from e

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Single-turn chat completion."""
        if not self.api_key:
            raise LLMUnavailableError(self.provider_name, "no API key configured")

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature if temperature is not None else self.settings.temperature,
            "max_tokens": max_tokens or self.settings.max_tokens,
        }

        async def _do_generate() -> LLMResponse:
            start_time = time.time()
            result = await self._make_request("POST", "chat/completions", payload)
            elapsed = time.time() - start_time

            choices = result.get("choices") or []
            if not choices:
                raise LLMResponseError("no choices in response", str(result))

            choice = choices[0]
            text = (choice.get("message") or {}).get("content") or ""
            if not text.strip():
                raise LLMResponseError(
                    f"Empty response (finish_reason={choice.get('finish_reason')})",
                    text,
                )

            usage = result.get("usage") or {}
            logger.info(
                "openai_generate",
                model=self.model,
                prompt_len=len(prompt),
                response_len=len(text),
                elapsed_ms=int(elapsed * 1000),
            )

            return LLMResponse(
                text=text,
                model=result.get("model", self.model),
                done_reason=choice.get("finish_reason"),
                prompt_tokens=usage.get("prompt_tokens", 0),
                completion_tokens=usage.get("completion_tokens", 0),
            )

        return await self._resilient_call(_do_generate)

    async def check_health(self) -> HealthStatus:
        """List models to confirm the endpoint and key work."""
        if not self.api_key:
            return self._remember_health(
                HealthStatus(available=False, provider=self.provider_name, error="no API key configured")
            )

        start_time = time.time()
        try:
            await self._make_request("GET", "models")
        except Exception as e:
            return self._remember_health(
                HealthStatus(
                    available=False,
                    provider=self.provider_name,
                    model=self.model,
                    error=str(e),
                )
            )

        return self._remember_health(
            HealthStatus(
                available=True,
                provider=self.provider_name,
                model=self.model,
                response_time_ms=(time.time() - start_time) * 1000,
            )
        )
