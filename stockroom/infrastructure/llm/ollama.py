"""
Local Ollama server.

Completions go to ``POST /api/generate`` with ``"format": "json"`` so the
model is held to JSON output, which is all the invoice extractor accepts.
"""

import time

import httpx

from stockroom.config import get_logger
from stockroom.config.settings import LLMSettings
from stockroom.core.exceptions import LLMResponseError, LLMUnavailableError
from stockroom.core.interfaces import HealthStatus, LLMResponse
from stockroom.infrastructure.llm.base import BaseLLMProvider

logger = get_logger(__name__)

# /api/tags answers quickly when the server is up
HEALTH_TIMEOUT_SECONDS = 10


class OllamaProvider(BaseLLMProvider):
    provider_name = "ollama"

    def __init__(
        self,
        settings: LLMSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(settings)
        self.host = settings.base_url.rstrip("/")
        self.model = settings.model_name
        self._transport = transport

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.host, timeout=timeout, transport=self._transport)

    def _payload(
        self,
        prompt: str,
        system_prompt: str | None,
        temperature: float | None,
        max_tokens: int | None,
    ) -> dict:
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "format": "json",
            "options": {
                "temperature": self.settings.temperature if temperature is None else temperature,
                "num_predict": max_tokens or self.settings.max_tokens,
            },
        }
        if system_prompt:
            payload["system"] = system_prompt
        return payload

    async def _post_generate(self, payload: dict) -> dict:
        try:
            async with self._client(self.settings.timeout) as client:
                response = await client.post("/api/generate", json=payload)
        except httpx.TimeoutException as e:
            raise TimeoutError("ollama generate timed out") from e
        except httpx.TransportError as e:
            raise ConnectionError(f"ollama at {self.host}: {e}") from e

        if response.status_code != 200:
            raise LLMUnavailableError(
                self.provider_name, f"HTTP {response.status_code}: {response.text[:200]}"
            )
        return response.json()

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        payload = self._payload(prompt, system_prompt, temperature, max_tokens)

        async def attempt() -> LLMResponse:
            started = time.perf_counter()
            body = await self._post_generate(payload)
            text = body.get("response") or ""
            if not text.strip():
                raise LLMResponseError(f"no text, done_reason={body.get('done_reason')}", text)

            logger.info(
                "ollama_generate",
                model=self.model,
                prompt_len=len(prompt),
                response_len=len(text),
                elapsed_ms=int((time.perf_counter() - started) * 1000),
            )
            return LLMResponse(
                text=text,
                model=body.get("model", self.model),
                done_reason=body.get("done_reason"),
                prompt_tokens=body.get("prompt_eval_count", 0),
                completion_tokens=body.get("eval_count", 0),
            )

        return await self._resilient_call(attempt)

    async def check_health(self) -> HealthStatus:
        """Reachable, and the configured model has been pulled."""
        started = time.perf_counter()
        try:
            async with self._client(HEALTH_TIMEOUT_SECONDS) as client:
                response = await client.get("/api/tags")
        except httpx.HTTPError:
            error = f"Cannot connect to Ollama at {self.host}"
        else:
            if response.status_code != 200:
                error = f"HTTP {response.status_code}"
            else:
                installed = [m.get("name", "") for m in response.json().get("models", [])]
                pulled = any(name == self.model or name.startswith(f"{self.model}:") for name in installed)
                error = None if pulled else f"Model '{self.model}' not installed"

        status = HealthStatus(
            available=error is None,
            provider=self.provider_name,
            model=self.model,
            error=error,
            response_time_ms=(time.perf_counter() - started) * 1000 if error is None else None,
        )
        return self._remember_health(status)
