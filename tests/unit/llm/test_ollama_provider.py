"""Tests for the Ollama provider and provider factory."""

import json

import httpx
import pytest

from stockroom.config.settings import LLMSettings
from stockroom.core.exceptions import LLMUnavailableError
from stockroom.infrastructure.llm import (
    OllamaProvider,
    OpenAICompatibleProvider,
    create_llm_provider,
)


def ollama_settings(**overrides) -> LLMSettings:
    values = {
        "provider": "ollama",
        "base_url": "http://ollama.test:11434",
        "model_name": "llama3",
        "max_retries": 1,
        "retry_delay": 0.01,
    }
    return LLMSettings(**(values | overrides))


class TestOllamaProvider:
    async def test_generate_json_mode(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"response": '{"items": []}', "done": True})

        provider = OllamaProvider(ollama_settings(), transport=httpx.MockTransport(handler))
        result = await provider.generate("Prompt", system_prompt="System", max_tokens=64)

        assert result.text == '{"items": []}'
        assert seen[0]["format"] == "json"
        assert seen[0]["stream"] is False
        assert seen[0]["system"] == "System"
        assert seen[0]["options"]["num_predict"] == 64

    async def test_connection_refused(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        provider = OllamaProvider(ollama_settings(), transport=httpx.MockTransport(handler))
        with pytest.raises(LLMUnavailableError):
            await provider.generate("Prompt")

    async def test_token_counts(self):
        def handler(request):
            return httpx.Response(
                200,
                json={"response": "{}", "done_reason": "stop", "prompt_eval_count": 40, "eval_count": 12},
            )

        provider = OllamaProvider(ollama_settings(), transport=httpx.MockTransport(handler))
        result = await provider.generate("Prompt")
        assert result.prompt_tokens == 40
        assert result.total_tokens == 52
        assert result.done_reason == "stop"

    async def test_health_with_tagged_model(self):
        def handler(request):
            assert request.url.path == "/api/tags"
            return httpx.Response(200, json={"models": [{"name": "llama3:latest"}]})

        provider = OllamaProvider(ollama_settings(), transport=httpx.MockTransport(handler))
        status = await provider.check_health()
        assert status.available is True
        assert status.model == "llama3"
        assert provider.is_available() is True

    async def test_health_requires_model(self):
        def handler(request):
            return httpx.Response(200, json={"models": [{"name": "mistral:latest"}]})

        provider = OllamaProvider(ollama_settings(), transport=httpx.MockTransport(handler))
        status = await provider.check_health()
        assert status.available is False
        assert "llama3" in status.error


class TestFactory:
    def test_openai(self):
        assert isinstance(create_llm_provider(LLMSettings(provider="openai")), OpenAICompatibleProvider)

    def test_ollama(self):
        assert isinstance(create_llm_provider(ollama_settings()), OllamaProvider)
