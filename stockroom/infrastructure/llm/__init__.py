"""Text-completion providers."""

from stockroom.infrastructure.llm.base import BaseLLMProvider, CircuitBreakerState
from stockroom.infrastructure.llm.factory import create_llm_provider
from stockroom.infrastructure.llm.ollama import OllamaProvider
from stockroom.infrastructure.llm.openai_compat import OpenAICompatibleProvider

__all__ = [
    "BaseLLMProvider",
    "CircuitBreakerState",
    "OllamaProvider",
    "OpenAICompatibleProvider",
    "create_llm_provider",
]
