"""Completion provider contract used by the AI invoice extractor."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class LLMProvider(str, Enum):
    OPENAI = "openai"
    OLLAMA = "ollama"


@dataclass
class LLMResponse:
    """Text of one completion plus what the provider reported about it."""

    text: str
    model: str
    done_reason: str | None = None
    prompt_tokens: int = 0
    completion_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


@dataclass
class HealthStatus:
    """Result of a reachability check, shown by /api/health."""

    available: bool
    provider: str
    model: str | None = None
    error: str | None = None
    response_time_ms: float | None = None


class ILLMProvider(ABC):
    """Something that turns a prompt into text."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """
        Complete ``prompt``. ``temperature`` and ``max_tokens`` fall back to
        the provider's configured values when None.

        Raises:
            LLMError: the provider was unreachable, too slow or answered
                with nothing usable
        """

    @abstractmethod
    async def check_health(self) -> HealthStatus:
        """Check the provider over the network."""

    @abstractmethod
    def is_available(self) -> bool:
        """Answer without network I/O whether a call is worth attempting."""
