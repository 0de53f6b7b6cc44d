"""
LLM provider factory.

Creates appropriate provider based on configuration.
"""

from stockroom.config import get_logger
from stockroom.config.settings import LLMSettings
from stockroom.core.interfaces import ILLMProvider, LLMProvider

logger = get_logger(__name__)


def create_llm_provider(settings: LLMSettings) -> ILLMProvider:
    """
    Build an LLM provider instance.

    Args:
        settings: LLM settings; settings.provider picks the implementation

    Returns:
        ILLMProvider instance
    """
    provider_type = LLMProvider(settings.provider)

    if provider_type == LLMProvider.OPENAI:
        from stockroom.infrastructure.llm.openai_compat import OpenAICompatibleProvider

        provider: ILLMProvider = OpenAICompatibleProvider(settings)
    else:
        from stockroom.infrastructure.llm.ollama import OllamaProvider

        provider = OllamaProvider(settings)

    logger.info("llm_provider_created", provider=provider_type.value, model=settings.model_name)
    return provider
