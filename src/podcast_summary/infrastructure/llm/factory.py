"""Factory for creating LLM providers"""

import logging
from typing import Any, Dict

from podcast_summary.infrastructure.llm.base import LLMProvider
from podcast_summary.infrastructure.llm.gemini import GeminiProvider
from podcast_summary.infrastructure.llm.mock import MockLLMProvider

logger = logging.getLogger(__name__)


class LLMProviderFactory:
    """Factory for creating LLM provider instances"""

    PROVIDERS = {
        "gemini": GeminiProvider,
        "mock": MockLLMProvider,
    }

    @classmethod
    def create(cls, provider_type: str, config: Dict[str, Any] = None) -> LLMProvider:
        """Create LLM provider instance

        Args:
            provider_type: Type of provider (gemini, mock)
            config: Provider configuration

        Returns:
            LLMProvider instance

        Raises:
            ValueError: If provider type is not supported
        """
        if config is None:
            config = {}

        provider_type_lower = provider_type.lower()

        if provider_type_lower not in cls.PROVIDERS:
            available = ", ".join(cls.PROVIDERS.keys())
            raise ValueError(
                f"Unknown LLM provider: {provider_type}. "
                f"Available providers: {available}"
            )

        provider_class = cls.PROVIDERS[provider_type_lower]
        logger.info(f"Creating {provider_type_lower} provider")
        return provider_class(config)
