"""LLM providers"""

from podcast_summary.infrastructure.llm.base import LLMProvider
from podcast_summary.infrastructure.llm.gemini import GeminiProvider
from podcast_summary.infrastructure.llm.mock import MockLLMProvider

__all__ = ["LLMProvider", "GeminiProvider", "MockLLMProvider"]
