"""Configuration models with Pydantic validation."""

from podcast_summary.domain.config.app import AppConfig
from podcast_summary.domain.config.http import HttpConfig
from podcast_summary.domain.config.llm import DEFAULT_MODEL_NAME, LLMConfig
from podcast_summary.domain.config.output import OutputConfig
from podcast_summary.domain.config.prompts import PromptsConfig
from podcast_summary.domain.config.retry import RetryConfig

__all__ = [
    "AppConfig",
    "DEFAULT_MODEL_NAME",
    "HttpConfig",
    "LLMConfig",
    "OutputConfig",
    "PromptsConfig",
    "RetryConfig",
]
