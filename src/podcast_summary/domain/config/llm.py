"""LLM configuration model."""

from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_MODEL_NAME = "gemini-2.5-flash-preview-04-17"


class LLMConfig(BaseModel):
    """Configuration for LLM provider.

    Attributes:
        provider: LLM provider name
        model: Model identifier, used for transcription and summarization
        temperature: Sampling temperature (0.0-2.0)
    """

    provider: Literal["gemini", "mock"] = "gemini"
    model: str = Field(DEFAULT_MODEL_NAME, min_length=1)
    temperature: float = Field(0.0, ge=0.0, le=2.0)
