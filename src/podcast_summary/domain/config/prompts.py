"""Prompts configuration model."""

from typing import Optional

from pydantic import BaseModel


class PromptsConfig(BaseModel):
    """Configuration for custom prompts.

    Attributes:
        summary: Custom summary prompt template, must contain {content} (None = use default)
        transcription: Custom transcription prompt template, may contain {description}
        filename: Custom filename prompt template, must contain {content}
    """

    summary: Optional[str] = None
    transcription: Optional[str] = None
    filename: Optional[str] = None
