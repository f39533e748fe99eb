"""Main application configuration model."""

from pydantic import BaseModel, ConfigDict, Field

from podcast_summary.domain.config.http import HttpConfig
from podcast_summary.domain.config.llm import LLMConfig
from podcast_summary.domain.config.output import OutputConfig
from podcast_summary.domain.config.prompts import PromptsConfig
from podcast_summary.domain.config.retry import RetryConfig


class AppConfig(BaseModel):
    """Main application configuration.

    This is the root configuration model that aggregates all configuration sections.
    Validation is performed at load time to fail fast on configuration errors.

    Attributes:
        llm: LLM provider configuration
        retry: Retry logic configuration for remote model calls and HTTP fetches
        http: Page fetching configuration
        prompts: Custom prompts configuration
        output: Summary output configuration
    """

    llm: LLMConfig = Field(default_factory=LLMConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    prompts: PromptsConfig = Field(default_factory=PromptsConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "llm": {
                    "provider": "gemini",
                    "model": "gemini-2.5-flash-preview-04-17",
                    "temperature": 0.0,
                },
                "retry": {
                    "max_attempts": 5,
                    "base_delay_ms": 1000,
                },
                "http": {
                    "timeout": 30.0,
                },
                "prompts": {
                    "summary": None,
                    "transcription": None,
                    "filename": None,
                },
                "output": {
                    "markdown": True,
                    "directory": "summaries",
                },
            }
        },
    )
