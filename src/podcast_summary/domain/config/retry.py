"""Retry configuration model."""

from pydantic import BaseModel, Field


class RetryConfig(BaseModel):
    """Configuration for retry logic.

    Attributes:
        max_attempts: Maximum number of attempts, including the first one
        base_delay_ms: Base of the exponential backoff; failure n waits
            base_delay_ms * 2^n milliseconds
    """

    max_attempts: int = Field(5, ge=1)
    base_delay_ms: int = Field(1000, gt=0)

    @property
    def base_delay(self) -> float:
        """Base delay in seconds"""
        return self.base_delay_ms / 1000.0
