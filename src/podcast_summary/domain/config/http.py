"""HTTP configuration model."""

from pydantic import BaseModel, Field


class HttpConfig(BaseModel):
    """Configuration for page fetching and downloads.

    Attributes:
        timeout: Request timeout in seconds
        user_agent: User-Agent header sent with every request
    """

    timeout: float = Field(30.0, gt=0.0)
    user_agent: str = "Mozilla/5.0 (compatible; podcast-summary/1.0)"
