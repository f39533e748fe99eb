"""Output configuration model."""

from typing import Optional

from pydantic import BaseModel


class OutputConfig(BaseModel):
    """Configuration for summary output.

    Attributes:
        markdown: Render the summary as terminal markdown (False = print raw text)
        directory: Directory where saved summaries are written (None = current dir)
    """

    markdown: bool = True
    directory: Optional[str] = None
