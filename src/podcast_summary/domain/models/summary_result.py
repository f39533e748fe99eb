"""Summary result model"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class SummaryResult:
    """Outcome of summarizing one podcast episode"""

    source: str  # transcription URL or audio path/URL
    content: str  # extracted text or generated transcript
    summary: str
    filename: Optional[str] = None  # set when the summary is saved

    def __post_init__(self):
        if not self.summary or not self.summary.strip():
            raise ValueError("Summary must not be empty")

    @property
    def content_length(self) -> int:
        return len(self.content)
