"""Summary service - orchestrates extraction, transcription and summarization"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, Optional, Union

from podcast_summary.domain.models.summary_result import SummaryResult
from podcast_summary.domain.prompts.summary_prompts import SummaryPromptBuilder
from podcast_summary.infrastructure.llm.base import LLMProvider
from podcast_summary.infrastructure.web import is_remote

logger = logging.getLogger(__name__)

MAX_FILENAME_LENGTH = 65
DEFAULT_FILENAME = "summary.md"


def sanitize_filename(raw: str) -> str:
    """Turn a model-suggested title into a safe markdown filename

    Keeps lowercase letters, digits and hyphens, limits the name to
    MAX_FILENAME_LENGTH characters including the .md suffix.
    """
    name = raw.strip().splitlines()[0] if raw.strip() else ""
    name = name.strip().strip("`'\"").lower()
    if name.endswith(".md"):
        name = name[: -len(".md")]
    name = re.sub(r"[^a-z0-9-]+", "-", name)
    name = re.sub(r"-{2,}", "-", name).strip("-")
    name = name[: MAX_FILENAME_LENGTH - len(".md")].rstrip("-")
    return f"{name}.md" if name else DEFAULT_FILENAME


class SummaryService:
    """Service for summarizing podcast transcripts and audio"""

    def __init__(
        self,
        llm_provider: LLMProvider,
        prompt_builder: Optional[SummaryPromptBuilder] = None,
        content_extractor: Optional[Callable[[str], str]] = None,
        downloader: Optional[Callable[[str], Path]] = None,
    ):
        """Initialize summary service

        Args:
            llm_provider: LLM provider instance
            prompt_builder: Prompt builder (defaults to built-in prompts)
            content_extractor: Callable returning the readable text of a URL or path
            downloader: Callable downloading a URL and returning the local path
        """
        self.llm_provider = llm_provider
        self.prompt_builder = prompt_builder or SummaryPromptBuilder()
        self.content_extractor = content_extractor
        self.downloader = downloader

    def extract(self, source: str) -> str:
        if self.content_extractor is None:
            raise RuntimeError("No content extractor configured")
        logger.info(f"Extracting content from {source}")
        return self.content_extractor(source)

    def transcribe(self, audio_path: Union[str, Path], description: Optional[str] = None) -> str:
        """Transcribe an audio file, optionally guided by an episode description"""
        prompt = self.prompt_builder.build_transcription(description)
        return self.llm_provider.transcribe_audio(prompt, audio_path)

    def summarize(self, content: str) -> str:
        if not content or not content.strip():
            raise ValueError("Nothing to summarize: content is empty")
        logger.debug(f"Summarizing {len(content)} chars")
        return self.llm_provider.generate(self.prompt_builder.build_summary(content))

    def generate_filename(self, content: str) -> str:
        raw = self.llm_provider.generate(self.prompt_builder.build_filename(content))
        filename = sanitize_filename(raw)
        logger.debug(f"Generated filename {filename!r} from {raw!r}")
        return filename

    def summarize_transcription(self, url: str) -> SummaryResult:
        """Summarize a published transcript page"""
        content = self.extract(url)
        summary = self.summarize(content)
        return SummaryResult(source=url, content=content, summary=summary)

    def summarize_audio(self, audio: str, metadata_url: Optional[str] = None) -> SummaryResult:
        """Transcribe and summarize an audio file

        Args:
            audio: Local path or http(s) URL of the audio file
            metadata_url: Page describing the episode, used as transcription context

        Returns:
            Summary result holding the transcript as content
        """
        description = None
        if metadata_url:
            logger.info(f"Adding transcription metadata from {metadata_url}...")
            description = self.extract(metadata_url)

        downloaded: Optional[Path] = None
        if is_remote(audio):
            if self.downloader is None:
                raise RuntimeError("No downloader configured for remote audio")
            downloaded = self.downloader(audio)
            audio_path: Union[str, Path] = downloaded
        else:
            audio_path = audio

        try:
            transcript = self.transcribe(audio_path, description)
        finally:
            if downloaded is not None:
                logger.debug(f"Removing downloaded file {downloaded}")
                downloaded.unlink(missing_ok=True)

        summary = self.summarize(transcript)
        return SummaryResult(source=audio, content=transcript, summary=summary)
