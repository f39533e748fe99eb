"""Mock LLM provider for testing and offline runs"""

import time
from pathlib import Path
from typing import Any, Dict, Union

from podcast_summary.domain.models.remote_error import RemoteCallError
from podcast_summary.infrastructure.llm.base import LLMProvider
from podcast_summary.infrastructure.retry import retry_with_backoff


class MockLLMProvider(LLMProvider):
    """Mock LLM provider that returns predefined responses"""

    def __init__(self, config: Dict[str, Any] = None):
        """Initialize mock provider

        Args:
            config: Optional configuration with:
                - delay: Simulated API delay in seconds (default: 0)
                - responses: Dict mapping prompts to responses
                - fail_times: Number of calls that fail before one succeeds (default: 0)
                - fail_message: Message of the simulated failures
                - max_attempts / base_delay_ms: Retry policy for simulated failures
        """
        if config is None:
            config = {}
        super().__init__(config)
        self.delay = config.get("delay", 0.0)
        self.responses = config.get("responses", {})
        self.fail_message = config.get("fail_message", "Simulated API failure")
        self.max_attempts = config.get("max_attempts", 5)
        self.base_delay_ms = config.get("base_delay_ms", 1000)
        self._failures_left = config.get("fail_times", 0)
        self.calls = 0

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """Validate mock provider configuration"""
        if "delay" in config and not isinstance(config["delay"], (int, float)):
            raise ValueError("delay must be a number")
        if "delay" in config and config["delay"] < 0:
            raise ValueError("delay must be non-negative")
        if "fail_times" in config and (
            not isinstance(config["fail_times"], int) or config["fail_times"] < 0
        ):
            raise ValueError("fail_times must be a non-negative integer")

    def _call(self, response: str) -> str:
        def _attempt() -> str:
            self.calls += 1
            time.sleep(self.delay)
            if self._failures_left > 0:
                self._failures_left -= 1
                raise RemoteCallError(self.fail_message, status_code=503)
            return response

        return retry_with_backoff(
            _attempt,
            self.max_attempts,
            base_delay_ms=self.base_delay_ms,
            description="Mock LLM call",
        )

    def generate(self, prompt: str, **kwargs) -> str:
        """Generate mock response

        Args:
            prompt: Input prompt (used to lookup predefined response)
            **kwargs: Ignored for mock provider

        Returns:
            Mock response text
        """
        if prompt in self.responses:
            return self._call(self.responses[prompt])
        if "filename" in prompt.lower():
            return self._call("mock-podcast-ep-1-mock-episode.md")
        return self._call(self._default_summary_response())

    def transcribe_audio(self, prompt: str, audio_path: Union[str, Path], **kwargs) -> str:
        """Return a mock transcript for an existing audio file"""
        path = Path(audio_path)
        if not path.exists():
            raise FileNotFoundError(f"Audio file not found: {path}")
        return self._call(self._default_transcript_response(path.name))

    def _default_summary_response(self) -> str:
        return """---
- podcast: Mock Podcast
- episode: 1
- title: Mock Episode
---

## Key Discussion Points

1. **Testing without network access** - The mock provider returns canned text.

## Notable Insights

- "Mock responses keep tests deterministic."

## Context & Relevance

Useful for developers running the tool offline.
"""

    def _default_transcript_response(self, file_name: str) -> str:
        return f"""---
- podcast: Mock Podcast
- episode: 1
- title: {file_name}
---

[00:00:00] Host: Welcome to the mock podcast.
[00:00:05] Guest: Thanks for having me.
"""
