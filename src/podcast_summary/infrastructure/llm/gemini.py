"""Google Gemini LLM provider"""

from __future__ import annotations

import logging
import mimetypes
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from podcast_summary.domain.config.llm import DEFAULT_MODEL_NAME
from podcast_summary.domain.models.remote_error import RemoteCallError
from podcast_summary.infrastructure.llm.base import LLMProvider
from podcast_summary.infrastructure.retry import (
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_MAX_RETRIES,
    retry_with_backoff,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def to_remote_error(error: genai_errors.APIError) -> RemoteCallError:
    """Translate an SDK API error into a RemoteCallError

    The SDK keeps the response body in ``details``; the structured detail
    list (RetryInfo, QuotaFailure, ...) lives under ``error.details``.
    """
    payload = getattr(error, "details", None)
    if not isinstance(payload, dict):
        payload = {}
    body = payload.get("error", payload)
    details = body.get("details") if isinstance(body, dict) else None
    return RemoteCallError(
        str(error),
        status_code=getattr(error, "code", None),
        details=details if isinstance(details, list) else [],
    )


class GeminiProvider(LLMProvider):
    """Google Gemini API provider (google-genai SDK)"""

    API_KEY_ENV = "GEMINI_API_KEY"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize Gemini provider

        Args:
            config: Configuration dictionary with:
                - api_key: Gemini API key (or from GEMINI_API_KEY env)
                - model: Model name (default: DEFAULT_MODEL_NAME)
                - temperature: Temperature (default: 0.0)
                - max_attempts: Max attempts per remote call (default: 5)
                - base_delay_ms: Exponential backoff base (default: 1000)
        """
        if config is None:
            config = {}
        super().__init__(config)

        self.api_key = config.get("api_key") or os.getenv(self.API_KEY_ENV)
        self.model = config.get("model", DEFAULT_MODEL_NAME)
        self.temperature = config.get("temperature", 0.0)
        self.max_attempts = config.get("max_attempts", DEFAULT_MAX_RETRIES)
        self.base_delay_ms = config.get("base_delay_ms", DEFAULT_BASE_DELAY_MS)
        self._client: Optional[genai.Client] = None

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """Validate Gemini configuration"""
        api_key = config.get("api_key") or os.getenv(self.API_KEY_ENV)
        if not api_key:
            raise ValueError(
                "Gemini API key is required. "
                f"Set {self.API_KEY_ENV} environment variable or provide api_key in config."
            )

        if "model" in config and not isinstance(config["model"], str):
            raise ValueError("model must be a string")

        if "temperature" in config:
            temp = config["temperature"]
            if not isinstance(temp, (int, float)) or not (0.0 <= temp <= 2.0):
                raise ValueError("temperature must be between 0.0 and 2.0")

        if "max_attempts" in config:
            attempts = config["max_attempts"]
            if not isinstance(attempts, int) or attempts < 1:
                raise ValueError("max_attempts must be a positive integer")

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def _run(self, call: Callable[[], T], description: str) -> T:
        """Run one SDK call under the retry policy"""

        def _attempt() -> T:
            try:
                return call()
            except genai_errors.APIError as e:
                raise to_remote_error(e) from e

        return retry_with_backoff(
            _attempt,
            self.max_attempts,
            base_delay_ms=self.base_delay_ms,
            description=description,
        )

    def _generate_content(self, contents: List[Any], **kwargs) -> str:
        model = kwargs.get("model", self.model)
        temperature = kwargs.get("temperature", self.temperature)
        config = types.GenerateContentConfig(temperature=temperature)

        def _call() -> str:
            response = self.client.models.generate_content(
                model=model, contents=contents, config=config
            )
            if not response.text:
                raise RemoteCallError(f"Gemini {model} returned an empty response")
            return response.text

        logger.debug(f"Gemini generate_content with {model}")
        text = self._run(_call, f"Gemini {model} request")
        logger.debug(f"Gemini response received ({len(text)} chars)")
        return text

    def generate(self, prompt: str, **kwargs) -> str:
        return self._generate_content([prompt], **kwargs)

    def transcribe_audio(self, prompt: str, audio_path: Union[str, Path], **kwargs) -> str:
        """Upload an audio file and generate its transcript

        Raises:
            FileNotFoundError: If the audio file does not exist
            ValueError: If the audio type cannot be determined from the file name
        """
        path = Path(audio_path)
        if not path.exists():
            raise FileNotFoundError(f"Audio file not found: {path}")
        mime_type, _ = mimetypes.guess_type(path.name)
        if mime_type is None:
            raise ValueError(f"Cannot determine the media type of {path}")

        logger.info(f"Uploading {path} ({mime_type})")
        uploaded = self._run(
            lambda: self.client.files.upload(
                file=str(path), config=types.UploadFileConfig(mime_type=mime_type)
            ),
            "Gemini file upload",
        )
        audio_part = types.Part.from_uri(
            file_uri=uploaded.uri, mime_type=uploaded.mime_type or mime_type
        )
        return self._generate_content([prompt, audio_part], **kwargs)
