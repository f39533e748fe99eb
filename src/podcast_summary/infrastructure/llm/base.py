"""Base LLM provider interface"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Union


class LLMProvider(ABC):
    """Abstract base class for LLM providers"""

    def __init__(self, config: Dict[str, Any]):
        """Initialize provider with configuration

        Args:
            config: Provider configuration dictionary

        Raises:
            ValueError: If configuration is invalid
        """
        self.config = config
        self._validate_config(config)

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """Validate provider configuration

        Raises:
            ValueError: If configuration is invalid
        """
        # Override in subclasses for specific validation
        pass

    @abstractmethod
    def generate(self, prompt: str, **kwargs) -> str:
        """Generate a text response from a prompt

        Args:
            prompt: Input prompt
            **kwargs: Additional parameters (model, temperature)

        Returns:
            Generated text response

        Raises:
            RetryExhaustedError: If every attempt failed
        """
        pass

    @abstractmethod
    def transcribe_audio(self, prompt: str, audio_path: Union[str, Path], **kwargs) -> str:
        """Generate a text response from a prompt and an audio file

        Args:
            prompt: Transcription instructions
            audio_path: Local audio file
            **kwargs: Additional parameters (model, temperature)

        Returns:
            Generated transcript
        """
        pass
