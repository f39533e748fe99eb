"""Configuration manager for loading and validating .podcast-summary.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from podcast_summary.domain.config import (
    DEFAULT_MODEL_NAME,
    AppConfig,
    HttpConfig,
    LLMConfig,
    OutputConfig,
    PromptsConfig,
    RetryConfig,
)

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".podcast-summary.yml"


class ConfigurationError(Exception):
    """Configuration validation error."""

    pass


class ConfigManager:
    """Manages configuration from .podcast-summary.yml and environment variables

    Configuration priority:
    1. Default values
    2. .podcast-summary.yml file (searched from current directory upwards)
    3. Environment variables (PODCAST_SUMMARY_*)
    4. CLI arguments (handled by CLI layer)
    """

    DEFAULT_CONFIG = {
        "llm": {
            "provider": "gemini",
            "model": DEFAULT_MODEL_NAME,
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
            "directory": None,
        },
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager

        Args:
            config_path: Path to .podcast-summary.yml (searches from current dir if None)

        Raises:
            ConfigurationError: If configuration validation fails
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        try:
            self.config: AppConfig = self._load_config()
        except ValidationError as e:
            errors = []
            for error in e.errors():
                field = ".".join(str(x) for x in error["loc"])
                errors.append(f"  - {field}: {error['msg']}")
            raise ConfigurationError(
                "Configuration validation failed:\n" + "\n".join(errors)
            ) from e

    def _find_config_file(self) -> Optional[Path]:
        """Find .podcast-summary.yml starting from current directory

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            config_file = parent / CONFIG_FILE_NAME
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return config_file
        logger.debug(f"No {CONFIG_FILE_NAME} found, using defaults")
        return None

    def _load_config(self) -> AppConfig:
        """Load configuration from file and validate with Pydantic

        Raises:
            ValidationError: If configuration is invalid
        """
        config_dict = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
                config_dict = self._merge_config(config_dict, file_config)
                logger.info(f"Loaded configuration from {self.config_path}")
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config from {self.config_path}: {e}")
                logger.info("Using default configuration")

        config_dict = self._apply_env_overrides(config_dict)
        return AppConfig(**config_dict)

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries"""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides"""
        if os.getenv("PODCAST_SUMMARY_PROVIDER"):
            config["llm"]["provider"] = os.getenv("PODCAST_SUMMARY_PROVIDER")

        if os.getenv("PODCAST_SUMMARY_MODEL"):
            config["llm"]["model"] = os.getenv("PODCAST_SUMMARY_MODEL")

        # GEMINI_API_KEY is read by the provider itself
        return config

    def get_llm_config(self) -> LLMConfig:
        return self.config.llm

    def get_retry_config(self) -> RetryConfig:
        return self.config.retry

    def get_http_config(self) -> HttpConfig:
        return self.config.http

    def get_prompts_config(self) -> PromptsConfig:
        return self.config.prompts

    def get_output_config(self) -> OutputConfig:
        return self.config.output

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key (supports dot notation)

        Args:
            key: Configuration key (e.g., "llm.model" or "llm")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self.config.model_dump()
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value
