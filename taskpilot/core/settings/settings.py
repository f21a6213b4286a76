"""Settings and configuration management.

Configuration is read from environment variables (and an optional ``.env``
file), optionally overlaid with values from a YAML or JSON file. Settings are
loaded explicitly by the application and handed to the factory; nothing is
created implicitly on first access.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import AliasChoices, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from taskpilot.agent.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class LLMSettings(BaseSettings):
    """LLM provider settings."""

    api_key: str = Field(default="", validation_alias=AliasChoices("OPENAI_API_KEY", "api_key"))
    model: str = Field(default="gpt-4-turbo-preview", validation_alias=AliasChoices("OPENAI_MODEL", "model"))
    base_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("OPENAI_BASE_URL", "base_url"))
    max_tokens: int = Field(default=4096, validation_alias=AliasChoices("LLM_MAX_TOKENS", "max_tokens"))
    temperature: float = Field(default=0.7, validation_alias=AliasChoices("LLM_TEMPERATURE", "temperature"))

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator('temperature')
    @classmethod
    def validate_temperature(cls, v):
        """Validate temperature range."""
        if not (0.0 <= v <= 2.0):
            raise ValueError("Temperature must be between 0.0 and 2.0")
        return v

    @field_validator('max_tokens')
    @classmethod
    def validate_max_tokens(cls, v):
        if v <= 0:
            raise ValueError("Value must be positive")
        return v

    @property
    def configured(self) -> bool:
        """Whether an API key is available."""
        return bool(self.api_key)


class ResilienceSettings(BaseSettings):
    """Retry and circuit breaker settings for external dependencies."""

    max_retries: int = Field(default=3, validation_alias=AliasChoices("MAX_RETRIES", "max_retries"))
    retry_delay_ms: int = Field(default=1000, validation_alias=AliasChoices("RETRY_DELAY_MS", "retry_delay_ms"))
    max_retry_delay_ms: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("MAX_RETRY_DELAY_MS", "max_retry_delay_ms")
    )
    backoff_factor: float = Field(default=2.0, validation_alias=AliasChoices("BACKOFF_FACTOR", "backoff_factor"))
    breaker_failure_threshold: int = Field(
        default=5, validation_alias=AliasChoices("BREAKER_FAILURE_THRESHOLD", "breaker_failure_threshold")
    )
    breaker_reset_timeout_ms: int = Field(
        default=60000, validation_alias=AliasChoices("BREAKER_RESET_TIMEOUT_MS", "breaker_reset_timeout_ms")
    )

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator('retry_delay_ms', 'breaker_failure_threshold', 'breaker_reset_timeout_ms')
    @classmethod
    def validate_positive_integers(cls, v):
        """Validate positive integer fields."""
        if v <= 0:
            raise ValueError("Value must be positive")
        return v

    @field_validator('max_retries')
    @classmethod
    def validate_max_retries(cls, v):
        # 0 disables retrying
        if v < 0:
            raise ValueError("Value must not be negative")
        return v

    @field_validator('backoff_factor')
    @classmethod
    def validate_backoff_factor(cls, v):
        if v < 1.0:
            raise ValueError("Backoff factor must be at least 1.0")
        return v

    @model_validator(mode="after")
    def default_max_delay(self) -> "ResilienceSettings":
        if self.max_retry_delay_ms is None:
            self.max_retry_delay_ms = self.retry_delay_ms * 10
        elif self.max_retry_delay_ms < self.retry_delay_ms:
            raise ValueError("max_retry_delay_ms must not be smaller than retry_delay_ms")
        return self

    @property
    def min_delay(self) -> float:
        """First retry delay in seconds."""
        return self.retry_delay_ms / 1000

    @property
    def max_delay(self) -> float:
        """Retry delay ceiling in seconds."""
        return (self.max_retry_delay_ms or self.retry_delay_ms * 10) / 1000

    @property
    def reset_timeout(self) -> float:
        """Circuit breaker cool-down in seconds."""
        return self.breaker_reset_timeout_ms / 1000


class TaskPilotSettings(BaseSettings):
    """Top-level settings with environment variable support."""

    environment: str = Field(default="development", validation_alias=AliasChoices("TASKPILOT_ENV", "environment"))
    log_level: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level"))

    # Feature flags
    enable_streaming: bool = Field(default=True, validation_alias=AliasChoices("ENABLE_STREAMING", "enable_streaming"))
    enable_tool_calls: bool = Field(default=True, validation_alias=AliasChoices("ENABLE_TOOL_CALLS", "enable_tool_calls"))

    # Heuristic planning fallback
    fallback_tool: str = Field(default="analyze_text", validation_alias=AliasChoices("TASKPILOT_FALLBACK_TOOL", "fallback_tool"))
    fallback_parameter: str = Field(
        default="text", validation_alias=AliasChoices("TASKPILOT_FALLBACK_PARAMETER", "fallback_parameter")
    )

    llm: LLMSettings = Field(default_factory=LLMSettings)
    resilience: ResilienceSettings = Field(default_factory=ResilienceSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {VALID_LOG_LEVELS}")
        return v.upper()

    @field_validator('fallback_tool', 'fallback_parameter')
    @classmethod
    def validate_not_blank(cls, v):
        if not v.strip():
            raise ValueError("Value must not be blank")
        return v


def _read_config_file(config_file: Path) -> Dict[str, Any]:
    """Read a YAML or JSON configuration file into a dictionary."""
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            if config_file.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Failed to read configuration file {config_file}: {e}",
            config_key=str(config_file),
            cause=e,
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration file {config_file} must contain a mapping",
            config_key=str(config_file),
        )
    return data


def load_settings(config_file: Optional[Union[str, Path]] = None) -> TaskPilotSettings:
    """Load settings from the environment, overlaid with an optional file.

    Args:
        config_file: Optional path to a YAML (``.yaml``/``.yml``) or JSON file

    Returns:
        Validated settings

    Raises:
        ConfigurationError: If the file cannot be read or values are invalid
    """
    overrides: Dict[str, Any] = {}
    if config_file is not None:
        path = Path(config_file)
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}", config_key=str(path))
        overrides = _read_config_file(path)

    try:
        # Nested sections are built through their own constructors so that
        # environment values still fill whatever the file leaves out.
        if "llm" in overrides:
            overrides["llm"] = LLMSettings(**(overrides["llm"] or {}))
        if "resilience" in overrides:
            overrides["resilience"] = ResilienceSettings(**(overrides["resilience"] or {}))
        settings = TaskPilotSettings(**overrides)
    except (ValidationError, TypeError) as e:
        raise ConfigurationError(f"Configuration validation failed: {e}", cause=e) from e

    logger.debug(f"Settings loaded (environment={settings.environment}, log_level={settings.log_level})")
    return settings
