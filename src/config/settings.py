"""
Configuration and Feature Flags for the Gemini media server.

Runtime settings and feature flags are read from environment variables so
deployments can be tuned without code changes.

Usage:
    from src.config.settings import load_settings, is_enabled

    settings = load_settings()
    if is_enabled('demo_mode'):
        backend = MockBackend()
    else:
        backend = GeminiBackend(settings)

Environment Variables:
    GEMINI_API_KEY                  - API key for the Gemini REST API
    GEMINI_BASE_URL                 - Override the API base URL
    GEMINI_TIMEOUT_SECONDS          - Total timeout for backend calls (300)
    IMAGE_DOWNLOAD_TIMEOUT_SECONDS  - Timeout for source image downloads (30)
    PROGRESS_INTERVAL_SECONDS       - Keepalive progress tick interval (25)
    LOG_LEVEL                       - Logging level name (INFO)
    GEMINI_DEMO_MODE=true/false     - Serve placeholder media, no API calls
    STRICT_REGISTRATION=true/false  - Reject duplicate operation names
"""

import os
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator


DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class ConfigurationError(Exception):
    """Raised when the environment does not describe a usable configuration."""
    pass


class Settings(BaseModel):
    """Read-only runtime settings consumed by the server and backend."""

    api_key: Optional[str] = Field(default=None, description="Gemini API key")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="Gemini REST base URL")
    timeout_seconds: float = Field(default=300.0, gt=0, description="Backend call timeout")
    download_timeout_seconds: float = Field(default=30.0, gt=0, description="Image download timeout")
    progress_interval_seconds: float = Field(default=25.0, gt=0, description="Progress tick interval")
    log_level: str = Field(default="INFO", description="Logging level name")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("api_key")
    @classmethod
    def _blank_key_is_missing(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    def require_api_key(self) -> str:
        """
        Return the API key or fail loudly.

        Raises:
            ConfigurationError: If GEMINI_API_KEY is not set
        """
        if not self.api_key:
            raise ConfigurationError(
                "GEMINI_API_KEY is required (set GEMINI_DEMO_MODE=true to run without it)"
            )
        return self.api_key


def load_settings(environ: Optional[Dict[str, str]] = None) -> Settings:
    """
    Build settings from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Validated Settings instance

    Raises:
        ConfigurationError: If a variable holds an invalid value
    """
    env = os.environ if environ is None else environ

    raw = {
        "api_key": env.get("GEMINI_API_KEY"),
        "base_url": env.get("GEMINI_BASE_URL", DEFAULT_BASE_URL),
        "timeout_seconds": env.get("GEMINI_TIMEOUT_SECONDS", "300"),
        "download_timeout_seconds": env.get("IMAGE_DOWNLOAD_TIMEOUT_SECONDS", "30"),
        "progress_interval_seconds": env.get("PROGRESS_INTERVAL_SECONDS", "25"),
        "log_level": env.get("LOG_LEVEL", "INFO"),
    }

    try:
        return Settings(**raw)
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


# Feature flags with environment variable overrides
FEATURE_FLAGS: Dict[str, bool] = {
    # Placeholder media instead of Gemini API calls
    'demo_mode': os.getenv('GEMINI_DEMO_MODE', 'false').lower() == 'true',

    # Duplicate operation names raise instead of last-writer-wins
    'strict_registration': os.getenv('STRICT_REGISTRATION', 'false').lower() == 'true',
}


def is_enabled(flag: str) -> bool:
    """
    Check if a feature flag is enabled.

    Args:
        flag: Feature flag name (e.g., 'demo_mode')

    Returns:
        True if flag is enabled, False otherwise

    Raises:
        KeyError: If flag name is not recognized
    """
    if flag not in FEATURE_FLAGS:
        available = ', '.join(FEATURE_FLAGS.keys())
        raise KeyError(
            f"Unknown feature flag: '{flag}'. "
            f"Available flags: {available}"
        )

    return FEATURE_FLAGS[flag]


def get_all_flags() -> Dict[str, bool]:
    """Get all feature flags and their current state."""
    return FEATURE_FLAGS.copy()


def set_flag(flag: str, enabled: bool) -> None:
    """
    Programmatically set a feature flag (for testing only).

    Warning:
        This is for testing only. In production, use environment variables.
    """
    if flag not in FEATURE_FLAGS:
        available = ', '.join(FEATURE_FLAGS.keys())
        raise KeyError(
            f"Unknown feature flag: '{flag}'. "
            f"Available flags: {available}"
        )

    FEATURE_FLAGS[flag] = enabled
