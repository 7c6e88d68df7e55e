"""Tests for runtime settings and feature flags."""

import pytest

from src.config.settings import (
    DEFAULT_BASE_URL,
    ConfigurationError,
    get_all_flags,
    is_enabled,
    load_settings,
    set_flag,
)


def test_defaults():
    settings = load_settings({})

    assert settings.api_key is None
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.timeout_seconds == 300
    assert settings.download_timeout_seconds == 30
    assert settings.progress_interval_seconds == 25
    assert settings.log_level == "INFO"


def test_values_from_environment():
    settings = load_settings({
        "GEMINI_API_KEY": "secret",
        "GEMINI_TIMEOUT_SECONDS": "60",
        "PROGRESS_INTERVAL_SECONDS": "5",
        "LOG_LEVEL": "debug",
    })

    assert settings.require_api_key() == "secret"
    assert settings.timeout_seconds == 60
    assert settings.progress_interval_seconds == 5
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("environ", [
    {"GEMINI_TIMEOUT_SECONDS": "soon"},
    {"PROGRESS_INTERVAL_SECONDS": "0"},
    {"LOG_LEVEL": "LOUD"},
])
def test_invalid_values_raise_configuration_error(environ):
    with pytest.raises(ConfigurationError):
        load_settings(environ)


def test_blank_api_key_is_missing():
    settings = load_settings({"GEMINI_API_KEY": "   "})

    with pytest.raises(ConfigurationError):
        settings.require_api_key()


def test_feature_flags():
    original = is_enabled("demo_mode")
    try:
        set_flag("demo_mode", True)
        assert is_enabled("demo_mode")
        assert get_all_flags()["demo_mode"] is True
    finally:
        set_flag("demo_mode", original)

    with pytest.raises(KeyError):
        is_enabled("no_such_flag")
    with pytest.raises(KeyError):
        set_flag("no_such_flag", True)
