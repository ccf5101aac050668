from __future__ import annotations

import logging
import os

import pytest

from internsync.config import (
    DEFAULT_AVATAR_BASE_URL,
    DEFAULT_HOURS_REQUIRED,
    ConfigurationError,
    MissingConfigurationError,
    ResilienceConfig,
    configure_logging,
    get_app_config,
    get_supabase_config,
    optional_int_env_var,
    require_env_var,
    require_env_vars,
)


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_raises_when_any_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_VAR", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_VAR"])

    assert "MISSING_VAR" in str(exc.value)
    assert exc.value.names == ("MISSING_VAR",)


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_require_env_vars_restores_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEMP_VAR", "123")

    assert os.getenv("TEMP_VAR") == "123"
    result = require_env_var("TEMP_VAR")
    assert result == "123"


def test_optional_int_env_var(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("HOURS", raising=False)
    assert optional_int_env_var("HOURS", 7) == 7

    monkeypatch.setenv("HOURS", "480")
    assert optional_int_env_var("HOURS", 7) == 480

    monkeypatch.setenv("HOURS", "lots")
    with pytest.raises(ConfigurationError, match="HOURS must be an integer"):
        optional_int_env_var("HOURS", 7)

    monkeypatch.setenv("HOURS", "-1")
    with pytest.raises(ConfigurationError, match="non-negative"):
        optional_int_env_var("HOURS", 7)


def test_supabase_config_strips_trailing_slash(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "https://proj.supabase.co/")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")

    config = get_supabase_config()

    assert config.url == "https://proj.supabase.co"
    assert config.auth_url == "https://proj.supabase.co/auth/v1"
    assert config.rest_url == "https://proj.supabase.co/rest/v1"
    assert config.resilience.base_url == config.url
    assert config.resilience.ratelimit is not None


def test_supabase_config_accepts_custom_resilience(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "https://proj.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    resilience = ResilienceConfig(name="custom", retry=None)

    assert get_supabase_config(resilience=resilience).resilience is resilience


def test_supabase_config_requires_both_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "https://proj.supabase.co")
    monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)

    with pytest.raises(MissingConfigurationError, match="SUPABASE_ANON_KEY"):
        get_supabase_config()


def test_app_config_defaults_and_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "INTERNSYNC_DEFAULT_HOURS",
        "INTERNSYNC_AVATAR_BASE_URL",
        "INTERNSYNC_RESET_WEBHOOK_URL",
    ):
        monkeypatch.delenv(name, raising=False)

    defaults = get_app_config()
    assert defaults.hours_required == DEFAULT_HOURS_REQUIRED
    assert defaults.avatar_base_url == DEFAULT_AVATAR_BASE_URL

    monkeypatch.setenv("INTERNSYNC_DEFAULT_HOURS", "300")
    monkeypatch.setenv("INTERNSYNC_RESET_WEBHOOK_URL", "https://hooks.test/reset")

    config = get_app_config()
    assert config.hours_required == 300
    assert config.reset_webhook_url == "https://hooks.test/reset"


def test_configure_logging_quiets_transport_loggers(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("httpx", "httpcore"):
        monkeypatch.setattr(logging.getLogger(name), "level", logging.NOTSET)

    configure_logging()

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING
