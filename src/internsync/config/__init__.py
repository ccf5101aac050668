"""Application configuration helpers."""

from __future__ import annotations

from .app import (
    DEFAULT_AVATAR_BASE_URL,
    DEFAULT_HOURS_REQUIRED,
    DEFAULT_RESET_WEBHOOK_URL,
    AppConfig,
    get_app_config,
)
from .env import optional_env_var, optional_int_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .supabase import SupabaseConfig, get_supabase_config

__all__ = [
    "DEFAULT_AVATAR_BASE_URL",
    "DEFAULT_HOURS_REQUIRED",
    "DEFAULT_RESET_WEBHOOK_URL",
    "AppConfig",
    "ConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SupabaseConfig",
    "configure_logging",
    "get_app_config",
    "get_supabase_config",
    "optional_env_var",
    "optional_int_env_var",
    "require_env_var",
    "require_env_vars",
]
