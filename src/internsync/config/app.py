"""Application-level defaults that do not affect reconciliation correctness."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import optional_env_var, optional_int_env_var

DEFAULT_HOURS_REQUIRED: Final[int] = 120
DEFAULT_AVATAR_BASE_URL: Final[str] = "https://ui-avatars.com/api/"
DEFAULT_RESET_WEBHOOK_URL: Final[str] = "https://automate.deepshiftai.com/webhook/password-rest"


@dataclass(frozen=True, slots=True)
class AppConfig:
    hours_required: int = DEFAULT_HOURS_REQUIRED
    avatar_base_url: str = DEFAULT_AVATAR_BASE_URL
    reset_webhook_url: str = DEFAULT_RESET_WEBHOOK_URL


def get_app_config() -> AppConfig:
    return AppConfig(
        hours_required=optional_int_env_var("INTERNSYNC_DEFAULT_HOURS", DEFAULT_HOURS_REQUIRED),
        avatar_base_url=optional_env_var("INTERNSYNC_AVATAR_BASE_URL", DEFAULT_AVATAR_BASE_URL),
        reset_webhook_url=optional_env_var(
            "INTERNSYNC_RESET_WEBHOOK_URL", DEFAULT_RESET_WEBHOOK_URL
        ),
    )
