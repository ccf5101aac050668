"""Remote store (Supabase) configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

SUPABASE_TIMEOUT_SECONDS = 15.0


@dataclass(frozen=True)
class SupabaseConfig:
    """Holds the project URL and public API key of the remote store."""

    url: str
    anon_key: str
    resilience: ResilienceConfig

    @property
    def auth_url(self) -> str:
        return f"{self.url}/auth/v1"

    @property
    def rest_url(self) -> str:
        return f"{self.url}/rest/v1"


def get_supabase_config(*, resilience: ResilienceConfig | None = None) -> SupabaseConfig:
    values = require_env_vars(("SUPABASE_URL", "SUPABASE_ANON_KEY"))
    url = values["SUPABASE_URL"].rstrip("/")
    return SupabaseConfig(
        url=url,
        anon_key=values["SUPABASE_ANON_KEY"],
        resilience=resilience
        or ResilienceConfig(
            name="supabase",
            base_url=url,
            timeout_seconds=SUPABASE_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=20, per_seconds=1.0),
        ),
    )
