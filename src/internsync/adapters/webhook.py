"""Deliver password-reset codes through an automation webhook."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from internsync.adapters.http_resilience import ResilienceConfig, ResilientClient
from internsync.config import AppConfig, get_app_config
from internsync.domain.ports import GatewayNetworkError, ResetCodeSender

if TYPE_CHECKING:
    from collections.abc import Callable

log = getLogger(__name__)

_DEFAULT_TIMEOUT_SECONDS = 10.0


def _default_resilience_config() -> ResilienceConfig:
    return ResilienceConfig(name="reset-webhook", timeout_seconds=_DEFAULT_TIMEOUT_SECONDS)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


async def _deliver(client: ResilientClient, url: str, *, email: str, name: str, code: str) -> None:
    try:
        response = await client.post(url, json={"email": email, "name": name, "resetCode": code})
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise GatewayNetworkError(f"reset webhook failed: {exc}") from exc
    log.info("Reset code sent to %s", email)


@dataclass(slots=True)
class WebhookResetCodeSender:
    config: AppConfig = field(default_factory=get_app_config)
    resilience: ResilienceConfig = field(default_factory=_default_resilience_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    async def send_reset_code(self, *, email: str, name: str, code: str) -> None:
        async with self.client_factory(self.resilience) as client:
            await _deliver(client, self.config.reset_webhook_url, email=email, name=name, code=code)


if TYPE_CHECKING:
    _sender_check: ResetCodeSender = WebhookResetCodeSender()
