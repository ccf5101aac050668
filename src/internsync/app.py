"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from internsync.adapters.supabase import SupabaseGateway
from internsync.adapters.webhook import WebhookResetCodeSender
from internsync.config import get_app_config, get_supabase_config
from internsync.domain.session import PasswordResetFlow, SessionController

if TYPE_CHECKING:
    from internsync.config import AppConfig
    from internsync.domain.model import Collection, Profile
    from internsync.domain.ports import RemoteGateway, ResetCodeSender
    from internsync.domain.session import ResetResult


log = getLogger(__name__)


@dataclass(slots=True, frozen=True)
class LoginSummary:
    authenticated: bool
    profile: Profile | None = None
    message: str | None = None
    counts: dict[Collection, int] = field(default_factory=dict)
    unread_notifications: int = 0


def build_gateway() -> SupabaseGateway:
    return SupabaseGateway(get_supabase_config())


def build_controller(
    gateway: RemoteGateway, app_config: AppConfig | None = None
) -> SessionController:
    config = app_config or get_app_config()
    return SessionController(
        gateway,
        hours_required=config.hours_required,
        avatar_base_url=config.avatar_base_url,
    )


async def run_login(
    email: str,
    password: str,
    *,
    gateway: RemoteGateway | None = None,
    app_config: AppConfig | None = None,
) -> LoginSummary:
    """Sign in, hydrate the mirror and report what it holds; then sign out again."""

    remote = gateway or build_gateway()
    controller = build_controller(remote, app_config)
    log.info("Signing in as %s", email)
    try:
        await controller.start()
        outcome = await controller.login(email, password)
        if not outcome.authenticated or controller.active is None:
            return LoginSummary(authenticated=False, message=outcome.message)

        active = controller.active
        summary = LoginSummary(
            authenticated=True,
            profile=active.profile,
            counts=active.store.counts(),
            unread_notifications=active.workspace.unread_count(),
        )
        await controller.logout()
        await controller.wait_idle()
        return summary
    finally:
        await controller.close()
        if isinstance(remote, SupabaseGateway) and remote is not gateway:
            await remote.aclose()


async def request_password_reset(
    email: str,
    *,
    gateway: RemoteGateway | None = None,
    sender: ResetCodeSender | None = None,
) -> ResetResult:
    remote = gateway or build_gateway()
    flow = PasswordResetFlow(remote, sender or WebhookResetCodeSender())
    try:
        return await flow.request_code(email)
    finally:
        if isinstance(remote, SupabaseGateway) and remote is not gateway:
            await remote.aclose()
