from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from internsync.app import request_password_reset, run_login
from internsync.config import AppConfig
from internsync.domain.model import Collection
from tests.support.records import notification_row, profile_row, task_row

if TYPE_CHECKING:
    from tests.support.gateway import InMemoryGateway


class _Sender:
    def __init__(self) -> None:
        self.codes: list[str] = []

    async def send_reset_code(self, *, email: str, name: str, code: str) -> None:  # noqa: ARG002
        self.codes.append(code)


def test_run_login_summarises_the_mirror(gateway: InMemoryGateway) -> None:
    gateway.register_account("ada@example.com", "pw", auth_id="u1")
    gateway.seed(Collection.USERS, profile_row("u1", "ada@example.com", name="Ada"))
    gateway.seed(Collection.TASKS, task_row("t1", "u1"), task_row("t2", "u2"))
    gateway.seed(
        Collection.NOTIFICATIONS,
        notification_row("n1", "u1"),
        notification_row("n2", "ALL"),
        notification_row("n3", "u2"),
    )

    summary = asyncio.run(
        run_login("ada@example.com", "pw", gateway=gateway, app_config=AppConfig())
    )

    assert summary.authenticated
    assert summary.profile is not None
    assert summary.profile.name == "Ada"
    assert summary.counts[Collection.TASKS] == 2
    assert summary.counts[Collection.USERS] == 1
    assert summary.unread_notifications == 2
    assert gateway.session is None
    assert gateway.count_calls("sign_out") == 1


def test_run_login_reports_failure(gateway: InMemoryGateway) -> None:
    gateway.register_account("ada@example.com", "pw")

    summary = asyncio.run(
        run_login("ada@example.com", "nope", gateway=gateway, app_config=AppConfig())
    )

    assert not summary.authenticated
    assert summary.message == "Invalid login credentials"
    assert summary.counts == {}


def test_request_password_reset_uses_the_sender(gateway: InMemoryGateway) -> None:
    gateway.seed(Collection.USERS, profile_row("u1", "ada@example.com"))
    sender = _Sender()

    result = asyncio.run(request_password_reset("ada@example.com", gateway=gateway, sender=sender))

    assert result.ok
    assert len(sender.codes) == 1
    assert sender.codes[0].isdigit()
