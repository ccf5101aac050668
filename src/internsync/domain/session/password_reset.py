"""Password-reset code flow.

The code lives only in memory on this flow object. Delivery goes through a webhook
and is best effort: a failed delivery is logged and the flow still advances to code
entry, so the user sees the same confirmation either way. Completing the flow does
not change the stored password.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from internsync.domain.mapping import map_profile
from internsync.domain.model import Collection
from internsync.domain.ports import GatewayError

if TYPE_CHECKING:
    from collections.abc import Callable

    from internsync.domain.ports import DataGateway, ResetCodeSender


log = getLogger(__name__)

EMAIL_NOT_FOUND_MESSAGE = "Email address not found."
INVALID_CODE_MESSAGE = "Invalid reset code."
RESET_DONE_MESSAGE = "Password reset successful! Please login with your new password."


def generate_reset_code() -> str:
    """Four-digit code in ``1000..9999``."""

    return str(1000 + secrets.randbelow(9000))


class ResetStage(StrEnum):
    REQUEST = "request"
    ENTER_CODE = "enter_code"
    DONE = "done"


@dataclass(slots=True, frozen=True, kw_only=True)
class ResetResult:
    ok: bool
    message: str
    stage: ResetStage


class PasswordResetFlow:
    def __init__(
        self,
        gateway: DataGateway,
        sender: ResetCodeSender,
        *,
        code_factory: Callable[[], str] = generate_reset_code,
    ) -> None:
        self._gateway = gateway
        self._sender = sender
        self._code_factory = code_factory
        self._email: str | None = None
        self._code: str | None = None
        self.stage = ResetStage.REQUEST

    @property
    def email(self) -> str | None:
        return self._email

    async def request_code(self, email: str) -> ResetResult:
        try:
            record = await self._gateway.find(Collection.USERS, {"email": email})
        except GatewayError as exc:
            log.error("Could not look up %s for a password reset: %s", email, exc)
            return ResetResult(ok=False, message=str(exc), stage=self.stage)
        if record is None:
            return ResetResult(ok=False, message=EMAIL_NOT_FOUND_MESSAGE, stage=self.stage)

        profile = map_profile(record)
        self._email = email
        self._code = self._code_factory()
        try:
            await self._sender.send_reset_code(email=email, name=profile.name, code=self._code)
        except GatewayError as exc:
            log.warning("Error sending reset code to webhook (continuing flow): %s", exc)
        self.stage = ResetStage.ENTER_CODE
        return ResetResult(
            ok=True,
            message=f"The reset code has been sent to {email}",
            stage=self.stage,
        )

    def verify(self, code: str) -> bool:
        return self._code is not None and secrets.compare_digest(code.strip(), self._code)

    def complete(self, code: str, new_password: str) -> ResetResult:  # noqa: ARG002
        if self.stage is not ResetStage.ENTER_CODE or not self.verify(code):
            return ResetResult(ok=False, message=INVALID_CODE_MESSAGE, stage=self.stage)
        self._code = None
        self.stage = ResetStage.DONE
        return ResetResult(ok=True, message=RESET_DONE_MESSAGE, stage=self.stage)
