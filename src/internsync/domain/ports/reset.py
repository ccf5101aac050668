"""Port for delivering password-reset codes."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ResetCodeSender(Protocol):
    """Deliver a reset code to the owner of ``email``.

    Raises ``GatewayError`` when delivery fails.
    """

    async def send_reset_code(self, *, email: str, name: str, code: str) -> None: ...
