"""Failure types raised across the Remote Gateway boundary."""

from __future__ import annotations

from enum import StrEnum


class GatewayError(RuntimeError):
    """Base class for every failure reported by a Remote Gateway."""


class GatewayNetworkError(GatewayError):
    """Transport-level failure (timeout, refused connection, 5xx after retries)."""


class AuthError(GatewayError):
    """The authentication provider rejected the request (bad credentials, etc.)."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class DbErrorKind(StrEnum):
    UNIQUE_VIOLATION = "unique_violation"
    NOT_FOUND = "not_found"
    OTHER = "other"


class DbError(GatewayError):
    """The persistent store rejected a query or write."""

    def __init__(
        self,
        message: str,
        *,
        kind: DbErrorKind = DbErrorKind.OTHER,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.code = code

    @property
    def is_unique_violation(self) -> bool:
        return self.kind is DbErrorKind.UNIQUE_VIOLATION
