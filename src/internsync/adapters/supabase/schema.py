"""Pydantic models describing the auth (GoTrue) and PostgREST payloads."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, ConfigDict, field_validator

from internsync.domain.model import Identity, Session


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class SupabaseBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class AuthUserPayload(SupabaseBaseModel):
    id: str
    email: str | None = None

    _normalize_email = field_validator("email", mode="before")(_blank_to_none)

    def to_identity(self) -> Identity:
        return Identity(auth_id=self.id, email=self.email or "")


class AuthSessionPayload(SupabaseBaseModel):
    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    expires_in: int | None = None
    expires_at: int | None = None
    user: AuthUserPayload

    def to_session(self, *, now: datetime | None = None) -> Session:
        expires_at: datetime | None = None
        if self.expires_at is not None:
            expires_at = datetime.fromtimestamp(self.expires_at, tz=UTC)
        elif self.expires_in is not None:
            expires_at = (now or datetime.now(UTC)) + timedelta(seconds=self.expires_in)
        return Session(
            identity=self.user.to_identity(),
            access_token=self.access_token,
            refresh_token=self.refresh_token,
            expires_at=expires_at,
        )


class AuthErrorPayload(SupabaseBaseModel):
    """GoTrue reports errors in several shapes depending on the endpoint and version."""

    error: str | None = None
    error_description: str | None = None
    error_code: str | None = None
    msg: str | None = None
    message: str | None = None

    @property
    def text(self) -> str:
        return (
            self.error_description
            or self.msg
            or self.message
            or self.error
            or self.error_code
            or "Authentication failed"
        )


class PostgrestErrorPayload(SupabaseBaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    code: str | None = None
    message: str = "Request failed"
    details: str | None = None
    hint: str | None = None

    _normalize_code = field_validator("code", mode="before")(_blank_to_none)
