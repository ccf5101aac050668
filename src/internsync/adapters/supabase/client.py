"""Remote gateway over a Supabase project (GoTrue auth + PostgREST tables)."""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from logging import getLogger
from typing import TYPE_CHECKING, Any, cast

import httpx
from pydantic import ValidationError

from internsync.adapters.http_resilience import ResilientClient
from internsync.config import SupabaseConfig, get_supabase_config
from internsync.domain.ports import (
    AuthError,
    DbError,
    DbErrorKind,
    GatewayNetworkError,
    RemoteGateway,
    SessionEvent,
)

from .schema import AuthErrorPayload, AuthSessionPayload, AuthUserPayload, PostgrestErrorPayload

if TYPE_CHECKING:
    from collections.abc import Callable

    from internsync.domain.model import Collection, Identity, Session
    from internsync.domain.ports import (
        Filters,
        RawRecord,
        SessionChangeCallback,
        Unsubscribe,
    )

log = getLogger(__name__)

UNIQUE_VIOLATION_CODE = "23505"
NO_ROWS_CODE = "PGRST116"
# Refresh a little before the provider would reject the token.
_EXPIRY_MARGIN = timedelta(seconds=30)
_TRANSIENT_STATUSES = frozenset({502, 503, 504})


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _filter_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _filter_params(filters: Filters) -> dict[str, str]:
    return {column: f"eq.{_filter_value(value)}" for column, value in filters.items()}


@dataclass(frozen=True, slots=True)
class SupabaseSignUp:
    identity: Identity
    session: Session | None


class SupabaseGateway:
    """``RemoteGateway`` backed by the Supabase REST endpoints.

    The current session is held in memory. Session-change callbacks are scheduled on
    the running loop after the call that changed the session has updated its state.
    """

    def __init__(
        self,
        config: SupabaseConfig | None = None,
        *,
        client: ResilientClient | None = None,
        session: Session | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.config = config or get_supabase_config()
        self._client = client or ResilientClient(self.config.resilience)
        self._session = session
        self._clock = clock
        self._callbacks: list[SessionChangeCallback] = []
        self._pending: set[asyncio.Future[Any]] = set()

    async def __aenter__(self) -> SupabaseGateway:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # -- auth -------------------------------------------------------------------------

    async def get_session(self) -> Session | None:
        session = self._session
        if session is None or session.expires_at is None:
            return session
        if session.expires_at - _EXPIRY_MARGIN > self._clock():
            return session
        if session.refresh_token is None:
            log.info("Stored session expired and cannot be refreshed")
            self._session = None
            return None
        try:
            refreshed = await self._token({"refresh_token": session.refresh_token}, "refresh_token")
        except AuthError as exc:
            log.warning("Session refresh rejected: %s", exc)
            self._session = None
            return None
        self._session = refreshed
        return refreshed

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        session = await self._token({"email": email, "password": password}, "password")
        self._session = session
        self._emit(SessionEvent.SIGNED_IN, session)
        return session

    async def sign_up(self, email: str, password: str) -> SupabaseSignUp:
        payload = await self._auth_request(
            "POST", "/auth/v1/signup", json={"email": email, "password": password}
        )
        try:
            if "access_token" in payload:
                session = AuthSessionPayload.model_validate(payload).to_session(now=self._clock())
                self._session = session
                self._emit(SessionEvent.SIGNED_IN, session)
                return SupabaseSignUp(identity=session.identity, session=session)
            user_payload = payload.get("user", payload)
            user = AuthUserPayload.model_validate(user_payload)
        except ValidationError as exc:
            raise AuthError(f"Unexpected sign-up response: {exc}") from exc
        return SupabaseSignUp(identity=user.to_identity(), session=None)

    async def sign_out(self) -> None:
        """Forget the local session and revoke it remotely.

        Revocation failures are logged; the local session is gone either way.
        """

        session, self._session = self._session, None
        if session is not None:
            try:
                await self._auth_request(
                    "POST",
                    "/auth/v1/logout",
                    headers={"Authorization": f"Bearer {session.access_token}"},
                )
            except (AuthError, GatewayNetworkError) as exc:
                log.warning("Remote sign-out failed: %s", exc)
        self._emit(SessionEvent.SIGNED_OUT, None)

    def on_session_change(self, callback: SessionChangeCallback) -> Unsubscribe:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    # -- data -------------------------------------------------------------------------

    async def find(self, collection: Collection, filters: Filters) -> RawRecord | None:
        params = {"select": "*", **_filter_params(filters), "limit": "1"}
        rows = await self._rest("GET", collection, params=params)
        return rows[0] if rows else None

    async def insert(self, collection: Collection, payload: RawRecord) -> RawRecord:
        rows = await self._rest("POST", collection, params={"select": "*"}, json=dict(payload))
        return self._single(rows, f"insert into {collection} returned no row")

    async def update(self, collection: Collection, id: str, patch: RawRecord) -> RawRecord:  # noqa: A002
        return await self.update_where(collection, {"id": id}, patch)

    async def update_where(
        self, collection: Collection, filters: Filters, patch: RawRecord
    ) -> RawRecord:
        params = {"select": "*", **_filter_params(filters)}
        rows = await self._rest("PATCH", collection, params=params, json=dict(patch))
        return self._single(rows, f"no {collection} row matches {dict(filters)}")

    async def delete(self, collection: Collection, id: str) -> None:  # noqa: A002
        await self._rest("DELETE", collection, params=_filter_params({"id": id}))

    async def list_all(self, collection: Collection) -> list[RawRecord]:
        return await self._rest("GET", collection, params={"select": "*"})

    # -- internals --------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        token = self._session.access_token if self._session else self.config.anon_key
        return {"apikey": self.config.anon_key, "Authorization": f"Bearer {token}"}

    async def _token(self, body: dict[str, str], grant_type: str) -> Session:
        payload = await self._auth_request(
            "POST", "/auth/v1/token", params={"grant_type": grant_type}, json=body
        )
        try:
            return AuthSessionPayload.model_validate(payload).to_session(now=self._clock())
        except ValidationError as exc:
            raise AuthError(f"Unexpected token response: {exc}") from exc

    async def _auth_request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: object = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        request_headers = {"apikey": self.config.anon_key, **(headers or {})}
        try:
            response = await self._client.request(
                method, path, params=params, json=json, headers=request_headers
            )
        except httpx.TransportError as exc:
            raise GatewayNetworkError(str(exc)) from exc

        if response.status_code in _TRANSIENT_STATUSES:
            raise GatewayNetworkError(f"auth service unavailable ({response.status_code})")
        if response.is_error:
            error = AuthErrorPayload.model_validate(_json_or_empty(response))
            log.debug("Auth error %s: %s", response.status_code, error.text)
            raise AuthError(error.text, status=response.status_code)
        body = _json_or_empty(response)
        return body if isinstance(body, dict) else {}

    async def _rest(
        self,
        method: str,
        collection: Collection,
        *,
        params: dict[str, str],
        json: object = None,
    ) -> list[RawRecord]:
        headers = self._headers()
        if method != "GET":
            headers["Prefer"] = "return=representation"
        try:
            response = await self._client.request(
                method, f"/rest/v1/{collection}", params=params, json=json, headers=headers
            )
        except httpx.TransportError as exc:
            raise GatewayNetworkError(str(exc)) from exc

        if response.status_code in _TRANSIENT_STATUSES:
            raise GatewayNetworkError(f"{collection} unavailable ({response.status_code})")
        if response.is_error:
            raise _db_error(response)
        body = _json_or_empty(response)
        if isinstance(body, list):
            rows = cast("list[object]", body)
            return [cast("RawRecord", row) for row in rows if isinstance(row, dict)]
        if isinstance(body, dict):
            return [cast("RawRecord", body)]
        return []

    @staticmethod
    def _single(rows: list[RawRecord], missing: str) -> RawRecord:
        if not rows:
            raise DbError(missing, kind=DbErrorKind.NOT_FOUND, code=NO_ROWS_CODE)
        return rows[0]

    def _emit(self, event: SessionEvent, session: Session | None) -> None:
        loop = asyncio.get_running_loop()
        for callback in list(self._callbacks):
            loop.call_soon(self._dispatch, callback, event, session)

    def _dispatch(
        self, callback: SessionChangeCallback, event: SessionEvent, session: Session | None
    ) -> None:
        result = callback(event, session)
        if inspect.isawaitable(result):
            future = asyncio.ensure_future(result)
            self._pending.add(future)
            future.add_done_callback(self._pending.discard)


def _json_or_empty(response: httpx.Response) -> object:
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError:
        return {}


def _db_error(response: httpx.Response) -> DbError:
    body = _json_or_empty(response)
    error = PostgrestErrorPayload.model_validate(body if isinstance(body, dict) else {})
    if error.code == UNIQUE_VIOLATION_CODE:
        kind = DbErrorKind.UNIQUE_VIOLATION
    elif error.code == NO_ROWS_CODE or response.status_code == httpx.codes.NOT_FOUND:
        kind = DbErrorKind.NOT_FOUND
    else:
        kind = DbErrorKind.OTHER
    log.debug("PostgREST error %s (%s): %s", response.status_code, error.code, error.message)
    return DbError(error.message, kind=kind, code=error.code)


if TYPE_CHECKING:
    _gateway_check: RemoteGateway = SupabaseGateway()
