"""Port for the remote persistent store and its authentication provider."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from internsync.domain.model import Collection, Identity, Session

type RawRecord = Mapping[str, Any]
type Filters = Mapping[str, object]


class SessionEvent(StrEnum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


type SessionChangeCallback = Callable[[SessionEvent, Session | None], Awaitable[None] | None]
type Unsubscribe = Callable[[], None]


class SignUpResult(Protocol):
    @property
    def identity(self) -> Identity: ...

    @property
    def session(self) -> Session | None: ...


@runtime_checkable
class AuthGateway(Protocol):
    """Session operations of the authentication provider.

    ``on_session_change`` callbacks fire asynchronously: never from inside the call
    that caused the change. Every successful ``sign_in_with_password`` (and ``sign_up``
    that returns a session) is followed by one SIGNED_IN event, every successful
    ``sign_out`` by one SIGNED_OUT event.
    """

    async def get_session(self) -> Session | None: ...

    async def sign_in_with_password(self, email: str, password: str) -> Session: ...

    async def sign_up(self, email: str, password: str) -> SignUpResult: ...

    async def sign_out(self) -> None: ...

    def on_session_change(self, callback: SessionChangeCallback) -> Unsubscribe: ...


@runtime_checkable
class DataGateway(Protocol):
    """Collection-scoped CRUD over raw records.

    Every method raises ``DbError`` or ``GatewayNetworkError`` on failure. Returned
    records are untrusted and must go through the entity mapper.
    """

    async def find(self, collection: Collection, filters: Filters) -> RawRecord | None: ...

    async def insert(self, collection: Collection, payload: RawRecord) -> RawRecord: ...

    async def update(self, collection: Collection, id: str, patch: RawRecord) -> RawRecord: ...  # noqa: A002

    async def update_where(
        self, collection: Collection, filters: Filters, patch: RawRecord
    ) -> RawRecord: ...

    async def delete(self, collection: Collection, id: str) -> None: ...  # noqa: A002

    async def list_all(self, collection: Collection) -> list[RawRecord]: ...


@runtime_checkable
class RemoteGateway(AuthGateway, DataGateway, Protocol):
    """Everything the reconciliation engine needs from the remote side."""
