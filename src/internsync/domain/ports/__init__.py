"""Domain port definitions for adapters."""

from __future__ import annotations

from .errors import AuthError, DbError, DbErrorKind, GatewayError, GatewayNetworkError
from .gateway import (
    AuthGateway,
    DataGateway,
    Filters,
    RawRecord,
    RemoteGateway,
    SessionChangeCallback,
    SessionEvent,
    SignUpResult,
    Unsubscribe,
)
from .reset import ResetCodeSender

__all__ = [
    "AuthError",
    "AuthGateway",
    "DataGateway",
    "DbError",
    "DbErrorKind",
    "Filters",
    "GatewayError",
    "GatewayNetworkError",
    "RawRecord",
    "RemoteGateway",
    "ResetCodeSender",
    "SessionChangeCallback",
    "SessionEvent",
    "SignUpResult",
    "Unsubscribe",
]
