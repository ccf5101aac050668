"""Public interface for the Supabase adapter."""

from __future__ import annotations

from .client import NO_ROWS_CODE, UNIQUE_VIOLATION_CODE, SupabaseGateway, SupabaseSignUp
from .schema import AuthErrorPayload, AuthSessionPayload, AuthUserPayload, PostgrestErrorPayload

__all__ = [
    "NO_ROWS_CODE",
    "UNIQUE_VIOLATION_CODE",
    "AuthErrorPayload",
    "AuthSessionPayload",
    "AuthUserPayload",
    "PostgrestErrorPayload",
    "SupabaseGateway",
    "SupabaseSignUp",
]
