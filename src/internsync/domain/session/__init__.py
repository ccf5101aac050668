"""Session lifecycle, identity resolution and password reset."""

from __future__ import annotations

from .contracts import (
    PENDING_APPROVAL_MESSAGE,
    PROFILE_MISSING_MESSAGE,
    REGISTERED_MESSAGE,
    REGISTERED_PENDING_MESSAGE,
    REGISTRATION_REJECTED_MESSAGE,
    Established,
    Failed,
    IdentityResolution,
    Registration,
    Rejected,
    ResolutionPath,
    ResolutionStatus,
    SessionOutcome,
    SessionState,
)
from .controller import ActiveSession, SessionController
from .identity import IdentityResolver, display_name_from_email
from .password_reset import PasswordResetFlow, ResetResult, ResetStage, generate_reset_code

__all__ = [
    "PENDING_APPROVAL_MESSAGE",
    "PROFILE_MISSING_MESSAGE",
    "REGISTERED_MESSAGE",
    "REGISTERED_PENDING_MESSAGE",
    "REGISTRATION_REJECTED_MESSAGE",
    "ActiveSession",
    "Established",
    "Failed",
    "IdentityResolution",
    "IdentityResolver",
    "PasswordResetFlow",
    "Registration",
    "Rejected",
    "ResetResult",
    "ResetStage",
    "ResolutionPath",
    "ResolutionStatus",
    "SessionController",
    "SessionOutcome",
    "SessionState",
    "display_name_from_email",
    "generate_reset_code",
]
