"""Result types produced by identity resolution and the session controller."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Final, Literal

from internsync.domain.model import Role

if TYPE_CHECKING:
    from internsync.domain.model import Profile


PENDING_APPROVAL_MESSAGE: Final = "Your supervisor account is pending Admin approval."
REGISTRATION_REJECTED_MESSAGE: Final = "Your account registration was rejected."
PROFILE_MISSING_MESSAGE: Final = (
    "You are authenticated but your user profile could not be loaded."
)
REGISTERED_PENDING_MESSAGE: Final = (
    "Registration successful! Your supervisor account is pending Admin approval."
)
REGISTERED_MESSAGE: Final = "Registration successful! You can now log in."


class ResolutionStatus(StrEnum):
    ESTABLISHED = "established"
    REJECTED = "rejected"
    FAILED = "failed"


class ResolutionPath(StrEnum):
    """How the profile was found for an identity."""

    DIRECT = "direct"
    LINKED = "linked"
    CREATED = "created"


@dataclass(slots=True, frozen=True, kw_only=True)
class Established:
    """The identity maps to an active profile."""

    profile: Profile
    path: ResolutionPath
    status: Literal[ResolutionStatus.ESTABLISHED] = ResolutionStatus.ESTABLISHED


@dataclass(slots=True, frozen=True, kw_only=True)
class Rejected:
    """The profile exists but the application denies entry."""

    profile: Profile
    message: str
    status: Literal[ResolutionStatus.REJECTED] = ResolutionStatus.REJECTED


@dataclass(slots=True, frozen=True, kw_only=True)
class Failed:
    """No usable profile could be found, linked or created."""

    message: str
    status: Literal[ResolutionStatus.FAILED] = ResolutionStatus.FAILED


type IdentityResolution = Established | Rejected | Failed


class SessionState(StrEnum):
    SIGNED_OUT = "signed_out"
    RESOLVING = "resolving"
    ESTABLISHED = "established"


@dataclass(slots=True, frozen=True, kw_only=True)
class SessionOutcome:
    """What a login, registration or restore attempt produced for the UI."""

    authenticated: bool
    profile: Profile | None = None
    message: str | None = None


@dataclass(slots=True, frozen=True, kw_only=True)
class Registration:
    """Profile details captured by the registration form."""

    email: str
    name: str
    role: Role = Role.STUDENT
    phone: str | None = None
    institution: str | None = None
    department: str | None = None
    bio: str | None = None
    hobbies: tuple[str, ...] = field(default_factory=tuple)
    profile_skills: tuple[str, ...] = field(default_factory=tuple)
