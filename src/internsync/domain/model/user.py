"""Identity, session and profile types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Final

from internsync.domain.model.entity import Entity
from internsync.domain.model.enums import Collection, Role, UserStatus

if TYPE_CHECKING:
    from datetime import date, datetime

DEFAULT_HOURS_REQUIRED: Final[int] = 120
DEFAULT_PROFILE_NAME: Final[str] = "Unknown User"


@dataclass(frozen=True, slots=True)
class Identity:
    """An authentication-provider account."""

    auth_id: str
    email: str


@dataclass(frozen=True, slots=True)
class Session:
    identity: Identity
    access_token: str
    refresh_token: str | None = None
    expires_at: datetime | None = None


@dataclass(frozen=True, kw_only=True)
class Profile(Entity):
    """Application-level user record; ``id`` equals the identity's auth id once linked."""

    COLLECTION: ClassVar[Collection] = Collection.USERS

    name: str
    email: str
    role: Role
    status: UserStatus
    avatar: str
    total_hours_required: int = DEFAULT_HOURS_REQUIRED
    assigned_supervisor_id: str | None = None
    internship_start_date: date | None = None
    internship_end_date: date | None = None
    institution: str | None = None
    department: str | None = None
    bio: str | None = None
    phone: str | None = None
    hobbies: tuple[str, ...] = ()
    profile_skills: tuple[str, ...] = ()
    achievements: tuple[str, ...] = ()
    future_goals: tuple[str, ...] = ()
    supervisor_notes: str = ""

    @property
    def is_pending_supervisor(self) -> bool:
        return self.role is Role.SUPERVISOR and self.status is UserStatus.PENDING
