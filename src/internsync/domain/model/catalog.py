"""Shared catalog records: resources, skills, badges and badge grants."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from internsync.domain.model.entity import Entity
from internsync.domain.model.enums import Collection, ResourceType

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, kw_only=True)
class Resource(Entity):
    COLLECTION: ClassVar[Collection] = Collection.RESOURCES

    title: str
    uploaded_by: str
    upload_date: datetime
    type: ResourceType = ResourceType.LINK
    url: str = "#"


@dataclass(frozen=True, kw_only=True)
class Skill(Entity):
    COLLECTION: ClassVar[Collection] = Collection.SKILLS

    name: str
    category: str = "Technical"


@dataclass(frozen=True, kw_only=True)
class Badge(Entity):
    COLLECTION: ClassVar[Collection] = Collection.BADGES

    name: str
    description: str = ""
    icon: str = "Star"
    color: str = "bg-gray-100"
    points: int = 0


@dataclass(frozen=True, kw_only=True)
class UserBadge(Entity):
    """An achievement grant: at most one per (user_id, badge_id)."""

    COLLECTION: ClassVar[Collection] = Collection.USER_BADGES

    user_id: str
    badge_id: str
    earned_at: datetime
