"""Messages, meetings and notifications."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from internsync.domain.model.entity import BROADCAST_RECIPIENT, Entity
from internsync.domain.model.enums import Collection, MessageChannel, NotificationType

if TYPE_CHECKING:
    from datetime import date, datetime


@dataclass(frozen=True, kw_only=True)
class Message(Entity):
    COLLECTION: ClassVar[Collection] = Collection.MESSAGES

    sender_id: str
    content: str
    timestamp: datetime
    channel: MessageChannel = MessageChannel.DIRECT
    related_student_id: str = ""


@dataclass(frozen=True, kw_only=True)
class Meeting(Entity):
    COLLECTION: ClassVar[Collection] = Collection.MEETINGS

    title: str
    organizer_id: str
    date: date | None = None
    time: str = ""
    attendees: tuple[str, ...] = ()
    link: str | None = None


@dataclass(frozen=True, kw_only=True)
class Notification(Entity):
    """Only ``read`` ever changes after creation."""

    COLLECTION: ClassVar[Collection] = Collection.NOTIFICATIONS

    recipient_id: str
    sender_id: str
    title: str
    message: str
    timestamp: datetime
    type: NotificationType = NotificationType.INFO
    read: bool = False

    def is_visible_to(self, profile_id: str) -> bool:
        return self.recipient_id in {BROADCAST_RECIPIENT, profile_id}
