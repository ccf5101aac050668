"""Pydantic models describing the remote records.

Every field has a default so an empty mapping always validates. Nulls are stripped
before validation, which makes an explicit ``null`` behave exactly like an absent key.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping
from datetime import UTC
from typing import Annotated, Any, cast

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from internsync.domain.model.enums import (
    AttendanceExceptionType,
    EvaluationType,
    FeedbackType,
    GoalStatus,
    LeaveStatus,
    LeaveType,
    LogStatus,
    MessageChannel,
    NotificationType,
    ReportType,
    ResourceType,
    Role,
    TaskPriority,
    TaskStatus,
    UserStatus,
)
from internsync.domain.model.user import DEFAULT_HOURS_REQUIRED, DEFAULT_PROFILE_NAME


def _utcnow() -> dt.datetime:
    return dt.datetime.now(UTC)


def _today() -> dt.date:
    return _utcnow().date()


def _ensure_utc(value: dt.datetime) -> dt.datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


# Naive timestamps are read as UTC so mirror rows always sort against each other.
UtcDatetime = Annotated[dt.datetime, AfterValidator(_ensure_utc)]


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _calendar_date(value: object) -> object:
    """Accept ``YYYY-MM-DD`` as well as full timestamps for date-only columns."""

    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        if len(stripped) > 10 and stripped[10] in "T ":
            return stripped[:10]
        return stripped
    return value


class RecordModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore", populate_by_name=True, frozen=True, coerce_numbers_to_str=True
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, value: object) -> object:
        if isinstance(value, Mapping):
            mapping_value = cast("Mapping[str, object]", value)
            return {key: item for key, item in mapping_value.items() if item is not None}
        return value


class ProfileRecord(RecordModel):
    id: str = ""
    name: str = DEFAULT_PROFILE_NAME
    email: str = ""
    role: Role = Role.STUDENT
    status: UserStatus = UserStatus.ACTIVE
    avatar: str | None = None
    total_hours_required: int = DEFAULT_HOURS_REQUIRED
    assigned_supervisor_id: str | None = None
    internship_start_date: dt.date | None = None
    internship_end_date: dt.date | None = None
    institution: str | None = None
    department: str | None = None
    bio: str | None = None
    phone: str | None = None
    hobbies: tuple[str, ...] = ()
    profile_skills: tuple[str, ...] = ()
    achievements: tuple[str, ...] = ()
    future_goals: tuple[str, ...] = ()
    supervisor_notes: str = ""

    _normalize_avatar = field_validator("avatar", mode="before")(_blank_to_none)
    _normalize_dates = field_validator(
        "internship_start_date", "internship_end_date", mode="before"
    )(_calendar_date)


class LogRecord(RecordModel):
    id: str = ""
    student_id: str = ""
    date: dt.date = Field(default_factory=_today)
    hours_worked: float = 0.0
    activity_description: str = ""
    challenges: str | None = None
    status: LogStatus = LogStatus.PENDING
    supervisor_comment: str | None = None

    _normalize_date = field_validator("date", mode="before")(_calendar_date)


class DeliverableRecord(RecordModel):
    description: str = ""
    url: str | None = None
    submitted_at: UtcDatetime = Field(default_factory=_utcnow, alias="submittedAt")


class FeedbackRecord(RecordModel):
    type: FeedbackType = FeedbackType.CONSTRUCTIVE
    comment: str = ""
    given_at: UtcDatetime = Field(default_factory=_utcnow, alias="givenAt")


class TaskRecord(RecordModel):
    id: str = ""
    title: str = ""
    description: str = ""
    assigned_to_id: str = ""
    assigned_by_id: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: dt.date | None = None
    created_at: UtcDatetime = Field(default_factory=_utcnow)
    deliverable: DeliverableRecord | None = None
    feedback: FeedbackRecord | None = None
    linked_goal_id: str | None = None

    _normalize_due_date = field_validator("due_date", mode="before")(_calendar_date)
    _normalize_goal = field_validator("linked_goal_id", mode="before")(_blank_to_none)


class ReportRecord(RecordModel):
    id: str = ""
    student_id: str = ""
    type: ReportType = ReportType.WEEKLY
    period_start: dt.date | None = None
    period_end: dt.date | None = None
    summary: str = ""
    key_learnings: str = ""
    next_steps: str = ""
    submitted_at: UtcDatetime = Field(default_factory=_utcnow)

    _normalize_period = field_validator("period_start", "period_end", mode="before")(
        _calendar_date
    )


class GoalRecord(RecordModel):
    id: str = ""
    student_id: str = ""
    description: str = ""
    category: str = ""
    alignment: str = ""
    status: GoalStatus = GoalStatus.NOT_STARTED
    progress: int = 0


class ResourceRecord(RecordModel):
    id: str = ""
    title: str = ""
    type: ResourceType = ResourceType.LINK
    url: str = "#"
    uploaded_by: str = ""
    upload_date: UtcDatetime = Field(default_factory=_utcnow)


class ScoreRecord(RecordModel):
    category: str = ""
    score: int = 0


class EvaluationRecord(RecordModel):
    id: str = ""
    student_id: str = ""
    supervisor_id: str = ""
    type: EvaluationType = EvaluationType.MID_TERM
    date: UtcDatetime = Field(default_factory=_utcnow)
    scores: tuple[ScoreRecord, ...] = ()
    overall_feedback: str = ""


class MessageRecord(RecordModel):
    id: str = ""
    sender_id: str = ""
    content: str = ""
    timestamp: UtcDatetime = Field(default_factory=_utcnow)
    channel: MessageChannel = MessageChannel.DIRECT
    related_student_id: str = ""


class MeetingRecord(RecordModel):
    id: str = ""
    title: str = ""
    organizer_id: str = ""
    date: dt.date | None = None
    time: str = ""
    attendees: tuple[str, ...] = ()
    link: str | None = None

    _normalize_date = field_validator("date", mode="before")(_calendar_date)
    _normalize_link = field_validator("link", mode="before")(_blank_to_none)


class NotificationRecord(RecordModel):
    id: str = ""
    recipient_id: str = ""
    sender_id: str = ""
    title: str = ""
    message: str = ""
    type: NotificationType = NotificationType.INFO
    timestamp: UtcDatetime = Field(default_factory=_utcnow)
    read: bool = False


class SkillRecord(RecordModel):
    id: str = ""
    name: str = ""
    category: str = "Technical"


class RatingRecord(RecordModel):
    skill_id: str = Field(default="", alias="skillId")
    score: int = 0


class SkillAssessmentRecord(RecordModel):
    id: str = ""
    student_id: str = ""
    rater_id: str = ""
    role: Role = Role.STUDENT
    date: UtcDatetime = Field(default_factory=_utcnow)
    ratings: tuple[RatingRecord, ...] = ()


class BadgeRecord(RecordModel):
    id: str = ""
    name: str = ""
    description: str = ""
    icon: str = "Star"
    color: str = "bg-gray-100"
    points: int = 0


class UserBadgeRecord(RecordModel):
    id: str = ""
    user_id: str = ""
    badge_id: str = ""
    earned_at: UtcDatetime = Field(default_factory=_utcnow)


class LeaveRequestRecord(RecordModel):
    id: str = ""
    student_id: str = ""
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    type: LeaveType = LeaveType.SICK
    reason: str = ""
    status: LeaveStatus = LeaveStatus.PENDING

    _normalize_dates = field_validator("start_date", "end_date", mode="before")(_calendar_date)


class SiteVisitRecord(RecordModel):
    id: str = ""
    student_id: str = ""
    visitor_id: str = ""
    date: dt.date | None = None
    location: str = ""
    purpose: str = ""
    notes: str = ""

    _normalize_date = field_validator("date", mode="before")(_calendar_date)


class AttendanceExceptionRecord(RecordModel):
    id: str = ""
    student_id: str = ""
    date: dt.date | None = None
    reason: str = ""
    type: AttendanceExceptionType = AttendanceExceptionType.EXCUSED

    _normalize_date = field_validator("date", mode="before")(_calendar_date)


type RecordInput = RecordModel | Mapping[str, Any] | None
