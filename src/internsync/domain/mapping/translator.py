"""Translate remote records into domain entities and domain values into payloads.

This is the only place that deals with the loose shape of remote rows. Every
``map_*`` function is total: absent, null or malformed fields fall back to the
documented defaults of the record schema and the function never raises.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping
from dataclasses import asdict, is_dataclass
from enum import Enum
from logging import getLogger
from typing import TYPE_CHECKING, Any, cast
from urllib.parse import quote

from pydantic import ValidationError

from internsync.domain.model import (
    AttendanceException,
    Badge,
    Collection,
    Evaluation,
    EvaluationScore,
    Goal,
    LeaveRequest,
    LogEntry,
    Meeting,
    Message,
    Notification,
    Profile,
    Report,
    Resource,
    SiteVisit,
    Skill,
    SkillAssessment,
    SkillRating,
    Task,
    TaskDeliverable,
    TaskFeedback,
    UserBadge,
)

from .schema import (
    AttendanceExceptionRecord,
    BadgeRecord,
    DeliverableRecord,
    EvaluationRecord,
    FeedbackRecord,
    GoalRecord,
    LeaveRequestRecord,
    LogRecord,
    MeetingRecord,
    MessageRecord,
    NotificationRecord,
    ProfileRecord,
    RecordModel,
    ReportRecord,
    ResourceRecord,
    SiteVisitRecord,
    SkillAssessmentRecord,
    SkillRecord,
    TaskRecord,
    UserBadgeRecord,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from internsync.domain.model import Entity

    from .schema import RecordInput


log = getLogger(__name__)

AVATAR_BASE_URL = "https://ui-avatars.com/api/"


def avatar_url(name: str | None, *, base_url: str = AVATAR_BASE_URL) -> str:
    """Generated initials avatar used whenever a profile carries none."""

    return f"{base_url}?name={quote(name or 'User')}&background=random"


def _validate[TRecord: RecordModel](schema: type[TRecord], raw: RecordInput) -> TRecord:
    if isinstance(raw, schema):
        return raw
    data: dict[str, Any] = (
        dict(cast("Mapping[str, Any]", raw)) if isinstance(raw, Mapping) else {}
    )
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        invalid = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
        log.debug("Replacing invalid %s fields with defaults: %s", schema.__name__, invalid)
        cleaned = {key: value for key, value in data.items() if key not in invalid}
        try:
            return schema.model_validate(cleaned)
        except ValidationError:
            log.debug("Falling back to an all-default %s", schema.__name__)
            return schema()


def map_profile(raw: RecordInput) -> Profile:
    record = _validate(ProfileRecord, raw)
    return Profile(
        id=record.id,
        name=record.name,
        email=record.email,
        role=record.role,
        status=record.status,
        avatar=record.avatar or avatar_url(record.name),
        total_hours_required=record.total_hours_required,
        assigned_supervisor_id=record.assigned_supervisor_id,
        internship_start_date=record.internship_start_date,
        internship_end_date=record.internship_end_date,
        institution=record.institution,
        department=record.department,
        bio=record.bio,
        phone=record.phone,
        hobbies=record.hobbies,
        profile_skills=record.profile_skills,
        achievements=record.achievements,
        future_goals=record.future_goals,
        supervisor_notes=record.supervisor_notes,
    )


def map_log(raw: RecordInput) -> LogEntry:
    return LogEntry(**_validate(LogRecord, raw).model_dump())


def _deliverable(record: DeliverableRecord | None) -> TaskDeliverable | None:
    if record is None:
        return None
    return TaskDeliverable(
        description=record.description, url=record.url, submitted_at=record.submitted_at
    )


def _feedback(record: FeedbackRecord | None) -> TaskFeedback | None:
    if record is None:
        return None
    return TaskFeedback(type=record.type, comment=record.comment, given_at=record.given_at)


def map_task(raw: RecordInput) -> Task:
    record = _validate(TaskRecord, raw)
    return Task(
        id=record.id,
        title=record.title,
        description=record.description,
        assigned_to_id=record.assigned_to_id,
        assigned_by_id=record.assigned_by_id,
        created_at=record.created_at,
        status=record.status,
        priority=record.priority,
        due_date=record.due_date,
        deliverable=_deliverable(record.deliverable),
        feedback=_feedback(record.feedback),
        linked_goal_id=record.linked_goal_id,
    )


def map_report(raw: RecordInput) -> Report:
    return Report(**_validate(ReportRecord, raw).model_dump())


def map_goal(raw: RecordInput) -> Goal:
    return Goal(**_validate(GoalRecord, raw).model_dump())


def map_resource(raw: RecordInput) -> Resource:
    return Resource(**_validate(ResourceRecord, raw).model_dump())


def map_evaluation(raw: RecordInput) -> Evaluation:
    record = _validate(EvaluationRecord, raw)
    return Evaluation(
        id=record.id,
        student_id=record.student_id,
        supervisor_id=record.supervisor_id,
        date=record.date,
        type=record.type,
        scores=tuple(
            EvaluationScore(category=score.category, score=score.score) for score in record.scores
        ),
        overall_feedback=record.overall_feedback,
    )


def map_message(raw: RecordInput) -> Message:
    return Message(**_validate(MessageRecord, raw).model_dump())


def map_meeting(raw: RecordInput) -> Meeting:
    return Meeting(**_validate(MeetingRecord, raw).model_dump())


def map_notification(raw: RecordInput) -> Notification:
    return Notification(**_validate(NotificationRecord, raw).model_dump())


def map_skill(raw: RecordInput) -> Skill:
    return Skill(**_validate(SkillRecord, raw).model_dump())


def map_skill_assessment(raw: RecordInput) -> SkillAssessment:
    record = _validate(SkillAssessmentRecord, raw)
    return SkillAssessment(
        id=record.id,
        student_id=record.student_id,
        rater_id=record.rater_id,
        date=record.date,
        role=record.role,
        ratings=tuple(
            SkillRating(skill_id=rating.skill_id, score=rating.score) for rating in record.ratings
        ),
    )


def map_badge(raw: RecordInput) -> Badge:
    return Badge(**_validate(BadgeRecord, raw).model_dump())


def map_user_badge(raw: RecordInput) -> UserBadge:
    return UserBadge(**_validate(UserBadgeRecord, raw).model_dump())


def map_leave_request(raw: RecordInput) -> LeaveRequest:
    return LeaveRequest(**_validate(LeaveRequestRecord, raw).model_dump())


def map_site_visit(raw: RecordInput) -> SiteVisit:
    return SiteVisit(**_validate(SiteVisitRecord, raw).model_dump())


def map_attendance_exception(raw: RecordInput) -> AttendanceException:
    return AttendanceException(**_validate(AttendanceExceptionRecord, raw).model_dump())


MAPPERS: dict[Collection, Callable[[RecordInput], Entity]] = {
    Collection.USERS: map_profile,
    Collection.LOGS: map_log,
    Collection.TASKS: map_task,
    Collection.REPORTS: map_report,
    Collection.GOALS: map_goal,
    Collection.RESOURCES: map_resource,
    Collection.EVALUATIONS: map_evaluation,
    Collection.MESSAGES: map_message,
    Collection.MEETINGS: map_meeting,
    Collection.NOTIFICATIONS: map_notification,
    Collection.SKILLS: map_skill,
    Collection.SKILL_ASSESSMENTS: map_skill_assessment,
    Collection.BADGES: map_badge,
    Collection.USER_BADGES: map_user_badge,
    Collection.LEAVE_REQUESTS: map_leave_request,
    Collection.SITE_VISITS: map_site_visit,
    Collection.ATTENDANCE_EXCEPTIONS: map_attendance_exception,
}


def map_record(collection: Collection, raw: RecordInput) -> Entity:
    return MAPPERS[collection](raw)


# Nested JSON columns keep the camelCase keys the web client has always written.
_NESTED_KEYS = {
    "submitted_at": "submittedAt",
    "given_at": "givenAt",
    "skill_id": "skillId",
}


def _jsonable(value: object, *, nested: bool = False) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dt.datetime | dt.date):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        return _jsonable(asdict(value), nested=True)
    if isinstance(value, Mapping):
        mapping_value = cast("Mapping[str, object]", value)
        return {
            (_NESTED_KEYS.get(key, key) if nested else key): _jsonable(item, nested=nested)
            for key, item in mapping_value.items()
        }
    if isinstance(value, list | tuple | set | frozenset):
        return [_jsonable(item, nested=nested) for item in cast("list[object]", list(value))]
    return value


def to_payload(values: Mapping[str, object]) -> dict[str, object]:
    """Serialise an outgoing insert/update payload to JSON-compatible values."""

    return {key: _jsonable(value) for key, value in values.items()}
