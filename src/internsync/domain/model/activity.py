"""Internship activity records: logs, tasks, goals, reports and reviews."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from internsync.domain.model.entity import Entity
from internsync.domain.model.enums import (
    AttendanceExceptionType,
    Collection,
    EvaluationType,
    FeedbackType,
    GoalStatus,
    LeaveStatus,
    LeaveType,
    LogStatus,
    ReportType,
    Role,
    TaskPriority,
    TaskStatus,
)

if TYPE_CHECKING:
    from datetime import date, datetime


@dataclass(frozen=True, kw_only=True)
class LogEntry(Entity):
    COLLECTION: ClassVar[Collection] = Collection.LOGS

    student_id: str
    date: date
    hours_worked: float = 0.0
    activity_description: str = ""
    challenges: str | None = None
    status: LogStatus = LogStatus.PENDING
    supervisor_comment: str | None = None


@dataclass(frozen=True, slots=True)
class TaskDeliverable:
    description: str
    url: str | None
    submitted_at: datetime


@dataclass(frozen=True, slots=True)
class TaskFeedback:
    type: FeedbackType
    comment: str
    given_at: datetime


@dataclass(frozen=True, kw_only=True)
class Task(Entity):
    COLLECTION: ClassVar[Collection] = Collection.TASKS

    title: str
    description: str
    assigned_to_id: str
    assigned_by_id: str
    created_at: datetime
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: date | None = None
    deliverable: TaskDeliverable | None = None
    feedback: TaskFeedback | None = None
    linked_goal_id: str | None = None


@dataclass(frozen=True, kw_only=True)
class Report(Entity):
    COLLECTION: ClassVar[Collection] = Collection.REPORTS

    student_id: str
    submitted_at: datetime
    type: ReportType = ReportType.WEEKLY
    period_start: date | None = None
    period_end: date | None = None
    summary: str = ""
    key_learnings: str = ""
    next_steps: str = ""


@dataclass(frozen=True, kw_only=True)
class Goal(Entity):
    COLLECTION: ClassVar[Collection] = Collection.GOALS

    student_id: str
    description: str = ""
    category: str = ""
    alignment: str = ""
    status: GoalStatus = GoalStatus.NOT_STARTED
    progress: int = 0


@dataclass(frozen=True, slots=True)
class EvaluationScore:
    category: str
    score: int


@dataclass(frozen=True, kw_only=True)
class Evaluation(Entity):
    COLLECTION: ClassVar[Collection] = Collection.EVALUATIONS

    student_id: str
    supervisor_id: str
    date: datetime
    type: EvaluationType = EvaluationType.MID_TERM
    scores: tuple[EvaluationScore, ...] = ()
    overall_feedback: str = ""


@dataclass(frozen=True, slots=True)
class SkillRating:
    skill_id: str
    score: int


@dataclass(frozen=True, kw_only=True)
class SkillAssessment(Entity):
    COLLECTION: ClassVar[Collection] = Collection.SKILL_ASSESSMENTS

    student_id: str
    rater_id: str
    date: datetime
    role: Role = Role.STUDENT
    ratings: tuple[SkillRating, ...] = ()


@dataclass(frozen=True, kw_only=True)
class LeaveRequest(Entity):
    COLLECTION: ClassVar[Collection] = Collection.LEAVE_REQUESTS

    student_id: str
    start_date: date | None = None
    end_date: date | None = None
    type: LeaveType = LeaveType.SICK
    reason: str = ""
    status: LeaveStatus = LeaveStatus.PENDING


@dataclass(frozen=True, kw_only=True)
class SiteVisit(Entity):
    COLLECTION: ClassVar[Collection] = Collection.SITE_VISITS

    student_id: str
    visitor_id: str
    date: date | None = None
    location: str = ""
    purpose: str = ""
    notes: str = ""


@dataclass(frozen=True, kw_only=True)
class AttendanceException(Entity):
    COLLECTION: ClassVar[Collection] = Collection.ATTENDANCE_EXCEPTIONS

    student_id: str
    date: date | None = None
    reason: str = ""
    type: AttendanceExceptionType = AttendanceExceptionType.EXCUSED
