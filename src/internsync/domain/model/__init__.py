"""Public domain model surface."""

from __future__ import annotations

from internsync.domain.model.activity import (
    AttendanceException,
    Evaluation,
    EvaluationScore,
    Goal,
    LeaveRequest,
    LogEntry,
    Report,
    SiteVisit,
    SkillAssessment,
    SkillRating,
    Task,
    TaskDeliverable,
    TaskFeedback,
)
from internsync.domain.model.catalog import Badge, Resource, Skill, UserBadge
from internsync.domain.model.communication import Meeting, Message, Notification
from internsync.domain.model.entity import BROADCAST_RECIPIENT, SYSTEM_SENDER, Entity
from internsync.domain.model.enums import (
    AttendanceExceptionType,
    Collection,
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
from internsync.domain.model.user import (
    DEFAULT_HOURS_REQUIRED,
    DEFAULT_PROFILE_NAME,
    Identity,
    Profile,
    Session,
)

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "SYSTEM_SENDER",
    "BROADCAST_RECIPIENT",
    # identity
    "Identity",
    "Session",
    "Profile",
    "DEFAULT_HOURS_REQUIRED",
    "DEFAULT_PROFILE_NAME",
    # activity
    "LogEntry",
    "Task",
    "TaskDeliverable",
    "TaskFeedback",
    "Report",
    "Goal",
    "Evaluation",
    "EvaluationScore",
    "SkillAssessment",
    "SkillRating",
    "LeaveRequest",
    "SiteVisit",
    "AttendanceException",
    # communication
    "Message",
    "Meeting",
    "Notification",
    # catalog
    "Resource",
    "Skill",
    "Badge",
    "UserBadge",
    # enums
    "AttendanceExceptionType",
    "Collection",
    "EvaluationType",
    "FeedbackType",
    "GoalStatus",
    "LeaveStatus",
    "LeaveType",
    "LogStatus",
    "MessageChannel",
    "NotificationType",
    "ReportType",
    "ResourceType",
    "Role",
    "TaskPriority",
    "TaskStatus",
    "UserStatus",
]
