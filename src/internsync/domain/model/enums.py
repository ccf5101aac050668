"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Collection(StrEnum):
    """Remote collection names; also the keys of the local mirror."""

    USERS = "users"
    LOGS = "logs"
    TASKS = "tasks"
    REPORTS = "reports"
    GOALS = "goals"
    RESOURCES = "resources"
    EVALUATIONS = "evaluations"
    MESSAGES = "messages"
    MEETINGS = "meetings"
    NOTIFICATIONS = "notifications"
    SKILLS = "skills"
    SKILL_ASSESSMENTS = "skill_assessments"
    BADGES = "badges"
    USER_BADGES = "user_badges"
    LEAVE_REQUESTS = "leave_requests"
    SITE_VISITS = "site_visits"
    ATTENDANCE_EXCEPTIONS = "attendance_exceptions"


class Role(StrEnum):
    STUDENT = "STUDENT"
    SUPERVISOR = "SUPERVISOR"
    ADMIN = "ADMIN"


class UserStatus(StrEnum):
    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    REJECTED = "REJECTED"


class LogStatus(StrEnum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class TaskStatus(StrEnum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    OVERDUE = "OVERDUE"


class TaskPriority(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class FeedbackType(StrEnum):
    PRAISE = "PRAISE"
    CONSTRUCTIVE = "CONSTRUCTIVE"


class GoalStatus(StrEnum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class ReportType(StrEnum):
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    FINAL = "FINAL"


class ResourceType(StrEnum):
    LINK = "LINK"
    DOCUMENT = "DOCUMENT"
    VIDEO = "VIDEO"


class EvaluationType(StrEnum):
    MID_TERM = "MID_TERM"
    FINAL = "FINAL"


class MessageChannel(StrEnum):
    DIRECT = "DIRECT"
    GROUP = "GROUP"


class NotificationType(StrEnum):
    INFO = "INFO"
    ALERT = "ALERT"
    ANNOUNCEMENT = "ANNOUNCEMENT"


class LeaveType(StrEnum):
    SICK = "SICK"
    PERSONAL = "PERSONAL"
    ACADEMIC = "ACADEMIC"
    OTHER = "OTHER"


class LeaveStatus(StrEnum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class AttendanceExceptionType(StrEnum):
    EXCUSED = "EXCUSED"
    UNEXCUSED = "UNEXCUSED"
