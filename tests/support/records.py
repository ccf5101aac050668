"""Raw remote rows for seeding the in-memory gateway."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

from internsync.domain.model import Role, TaskStatus, UserStatus

FIXED_NOW = datetime(2024, 3, 4, 9, 30, tzinfo=UTC)


def fixed_clock() -> datetime:
    return FIXED_NOW


def profile_row(
    profile_id: str,
    email: str,
    *,
    name: str = "Test User",
    role: Role = Role.STUDENT,
    status: UserStatus = UserStatus.ACTIVE,
    **extra: object,
) -> dict[str, object]:
    return {
        "id": profile_id,
        "email": email,
        "name": name,
        "role": role,
        "status": status,
        **extra,
    }


def log_row(log_id: str, student_id: str, day: date, *, hours: float = 8.0) -> dict[str, object]:
    return {
        "id": log_id,
        "student_id": student_id,
        "date": day,
        "hours_worked": hours,
        "activity_description": "Worked on the onboarding checklist",
        "status": "PENDING",
    }


def task_row(
    task_id: str,
    assigned_to_id: str,
    *,
    status: TaskStatus = TaskStatus.TODO,
    assigned_by_id: str = "sup-1",
) -> dict[str, object]:
    return {
        "id": task_id,
        "title": f"Task {task_id}",
        "description": "Do the thing",
        "assigned_to_id": assigned_to_id,
        "assigned_by_id": assigned_by_id,
        "status": status,
        "priority": "MEDIUM",
        "created_at": FIXED_NOW - timedelta(days=3),
    }


def meeting_row(
    meeting_id: str, attendees: list[str], *, organizer_id: str = "sup-1"
) -> dict[str, object]:
    return {
        "id": meeting_id,
        "title": f"Meeting {meeting_id}",
        "organizer_id": organizer_id,
        "date": date(2024, 3, 1),
        "time": "10:00",
        "attendees": attendees,
    }


def notification_row(
    notification_id: str,
    recipient_id: str,
    *,
    read: bool = False,
    minutes_ago: int = 0,
) -> dict[str, object]:
    return {
        "id": notification_id,
        "recipient_id": recipient_id,
        "sender_id": "SYSTEM",
        "title": "Heads up",
        "message": f"Notification {notification_id}",
        "type": "INFO",
        "timestamp": FIXED_NOW - timedelta(minutes=minutes_ago),
        "read": read,
    }


def badge_row(badge_id: str, name: str, points: int) -> dict[str, object]:
    return {"id": badge_id, "name": name, "description": "", "points": points}
