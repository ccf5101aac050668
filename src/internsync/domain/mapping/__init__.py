"""Entity mapper: the single boundary between raw remote rows and domain entities."""

from __future__ import annotations

from .translator import (
    AVATAR_BASE_URL,
    MAPPERS,
    avatar_url,
    map_attendance_exception,
    map_badge,
    map_evaluation,
    map_goal,
    map_leave_request,
    map_log,
    map_meeting,
    map_message,
    map_notification,
    map_profile,
    map_record,
    map_report,
    map_resource,
    map_site_visit,
    map_skill,
    map_skill_assessment,
    map_task,
    map_user_badge,
    to_payload,
)

__all__ = [
    "AVATAR_BASE_URL",
    "MAPPERS",
    "avatar_url",
    "map_attendance_exception",
    "map_badge",
    "map_evaluation",
    "map_goal",
    "map_leave_request",
    "map_log",
    "map_meeting",
    "map_message",
    "map_notification",
    "map_profile",
    "map_record",
    "map_report",
    "map_resource",
    "map_site_visit",
    "map_skill",
    "map_skill_assessment",
    "map_task",
    "map_user_badge",
    "to_payload",
]
