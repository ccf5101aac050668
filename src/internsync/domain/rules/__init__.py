"""Derived achievement rules and the service that issues their grants."""

from __future__ import annotations

from .achievements import BADGE_NOTIFICATION_TITLE, AchievementService, badge_unlocked_message
from .catalog import (
    DEFAULT_BADGES,
    DEFAULT_SKILLS,
    EARLY_BIRD,
    RISING_STAR,
    TASK_MASTER,
    TEAM_PLAYER,
)
from .engine import (
    RULES,
    GrantRequest,
    activity_streak,
    evaluate,
    meeting_attendance,
    positive_feedback,
    reaches_streak,
    task_volume,
)

__all__ = [
    "BADGE_NOTIFICATION_TITLE",
    "DEFAULT_BADGES",
    "DEFAULT_SKILLS",
    "EARLY_BIRD",
    "RISING_STAR",
    "RULES",
    "TASK_MASTER",
    "TEAM_PLAYER",
    "AchievementService",
    "GrantRequest",
    "activity_streak",
    "badge_unlocked_message",
    "evaluate",
    "meeting_attendance",
    "positive_feedback",
    "reaches_streak",
    "task_volume",
]
