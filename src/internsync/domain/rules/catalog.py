"""Badge identifiers used by the achievement rules and the fallback catalogs.

The fallback catalogs are shown when the remote ``badges``/``skills`` collections are
empty, so a fresh project still has something to award and assess against.
"""

from __future__ import annotations

from typing import Final

from internsync.domain.model import Badge, Skill

EARLY_BIRD: Final = "b1"
TASK_MASTER: Final = "b2"
TEAM_PLAYER: Final = "b3"
RISING_STAR: Final = "b4"

STREAK_LENGTH: Final = 5
COMPLETED_TASKS_THRESHOLD: Final = 10
MEETINGS_THRESHOLD: Final = 3

DEFAULT_BADGES: Final[tuple[Badge, ...]] = (
    Badge(
        id=EARLY_BIRD,
        name="Early Bird",
        description="Logged activity five days in a row.",
        icon="Sunrise",
        color="bg-amber-100",
        points=50,
    ),
    Badge(
        id=TASK_MASTER,
        name="Task Master",
        description="Completed ten tasks.",
        icon="CheckCircle",
        color="bg-emerald-100",
        points=100,
    ),
    Badge(
        id=TEAM_PLAYER,
        name="Team Player",
        description="Attended three meetings.",
        icon="Users",
        color="bg-sky-100",
        points=30,
    ),
    Badge(
        id=RISING_STAR,
        name="Rising Star",
        description="Received praise from a supervisor.",
        icon="Star",
        color="bg-violet-100",
        points=40,
    ),
)

DEFAULT_SKILLS: Final[tuple[Skill, ...]] = (
    Skill(id="s1", name="Communication", category="Soft Skills"),
    Skill(id="s2", name="Teamwork", category="Soft Skills"),
    Skill(id="s3", name="Problem Solving", category="Soft Skills"),
    Skill(id="s4", name="Time Management", category="Soft Skills"),
    Skill(id="s5", name="Programming", category="Technical"),
    Skill(id="s6", name="Data Analysis", category="Technical"),
)
