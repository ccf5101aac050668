"""Pure achievement rules.

Each rule inspects the mirror after a committed change and returns the badge grants
it asks for. Rules never write; the grants they return are issued as ordinary
creates by :class:`internsync.domain.rules.achievements.AchievementService`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

from internsync.domain.mirror import MutationKind
from internsync.domain.model import (
    Collection,
    FeedbackType,
    LogEntry,
    Meeting,
    Task,
    TaskStatus,
)

from .catalog import (
    COMPLETED_TASKS_THRESHOLD,
    EARLY_BIRD,
    MEETINGS_THRESHOLD,
    RISING_STAR,
    STREAK_LENGTH,
    TASK_MASTER,
    TEAM_PLAYER,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from datetime import date

    from internsync.domain.mirror import CommittedChange, MirrorStore


@dataclass(frozen=True, slots=True)
class GrantRequest:
    user_id: str
    badge_id: str


type Rule = Callable[[CommittedChange, MirrorStore], list[GrantRequest]]


def reaches_streak(dates: Iterable[date], length: int = STREAK_LENGTH) -> bool:
    """Whether ``dates`` contain ``length`` consecutive calendar days.

    Duplicates are ignored. Scanning stops as soon as the streak reaches ``length``.
    """

    streak = 0
    previous: date | None = None
    for current in sorted(set(dates)):
        if previous is not None and current - previous == timedelta(days=1):
            streak += 1
        else:
            streak = 1
        if streak >= length:
            return True
        previous = current
    return False


def activity_streak(change: CommittedChange, store: MirrorStore) -> list[GrantRequest]:
    if change.kind is not MutationKind.CREATE or not isinstance(change.after, LogEntry):
        return []
    student_id = change.after.student_id
    dates = [
        entry.date
        for entry in store.where(
            Collection.LOGS, LogEntry, lambda entry: entry.student_id == student_id
        )
    ]
    if reaches_streak(dates):
        return [GrantRequest(student_id, EARLY_BIRD)]
    return []


def _completed_now(change: CommittedChange) -> Task | None:
    after = change.after
    if not isinstance(after, Task) or after.status is not TaskStatus.COMPLETED:
        return None
    before = change.before
    if isinstance(before, Task) and before.status is TaskStatus.COMPLETED:
        return None
    return after


def task_volume(change: CommittedChange, store: MirrorStore) -> list[GrantRequest]:
    task = _completed_now(change)
    if task is None:
        return []
    completed = store.where(
        Collection.TASKS,
        Task,
        lambda other: other.assigned_to_id == task.assigned_to_id
        and other.status is TaskStatus.COMPLETED,
    )
    if len(completed) >= COMPLETED_TASKS_THRESHOLD:
        return [GrantRequest(task.assigned_to_id, TASK_MASTER)]
    return []


def positive_feedback(
    change: CommittedChange, store: MirrorStore,  # noqa: ARG001
) -> list[GrantRequest]:
    after = change.after
    if not isinstance(after, Task) or after.feedback is None:
        return []
    if after.feedback.type is not FeedbackType.PRAISE:
        return []
    before = change.before
    if isinstance(before, Task) and before.feedback == after.feedback:
        return []
    return [GrantRequest(after.assigned_to_id, RISING_STAR)]


def meeting_attendance(change: CommittedChange, store: MirrorStore) -> list[GrantRequest]:
    meeting = change.after
    if change.kind is not MutationKind.CREATE or not isinstance(meeting, Meeting):
        return []
    meetings = store.all(Collection.MEETINGS, Meeting)
    if meeting.id not in {other.id for other in meetings}:
        meetings.append(meeting)
    requests: list[GrantRequest] = []
    for attendee_id in dict.fromkeys(meeting.attendees):
        attended = sum(1 for other in meetings if attendee_id in other.attendees)
        if attended >= MEETINGS_THRESHOLD:
            requests.append(GrantRequest(attendee_id, TEAM_PLAYER))
    return requests


RULES: tuple[Rule, ...] = (
    activity_streak,
    task_volume,
    positive_feedback,
    meeting_attendance,
)


def evaluate(change: CommittedChange, store: MirrorStore) -> list[GrantRequest]:
    """Run every rule in order and collect the grants they request."""

    requests: list[GrantRequest] = []
    for rule in RULES:
        requests.extend(rule(change, store))
    return requests
