from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta

import pytest

from internsync.domain.mapping import map_log, map_meeting, map_task
from internsync.domain.mirror import CommittedChange, MirrorStore, MutationKind
from internsync.domain.model import (
    Collection,
    Entity,
    FeedbackType,
    LogEntry,
    Task,
    TaskFeedback,
    TaskStatus,
)
from internsync.domain.rules import (
    EARLY_BIRD,
    RISING_STAR,
    TASK_MASTER,
    TEAM_PLAYER,
    GrantRequest,
    activity_streak,
    evaluate,
    meeting_attendance,
    positive_feedback,
    reaches_streak,
    task_volume,
)
from tests.support.records import FIXED_NOW, log_row, meeting_row, task_row

START = date(2024, 3, 1)


def _days(*offsets: int) -> list[date]:
    return [START + timedelta(days=offset) for offset in offsets]


@pytest.mark.parametrize(
    ("offsets", "expected"),
    [
        ((0, 1, 2, 3, 4), True),
        ((4, 2, 0, 3, 1), True),
        ((0, 1, 2, 3, 3, 3), False),
        ((0, 1, 2, 4, 5, 6), False),
        ((0, 2, 3, 4, 5, 6), True),
        ((), False),
    ],
)
def test_reaches_streak(offsets: tuple[int, ...], expected: bool) -> None:  # noqa: FBT001
    assert reaches_streak(_days(*offsets)) is expected


def _created(entity: Entity | None) -> CommittedChange:
    assert entity is not None
    return CommittedChange(
        kind=MutationKind.CREATE, collection=entity.collection, before=None, after=entity
    )


def _store_with_logs(student_id: str, offsets: tuple[int, ...]) -> MirrorStore:
    store = MirrorStore()
    store.replace_collection(
        Collection.LOGS,
        [
            map_log(log_row(f"l{offset}", student_id, START + timedelta(days=offset)))
            for offset in offsets
        ],
    )
    return store


def test_activity_streak_fires_on_the_fifth_consecutive_day() -> None:
    store = _store_with_logs("u1", (0, 1, 2, 3, 4))
    latest = store.get(Collection.LOGS, "l4", LogEntry)

    assert activity_streak(_created(latest), store) == [GrantRequest("u1", EARLY_BIRD)]


def test_activity_streak_ignores_gaps_and_other_students() -> None:
    store = _store_with_logs("u1", (0, 1, 3, 4, 5))
    store.put(map_log(log_row("other", "u2", START + timedelta(days=2))))
    latest = store.get(Collection.LOGS, "l5", LogEntry)

    assert activity_streak(_created(latest), store) == []


def _completed_tasks(store: MirrorStore, assignee: str, count: int) -> None:
    store.replace_collection(
        Collection.TASKS,
        [
            map_task(task_row(f"t{index}", assignee, status=TaskStatus.COMPLETED))
            for index in range(count)
        ],
    )


def test_task_volume_requires_a_transition_into_completed() -> None:
    store = MirrorStore()
    _completed_tasks(store, "u1", 10)
    before = map_task(task_row("t9", "u1", status=TaskStatus.IN_PROGRESS))
    after = map_task(task_row("t9", "u1", status=TaskStatus.COMPLETED))

    transition = CommittedChange(
        kind=MutationKind.UPDATE, collection=Collection.TASKS, before=before, after=after
    )
    unchanged = CommittedChange(
        kind=MutationKind.UPDATE, collection=Collection.TASKS, before=after, after=after
    )

    assert task_volume(transition, store) == [GrantRequest("u1", TASK_MASTER)]
    assert task_volume(unchanged, store) == []


def test_task_volume_below_threshold() -> None:
    store = MirrorStore()
    _completed_tasks(store, "u1", 9)
    after = store.get(Collection.TASKS, "t8", Task)
    before = map_task(task_row("t8", "u1"))

    change = CommittedChange(
        kind=MutationKind.UPDATE, collection=Collection.TASKS, before=before, after=after
    )

    assert task_volume(change, store) == []


def test_positive_feedback_only_for_new_praise() -> None:
    store = MirrorStore()
    base = map_task(task_row("t1", "u1"))
    praised = replace(
        base, feedback=TaskFeedback(type=FeedbackType.PRAISE, comment="Great", given_at=FIXED_NOW)
    )
    critiqued = replace(
        base,
        feedback=TaskFeedback(type=FeedbackType.CONSTRUCTIVE, comment="Hmm", given_at=FIXED_NOW),
    )

    def updated(before: Task, after: Task) -> CommittedChange:
        return CommittedChange(
            kind=MutationKind.UPDATE, collection=Collection.TASKS, before=before, after=after
        )

    assert positive_feedback(updated(base, praised), store) == [GrantRequest("u1", RISING_STAR)]
    assert positive_feedback(updated(praised, praised), store) == []
    assert positive_feedback(updated(base, critiqued), store) == []


def test_meeting_attendance_counts_the_new_meeting() -> None:
    store = MirrorStore()
    store.replace_collection(
        Collection.MEETINGS,
        [map_meeting(meeting_row("m1", ["u1", "u2"])), map_meeting(meeting_row("m2", ["u1"]))],
    )
    new_meeting = map_meeting(meeting_row("m3", ["u1", "u2"]))

    requests = meeting_attendance(_created(new_meeting), store)

    assert requests == [GrantRequest("u1", TEAM_PLAYER)]


def test_evaluate_ignores_unrelated_changes() -> None:
    store = _store_with_logs("u1", (0, 1, 2, 3, 4))
    latest = store.get(Collection.LOGS, "l4", LogEntry)
    deletion = CommittedChange(
        kind=MutationKind.DELETE, collection=Collection.LOGS, before=latest, after=None
    )

    assert evaluate(deletion, store) == []
