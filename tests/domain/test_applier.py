from __future__ import annotations

import asyncio
from datetime import date
from typing import TYPE_CHECKING

from internsync.domain.mapping import map_profile, map_task
from internsync.domain.mirror import (
    NOTICE_LIMIT,
    OFFLINE_NOTICE,
    CommittedChange,
    MirrorStore,
    MutationApplier,
    MutationKind,
)
from internsync.domain.model import Collection, LogEntry, Profile, Task, TaskStatus
from internsync.domain.ports import DbError, DbErrorKind, GatewayNetworkError
from tests.support.records import profile_row, task_row

if TYPE_CHECKING:
    from tests.support.gateway import InMemoryGateway


def _log_payload() -> dict[str, object]:
    return {
        "student_id": "u1",
        "date": date(2024, 3, 1),
        "hours_worked": 6,
        "activity_description": "Pairing session",
    }


def test_create_commits_the_record_returned_by_the_store(
    gateway: InMemoryGateway, applier: MutationApplier, store: MirrorStore
) -> None:
    outcome = asyncio.run(applier.create(Collection.LOGS, _log_payload()))

    assert outcome.ok
    assert isinstance(outcome.entity, LogEntry)
    assert outcome.entity.id.startswith("logs-")
    assert store.get(Collection.LOGS, outcome.entity.id, LogEntry) == outcome.entity
    assert gateway.rows(Collection.LOGS)[0]["date"] == "2024-03-01"


def test_failed_create_leaves_mirror_untouched(
    gateway: InMemoryGateway, applier: MutationApplier, store: MirrorStore
) -> None:
    gateway.fail("insert", DbError("permission denied"), collection=Collection.LOGS)

    outcome = asyncio.run(applier.create(Collection.LOGS, _log_payload()))

    assert not outcome.ok
    assert outcome.entity is None
    assert store.count(Collection.LOGS) == 0
    assert applier.notices == [outcome.error]
    assert "permission denied" in (outcome.error or "")


def test_network_failure_notice(gateway: InMemoryGateway, applier: MutationApplier) -> None:
    gateway.fail("insert", GatewayNetworkError("timed out"))

    outcome = asyncio.run(applier.create(Collection.LOGS, _log_payload()))

    assert outcome.error is not None
    assert outcome.error.startswith("Could not reach the server")


def test_unique_violation_notice(gateway: InMemoryGateway, applier: MutationApplier) -> None:
    gateway.fail("insert", DbError("dup", kind=DbErrorKind.UNIQUE_VIOLATION, code="23505"))

    outcome = asyncio.run(applier.create(Collection.LOGS, _log_payload()))

    assert outcome.error is not None
    assert outcome.error.startswith("That record already exists")


def test_best_effort_failure_does_not_raise_a_notice(
    gateway: InMemoryGateway, applier: MutationApplier
) -> None:
    gateway.fail("insert", DbError("nope"))

    outcome = asyncio.run(applier.create(Collection.LOGS, _log_payload(), best_effort=True))

    assert not outcome.ok
    assert applier.notices == []


def test_update_replaces_entity_with_returned_record(
    gateway: InMemoryGateway, applier: MutationApplier, store: MirrorStore
) -> None:
    gateway.seed(Collection.TASKS, task_row("t1", "u1"))
    store.put(map_task(task_row("t1", "u1")))

    outcome = asyncio.run(
        applier.update(Collection.TASKS, "t1", {"status": TaskStatus.IN_PROGRESS})
    )

    task = store.get(Collection.TASKS, "t1", Task)
    assert outcome.ok
    assert task is not None
    assert task.status is TaskStatus.IN_PROGRESS
    assert task.title == "Task t1"


def test_update_of_missing_row_fails(applier: MutationApplier, store: MirrorStore) -> None:
    outcome = asyncio.run(applier.update(Collection.TASKS, "missing", {"status": "COMPLETED"}))

    assert not outcome.ok
    assert store.count(Collection.TASKS) == 0


def test_delete_removes_after_confirmation(
    gateway: InMemoryGateway, applier: MutationApplier, store: MirrorStore
) -> None:
    gateway.seed(Collection.USERS, profile_row("u1", "a@example.com"))
    store.put(map_profile(profile_row("u1", "a@example.com")))

    outcome = asyncio.run(applier.delete(Collection.USERS, "u1"))

    assert outcome.ok
    assert store.profile("u1") is None
    assert gateway.rows(Collection.USERS) == []


def test_failed_delete_keeps_entity(
    gateway: InMemoryGateway, applier: MutationApplier, store: MirrorStore
) -> None:
    store.put(map_profile(profile_row("u1", "a@example.com")))
    gateway.fail("delete", DbError("foreign key"))

    outcome = asyncio.run(applier.delete(Collection.USERS, "u1"))

    assert not outcome.ok
    assert store.profile("u1") is not None


def test_offline_refuses_before_the_gateway(
    gateway: InMemoryGateway, applier: MutationApplier, store: MirrorStore
) -> None:
    applier.online = False

    outcome = asyncio.run(applier.create(Collection.LOGS, _log_payload()))

    assert outcome.error == OFFLINE_NOTICE
    assert gateway.calls == []
    assert store.count(Collection.LOGS) == 0


def test_notices_are_bounded_and_drained(applier: MutationApplier) -> None:
    applier.online = False

    async def scenario() -> None:
        for _ in range(NOTICE_LIMIT + 5):
            await applier.create(Collection.LOGS, _log_payload())

    asyncio.run(scenario())

    assert len(applier.notices) == NOTICE_LIMIT
    assert applier.drain_notices() == [OFFLINE_NOTICE] * NOTICE_LIMIT
    assert applier.notices == []


def test_result_arriving_after_close_is_dropped(
    gateway: InMemoryGateway, applier: MutationApplier, store: MirrorStore
) -> None:
    async def scenario() -> None:
        pending = asyncio.create_task(applier.create(Collection.LOGS, _log_payload()))
        await asyncio.sleep(0)
        store.close()
        await pending

    asyncio.run(scenario())

    assert len(gateway.rows(Collection.LOGS)) == 1
    assert store.count(Collection.LOGS) == 0


def test_listeners_see_before_and_after(gateway: InMemoryGateway, store: MirrorStore) -> None:
    applier = MutationApplier(gateway, store)
    changes: list[CommittedChange] = []

    async def listener(change: CommittedChange) -> None:
        changes.append(change)

    applier.subscribe(listener)
    gateway.seed(Collection.USERS, profile_row("u1", "a@example.com", name="Ada"))
    store.put(map_profile(profile_row("u1", "a@example.com", name="Ada")))

    asyncio.run(applier.update(Collection.USERS, "u1", {"name": "Ada L."}))

    assert len(changes) == 1
    change = changes[0]
    assert change.kind is MutationKind.UPDATE
    assert isinstance(change.before, Profile)
    assert change.before.name == "Ada"
    assert isinstance(change.after, Profile)
    assert change.after.name == "Ada L."


def test_optimistic_write_skips_listeners(gateway: InMemoryGateway, store: MirrorStore) -> None:
    applier = MutationApplier(gateway, store)
    changes: list[CommittedChange] = []

    async def listener(change: CommittedChange) -> None:
        changes.append(change)

    applier.subscribe(listener)
    applier.apply_optimistic(map_profile(profile_row("u1", "a@example.com")))

    assert store.profile("u1") is not None
    assert changes == []
    assert gateway.calls == []

