from __future__ import annotations

import asyncio
from datetime import date, timedelta
from typing import TYPE_CHECKING

from internsync.domain.mapping import map_log, map_meeting
from internsync.domain.mirror import MirrorStore, MutationApplier
from internsync.domain.model import Collection, Notification, UserBadge
from internsync.domain.ports import DbError
from internsync.domain.rules import (
    BADGE_NOTIFICATION_TITLE,
    DEFAULT_BADGES,
    EARLY_BIRD,
    TEAM_PLAYER,
    AchievementService,
)
from tests.support.records import fixed_clock, log_row, meeting_row

if TYPE_CHECKING:
    from tests.support.gateway import InMemoryGateway


def _service(
    gateway: InMemoryGateway, store: MirrorStore
) -> tuple[MutationApplier, AchievementService]:
    applier = MutationApplier(gateway, store)
    service = AchievementService(applier, clock=fixed_clock)
    service.attach()
    store.replace_collection(Collection.BADGES, DEFAULT_BADGES)
    return applier, service


def test_fifth_consecutive_log_grants_early_bird_once(gateway: InMemoryGateway) -> None:
    store = MirrorStore()
    applier, _ = _service(gateway, store)
    start = date(2024, 3, 1)
    store.replace_collection(
        Collection.LOGS,
        [map_log(log_row(f"l{day}", "u1", start + timedelta(days=day))) for day in range(4)],
    )

    async def scenario() -> None:
        for day in (4, 5):
            await applier.create(
                Collection.LOGS,
                {
                    "student_id": "u1",
                    "date": start + timedelta(days=day),
                    "hours_worked": 8,
                    "activity_description": "Shipping",
                },
            )

    asyncio.run(scenario())

    grants = store.all(Collection.USER_BADGES, UserBadge)
    assert [(grant.user_id, grant.badge_id) for grant in grants] == [("u1", EARLY_BIRD)]
    assert len(gateway.rows(Collection.USER_BADGES)) == 1

    notifications = store.all(Collection.NOTIFICATIONS, Notification)
    assert len(notifications) == 1
    assert notifications[0].recipient_id == "u1"
    assert notifications[0].sender_id == "SYSTEM"
    assert notifications[0].title == BADGE_NOTIFICATION_TITLE
    assert notifications[0].message == (
        'Congratulations! You\'ve earned the "Early Bird" badge and 50 XP!'
    )


def test_grant_is_skipped_when_badge_already_held(gateway: InMemoryGateway) -> None:
    store = MirrorStore()
    _, service = _service(gateway, store)
    store.put(UserBadge(id="ub1", user_id="u1", badge_id=EARLY_BIRD, earned_at=fixed_clock()))

    assert asyncio.run(service.grant("u1", EARLY_BIRD)) is None
    assert gateway.count_calls("insert") == 0


def test_concurrent_grants_insert_once(gateway: InMemoryGateway) -> None:
    store = MirrorStore()
    _, service = _service(gateway, store)

    async def scenario() -> list[UserBadge | None]:
        return await asyncio.gather(
            service.grant("u1", TEAM_PLAYER), service.grant("u1", TEAM_PLAYER)
        )

    results = asyncio.run(scenario())

    assert sum(result is not None for result in results) == 1
    assert gateway.count_calls("insert", Collection.USER_BADGES) == 1


def test_failed_grant_is_logged_and_not_retried(gateway: InMemoryGateway) -> None:
    store = MirrorStore()
    applier, service = _service(gateway, store)
    gateway.fail("insert", DbError("rls"), collection=Collection.USER_BADGES)

    assert asyncio.run(service.grant("u1", EARLY_BIRD)) is None
    assert store.count(Collection.USER_BADGES) == 0
    assert store.count(Collection.NOTIFICATIONS) == 0
    assert applier.notices == []
    assert gateway.count_calls("insert", Collection.USER_BADGES) == 1


def test_unknown_badge_is_granted_without_notification(gateway: InMemoryGateway) -> None:
    store = MirrorStore()
    _, service = _service(gateway, store)

    grant = asyncio.run(service.grant("u1", "b9"))

    assert grant is not None
    assert store.count(Collection.NOTIFICATIONS) == 0


def test_third_meeting_grants_team_player_to_each_attendee(gateway: InMemoryGateway) -> None:
    store = MirrorStore()
    applier, _ = _service(gateway, store)
    store.replace_collection(
        Collection.MEETINGS,
        [
            map_meeting(meeting_row("m1", ["u1", "u2"])),
            map_meeting(meeting_row("m2", ["u1", "u2"])),
        ],
    )

    asyncio.run(
        applier.create(
            Collection.MEETINGS,
            {
                "title": "Retro",
                "organizer_id": "sup-1",
                "date": date(2024, 3, 8),
                "time": "15:00",
                "attendees": ("u1", "u2"),
            },
        )
    )

    holders = sorted(grant.user_id for grant in store.all(Collection.USER_BADGES, UserBadge))
    assert holders == ["u1", "u2"]
