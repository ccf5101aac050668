"""Issue the badge grants requested by the achievement rules."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from internsync.domain.model import (
    SYSTEM_SENDER,
    Badge,
    Collection,
    NotificationType,
    UserBadge,
)

from .engine import evaluate

if TYPE_CHECKING:
    from collections.abc import Callable

    from internsync.domain.mirror import CommittedChange, MutationApplier


log = getLogger(__name__)

BADGE_NOTIFICATION_TITLE = "Badge Unlocked!"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def badge_unlocked_message(badge: Badge) -> str:
    return f'Congratulations! You\'ve earned the "{badge.name}" badge and {badge.points} XP!'


class AchievementService:
    """Grant badges at most once per (user, badge) pair and announce each grant.

    The uniqueness check runs against the mirror plus the grants this service has in
    flight. The remote store has no constraint on the pair, so another session
    granting the same badge concurrently can still produce a duplicate.
    """

    def __init__(
        self,
        applier: MutationApplier,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._applier = applier
        self._clock = clock
        self._in_flight: set[tuple[str, str]] = set()

    def attach(self) -> None:
        self._applier.subscribe(self.on_commit)

    async def on_commit(self, change: CommittedChange) -> None:
        for request in evaluate(change, self._applier.store):
            await self.grant(request.user_id, request.badge_id)

    async def grant(self, user_id: str, badge_id: str) -> UserBadge | None:
        """Grant ``badge_id`` to ``user_id`` unless already held.

        Returns the committed grant, or ``None`` when the badge was already held or
        the insert failed. Failures are logged and never retried.
        """

        store = self._applier.store
        key = (user_id, badge_id)
        if store.has_badge(user_id, badge_id) or key in self._in_flight:
            log.debug("User %s already holds badge %s", user_id, badge_id)
            return None

        self._in_flight.add(key)
        try:
            outcome = await self._applier.create(
                Collection.USER_BADGES,
                {"user_id": user_id, "badge_id": badge_id, "earned_at": self._clock()},
                best_effort=True,
            )
        finally:
            self._in_flight.discard(key)

        grant = outcome.entity
        if not isinstance(grant, UserBadge):
            return None
        log.info("Granted badge %s to user %s", badge_id, user_id)

        badge = store.get(Collection.BADGES, badge_id, Badge)
        if badge is None:
            log.warning("Badge %s is not in the catalog; skipping notification", badge_id)
            return grant
        await self._applier.create(
            Collection.NOTIFICATIONS,
            {
                "recipient_id": user_id,
                "sender_id": SYSTEM_SENDER,
                "title": BADGE_NOTIFICATION_TITLE,
                "message": badge_unlocked_message(badge),
                "type": NotificationType.INFO,
                "timestamp": self._clock(),
                "read": False,
            },
            best_effort=True,
        )
        return grant
