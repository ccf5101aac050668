"""Session-scoped in-memory mirror of the remote collections."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, cast

from internsync.domain.model import Collection, Entity, Notification, Profile, UserBadge

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable


log = getLogger(__name__)


class MirrorStore:
    """Collection name -> entity id -> entity.

    The store is created when a session is established and closed at sign-out. A
    closed store ignores every write so results of writes still in flight when the
    session ended are dropped instead of leaking into the next session.

    Only the mutation applier and session hydration write to it; everything else reads.
    """

    def __init__(self) -> None:
        self._collections: dict[Collection, dict[str, Entity]] = {
            collection: {} for collection in Collection
        }
        self._open = True

    @property
    def is_open(self) -> bool:
        return self._open

    def close(self) -> None:
        for rows in self._collections.values():
            rows.clear()
        self._open = False

    # -- writes -----------------------------------------------------------------------

    def replace_collection(self, collection: Collection, entities: Iterable[Entity]) -> None:
        if not self._open:
            log.debug("Store closed; dropping hydration of %s", collection)
            return
        self._collections[collection] = {entity.id: entity for entity in entities}

    def put(self, entity: Entity) -> None:
        if not self._open:
            log.debug("Store closed; dropping late result for %s %s", entity.collection, entity.id)
            return
        self._collections[entity.collection][entity.id] = entity

    def remove(self, collection: Collection, entity_id: str) -> None:
        if not self._open:
            log.debug("Store closed; dropping late delete for %s %s", collection, entity_id)
            return
        self._collections[collection].pop(entity_id, None)

    # -- reads ------------------------------------------------------------------------

    def get[TEntity: Entity](
        self, collection: Collection, entity_id: str, kind: type[TEntity]
    ) -> TEntity | None:
        entity = self._collections[collection].get(entity_id)
        if entity is None or not isinstance(entity, kind):
            return None
        return entity

    def all[TEntity: Entity](self, collection: Collection, kind: type[TEntity]) -> list[TEntity]:
        return [
            cast("TEntity", entity)
            for entity in self._collections[collection].values()
            if isinstance(entity, kind)
        ]

    def where[TEntity: Entity](
        self,
        collection: Collection,
        kind: type[TEntity],
        predicate: Callable[[TEntity], bool],
    ) -> list[TEntity]:
        return [entity for entity in self.all(collection, kind) if predicate(entity)]

    def count(self, collection: Collection) -> int:
        return len(self._collections[collection])

    def counts(self) -> dict[Collection, int]:
        return {collection: len(rows) for collection, rows in self._collections.items()}

    # -- derived views ----------------------------------------------------------------

    def profile(self, profile_id: str) -> Profile | None:
        return self.get(Collection.USERS, profile_id, Profile)

    def has_badge(self, user_id: str, badge_id: str) -> bool:
        return any(
            grant.user_id == user_id and grant.badge_id == badge_id
            for grant in self.all(Collection.USER_BADGES, UserBadge)
        )

    def notifications_for(self, profile_id: str) -> list[Notification]:
        """Notifications addressed to ``profile_id`` or broadcast, newest first."""

        visible = self.where(
            Collection.NOTIFICATIONS,
            Notification,
            lambda notification: notification.is_visible_to(profile_id),
        )
        return sorted(visible, key=lambda notification: notification.timestamp, reverse=True)

    def unread_count(self, profile_id: str) -> int:
        notifications = self.notifications_for(profile_id)
        return sum(1 for notification in notifications if not notification.read)
