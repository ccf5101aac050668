"""Apply confirmed remote writes to the session mirror.

A mutation becomes visible to mirror readers only after the remote store confirmed
it. Creates enter the mirror with the id the store assigned, updates replace the
entity with the returned record and deletes remove it. A failed write leaves the
mirror untouched. There is no automatic retry.

Gateway failures never escape this module. User-initiated writes turn them into a
notice on the returned outcome (also kept, up to :data:`NOTICE_LIMIT`, in
:attr:`MutationApplier.notices` until drained); best-effort writes only log.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from internsync.domain.mapping import map_record, to_payload
from internsync.domain.model import Entity
from internsync.domain.ports import DbError, GatewayError, GatewayNetworkError

from .contracts import (
    OFFLINE_NOTICE,
    CommittedChange,
    CommitListener,
    MutationKind,
    MutationOutcome,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from internsync.domain.model import Collection
    from internsync.domain.ports import DataGateway

    from .store import MirrorStore


log = getLogger(__name__)

NOTICE_LIMIT = 50


def describe_failure(exc: GatewayError) -> str:
    if isinstance(exc, GatewayNetworkError):
        return "Could not reach the server. Please check your connection and try again."
    if isinstance(exc, DbError) and exc.is_unique_violation:
        return f"That record already exists. ({exc})"
    return f"The change could not be saved. ({exc})"


class MutationApplier:
    def __init__(self, gateway: DataGateway, store: MirrorStore) -> None:
        self._gateway = gateway
        self._store = store
        self._listeners: list[CommitListener] = []
        self.online = True
        self.notices: list[str] = []

    @property
    def store(self) -> MirrorStore:
        return self._store

    def drain_notices(self) -> list[str]:
        """Return the pending user-facing notices, oldest first, and forget them."""

        notices, self.notices = self.notices, []
        return notices

    def subscribe(self, listener: CommitListener) -> None:
        """Run ``listener`` after every committed change, in subscription order."""

        self._listeners.append(listener)

    # -- confirmed writes -------------------------------------------------------------

    async def create(
        self,
        collection: Collection,
        payload: Mapping[str, object],
        *,
        best_effort: bool = False,
    ) -> MutationOutcome[Entity]:
        kind = MutationKind.CREATE
        if not self.online:
            return self._offline(kind, collection, best_effort=best_effort)
        try:
            raw = await self._gateway.insert(collection, to_payload(payload))
        except GatewayError as exc:
            return self._failed(kind, collection, exc, best_effort=best_effort)

        entity = map_record(collection, raw)
        if not entity.id:
            exc = DbError(f"insert into {collection} returned no id")
            return self._failed(kind, collection, exc, best_effort=best_effort)
        return await self._commit(kind, collection, before=None, after=entity)

    async def update(
        self,
        collection: Collection,
        entity_id: str,
        patch: Mapping[str, object],
        *,
        best_effort: bool = False,
    ) -> MutationOutcome[Entity]:
        kind = MutationKind.UPDATE
        if not self.online:
            return self._offline(kind, collection, best_effort=best_effort)
        before = self._store.get(collection, entity_id, Entity)
        try:
            raw = await self._gateway.update(collection, entity_id, to_payload(patch))
        except GatewayError as exc:
            return self._failed(kind, collection, exc, best_effort=best_effort)

        entity = map_record(collection, raw)
        if not entity.id:
            exc = DbError(f"update of {collection} {entity_id} returned no record")
            return self._failed(kind, collection, exc, best_effort=best_effort)
        return await self._commit(kind, collection, before=before, after=entity)

    async def delete(
        self,
        collection: Collection,
        entity_id: str,
        *,
        best_effort: bool = False,
    ) -> MutationOutcome[Entity]:
        kind = MutationKind.DELETE
        if not self.online:
            return self._offline(kind, collection, best_effort=best_effort)
        before = self._store.get(collection, entity_id, Entity)
        try:
            await self._gateway.delete(collection, entity_id)
        except GatewayError as exc:
            return self._failed(kind, collection, exc, best_effort=best_effort)

        if not self._store.is_open:
            log.debug("Store closed; dropping confirmed delete of %s %s", collection, entity_id)
            return MutationOutcome(kind=kind, collection=collection)
        self._store.remove(collection, entity_id)
        await self._notify(
            CommittedChange(kind=kind, collection=collection, before=before, after=None)
        )
        return MutationOutcome(kind=kind, collection=collection)

    def refuse(
        self, kind: MutationKind, collection: Collection, notice: str
    ) -> MutationOutcome[Entity]:
        """Reject a write before it reaches the gateway (permissions, validation)."""

        log.info("Refusing %s on %s: %s", kind, collection, notice)
        self._notice(notice)
        return MutationOutcome(kind=kind, collection=collection, error=notice)

    # -- optimistic writes ------------------------------------------------------------

    def apply_optimistic(self, entity: Entity) -> None:
        """Commit ``entity`` before its remote write was confirmed.

        Reserved for changes whose failure is inconsequential (read flags). Rules are
        not evaluated for optimistic changes.
        """

        self._store.put(entity)

    # -- internals --------------------------------------------------------------------

    async def _commit(
        self,
        kind: MutationKind,
        collection: Collection,
        *,
        before: Entity | None,
        after: Entity,
    ) -> MutationOutcome[Entity]:
        if not self._store.is_open:
            log.debug("Store closed; dropping confirmed %s of %s %s", kind, collection, after.id)
            return MutationOutcome(kind=kind, collection=collection, entity=after)
        self._store.put(after)
        await self._notify(
            CommittedChange(kind=kind, collection=collection, before=before, after=after)
        )
        return MutationOutcome(kind=kind, collection=collection, entity=after)

    def _notice(self, notice: str) -> None:
        self.notices.append(notice)
        del self.notices[:-NOTICE_LIMIT]

    async def _notify(self, change: CommittedChange) -> None:
        for listener in self._listeners:
            await listener(change)

    def _failed(
        self,
        kind: MutationKind,
        collection: Collection,
        exc: GatewayError,
        *,
        best_effort: bool,
    ) -> MutationOutcome[Entity]:
        notice = describe_failure(exc)
        if best_effort:
            log.warning("Best-effort %s on %s failed: %s", kind, collection, exc)
        else:
            log.error("%s on %s failed: %s", kind.capitalize(), collection, exc)
            self._notice(notice)
        return MutationOutcome(kind=kind, collection=collection, error=notice)

    def _offline(
        self, kind: MutationKind, collection: Collection, *, best_effort: bool
    ) -> MutationOutcome[Entity]:
        log.info("Offline; refusing %s on %s", kind, collection)
        if not best_effort:
            self._notice(OFFLINE_NOTICE)
        return MutationOutcome(kind=kind, collection=collection, error=OFFLINE_NOTICE)
