"""Value types exchanged between the mutation applier and its callers."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from internsync.domain.model import Collection, Entity


OFFLINE_NOTICE = "You are offline. Changes cannot be saved until the connection returns."


class MutationKind(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True, kw_only=True)
class MutationOutcome[TEntity: Entity]:
    """Result of one remote write.

    ``entity`` is the committed mirror entity (``None`` for deletes and failures).
    ``error`` is the user-facing notice; the mirror was left untouched when it is set.
    """

    kind: MutationKind
    collection: Collection
    entity: TEntity | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True, frozen=True, kw_only=True)
class CommittedChange:
    """A confirmed change that has just been committed to the mirror."""

    kind: MutationKind
    collection: Collection
    before: Entity | None
    after: Entity | None


type CommitListener = Callable[[CommittedChange], Awaitable[None]]
