"""
Base building block for mirrored records:
a remote-assigned identity plus the collection it lives in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from internsync.domain.model.enums import Collection

SYSTEM_SENDER = "SYSTEM"
BROADCAST_RECIPIENT = "ALL"


@dataclass(frozen=True, kw_only=True)
class Entity:
    """Immutable snapshot of one remote row.

    The id is always the one assigned by the remote store; entities are only ever
    constructed from confirmed records, so there are no client-generated ids here.
    """

    id: str

    # class-level discriminator; subclasses must override
    COLLECTION: ClassVar[Collection]

    @property
    def collection(self) -> Collection:
        return self.COLLECTION
