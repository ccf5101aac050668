"""Session-scoped mirror of remote collections and the writes that maintain it."""

from __future__ import annotations

from .applier import NOTICE_LIMIT, MutationApplier, describe_failure
from .contracts import (
    OFFLINE_NOTICE,
    CommitListener,
    CommittedChange,
    MutationKind,
    MutationOutcome,
)
from .store import MirrorStore

__all__ = [
    "NOTICE_LIMIT",
    "OFFLINE_NOTICE",
    "CommitListener",
    "CommittedChange",
    "MirrorStore",
    "MutationApplier",
    "MutationKind",
    "MutationOutcome",
    "describe_failure",
]
