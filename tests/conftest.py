from __future__ import annotations

import pytest

from internsync.domain.mirror import MirrorStore, MutationApplier
from tests.support.gateway import InMemoryGateway


@pytest.fixture
def gateway() -> InMemoryGateway:
    return InMemoryGateway()


@pytest.fixture
def store() -> MirrorStore:
    return MirrorStore()


@pytest.fixture
def applier(gateway: InMemoryGateway, store: MirrorStore) -> MutationApplier:
    return MutationApplier(gateway, store)
