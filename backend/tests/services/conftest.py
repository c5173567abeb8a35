"""Service test fixtures — repositories over an in-memory snapshot store."""

import pytest

from calcshare.infrastructure.snapshot_store import InMemorySnapshotStore
from calcshare.services.record_repository import RecordRepository
from calcshare.services.user_repository import UserRepository


@pytest.fixture
def store():
    return InMemorySnapshotStore()


@pytest.fixture
def records(store):
    return RecordRepository(store)


@pytest.fixture
def users(store):
    return UserRepository(store)
