"""API test fixtures — in-memory app state + httpx test client.

Invariants:
    - Every test gets a fresh in-memory snapshot store and repositories
    - Bearer tokens "token-u1" / "token-u2" resolve to users u1 / u2

Design Decisions:
    - app.state assigned directly: ASGITransport does not run the lifespan
"""

import pytest
from httpx import ASGITransport, AsyncClient

from calcshare.config import Settings
from calcshare.infrastructure.snapshot_store import InMemorySnapshotStore
from calcshare.main import app, init_app_state
from calcshare.services.identity import StaticTokenIdentityResolver


@pytest.fixture
def store():
    return InMemorySnapshotStore()


@pytest.fixture
async def client(store):
    resolver = StaticTokenIdentityResolver({
        "token-u1": {"user_id": "u1", "email": "u1@example.com", "name": "User One"},
        "token-u2": {"user_id": "u2", "email": "u2@example.com", "name": "User Two"},
    })
    init_app_state(app, Settings(), store=store, identity_resolver=resolver)

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
