"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO (file writes, token verification)
"""

from typing import Protocol

from calcshare.core.domain_types import Collection, CollectionName
from calcshare.core.records import CallerIdentity


class SnapshotStore(Protocol):
    """Contract for whole-collection persistence — implemented by infrastructure.

    load() never raises for missing or corrupt content (returns {}).
    save() raises PersistenceError on write failure.
    """
    async def load(self, name: CollectionName) -> Collection: ...
    async def save(self, name: CollectionName, collection: Collection) -> None: ...
    async def health_check(self) -> bool: ...


class IdentityResolver(Protocol):
    """Contract for bearer-credential verification — external collaborator.

    Returns None for absent, unknown or expired credentials.
    """
    async def resolve(self, token: str) -> CallerIdentity | None: ...
