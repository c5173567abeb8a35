"""User Repository — user profiles keyed by identity-provider subject.

Invariants:
    - created_at is set once on first login and never changes
    - email/name/picture/last_login refreshed on every login
    - Same lock + persist-after-mutation discipline as RecordRepository
"""

import asyncio
import logging

from calcshare.core.domain_types import CollectionName, UserId
from calcshare.core.errors import PersistenceError
from calcshare.core.records import CallerIdentity, UserProfile, utc_now
from calcshare.core.repository_protocols import SnapshotStore

logger = logging.getLogger(__name__)


class UserRepository:
    """Tracks who has logged in and when."""

    collection_name = CollectionName.USERS

    def __init__(self, store: SnapshotStore):
        self._store = store
        self._users: dict[UserId, UserProfile] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._users)

    async def load(self) -> int:
        snapshot = await self._store.load(self.collection_name)
        users: dict[UserId, UserProfile] = {}
        for user_id, entry in snapshot.items():
            try:
                users[UserId(user_id)] = UserProfile.from_snapshot(user_id, entry)
            except (AttributeError, TypeError, ValueError, OverflowError) as e:
                logger.warning(f"Skipping malformed user entry: {e}")
        async with self._lock:
            self._users = users
        return len(users)

    async def flush(self) -> None:
        async with self._lock:
            await self._persist()

    async def record_login(self, identity: CallerIdentity) -> UserProfile:
        """Create or refresh the caller's profile, then persist."""
        async with self._lock:
            now = utc_now()
            profile = self._users.get(identity.user_id)
            if profile is None:
                profile = UserProfile(
                    id=identity.user_id, created_at=now, last_login=now,
                )
                self._users[identity.user_id] = profile
                logger.info("New user registered", extra={"owner_id": identity.user_id})
            profile.email = identity.email
            profile.name = identity.name
            profile.picture = identity.picture
            profile.last_login = now
            await self._persist()
            return profile

    async def get(self, user_id: UserId) -> UserProfile | None:
        async with self._lock:
            return self._users.get(user_id)

    async def _persist(self) -> None:
        snapshot = {uid: p.to_snapshot() for uid, p in self._users.items()}
        try:
            await self._store.save(self.collection_name, snapshot)
        except PersistenceError as e:
            logger.error(
                f"Failed to save users, memory and disk diverge: {e.message}",
                extra={"error_code": e.code, "collection": self.collection_name.value},
            )
