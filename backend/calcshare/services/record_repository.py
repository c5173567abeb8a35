"""Record Repository — in-memory id → record mapping backed by a SnapshotStore.

Invariants:
    - Every operation, reads included, runs under one asyncio.Lock held across
      read-state → compute → persist (reads bump access metadata, so they write)
    - Every state change is followed by a full-collection save before the lock
      is released
    - update/delete check existence first (404), then ownership (403)
    - A failed save is logged, never raised: the in-memory mutation stands
    - stats() and list_by_owner() never touch access metadata
    - list_by_owner(None) is empty: anonymous records are never listed

Design Decisions:
    - Explicit repository object, store injected at construction: no module
      globals, tests substitute InMemorySnapshotStore
    - load() skips malformed entries individually instead of dropping the file
"""

import asyncio
import logging
from collections.abc import Callable

from calcshare.core.access import record_access
from calcshare.core.domain_types import CollectionName, Payload, RecordId, UserId
from calcshare.core.errors import PersistenceError, ResourceNotFoundError, ValidationError
from calcshare.core.identifiers import (
    DEFAULT_MAX_ATTEMPTS, generate_record_id, is_well_formed_id, random_record_id,
)
from calcshare.core.ownership import ensure_owner
from calcshare.core.record_stats import compute_record_stats, sort_newest_first
from calcshare.core.records import CalculationRecord, ensure_structured_payload, utc_now
from calcshare.core.repository_protocols import SnapshotStore

logger = logging.getLogger(__name__)


class RecordRepository:
    """Create/read/update/delete of calculation records with ownership checks."""

    collection_name = CollectionName.CALCULATIONS

    def __init__(
        self,
        store: SnapshotStore,
        id_max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        id_factory: Callable[[], str] = random_record_id,
    ):
        self._store = store
        self._id_max_attempts = id_max_attempts
        self._id_factory = id_factory
        self._records: dict[RecordId, CalculationRecord] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._records)

    async def load(self) -> int:
        """Replace in-memory state with the persisted snapshot. Returns record count."""
        snapshot = await self._store.load(self.collection_name)
        records: dict[RecordId, CalculationRecord] = {}
        for record_id, entry in snapshot.items():
            try:
                records[RecordId(record_id)] = CalculationRecord.from_snapshot(record_id, entry)
            except (AttributeError, TypeError, ValueError, OverflowError) as e:
                logger.warning(
                    f"Skipping malformed calculation entry: {e}",
                    extra={"record_id": record_id},
                )
        async with self._lock:
            self._records = records
        return len(records)

    async def flush(self) -> None:
        """Persist current state (shutdown hook)."""
        async with self._lock:
            await self._persist()

    # ─── Operations ─────────────────────────────────────────────

    async def create(self, data: Payload, caller_id: UserId | None = None) -> RecordId:
        ensure_structured_payload(data)
        async with self._lock:
            record_id = generate_record_id(
                lambda candidate: candidate in self._records,
                max_attempts=self._id_max_attempts,
                candidate=self._id_factory,
            )
            now = utc_now()
            self._records[record_id] = CalculationRecord(
                id=record_id, data=data, owner_id=caller_id,
                created_at=now, accessed_at=now, access_count=0,
            )
            await self._persist()
        logger.info(
            f"Saved calculation: {record_id}",
            extra={"record_id": record_id, "owner_id": caller_id},
        )
        return record_id

    async def read(self, record_id: str) -> Payload:
        """Return stored data; bumps access metadata and persists."""
        self._check_id_shape(record_id)
        async with self._lock:
            record = self._get_or_404(record_id)
            record_access(record)
            await self._persist()
            data = record.data
        logger.info(f"Loaded calculation: {record_id}", extra={"record_id": record_id})
        return data

    async def update(self, record_id: str, data: Payload, caller_id: UserId | None) -> bool:
        self._check_id_shape(record_id)
        ensure_structured_payload(data)
        async with self._lock:
            record = self._get_or_404(record_id)
            ensure_owner(record, caller_id)
            record.data = data
            record.accessed_at = utc_now()
            await self._persist()
        logger.info(
            f"Updated calculation: {record_id}",
            extra={"record_id": record_id, "owner_id": caller_id},
        )
        return True

    async def delete(self, record_id: str, caller_id: UserId | None) -> bool:
        self._check_id_shape(record_id)
        async with self._lock:
            record = self._get_or_404(record_id)
            ensure_owner(record, caller_id)
            del self._records[record.id]
            await self._persist()
        logger.info(
            f"Deleted calculation: {record_id}",
            extra={"record_id": record_id, "owner_id": caller_id},
        )
        return True

    async def list_by_owner(self, caller_id: UserId | None) -> list[CalculationRecord]:
        """Records owned by caller_id, newest first. Anonymous records belong to nobody."""
        if caller_id is None:
            return []
        async with self._lock:
            owned = [r for r in self._records.values() if r.owner_id == caller_id]
        return sort_newest_first(owned)

    async def stats(self) -> dict:
        async with self._lock:
            return compute_record_stats(self._records.values())

    async def get(self, record_id: str) -> CalculationRecord | None:
        """Direct lookup without access accounting."""
        async with self._lock:
            return self._records.get(RecordId(record_id))

    # ─── Helpers ────────────────────────────────────────────────

    @staticmethod
    def _check_id_shape(record_id: str) -> None:
        if not is_well_formed_id(record_id):
            raise ValidationError("Invalid ID format", field="id")

    def _get_or_404(self, record_id: str) -> CalculationRecord:
        record = self._records.get(RecordId(record_id))
        if record is None:
            raise ResourceNotFoundError("Calculation", record_id)
        return record

    async def _persist(self) -> None:
        """Save the full collection. Caller holds the lock."""
        snapshot = {rid: r.to_snapshot() for rid, r in self._records.items()}
        try:
            await self._store.save(self.collection_name, snapshot)
        except PersistenceError as e:
            logger.error(
                f"Failed to save data, memory and disk diverge: {e.message}",
                extra={
                    "error_code": e.code,
                    "collection": self.collection_name.value,
                    "count": len(snapshot),
                },
            )
