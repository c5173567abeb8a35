"""Access Accountant — read-access metadata updated on every successful read.

Invariants:
    - access_count increases by exactly 1 per call, never decreases
    - accessed_at is set to `now`; created_at is untouched
    - Caller (RecordRepository) persists the collection afterwards

Design Decisions:
    - In-place mutation: the record lives in the repository's mapping and the
      repository already holds its lock while calling this
"""

from datetime import datetime

from calcshare.core.records import CalculationRecord, utc_now


def record_access(record: CalculationRecord, now: datetime | None = None) -> CalculationRecord:
    """Bump access metadata on record. Returns the same record."""
    record.accessed_at = now or utc_now()
    record.access_count += 1
    return record
