"""Record Stats — pure aggregate statistics over the record collection.

Invariants:
    - Read-only: never mutates records, never touches access metadata
    - Returns a flat dict of integer counts (serializable as JSON)
"""

from collections.abc import Iterable

from calcshare.core.records import CalculationRecord


def compute_record_stats(records: Iterable[CalculationRecord]) -> dict:
    """Count records and sum their access counts. Pure, no IO."""
    count = 0
    total_accesses = 0
    for record in records:
        count += 1
        total_accesses += record.access_count
    return {"count": count, "total_accesses": total_accesses}


def sort_newest_first(records: Iterable[CalculationRecord]) -> list[CalculationRecord]:
    """Order by created_at descending; ties keep insertion order."""
    return sorted(records, key=lambda r: r.created_at, reverse=True)
