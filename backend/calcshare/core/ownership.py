"""Ownership Authorizer — who may mutate a record.

Invariants:
    - Allowed iff caller_id is present and equals record.owner_id exactly
    - Anonymous records (owner_id None) are never mutable
    - No wildcard, no admin override
    - Only update and delete consult this module; read and create are public

Design Decisions:
    - Pure decision function + raising guard: repositories call ensure_owner,
      tests exercise authorize directly
"""

from calcshare.core.domain_types import UserId
from calcshare.core.errors import PermissionDeniedError
from calcshare.core.records import CalculationRecord


def authorize(record: CalculationRecord, caller_id: UserId | None) -> bool:
    """Decide whether caller_id may mutate record. Pure."""
    if caller_id is None or record.owner_id is None:
        return False
    return record.owner_id == caller_id


def ensure_owner(record: CalculationRecord, caller_id: UserId | None) -> None:
    """Raise PermissionDeniedError unless authorize() allows the caller."""
    if not authorize(record, caller_id):
        raise PermissionDeniedError(record.id)
