"""Records — domain value objects and their snapshot (de)serialization.

Invariants:
    - CalculationRecord.id and owner_id never change after construction
    - access_count is a non-negative int; loaded snapshots default it to 0
    - Timestamps are timezone-aware UTC; serialized as ISO-8601 with a 'Z' suffix
    - to_snapshot produces JSON-safe dicts using the camelCase keys on disk
    - CallerIdentity is immutable — the core reads only user_id from it

Design Decisions:
    - Plain dataclasses over pydantic models: no validation is needed on the
      opaque payload, and records are mutated in place by access accounting
    - The record's id is the snapshot key, not a field inside the entry
      (on-disk layout: {id: {data, ownerId, createdAt, accessedAt, accessCount}})
    - Missing keys fall back to defaults (forward-compatible with older files)
    - Payloads are checked for JSON-serializability on the way in, so one bad
      record can never block every later snapshot write
"""

import json
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone

from calcshare.core.domain_types import Payload, RecordId, UserId
from calcshare.core.errors import ValidationError


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """ISO-8601, millisecond precision, 'Z' suffix."""
    return (
        value.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def parse_timestamp(value: str | None, default: datetime) -> datetime:
    """Parse an ISO-8601 timestamp; unparsable or missing → default."""
    if not value or not isinstance(value, str):
        return default
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return default
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def ensure_structured_payload(data: Payload) -> None:
    """Accept only JSON objects/arrays that the snapshot store can serialize."""
    if data is None or not isinstance(data, (dict, list)):
        raise ValidationError("Invalid data", field="data")
    try:
        json.dumps(data)
    except (TypeError, ValueError) as e:
        raise ValidationError("Data is not JSON-serializable", field="data") from e


# ─── Caller Identity ─────────────────────────────────────────────

@dataclass(frozen=True)
class CallerIdentity:
    """Resolved identity of the requester, produced by an IdentityResolver."""
    user_id: UserId
    email: str | None = None
    name: str | None = None
    picture: str | None = None


# ─── Calculation Record ──────────────────────────────────────────

@dataclass
class CalculationRecord:
    """A stored calculation payload keyed by a short public identifier."""
    id: RecordId
    data: Payload
    owner_id: UserId | None = None
    created_at: datetime = field(default_factory=utc_now)
    accessed_at: datetime = field(default_factory=utc_now)
    access_count: int = 0

    def to_snapshot(self) -> dict:
        return {
            "data": self.data,
            "ownerId": self.owner_id,
            "createdAt": format_timestamp(self.created_at),
            "accessedAt": format_timestamp(self.accessed_at),
            "accessCount": self.access_count,
        }

    @classmethod
    def from_snapshot(cls, record_id: str, entry: dict) -> "CalculationRecord":
        now = utc_now()
        created_at = parse_timestamp(entry.get("createdAt"), now)
        count = entry.get("accessCount") or 0
        if isinstance(count, float) and not math.isfinite(count):
            raise ValueError(f"accessCount is not finite: {count}")
        return cls(
            id=RecordId(record_id),
            data=entry.get("data"),
            owner_id=entry.get("ownerId"),
            created_at=created_at,
            accessed_at=parse_timestamp(entry.get("accessedAt"), created_at),
            access_count=max(int(count), 0),
        )


# ─── User Profile ────────────────────────────────────────────────

@dataclass
class UserProfile:
    """Descriptive attributes of a user, refreshed on every login."""
    id: UserId
    email: str | None = None
    name: str | None = None
    picture: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    last_login: datetime = field(default_factory=utc_now)

    def to_snapshot(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "picture": self.picture,
            "createdAt": format_timestamp(self.created_at),
            "lastLogin": format_timestamp(self.last_login),
        }

    @classmethod
    def from_snapshot(cls, user_id: str, entry: dict) -> "UserProfile":
        now = utc_now()
        created_at = parse_timestamp(entry.get("createdAt"), now)
        return cls(
            id=UserId(entry.get("id") or user_id),
            email=entry.get("email"),
            name=entry.get("name"),
            picture=entry.get("picture"),
            created_at=created_at,
            last_login=parse_timestamp(entry.get("lastLogin"), created_at),
        )
