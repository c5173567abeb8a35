"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - RecordId is exactly ID_LENGTH characters drawn from ID_ALPHABET
    - UserId is the identity provider's subject claim, compared by exact equality
    - Collection names are encoded as an Enum — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enum for collections: value doubles as the snapshot file stem
"""

import string
from enum import Enum
from typing import Any, NewType


# ─── Identity Types ──────────────────────────────────────────────

RecordId = NewType("RecordId", str)
UserId = NewType("UserId", str)


# ─── Value Types ─────────────────────────────────────────────────

# Opaque caller payload (dict or list). Never inspected by the core.
Payload = Any

# Snapshot of one collection: identifier → JSON-safe entry dict
Collection = dict[str, dict]


# ─── Identifier Shape ────────────────────────────────────────────

ID_ALPHABET = string.ascii_letters + string.digits + "_-"
ID_LENGTH = 8

# Input-shape guard applied before lookup (accepts legacy ids of other lengths)
ID_MIN_LENGTH = 6
ID_MAX_LENGTH = 12


# ─── Enums ───────────────────────────────────────────────────────

class CollectionName(str, Enum):
    """Persisted collections — value is the snapshot file stem."""
    CALCULATIONS = "calculations"
    USERS = "users"
