"""Identifier Generator — short, URL-safe, collision-checked record ids.

Invariants:
    - Every id is exactly ID_LENGTH characters from ID_ALPHABET
    - An id already present in the collection is never returned
    - Collisions retry up to max_attempts, then IdentifierExhaustedError

Design Decisions:
    - secrets.choice over random: ids are capabilities (anyone holding one can
      read), so they must not be predictable
    - Membership test injected as a callable: generator stays pure and has no
      knowledge of how the collection is stored
"""

import logging
import secrets
from collections.abc import Callable

from calcshare.core.domain_types import ID_ALPHABET, ID_LENGTH, ID_MAX_LENGTH, ID_MIN_LENGTH, RecordId
from calcshare.core.errors import IdentifierExhaustedError

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 10


def random_record_id() -> RecordId:
    return RecordId("".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH)))


def generate_record_id(
    exists: Callable[[str], bool],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    candidate: Callable[[], str] = random_record_id,
) -> RecordId:
    """Return a fresh id for which exists(id) is False."""
    for attempt in range(1, max_attempts + 1):
        record_id = candidate()
        if not exists(record_id):
            return RecordId(record_id)
        logger.warning(
            "Identifier collision, retrying",
            extra={"record_id": record_id, "attempt": attempt},
        )
    raise IdentifierExhaustedError(max_attempts)


def is_well_formed_id(record_id: str | None) -> bool:
    """Input-shape guard: length within ID_MIN_LENGTH..ID_MAX_LENGTH."""
    return bool(record_id) and ID_MIN_LENGTH <= len(record_id) <= ID_MAX_LENGTH
