"""Identifier Generator — shape, uniqueness and collision retry."""

import pytest

from calcshare.core.domain_types import ID_ALPHABET, ID_LENGTH
from calcshare.core.errors import IdentifierExhaustedError
from calcshare.core.identifiers import generate_record_id, is_well_formed_id, random_record_id


def test_random_id_has_fixed_length_and_alphabet():
    for _ in range(200):
        rid = random_record_id()
        assert len(rid) == ID_LENGTH
        assert set(rid) <= set(ID_ALPHABET)


def test_alphabet_is_url_safe():
    assert len(ID_ALPHABET) == 64
    assert set(ID_ALPHABET) <= set(
        "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_-"
    )


def test_generate_returns_id_absent_from_collection():
    existing = {"AAAAAAAA"}
    rid = generate_record_id(lambda c: c in existing)
    assert rid not in existing


def test_collision_is_retried_not_overwritten():
    candidates = iter(["taken001", "taken002", "freeId01"])
    existing = {"taken001", "taken002"}
    rid = generate_record_id(
        lambda c: c in existing, candidate=lambda: next(candidates),
    )
    assert rid == "freeId01"


def test_exhausted_attempts_raise():
    with pytest.raises(IdentifierExhaustedError) as exc_info:
        generate_record_id(lambda c: True, max_attempts=3, candidate=lambda: "samesame")
    assert exc_info.value.attempts == 3
    assert exc_info.value.http_status == 500


@pytest.mark.parametrize("value, ok", [
    ("abcdef", True),
    ("abcdefgh", True),
    ("abcdefghijkl", True),
    ("abcde", False),
    ("abcdefghijklm", False),
    ("", False),
    (None, False),
])
def test_well_formed_id_guard(value, ok):
    assert is_well_formed_id(value) is ok
