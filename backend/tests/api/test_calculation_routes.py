"""Calculation Routes — HTTP mapping of create/read/update/delete/list/stats.

Invariants:
    - save → {id}; load → payload verbatim; stats use total_calculations / total_accesses
    - 400 bad payload / bad id shape, 401 no identity, 403 not owner, 404 unknown id
"""

from calcshare.core.domain_types import CollectionName
from calcshare.main import app

U1 = {"Authorization": "Bearer token-u1"}
U2 = {"Authorization": "Bearer token-u2"}


async def _save(client, payload, headers=None):
    res = await client.post("/api/save", json=payload, headers=headers or {})
    assert res.status_code == 200
    return res.json()["id"]


# -- save / load ------------------------------------------------------------------

async def test_save_returns_eight_char_id(client):
    res = await client.post("/api/save", json={"amount": 42})
    assert res.status_code == 200
    assert len(res.json()["id"]) == 8


async def test_load_returns_payload_verbatim(client):
    payload = {"people": ["a", "b"], "total": 12.5, "nested": {"k": [1, None]}}
    record_id = await _save(client, payload)
    res = await client.get(f"/api/load/{record_id}")
    assert res.status_code == 200
    assert res.json() == payload


async def test_save_without_identity_is_anonymous(client, store):
    record_id = await _save(client, {"x": 1})
    assert store.snapshots[CollectionName.CALCULATIONS][record_id]["ownerId"] is None


async def test_save_with_identity_sets_owner(client, store):
    record_id = await _save(client, {"x": 1}, U1)
    assert store.snapshots[CollectionName.CALCULATIONS][record_id]["ownerId"] == "u1"


async def test_save_with_unknown_token_is_anonymous(client, store):
    record_id = await _save(client, {"x": 1}, {"Authorization": "Bearer expired"})
    assert store.snapshots[CollectionName.CALCULATIONS][record_id]["ownerId"] is None


async def test_save_rejects_scalar_payload(client):
    res = await client.post("/api/save", json="just text")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_save_rejects_missing_body(client):
    res = await client.post("/api/save")
    assert res.status_code == 400


async def test_save_rejects_invalid_json(client):
    res = await client.post(
        "/api/save", content=b"{broken", headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 400


async def test_save_rejects_oversized_body(client, monkeypatch):
    from calcshare.config import get_settings
    monkeypatch.setattr(get_settings(), "max_payload_bytes", 32)
    res = await client.post("/api/save", json={"blob": "x" * 100})
    assert res.status_code == 413
    assert res.json()["error"]["code"] == "PAYLOAD_TOO_LARGE"


async def test_load_unknown_id_is_404(client):
    res = await client.get("/api/load/unknown1")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_load_malformed_id_is_400(client):
    res = await client.get("/api/load/abc")
    assert res.status_code == 400
    res = await client.get("/api/load/abcdefghijklmnop")
    assert res.status_code == 400


# -- update / delete ----------------------------------------------------------------

async def test_anonymous_record_cannot_be_changed(client):
    record_id = await _save(client, {"amount": 42})
    await client.get(f"/api/load/{record_id}")
    await client.get(f"/api/load/{record_id}")

    res = await client.put(f"/api/calculations/{record_id}", json={"amount": 99}, headers=U1)
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "PERMISSION_DENIED"
    res = await client.delete(f"/api/calculations/{record_id}", headers=U1)
    assert res.status_code == 403

    stats = (await client.get("/api/stats")).json()
    assert stats == {"total_calculations": 1, "total_accesses": 2}


async def test_owner_can_update(client):
    record_id = await _save(client, {"x": 1}, U1)

    res = await client.put(f"/api/calculations/{record_id}", json={"x": 2}, headers=U2)
    assert res.status_code == 403

    res = await client.put(f"/api/calculations/{record_id}", json={"x": 2}, headers=U1)
    assert res.status_code == 200
    assert res.json() == {"success": True}

    assert (await client.get(f"/api/load/{record_id}")).json() == {"x": 2}


async def test_update_requires_identity(client):
    record_id = await _save(client, {"x": 1}, U1)
    res = await client.put(f"/api/calculations/{record_id}", json={"x": 2})
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "AUTHENTICATION_REQUIRED"


async def test_update_unknown_id_is_404(client):
    res = await client.put("/api/calculations/unknown1", json={"x": 2}, headers=U1)
    assert res.status_code == 404


async def test_owner_can_delete(client):
    record_id = await _save(client, {"x": 1}, U1)

    res = await client.delete(f"/api/calculations/{record_id}", headers=U2)
    assert res.status_code == 403

    res = await client.delete(f"/api/calculations/{record_id}", headers=U1)
    assert res.status_code == 200
    assert (await client.get(f"/api/load/{record_id}")).status_code == 404


async def test_delete_requires_identity(client):
    record_id = await _save(client, {"x": 1}, U1)
    res = await client.delete(f"/api/calculations/{record_id}")
    assert res.status_code == 401


# -- list / stats --------------------------------------------------------------------

async def test_list_returns_callers_records_newest_first(client):
    first = await _save(client, {"n": 1}, U1)
    await _save(client, {"n": 2}, U2)
    await _save(client, {"n": 3})
    second = await _save(client, {"n": 4}, U1)

    repo = app.state.records
    (await repo.get(first)).created_at = (await repo.get(first)).created_at.replace(year=2020)

    res = await client.get("/api/calculations", headers=U1)
    assert res.status_code == 200
    listed = res.json()["calculations"]
    assert [c["id"] for c in listed] == [second, first]
    assert listed[0]["data"] == {"n": 4}
    assert set(listed[0]) == {"id", "data", "createdAt", "accessedAt", "accessCount"}


async def test_list_requires_identity(client):
    res = await client.get("/api/calculations")
    assert res.status_code == 401


async def test_stats_on_empty_store(client):
    res = await client.get("/api/stats")
    assert res.status_code == 200
    assert res.json() == {"total_calculations": 0, "total_accesses": 0}


async def test_stats_do_not_count_as_access(client):
    record_id = await _save(client, {"x": 1})
    await client.get("/api/stats")
    await client.get(f"/api/load/{record_id}")
    assert (await client.get("/api/stats")).json()["total_accesses"] == 1
