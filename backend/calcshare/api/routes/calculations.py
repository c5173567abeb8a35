"""Calculations — save, load, update, delete, list and stats endpoints.

Invariants:
    - save is open to anonymous callers; the record is owned iff a caller identity resolved
    - load needs no identity (the id is the capability) and bumps access metadata
    - update/delete/list require an identity; ownership is checked by the repository
    - Stored payloads are returned exactly as saved

Design Decisions:
    - /api/save and /api/load/{id} keep the paths shared links already use;
      owner operations live under /api/calculations
    - Payload taken as raw JSON (Body of Any): the repository validates shape,
      so "not an object" and "missing" map to the same 400 as the repository's
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends

from calcshare.api.dependencies import (
    enforce_payload_limit, get_caller_identity, get_record_repository,
    require_caller_identity,
)
from calcshare.core.records import CallerIdentity
from calcshare.schemas.calculation import (
    CalculationList, CalculationSummary, MutationResponse, SaveResponse,
    StatsResponse,
)
from calcshare.services.record_repository import RecordRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["calculations"])


@router.post(
    "/save", response_model=SaveResponse,
    dependencies=[Depends(enforce_payload_limit)],
)
async def save_calculation(
    payload: Any = Body(None),
    identity: CallerIdentity | None = Depends(get_caller_identity),
    records: RecordRepository = Depends(get_record_repository),
):
    """Store a calculation and return its short id."""
    owner_id = identity.user_id if identity else None
    record_id = await records.create(payload, owner_id)
    return SaveResponse(id=record_id)


@router.get("/load/{record_id}")
async def load_calculation(
    record_id: str, records: RecordRepository = Depends(get_record_repository),
):
    """Return the stored payload for record_id."""
    return await records.read(record_id)


@router.put(
    "/calculations/{record_id}", response_model=MutationResponse,
    dependencies=[Depends(enforce_payload_limit)],
)
async def update_calculation(
    record_id: str,
    payload: Any = Body(None),
    identity: CallerIdentity = Depends(require_caller_identity),
    records: RecordRepository = Depends(get_record_repository),
):
    """Replace the payload of a calculation the caller owns."""
    success = await records.update(record_id, payload, identity.user_id)
    return MutationResponse(success=success)


@router.delete("/calculations/{record_id}", response_model=MutationResponse)
async def delete_calculation(
    record_id: str,
    identity: CallerIdentity = Depends(require_caller_identity),
    records: RecordRepository = Depends(get_record_repository),
):
    """Delete a calculation the caller owns."""
    success = await records.delete(record_id, identity.user_id)
    return MutationResponse(success=success)


@router.get("/calculations", response_model=CalculationList)
async def list_calculations(
    identity: CallerIdentity = Depends(require_caller_identity),
    records: RecordRepository = Depends(get_record_repository),
):
    """List the caller's calculations, newest first."""
    owned = await records.list_by_owner(identity.user_id)
    return CalculationList(
        calculations=[
            CalculationSummary(
                id=r.id,
                data=r.data,
                created_at=r.created_at,
                accessed_at=r.accessed_at,
                access_count=r.access_count,
            )
            for r in owned
        ],
    )


@router.get("/stats", response_model=StatsResponse)
async def get_stats(records: RecordRepository = Depends(get_record_repository)):
    """Aggregate counters for monitoring."""
    stats = await records.stats()
    return StatsResponse(
        total_calculations=stats["count"],
        total_accesses=stats["total_accesses"],
    )
