"""Health & Readiness Probes — liveness and readiness endpoints.

Invariants:
    - GET /health always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the snapshot store is not writable (readiness)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from
      the load balancer
    - /health keeps the {status, timestamp} body existing monitors expect
"""

import logging
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from calcshare.core.records import format_timestamp, utc_now

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {"status": "ok", "timestamp": format_timestamp(utc_now())}


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness probe — includes snapshot store writability."""
    store = getattr(request.app.state, "store", None)
    store_ok = await store.health_check() if store else False
    if not store_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "storage_unavailable",
            },
        )
    return {"status": "ready", "checks": {"storage": "healthy"}}
