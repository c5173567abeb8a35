"""Request Dependencies — repository lookup and caller-identity resolution.

Invariants:
    - Repositories and the identity resolver live on app.state (set in lifespan)
    - Missing/invalid bearer credentials resolve to None, never to an error
    - require_caller_identity is the single place that raises 401

Design Decisions:
    - app.state over module singletons: tests assign in-memory repositories
      without patching imports
"""

from typing import Annotated

from fastapi import Depends, Header, Request

from calcshare.config import get_settings
from calcshare.core.errors import AuthenticationRequiredError, PayloadTooLargeError
from calcshare.core.records import CallerIdentity
from calcshare.core.repository_protocols import IdentityResolver
from calcshare.services.identity import parse_bearer
from calcshare.services.record_repository import RecordRepository
from calcshare.services.user_repository import UserRepository


def get_record_repository(request: Request) -> RecordRepository:
    return request.app.state.records


def get_user_repository(request: Request) -> UserRepository:
    return request.app.state.users


def get_identity_resolver(request: Request) -> IdentityResolver:
    return request.app.state.identity_resolver


async def get_caller_identity(
    authorization: Annotated[str | None, Header()] = None,
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> CallerIdentity | None:
    """Resolve the bearer credential, if any, to a caller identity."""
    token = parse_bearer(authorization)
    if token is None:
        return None
    return await resolver.resolve(token)


async def require_caller_identity(
    identity: CallerIdentity | None = Depends(get_caller_identity),
) -> CallerIdentity:
    if identity is None:
        raise AuthenticationRequiredError()
    return identity


async def enforce_payload_limit(request: Request) -> None:
    """Reject bodies larger than settings.max_payload_bytes (413)."""
    limit = get_settings().max_payload_bytes
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        raise PayloadTooLargeError(limit)
    body = await request.body()
    if len(body) > limit:
        raise PayloadTooLargeError(limit)
