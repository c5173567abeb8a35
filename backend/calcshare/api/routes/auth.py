"""Auth — login bookkeeping for callers resolved from a bearer credential.

Invariants:
    - Both endpoints require a resolved caller identity (401 otherwise)
    - login creates the profile on first call and refreshes it afterwards
    - Credential verification itself happens in the IdentityResolver

Design Decisions:
    - No token issuance here: the identity provider owns credentials, this
      service only records who logged in
"""

import logging

from fastapi import APIRouter, Depends

from calcshare.api.dependencies import get_user_repository, require_caller_identity
from calcshare.core.errors import ResourceNotFoundError
from calcshare.core.records import CallerIdentity, UserProfile
from calcshare.schemas.user import UserProfileResponse
from calcshare.services.user_repository import UserRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])


def _to_response(profile: UserProfile) -> UserProfileResponse:
    return UserProfileResponse(
        id=profile.id,
        email=profile.email,
        name=profile.name,
        picture=profile.picture,
        created_at=profile.created_at,
        last_login=profile.last_login,
    )


@router.post("/login", response_model=UserProfileResponse)
async def login(
    identity: CallerIdentity = Depends(require_caller_identity),
    users: UserRepository = Depends(get_user_repository),
):
    """Record a login for the caller and return their profile."""
    profile = await users.record_login(identity)
    logger.info("User logged in", extra={"owner_id": identity.user_id})
    return _to_response(profile)


@router.get("/me", response_model=UserProfileResponse)
async def me(
    identity: CallerIdentity = Depends(require_caller_identity),
    users: UserRepository = Depends(get_user_repository),
):
    """Return the caller's stored profile."""
    profile = await users.get(identity.user_id)
    if profile is None:
        raise ResourceNotFoundError("User", identity.user_id)
    return _to_response(profile)
