"""Identity Resolution — bearer credential → CallerIdentity.

Invariants:
    - Resolvers never raise for bad credentials; they return None (no identity)
    - parse_bearer accepts only the "Bearer" scheme (case-insensitive)

Design Decisions:
    - OAuth / JWT verification is an external collaborator: anything that
      satisfies the IdentityResolver protocol can be plugged into app.state
    - StaticTokenIdentityResolver reads a table from settings — for local
      development and tests, not for production deployments
"""

import logging
from collections.abc import Mapping

from calcshare.core.domain_types import UserId
from calcshare.core.records import CallerIdentity

logger = logging.getLogger(__name__)


def parse_bearer(authorization: str | None) -> str | None:
    """Extract the token from an Authorization header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class AnonymousIdentityResolver:
    """Resolves nothing — every caller is anonymous."""

    async def resolve(self, token: str) -> CallerIdentity | None:
        return None


class StaticTokenIdentityResolver:
    """Looks tokens up in a fixed table of {token: {user_id, email, name, picture}}."""

    def __init__(self, table: Mapping[str, Mapping[str, str]]):
        self._identities: dict[str, CallerIdentity] = {}
        for token, entry in table.items():
            user_id = entry.get("user_id")
            if not user_id:
                logger.warning("Static identity without user_id ignored")
                continue
            self._identities[token] = CallerIdentity(
                user_id=UserId(user_id),
                email=entry.get("email"),
                name=entry.get("name"),
                picture=entry.get("picture"),
            )

    async def resolve(self, token: str) -> CallerIdentity | None:
        return self._identities.get(token)


def build_identity_resolver(static_identities: Mapping[str, Mapping[str, str]]):
    """Pick the resolver implied by settings."""
    if static_identities:
        return StaticTokenIdentityResolver(static_identities)
    return AnonymousIdentityResolver()
