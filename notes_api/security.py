"""
Notes API — Access-Control Gate
=================================

What:  Resolves the caller's identity from the `Authorization: Bearer` header.
How:   `AccessGate` wraps the TokenService. Two FastAPI dependencies expose it:

       require_identity   strict: missing/invalid/expired credential → 401
       optional_identity  optional: any failure → anonymous (None)

Who:   Route handlers declare one of the dependencies; the resolved identity is
       also attached to `request.state.identity` for middleware and logging.

The gate holds no per-request state. The gate instance lives on
`app.state.access_gate`, built by `create_app()` from Settings.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from notes_api.exceptions import AuthenticationError

if TYPE_CHECKING:
    from notes_api.services.token_service import TokenService

logger = logging.getLogger(__name__)

# auto_error=False: the gate decides between 401 and anonymous itself
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, as carried by a verified bearer token."""

    user_id: UUID
    email: str


class AccessGate:
    """Turns bearer credentials into an `Identity`, strictly or optionally."""

    def __init__(self, token_service: "TokenService"):
        self.token_service = token_service

    def authenticate(self, credentials: Optional[HTTPAuthorizationCredentials]) -> Identity:
        """
        Strict mode.

        Raises:
            AuthenticationError: header missing, scheme not Bearer, or the token
                                 fails verification
        """
        if credentials is None:
            raise AuthenticationError("Missing bearer token", context={"reason": "missing"})
        if credentials.scheme.lower() != "bearer":
            raise AuthenticationError("Invalid authorization scheme", context={"reason": "scheme"})
        return self.token_service.decode(credentials.credentials)

    def identify(self, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[Identity]:
        """Optional mode: same checks, but every failure means anonymous."""
        if credentials is None:
            return None
        try:
            return self.authenticate(credentials)
        except AuthenticationError as e:
            logger.debug("Treating caller as anonymous: %s", e.context.get("reason", e.message))
            return None


# ── FastAPI Dependencies ──────────────────────────────────────────────────
async def require_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    gate: AccessGate = request.app.state.access_gate
    identity = gate.authenticate(credentials)
    request.state.identity = identity
    return identity


async def optional_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Identity]:
    gate: AccessGate = request.app.state.access_gate
    identity = gate.identify(credentials)
    request.state.identity = identity
    return identity
