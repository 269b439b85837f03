"""
Tourist Spot API — Request Dependencies
========================================

What:  FastAPI dependencies that hand route handlers their collaborators and
       gate session-protected routes.
How:   Services live on `app.state` (constructed once in create_app/lifespan);
       require_session is the AuthGuard.

AuthGuard (require_session):
    1. Read the token cookie         → absent:  UnauthenticatedError (403)
    2. TokenIssuer.verify            → Err:     ForbiddenError (403)
    3. Ok(identity)                  → request.state.identity, returned
    The outcome ("missing", "expired", "invalid" or "ok") is left on
    request.state.session for the access log.
    A failed verification ends the request; nothing is retried.
"""

import logging

from fastapi import Depends, Request

from tourist_spot.exceptions import ForbiddenError, UnauthenticatedError
from tourist_spot.schemas.tourist_spot import SessionIdentity
from tourist_spot.services.spot_service import TouristSpotService
from tourist_spot.services.token_service import TokenIssuer

logger = logging.getLogger(__name__)


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_spot_service(request: Request) -> TouristSpotService:
    return request.app.state.spot_service


async def require_session(
    request: Request,
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> SessionIdentity:
    """Validate the session cookie and expose the verified identity."""
    token = request.cookies.get(issuer.cookie_name)
    if not token:
        request.state.session = "missing"
        raise UnauthenticatedError()

    result = issuer.verify(token)
    request.state.session = result.reason or "ok"
    if not result.ok:
        logger.warning("Rejected session token: %s", result.reason)
        raise ForbiddenError(context={"reason": result.reason})

    request.state.identity = result.identity
    return result.identity
