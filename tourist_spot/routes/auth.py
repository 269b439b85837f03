"""
Tourist Spot API — Session Route Handlers
==========================================

What:  POST /jwt (issue a session cookie) and POST /jwt-logout (clear it).
How:   The body of /jwt is the identity claim, taken as-is; the token only
       travels in the cookie, there is no endpoint that returns it.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Response

from tourist_spot.dependencies import get_token_issuer
from tourist_spot.schemas.tourist_spot import ApiResponse
from tourist_spot.services.token_service import TokenIssuer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Session"])


@router.post(
    "/jwt",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    responses={401: {"description": "Identity claim missing", "model": ApiResponse}},
    summary="Start a session",
)
async def issue_token(
    response: Response,
    identity_claim: Any = Body(default=None),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> ApiResponse:
    token = issuer.issue(identity_claim)
    issuer.set_cookie(response, token)
    return ApiResponse(success=True)


@router.post(
    "/jwt-logout",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    summary="End a session",
    description=(
        "Clears the session cookie. The token itself stays valid until it "
        "expires; there is no server-side revocation."
    ),
)
async def logout(
    response: Response,
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> ApiResponse:
    issuer.clear_cookie(response)
    return ApiResponse(success=True)
