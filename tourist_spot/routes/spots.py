"""
Tourist Spot API — Tourist Spot Route Handlers
===============================================

What:  HTTP surface for tourist spots (list, owner list, detail, create,
       update, delete).
How:   Thin handlers: take path/body values, call TouristSpotService, wrap
       the result in the `{success, message?, data?}` envelope. Failures are
       raised as application exceptions and formatted by main.py.

Route Inventory:
    GET    /tourist-spot                 all spots             404 when empty
    GET    /tourist-spot/user/{email}    session owner's spots 400/403/404
    GET    /tourist-spot/{id}            one spot              400/404
    POST   /tourist-spot                 create (201 + id)     400/500
    PATCH  /tourist-spot/{id}            full-field update     400/500
    DELETE /tourist-spot/{id}            delete + image        400/404

Only the owner listing requires a session. Create/update/delete trust the
caller; ownership is not checked on those routes.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from tourist_spot.dependencies import get_spot_service, require_session
from tourist_spot.schemas.tourist_spot import (
    ApiResponse,
    CreatedResponse,
    SessionIdentity,
    SpotListResponse,
    SpotResponse,
    TouristSpotUpdate,
)
from tourist_spot.services.spot_service import TouristSpotService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tourist-spot", tags=["Tourist Spots"])


@router.get(
    "",
    response_model=SpotListResponse,
    responses={404: {"description": "Collection is empty", "model": ApiResponse}},
    summary="List every tourist spot",
)
async def list_spots(
    service: TouristSpotService = Depends(get_spot_service),
) -> SpotListResponse:
    data = await service.list_all()
    return SpotListResponse(success=True, data=data)


@router.get(
    "/user/{email}",
    response_model=SpotListResponse,
    responses={
        400: {"description": "Email missing", "model": ApiResponse},
        403: {"description": "No session, bad token, or not the owner", "model": ApiResponse},
        404: {"description": "Owner has no spots", "model": ApiResponse},
    },
    summary="List the session owner's tourist spots",
)
async def list_spots_by_owner(
    email: str,
    identity: SessionIdentity = Depends(require_session),
    service: TouristSpotService = Depends(get_spot_service),
) -> SpotListResponse:
    data = await service.list_by_owner(email, identity)
    return SpotListResponse(success=True, data=data)


@router.get(
    "/{spot_id}",
    response_model=SpotResponse,
    responses={
        400: {"description": "Malformed id", "model": ApiResponse},
        404: {"description": "No such spot", "model": ApiResponse},
    },
    summary="Get one tourist spot",
)
async def get_spot(
    spot_id: str,
    service: TouristSpotService = Depends(get_spot_service),
) -> SpotResponse:
    data = await service.get_by_id(spot_id)
    return SpotResponse(success=True, data=data)


@router.post(
    "",
    status_code=201,
    response_model=CreatedResponse,
    responses={
        400: {"description": "Body is not a JSON object", "model": ApiResponse},
        500: {"description": "Insert failed", "model": ApiResponse},
    },
    summary="Create a tourist spot",
    description="Stores the body as sent; `userEmail` in the body becomes the owner.",
)
async def create_spot(
    payload: Dict[str, Any] = Body(...),
    service: TouristSpotService = Depends(get_spot_service),
) -> CreatedResponse:
    spot_id = await service.create(payload)
    return CreatedResponse(id=spot_id)


@router.patch(
    "/{spot_id}",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    responses={
        400: {"description": "Malformed id or body", "model": ApiResponse},
        500: {"description": "Nothing was modified", "model": ApiResponse},
    },
    summary="Replace a tourist spot's editable fields",
    description=(
        "Every editable field is written; omitted ones become null. "
        "`ex_public_id` names the previous image, deleted before the write."
    ),
)
async def update_spot(
    spot_id: str,
    changes: TouristSpotUpdate,
    service: TouristSpotService = Depends(get_spot_service),
) -> ApiResponse:
    await service.update(spot_id, changes)
    return ApiResponse(success=True, message="Tourist spot updated successfully")


@router.delete(
    "/{spot_id}",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    responses={
        400: {"description": "Malformed id", "model": ApiResponse},
        404: {"description": "No such spot", "model": ApiResponse},
    },
    summary="Delete a tourist spot and its hosted image",
)
async def delete_spot(
    spot_id: str,
    service: TouristSpotService = Depends(get_spot_service),
) -> ApiResponse:
    await service.delete(spot_id)
    return ApiResponse(success=True, message="Tourist spot deleted successfully")
