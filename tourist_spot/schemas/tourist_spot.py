"""
Tourist Spot API — Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the API contract with the browser client.
How:   FastAPI validates PATCH bodies against TouristSpotUpdate and
       serializes every response through one of the envelopes below.

Envelope:
    Every JSON response has the shape `{success, message?, data?}`; creation
    additionally returns the new `id`. Fields that are None are omitted.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from tourist_spot.models.tourist_spot import EDITABLE_FIELDS, ImgHostingInfo


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class TouristSpotUpdate(BaseModel):
    """
    What:  Body of PATCH /tourist-spot/{id}.
    How:   Enumerates exactly the editable fields. Anything the client leaves
           out stays None and is written as null: the update replaces the
           whole editable field set, it does not merge.

    Extra keys (including `userEmail` and `_id`) are ignored.
    """

    # Values are written as sent; only presence matters, like create.
    spot_name: Optional[Any] = None
    country_name: Optional[Any] = None
    location: Optional[Any] = None
    details: Optional[Any] = None
    average_cost: Optional[Any] = None
    seasonality: Optional[Any] = None
    travel_time: Optional[Any] = None
    total_visitors_per_year: Optional[Any] = None
    imgHostingInfo: Optional[ImgHostingInfo] = Field(
        default=None, description="Replacement image; stored value kept when omitted"
    )
    ex_public_id: Optional[Any] = Field(
        default=None, description="Cloudinary id of the image being replaced"
    )

    model_config = ConfigDict(extra="ignore")

    def to_set_document(self) -> Dict[str, Any]:
        """Build the `$set` document for a full-field replacement update."""
        fields: Dict[str, Any] = {name: getattr(self, name) for name in EDITABLE_FIELDS}
        if self.imgHostingInfo is not None:
            fields["imgHostingInfo"] = self.imgHostingInfo.model_dump(exclude_none=True)
        return fields


class SessionIdentity(BaseModel):
    """
    What:  Identity claim decoded from a verified session token.
    How:   The claim is whatever the client posted to /jwt; the owner email is
           read from `email`, or `user` when `email` is absent.
    """

    claims: Dict[str, Any] = Field(default_factory=dict)

    @property
    def email(self) -> Optional[str]:
        value = self.claims.get("email") or self.claims.get("user")
        return value if isinstance(value, str) else None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ApiResponse(BaseModel):
    """Uniform envelope for success and error responses."""

    success: bool = Field(description="Whether the request succeeded")
    message: Optional[str] = Field(default=None, description="Human-readable outcome")
    data: Optional[Any] = Field(default=None, description="Payload: document or array")


# Data envelopes carry no message, so they are serialized without
# exclude_none: null fields inside documents must survive the round-trip.
class SpotListResponse(BaseModel):
    success: bool = True
    data: List[Dict[str, Any]] = Field(default_factory=list)


class SpotResponse(BaseModel):
    success: bool = True
    data: Dict[str, Any] = Field(default_factory=dict)


class CreatedResponse(BaseModel):
    """Returned by POST /tourist-spot with HTTP 201."""

    success: bool = True
    message: str = "Tourist spot added successfully"
    id: str = Field(description="ObjectId assigned by MongoDB")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and database status.
    Who:   Returned by GET /health for monitoring and load balancer probes.
    """

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="connected, disconnected, not_configured")
    uptime_seconds: float = Field(description="Seconds since service started")
