"""
Tourist Spot API — Tourist Spot Document Model
===============================================

What:  Shape of a document in the `tourist-spot` collection, plus the helpers
       that move documents between MongoDB and JSON.
How:   Documents are stored as plain dicts (create inserts the request body
       verbatim). `serialize_spot` turns BSON ObjectIds into strings for
       responses; `parse_object_id` converts path ids and rejects malformed
       ones; `image_public_id` reads the hosted image reference.

Document Example:
    {
        "_id": ObjectId("6630c6c2f1a4b5d6e7f80912"),
        "spot_name": "Ha Long Bay",
        "country_name": "Vietnam",
        "location": "Quang Ninh",
        "details": "Limestone karsts and emerald water",
        "average_cost": 1200,
        "seasonality": "Autumn",
        "travel_time": "3 days",
        "total_visitors_per_year": 6000000,
        "userEmail": "owner@example.com",
        "imgHostingInfo": {"url": "https://res.cloudinary.com/...", "public_id": "spots/abc"}
    }

Invariants:
    - `_id` is assigned by MongoDB on insert and never rewritten
    - `userEmail` is written on create only; updates never include it
    - `imgHostingInfo`, when present, carries a non-empty `public_id`
"""

from typing import Any, Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel, ConfigDict, Field

from tourist_spot.exceptions import BadRequestError

# The editable field set written by a full-field replacement update.
EDITABLE_FIELDS = (
    "spot_name",
    "country_name",
    "location",
    "details",
    "average_cost",
    "seasonality",
    "travel_time",
    "total_visitors_per_year",
)


class ImgHostingInfo(BaseModel):
    """Reference to an image hosted on Cloudinary."""

    url: Optional[str] = Field(default=None, description="Public delivery URL")
    public_id: str = Field(..., min_length=1, description="Cloudinary asset id")

    model_config = ConfigDict(extra="allow")


def image_public_id(document: Optional[Dict[str, Any]]) -> Optional[str]:
    """`imgHostingInfo.public_id` of a stored document, or None when absent/blank."""
    if not document:
        return None
    info = document.get("imgHostingInfo")
    if not isinstance(info, dict):
        return None
    return info.get("public_id") or None


def parse_object_id(spot_id: str) -> ObjectId:
    """
    Convert a path parameter into an ObjectId.

    Raises:
        BadRequestError: the string is not a 24-character hex ObjectId. This
        is reported as 400 so that a malformed id never looks like a missing
        document.
    """
    try:
        return ObjectId(spot_id)
    except (InvalidId, TypeError):
        raise BadRequestError(
            message="Invalid id", field="id", context={"value": str(spot_id)[:64]}
        )


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_jsonable(v) for v in value]
    return value


def serialize_spot(document: Dict[str, Any]) -> Dict[str, Any]:
    """Return a JSON-safe copy of a stored document (ObjectIds become strings)."""
    return _to_jsonable(document)
