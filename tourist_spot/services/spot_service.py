"""
Tourist Spot API — Tourist Spot Service (Resource Lifecycle)
=============================================================

What:  CRUD over the `tourist-spot` collection, including the owner-scoped
       listing, while keeping hosted images in step with the documents.
How:   Works on an injected AsyncCollection and AssetCleanup. Translates empty
       results and zero-count writes into the application's exceptions;
       wraps unexpected driver errors in DatabaseError.
Who:   Route handlers in routes/spots.py, obtained through app.state.

Write Ordering (update / delete):
    ┌──────────────────┐    ┌────────────────────┐
    │ AssetCleanup     │───▶│ MongoDB write      │
    │ (Cloudinary)     │    │ (update / delete)  │
    └──────────────────┘    └────────────────────┘
    No compensation either way: a destroyed image whose document write then
    fails stays destroyed.

Status mapping kept as-is:
    - empty collection / no documents for the owner → NotFoundError (404)
    - update with modified_count == 0 (missing id OR unchanged values)
      → WriteFailedError (500)
"""

import logging
from typing import Any, Dict, List

from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from tourist_spot.exceptions import (
    BadRequestError,
    DatabaseError,
    ForbiddenError,
    NotFoundError,
    WriteFailedError,
)
from tourist_spot.models.tourist_spot import (
    image_public_id,
    parse_object_id,
    serialize_spot,
)
from tourist_spot.schemas.tourist_spot import SessionIdentity, TouristSpotUpdate
from tourist_spot.services.asset_service import AssetCleanup

logger = logging.getLogger(__name__)


class TouristSpotService:
    """
    Business logic for tourist spot documents.

    Responsibilities:
        - list_all() / list_by_owner(): collection reads, 404 on empty
        - get_by_id(): single lookup, 400 on malformed id
        - create(): verbatim insert, body-supplied owner trusted
        - update(): full-field replacement with optional image swap
        - delete(): image cleanup, then document removal
    """

    def __init__(self, collection: AsyncCollection, asset_cleanup: AssetCleanup):
        self.collection = collection
        self.asset_cleanup = asset_cleanup

    async def list_all(self) -> List[Dict[str, Any]]:
        try:
            documents = await self.collection.find().to_list(length=None)
        except PyMongoError as e:
            logger.error("Database error listing tourist spots: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        if not documents:
            raise NotFoundError(message="No data found")
        return [serialize_spot(doc) for doc in documents]

    async def list_by_owner(self, email: str, identity: SessionIdentity) -> List[Dict[str, Any]]:
        """
        List the spots whose `userEmail` equals email.

        The ownership check runs before any query: a verified identity may
        only list its own spots.
        """
        if not email or not email.strip():
            raise BadRequestError(message="Email parameter is required.", field="email")

        if email != identity.email:
            logger.warning("Owner mismatch: session identity does not own %s", email)
            raise ForbiddenError(context={"requested_email": email})

        try:
            documents = await self.collection.find({"userEmail": email}).to_list(length=None)
        except PyMongoError as e:
            logger.error("Database error listing spots by owner: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        if not documents:
            raise NotFoundError(message="No data found for the provided email.")
        return [serialize_spot(doc) for doc in documents]

    async def get_by_id(self, spot_id: str) -> Dict[str, Any]:
        object_id = parse_object_id(spot_id)
        try:
            document = await self.collection.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error("Database error fetching spot %s: %s", spot_id, str(e))
            raise DatabaseError(context={"spot_id": spot_id})

        if document is None:
            raise NotFoundError(message="No data found", resource_id=spot_id)
        return serialize_spot(document)

    async def create(self, payload: Dict[str, Any]) -> str:
        """
        Insert the request body as a new document and return its id.

        Only a client-supplied `_id` is dropped so that MongoDB assigns one.
        `userEmail` is taken from the body as sent; it is not compared with
        any session.
        """
        if not isinstance(payload, dict):
            raise BadRequestError(message="Request body must be a JSON object")

        document = {k: v for k, v in payload.items() if k != "_id"}
        try:
            result = await self.collection.insert_one(document)
        except PyMongoError as e:
            logger.error("Insert failed: %s", str(e), exc_info=True)
            raise WriteFailedError(
                message="Failed to add new tourist spot",
                context={"error_type": type(e).__name__},
            )

        if not getattr(result, "inserted_id", None):
            raise WriteFailedError(message="Failed to add new tourist spot")

        spot_id = str(result.inserted_id)
        logger.info("Tourist spot %s created", spot_id)
        return spot_id

    async def update(self, spot_id: str, changes: TouristSpotUpdate) -> None:
        """
        Replace the editable fields of a spot.

        Steps:
            1. Validate the id (400 on malformed)
            2. If ex_public_id is given, delete that image (policy applies)
            3. $set every editable field; omitted ones become null
            4. modified_count == 0 → WriteFailedError
        """
        object_id = parse_object_id(spot_id)
        update_doc = {"$set": changes.to_set_document()}

        if changes.ex_public_id:
            await self.asset_cleanup.delete(str(changes.ex_public_id))

        try:
            result = await self.collection.update_one({"_id": object_id}, update_doc)
        except PyMongoError as e:
            logger.error("Update failed for spot %s: %s", spot_id, str(e), exc_info=True)
            raise WriteFailedError(
                message="Failed to update this document data",
                context={"spot_id": spot_id, "error_type": type(e).__name__},
            )

        if not result.modified_count:
            raise WriteFailedError(
                message="Failed to update this document data",
                context={"spot_id": spot_id, "matched_count": result.matched_count},
            )
        logger.info("Tourist spot %s updated", spot_id)

    async def delete(self, spot_id: str) -> None:
        """Delete a spot, destroying its hosted image first when it has one."""
        object_id = parse_object_id(spot_id)
        spot_filter = {"_id": object_id}

        try:
            document = await self.collection.find_one(spot_filter)
        except PyMongoError as e:
            logger.error("Database error fetching spot %s: %s", spot_id, str(e))
            raise DatabaseError(context={"spot_id": spot_id})

        public_id = image_public_id(document)
        if public_id:
            await self.asset_cleanup.delete(public_id)

        try:
            result = await self.collection.delete_one(spot_filter)
        except PyMongoError as e:
            logger.error("Delete failed for spot %s: %s", spot_id, str(e), exc_info=True)
            raise DatabaseError(context={"spot_id": spot_id})

        if not result.deleted_count:
            raise NotFoundError(message="No data found to delete", resource_id=spot_id)
        logger.info("Tourist spot %s deleted", spot_id)
