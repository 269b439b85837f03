"""
Tourist Spot API — Hosted Image Cleanup
========================================

What:  Deletes images hosted on Cloudinary when a tourist spot drops them.
How:   CloudinaryAssetStore wraps the Cloudinary SDK; AssetCleanup applies an
       explicit failure policy around it.
Who:   TouristSpotService, on update (ex_public_id) and delete
       (imgHostingInfo.public_id).

Failure Policy:
    The image and the document live in two stores with no shared
    transaction. Cleanup always runs BEFORE the document write, and
    CleanupPolicy decides what a failed destroy means:

    IGNORE (default)  log a warning, report False, the document write proceeds;
                      a failure leaves an orphaned image on Cloudinary
    ABORT             raise AssetStoreError (HTTP 500); the document write is
                      never attempted

    The same policy applies to the update path and the delete path.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Dict, Protocol

import cloudinary
import cloudinary.uploader

from tourist_spot.config import Settings
from tourist_spot.exceptions import AssetStoreError

logger = logging.getLogger(__name__)


class CleanupPolicy(str, Enum):
    IGNORE = "ignore"
    ABORT = "abort"


class AssetStore(Protocol):
    """Anything that can destroy a hosted asset by its public id."""

    async def destroy(self, public_id: str) -> Dict[str, Any]:
        ...


class CloudinaryAssetStore:
    """
    Cloudinary-backed asset store.

    The SDK is synchronous (blocking HTTP via urllib3), so each call runs in a
    worker thread to keep the event loop free.
    """

    def __init__(self, cloud_name: str, api_key: str, api_secret: str):
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "CloudinaryAssetStore":
        return cls(
            cloud_name=settings.cloud_name,
            api_key=settings.cloud_api_key,
            api_secret=settings.cloud_api_secret,
        )

    async def destroy(self, public_id: str) -> Dict[str, Any]:
        return await asyncio.to_thread(cloudinary.uploader.destroy, public_id)


class AssetCleanup:
    """Best-effort (or strict, per policy) deletion of hosted images."""

    def __init__(self, store: AssetStore, policy: CleanupPolicy = CleanupPolicy.IGNORE):
        self.store = store
        self.policy = CleanupPolicy(policy)

    async def delete(self, public_id: str) -> bool:
        """
        Destroy the asset identified by public_id.

        Returns:
            True when Cloudinary confirmed the deletion, False otherwise
            (including "not found" and ignored failures).

        Raises:
            AssetStoreError: destroy raised and the policy is ABORT.
        """
        try:
            result = await self.store.destroy(public_id)
        except Exception as e:
            if self.policy is CleanupPolicy.ABORT:
                logger.error("Image cleanup failed for %s, aborting: %s", public_id, str(e))
                raise AssetStoreError(
                    public_id=public_id,
                    context={"error_type": type(e).__name__},
                ) from e
            logger.warning(
                "Image cleanup failed for %s, continuing: %s",
                public_id,
                str(e),
                exc_info=True,
            )
            return False

        outcome = (result or {}).get("result")
        if outcome != "ok":
            logger.warning("Cloudinary did not delete %s (result=%s)", public_id, outcome)
            return False

        logger.info("Deleted hosted image %s", public_id)
        return True
