"""
Tourist Spot API — Tourist Spot Service Unit Tests
===================================================

What:  TouristSpotService against the in-memory collection and asset store.

What we test:
    ✅ Empty results are NotFoundError, not empty lists
    ✅ Owner listing forbids other identities before querying
    ✅ Malformed ids fail differently from missing ids
    ✅ create → get_by_id round trip
    ✅ Full-field replacement update and its zero-modified policy
    ✅ Image cleanup runs once, before the document write
    ✅ Cleanup failure handling under both policies
"""

import pytest
from bson import ObjectId
from pymongo.errors import PyMongoError

from tourist_spot.exceptions import (
    AssetStoreError,
    BadRequestError,
    DatabaseError,
    ForbiddenError,
    NotFoundError,
    WriteFailedError,
)
from tourist_spot.models.tourist_spot import EDITABLE_FIELDS
from tourist_spot.schemas.tourist_spot import SessionIdentity, TouristSpotUpdate
from tourist_spot.services.asset_service import AssetCleanup, CleanupPolicy
from tourist_spot.services.spot_service import TouristSpotService


class TestListing:
    """Tests for list_all and list_by_owner."""

    @pytest.mark.asyncio
    async def test_list_all_empty_collection_is_not_found(self, spot_service):
        with pytest.raises(NotFoundError) as exc_info:
            await spot_service.list_all()
        assert exc_info.value.message == "No data found"

    @pytest.mark.asyncio
    async def test_list_all_returns_serialized_documents(self, spot_service, sample_spot):
        spot_id = await spot_service.create(dict(sample_spot))

        result = await spot_service.list_all()

        assert len(result) == 1
        assert result[0]["_id"] == spot_id
        assert result[0]["spot_name"] == "Reef"

    @pytest.mark.asyncio
    async def test_list_by_owner_returns_only_owned_spots(self, spot_service, sample_spot):
        await spot_service.create(dict(sample_spot))
        await spot_service.create(dict(sample_spot, userEmail="b@x.com", spot_name="Other"))

        result = await spot_service.list_by_owner(
            "a@x.com", SessionIdentity(claims={"user": "a@x.com"})
        )

        assert [doc["spot_name"] for doc in result] == ["Reef"]

    @pytest.mark.asyncio
    async def test_list_by_owner_accepts_email_claim(self, spot_service, sample_spot):
        await spot_service.create(dict(sample_spot))

        result = await spot_service.list_by_owner(
            "a@x.com", SessionIdentity(claims={"email": "a@x.com", "name": "A"})
        )

        assert len(result) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "requested,claimed",
        [("b@x.com", "a@x.com"), ("A@x.com", "a@x.com"), ("a@x.com", "")],
    )
    async def test_list_by_owner_mismatch_is_forbidden_before_query(
        self, spot_service, events, requested, claimed
    ):
        with pytest.raises(ForbiddenError):
            await spot_service.list_by_owner(requested, SessionIdentity(claims={"user": claimed}))

        assert not [name for name, _ in events if name == "find"]

    @pytest.mark.asyncio
    async def test_list_by_owner_blank_email_is_bad_request(self, spot_service):
        with pytest.raises(BadRequestError):
            await spot_service.list_by_owner("  ", SessionIdentity(claims={"user": "  "}))

    @pytest.mark.asyncio
    async def test_list_by_owner_without_spots_is_not_found(self, spot_service):
        with pytest.raises(NotFoundError) as exc_info:
            await spot_service.list_by_owner("a@x.com", SessionIdentity(claims={"user": "a@x.com"}))
        assert exc_info.value.message == "No data found for the provided email."

    @pytest.mark.asyncio
    async def test_driver_error_becomes_database_error(self, spot_service, collection):
        collection.fail_with = PyMongoError("connection reset")

        with pytest.raises(DatabaseError):
            await spot_service.list_all()


class TestGetAndCreate:
    """Tests for get_by_id and create."""

    @pytest.mark.asyncio
    async def test_create_then_get_returns_fields_verbatim(self, spot_service, sample_spot):
        spot_id = await spot_service.create(dict(sample_spot))

        document = await spot_service.get_by_id(spot_id)

        assert document.pop("_id") == spot_id
        assert document == sample_spot

    @pytest.mark.asyncio
    async def test_create_ignores_client_supplied_id(self, spot_service, collection):
        spot_id = await spot_service.create({"_id": "chosen-by-client", "spot_name": "Reef"})

        assert ObjectId.is_valid(spot_id)
        assert list(collection.documents) == [ObjectId(spot_id)]

    @pytest.mark.asyncio
    async def test_create_trusts_body_owner(self, spot_service):
        spot_id = await spot_service.create({"spot_name": "Reef", "userEmail": "someone@x.com"})

        document = await spot_service.get_by_id(spot_id)

        assert document["userEmail"] == "someone@x.com"

    @pytest.mark.asyncio
    async def test_create_insert_failure_is_write_failed(self, spot_service, collection):
        collection.fail_with = PyMongoError("write concern error")

        with pytest.raises(WriteFailedError) as exc_info:
            await spot_service.create({"spot_name": "Reef"})
        assert exc_info.value.message == "Failed to add new tourist spot"

    @pytest.mark.asyncio
    async def test_get_malformed_id_is_bad_request(self, spot_service):
        with pytest.raises(BadRequestError):
            await spot_service.get_by_id("not-an-object-id")

    @pytest.mark.asyncio
    async def test_get_missing_id_is_not_found(self, spot_service):
        with pytest.raises(NotFoundError):
            await spot_service.get_by_id(str(ObjectId()))


class TestUpdate:
    """Tests for the full-field replacement update."""

    @pytest.mark.asyncio
    async def test_omitted_fields_are_written_as_null(self, spot_service, sample_spot, collection):
        spot_id = await spot_service.create(dict(sample_spot))

        await spot_service.update(spot_id, TouristSpotUpdate(spot_name="Great Reef"))

        stored = collection.documents[ObjectId(spot_id)]
        assert stored["spot_name"] == "Great Reef"
        for field in EDITABLE_FIELDS:
            if field != "spot_name":
                assert field in stored
                assert stored[field] is None

    @pytest.mark.asyncio
    async def test_image_and_owner_kept_when_not_supplied(self, spot_service, sample_spot, collection):
        spot_id = await spot_service.create(dict(sample_spot))

        await spot_service.update(
            spot_id, TouristSpotUpdate.model_validate({"spot_name": "X", "userEmail": "evil@x.com"})
        )

        stored = collection.documents[ObjectId(spot_id)]
        assert stored["userEmail"] == "a@x.com"
        assert stored["imgHostingInfo"] == sample_spot["imgHostingInfo"]

    @pytest.mark.asyncio
    async def test_new_image_replaces_stored_one(self, spot_service, sample_spot, collection):
        spot_id = await spot_service.create(dict(sample_spot))
        new_image = {"url": "https://res.cloudinary.com/demo/new.jpg", "public_id": "spots/new"}

        await spot_service.update(
            spot_id,
            TouristSpotUpdate(spot_name="Reef", imgHostingInfo=new_image, ex_public_id="spots/reef"),
        )

        assert collection.documents[ObjectId(spot_id)]["imgHostingInfo"] == new_image

    @pytest.mark.asyncio
    async def test_ex_public_id_cleaned_up_once_before_write(
        self, spot_service, sample_spot, events, asset_store
    ):
        spot_id = await spot_service.create(dict(sample_spot))
        events.clear()

        await spot_service.update(spot_id, TouristSpotUpdate(spot_name="Reef 2", ex_public_id="img123"))

        assert asset_store.destroyed == ["img123"]
        names = [name for name, _ in events]
        assert names.index("destroy") < names.index("update_one")
        assert names.count("destroy") == 1

    @pytest.mark.asyncio
    async def test_no_cleanup_without_ex_public_id(self, spot_service, sample_spot, asset_store):
        spot_id = await spot_service.create(dict(sample_spot))

        await spot_service.update(spot_id, TouristSpotUpdate(spot_name="Reef 2"))

        assert asset_store.destroyed == []

    @pytest.mark.asyncio
    async def test_missing_document_is_write_failed(self, spot_service):
        with pytest.raises(WriteFailedError) as exc_info:
            await spot_service.update(str(ObjectId()), TouristSpotUpdate(spot_name="Reef"))
        assert exc_info.value.message == "Failed to update this document data"

    @pytest.mark.asyncio
    async def test_identical_values_are_write_failed(self, spot_service, sample_spot):
        spot_id = await spot_service.create(dict(sample_spot))
        same = TouristSpotUpdate.model_validate(sample_spot)

        with pytest.raises(WriteFailedError):
            await spot_service.update(spot_id, same)

    @pytest.mark.asyncio
    async def test_malformed_id_is_bad_request_and_skips_cleanup(self, spot_service, asset_store):
        with pytest.raises(BadRequestError):
            await spot_service.update("123", TouristSpotUpdate(ex_public_id="img123"))
        assert asset_store.destroyed == []

    @pytest.mark.asyncio
    async def test_cleanup_failure_ignored_by_default(
        self, spot_service, sample_spot, asset_store, collection
    ):
        spot_id = await spot_service.create(dict(sample_spot))
        asset_store.fail_with = RuntimeError("cloudinary down")

        await spot_service.update(spot_id, TouristSpotUpdate(spot_name="Still updated", ex_public_id="img123"))

        assert collection.documents[ObjectId(spot_id)]["spot_name"] == "Still updated"

    @pytest.mark.asyncio
    async def test_cleanup_failure_aborts_write_under_abort_policy(
        self, collection, asset_store, events, sample_spot
    ):
        service = TouristSpotService(collection, AssetCleanup(asset_store, CleanupPolicy.ABORT))
        spot_id = await service.create(dict(sample_spot))
        asset_store.fail_with = RuntimeError("cloudinary down")
        events.clear()

        with pytest.raises(AssetStoreError):
            await service.update(spot_id, TouristSpotUpdate(spot_name="Nope", ex_public_id="img123"))

        assert "update_one" not in [name for name, _ in events]
        assert collection.documents[ObjectId(spot_id)]["spot_name"] == "Reef"


class TestDelete:
    """Tests for delete with image cleanup."""

    @pytest.mark.asyncio
    async def test_delete_destroys_image_before_document(
        self, spot_service, sample_spot, events, asset_store, collection
    ):
        spot_id = await spot_service.create(dict(sample_spot))
        events.clear()

        await spot_service.delete(spot_id)

        assert asset_store.destroyed == ["spots/reef"]
        names = [name for name, _ in events]
        assert names.index("destroy") < names.index("delete_one")
        assert collection.documents == {}

    @pytest.mark.asyncio
    async def test_delete_without_image_skips_cleanup(self, spot_service, asset_store):
        spot_id = await spot_service.create({"spot_name": "Plain", "userEmail": "a@x.com"})

        await spot_service.delete(spot_id)

        assert asset_store.destroyed == []

    @pytest.mark.asyncio
    async def test_delete_missing_is_not_found_every_time(self, spot_service, sample_spot, collection):
        await spot_service.create(dict(sample_spot))
        before = dict(collection.documents)
        missing = str(ObjectId())

        for _ in range(2):
            with pytest.raises(NotFoundError) as exc_info:
                await spot_service.delete(missing)
            assert exc_info.value.message == "No data found to delete"

        assert collection.documents == before

    @pytest.mark.asyncio
    async def test_delete_proceeds_when_cleanup_fails(
        self, spot_service, sample_spot, asset_store, collection
    ):
        spot_id = await spot_service.create(dict(sample_spot))
        asset_store.fail_with = RuntimeError("cloudinary down")

        await spot_service.delete(spot_id)

        assert collection.documents == {}
