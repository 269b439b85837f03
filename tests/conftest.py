"""
Tourist Spot API — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Services are wired to in-memory collaborators, so no MongoDB server
       or Cloudinary account is needed.

Fixture Hierarchy (all function-scoped):
    ├── events: ordered log of collection and asset-store calls
    ├── collection: InMemoryCollection (real pymongo result objects)
    ├── asset_store: RecordingAssetStore
    ├── spot_service: TouristSpotService over the two above
    ├── token_issuer: TokenIssuer with a test secret
    ├── app: create_app() with the injected services
    └── test_client: HTTPX AsyncClient over ASGITransport
"""

import copy
import os
from typing import Any, Dict, List, Optional, Tuple

# Override settings for testing BEFORE any app imports
os.environ["DB_USER"] = "test-user"
os.environ["DB_PASS"] = "test-pass"
os.environ["ACCESS_TOKEN_SECRET"] = "test-secret-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from tourist_spot.main import create_app
from tourist_spot.services.asset_service import AssetCleanup, CleanupPolicy
from tourist_spot.services.spot_service import TouristSpotService
from tourist_spot.services.token_service import TokenIssuer

TEST_SECRET = "test-secret-not-real"


# ══════════════════════════════════════════════════════════════════════════
# In-memory collaborators
# ══════════════════════════════════════════════════════════════════════════

class InMemoryCursor:
    def __init__(self, documents: List[Dict[str, Any]]):
        self._documents = documents

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        return self._documents if length is None else self._documents[:length]


class InMemoryCollection:
    """
    Just enough of AsyncCollection for TouristSpotService: equality filters,
    `$set` updates, and the same result objects pymongo returns.
    """

    def __init__(self, events: List[Tuple[str, Any]]):
        self.documents: Dict[ObjectId, Dict[str, Any]] = {}
        self.events = events
        self.fail_with: Optional[Exception] = None

    @staticmethod
    def _matches(document: Dict[str, Any], query: Optional[Dict[str, Any]]) -> bool:
        return all(document.get(key) == value for key, value in (query or {}).items())

    def _check_failure(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def find(self, query: Optional[Dict[str, Any]] = None) -> InMemoryCursor:
        self.events.append(("find", query))
        self._check_failure()
        return InMemoryCursor(
            [copy.deepcopy(doc) for doc in self.documents.values() if self._matches(doc, query)]
        )

    async def find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        self.events.append(("find_one", query))
        self._check_failure()
        for doc in self.documents.values():
            if self._matches(doc, query):
                return copy.deepcopy(doc)
        return None

    async def insert_one(self, document: Dict[str, Any]) -> InsertOneResult:
        self.events.append(("insert_one", document))
        self._check_failure()
        document["_id"] = ObjectId()
        self.documents[document["_id"]] = copy.deepcopy(document)
        return InsertOneResult(document["_id"], acknowledged=True)

    async def update_one(self, query: Dict[str, Any], update: Dict[str, Any]) -> UpdateResult:
        self.events.append(("update_one", query))
        self._check_failure()
        for doc in self.documents.values():
            if self._matches(doc, query):
                changes = update.get("$set", {})
                modified = any(doc.get(k, object()) != v for k, v in changes.items())
                doc.update(copy.deepcopy(changes))
                return UpdateResult({"n": 1, "nModified": int(modified)}, acknowledged=True)
        return UpdateResult({"n": 0, "nModified": 0}, acknowledged=True)

    async def delete_one(self, query: Dict[str, Any]) -> DeleteResult:
        self.events.append(("delete_one", query))
        self._check_failure()
        for oid, doc in list(self.documents.items()):
            if self._matches(doc, query):
                del self.documents[oid]
                return DeleteResult({"n": 1}, acknowledged=True)
        return DeleteResult({"n": 0}, acknowledged=True)


class RecordingAssetStore:
    """Records destroy calls in the shared event log; can be told to fail."""

    def __init__(self, events: List[Tuple[str, Any]]):
        self.events = events
        self.destroyed: List[str] = []
        self.fail_with: Optional[Exception] = None
        self.result: Dict[str, Any] = {"result": "ok"}

    async def destroy(self, public_id: str) -> Dict[str, Any]:
        self.events.append(("destroy", public_id))
        if self.fail_with is not None:
            raise self.fail_with
        self.destroyed.append(public_id)
        return self.result


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def events() -> List[Tuple[str, Any]]:
    return []


@pytest.fixture
def collection(events):
    return InMemoryCollection(events)


@pytest.fixture
def asset_store(events):
    return RecordingAssetStore(events)


@pytest.fixture
def spot_service(collection, asset_store):
    return TouristSpotService(collection, AssetCleanup(asset_store, CleanupPolicy.IGNORE))


@pytest.fixture
def token_issuer():
    return TokenIssuer(secret=TEST_SECRET, ttl_seconds=3600)


@pytest.fixture
def app(spot_service, token_issuer):
    return create_app(spot_service=spot_service, token_issuer=token_issuer)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    https base URL so that Secure cookies are accepted by the client.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="https://test") as client:
        yield client


@pytest.fixture
def sample_spot() -> Dict[str, Any]:
    return {
        "spot_name": "Reef",
        "country_name": "Australia",
        "location": "Queensland",
        "details": "Coral reef system",
        "average_cost": 1500,
        "seasonality": "Winter",
        "travel_time": "7 days",
        "total_visitors_per_year": 2000000,
        "userEmail": "a@x.com",
        "imgHostingInfo": {
            "url": "https://res.cloudinary.com/demo/image/upload/reef.jpg",
            "public_id": "spots/reef",
        },
    }
