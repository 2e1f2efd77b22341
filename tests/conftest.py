"""Shared test fixtures for Social API tests."""

import copy
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from common.auth import hash_secret
from social.config import Settings
from social.users.models import Role


# ─────────────────────────────────────────────────────────────────
# Motor mocks
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def sample_user_id():
    return str(ObjectId())


@pytest.fixture
def mock_collection():
    collection = AsyncMock()
    # Motor's find() returns a cursor synchronously (not a coroutine)
    collection.find = MagicMock()
    return collection


@pytest.fixture
def mock_db(mock_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return db


# ─────────────────────────────────────────────────────────────────
# In-memory collection for end-to-end route tests
# ─────────────────────────────────────────────────────────────────


def _naive_utc(value):
    # MongoDB stores datetimes as naive UTC
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _matches(doc, query):
    for field, expected in query.items():
        actual = _naive_utc(doc.get(field))
        if isinstance(expected, dict):
            for op, operand in expected.items():
                operand = _naive_utc(operand)
                if op == "$ne" and actual == operand:
                    return False
                if op == "$gt" and (actual is None or not actual > operand):
                    return False
                if op == "$lte" and (actual is None or not actual <= operand):
                    return False
        elif actual != _naive_utc(expected):
            return False
    return True


def _project(doc, projection):
    doc = copy.deepcopy(doc)
    if not projection:
        return doc
    if all(v == 0 for v in projection.values()):
        return {k: v for k, v in doc.items() if k not in projection}
    return {k: v for k, v in doc.items() if k == "_id" or projection.get(k)}


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    async def to_list(self, length=None):
        return self._docs if length is None else self._docs[:length]


class FakeCollection:
    """Just enough of AsyncIOMotorCollection for the users collection."""

    def __init__(self):
        self.docs = []

    async def create_index(self, keys, unique=False):
        return "email_1"

    async def insert_one(self, doc):
        if any(d.get("email") == doc.get("email") for d in self.docs):
            raise DuplicateKeyError("E11000 duplicate key error")
        doc.setdefault("_id", ObjectId())
        self.docs.append({k: _naive_utc(v) for k, v in doc.items()})
        return SimpleNamespace(inserted_id=doc["_id"])

    async def find_one(self, query, projection=None):
        for doc in self.docs:
            if _matches(doc, query):
                return _project(doc, projection)
        return None

    def find(self, query, projection=None):
        return FakeCursor([_project(d, projection) for d in self.docs if _matches(d, query)])

    async def count_documents(self, query):
        return sum(1 for d in self.docs if _matches(d, query))

    async def update_one(self, query, update):
        for doc in self.docs:
            if _matches(doc, query):
                doc.update({k: _naive_utc(v) for k, v in update.get("$set", {}).items()})
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def update_many(self, query, update):
        matched = [d for d in self.docs if _matches(d, query)]
        for doc in matched:
            doc.update({k: _naive_utc(v) for k, v in update.get("$set", {}).items()})
        return SimpleNamespace(matched_count=len(matched), modified_count=len(matched))


class FakeDatabase:
    def __init__(self):
        self._collections = {}

    def __getitem__(self, name):
        return self._collections.setdefault(name, FakeCollection())


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def users_collection(fake_db):
    return fake_db["users"]


@pytest.fixture
def test_settings():
    return Settings(BCRYPT_ROUNDS=4, ENVIRONMENT="test")


@pytest.fixture
def client_token():
    # 32 random bytes, hex-encoded like the web client does
    return "a1" * 32


@pytest.fixture
def seeded_user(users_collection):
    """An admin-less, signed-out account with password 'password123'."""
    now = datetime.now(timezone.utc)
    doc = {
        "_id": ObjectId(),
        "email": "a@b.com",
        "password": hash_secret("password123", rounds=4),
        "name": "Alice",
        "age": None,
        "gender": None,
        "icon": None,
        "role": Role.USER.value,
        "token": None,
        "token_expiration": None,
        "date_created": now,
        "date_updated": now,
    }
    users_collection.docs.append({k: _naive_utc(v) for k, v in doc.items()})
    return doc


@pytest.fixture
def client(fake_db, test_settings):
    from fastapi.testclient import TestClient

    from api import app
    from social.dependencies import init_all_services

    init_all_services(db=fake_db, app_settings=test_settings)
    # Not used as a context manager: lifespan (real MongoDB) is skipped
    return TestClient(app)
