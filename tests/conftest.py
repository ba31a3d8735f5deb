import copy
import itertools
from types import SimpleNamespace

import bson
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import AsyncClient, ASGITransport
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from app.db.mongo import MongoDatabase
from app.main import create_app


def _encode(*documents):
    # The driver BSON-encodes every filter and document it sends.
    for document in documents:
        if document is not None:
            bson.encode(document)


def _sort_key(value):
    # MongoDB orders null/missing before numbers and numbers before strings.
    if value is None:
        return (0, 0)
    if isinstance(value, (int, float)):
        return (1, value)
    return (2, str(value))


def _matches(doc, query):
    for field, expected in query.items():
        value = doc.get(field)
        if isinstance(expected, dict) and "$in" in expected:
            if not any(value == candidate for candidate in expected["$in"]):
                return False
        elif value != expected:
            return False
    return True


def _project(doc, projection):
    doc = copy.deepcopy(doc)
    if not projection:
        return doc
    included = [key for key, flag in projection.items() if flag and key != "_id"]
    if included:
        doc = {key: doc[key] for key in included if key in doc} | (
            {"_id": doc["_id"]} if projection.get("_id", 1) else {}
        )
    elif projection.get("_id", 1) == 0:
        doc.pop("_id", None)
    return doc


def _sorted(docs, keys):
    docs = list(docs)
    for field, direction in reversed(keys or []):
        docs.sort(key=lambda d: _sort_key(d.get(field)), reverse=direction < 0)
    return docs


class FakeCursor:
    def __init__(self, docs, projection):
        self._docs = docs
        self._projection = projection

    def sort(self, keys, direction=None):
        if isinstance(keys, str):
            keys = [(keys, direction or 1)]
        self._docs = _sorted(self._docs, keys)
        return self

    async def to_list(self, length=None):
        docs = [_project(doc, self._projection) for doc in self._docs]
        return docs if length is None else docs[:length]

    def __aiter__(self):
        self._iter = iter([_project(doc, self._projection) for doc in self._docs])
        return self

    async def __anext__(self):
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration


class FakeCollection:
    """In-memory stand-in for the subset of AsyncIOMotorCollection the repositories use."""

    _ids = itertools.count(1)

    def __init__(self, name):
        self.name = name
        self.docs = []
        self.unique_fields = set()

    async def create_index(self, keys, unique=False, **kwargs):
        field = keys if isinstance(keys, str) else keys[0][0]
        if unique:
            self.unique_fields.add(field)
        return f"{field}_1"

    def find(self, query=None, projection=None):
        _encode(query)
        return FakeCursor([d for d in self.docs if _matches(d, query or {})], projection)

    async def find_one(self, query=None, projection=None, sort=None):
        _encode(query)
        docs = _sorted([d for d in self.docs if _matches(d, query or {})], sort)
        return _project(docs[0], projection) if docs else None

    async def insert_one(self, doc):
        _encode(doc)
        for field in self.unique_fields:
            if any(existing.get(field) == doc.get(field) for existing in self.docs):
                raise DuplicateKeyError(
                    f"E11000 duplicate key error collection: {self.name} index: {field}_1",
                    code=11000
                )
        doc["_id"] = next(self._ids)
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def find_one_and_update(self, query, update, projection=None, return_document=False, **kwargs):
        _encode(query, update)
        for doc in self.docs:
            if _matches(doc, query):
                before = copy.deepcopy(doc)
                doc.update(copy.deepcopy(update.get("$set", {})))
                for field, value in update.get("$push", {}).items():
                    doc.setdefault(field, []).append(copy.deepcopy(value))
                return _project(doc if return_document else before, projection)
        return None

    async def delete_one(self, query):
        _encode(query)
        for index, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


class FakeDatabase:
    def __init__(self, name="academy_test"):
        self.name = name
        self.reachable = True
        self._collections = {}

    def __getitem__(self, name):
        if name not in self._collections:
            self._collections[name] = FakeCollection(name)
        return self._collections[name]

    async def command(self, name):
        if not self.reachable:
            raise ServerSelectionTimeoutError("No servers available")
        return {"ok": 1.0}


@pytest.fixture
def fake_db():
    """Empty database with the unique member id index."""
    db = FakeDatabase()
    db["members"].unique_fields.add("id")
    return db


@pytest.fixture
def mongo(fake_db):
    return MongoDatabase.attach(fake_db)


@pytest.fixture
def static_dir(tmp_path):
    (tmp_path / "index.html").write_text("<html><body>Academy Records</body></html>")
    (tmp_path / "app.js").write_text("console.log('records');")
    return tmp_path


@pytest.fixture
def app(mongo, static_dir):
    return create_app(mongo=mongo, static_dir=str(static_dir))


@pytest.fixture
def client(app):
    """Test client; the context manager runs startup and shutdown."""
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def async_client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def sample_member():
    return {"name": "Asha", "phone": "555-1000"}
