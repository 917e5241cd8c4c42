"""Pytest fixtures for Cinestream unit tests."""

import copy
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from cinestream.core.config import Config
from cinestream.core.exceptions import EmailDeliveryError
from cinestream.core.settings import CinestreamSettings, reset_cinestream_config
from cinestream.repositories.movie_repository import MovieRepository
from cinestream.repositories.user_repository import UserRepository

TEST_SECRET = "test-secret-key"


# ---------------------------------------------------------------------------
# In-memory stand-in for a motor collection
# ---------------------------------------------------------------------------


def _matches(doc: Dict[str, Any], query: Dict[str, Any]) -> bool:
    for key, expected in query.items():
        actual = doc.get(key)
        if isinstance(expected, dict) and any(k.startswith("$") for k in expected):
            for op, operand in expected.items():
                if actual is None:
                    return False
                if op == "$gt" and not actual > operand:
                    return False
                if op == "$lt" and not actual < operand:
                    return False
        elif actual != expected:
            return False
    return True


class FakeCursor:
    def __init__(self, docs: List[Dict[str, Any]]):
        self._docs = docs

    def sort(self, keys):
        for key, direction in reversed(list(keys)):
            self._docs.sort(key=lambda d: d.get(key), reverse=direction < 0)
        return self

    async def to_list(self, length=None):
        return self._docs if length is None else self._docs[:length]


class FakeCollection:
    """Implements the slice of the motor collection API the repositories use."""

    def __init__(self, unique: tuple = ()):
        self.docs: List[Dict[str, Any]] = []
        self.unique = unique

    def _check_unique(self, candidate: Dict[str, Any]) -> None:
        for field in self.unique:
            for doc in self.docs:
                if doc["_id"] != candidate.get("_id") and doc.get(field) == candidate.get(field):
                    raise DuplicateKeyError(
                        "E11000 duplicate key error",
                        code=11000,
                        details={"keyValue": {field: candidate.get(field)}},
                    )

    def _find(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return next((d for d in self.docs if _matches(d, query)), None)

    async def insert_one(self, document: Dict[str, Any]):
        doc = copy.deepcopy(document)
        doc.setdefault("_id", ObjectId())
        self._check_unique(doc)
        self.docs.append(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    async def find_one(self, query: Dict[str, Any]):
        doc = self._find(query)
        return copy.deepcopy(doc) if doc is not None else None

    def find(self, query: Dict[str, Any]):
        return FakeCursor([copy.deepcopy(d) for d in self.docs if _matches(d, query)])

    async def find_one_and_update(self, query, update, return_document=ReturnDocument.BEFORE):
        doc = self._find(query)
        if doc is None:
            return None
        before = copy.deepcopy(doc)
        after = {**doc, **copy.deepcopy(update.get("$set", {}))}
        self._check_unique(after)
        doc.update(after)
        return copy.deepcopy(doc) if return_document == ReturnDocument.AFTER else before

    async def update_one(self, query, update):
        doc = self._find(query)
        if doc is not None:
            doc.update(copy.deepcopy(update.get("$set", {})))
        return SimpleNamespace(matched_count=int(doc is not None))

    async def find_one_and_delete(self, query):
        doc = self._find(query)
        if doc is None:
            return None
        self.docs.remove(doc)
        return doc

    async def count_documents(self, query):
        return sum(1 for d in self.docs if _matches(d, query))


class FakeMailer:
    """Records messages instead of sending them; set ``fail`` to simulate an outage."""

    def __init__(self):
        self.sent: List[Dict[str, str]] = []
        self.fail = False

    async def send(self, to: str, subject: str, html: str) -> None:
        if self.fail:
            raise EmailDeliveryError()
        self.sent.append({"to": to, "subject": subject, "html": html})


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_config():
    """Reset Cinestream config before each test to ensure clean state."""
    reset_cinestream_config()
    yield
    reset_cinestream_config()


@pytest.fixture
def settings() -> CinestreamSettings:
    return CinestreamSettings(JWT_SECRET=TEST_SECRET, SENDGRID_API_KEY="SG.test")


@pytest.fixture
def test_config() -> Config:
    return Config.load(
        defaults={"CINESTREAM": CinestreamSettings().model_dump()},
        overrides={"CINESTREAM": {"JWT_SECRET": TEST_SECRET, "LOG_LEVEL": "WARNING", "MONGO_URI": ""}},
    )


@pytest.fixture
def users_collection() -> FakeCollection:
    return FakeCollection(unique=("email",))


@pytest.fixture
def movies_collection() -> FakeCollection:
    return FakeCollection()


@pytest.fixture
def user_repo(users_collection) -> UserRepository:
    return UserRepository(users_collection)


@pytest.fixture
def movie_repo(movies_collection) -> MovieRepository:
    return MovieRepository(movies_collection)


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def user_data() -> Dict[str, Any]:
    return {
        "username": "Ana",
        "lastname": "Lopez",
        "birthdate": "1990-05-01",
        "email": "Ana@Example.com",
        "password": "s3cret-pass",
    }


@pytest.fixture
def movie_data() -> Dict[str, Any]:
    return {
        "title": "Alien",
        "description": "In space no one can hear you scream.",
        "genre": "Sci-Fi",
        "releaseDate": "1979-05-25T00:00:00Z",
        "rating": 8.5,
        "duration": 117,
        "director": "Ridley Scott",
    }
