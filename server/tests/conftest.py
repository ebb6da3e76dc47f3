"""Pytest configuration and fixtures for tests."""

import json
import shutil
from copy import deepcopy
from typing import Any, Dict, Iterable, List, Optional

import pytest
from bson import ObjectId

from common import database as database_module
from common.utils.config import DEFAULT_QUIZ_FILE, Settings


def _matches(document: Dict[str, Any], filter_query: Dict[str, Any]) -> bool:
    if not filter_query:
        return True
    for key, expected in filter_query.items():
        if document.get(key) != expected:
            return False
    return True


class _InsertOneResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class _UpdateResult:
    def __init__(self, matched: int, modified: int, upserted_id=None):
        self.matched_count = matched
        self.modified_count = modified
        self.upserted_id = upserted_id


class FakeCollection:
    """Minimal PyMongo-like collection for deterministic unit tests."""

    def __init__(self, documents: Iterable[Dict[str, Any]] = ()):
        self._documents: List[Dict[str, Any]] = []
        for doc in documents:
            self._documents.append(self._ensure_id(doc))

    @staticmethod
    def _ensure_id(document: Dict[str, Any]) -> Dict[str, Any]:
        doc = deepcopy(document)
        doc.setdefault("_id", ObjectId())
        return doc

    def count_documents(self, filter_query: Dict[str, Any]) -> int:
        return sum(1 for doc in self._documents if _matches(doc, filter_query))

    def find_one(self, filter_query: Dict[str, Any]):
        for doc in self._documents:
            if _matches(doc, filter_query):
                return deepcopy(doc)
        return None

    def find(self, filter_query: Optional[Dict[str, Any]] = None):
        return [
            deepcopy(doc) for doc in self._documents if _matches(doc, filter_query or {})
        ]

    def insert_one(self, document: Dict[str, Any]):
        doc = self._ensure_id(document)
        self._documents.append(doc)
        return _InsertOneResult(doc["_id"])

    def insert_many(self, docs: Iterable[Dict[str, Any]]):
        for doc in docs:
            self._documents.append(self._ensure_id(doc))

    def update_one(self, filter_query: Dict[str, Any], update_doc: Dict[str, Any], upsert: bool = False):
        for doc in self._documents:
            if _matches(doc, filter_query):
                return _UpdateResult(1, self._apply_update(doc, update_doc))
        if not upsert:
            return _UpdateResult(0, 0)
        doc = self._ensure_id(dict(filter_query))
        self._apply_update(doc, update_doc)
        self._documents.append(doc)
        return _UpdateResult(0, 0, upserted_id=doc["_id"])

    @staticmethod
    def _apply_update(document: Dict[str, Any], update_doc: Dict[str, Any]) -> int:
        changed = False
        for key, value in update_doc.get("$set", {}).items():
            if document.get(key) != value:
                document[key] = deepcopy(value)
                changed = True
        return 1 if changed else 0

    @property
    def documents(self) -> List[Dict[str, Any]]:
        return deepcopy(self._documents)


class FakeMongoDatabase:
    """Dictionary-like facade returning fake collections by name."""

    name = "classboard"

    def __init__(self):
        self._collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self._collections:
            self._collections[name] = FakeCollection()
        return self._collections[name]


@pytest.fixture
def seed_quizzes() -> List[Dict[str, Any]]:
    with open(DEFAULT_QUIZ_FILE, "r", encoding="utf-8") as file:
        return json.load(file)["quizzes"]


@pytest.fixture
def quiz_file(tmp_path):
    """A writable copy of the bundled catalog."""
    path = tmp_path / "data" / "quizzes.json"
    path.parent.mkdir()
    shutil.copy(DEFAULT_QUIZ_FILE, path)
    return path


@pytest.fixture
def make_settings(quiz_file):
    def _make(**overrides) -> Settings:
        env = {
            "SOCKETIO_ASYNC_MODE": "threading",
            "QUIZ_DATA_FILE": str(quiz_file),
            "QUIZ_SEED_FILE": DEFAULT_QUIZ_FILE,
        }
        env.update(overrides)
        return Settings.from_env(env)

    return _make


@pytest.fixture
def fake_mongo(monkeypatch):
    """Replace DBController.connect with an in-memory stub; yields the database."""
    database = FakeMongoDatabase()

    def _connect(self, max_retries: int = 1, retry_delay: int = 2) -> bool:
        self.client = None
        self.db = database
        return True

    monkeypatch.setattr(database_module.DBController, "connect", _connect)
    return database


@pytest.fixture
def file_app(make_settings):
    """App running in file-backed mode."""
    from server.app import create_app  # pylint: disable=import-outside-toplevel

    application = create_app(make_settings())
    application.config["TESTING"] = True
    return application


@pytest.fixture
def db_app(make_settings, fake_mongo):
    """App running in database-backed mode against the fake database."""
    from server.app import create_app  # pylint: disable=import-outside-toplevel

    application = create_app(make_settings(MONGO_URI="mongodb://fake-host:27017/classboard"))
    application.config["TESTING"] = True
    return application


@pytest.fixture(params=["file", "database"])
def any_app(request):
    """Run a test once per catalog backend."""
    fixture_name = "file_app" if request.param == "file" else "db_app"
    return request.getfixturevalue(fixture_name)


@pytest.fixture
def client(file_app):
    with file_app.test_client() as client:
        yield client


@pytest.fixture
def socket_client_factory(file_app):
    """Create Socket.IO test clients bound to the file-mode app."""
    socketio = file_app.extensions["socketio"]
    clients = []

    def _connect():
        sio_client = socketio.test_client(file_app)
        assert sio_client.is_connected()
        clients.append(sio_client)
        return sio_client

    yield _connect

    for sio_client in clients:
        if sio_client.is_connected():
            sio_client.disconnect()
