"""Shared fixtures: an in-memory MongoDB stand-in and a TestClient wired to it."""

from __future__ import annotations

import copy
import re
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Iterator

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from config import Settings  # noqa: E402
from main import create_app  # noqa: E402

ADMIN_PASSWORD = "s3cret-pass"


def _compare(value: Any, operator: str, operand: Any) -> bool:
    if value is None:
        return False
    try:
        if operator == "$gte":
            return value >= operand
        if operator == "$lte":
            return value <= operand
        if operator == "$gt":
            return value > operand
        if operator == "$lt":
            return value < operand
    except TypeError:
        return False
    raise NotImplementedError(operator)


def _match_condition(value: Any, condition: Any) -> bool:
    if isinstance(condition, dict) and any(key.startswith("$") for key in condition):
        for operator, operand in condition.items():
            if operator == "$options":
                continue
            if operator == "$regex":
                flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
                if not isinstance(value, str) or re.search(operand, value, flags) is None:
                    return False
            elif not _compare(value, operator, operand):
                return False
        return True
    return value == condition


def matches(document: dict[str, Any], query: dict[str, Any]) -> bool:
    """Evaluate the subset of the MongoDB query language the application emits."""

    for key, condition in query.items():
        if key == "$or":
            if not any(matches(document, clause) for clause in condition):
                return False
        elif key == "$and":
            if not all(matches(document, clause) for clause in condition):
                return False
        elif not _match_condition(document.get(key), condition):
            return False
    return True


def _project(document: dict[str, Any], projection: dict[str, int] | None) -> dict[str, Any]:
    if not projection:
        return copy.deepcopy(document)
    projected = {"_id": document["_id"]}
    for field in projection:
        if field in document:
            projected[field] = copy.deepcopy(document[field])
    return projected


class FakeCursor:
    """Cursor over a snapshot of matching documents."""

    def __init__(self, documents: list[dict[str, Any]]) -> None:
        self._documents = documents

    def sort(self, keys: list[tuple[str, int]]) -> "FakeCursor":
        for field, direction in reversed(keys):
            self._documents.sort(
                key=lambda doc: (doc.get(field) is not None, doc.get(field) if doc.get(field) is not None else 0),
                reverse=direction < 0,
            )
        return self

    def __iter__(self):
        return iter(self._documents)


class FakeCollection:
    """In-memory collection with a pymongo-like interface."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.documents: list[dict[str, Any]] = []
        self.unique_fields: set[str] = set()
        self.indexes: list[tuple[Any, dict[str, Any]]] = []
        self.calls: list[str] = []

    def create_index(self, keys: Any, **kwargs: Any) -> str:
        self.calls.append("create_index")
        self.indexes.append((keys, kwargs))
        if kwargs.get("unique") and isinstance(keys, str):
            self.unique_fields.add(keys)
        return f"{keys}_1"

    def _check_unique(self, document: dict[str, Any]) -> None:
        for field in self.unique_fields | {"_id"}:
            if any(existing.get(field) == document.get(field) for existing in self.documents):
                raise DuplicateKeyError(f"duplicate key error on {self.name}.{field}")

    def insert_one(self, document: dict[str, Any]) -> SimpleNamespace:
        self.calls.append("insert_one")
        document.setdefault("_id", ObjectId())
        self._check_unique(document)
        self.documents.append(copy.deepcopy(document))
        return SimpleNamespace(inserted_id=document["_id"])

    def insert_many(self, documents: list[dict[str, Any]]) -> SimpleNamespace:
        self.calls.append("insert_many")
        inserted_ids = []
        for document in documents:
            document.setdefault("_id", ObjectId())
            self._check_unique(document)
            self.documents.append(copy.deepcopy(document))
            inserted_ids.append(document["_id"])
        return SimpleNamespace(inserted_ids=inserted_ids)

    def find(self, query: dict[str, Any] | None = None, projection: dict[str, int] | None = None) -> FakeCursor:
        self.calls.append("find")
        return FakeCursor(
            [_project(doc, projection) for doc in self.documents if matches(doc, query or {})]
        )

    def find_one(
        self, query: dict[str, Any] | None = None, projection: dict[str, int] | None = None
    ) -> dict[str, Any] | None:
        self.calls.append("find_one")
        for doc in self.documents:
            if matches(doc, query or {}):
                return _project(doc, projection)
        return None

    def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        self.calls.append("update_one")
        for doc in self.documents:
            if matches(doc, query):
                doc.update(copy.deepcopy(update.get("$set", {})))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    def delete_one(self, query: dict[str, Any]) -> SimpleNamespace:
        self.calls.append("delete_one")
        for doc in self.documents:
            if matches(doc, query):
                self.documents.remove(doc)
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    def count_documents(self, query: dict[str, Any]) -> int:
        self.calls.append("count_documents")
        return sum(1 for doc in self.documents if matches(doc, query))

    def distinct(self, key: str) -> list[Any]:
        self.calls.append("distinct")
        values: list[Any] = []
        for doc in self.documents:
            if key in doc and doc[key] not in values:
                values.append(doc[key])
        return values


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]


class FakeAdmin:
    def __init__(self, client: "FakeMongoClient") -> None:
        self._client = client

    def command(self, name: str) -> dict[str, Any]:
        if self._client.unreachable:
            raise ServerSelectionTimeoutError("fake server unreachable")
        return {"ok": 1.0}


class FakeMongoClient:
    """Simplified MongoClient exposing ``admin.command`` and ``client[db_name]``."""

    def __init__(self, unreachable: bool = False) -> None:
        self.unreachable = unreachable
        self.closed = False
        self.databases: dict[str, FakeDatabase] = {}
        self.admin = FakeAdmin(self)

    def __getitem__(self, name: str) -> FakeDatabase:
        if name not in self.databases:
            self.databases[name] = FakeDatabase()
        return self.databases[name]

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def fake_client() -> FakeMongoClient:
    return FakeMongoClient()


@pytest.fixture()
def settings() -> Settings:
    return Settings(admin_password=ADMIN_PASSWORD, session_secret="test-secret")


@pytest.fixture()
def hotels(fake_client: FakeMongoClient) -> FakeCollection:
    return fake_client["easybooking"]["hotels"]


@pytest.fixture()
def client(settings: Settings, fake_client: FakeMongoClient) -> Iterator[TestClient]:
    """TestClient with the lifespan run, so the store is connected and seeded."""

    app = create_app(settings, client=fake_client)  # type: ignore[arg-type]
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def admin_client(client: TestClient) -> TestClient:
    """Same client, logged in as the seeded admin."""

    response = client.post(
        "/login",
        data={"username": "admin", "password": ADMIN_PASSWORD},
        follow_redirects=False,
    )
    assert response.status_code == 302
    return client

