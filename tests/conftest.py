"""
Shared fixtures: an in-memory collection store and the service graph over it.
"""

import copy
import itertools
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from docdesk.app import create_app
from docdesk.application.ports.collection_store import (
    CollectionStore,
    Increment,
    StoreDocument,
    StoreUnavailable,
)
from docdesk.application.services.count_reconciler import CountReconciler
from docdesk.application.services.doctor_repository import DoctorRepository
from docdesk.application.services.roster_stats import RosterStats
from docdesk.application.services.specialty_directory import SpecialtyDirectory
from docdesk.core.config import reset_settings


class StoreFailure(Exception):
    """Injected store failure."""


class InMemoryCollectionStore(CollectionStore):
    """Dict-backed store that records calls and can be told to fail.

    ``fail_on(op, collection)`` makes the next matching call raise
    ``StoreFailure``; ``calls`` lists ``(op, collection, doc_id)`` in order.
    """

    def __init__(self) -> None:
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.calls: List[Tuple[str, str, Optional[str]]] = []
        self._failures: List[Tuple[str, str]] = []
        self._ids = itertools.count(1)

    def fail_on(self, op: str, collection: str) -> None:
        self._failures.append((op, collection))

    def _record(self, op: str, collection: str, doc_id: Optional[str] = None) -> None:
        self.calls.append((op, collection, doc_id))
        if (op, collection) in self._failures:
            self._failures.remove((op, collection))
            raise StoreFailure(f"{op} on {collection} failed")

    def seed(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        self.collections.setdefault(collection, {})[doc_id] = dict(data)

    def raw(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        return self.collections.get(collection, {}).get(doc_id)

    def writes(self) -> List[Tuple[str, str, Optional[str]]]:
        return [c for c in self.calls if c[0] in ("create", "update_fields", "delete")]

    async def list_all(self, collection: str) -> List[StoreDocument]:
        self._record("list_all", collection)
        return [
            StoreDocument(id=doc_id, data=copy.deepcopy(data))
            for doc_id, data in self.collections.get(collection, {}).items()
        ]

    async def get_one(self, collection: str, doc_id: str) -> Optional[StoreDocument]:
        self._record("get_one", collection, doc_id)
        data = self.collections.get(collection, {}).get(doc_id)
        return StoreDocument(id=doc_id, data=copy.deepcopy(data)) if data is not None else None

    async def create(
        self, collection: str, data: Mapping[str, Any], doc_id: Optional[str] = None
    ) -> str:
        doc_id = doc_id or f"{collection}-{next(self._ids)}"
        self._record("create", collection, doc_id)
        self.collections.setdefault(collection, {})[doc_id] = copy.deepcopy(dict(data))
        return doc_id

    async def update_fields(
        self, collection: str, doc_id: str, fields: Mapping[str, Any]
    ) -> None:
        self._record("update_fields", collection, doc_id)
        doc = self.collections.get(collection, {}).get(doc_id)
        if doc is None:
            raise StoreFailure(f"No document to update at {collection}/{doc_id}")
        for key, value in fields.items():
            if isinstance(value, Increment):
                doc[key] = doc.get(key, 0) + value.amount
            else:
                doc[key] = copy.deepcopy(value)

    async def delete(self, collection: str, doc_id: str) -> None:
        self._record("delete", collection, doc_id)
        self.collections.get(collection, {}).pop(doc_id, None)


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    """Keep tests independent of any developer MONGO_URI."""
    monkeypatch.delenv("MONGO_URI", raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def store():
    return InMemoryCollectionStore()


@pytest.fixture
def specialties(store):
    return SpecialtyDirectory(store)


@pytest.fixture
def doctors(store, specialties):
    return DoctorRepository(store, specialties)


@pytest.fixture
def stats(doctors, specialties):
    return RosterStats(doctors, specialties)


@pytest.fixture
def reconciler(doctors, specialties):
    return CountReconciler(doctors, specialties)


@pytest.fixture
def unavailable():
    return StoreUnavailable("MONGO_URI is not set")


@pytest.fixture
def client(store):
    """Test client whose services run over the in-memory store."""
    return TestClient(create_app(store=store), raise_server_exceptions=False)
