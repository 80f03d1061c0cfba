"""Pytest configuration and shared fixtures for storefront tests."""

from typing import Any, Dict, List, Optional, Set, Tuple

import pytest

from storefront.core.exceptions import DocumentStoreError, IndexUnavailableError
from storefront.core.session import SessionContext
from storefront.core.storage import MemoryStorage
from storefront.schemas.auth import SessionUser
from storefront.services.document_store import Document, DocumentStore
from storefront.utils.helpers import parse_timestamp, EPOCH


class FakeDocumentStore(DocumentStore):
    """In-memory store that can simulate missing indexes and outages."""

    def __init__(self):
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.missing_indexes: Set[Tuple[str, str]] = set()
        self.failure: Optional[DocumentStoreError] = None
        self.queries: List[Dict[str, Any]] = []
        self._counter = 0

    def seed(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        self.collections.setdefault(collection, {})[doc_id] = dict(data)

    def _check(self):
        if self.failure:
            raise self.failure

    async def get(self, collection, doc_id):
        self._check()
        data = self.collections.get(collection, {}).get(doc_id)
        return Document(doc_id, dict(data)) if data is not None else None

    async def query(self, collection, filters=None, order_by=None, descending=True, limit=None):
        self.queries.append({
            "collection": collection,
            "filters": list(filters or []),
            "order_by": order_by,
            "limit": limit,
        })
        self._check()
        if order_by and (collection, order_by) in self.missing_indexes:
            raise IndexUnavailableError(f"index on {collection}.{order_by} missing")

        docs = [
            Document(doc_id, dict(data))
            for doc_id, data in self.collections.get(collection, {}).items()
            if all(data.get(field) == value for field, value in filters or [])
        ]
        if order_by:
            # documents without the field are left out, like Firestore
            docs = [doc for doc in docs if doc.data.get(order_by) is not None]
            docs.sort(
                key=lambda doc: parse_timestamp(doc.data[order_by]) or EPOCH,
                reverse=descending
            )
        if limit:
            docs = docs[:limit]
        return docs

    def generate_id(self, collection):
        self._counter += 1
        return f"{collection}-{self._counter}"

    async def create(self, collection, data, doc_id=None):
        self._check()
        doc_id = doc_id or self.generate_id(collection)
        self.seed(collection, doc_id, data)
        return doc_id

    async def set(self, collection, doc_id, data, merge=True):
        self._check()
        existing = self.collections.get(collection, {}).get(doc_id, {}) if merge else {}
        self.seed(collection, doc_id, {**existing, **data})

    async def update(self, collection, doc_id, data):
        self._check()
        if doc_id not in self.collections.get(collection, {}):
            raise DocumentStoreError(f"No document to update: {collection}/{doc_id}", code="NotFound")
        self.collections[collection][doc_id].update(data)

    async def delete(self, collection, doc_id):
        self._check()
        self.collections.get(collection, {}).pop(doc_id, None)


@pytest.fixture
def store():
    return FakeDocumentStore()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def customer():
    return SessionUser(uid="user-1", email="asha@sparshnfc.in", display_name="Asha")


@pytest.fixture
def signed_in_session(customer):
    return SessionContext(user=customer)
