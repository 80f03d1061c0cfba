"""
Remote document store access
The services only talk to DocumentStore; FirestoreDocumentStore is the
production implementation on top of the Firebase Admin SDK
"""

from contextlib import contextmanager
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple
import logging

from google.api_core import exceptions as google_exceptions
from google.cloud.firestore import FieldFilter, Query

from storefront.core.exceptions import DocumentStoreError, IndexUnavailableError

logger = logging.getLogger(__name__)

# (field, value) pairs, combined with equality
Filters = Sequence[Tuple[str, Any]]


class Document(NamedTuple):
    """A stored record and its generated identifier"""
    id: str
    data: Dict[str, Any]


class DocumentStore:
    """Collection-oriented async document store"""

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        raise NotImplementedError

    async def query(
        self,
        collection: str,
        filters: Optional[Filters] = None,
        order_by: Optional[str] = None,
        descending: bool = True,
        limit: Optional[int] = None
    ) -> List[Document]:
        """
        Fetch documents matching every equality filter.

        Raises IndexUnavailableError when the ordered form of the query
        cannot be served, DocumentStoreError for any other failure.
        """
        raise NotImplementedError

    def generate_id(self, collection: str) -> str:
        raise NotImplementedError

    async def create(
        self,
        collection: str,
        data: Dict[str, Any],
        doc_id: Optional[str] = None
    ) -> str:
        raise NotImplementedError

    async def set(
        self,
        collection: str,
        doc_id: str,
        data: Dict[str, Any],
        merge: bool = True
    ) -> None:
        raise NotImplementedError

    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        raise NotImplementedError

    async def delete(self, collection: str, doc_id: str) -> None:
        raise NotImplementedError


@contextmanager
def _translate_errors(operation: str):
    """Map Google API errors onto the store's exception types"""
    try:
        yield
    except google_exceptions.FailedPrecondition as e:
        raise IndexUnavailableError(str(e)) from e
    except google_exceptions.GoogleAPIError as e:
        logger.error(f"Firestore {operation} failed: {e}")
        raise DocumentStoreError(str(e), code=type(e).__name__) from e


class FirestoreDocumentStore(DocumentStore):
    """DocumentStore backed by Cloud Firestore"""

    def __init__(self, client):
        self.client = client

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        with _translate_errors("get"):
            snapshot = await self.client.collection(collection).document(doc_id).get()
        if not snapshot.exists:
            return None
        return Document(snapshot.id, snapshot.to_dict() or {})

    async def query(
        self,
        collection: str,
        filters: Optional[Filters] = None,
        order_by: Optional[str] = None,
        descending: bool = True,
        limit: Optional[int] = None
    ) -> List[Document]:
        query = self.client.collection(collection)

        for field, value in filters or ():
            query = query.where(filter=FieldFilter(field, "==", value))
        if order_by:
            direction = Query.DESCENDING if descending else Query.ASCENDING
            query = query.order_by(order_by, direction=direction)
        if limit:
            query = query.limit(limit)

        with _translate_errors("query"):
            snapshots = await query.get()
        return [Document(s.id, s.to_dict() or {}) for s in snapshots]

    def generate_id(self, collection: str) -> str:
        return self.client.collection(collection).document().id

    async def create(
        self,
        collection: str,
        data: Dict[str, Any],
        doc_id: Optional[str] = None
    ) -> str:
        ref = self.client.collection(collection).document(doc_id or self.generate_id(collection))
        with _translate_errors("create"):
            await ref.set(data)
        return ref.id

    async def set(
        self,
        collection: str,
        doc_id: str,
        data: Dict[str, Any],
        merge: bool = True
    ) -> None:
        with _translate_errors("set"):
            await self.client.collection(collection).document(doc_id).set(data, merge=merge)

    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        with _translate_errors("update"):
            await self.client.collection(collection).document(doc_id).update(data)

    async def delete(self, collection: str, doc_id: str) -> None:
        with _translate_errors("delete"):
            await self.client.collection(collection).document(doc_id).delete()
