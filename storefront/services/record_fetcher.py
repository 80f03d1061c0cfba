"""
Resilient collection reads

Ordered queries depend on composite indexes that are provisioned outside
the application and may be missing. fetch_records tries each sort field of
a record kind in turn and, when none can be served, reads the collection
unordered and sorts it in memory so callers see the same newest-first
order either way.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from storefront.core.config import settings
from storefront.core.exceptions import DocumentStoreError, IndexUnavailableError
from storefront.services.document_store import Document, DocumentStore, Filters
from storefront.utils.helpers import EPOCH, parse_timestamp, utc_now_iso

logger = logging.getLogger(__name__)

_DEFAULT_LIMIT = object()


@dataclass(frozen=True)
class RecordKind:
    """How one collection is read, ordered and normalized"""
    collection: str
    records_field: str
    sort_fields: Tuple[str, ...]
    timestamp_fields: Tuple[str, ...]
    default_limit: Optional[int] = None
    id_aliases: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def timestamp_field(self) -> str:
        return self.timestamp_fields[0]


PRODUCTS = RecordKind(
    collection="products",
    records_field="products",
    sort_fields=("createdAt",),
    timestamp_fields=("createdAt", "updatedAt"),
)

ORDERS = RecordKind(
    collection="orders",
    records_field="orders",
    sort_fields=("createdAt",),
    timestamp_fields=("createdAt", "updatedAt"),
    default_limit=settings.ORDERS_FETCH_LIMIT,
)

USERS = RecordKind(
    collection="users",
    records_field="users",
    sort_fields=("createdAt", "lastUpdated"),
    timestamp_fields=("createdAt", "lastUpdated"),
    default_limit=settings.USERS_FETCH_LIMIT,
    id_aliases=("uid",),
)


def normalize_record(kind: RecordKind, doc: Document) -> Tuple[Dict[str, Any], bool]:
    """
    Attach the document id and guarantee a creation timestamp

    Returns the record and whether its timestamp had to be synthesized.
    """
    record: Dict[str, Any] = {"id": doc.id}
    for alias in kind.id_aliases:
        record[alias] = doc.id
    record.update(doc.data)
    record["id"] = doc.id

    timestamp = next(
        (doc.data.get(name) for name in kind.timestamp_fields if doc.data.get(name)),
        None
    )
    synthesized = timestamp is None
    record[kind.timestamp_field] = utc_now_iso() if synthesized else timestamp
    return record, synthesized


def sort_newest_first(
    kind: RecordKind,
    entries: List[Tuple[Dict[str, Any], bool]]
) -> List[Dict[str, Any]]:
    """
    Stable sort by creation timestamp, newest first

    Synthesized and unparseable timestamps count as the epoch, so those
    records end up last in their original relative order.
    """
    def sort_key(entry: Tuple[Dict[str, Any], bool]) -> datetime:
        record, synthesized = entry
        if synthesized:
            return EPOCH
        return parse_timestamp(record.get(kind.timestamp_field)) or EPOCH

    return [record for record, _ in sorted(entries, key=sort_key, reverse=True)]


async def fetch_records(
    store: DocumentStore,
    kind: RecordKind,
    filters: Optional[Filters] = None,
    limit: Any = _DEFAULT_LIMIT
) -> Dict[str, Any]:
    """
    Read a collection newest-first, degrading when indexes are missing

    Args:
        store: Document store to read from
        kind: Record kind being read
        filters: Optional equality filters
        limit: Result cap; defaults to the kind's cap, None for no cap

    Returns:
        {"success": True, <records_field>: [...]} or
        {"success": False, "error": message, <records_field>: []}
    """
    if limit is _DEFAULT_LIMIT:
        limit = kind.default_limit

    try:
        documents: Optional[List[Document]] = None
        served_by: Optional[str] = None

        for sort_field in kind.sort_fields:
            try:
                documents = await store.query(
                    kind.collection,
                    filters=filters,
                    order_by=sort_field,
                    descending=True,
                    limit=limit
                )
                served_by = sort_field
                break
            except IndexUnavailableError as e:
                logger.warning(
                    f"Ordered {kind.collection} query on {sort_field} unavailable: {e}"
                )

        if served_by == kind.sort_fields[0]:
            records = [normalize_record(kind, doc)[0] for doc in documents]
        elif documents is not None:
            # served by a secondary field; reorder by the normalized timestamp
            records = sort_newest_first(kind, [normalize_record(kind, doc) for doc in documents])
        else:
            logger.warning(f"Fetching {kind.collection} unordered and sorting locally")
            documents = await store.query(kind.collection, filters=filters)
            entries = [normalize_record(kind, doc) for doc in documents]
            records = sort_newest_first(kind, entries)
            if limit:
                records = records[:limit]

        logger.info(f"Fetched {len(records)} {kind.collection}")
        return {"success": True, kind.records_field: records}

    except DocumentStoreError as e:
        logger.error(f"Error getting {kind.collection}: {e}")
        return {"success": False, "error": str(e), kind.records_field: []}
