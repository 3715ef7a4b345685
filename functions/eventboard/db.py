"""
Document database abstraction for Firestore and an in-memory test implementation.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Protocol

from google.api_core import exceptions
from google.cloud.firestore_v1 import SERVER_TIMESTAMP, Query
from google.cloud.firestore_v1.base_query import FieldFilter

# (field, value) equality filter.
WhereClause = tuple[str, Any]


class DocumentDbClient(Protocol):
    """Collection-scoped document operations the API needs."""

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        ...

    def set(self, collection: str, doc_id: str, data: dict) -> None:
        ...

    def add(self, collection: str, data: dict) -> str:
        ...

    def update(self, collection: str, doc_id: str, data: dict) -> None:
        ...

    def delete(self, collection: str, doc_id: str) -> None:
        ...

    def query(
        self,
        collection: str,
        *,
        order_by: str,
        descending: bool = False,
        limit: Optional[int] = None,
        where: Optional[WhereClause] = None,
    ) -> list[tuple[str, dict]]:
        ...


class FirestoreDbClient:
    """Thin wrapper over a ``google.cloud.firestore.Client``."""

    def __init__(self, client):
        self._client = client

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        snapshot = self._client.collection(collection).document(doc_id).get()
        if not snapshot.exists:
            return None
        return snapshot.to_dict()

    def set(self, collection: str, doc_id: str, data: dict) -> None:
        self._client.collection(collection).document(doc_id).set(data)

    def add(self, collection: str, data: dict) -> str:
        _, doc_ref = self._client.collection(collection).add(data)
        return doc_ref.id

    def update(self, collection: str, doc_id: str, data: dict) -> None:
        self._client.collection(collection).document(doc_id).update(data)

    def delete(self, collection: str, doc_id: str) -> None:
        self._client.collection(collection).document(doc_id).delete()

    def query(
        self,
        collection: str,
        *,
        order_by: str,
        descending: bool = False,
        limit: Optional[int] = None,
        where: Optional[WhereClause] = None,
    ) -> list[tuple[str, dict]]:
        query = self._client.collection(collection)
        if where is not None:
            field, value = where
            query = query.where(filter=FieldFilter(field, "==", value))
        direction = Query.DESCENDING if descending else Query.ASCENDING
        query = query.order_by(order_by, direction=direction)
        if limit is not None:
            query = query.limit(limit)
        return [(snapshot.id, snapshot.to_dict()) for snapshot in query.stream()]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryDbClient:
    """Simple in-memory document store for development and tests."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self.clock = clock
        self.collections: Dict[str, Dict[str, dict]] = {}

    def reset(self) -> None:
        self.collections.clear()

    def _resolve(self, data: dict) -> dict:
        now = None
        resolved = {}
        for key, value in data.items():
            if value is SERVER_TIMESTAMP:
                if now is None:
                    now = self.clock()
                value = now
            resolved[key] = value
        return resolved

    def _collection(self, collection: str) -> Dict[str, dict]:
        return self.collections.setdefault(collection, {})

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        doc = self._collection(collection).get(doc_id)
        return dict(doc) if doc is not None else None

    def set(self, collection: str, doc_id: str, data: dict) -> None:
        self._collection(collection)[doc_id] = self._resolve(data)

    def add(self, collection: str, data: dict) -> str:
        doc_id = uuid.uuid4().hex[:20]
        self.set(collection, doc_id, data)
        return doc_id

    def update(self, collection: str, doc_id: str, data: dict) -> None:
        docs = self._collection(collection)
        if doc_id not in docs:
            raise exceptions.NotFound(f"No document to update: {collection}/{doc_id}")
        docs[doc_id].update(self._resolve(data))

    def delete(self, collection: str, doc_id: str) -> None:
        self._collection(collection).pop(doc_id, None)

    def query(
        self,
        collection: str,
        *,
        order_by: str,
        descending: bool = False,
        limit: Optional[int] = None,
        where: Optional[WhereClause] = None,
    ) -> list[tuple[str, dict]]:
        items = list(self._collection(collection).items())
        if where is not None:
            field, value = where
            items = [(doc_id, doc) for doc_id, doc in items if doc.get(field) == value]
        # Firestore drops documents lacking the order_by field.
        items = [(doc_id, doc) for doc_id, doc in items if doc.get(order_by) is not None]
        items.sort(key=lambda item: item[1][order_by], reverse=descending)
        if limit is not None:
            items = items[:limit]
        return [(doc_id, dict(doc)) for doc_id, doc in items]
