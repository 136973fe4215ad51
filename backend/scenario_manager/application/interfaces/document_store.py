"""Abstract document store interface (port) — the hosted record store contract."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

# Every document handed out by a store carries its id under this key.
ID_FIELD = "id"

Document = dict[str, Any]
SnapshotCallback = Callable[[list[Document]], None]
DocumentCallback = Callable[[Document | None], None]
Unsubscribe = Callable[[], None]


@dataclass(frozen=True)
class CollectionQuery:
    """A query with an optional equality filter and an optional order field.

    A filtered and ordered query is compound and needs a composite index on
    the store side. ``apply`` is the in-memory equivalent used when that
    index is missing; it follows the store's semantics: when ordered,
    documents lacking the order field are excluded, values of different
    types sort by type rank (see ``sort_key``) and ties are broken by id in
    the same direction. An unordered query matches documents with or
    without any particular field.
    """

    order_by: str | None = None
    descending: bool = False
    where_field: str | None = None
    where_value: Any = None

    @property
    def is_filtered(self) -> bool:
        return self.where_field is not None

    @property
    def is_compound(self) -> bool:
        return self.is_filtered and self.order_by is not None

    def matches(self, document: Document) -> bool:
        if self.order_by is not None and self.order_by not in document:
            return False
        if self.where_field is None:
            return True
        return document.get(self.where_field) == self.where_value

    def apply(self, documents: Iterable[Document]) -> list[Document]:
        """Filter and sort already-fetched documents."""
        selected = [doc for doc in documents if self.matches(doc)]
        if self.order_by is None:
            return selected
        return sorted(
            selected,
            key=lambda doc: (sort_key(doc[self.order_by]), str(doc.get(ID_FIELD, ""))),
            reverse=self.descending,
        )


def sort_key(value: Any) -> tuple:
    """Total ordering key for a stored field value.

    Values of different types order as the hosted store orders them: null,
    booleans, numbers, timestamps, strings, bytes, arrays, maps. Anything
    else sorts last by its repr.
    """
    if value is None:
        return (0,)
    if isinstance(value, bool):
        return (1, value)
    if isinstance(value, (int, float)):
        # NaN sorts before every other number
        return (2, 0, 0) if value != value else (2, 1, value)
    if isinstance(value, datetime):
        return (3, value.timestamp())
    if isinstance(value, str):
        return (4, value)
    if isinstance(value, bytes):
        return (5, value)
    if isinstance(value, (list, tuple)):
        return (6, tuple(sort_key(item) for item in value))
    if isinstance(value, dict):
        return (7, tuple((str(k), sort_key(v)) for k, v in sorted(value.items(), key=lambda kv: str(kv[0]))))
    return (8, repr(value))


@dataclass(frozen=True)
class BatchWrite:
    """One write inside an atomic batch. ``data=None`` means delete."""

    collection: str
    document_id: str
    data: Document | None = None

    @classmethod
    def set(cls, collection: str, document_id: str, data: Document) -> "BatchWrite":
        return cls(collection=collection, document_id=document_id, data=data)

    @classmethod
    def delete(cls, collection: str, document_id: str) -> "BatchWrite":
        return cls(collection=collection, document_id=document_id)

    @property
    def is_delete(self) -> bool:
        return self.data is None


class DocumentStore(ABC):
    """Port for the remote document store — implemented in the infrastructure layer.

    Failures surface as ``StoreError``; a compound query without its
    composite index raises ``MissingIndexError``. Listener callbacks are
    always invoked on the event loop that opened the listener, in the
    store's change order.
    """

    @abstractmethod
    async def fetch(self, collection: str, query: CollectionQuery | None = None) -> list[Document]:
        """Return all documents of a collection, optionally filtered and ordered."""
        ...

    @abstractmethod
    async def get(self, collection: str, document_id: str) -> Document | None:
        """Return a single document, or None when it does not exist."""
        ...

    @abstractmethod
    async def add(self, collection: str, data: Document) -> str:
        """Insert a document under a store-generated id and return that id."""
        ...

    @abstractmethod
    async def update(self, collection: str, document_id: str, patch: Document) -> None:
        """Merge the given fields into an existing document."""
        ...

    @abstractmethod
    async def delete(self, collection: str, document_id: str) -> None:
        """Remove a document. Deleting a missing document is not an error."""
        ...

    @abstractmethod
    async def commit_batch(self, writes: list[BatchWrite]) -> None:
        """Apply all writes atomically — either every write lands or none does."""
        ...

    @abstractmethod
    async def listen(
        self,
        collection: str,
        query: CollectionQuery | None,
        on_snapshot: SnapshotCallback,
    ) -> Unsubscribe:
        """Open a change stream delivering the full result set on every change."""
        ...

    @abstractmethod
    async def listen_document(
        self,
        collection: str,
        document_id: str,
        on_snapshot: DocumentCallback,
    ) -> Unsubscribe:
        """Open a change stream for one document (None while it does not exist)."""
        ...

    async def close(self) -> None:
        """Release client resources. Default: nothing to release."""
        return None
