"""Process-local DocumentStore — same contract as the hosted store, no network.

Used when ``DOCUMENT_STORE=memory`` (local development) and by the tests.
Compound queries are only served for the composite indexes it was given,
mirroring the hosted store's missing-index failure. Snapshots are delivered
through ``loop.call_soon`` in change order, so, as with a real change
stream, a snapshot can still be in flight when a listener is removed.
"""

import asyncio
import copy
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from uuid import uuid4

from scenario_manager.application.interfaces import (
    ID_FIELD,
    BatchWrite,
    CollectionQuery,
    Document,
    DocumentCallback,
    DocumentStore,
    SnapshotCallback,
    Unsubscribe,
)
from scenario_manager.domain.exceptions import EntityNotFoundError, MissingIndexError

logger = logging.getLogger(__name__)

IndexKey = tuple[str, str, str]  # (collection, equality field, order field)


@dataclass(eq=False)
class _Listener:
    collection: str
    query: CollectionQuery | None
    callback: SnapshotCallback
    loop: asyncio.AbstractEventLoop


@dataclass(eq=False)
class _DocumentListener:
    collection: str
    document_id: str
    callback: DocumentCallback
    loop: asyncio.AbstractEventLoop


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed document store with change streams.

    ``composite_indexes=None`` serves every compound query; an iterable of
    ``(collection, field, order_by)`` serves only those and raises
    ``MissingIndexError`` for the rest.
    """

    def __init__(self, composite_indexes: Iterable[IndexKey] | None = None):
        self._collections: dict[str, dict[str, Document]] = {}
        self._indexes = set(composite_indexes) if composite_indexes is not None else None
        self._listeners: list[_Listener] = []
        self._document_listeners: list[_DocumentListener] = []

    # ── Reads ───────────────────────────────────────────────────────

    async def fetch(self, collection: str, query: CollectionQuery | None = None) -> list[Document]:
        self._check_index(collection, query)
        return self._snapshot(collection, query)

    async def get(self, collection: str, document_id: str) -> Document | None:
        return self._document(collection, document_id)

    # ── Writes ──────────────────────────────────────────────────────

    async def add(self, collection: str, data: Document) -> str:
        document_id = uuid4().hex
        self._documents(collection)[document_id] = copy.deepcopy(data)
        self._notify(collection, {document_id})
        return document_id

    async def update(self, collection: str, document_id: str, patch: Document) -> None:
        documents = self._documents(collection)
        if document_id not in documents:
            raise EntityNotFoundError(collection, document_id)
        documents[document_id].update(copy.deepcopy(patch))
        self._notify(collection, {document_id})

    async def delete(self, collection: str, document_id: str) -> None:
        if self._documents(collection).pop(document_id, None) is not None:
            self._notify(collection, {document_id})

    async def commit_batch(self, writes: list[BatchWrite]) -> None:
        touched: dict[str, set[str]] = {}
        for write in writes:
            documents = self._documents(write.collection)
            if write.is_delete:
                documents.pop(write.document_id, None)
            else:
                documents[write.document_id] = copy.deepcopy(write.data)
            touched.setdefault(write.collection, set()).add(write.document_id)
        logger.debug("Committed batch of %d writes", len(writes))
        for collection, document_ids in touched.items():
            self._notify(collection, document_ids)

    # ── Change streams ─────────────────────────────────────────────

    async def listen(
        self,
        collection: str,
        query: CollectionQuery | None,
        on_snapshot: SnapshotCallback,
    ) -> Unsubscribe:
        self._check_index(collection, query)
        listener = _Listener(collection, query, on_snapshot, asyncio.get_running_loop())
        self._listeners.append(listener)
        self._deliver(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def listen_document(
        self,
        collection: str,
        document_id: str,
        on_snapshot: DocumentCallback,
    ) -> Unsubscribe:
        listener = _DocumentListener(collection, document_id, on_snapshot, asyncio.get_running_loop())
        self._document_listeners.append(listener)
        self._deliver_document(listener)

        def unsubscribe() -> None:
            if listener in self._document_listeners:
                self._document_listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners) + len(self._document_listeners)

    # ── Internals ───────────────────────────────────────────────────

    def _documents(self, collection: str) -> dict[str, Document]:
        return self._collections.setdefault(collection, {})

    def _document(self, collection: str, document_id: str) -> Document | None:
        stored = self._documents(collection).get(document_id)
        if stored is None:
            return None
        return {**copy.deepcopy(stored), ID_FIELD: document_id}

    def _snapshot(self, collection: str, query: CollectionQuery | None) -> list[Document]:
        documents = [
            {**copy.deepcopy(data), ID_FIELD: document_id}
            for document_id, data in self._documents(collection).items()
        ]
        return query.apply(documents) if query is not None else documents

    def _check_index(self, collection: str, query: CollectionQuery | None) -> None:
        if query is None or not query.is_compound or self._indexes is None:
            return
        if (collection, query.where_field, query.order_by) not in self._indexes:
            raise MissingIndexError(
                "query",
                collection,
                f"The query requires an index on ({query.where_field}, {query.order_by})",
            )

    def _notify(self, collection: str, document_ids: set[str]) -> None:
        for listener in list(self._listeners):
            if listener.collection == collection:
                self._deliver(listener)
        for document_listener in list(self._document_listeners):
            if document_listener.collection == collection and document_listener.document_id in document_ids:
                self._deliver_document(document_listener)

    def _deliver(self, listener: _Listener) -> None:
        snapshot = self._snapshot(listener.collection, listener.query)
        listener.loop.call_soon(listener.callback, snapshot)

    def _deliver_document(self, listener: _DocumentListener) -> None:
        snapshot = self._document(listener.collection, listener.document_id)
        listener.loop.call_soon(listener.callback, snapshot)
