"""Concrete DocumentStore implementation backed by Google Cloud Firestore."""

import asyncio
import logging
from collections.abc import Iterator
from contextlib import contextmanager

from google.api_core import exceptions as core_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

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
from scenario_manager.domain.exceptions import EntityNotFoundError, MissingIndexError, StoreError

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(operation: str, collection: str) -> Iterator[None]:
    """Translate Firestore client errors into domain store errors.

    FAILED_PRECONDITION is what Firestore answers when a compound query has
    no composite index.
    """
    try:
        yield
    except core_exceptions.FailedPrecondition as exc:
        raise MissingIndexError(operation, collection, exc.message) from exc
    except (core_exceptions.GoogleAPICallError, core_exceptions.RetryError) as exc:
        raise StoreError(operation, collection, str(exc)) from exc


def _to_document(snapshot) -> Document:
    return {**(snapshot.to_dict() or {}), ID_FIELD: snapshot.id}


class FirestoreDocumentStore(DocumentStore):
    """Implements the DocumentStore port on Firestore.

    Requests go through the async client. Snapshot listeners need the sync
    client: they run on its watch thread and every snapshot is handed back
    to the event loop that opened the listener.
    """

    def __init__(self, async_client: firestore.AsyncClient, sync_client: firestore.Client):
        self._async = async_client
        self._sync = sync_client

    def _build_query(self, client, collection: str, query: CollectionQuery | None):
        target = client.collection(collection)
        if query is None:
            return target
        if query.where_field is not None:
            target = target.where(filter=FieldFilter(query.where_field, "==", query.where_value))
        if query.order_by is None:
            return target
        direction = firestore.Query.DESCENDING if query.descending else firestore.Query.ASCENDING
        return target.order_by(query.order_by, direction=direction)

    # ── Reads ───────────────────────────────────────────────────────

    async def fetch(self, collection: str, query: CollectionQuery | None = None) -> list[Document]:
        with _store_errors("query", collection):
            snapshots = await self._build_query(self._async, collection, query).get()
        return [_to_document(snapshot) for snapshot in snapshots]

    async def get(self, collection: str, document_id: str) -> Document | None:
        with _store_errors("get", collection):
            snapshot = await self._async.collection(collection).document(document_id).get()
        return _to_document(snapshot) if snapshot.exists else None

    # ── Writes ──────────────────────────────────────────────────────

    async def add(self, collection: str, data: Document) -> str:
        with _store_errors("add", collection):
            _, reference = await self._async.collection(collection).add(data)
        return reference.id

    async def update(self, collection: str, document_id: str, patch: Document) -> None:
        try:
            with _store_errors("update", collection):
                await self._async.collection(collection).document(document_id).update(patch)
        except StoreError as exc:
            if isinstance(exc.__cause__, core_exceptions.NotFound):
                raise EntityNotFoundError(collection, document_id) from exc
            raise

    async def delete(self, collection: str, document_id: str) -> None:
        with _store_errors("delete", collection):
            await self._async.collection(collection).document(document_id).delete()

    async def commit_batch(self, writes: list[BatchWrite]) -> None:
        if not writes:
            return
        batch = self._async.batch()
        for write in writes:
            reference = self._async.collection(write.collection).document(write.document_id)
            if write.is_delete:
                batch.delete(reference)
            else:
                batch.set(reference, write.data)
        with _store_errors("batch", writes[0].collection):
            await batch.commit()
        logger.debug("Committed batch of %d writes", len(writes))

    # ── Change streams ─────────────────────────────────────────────

    async def listen(
        self,
        collection: str,
        query: CollectionQuery | None,
        on_snapshot: SnapshotCallback,
    ) -> Unsubscribe:
        # Watch streams report failures only inside their own thread, so a
        # compound query is probed first to surface a missing index here.
        if query is not None and query.is_compound:
            with _store_errors("listen", collection):
                await self._build_query(self._async, collection, query).limit(1).get()

        loop = asyncio.get_running_loop()

        def _on_snapshot(snapshots, _changes, _read_time) -> None:
            documents = [_to_document(snapshot) for snapshot in snapshots]
            if not loop.is_closed():
                loop.call_soon_threadsafe(on_snapshot, documents)

        with _store_errors("listen", collection):
            watch = self._build_query(self._sync, collection, query).on_snapshot(_on_snapshot)
        return watch.unsubscribe

    async def listen_document(
        self,
        collection: str,
        document_id: str,
        on_snapshot: DocumentCallback,
    ) -> Unsubscribe:
        loop = asyncio.get_running_loop()

        def _on_snapshot(snapshots, _changes, _read_time) -> None:
            current = next((s for s in snapshots if s.exists), None)
            document = _to_document(current) if current is not None else None
            if not loop.is_closed():
                loop.call_soon_threadsafe(on_snapshot, document)

        with _store_errors("listen", collection):
            watch = self._sync.collection(collection).document(document_id).on_snapshot(_on_snapshot)
        return watch.unsubscribe
