"""Generic data-access layer over one document store collection.

Every entity type goes through a ``RecordCollection``: it turns typed CRUD
intents into store calls, opens live subscriptions, and owns the
degraded-query fallback.

Fallback policy:
    A filtered + ordered query needs a composite index on the store side.
    When the store answers with ``MissingIndexError`` (and only then) the
    collection re-reads or re-subscribes to the whole unfiltered collection
    and applies the same filter and sort in memory. The caller never sees
    the first failure. Any other ``StoreError`` on a read is logged and
    surfaces as an empty result (fetch) or a silent subscription.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

from scenario_manager.application.interfaces import (
    ID_FIELD,
    BatchWrite,
    CollectionQuery,
    Document,
    DocumentStore,
)
from scenario_manager.application.services.subscription import Subscription
from scenario_manager.domain.entities import RecordPatch
from scenario_manager.domain.exceptions import EntityNotFoundError, MissingIndexError, StoreError

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT")

Where = tuple[str, Any]


class RecordCollection(Generic[EntityT]):
    """Typed CRUD + live access to one collection, ordered by a designated field."""

    def __init__(
        self,
        store: DocumentStore,
        name: str,
        *,
        to_entity: Callable[[Document], EntityT],
        order_by: str,
        descending: bool = False,
        immutable_fields: Iterable[str] = (),
    ):
        self._store = store
        self.name = name
        self._to_entity = to_entity
        self._order_by = order_by
        self._descending = descending
        self._immutable_fields = frozenset(immutable_fields)

    def query(self, where: Where | None = None) -> CollectionQuery:
        """Build the listing query, optionally constrained by an equality filter."""
        field, value = where if where is not None else (None, None)
        return CollectionQuery(
            order_by=self._order_by,
            descending=self._descending,
            where_field=field,
            where_value=value,
        )

    # ── Reads ───────────────────────────────────────────────────────

    async def get_all(self, where: Where | None = None) -> list[EntityT]:
        """Fetch every matching record, ordered. Read errors yield an empty list."""
        try:
            documents = await self._fetch(self.query(where))
        except StoreError as exc:
            logger.error("Failed to list %s: %s", self.name, exc)
            return []
        return [self._to_entity(doc) for doc in documents]

    async def find_ids(self, where: Where) -> list[str]:
        """Ids of the matching records. Unlike get_all(), read errors propagate.

        The query is unordered, so records lacking the order field are found too.
        """
        field, value = where
        documents = await self._store.fetch(self.name, CollectionQuery(where_field=field, where_value=value))
        return [doc[ID_FIELD] for doc in documents]

    async def get(self, record_id: str) -> EntityT | None:
        try:
            document = await self._store.get(self.name, record_id)
        except StoreError as exc:
            logger.error("Failed to read %s/%s: %s", self.name, record_id, exc)
            return None
        return self._to_entity(document) if document is not None else None

    async def _fetch(self, query: CollectionQuery) -> list[Document]:
        try:
            return await self._store.fetch(self.name, query)
        except MissingIndexError:
            logger.warning(
                "Missing composite index on %s (%s, %s) — filtering in memory",
                self.name,
                query.where_field,
                query.order_by,
            )
            return query.apply(await self._store.fetch(self.name))

    # ── Writes ──────────────────────────────────────────────────────

    async def create(self, fields: Document) -> EntityT:
        """Insert under a store-generated id and return the created record at once."""
        body = {key: value for key, value in fields.items() if key != ID_FIELD}
        record_id = await self._store.add(self.name, body)
        logger.debug("Created %s/%s", self.name, record_id)
        return self._to_entity({**body, ID_FIELD: record_id})

    async def update(self, record_id: str, patch: Document) -> RecordPatch:
        """Merge-patch the given fields and acknowledge with exactly those fields."""
        frozen = self._immutable_fields & patch.keys()
        if frozen:
            raise ValueError(f"{self.name}: fields {sorted(frozen)} cannot be changed after creation")
        changes = {key: value for key, value in patch.items() if key != ID_FIELD}
        if changes:
            await self._store.update(self.name, record_id, changes)
        elif await self._store.get(self.name, record_id) is None:
            raise EntityNotFoundError(self.name, record_id)
        return RecordPatch(id=record_id, changes=changes)

    async def delete(self, record_id: str, cascade: Iterable[BatchWrite] = ()) -> bool:
        """Remove a record, atomically with any cascaded deletes. Never raises."""
        writes = list(cascade)
        try:
            if writes:
                writes.append(BatchWrite.delete(self.name, record_id))
                await self._store.commit_batch(writes)
            else:
                await self._store.delete(self.name, record_id)
        except StoreError as exc:
            logger.error("Failed to delete %s/%s: %s", self.name, record_id, exc)
            return False
        logger.debug("Deleted %s/%s (+%d cascaded)", self.name, record_id, max(len(writes) - 1, 0))
        return True

    def deletes_for(self, record_ids: Iterable[str]) -> list[BatchWrite]:
        return [BatchWrite.delete(self.name, record_id) for record_id in record_ids]

    # ── Live subscriptions ─────────────────────────────────────────

    async def subscribe(
        self,
        callback: Callable[[list[EntityT]], Any],
        where: Where | None = None,
    ) -> Subscription:
        """Deliver the full ordered result set to ``callback`` on every change."""
        query = self.query(where)
        subscription = Subscription(f"{self.name}[{query.where_field}={query.where_value!r}]")
        deliver = subscription.gate(
            lambda documents: callback([self._to_entity(doc) for doc in documents])
        )

        try:
            unsubscribe = await self._store.listen(self.name, query, deliver)
        except MissingIndexError:
            logger.warning(
                "Missing composite index on %s (%s, %s) — subscribing to the whole collection",
                self.name,
                query.where_field,
                query.order_by,
            )
            try:
                unsubscribe = await self._store.listen(
                    self.name, None, lambda documents: deliver(query.apply(documents))
                )
            except StoreError as exc:
                logger.error("Failed to subscribe to %s: %s", self.name, exc)
                return subscription
        except StoreError as exc:
            logger.error("Failed to subscribe to %s: %s", self.name, exc)
            return subscription

        subscription.attach(unsubscribe)
        return subscription

    async def subscribe_one(
        self,
        record_id: str,
        callback: Callable[[EntityT | None], Any],
    ) -> Subscription:
        """Deliver one record (or None while it does not exist) on every change."""
        subscription = Subscription(f"{self.name}/{record_id}")
        deliver = subscription.gate(
            lambda document: callback(self._to_entity(document) if document is not None else None)
        )
        try:
            unsubscribe = await self._store.listen_document(self.name, record_id, deliver)
        except StoreError as exc:
            logger.error("Failed to subscribe to %s/%s: %s", self.name, record_id, exc)
            return subscription
        subscription.attach(unsubscribe)
        return subscription
