"""Unit tests for the RecordCollection data-access layer."""

import asyncio

import pytest

from scenario_manager.application.collections import (
    COLLECTION_SCENARIOS,
    COMPOSITE_INDEXES,
    FIELD_BUSINESS_ID,
    FIELD_CREATED_AT,
)
from scenario_manager.application.interfaces import BatchWrite, sort_key
from scenario_manager.application.services import RecordCollections
from scenario_manager.domain.entities import Scenario
from scenario_manager.domain.exceptions import EntityNotFoundError, MissingIndexError, StoreError
from scenario_manager.infrastructure.memory.in_memory_document_store import InMemoryDocumentStore


class UnavailableDocumentStore(InMemoryDocumentStore):
    """Store whose reads, deletes and listeners always fail."""

    async def fetch(self, collection, query=None):
        raise StoreError("query", collection, "deadline exceeded")

    async def get(self, collection, document_id):
        raise StoreError("get", collection, "deadline exceeded")

    async def delete(self, collection, document_id):
        raise StoreError("delete", collection, "permission denied")

    async def commit_batch(self, writes):
        raise StoreError("batch", "batch", "permission denied")

    async def listen(self, collection, query, on_snapshot):
        raise StoreError("listen", collection, "unavailable")


async def settle() -> None:
    """Let queued snapshot deliveries run."""
    for _ in range(5):
        await asyncio.sleep(0)


def _scenario(business_id: str, created_at: str, title: str) -> dict:
    return {
        "title": title,
        "content": f"{title} body",
        FIELD_BUSINESS_ID: business_id,
        FIELD_CREATED_AT: created_at,
        "confirmed": False,
        "status": "writing",
    }


SEED = [
    BatchWrite.set(COLLECTION_SCENARIOS, "s1", _scenario("b1", "2024-01-01T00:00:00.000Z", "first")),
    BatchWrite.set(COLLECTION_SCENARIOS, "s2", _scenario("b2", "2024-01-02T00:00:00.000Z", "other")),
    BatchWrite.set(COLLECTION_SCENARIOS, "s3", _scenario("b1", "2024-01-03T00:00:00.000Z", "third")),
    BatchWrite.set(COLLECTION_SCENARIOS, "s4", _scenario("b1", "2023-12-31T00:00:00.000Z", "oldest")),
]


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore(composite_indexes=COMPOSITE_INDEXES)


# ── Create / update / delete ────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_returns_fields_plus_generated_id(store: InMemoryDocumentStore):
    businesses = RecordCollections.for_store(store).businesses

    created = await businesses.create({"name": "A"})

    assert created.id
    assert created.name == "A"
    assert await businesses.get(created.id) == created


@pytest.mark.asyncio
async def test_create_ignores_caller_supplied_id(store: InMemoryDocumentStore):
    businesses = RecordCollections.for_store(store).businesses

    created = await businesses.create({"id": "mine", "name": "A"})

    assert created.id != "mine"


@pytest.mark.asyncio
async def test_update_returns_patch_and_merges_onto_prior_state(store: InMemoryDocumentStore):
    scenarios = RecordCollections.for_store(store).scenarios
    await store.commit_batch(SEED)

    patch = await scenarios.update("s1", {"title": "renamed"})

    assert patch.id == "s1"
    assert patch.changes == {"title": "renamed"}
    stored = await scenarios.get("s1")
    assert stored.title == "renamed"
    assert stored.content == "first body"
    assert stored.created_at == "2024-01-01T00:00:00.000Z"


@pytest.mark.asyncio
async def test_update_rejects_created_at(store: InMemoryDocumentStore):
    scenarios = RecordCollections.for_store(store).scenarios
    await store.commit_batch(SEED)

    with pytest.raises(ValueError):
        await scenarios.update("s1", {FIELD_CREATED_AT: "2030-01-01T00:00:00.000Z"})

    assert (await scenarios.get("s1")).created_at == "2024-01-01T00:00:00.000Z"


@pytest.mark.asyncio
async def test_update_missing_record_raises(store: InMemoryDocumentStore):
    scenarios = RecordCollections.for_store(store).scenarios

    with pytest.raises(EntityNotFoundError):
        await scenarios.update("nope", {"title": "x"})


@pytest.mark.asyncio
async def test_empty_patch_acknowledges_existing_record(store: InMemoryDocumentStore):
    scenarios = RecordCollections.for_store(store).scenarios
    await store.commit_batch(SEED)

    patch = await scenarios.update("s1", {})

    assert patch.id == "s1"
    assert patch.changes == {}


@pytest.mark.asyncio
async def test_empty_patch_on_missing_record_raises(store: InMemoryDocumentStore):
    scenarios = RecordCollections.for_store(store).scenarios

    with pytest.raises(EntityNotFoundError):
        await scenarios.update("nope", {})


@pytest.mark.asyncio
async def test_deleted_record_never_listed_again(store: InMemoryDocumentStore):
    scenarios = RecordCollections.for_store(store).scenarios
    await store.commit_batch(SEED)

    assert await scenarios.delete("s3") is True

    listed = await scenarios.get_all((FIELD_BUSINESS_ID, "b1"))
    assert "s3" not in [s.id for s in listed]
    assert await scenarios.get("s3") is None


# ── Listing and the missing-index fallback ─────────────────────────


@pytest.mark.asyncio
async def test_filtered_listing_is_sorted_newest_first(store: InMemoryDocumentStore):
    scenarios = RecordCollections.for_store(store).scenarios
    await store.commit_batch(SEED)

    listed = await scenarios.get_all((FIELD_BUSINESS_ID, "b1"))

    assert [s.id for s in listed] == ["s3", "s1", "s4"]
    assert all(isinstance(s, Scenario) for s in listed)


@pytest.mark.asyncio
async def test_fallback_listing_matches_indexed_listing():
    indexed = InMemoryDocumentStore(composite_indexes=COMPOSITE_INDEXES)
    unindexed = InMemoryDocumentStore(composite_indexes=())
    for store in (indexed, unindexed):
        await store.commit_batch(SEED)
    query = RecordCollections.for_store(unindexed).scenarios.query((FIELD_BUSINESS_ID, "b1"))

    with pytest.raises(MissingIndexError):
        await unindexed.fetch(COLLECTION_SCENARIOS, query)

    with_index = await RecordCollections.for_store(indexed).scenarios.get_all((FIELD_BUSINESS_ID, "b1"))
    without_index = await RecordCollections.for_store(unindexed).scenarios.get_all((FIELD_BUSINESS_ID, "b1"))

    assert without_index == with_index
    assert [s.id for s in without_index] == ["s3", "s1", "s4"]


ODD_SORT_VALUES = [
    BatchWrite.set(COLLECTION_SCENARIOS, "n1", {**_scenario("b1", "", "no date"), FIELD_CREATED_AT: None}),
    BatchWrite.set(COLLECTION_SCENARIOS, "n2", {**_scenario("b1", "", "numeric date"), FIELD_CREATED_AT: 42}),
]


@pytest.mark.asyncio
async def test_null_and_mixed_type_sort_values_list_the_same_on_both_paths():
    indexed = InMemoryDocumentStore(composite_indexes=COMPOSITE_INDEXES)
    unindexed = InMemoryDocumentStore(composite_indexes=())
    for store in (indexed, unindexed):
        await store.commit_batch(SEED + ODD_SORT_VALUES)

    with_index = await RecordCollections.for_store(indexed).scenarios.get_all((FIELD_BUSINESS_ID, "b1"))
    without_index = await RecordCollections.for_store(unindexed).scenarios.get_all((FIELD_BUSINESS_ID, "b1"))

    assert without_index == with_index
    assert [s.id for s in without_index] == ["s3", "s1", "s4", "n2", "n1"]
    assert without_index[-1].created_at == ""


@pytest.mark.asyncio
async def test_fallback_subscription_survives_null_sort_values():
    store = InMemoryDocumentStore(composite_indexes=())
    await store.commit_batch(SEED + ODD_SORT_VALUES)
    scenarios = RecordCollections.for_store(store).scenarios
    deliveries: list[list[str]] = []

    subscription = await scenarios.subscribe(
        lambda items: deliveries.append([s.id for s in items]),
        where=(FIELD_BUSINESS_ID, "b1"),
    )
    await settle()
    await scenarios.update("s4", {"title": "renamed"})
    await settle()

    assert deliveries == [["s3", "s1", "s4", "n2", "n1"]] * 2
    subscription.close()


def test_sort_key_orders_values_by_type_then_value():
    values = ["b", None, 3, True, 1.5, "a", False, [1], {"k": 1}, b"x"]

    assert sorted(values, key=sort_key) == [None, False, True, 1.5, 3, "a", "b", b"x", [1], {"k": 1}]


@pytest.mark.asyncio
async def test_find_ids_includes_records_without_the_order_field(store: InMemoryDocumentStore):
    await store.commit_batch(SEED)
    undated = _scenario("b1", "", "undated")
    del undated[FIELD_CREATED_AT]
    await store.commit_batch([BatchWrite.set(COLLECTION_SCENARIOS, "u1", undated)])
    scenarios = RecordCollections.for_store(store).scenarios

    assert sorted(await scenarios.find_ids((FIELD_BUSINESS_ID, "b1"))) == ["s1", "s3", "s4", "u1"]
    assert "u1" not in [s.id for s in await scenarios.get_all((FIELD_BUSINESS_ID, "b1"))]


@pytest.mark.asyncio
async def test_read_errors_yield_empty_results():
    collections = RecordCollections.for_store(UnavailableDocumentStore())

    assert await collections.scenarios.get_all((FIELD_BUSINESS_ID, "b1")) == []
    assert await collections.businesses.get_all() == []
    assert await collections.businesses.get("b1") is None


@pytest.mark.asyncio
async def test_find_ids_propagates_read_errors():
    scenarios = RecordCollections.for_store(UnavailableDocumentStore()).scenarios

    with pytest.raises(StoreError):
        await scenarios.find_ids((FIELD_BUSINESS_ID, "b1"))


@pytest.mark.asyncio
async def test_delete_failure_returns_false():
    collections = RecordCollections.for_store(UnavailableDocumentStore())

    assert await collections.businesses.delete("b1") is False
    assert await collections.scenarios.delete("s1", cascade=[BatchWrite.delete("comments", "c1")]) is False


# ── Subscriptions ──────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_subscription_delivers_full_ordered_set_on_every_change(store: InMemoryDocumentStore):
    scenarios = RecordCollections.for_store(store).scenarios
    await store.commit_batch(SEED)
    deliveries: list[list[str]] = []

    subscription = await scenarios.subscribe(
        lambda items: deliveries.append([s.id for s in items]),
        where=(FIELD_BUSINESS_ID, "b1"),
    )
    await settle()
    await scenarios.update("s4", {"title": "still oldest"})
    await settle()

    assert deliveries == [["s3", "s1", "s4"], ["s3", "s1", "s4"]]
    subscription.close()


@pytest.mark.asyncio
async def test_fallback_subscription_matches_indexed_subscription():
    indexed = InMemoryDocumentStore(composite_indexes=COMPOSITE_INDEXES)
    unindexed = InMemoryDocumentStore(composite_indexes=())
    seen: dict[str, list[list[str]]] = {"indexed": [], "fallback": []}

    for key, store in (("indexed", indexed), ("fallback", unindexed)):
        await store.commit_batch(SEED)
        scenarios = RecordCollections.for_store(store).scenarios
        await scenarios.subscribe(
            lambda items, key=key: seen[key].append([s.id for s in items]),
            where=(FIELD_BUSINESS_ID, "b1"),
        )
        await settle()
        await scenarios.create(_scenario("b2", "2025-01-01T00:00:00.000Z", "elsewhere"))
        await settle()
        await scenarios.create(_scenario("b1", "2025-01-02T00:00:00.000Z", "newest"))
        await settle()

    # Generated ids differ between the two stores; compare everything else.
    assert len(seen["fallback"]) == len(seen["indexed"]) == 3
    assert seen["fallback"][:2] == seen["indexed"][:2] == [["s3", "s1", "s4"]] * 2
    for key in seen:
        newest, *rest = seen[key][-1]
        assert newest not in {"s1", "s3", "s4"}
        assert rest == ["s3", "s1", "s4"]


@pytest.mark.asyncio
async def test_subscription_failure_returns_inert_subscription():
    scenarios = RecordCollections.for_store(UnavailableDocumentStore()).scenarios
    deliveries = []

    subscription = await scenarios.subscribe(deliveries.append, where=(FIELD_BUSINESS_ID, "b1"))
    await settle()

    assert not subscription.is_live
    assert not subscription.closed
    assert deliveries == []
    subscription.close()
    assert subscription.closed


@pytest.mark.asyncio
async def test_no_delivery_after_close(store: InMemoryDocumentStore):
    businesses = RecordCollections.for_store(store).businesses
    deliveries = []

    subscription = await businesses.subscribe(deliveries.append)
    # The initial snapshot is already queued on the loop.
    subscription.close()
    await businesses.create({"name": "late"})
    await settle()

    assert deliveries == []
    assert store.listener_count == 0


@pytest.mark.asyncio
async def test_subscribe_one_tracks_a_single_record(store: InMemoryDocumentStore):
    scenarios = RecordCollections.for_store(store).scenarios
    await store.commit_batch(SEED)
    titles: list[str | None] = []

    with await scenarios.subscribe_one("s1", lambda s: titles.append(s.title if s else None)):
        await settle()
        await scenarios.update("s1", {"title": "edited"})
        await settle()
        await scenarios.delete("s1")
        await settle()

    assert titles == ["first", "edited", None]
    assert store.listener_count == 0
