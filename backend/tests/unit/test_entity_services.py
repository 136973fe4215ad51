"""Unit tests for the business, scenario and comment services."""

import asyncio

import pytest

from scenario_manager.application.schemas import (
    BusinessCreate,
    BusinessUpdate,
    CommentCreate,
    CommentUpdate,
    ScenarioCreate,
    ScenarioUpdate,
)
from scenario_manager.application.collections import (
    COLLECTION_COMMENTS,
    COLLECTION_SCENARIOS,
    COMPOSITE_INDEXES,
    FIELD_BUSINESS_ID,
    FIELD_SCENARIO_ID,
)
from scenario_manager.application.interfaces import BatchWrite
from scenario_manager.application.services import (
    BusinessService,
    CascadePolicy,
    CommentService,
    RecordCollections,
    ScenarioService,
)
from scenario_manager.application.services.records import comment_to_document
from scenario_manager.domain.entities import Comment, ScenarioStatus
from scenario_manager.domain.exceptions import EntityNotFoundError, StoreError
from scenario_manager.infrastructure.memory.in_memory_document_store import InMemoryDocumentStore


class QueryFailingDocumentStore(InMemoryDocumentStore):
    """Store that accepts writes but cannot run collection queries."""

    async def fetch(self, collection, query=None):
        raise StoreError("query", collection, "unavailable")


class Services:
    def __init__(self, store: InMemoryDocumentStore, cascade: bool = True):
        self.collections = RecordCollections.for_store(store)
        policy = CascadePolicy(self.collections.scenarios, self.collections.comments, enabled=cascade)
        self.businesses = BusinessService(self.collections.businesses, policy)
        self.scenarios = ScenarioService(self.collections.scenarios, policy)
        self.comments = CommentService(self.collections.comments)


async def settle() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


@pytest.fixture
def services() -> Services:
    return Services(InMemoryDocumentStore(composite_indexes=COMPOSITE_INDEXES))


async def _business_with_children(services: Services, name: str) -> tuple[str, list[str]]:
    business = await services.businesses.create_business(BusinessCreate(name=name))
    scenario_ids = []
    for title in ("one", "two"):
        scenario = await services.scenarios.create_scenario(
            business.id, ScenarioCreate(title=f"{name}-{title}", content="…")
        )
        scenario_ids.append(scenario.id)
        await services.comments.add_comment(scenario.id, CommentCreate(author="元田", text="ok"))
    return business.id, scenario_ids


# ── Businesses ──────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_businesses_are_listed_alphabetically(services: Services):
    for name in ("Ramen", "Bakery", "Cafe"):
        await services.businesses.create_business(BusinessCreate(name=name))

    listed = await services.businesses.list_businesses()

    assert [b.name for b in listed] == ["Bakery", "Cafe", "Ramen"]


@pytest.mark.asyncio
async def test_rename_business_acknowledges_with_patch(services: Services):
    business = await services.businesses.create_business(BusinessCreate(name="Old"))

    patch = await services.businesses.rename_business(business.id, BusinessUpdate(name="New"))

    assert patch.id == business.id
    assert patch.changes == {"name": "New"}
    assert (await services.businesses.get_business(business.id)).name == "New"


@pytest.mark.asyncio
async def test_get_business_not_found(services: Services):
    with pytest.raises(EntityNotFoundError):
        await services.businesses.get_business("missing")


@pytest.mark.asyncio
async def test_delete_business_cascades_to_scenarios_and_comments(services: Services):
    doomed_id, doomed_scenarios = await _business_with_children(services, "A")
    kept_id, kept_scenarios = await _business_with_children(services, "B")

    assert await services.businesses.delete_business(doomed_id) is True

    assert [b.id for b in await services.businesses.list_businesses()] == [kept_id]
    assert await services.scenarios.list_scenarios(doomed_id) == []
    remaining = {c.scenario_id for c in await services.comments.list_comments()}
    assert remaining == set(kept_scenarios)
    assert not remaining & set(doomed_scenarios)


@pytest.mark.asyncio
async def test_delete_business_without_cascade_orphans_children():
    services = Services(InMemoryDocumentStore(composite_indexes=COMPOSITE_INDEXES), cascade=False)
    business_id, scenario_ids = await _business_with_children(services, "A")

    assert await services.businesses.delete_business(business_id) is True

    assert await services.businesses.list_businesses() == []
    assert {s.id for s in await services.scenarios.list_scenarios(business_id)} == set(scenario_ids)
    assert len(await services.comments.list_comments()) == 2


@pytest.mark.asyncio
async def test_cascade_reaches_children_without_created_at():
    store = InMemoryDocumentStore(composite_indexes=COMPOSITE_INDEXES)
    services = Services(store)
    business_id, _ = await _business_with_children(services, "A")
    await store.commit_batch([
        BatchWrite.set(COLLECTION_SCENARIOS, "legacy-s", {"title": "hand written", FIELD_BUSINESS_ID: business_id}),
        BatchWrite.set(COLLECTION_COMMENTS, "legacy-c", {"text": "hand written", FIELD_SCENARIO_ID: "legacy-s"}),
    ])

    assert await services.businesses.delete_business(business_id) is True

    assert await store.fetch(COLLECTION_SCENARIOS) == []
    assert await store.fetch(COLLECTION_COMMENTS) == []


@pytest.mark.asyncio
async def test_delete_business_fails_when_children_cannot_be_read():
    services = Services(QueryFailingDocumentStore())
    business = await services.businesses.create_business(BusinessCreate(name="A"))

    assert await services.businesses.delete_business(business.id) is False
    assert (await services.businesses.get_business(business.id)).name == "A"


# ── Scenarios ───────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_created_scenario_is_listed_under_its_business(services: Services):
    business = await services.businesses.create_business(BusinessCreate(name="A"))
    await services.scenarios.create_scenario(business.id, ScenarioCreate(title="T", content="C"))

    listed = await services.scenarios.list_scenarios(business.id)

    assert len(listed) == 1
    assert (listed[0].title, listed[0].content, listed[0].business_id) == ("T", "C", business.id)


@pytest.mark.asyncio
async def test_new_scenario_defaults(services: Services):
    scenario = await services.scenarios.create_scenario("b1", ScenarioCreate(title="T", content="C"))

    assert scenario.id
    assert scenario.confirmed is False
    assert scenario.status is ScenarioStatus.WRITING
    assert scenario.url is None
    assert scenario.created_at.endswith("Z")


@pytest.mark.asyncio
async def test_fallback_listing_equals_in_memory_computation():
    store = InMemoryDocumentStore(composite_indexes=())
    services = Services(store)
    for business_id, stamp in (("a", "01"), ("b", "02"), ("a", "03"), ("a", "02")):
        await services.collections.scenarios.create({
            "title": f"{business_id}{stamp}",
            "content": "",
            "businessId": business_id,
            "createdAt": f"2024-03-{stamp}T00:00:00.000Z",
        })

    listed = await services.scenarios.list_scenarios("a")

    everything = await services.collections.scenarios.get_all()
    expected = sorted(
        (s for s in everything if s.business_id == "a"),
        key=lambda s: s.created_at,
        reverse=True,
    )
    assert [s.title for s in listed] == [s.title for s in expected] == ["a03", "a02", "a01"]


@pytest.mark.asyncio
async def test_update_scenario_writes_only_sent_fields(services: Services):
    scenario = await services.scenarios.create_scenario(
        "b1", ScenarioCreate(title="T", content="C", url="https://example.com/v")
    )

    patch = await services.scenarios.update_scenario(scenario.id, ScenarioUpdate(status=ScenarioStatus.FILMED))

    assert patch.changes == {"status": "filmed"}
    stored = await services.scenarios.get_scenario(scenario.id)
    assert stored.status is ScenarioStatus.FILMED
    assert (stored.title, stored.url, stored.created_at) == ("T", "https://example.com/v", scenario.created_at)


@pytest.mark.asyncio
async def test_update_scenario_can_clear_url(services: Services):
    scenario = await services.scenarios.create_scenario(
        "b1", ScenarioCreate(title="T", content="C", url="https://example.com/v")
    )

    patch = await services.scenarios.update_scenario(scenario.id, ScenarioUpdate(url=None))

    assert patch.changes == {"url": None}
    assert (await services.scenarios.get_scenario(scenario.id)).url is None


@pytest.mark.asyncio
async def test_toggle_confirmation_returns_new_value(services: Services):
    scenario = await services.scenarios.create_scenario("b1", ScenarioCreate(title="T", content="C"))

    assert await services.scenarios.toggle_confirmation(scenario.id, False) is True
    assert (await services.scenarios.get_scenario(scenario.id)).confirmed is True
    assert await services.scenarios.toggle_confirmation(scenario.id, True) is False


@pytest.mark.asyncio
async def test_get_scenario_not_found(services: Services):
    with pytest.raises(EntityNotFoundError):
        await services.scenarios.get_scenario("missing")


@pytest.mark.asyncio
async def test_delete_scenario_removes_its_comments(services: Services):
    _, (first, second) = await _business_with_children(services, "A")

    assert await services.scenarios.delete_scenario(first) is True

    assert await services.comments.list_comments(first) == []
    assert len(await services.comments.list_comments(second)) == 1


# ── Comments ────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_comment_subscription_always_delivers_oldest_first(services: Services):
    deliveries: list[list[str]] = []
    subscription = await services.comments.subscribe_comments(
        "s1", lambda comments: deliveries.append([c.text for c in comments])
    )
    await settle()

    for text, second in (("third", "03"), ("first", "01"), ("second", "02")):
        comment = Comment(scenario_id="s1", author="武田", text=text, created_at=f"2024-01-01T00:00:{second}.000Z")
        await services.collections.comments.create(comment_to_document(comment))
        await settle()
    subscription.close()

    assert deliveries[-1] == ["first", "second", "third"]
    for delivered in deliveries:
        assert delivered == sorted(delivered, key=["first", "second", "third"].index)


@pytest.mark.asyncio
async def test_update_comment_text(services: Services):
    comment = await services.comments.add_comment("s1", CommentCreate(author="元田", text="draft"))

    patch = await services.comments.update_comment(comment.id, CommentUpdate(text="final"))

    assert patch.changes == {"text": "final"}
    assert [c.text for c in await services.comments.list_comments("s1")] == ["final"]


@pytest.mark.asyncio
async def test_delete_comment(services: Services):
    comment = await services.comments.add_comment("s1", CommentCreate(author="元田", text="x"))

    assert await services.comments.delete_comment(comment.id) is True
    assert await services.comments.list_comments("s1") == []


def test_count_by_scenario():
    comments = [
        Comment(scenario_id="s1", author="a", text="1"),
        Comment(scenario_id="s2", author="a", text="2"),
        Comment(scenario_id="s1", author="b", text="3"),
    ]
    assert CommentService.count_by_scenario(comments) == {"s1": 2, "s2": 1}
