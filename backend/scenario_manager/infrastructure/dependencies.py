"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import Depends

from scenario_manager.config import get_settings
from scenario_manager.application.collections import COMPOSITE_INDEXES
from scenario_manager.application.interfaces import DocumentStore
from scenario_manager.application.services import (
    BusinessService,
    CascadePolicy,
    CommentService,
    QuickLabelService,
    RecordCollections,
    ScenarioService,
)
from scenario_manager.infrastructure.firestore.client import create_firestore_clients
from scenario_manager.infrastructure.firestore.firestore_document_store import FirestoreDocumentStore
from scenario_manager.infrastructure.memory.in_memory_document_store import InMemoryDocumentStore


@lru_cache
def get_document_store() -> DocumentStore:
    """Process-wide document store selected by DOCUMENT_STORE."""
    settings = get_settings()
    if settings.document_store == "memory":
        return InMemoryDocumentStore(composite_indexes=COMPOSITE_INDEXES)
    if settings.document_store == "firestore":
        async_client, sync_client = create_firestore_clients(settings)
        return FirestoreDocumentStore(async_client, sync_client)
    raise ValueError(f"Unknown document store '{settings.document_store}' (expected 'firestore' or 'memory')")


def get_record_collections(
    store: DocumentStore = Depends(get_document_store),
) -> RecordCollections:
    return RecordCollections.for_store(store)


def get_cascade_policy(
    collections: RecordCollections = Depends(get_record_collections),
) -> CascadePolicy:
    """Cascade or orphan children on delete, per CASCADE_DELETES."""
    return CascadePolicy(
        collections.scenarios,
        collections.comments,
        enabled=get_settings().cascade_deletes,
    )


async def get_business_service(
    collections: RecordCollections = Depends(get_record_collections),
    cascade: CascadePolicy = Depends(get_cascade_policy),
) -> AsyncGenerator[BusinessService, None]:
    """Provides a BusinessService bound to the shared store."""
    yield BusinessService(collections.businesses, cascade)


async def get_scenario_service(
    collections: RecordCollections = Depends(get_record_collections),
    cascade: CascadePolicy = Depends(get_cascade_policy),
) -> AsyncGenerator[ScenarioService, None]:
    yield ScenarioService(collections.scenarios, cascade)


async def get_comment_service(
    collections: RecordCollections = Depends(get_record_collections),
) -> AsyncGenerator[CommentService, None]:
    yield CommentService(collections.comments)


async def get_quick_label_service(
    collections: RecordCollections = Depends(get_record_collections),
    store: DocumentStore = Depends(get_document_store),
) -> AsyncGenerator[QuickLabelService, None]:
    """Provides a QuickLabelService seeded with the configured default labels."""
    yield QuickLabelService(
        collections.quick_labels,
        store,
        default_labels=get_settings().default_quick_labels,
    )
