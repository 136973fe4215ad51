from .document_store import (
    ID_FIELD,
    BatchWrite,
    CollectionQuery,
    Document,
    DocumentCallback,
    DocumentStore,
    SnapshotCallback,
    Unsubscribe,
    sort_key,
)
from .local_cache import LocalCache

__all__ = [
    "ID_FIELD",
    "BatchWrite",
    "CollectionQuery",
    "Document",
    "DocumentCallback",
    "DocumentStore",
    "SnapshotCallback",
    "Unsubscribe",
    "sort_key",
    "LocalCache",
]
