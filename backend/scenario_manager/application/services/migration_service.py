"""One-shot migration of locally cached records into the document store.

Runs at start-up before the first read. The three legacy cache keys each
hold a JSON array of records that already carry their client-generated
``id``; every record is written under that same id in a single atomic
batch, and the cache is cleared only after the batch commits. On failure
the cache is left untouched so the next start retries. A failure while
reading or clearing the cache is reported in the result, never raised.
"""

import json
import logging
from dataclasses import dataclass, field
from uuid import uuid4

from scenario_manager.application.collections import LEGACY_CACHE_KEYS
from scenario_manager.application.interfaces import ID_FIELD, BatchWrite, DocumentStore, LocalCache
from scenario_manager.domain.exceptions import StoreError
from scenario_manager.infrastructure.logging.colored_logger import MigrationStage, StageLogger

logger = logging.getLogger(__name__)
plog = StageLogger("MigrationService")


@dataclass
class MigrationResult:
    """Outcome of one migration run."""

    migrated: dict[str, int] = field(default_factory=dict)  # collection -> records written
    skipped: bool = False
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def total(self) -> int:
        return sum(self.migrated.values())


class MigrationService:
    """Copies the legacy local cache into the document store, then clears it."""

    def __init__(
        self,
        local_cache: LocalCache,
        store: DocumentStore,
        cache_keys: dict[str, str] | None = None,
    ):
        self._cache = local_cache
        self._store = store
        self._cache_keys = dict(cache_keys or LEGACY_CACHE_KEYS)

    async def migrate(self) -> MigrationResult:
        plog.step_start(MigrationStage.READ_CACHE, "Reading local cache", keys=len(self._cache_keys))
        present: dict[str, str] = {}
        try:
            for key in self._cache_keys:
                value = await self._cache.get_item(key)
                if value is not None:
                    present[key] = value
        except Exception as exc:
            plog.step_error(MigrationStage.READ_CACHE, "Reading the local cache failed", error=exc)
            return MigrationResult(error=str(exc))

        if not present:
            plog.step_complete(MigrationStage.SKIPPED, "No local cache — nothing to migrate")
            return MigrationResult(skipped=True)

        try:
            writes, counts = self._plan(present)
        except ValueError as exc:
            plog.step_error(MigrationStage.READ_CACHE, "Local cache is not a list of records", error=exc)
            return MigrationResult(error=str(exc))
        plog.step_complete(MigrationStage.READ_CACHE, f"Decoded {len(writes)} records", **counts)

        try:
            with plog.timed_step(MigrationStage.BATCH_WRITE, "Committing migration batch", writes=len(writes)):
                if writes:
                    await self._store.commit_batch(writes)
        except StoreError as exc:
            logger.warning("Migration batch failed; local cache kept for the next start")
            return MigrationResult(error=str(exc))

        try:
            for key in present:
                await self._cache.remove_item(key)
        except Exception as exc:
            plog.step_error(MigrationStage.CLEAR_CACHE, "Clearing the local cache failed", error=exc)
            return MigrationResult(migrated=counts, error=str(exc))
        plog.step_complete(MigrationStage.CLEAR_CACHE, "Local cache cleared", keys=len(present))
        return MigrationResult(migrated=counts)

    def _plan(self, present: dict[str, str]) -> tuple[list[BatchWrite], dict[str, int]]:
        """Decode every present key into set-writes that keep the legacy ids."""
        writes: list[BatchWrite] = []
        counts: dict[str, int] = {}
        for key, raw in present.items():
            collection = self._cache_keys[key]
            records = json.loads(raw)
            if not isinstance(records, list):
                raise ValueError(f"{key}: expected a JSON array, got {type(records).__name__}")
            for record in records:
                if not isinstance(record, dict):
                    raise ValueError(f"{key}: expected record objects, got {type(record).__name__}")
                record_id = record.get(ID_FIELD)
                if not record_id:
                    record_id = str(uuid4())
                    plog.detail(f"Record without id in {key} — assigned {record_id}")
                body = {name: value for name, value in record.items() if name != ID_FIELD}
                writes.append(BatchWrite.set(collection, str(record_id), body))
            counts[collection] = counts.get(collection, 0) + len(records)
        return writes, counts
