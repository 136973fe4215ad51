"""Application service for quick labels and their live, self-seeding feed."""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from scenario_manager.application.collections import COLLECTION_QUICK_LABELS, FIELD_ORDER
from scenario_manager.application.interfaces import BatchWrite, Document, DocumentStore
from scenario_manager.application.schemas import QuickLabelCreate, QuickLabelUpdate
from scenario_manager.application.services.record_collection import RecordCollection
from scenario_manager.application.services.subscription import Subscription
from scenario_manager.domain.entities import QuickLabel, RecordPatch
from scenario_manager.domain.exceptions import StoreError

logger = logging.getLogger(__name__)

DEFAULT_LABEL_ID_PREFIX = "default-"


class QuickLabelService:
    """Orchestrates the global quick-label list (ordered by ``order``)."""

    def __init__(
        self,
        labels: RecordCollection[QuickLabel],
        store: DocumentStore,
        default_labels: list[str],
    ):
        self._labels = labels
        self._store = store
        self._default_labels = list(default_labels)

    async def list_labels(self) -> list[QuickLabel]:
        return await self._labels.get_all()

    async def add_label(self, data: QuickLabelCreate) -> QuickLabel:
        """Create a label; without an explicit order it is appended after the last one."""
        order = data.order
        if order is None:
            existing = await self._labels.get_all()
            order = max((label.order for label in existing), default=-1) + 1
        return await self._labels.create({"label": data.label, FIELD_ORDER: order})

    async def update_label(self, label_id: str, data: QuickLabelUpdate) -> RecordPatch:
        patch: Document = {}
        if data.label is not None:
            patch["label"] = data.label
        if data.order is not None:
            patch[FIELD_ORDER] = data.order
        return await self._labels.update(label_id, patch)

    async def delete_label(self, label_id: str) -> bool:
        return await self._labels.delete(label_id)

    async def seed_defaults(self) -> list[QuickLabel]:
        """Write the default labels in one batch.

        Ids are fixed (``default-0``, ``default-1``, ...), so two seeders racing
        on the same empty collection write the same documents instead of
        duplicating them.
        """
        labels = [
            QuickLabel(id=f"{DEFAULT_LABEL_ID_PREFIX}{index}", label=text, order=index)
            for index, text in enumerate(self._default_labels)
        ]
        await self._store.commit_batch([
            BatchWrite.set(COLLECTION_QUICK_LABELS, label.id, {"label": label.label, FIELD_ORDER: label.order})
            for label in labels
        ])
        logger.info("Seeded %d default quick labels", len(labels))
        return labels

    async def open_feed(self, callback: Callable[[list[QuickLabel]], Any]) -> "QuickLabelFeed":
        feed = QuickLabelFeed(self, callback)
        await feed.open()
        return feed

    async def subscribe_labels(self, callback: Callable[[list[QuickLabel]], Any]) -> Subscription:
        return await self._labels.subscribe(callback)


class QuickLabelFeed:
    """One consumer's live view of the quick labels.

    The first time the feed observes an empty collection it seeds the
    defaults. The guard is this feed's own flag, set before the seeding
    task is scheduled, so snapshots arriving while seeding is in flight
    never seed a second time. It lives and dies with the feed.
    """

    def __init__(self, service: QuickLabelService, callback: Callable[[list[QuickLabel]], Any]):
        self._service = service
        self._callback = callback
        self._seeded = False
        self._seed_task: asyncio.Task[None] | None = None
        self._subscription: Subscription | None = None

    async def open(self) -> None:
        self._subscription = await self._service.subscribe_labels(self._on_snapshot)

    def _on_snapshot(self, labels: list[QuickLabel]) -> None:
        if not labels and not self._seeded:
            self._seeded = True
            self._seed_task = asyncio.get_running_loop().create_task(self._seed())
        self._callback(labels)

    async def _seed(self) -> None:
        try:
            await self._service.seed_defaults()
        except StoreError as exc:
            logger.error("Failed to seed default quick labels: %s", exc)

    @property
    def seeded(self) -> bool:
        return self._seeded

    @property
    def seed_task(self) -> asyncio.Task[None] | None:
        return self._seed_task

    @property
    def subscription(self) -> Subscription | None:
        return self._subscription

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.close()

    def __enter__(self) -> "QuickLabelFeed":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
