"""Application service (use case) for Scenario operations."""

import logging
from collections.abc import Callable
from typing import Any

from scenario_manager.application.collections import FIELD_BUSINESS_ID
from scenario_manager.application.interfaces import Document
from scenario_manager.application.schemas import ScenarioCreate, ScenarioUpdate
from scenario_manager.application.services.cascade_policy import CascadePolicy
from scenario_manager.application.services.record_collection import RecordCollection
from scenario_manager.application.services.records import scenario_to_document
from scenario_manager.application.services.subscription import Subscription
from scenario_manager.domain.entities import RecordPatch, Scenario
from scenario_manager.domain.exceptions import EntityNotFoundError, StoreError

logger = logging.getLogger(__name__)


class ScenarioService:
    """Orchestrates scenario CRUD, confirmation and live views of one business's scripts."""

    def __init__(self, scenarios: RecordCollection[Scenario], cascade: CascadePolicy):
        self._scenarios = scenarios
        self._cascade = cascade

    async def list_scenarios(self, business_id: str) -> list[Scenario]:
        """Scenarios of one business, newest first."""
        return await self._scenarios.get_all((FIELD_BUSINESS_ID, business_id))

    async def get_scenario(self, scenario_id: str) -> Scenario:
        scenario = await self._scenarios.get(scenario_id)
        if scenario is None:
            raise EntityNotFoundError("Scenario", scenario_id)
        return scenario

    async def create_scenario(self, business_id: str, data: ScenarioCreate) -> Scenario:
        """New scenarios start unconfirmed, in the writing state."""
        scenario = Scenario(
            title=data.title,
            content=data.content,
            business_id=business_id,
            url=data.url,
        )
        return await self._scenarios.create(scenario_to_document(scenario))

    async def update_scenario(self, scenario_id: str, data: ScenarioUpdate) -> RecordPatch:
        return await self._scenarios.update(scenario_id, _patch_from(data))

    async def toggle_confirmation(self, scenario_id: str, current: bool) -> bool:
        """Flip the confirmation flag the caller currently sees; returns the new value."""
        confirmed = not current
        await self._scenarios.update(scenario_id, {"confirmed": confirmed})
        return confirmed

    async def delete_scenario(self, scenario_id: str) -> bool:
        try:
            cascade = await self._cascade.for_scenario(scenario_id)
        except StoreError as exc:
            logger.error("Could not collect comments of scenario %s: %s", scenario_id, exc)
            return False
        return await self._scenarios.delete(scenario_id, cascade=cascade)

    async def subscribe_scenarios(
        self,
        business_id: str,
        callback: Callable[[list[Scenario]], Any],
    ) -> Subscription:
        return await self._scenarios.subscribe(callback, where=(FIELD_BUSINESS_ID, business_id))

    async def subscribe_scenario(
        self,
        scenario_id: str,
        callback: Callable[[Scenario | None], Any],
    ) -> Subscription:
        return await self._scenarios.subscribe_one(scenario_id, callback)


def _patch_from(data: ScenarioUpdate) -> Document:
    """Stored fields for the values the client actually sent. Only ``url`` may be cleared."""
    sent = data.model_dump(exclude_unset=True)
    patch: Document = {}
    for field in ("title", "content", "confirmed"):
        if sent.get(field) is not None:
            patch[field] = sent[field]
    if data.status is not None:
        patch["status"] = data.status.value
    if "url" in sent:
        patch["url"] = sent["url"]
    return patch
