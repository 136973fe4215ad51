"""Referential-integrity policy for deletes of parent records."""

import logging

from scenario_manager.application.collections import FIELD_BUSINESS_ID, FIELD_SCENARIO_ID
from scenario_manager.application.interfaces import BatchWrite
from scenario_manager.application.services.record_collection import RecordCollection
from scenario_manager.domain.entities import Comment, Scenario

logger = logging.getLogger(__name__)


class CascadePolicy:
    """Decides which child records disappear together with a parent.

    With ``enabled`` a business takes its scenarios and their comments with
    it, and a scenario takes its comments. Disabled, children are left in
    place as orphans. The returned writes are committed in the same atomic
    batch as the parent delete.
    """

    def __init__(
        self,
        scenarios: RecordCollection[Scenario],
        comments: RecordCollection[Comment],
        *,
        enabled: bool = True,
    ):
        self._scenarios = scenarios
        self._comments = comments
        self.enabled = enabled

    async def for_business(self, business_id: str) -> list[BatchWrite]:
        """Deletes for every scenario of the business and every comment on them."""
        if not self.enabled:
            return []
        scenario_ids = await self._scenarios.find_ids((FIELD_BUSINESS_ID, business_id))
        writes: list[BatchWrite] = []
        for scenario_id in scenario_ids:
            writes.extend(await self._comment_deletes(scenario_id))
        writes.extend(self._scenarios.deletes_for(scenario_ids))
        logger.debug("Cascade for business %s: %d writes", business_id, len(writes))
        return writes

    async def for_scenario(self, scenario_id: str) -> list[BatchWrite]:
        if not self.enabled:
            return []
        return await self._comment_deletes(scenario_id)

    async def _comment_deletes(self, scenario_id: str) -> list[BatchWrite]:
        comment_ids = await self._comments.find_ids((FIELD_SCENARIO_ID, scenario_id))
        return self._comments.deletes_for(comment_ids)
