"""Application service (use case) for Business operations."""

import logging
from collections.abc import Callable
from typing import Any

from scenario_manager.application.schemas import BusinessCreate, BusinessUpdate
from scenario_manager.application.services.cascade_policy import CascadePolicy
from scenario_manager.application.services.record_collection import RecordCollection
from scenario_manager.application.services.subscription import Subscription
from scenario_manager.domain.entities import Business, RecordPatch
from scenario_manager.domain.exceptions import EntityNotFoundError, StoreError

logger = logging.getLogger(__name__)


class BusinessService:
    """Orchestrates business CRUD. Depends on the business collection and the cascade policy."""

    def __init__(self, businesses: RecordCollection[Business], cascade: CascadePolicy):
        self._businesses = businesses
        self._cascade = cascade

    async def list_businesses(self) -> list[Business]:
        return await self._businesses.get_all()

    async def get_business(self, business_id: str) -> Business:
        business = await self._businesses.get(business_id)
        if business is None:
            raise EntityNotFoundError("Business", business_id)
        return business

    async def create_business(self, data: BusinessCreate) -> Business:
        return await self._businesses.create({"name": data.name})

    async def rename_business(self, business_id: str, data: BusinessUpdate) -> RecordPatch:
        return await self._businesses.update(business_id, {"name": data.name})

    async def delete_business(self, business_id: str) -> bool:
        """Delete a business (and, per policy, its scenarios and comments)."""
        try:
            cascade = await self._cascade.for_business(business_id)
        except StoreError as exc:
            logger.error("Could not collect children of business %s: %s", business_id, exc)
            return False
        return await self._businesses.delete(business_id, cascade=cascade)

    async def subscribe_businesses(self, callback: Callable[[list[Business]], Any]) -> Subscription:
        return await self._businesses.subscribe(callback)
