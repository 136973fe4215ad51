"""Concrete LocalCache implementation backed by SQLAlchemy."""

from sqlalchemy.ext.asyncio import AsyncSession

from scenario_manager.application.interfaces import LocalCache
from scenario_manager.infrastructure.database.models import LocalCacheEntryModel


class SQLAlchemyLocalCache(LocalCache):
    """Implements the LocalCache port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_item(self, key: str) -> str | None:
        model = await self._session.get(LocalCacheEntryModel, key)
        return model.value if model else None

    async def set_item(self, key: str, value: str) -> None:
        model = await self._session.get(LocalCacheEntryModel, key)
        if model is None:
            self._session.add(LocalCacheEntryModel(key=key, value=value))
        else:
            model.value = value
        await self._session.flush()

    async def remove_item(self, key: str) -> None:
        model = await self._session.get(LocalCacheEntryModel, key)
        if model is None:
            return
        await self._session.delete(model)
        await self._session.flush()
