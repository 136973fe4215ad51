"""Abstract interface (port) for the pre-migration local key/value cache."""

from abc import ABC, abstractmethod


class LocalCache(ABC):
    """String key → serialized value storage local to one client installation."""

    @abstractmethod
    async def get_item(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        ...

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        ...

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Remove a key. Removing an absent key is a no-op."""
        ...
