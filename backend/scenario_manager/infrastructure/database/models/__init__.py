from .local_cache_entry import LocalCacheEntryModel

__all__ = [
    "LocalCacheEntryModel",
]
