from .local_cache_repository import SQLAlchemyLocalCache

__all__ = [
    "SQLAlchemyLocalCache",
]
