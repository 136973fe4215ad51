"""SQLAlchemy ORM model for the local key/value cache."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from scenario_manager.infrastructure.database.base import Base


class LocalCacheEntryModel(Base):
    """ORM model — maps to the 'local_cache' table (one row per key)."""

    __tablename__ = "local_cache"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<LocalCacheEntryModel(key='{self.key}', size={len(self.value)})>"
