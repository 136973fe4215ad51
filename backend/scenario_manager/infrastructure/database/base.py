"""SQLAlchemy ORM base for the local cache tables."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for the local cache ORM models."""

    pass
