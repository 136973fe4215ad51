"""Domain entity — a business groups the scenarios written for it."""

from dataclasses import dataclass


@dataclass
class Business:
    """Root entity with an independent lifecycle."""

    name: str
    id: str | None = None
