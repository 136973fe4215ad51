"""Domain entity — a review comment left on a scenario."""

from dataclasses import dataclass, field

from .timestamps import iso_timestamp


@dataclass
class Comment:
    """A comment belonging to one scenario, listed oldest first."""

    scenario_id: str
    author: str
    text: str
    created_at: str = field(default_factory=iso_timestamp)
    id: str | None = None
