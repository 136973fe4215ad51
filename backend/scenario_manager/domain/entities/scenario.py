"""Domain entities for scenarios (scripts) and their lifecycle status."""

from dataclasses import dataclass, field
from enum import Enum
from typing import assert_never

from .timestamps import iso_timestamp


@dataclass(frozen=True)
class StatusBadge:
    """Display colours for a status chip."""

    background: str
    foreground: str


class ScenarioStatus(str, Enum):
    """Lifecycle states of a scenario, from first draft to published video."""

    WRITING = "writing"
    FIXING = "fixing"
    FILMED = "filmed"
    PUBLISHED = "published"

    @classmethod
    def parse(cls, raw: object) -> "ScenarioStatus":
        """Read a stored status; missing or unknown values count as WRITING."""
        try:
            return cls(raw)
        except ValueError:
            return cls.WRITING

    @property
    def label(self) -> str:
        return status_label(self)

    @property
    def badge(self) -> StatusBadge:
        return status_badge(self)


def status_label(status: ScenarioStatus) -> str:
    """Human-readable label shown for each status."""
    match status:
        case ScenarioStatus.WRITING:
            return "執筆中"
        case ScenarioStatus.FIXING:
            return "修正待ち"
        case ScenarioStatus.FILMED:
            return "撮影可能"
        case ScenarioStatus.PUBLISHED:
            return "投稿済み"
        case _:
            assert_never(status)


def status_badge(status: ScenarioStatus) -> StatusBadge:
    match status:
        case ScenarioStatus.WRITING:
            return StatusBadge(background="#444", foreground="#ccc")
        case ScenarioStatus.FIXING:
            return StatusBadge(background="rgba(33, 150, 243, 0.2)", foreground="#2196f3")
        case ScenarioStatus.FILMED:
            return StatusBadge(background="rgba(255, 171, 0, 0.2)", foreground="#ffab00")
        case ScenarioStatus.PUBLISHED:
            return StatusBadge(background="rgba(0, 200, 83, 0.2)", foreground="#00c853")
        case _:
            assert_never(status)


@dataclass
class Scenario:
    """Core domain entity: a script belonging to exactly one business.

    ``created_at`` is set once at creation and never patched afterwards;
    listings sort on it, newest first.
    """

    title: str
    content: str
    business_id: str
    created_at: str = field(default_factory=iso_timestamp)
    confirmed: bool = False
    url: str | None = None
    status: ScenarioStatus = ScenarioStatus.WRITING
    id: str | None = None
