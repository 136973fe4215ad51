"""Client-side search over already-loaded scenarios."""

from collections.abc import Iterable

from scenario_manager.domain.entities import Scenario


def search_scenarios(scenarios: Iterable[Scenario], query: str | None) -> list[Scenario]:
    """Case-insensitive substring match on title or content, order preserved.

    A blank query matches everything.
    """
    needle = (query or "").strip().casefold()
    if not needle:
        return list(scenarios)
    return [
        scenario
        for scenario in scenarios
        if needle in scenario.title.casefold() or needle in scenario.content.casefold()
    ]
