"""
Entity consistency analysis over an extracted story.

Works out how often each entity appears, the page where it first appears
(whose illustration becomes its canonical reference), and which entities
recur. Recurring entities are injected into every illustration prompt so
their look cannot drift between pages.
"""

from typing import Iterable, Sequence

from ..types import ConsistencyReport, Entity, StoryPage


def analyze(pages: Sequence[StoryPage]) -> ConsistencyReport:
    """
    Compute entity frequency, first appearance, and the recurring set.

    Pages are taken in the order given, which must be ascending
    page_number. An entity listed twice on one page counts once.

    Returns:
        ConsistencyReport where first_appearance uses 0-based page indexes
        and appearances uses 1-based page numbers.
    """
    frequency: dict[str, int] = {}
    first_appearance: dict[str, int] = {}
    appearances: dict[str, list[int]] = {}

    for index, page in enumerate(pages):
        for entity_id in _unique(page.entity_ids):
            frequency[entity_id] = frequency.get(entity_id, 0) + 1
            if entity_id not in first_appearance:
                first_appearance[entity_id] = index
            appearances.setdefault(entity_id, []).append(page.page_number)

    recurring = frozenset(
        entity_id for entity_id, count in frequency.items() if count > 1
    )

    return ConsistencyReport(
        frequency=frequency,
        first_appearance=first_appearance,
        recurring=recurring,
        appearances=appearances,
    )


def annotate_appearances(entities: Iterable[Entity], report: ConsistencyReport) -> None:
    """Copy the page numbers each entity appears on onto the entity."""
    for entity in entities:
        entity.appears_in_pages = list(report.appearances.get(entity.id, []))


def _unique(entity_ids: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for entity_id in entity_ids:
        if entity_id not in seen:
            seen.add(entity_id)
            ordered.append(entity_id)
    return ordered
