"""Filtering and display ordering of classified areas."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from facility_coverage.data.names import normalize_name
from facility_coverage.models.records import Area, ClassifiedArea, ClassifiedAreas
from facility_coverage.models.stats import meets_population_floor


@dataclass(frozen=True)
class AreaQuery:
    """Active search text, coverage toggles and population floor."""

    text: str = ""
    only_without_facility: bool = False
    only_outside_radius: bool = False
    population_floor: Optional[float] = None


def matches_text(item: ClassifiedArea, text: str) -> bool:
    needle = normalize_name(text)
    if not needle:
        return True
    return needle in normalize_name(item.name) or needle in normalize_name(item.region_code)


def filter_areas(classified: ClassifiedAreas, query: AreaQuery) -> tuple[ClassifiedArea, ...]:
    """Areas satisfying every predicate of ``query``, in canonical order."""

    selected = []
    for item in classified.areas:
        if query.only_without_facility and item.has_facility:
            continue
        if query.only_outside_radius and item.within_radius:
            continue
        if not meets_population_floor(item.population, query.population_floor):
            continue
        if not matches_text(item, query.text):
            continue
        selected.append(item)
    return tuple(selected)


def sort_by_population(areas: Iterable[ClassifiedArea], descending: bool = True) -> tuple[ClassifiedArea, ...]:
    """Display ordering by population; unknown populations go last."""

    items = list(areas)
    known = [item for item in items if item.population is not None]
    unknown = [item for item in items if item.population is None]
    return tuple(sorted(known, key=lambda item: item.population, reverse=descending)) + tuple(unknown)


def underserved_report(classified: ClassifiedAreas) -> tuple[ClassifiedArea, ...]:
    """Areas outside the coverage radius, most populous first."""

    return sort_by_population(item for item in classified.areas if not item.within_radius)


def population_bounds(areas: Sequence[Area]) -> tuple[Optional[int], Optional[int]]:
    known = [area.population for area in areas if area.population is not None]
    if not known:
        return None, None
    return min(known), max(known)


def default_population_floor(areas: Sequence[Area]) -> float:
    """Half of the largest observed population, 0 when none is known."""

    _, highest = population_bounds(areas)
    return highest / 2 if highest is not None else 0.0
