"""Summary counts over one classification snapshot."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

from facility_coverage.models.records import ClassifiedAreas


@dataclass(frozen=True)
class CoverageStats:
    total_areas: int
    total_facilities: int
    areas_without_facility: int
    areas_outside_radius: int
    areas_above_population_threshold: int

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def meets_population_floor(population: Optional[int], floor: Optional[float]) -> bool:
    """Inclusive floor check; unknown population counts as 0."""

    if floor is None:
        return True
    return (population or 0) >= floor


def compute_stats(classified: ClassifiedAreas, population_floor: Optional[float]) -> CoverageStats:
    """Count areas by coverage flag and population floor."""

    areas = classified.areas
    return CoverageStats(
        total_areas=len(areas),
        total_facilities=classified.facility_count,
        areas_without_facility=sum(1 for item in areas if not item.has_facility),
        areas_outside_radius=sum(1 for item in areas if not item.within_radius),
        areas_above_population_threshold=sum(
            1 for item in areas if meets_population_floor(item.population, population_floor)
        ),
    )
