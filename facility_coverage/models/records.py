"""Immutable records shared by the coverage pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import pandas as pd

from facility_coverage.config import (
    COVERAGE_RADIUS_KM_DEFAULT,
    COVERAGE_RADIUS_KM_MAX,
    COVERAGE_RADIUS_KM_MIN,
    SERVED_THRESHOLD_KM,
)


@dataclass(frozen=True)
class Area:
    """A neighbourhood record from the tabular dataset."""

    name: str
    region_code: str = ""
    population: Optional[int] = None


@dataclass(frozen=True)
class Facility:
    """A point facility."""

    name: str
    latitude: float
    longitude: float
    address: str = ""
    area_label: str = ""


@dataclass(frozen=True)
class RepresentativePoint:
    """Single coordinate standing in for a boundary feature."""

    name: str
    latitude: float
    longitude: float


def clamp_coverage_radius(km: float) -> float:
    """Clamp a requested radius into the supported range."""

    return min(COVERAGE_RADIUS_KM_MAX, max(COVERAGE_RADIUS_KM_MIN, float(km)))


@dataclass(frozen=True)
class Thresholds:
    """Distance thresholds used to classify coverage."""

    coverage_radius_km: float = COVERAGE_RADIUS_KM_DEFAULT
    served_threshold_km: float = SERVED_THRESHOLD_KM

    def __post_init__(self) -> None:
        if not COVERAGE_RADIUS_KM_MIN <= self.coverage_radius_km <= COVERAGE_RADIUS_KM_MAX:
            raise ValueError(
                f"coverage_radius_km must be within [{COVERAGE_RADIUS_KM_MIN}, {COVERAGE_RADIUS_KM_MAX}], "
                f"got {self.coverage_radius_km}."
            )
        if self.served_threshold_km < 0:
            raise ValueError(f"served_threshold_km must be non-negative, got {self.served_threshold_km}.")


class IssueKind(str, Enum):
    UNMATCHED_BOUNDARY = "unmatched_boundary"
    UNMATCHED_AREA = "unmatched_area"
    MALFORMED_GEOMETRY = "malformed_geometry"
    EMPTY_FACILITY_SET = "empty_facility_set"


@dataclass(frozen=True)
class DataQualityIssue:
    """Non-fatal condition found while classifying a batch."""

    kind: IssueKind
    label: str = ""
    detail: str = ""


@dataclass(frozen=True)
class ClassifiedArea:
    """An area enriched with its resolved proximity and coverage flags."""

    area: Area
    point: Optional[RepresentativePoint] = None
    nearest_facility_name: Optional[str] = None
    distance_km: Optional[float] = None
    has_facility: bool = False
    within_radius: bool = False
    match_type: Optional[str] = None

    @property
    def name(self) -> str:
        return self.area.name

    @property
    def region_code(self) -> str:
        return self.area.region_code

    @property
    def population(self) -> Optional[int]:
        return self.area.population


OUTPUT_COLUMNS = [
    "name",
    "region_code",
    "population",
    "latitude",
    "longitude",
    "nearest_facility_name",
    "distance_km",
    "has_facility",
    "within_radius",
    "match_type",
]


@dataclass(frozen=True)
class ClassifiedAreas:
    """One complete, consistent classification snapshot."""

    areas: tuple[ClassifiedArea, ...]
    facility_count: int
    thresholds: Thresholds
    issues: tuple[DataQualityIssue, ...] = ()

    def __len__(self) -> int:
        return len(self.areas)

    def __iter__(self):
        return iter(self.areas)

    def issues_of(self, kind: IssueKind) -> list[DataQualityIssue]:
        return [issue for issue in self.issues if issue.kind == kind]

    def to_frame(self) -> pd.DataFrame:
        """Tabular view for reporting, one row per area in canonical order."""

        rows = []
        for item in self.areas:
            rows.append(
                {
                    "name": item.name,
                    "region_code": item.region_code,
                    "population": item.population,
                    "latitude": item.point.latitude if item.point else None,
                    "longitude": item.point.longitude if item.point else None,
                    "nearest_facility_name": item.nearest_facility_name,
                    "distance_km": item.distance_km,
                    "has_facility": item.has_facility,
                    "within_radius": item.within_radius,
                    "match_type": item.match_type,
                }
            )
        frame = pd.DataFrame(rows, columns=OUTPUT_COLUMNS)
        frame["population"] = frame["population"].astype("Int64")
        return frame
