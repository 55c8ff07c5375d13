"""Caller-side state holder exposing only complete coverage snapshots."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional, Sequence

from facility_coverage.models.classify import classify, reclassify
from facility_coverage.models.query import AreaQuery, default_population_floor, filter_areas
from facility_coverage.models.records import Area, ClassifiedArea, ClassifiedAreas, Facility, Thresholds, clamp_coverage_radius
from facility_coverage.models.stats import CoverageStats, compute_stats

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoverageSnapshot:
    classified: ClassifiedAreas
    stats: CoverageStats
    query: AreaQuery
    visible: tuple[ClassifiedArea, ...]


class CoverageSession:
    """Holds the current inputs and the latest snapshot derived from them.

    Every event builds a complete new snapshot before replacing the previous
    one, so consumers never see flags and counts from different thresholds.
    """

    def __init__(self, thresholds: Optional[Thresholds] = None):
        self._thresholds = thresholds or Thresholds()
        self._areas: tuple[Area, ...] = ()
        self._facilities: tuple[Facility, ...] = ()
        self._features: tuple[Mapping[str, Any], ...] = ()
        self._query = AreaQuery()
        self._snapshot: Optional[CoverageSnapshot] = None

    @property
    def snapshot(self) -> Optional[CoverageSnapshot]:
        return self._snapshot

    @property
    def thresholds(self) -> Thresholds:
        return self._thresholds

    def load(
        self,
        areas: Sequence[Area],
        facilities: Sequence[Facility],
        features: Sequence[Mapping[str, Any]],
        population_floor: Optional[float] = None,
    ) -> CoverageSnapshot:
        """Replace all inputs with a fresh data refresh."""

        self._areas = tuple(areas)
        self._facilities = tuple(facilities)
        self._features = tuple(features)
        if population_floor is None:
            population_floor = default_population_floor(self._areas)
        query = replace(self._query, population_floor=population_floor)
        LOGGER.info(
            "Loading %d areas, %d facilities, %d boundary features (population floor %.0f)",
            len(self._areas),
            len(self._facilities),
            len(self._features),
            population_floor,
        )
        classified = classify(self._areas, self._facilities, self._features, self._thresholds)
        return self._publish(classified, query)

    def set_coverage_radius(self, km: float) -> CoverageSnapshot:
        thresholds = replace(self._thresholds, coverage_radius_km=clamp_coverage_radius(km))
        current = self._require_snapshot()
        classified = reclassify(current.classified, thresholds)
        self._thresholds = thresholds
        return self._publish(classified, current.query)

    def set_query(self, query: AreaQuery) -> CoverageSnapshot:
        current = self._require_snapshot()
        return self._publish(current.classified, query)

    def set_population_floor(self, floor: Optional[float]) -> CoverageSnapshot:
        current = self._require_snapshot()
        return self._publish(current.classified, replace(current.query, population_floor=floor))

    def _require_snapshot(self) -> CoverageSnapshot:
        if self._snapshot is None:
            raise ValueError("No data loaded; call load() first.")
        return self._snapshot

    def _publish(self, classified: ClassifiedAreas, query: AreaQuery) -> CoverageSnapshot:
        snapshot = CoverageSnapshot(
            classified=classified,
            stats=compute_stats(classified, query.population_floor),
            query=query,
            visible=filter_areas(classified, query),
        )
        self._query = query
        self._snapshot = snapshot
        return snapshot
