"""Coverage classification of areas against distance thresholds."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable, Mapping, Optional, Sequence

from facility_coverage.data.geometry import extract_representative_points
from facility_coverage.data.names import match_boundaries
from facility_coverage.data.proximity import resolve_nearest
from facility_coverage.models.records import (
    Area,
    ClassifiedArea,
    ClassifiedAreas,
    DataQualityIssue,
    Facility,
    IssueKind,
    Thresholds,
)

LOGGER = logging.getLogger(__name__)


def classify_distance(distance_km: Optional[float], thresholds: Thresholds) -> tuple[bool, bool]:
    """Return ``(has_facility, within_radius)`` for a resolved distance."""

    if distance_km is None:
        return False, False
    return distance_km < thresholds.served_threshold_km, distance_km <= thresholds.coverage_radius_km


def classify(
    areas: Sequence[Area],
    facilities: Sequence[Facility],
    features: Iterable[Mapping[str, Any]],
    thresholds: Thresholds,
) -> ClassifiedAreas:
    """Resolve and classify every area from scratch.

    Boundary features are reduced to representative points and joined to the
    area records by canonical name; each matched area is then resolved against
    the full facility list. Data-quality conditions are collected as issues on
    the result instead of being raised.
    """

    points, issues = extract_representative_points(features)
    matches, unmatched_labels = match_boundaries(areas, points)
    issues.extend(DataQualityIssue(IssueKind.UNMATCHED_BOUNDARY, label) for label in unmatched_labels)
    if not facilities:
        LOGGER.warning("No facilities loaded; every area resolves without a nearest facility.")
        issues.append(DataQualityIssue(IssueKind.EMPTY_FACILITY_SET))

    classified = []
    for area, match in zip(areas, matches):
        if match is None:
            issues.append(DataQualityIssue(IssueKind.UNMATCHED_AREA, area.name, "no boundary feature"))
            classified.append(ClassifiedArea(area=area))
            continue
        nearest, distance = resolve_nearest(match.item, facilities)
        has_facility, within_radius = classify_distance(distance, thresholds)
        classified.append(
            ClassifiedArea(
                area=area,
                point=match.item,
                nearest_facility_name=nearest.name if nearest else None,
                distance_km=distance,
                has_facility=has_facility,
                within_radius=within_radius,
                match_type=match.match_type,
            )
        )

    if unmatched_labels:
        LOGGER.warning(
            "%d boundary features have no tabular record (sample: %s)",
            len(unmatched_labels),
            unmatched_labels[:10],
        )
    LOGGER.info(
        "Classified %d areas against %d facilities (radius=%.1f km, served=%.2f km)",
        len(classified),
        len(facilities),
        thresholds.coverage_radius_km,
        thresholds.served_threshold_km,
    )
    return ClassifiedAreas(
        areas=tuple(classified),
        facility_count=len(facilities),
        thresholds=thresholds,
        issues=tuple(issues),
    )


def reclassify(classified: ClassifiedAreas, thresholds: Thresholds) -> ClassifiedAreas:
    """Rebuild every flag for new thresholds from the resolved distances."""

    rebuilt = []
    for item in classified.areas:
        has_facility, within_radius = classify_distance(item.distance_km, thresholds)
        rebuilt.append(replace(item, has_facility=has_facility, within_radius=within_radius))
    return replace(classified, areas=tuple(rebuilt), thresholds=thresholds)
