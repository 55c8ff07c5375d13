"""Representative points for boundary features."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

import geopandas as gpd
import pandas as pd
from shapely.geometry import mapping

from facility_coverage.config import BOUNDARY_NAME_PATHS
from facility_coverage.models.records import DataQualityIssue, IssueKind, RepresentativePoint

LOGGER = logging.getLogger(__name__)


class MalformedGeometryError(ValueError):
    """Feature geometry cannot yield a representative point."""


def feature_name(feature: Mapping[str, Any]) -> Optional[str]:
    """Return the feature label from the first populated property path."""

    for container, key in BOUNDARY_NAME_PATHS:
        props = feature.get(container) or {}
        value = props.get(key)
        if value:
            return str(value)
    return None


def _first_ring(geometry: Mapping[str, Any]) -> Any:
    geom_type = geometry.get("type")
    coords = geometry.get("coordinates")
    if not coords:
        raise MalformedGeometryError("geometry has no coordinates")
    if geom_type == "Polygon":
        return coords[0]
    if geom_type == "MultiPolygon":
        first_polygon = coords[0]
        if not first_polygon:
            raise MalformedGeometryError("first polygon of MultiPolygon has no rings")
        return first_polygon[0]
    raise MalformedGeometryError(f"unsupported geometry type {geom_type!r}")


def representative_point(feature: Mapping[str, Any]) -> RepresentativePoint:
    """First vertex of the first ring of the first polygon."""

    geometry = feature.get("geometry")
    if not geometry:
        raise MalformedGeometryError("feature has no geometry")
    ring = _first_ring(geometry)
    if not ring:
        raise MalformedGeometryError("first ring is empty")
    vertex = ring[0]
    try:
        lon, lat = float(vertex[0]), float(vertex[1])
    except (TypeError, ValueError, IndexError) as exc:
        raise MalformedGeometryError(f"unexpected ring shape: {vertex!r}") from exc
    return RepresentativePoint(name=feature_name(feature) or "", latitude=lat, longitude=lon)


def extract_representative_points(
    features: Iterable[Mapping[str, Any]],
) -> tuple[list[RepresentativePoint], list[DataQualityIssue]]:
    """Extract one point per feature, skipping malformed features."""

    points: list[RepresentativePoint] = []
    issues: list[DataQualityIssue] = []
    for feature in features:
        try:
            points.append(representative_point(feature))
        except MalformedGeometryError as exc:
            label = feature_name(feature) or ""
            issues.append(DataQualityIssue(IssueKind.MALFORMED_GEOMETRY, label, str(exc)))
    if issues:
        LOGGER.warning(
            "Skipped %d malformed boundary features (sample: %s)",
            len(issues),
            [issue.label for issue in issues[:10]],
        )
    return points, issues


def features_from_frame(gdf: gpd.GeoDataFrame, name_col: str = "nome") -> list[dict[str, Any]]:
    """Convert a boundary GeoDataFrame into GeoJSON-like feature mappings."""

    if name_col not in gdf.columns:
        raise ValueError(f"Boundary data missing name column: {name_col!r}")
    features = []
    for name, geom in zip(gdf[name_col], gdf.geometry):
        features.append(
            {
                "type": "Feature",
                "properties": {"nome": None if pd.isna(name) else str(name)},
                "geometry": mapping(geom) if geom is not None and not geom.is_empty else None,
            }
        )
    return features
