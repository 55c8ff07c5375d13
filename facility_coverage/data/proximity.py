"""Great-circle proximity between representative points and facilities."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from facility_coverage.config import DISTANCE_TIE_TOLERANCE_KM, EARTH_RADIUS_KM
from facility_coverage.data.names import normalize_name
from facility_coverage.models.records import Facility, RepresentativePoint


def haversine_km(lat1, lon1, lat2, lon2):
    """Haversine distance in kilometres. Accepts scalars or numpy arrays."""

    lat1_rad, lon1_rad = np.deg2rad(lat1), np.deg2rad(lon1)
    lat2_rad, lon2_rad = np.deg2rad(lat2), np.deg2rad(lon2)

    dlat = lat2_rad - lat1_rad
    dlon = lon2_rad - lon1_rad

    a = np.sin(dlat / 2) ** 2 + np.cos(lat1_rad) * np.cos(lat2_rad) * np.sin(dlon / 2) ** 2
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    distance = EARTH_RADIUS_KM * c
    if np.ndim(distance) == 0:
        return float(distance)
    return distance


def resolve_nearest(
    point: RepresentativePoint, facilities: Sequence[Facility]
) -> tuple[Optional[Facility], Optional[float]]:
    """Nearest facility and its distance; ``(None, None)`` without facilities.

    Facilities within ``DISTANCE_TIE_TOLERANCE_KM`` of the minimum are tied and
    the earliest one in ``facilities`` wins.
    """

    if not facilities:
        return None, None
    lats = np.fromiter((f.latitude for f in facilities), dtype=float, count=len(facilities))
    lons = np.fromiter((f.longitude for f in facilities), dtype=float, count=len(facilities))
    distances = haversine_km(point.latitude, point.longitude, lats, lons)
    best = float(distances.min())
    winner = int(np.flatnonzero(distances <= best + DISTANCE_TIE_TOLERANCE_KM)[0])
    return facilities[winner], float(distances[winner])


def measure_distance_km(a: RepresentativePoint, b: RepresentativePoint) -> float:
    """Point-to-point measurement between two arbitrary coordinates."""

    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


def facilities_for_area(facilities: Sequence[Facility], label: str) -> list[Facility]:
    key = normalize_name(label)
    if not key:
        return []
    return [f for f in facilities if normalize_name(f.area_label) == key]
