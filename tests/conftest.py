"""Shared fixtures for coverage tests."""

from __future__ import annotations

import pytest

from facility_coverage.models.records import Area

from builders import ORIGIN, facility_at_km, north_of, polygon_feature


@pytest.fixture
def city():
    """Four areas along one meridian with facilities at known distances."""
    areas = [
        Area("Tijuca", "VIII", 160_000),
        Area("Glória", "IV", 10_000),
        Area("São Cristóvão", "VII", 26_000),
        Area("Jacarepaguá", "XVI", 157_000),
    ]
    features = [
        polygon_feature("tijuca", *ORIGIN),
        polygon_feature("GLORIA ", north_of(ORIGIN[0], 3.0), ORIGIN[1], key="attributes"),
        polygon_feature("Sao  Cristovao", north_of(ORIGIN[0], 12.0), ORIGIN[1]),
        polygon_feature("Jacarepagua", north_of(ORIGIN[0], 30.0), ORIGIN[1]),
    ]
    facilities = [facility_at_km("IBA Centro", 3.5), facility_at_km("IBA Norte", 12.2)]
    return areas, facilities, features
