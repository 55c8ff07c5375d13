"""Project-wide configuration constants."""

from __future__ import annotations

from pathlib import Path

# Geodesic constants
EARTH_RADIUS_KM = 6371.0
DISTANCE_TIE_TOLERANCE_KM = 1e-9

# Coverage defaults
COVERAGE_RADIUS_KM_DEFAULT = 10.0
COVERAGE_RADIUS_KM_MIN = 1.0
COVERAGE_RADIUS_KM_MAX = 20.0

# An area whose nearest facility is closer than this already hosts one
SERVED_THRESHOLD_KM = 1.0

# Boundary label lookup, in priority order (top-level key, property name)
BOUNDARY_NAME_PATHS = (
    ("attributes", "nome"),
    ("properties", "nome"),
    ("properties", "name"),
)

# Default input/output locations for the batch command
AREAS_PATH_DEFAULT = Path("data/raw/bairros_para_mapa.csv")
FACILITIES_PATH_DEFAULT = Path("data/raw/ibas_para_mapa.csv")
BOUNDARIES_PATH_DEFAULT = Path("data/raw/limites_bairros_rj.geojson")
OUTPUT_PATH_DEFAULT = Path("data/processed/area_coverage.csv")
REPORT_PATH_DEFAULT = Path("docs/build_coverage_report.json")
