"""Load area, facility and boundary inputs and normalize their columns."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Optional

import geopandas as gpd
import pandas as pd

from facility_coverage.data.geometry import features_from_frame
from facility_coverage.data.names import normalize_name_series
from facility_coverage.models.records import Area, Facility

LOGGER = logging.getLogger(__name__)

AREA_NAME_CANDIDATES = ("name", "bairro", "area_name", "nome")
AREA_REGION_CANDIDATES = ("region_code", "ra", "region", "regiao")
AREA_POPULATION_CANDIDATES = ("population", "populacao", "pop")

FACILITY_NAME_CANDIDATES = ("name", "facility_name", "nome")
FACILITY_LAT_CANDIDATES = ("latitude", "lat", "y")
FACILITY_LON_CANDIDATES = ("longitude", "lon", "lng", "x")
FACILITY_ADDRESS_CANDIDATES = ("address", "endereco")
FACILITY_AREA_CANDIDATES = ("area_label", "bairro", "area")

BOUNDARY_NAME_CANDIDATES = ("nome", "name", "bairro")


def _find_column(df: pd.DataFrame, candidates: Iterable[str]) -> Optional[str]:
    lower_map = {str(col).lower(): col for col in df.columns}
    return next((lower_map[c] for c in candidates if c in lower_map), None)


def _text(series: pd.Series) -> pd.Series:
    return series.fillna("").astype(str).str.strip()


def parse_population(value: Any) -> Optional[int]:
    """Population as a non-negative int, or ``None`` when unknown."""

    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    number = pd.to_numeric(value, errors="coerce")
    if pd.isna(number) or number < 0:
        return None
    return int(number)


def areas_from_frame(df: pd.DataFrame) -> list[Area]:
    """Build area records, dropping rows without a name."""

    name_col = _find_column(df, AREA_NAME_CANDIDATES)
    if not name_col:
        raise ValueError(f"Could not find area name column among {AREA_NAME_CANDIDATES}. Columns: {list(df.columns)}")
    region_col = _find_column(df, AREA_REGION_CANDIDATES)
    pop_col = _find_column(df, AREA_POPULATION_CANDIDATES)

    names = _text(df[name_col])
    regions = _text(df[region_col]) if region_col else pd.Series("", index=df.index)
    populations = df[pop_col] if pop_col else pd.Series(None, index=df.index, dtype=object)

    areas = [
        Area(name=name, region_code=region, population=parse_population(pop))
        for name, region, pop in zip(names, regions, populations)
        if name
    ]
    keys = normalize_name_series(pd.Series([area.name for area in areas], dtype=object))
    dup_keys = keys.value_counts()
    dup_keys = dup_keys[dup_keys > 1]
    if not dup_keys.empty:
        LOGGER.warning(
            "Found %d area names sharing a canonical key; top: %s",
            len(dup_keys),
            dup_keys.head(10).to_dict(),
        )
    dropped = len(df) - len(areas)
    unknown = sum(1 for area in areas if area.population is None)
    LOGGER.info("Loaded %d areas (%d dropped without name, %d with unknown population)", len(areas), dropped, unknown)
    return areas


def facilities_from_frame(df: pd.DataFrame) -> list[Facility]:
    """Build facility records, discarding rows missing name or coordinates."""

    name_col = _find_column(df, FACILITY_NAME_CANDIDATES)
    lat_col = _find_column(df, FACILITY_LAT_CANDIDATES)
    lon_col = _find_column(df, FACILITY_LON_CANDIDATES)
    if not name_col or not lat_col or not lon_col:
        raise ValueError(
            f"Could not locate facility name/latitude/longitude columns. Columns: {list(df.columns)}"
        )
    address_col = _find_column(df, FACILITY_ADDRESS_CANDIDATES)
    area_col = _find_column(df, FACILITY_AREA_CANDIDATES)

    frame = pd.DataFrame(
        {
            "name": _text(df[name_col]),
            "latitude": pd.to_numeric(df[lat_col], errors="coerce"),
            "longitude": pd.to_numeric(df[lon_col], errors="coerce"),
            "address": _text(df[address_col]) if address_col else "",
            "area_label": _text(df[area_col]) if area_col else "",
        }
    )
    valid = frame["name"].ne("") & frame["latitude"].notna() & frame["longitude"].notna()
    if (~valid).any():
        LOGGER.warning("Discarded %d facility rows missing name or coordinates", int((~valid).sum()))
    return [
        Facility(
            name=row.name,
            latitude=float(row.latitude),
            longitude=float(row.longitude),
            address=row.address,
            area_label=row.area_label,
        )
        for row in frame[valid].itertuples(index=False)
    ]


def load_areas(path: Path) -> list[Area]:
    return areas_from_frame(pd.read_csv(path, dtype=str, keep_default_na=True))


def load_facilities(path: Path) -> list[Facility]:
    return facilities_from_frame(pd.read_csv(path, dtype=str, keep_default_na=True))


def load_boundary_features(path: Path, name_col: Optional[str] = None) -> list[dict[str, Any]]:
    """Read a boundary file with geopandas and return feature mappings."""

    gdf = gpd.read_file(path)
    column = name_col or _find_column(gdf, BOUNDARY_NAME_CANDIDATES)
    if not column:
        raise ValueError(f"Could not find boundary name column among {BOUNDARY_NAME_CANDIDATES}.")
    if gdf.crs is not None and gdf.crs.to_string() != "EPSG:4326":
        gdf = gdf.to_crs("EPSG:4326")
    features = features_from_frame(gdf, name_col=column)
    LOGGER.info("Loaded %d boundary features from %s", len(features), path)
    return features
