"""Tests for input adapters and the batch build command."""

from __future__ import annotations

import importlib.util
import json
from pathlib import Path

import pandas as pd
import pytest

if importlib.util.find_spec("geopandas") is None:
    pytest.skip("geopandas not installed", allow_module_level=True)

from facility_coverage.data.build_coverage import build_coverage, main  # noqa: E402
from facility_coverage.data.ingest import (  # noqa: E402
    areas_from_frame,
    facilities_from_frame,
    load_boundary_features,
    parse_population,
)

from builders import ORIGIN, north_of, polygon_feature  # noqa: E402


def _write_inputs(root: Path) -> tuple[Path, Path, Path]:
    areas = root / "bairros.csv"
    pd.DataFrame(
        {
            "Bairro": ["Tijuca", "Jacarepaguá", "Lapa", ""],
            "RA": ["VIII", "XVI", "II", "X"],
            "Populacao": ["160000", "157000", "nan", "5"],
        }
    ).to_csv(areas, index=False)

    facilities = root / "ibas.csv"
    pd.DataFrame(
        {
            "Name": ["IBA Centro", "IBA Sem Coordenada", "IBA Norte"],
            "Latitude": [north_of(ORIGIN[0], 0.5), None, north_of(ORIGIN[0], 40.0)],
            "Longitude": [ORIGIN[1], ORIGIN[1], ORIGIN[1]],
            "Address": ["Rua A, 1", "Rua B, 2", "Rua C, 3"],
            "Bairro": ["Tijuca", "Lapa", "Jacarepaguá"],
        }
    ).to_csv(facilities, index=False)

    boundaries = root / "limites.geojson"
    collection = {
        "type": "FeatureCollection",
        "features": [
            polygon_feature("TIJUCA", *ORIGIN, size=0.0001),
            polygon_feature("Jacarepagua", north_of(ORIGIN[0], 30.0), ORIGIN[1], size=0.0001),
            polygon_feature("Ilha de Paquetá", north_of(ORIGIN[0], 60.0), ORIGIN[1], size=0.0001),
        ],
    }
    boundaries.write_text(json.dumps(collection), encoding="utf-8")
    return areas, facilities, boundaries


class TestAdapters:
    def test_parse_population(self):
        assert parse_population("1200") == 1200
        assert parse_population("1200.0") == 1200
        assert parse_population("nan") is None
        assert parse_population(None) is None
        assert parse_population("-3") is None
        assert parse_population("n/d") is None

    def test_areas_from_frame_drops_unnamed_rows(self):
        df = pd.DataFrame({"Bairro": ["Centro", None, " "], "RA": ["I", "II", "III"], "Populacao": ["40000", "1", "2"]})
        areas = areas_from_frame(df)
        assert [(a.name, a.region_code, a.population) for a in areas] == [("Centro", "I", 40_000)]

    def test_areas_from_frame_warns_on_duplicate_canonical_names(self, caplog):
        df = pd.DataFrame({"Bairro": ["Glória", "GLORIA ", "Centro"], "Populacao": ["1", "2", "3"]})
        with caplog.at_level("WARNING", logger="facility_coverage.data.ingest"):
            areas = areas_from_frame(df)
        assert len(areas) == 3
        assert "sharing a canonical key" in caplog.text
        assert "gloria" in caplog.text

    def test_areas_from_frame_requires_name_column(self):
        with pytest.raises(ValueError, match="area name column"):
            areas_from_frame(pd.DataFrame({"foo": ["x"]}))

    def test_facilities_from_frame_discards_incomplete_rows(self):
        df = pd.DataFrame(
            {
                "Name": ["A", "", "C", "D"],
                "Latitude": ["-22.9", "-22.8", "bad", "-22.7"],
                "Longitude": ["-43.2", "-43.1", "-43.0", "-43.3"],
            }
        )
        facilities = facilities_from_frame(df)
        assert [(f.name, f.latitude, f.longitude) for f in facilities] == [("A", -22.9, -43.2), ("D", -22.7, -43.3)]
        assert facilities[0].address == ""

    def test_facilities_from_frame_requires_coordinates(self):
        with pytest.raises(ValueError, match="latitude/longitude"):
            facilities_from_frame(pd.DataFrame({"Name": ["A"]}))

    def test_load_boundary_features(self, tmp_path):
        _, _, boundaries = _write_inputs(tmp_path)
        features = load_boundary_features(boundaries)
        assert [f["properties"]["nome"] for f in features] == ["TIJUCA", "Jacarepagua", "Ilha de Paquetá"]
        assert all(f["geometry"]["type"] == "Polygon" for f in features)


def test_build_coverage_writes_table_and_report(tmp_path) -> None:
    areas, facilities, boundaries = _write_inputs(tmp_path)
    output = tmp_path / "out" / "coverage.csv"
    report = tmp_path / "out" / "report.json"

    classified = build_coverage(
        areas_path=areas,
        facilities_path=facilities,
        boundaries_path=boundaries,
        output_path=output,
        report_path=report,
        coverage_radius_km=12.0,
    )

    assert len(classified) == 3
    table = pd.read_csv(output)
    assert table["name"].tolist() == ["Tijuca", "Jacarepaguá", "Lapa"]
    assert table["nearest_facility_name"].tolist()[:2] == ["IBA Centro", "IBA Norte"]
    assert table["has_facility"].tolist() == [True, False, False]
    assert table["within_radius"].tolist() == [True, True, False]

    payload = json.loads(report.read_text(encoding="utf-8"))
    assert payload["population_floor"] == 80_000
    assert payload["stats"] == {
        "total_areas": 3,
        "total_facilities": 2,
        "areas_without_facility": 2,
        "areas_outside_radius": 1,
        "areas_above_population_threshold": 2,
    }
    assert payload["issues"] == {"unmatched_area": 1, "unmatched_boundary": 1}
    assert [row["name"] for row in payload["underserved"]] == ["Lapa"]


def test_main_requires_existing_inputs(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(FileNotFoundError, match="Missing areas input"):
        main(["--areas", str(tmp_path / "missing.csv")])
