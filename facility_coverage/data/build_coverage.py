"""Build the classified area table and coverage report from raw inputs."""

from __future__ import annotations

import argparse
import json
import logging
from collections import Counter
from pathlib import Path
from typing import Optional

from facility_coverage.config import (
    AREAS_PATH_DEFAULT,
    BOUNDARIES_PATH_DEFAULT,
    COVERAGE_RADIUS_KM_DEFAULT,
    FACILITIES_PATH_DEFAULT,
    OUTPUT_PATH_DEFAULT,
    REPORT_PATH_DEFAULT,
    SERVED_THRESHOLD_KM,
)
from facility_coverage.data.ingest import load_areas, load_boundary_features, load_facilities
from facility_coverage.models.classify import classify
from facility_coverage.models.query import default_population_floor, underserved_report
from facility_coverage.models.records import ClassifiedAreas, Thresholds
from facility_coverage.models.stats import CoverageStats, compute_stats


def _configure_logging() -> None:
    Path("logs").mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename="logs/build_coverage.log",
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_report(
    classified: ClassifiedAreas,
    stats: CoverageStats,
    population_floor: float,
    output_path: Path,
    top_n: int = 10,
) -> dict:
    issue_counts = Counter(issue.kind.value for issue in classified.issues)
    report = {
        "coverage_radius_km": classified.thresholds.coverage_radius_km,
        "served_threshold_km": classified.thresholds.served_threshold_km,
        "population_floor": population_floor,
        "stats": stats.as_dict(),
        "issues": dict(sorted(issue_counts.items())),
        "underserved": [
            {"name": item.name, "population": item.population, "distance_km": item.distance_km}
            for item in underserved_report(classified)[:top_n]
        ],
    }
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(report, indent=2, ensure_ascii=False), encoding="utf-8")
    return report


def build_coverage(
    areas_path: Path,
    facilities_path: Path,
    boundaries_path: Path,
    output_path: Path,
    report_path: Path,
    coverage_radius_km: float = COVERAGE_RADIUS_KM_DEFAULT,
    served_threshold_km: float = SERVED_THRESHOLD_KM,
    population_floor: Optional[float] = None,
    boundary_name_col: Optional[str] = None,
) -> ClassifiedAreas:
    """Load inputs, classify every area, and persist the table and report."""

    thresholds = Thresholds(coverage_radius_km=coverage_radius_km, served_threshold_km=served_threshold_km)
    areas = load_areas(areas_path)
    facilities = load_facilities(facilities_path)
    features = load_boundary_features(boundaries_path, name_col=boundary_name_col)

    classified = classify(areas, facilities, features, thresholds)
    if population_floor is None:
        population_floor = default_population_floor(areas)
    stats = compute_stats(classified, population_floor)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    classified.to_frame().to_csv(output_path, index=False)
    _build_report(classified, stats, population_floor, report_path)

    logging.info(
        "OK: %d areas | %d facilities | without facility=%d | outside radius=%d | pop >= %.0f: %d",
        stats.total_areas,
        stats.total_facilities,
        stats.areas_without_facility,
        stats.areas_outside_radius,
        population_floor,
        stats.areas_above_population_threshold,
    )
    print(
        f"OK: {stats.total_areas} areas | {stats.total_facilities} facilities | "
        f"outside {thresholds.coverage_radius_km:g} km = {stats.areas_outside_radius}"
    )
    return classified


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Classify area coverage by nearest facility.")
    parser.add_argument("--areas", type=Path, default=AREAS_PATH_DEFAULT)
    parser.add_argument("--facilities", type=Path, default=FACILITIES_PATH_DEFAULT)
    parser.add_argument("--boundaries", type=Path, default=BOUNDARIES_PATH_DEFAULT)
    parser.add_argument("--output", type=Path, default=OUTPUT_PATH_DEFAULT)
    parser.add_argument("--report", type=Path, default=REPORT_PATH_DEFAULT)
    parser.add_argument("--radius-km", type=float, default=COVERAGE_RADIUS_KM_DEFAULT)
    parser.add_argument("--served-km", type=float, default=SERVED_THRESHOLD_KM)
    parser.add_argument(
        "--population-floor", type=float, default=None, help="Defaults to half of the largest population."
    )
    parser.add_argument("--boundary-name-col", type=str, default=None, help="Override name column in boundary file.")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    _configure_logging()
    args = parse_args(argv)
    for label, path in (("areas", args.areas), ("facilities", args.facilities), ("boundaries", args.boundaries)):
        if not path.exists():
            raise FileNotFoundError(f"Missing {label} input at {path}.")

    build_coverage(
        areas_path=args.areas,
        facilities_path=args.facilities,
        boundaries_path=args.boundaries,
        output_path=args.output,
        report_path=args.report,
        coverage_radius_km=args.radius_km,
        served_threshold_km=args.served_km,
        population_floor=args.population_floor,
        boundary_name_col=args.boundary_name_col,
    )


if __name__ == "__main__":
    main()
