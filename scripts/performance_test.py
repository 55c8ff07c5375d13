"""Performance budget check for classification on a synthetic city."""

from __future__ import annotations

import json
import random
import time
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from facility_coverage.models.classify import classify, reclassify
from facility_coverage.models.query import AreaQuery, filter_areas, underserved_report
from facility_coverage.models.records import Area, Facility, Thresholds
from facility_coverage.models.stats import compute_stats


def make_synthetic_city(n_areas: int = 500, n_facilities: int = 300, seed: int = 7):
    """Square-ish areas and random facilities around a city centre."""
    rng = random.Random(seed)
    areas, features, facilities = [], [], []
    for i in range(n_areas):
        lat = -23.05 + rng.random() * 0.3
        lon = -43.75 + rng.random() * 0.6
        name = f"Area {i}"
        areas.append(Area(name=name, region_code=f"R{i % 30}", population=rng.randint(0, 300_000)))
        ring = [[lon, lat], [lon + 0.01, lat], [lon + 0.01, lat + 0.01], [lon, lat + 0.01], [lon, lat]]
        features.append({"properties": {"nome": name}, "geometry": {"type": "Polygon", "coordinates": [ring]}})
    for j in range(n_facilities):
        facilities.append(
            Facility(name=f"Facility {j}", latitude=-23.05 + rng.random() * 0.3, longitude=-43.75 + rng.random() * 0.6)
        )
    return areas, facilities, features


def measure_times(n_areas: int = 500, n_facilities: int = 300) -> dict[str, float]:
    timings: dict[str, float] = {}
    areas, facilities, features = make_synthetic_city(n_areas, n_facilities)

    start = time.perf_counter()
    classified = classify(areas, facilities, features, Thresholds())
    timings["classify"] = time.perf_counter() - start

    start = time.perf_counter()
    classified = reclassify(classified, Thresholds(coverage_radius_km=5.0))
    timings["reclassify"] = time.perf_counter() - start

    start = time.perf_counter()
    compute_stats(classified, 150_000)
    filter_areas(classified, AreaQuery(text="area 1", only_outside_radius=True, population_floor=50_000))
    timings["filter_and_stats"] = time.perf_counter() - start

    start = time.perf_counter()
    underserved_report(classified)
    timings["ranking"] = time.perf_counter() - start

    return timings


def check_performance_budget(timings: dict[str, float]) -> list[str]:
    budget = {
        "classify": 1.0,
        "reclassify": 0.1,
        "filter_and_stats": 0.1,
        "ranking": 0.1,
    }

    violations = []
    for operation, limit in budget.items():
        actual = timings.get(operation, 0)
        if actual > limit:
            violations.append(f"{operation}: {actual:.3f}s (limit: {limit}s)")
    return violations


def main() -> int:
    print("Running performance tests...")
    timings = measure_times()

    Path("logs").mkdir(parents=True, exist_ok=True)
    (Path("logs") / "perf_results.json").write_text(json.dumps(timings, indent=2), encoding="utf-8")

    for op, time_taken in timings.items():
        print(f"{op}: {time_taken:.3f}s")

    violations = check_performance_budget(timings)
    if violations:
        print("\nPerformance budget violations:")
        for v in violations:
            print(f"- {v}")
        return 1

    print("OK: All operations within performance budget")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
