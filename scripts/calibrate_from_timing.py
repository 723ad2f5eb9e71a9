#!/usr/bin/env python
"""Calibrate axle friction from real-world race timings.

This script reads heat times recorded at a race, calibrates the friction
coefficient of every car against its mean observed time, and writes the
results to ``results/calibrated_friction.json``.

Either a timing CSV (``car``, ``heat``, ``time`` columns) with a vehicle
YAML per car, or a single ``--target-time`` for the default vehicle, may
be supplied.

Usage
-----
::

    python scripts/calibrate_from_timing.py --target-time 2.71
    python scripts/calibrate_from_timing.py --times heats.csv \\
        --vehicle-dir cars/ --track "Short 28ft"
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

# Ensure the project root is on the import path when running as a script.
_project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from derby_engine.config import (  # noqa: E402
    get_track_preset,
    load_track_presets,
    load_vehicle_config,
)
from derby_engine.core.calibration import calibrate_friction  # noqa: E402
from derby_engine.core.vehicle import DEFAULT_VEHICLE, VehicleConfig  # noqa: E402
from derby_engine.data_ingestion.timing_loader import (  # noqa: E402
    estimate_car_friction,
    load_heat_times,
)

RESULTS_DIR: str = os.path.join(_project_root, "results")
OUTPUT_PATH: str = os.path.join(RESULTS_DIR, "calibrated_friction.json")

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--target-time", type=float, help="Observed finish time (s)")
    source.add_argument("--times", type=Path, help="CSV of heat times")
    parser.add_argument(
        "--vehicle-dir",
        type=Path,
        default=None,
        help="Directory of <car>.yaml vehicle files (used with --times)",
    )
    parser.add_argument("--track", default="Standard 32ft", help="Track preset name")
    parser.add_argument("--dt", type=float, default=0.01, help="Integrator step (s)")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def _load_vehicles(
    cars: list[str], vehicle_dir: Path | None
) -> dict[str, VehicleConfig]:
    """Return a vehicle per car, falling back to the default build."""
    vehicles: dict[str, VehicleConfig] = {}
    for car in cars:
        path = vehicle_dir / f"{car}.yaml" if vehicle_dir is not None else None
        if path is not None and path.exists():
            vehicles[car] = load_vehicle_config(path)
        else:
            logger.info("Using default vehicle for car %r", car)
            vehicles[car] = DEFAULT_VEHICLE
    return vehicles


def main(argv: list[str] | None = None) -> int:
    """Calibrate from timings, print a summary and save results."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        track = get_track_preset(args.track)
    except KeyError:
        names = ", ".join(t.name for t in load_track_presets())
        print(f"Error: Unknown track preset: {args.track!r}. Available: {names}")
        return 1

    if args.target_time is not None:
        calibration = calibrate_friction(
            args.target_time, DEFAULT_VEHICLE, track, dt=args.dt
        )
        results = {
            DEFAULT_VEHICLE.name: {
                "mean_time": args.target_time,
                "friction": calibration.friction,
                "converged": calibration.converged,
                "feasible": calibration.feasible,
            }
        }
    else:
        if not args.times.exists():
            print(f"Error: Timing file not found: {args.times}")
            return 1
        heats = load_heat_times(args.times)
        print(f"Loaded {len(heats)} heat records.")
        vehicles = _load_vehicles(sorted(heats["car"].unique()), args.vehicle_dir)
        results = estimate_car_friction(heats, vehicles, track, dt=args.dt)

    # ---- Print structured output -------------------------------------------
    print("=" * 60)
    print(f"CALIBRATED FRICTION ({track.name})")
    print("=" * 60)
    for car, attrs in sorted(results.items()):
        mu = attrs["friction"]
        mu_text = f"{mu:.5f}" if mu is not None else "infeasible"
        print(f"  {car:<24} {attrs['mean_time']:.4f} s  mu = {mu_text}")
    print()

    # ---- Save to JSON ------------------------------------------------------
    os.makedirs(RESULTS_DIR, exist_ok=True)
    with open(OUTPUT_PATH, "w", encoding="utf-8") as fh:
        json.dump(results, fh, indent=2, sort_keys=True)
    print(f"Results written to {OUTPUT_PATH}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
