"""Observed race-timing loader and friction estimation.

This module provides functions to:

1. Load heat-by-heat finish times recorded at a real race from a CSV file
   (columns ``car``, ``heat``, ``time``; a blank time is a car that did
   not finish the heat).
2. Summarise the observed times per car.
3. Calibrate each car's axle friction against its mean observed time so
   that the engine can be fitted to a real track.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pandas as pd

from derby_engine.core.calibration import calibrate_friction
from derby_engine.core.integrator import DEFAULT_DT
from derby_engine.core.track import TrackConfig
from derby_engine.core.vehicle import VehicleConfig

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: tuple[str, ...] = ("car", "heat", "time")

# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def load_heat_times(path: Path | str) -> pd.DataFrame:
    """Load heat timings from a CSV file.

    Args:
        path: CSV with at least the columns ``car``, ``heat`` and ``time``.

    Returns:
        A :class:`pandas.DataFrame` with ``time`` coerced to float seconds
        (unparseable or blank entries become NaN).

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If a required column is missing.
    """
    csv_path = Path(path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Timing file not found: {csv_path}")

    df = pd.read_csv(csv_path)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"{csv_path} is missing column(s): {', '.join(missing)}")

    df = df.copy()
    df["car"] = df["car"].astype(str)
    df["time"] = pd.to_numeric(df["time"], errors="coerce")
    logger.debug("Loaded %d heat records from %s", len(df), csv_path)
    return df


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


def summarize_heat_times(heats_df: pd.DataFrame) -> dict[str, dict[str, float]]:
    """Summarise observed finish times per car.

    For each car present in *heats_df* the following mapping is produced:

    - ``mean_time`` -- mean of valid finish times (NaN when none).
    - ``best_time`` -- fastest valid finish time (NaN when none).
    - ``std_time`` -- sample standard deviation, 0.0 with fewer than two
      valid heats.
    - ``heats`` -- number of heats run.
    - ``finishes`` -- number of heats with a valid, positive time.

    Args:
        heats_df: DataFrame with ``car`` and ``time`` columns.

    Returns:
        Nested dictionary ``{car: {"mean_time": ..., ...}}``.
    """
    results: dict[str, dict[str, float]] = {}
    cars: list[Any] = sorted(heats_df["car"].dropna().unique().tolist())

    for car in cars:
        car_heats = heats_df[heats_df["car"] == car]
        times = pd.to_numeric(car_heats["time"], errors="coerce").astype(float)
        valid = times[times > 0.0].dropna()

        if valid.empty:
            mean_time = float("nan")
            best_time = float("nan")
        else:
            mean_time = float(valid.mean())
            best_time = float(valid.min())
        std_time = float(valid.std()) if len(valid) > 1 else 0.0

        results[str(car)] = {
            "mean_time": mean_time,
            "best_time": best_time,
            "std_time": std_time,
            "heats": float(len(car_heats)),
            "finishes": float(len(valid)),
        }

    return results


# ---------------------------------------------------------------------------
# Friction estimation
# ---------------------------------------------------------------------------


def estimate_car_friction(
    heats_df: pd.DataFrame,
    vehicles: Mapping[str, VehicleConfig],
    track: TrackConfig,
    dt: float = DEFAULT_DT,
) -> dict[str, dict[str, Any]]:
    """Calibrate axle friction per car from its mean observed time.

    Cars without a vehicle configuration or without any valid heat time
    are skipped.

    Args:
        heats_df: DataFrame with ``car`` and ``time`` columns.
        vehicles: Vehicle configuration per car name.
        track: Track the heats were run on.
        dt: Integrator step size used for calibration.

    Returns:
        ``{car: {"mean_time": ..., "friction": ... or None,
        "converged": ..., "feasible": ...}}``.
    """
    summary = summarize_heat_times(heats_df)
    results: dict[str, dict[str, Any]] = {}

    for car, stats in summary.items():
        vehicle = vehicles.get(car)
        if vehicle is None:
            logger.warning("No vehicle configuration for car %r; skipping", car)
            continue
        if stats["finishes"] == 0:
            logger.warning("Car %r has no valid heat times; skipping", car)
            continue

        calibration = calibrate_friction(stats["mean_time"], vehicle, track, dt=dt)
        results[car] = {
            "mean_time": stats["mean_time"],
            "friction": calibration.friction,
            "converged": calibration.converged,
            "feasible": calibration.feasible,
        }

    return results
