"""CLI entrypoint for the derby simulation engine."""

from __future__ import annotations

import logging
import sys

from derby_engine import __version__
from derby_engine.config import load_track_presets
from derby_engine.core.calibration import calibrate_friction
from derby_engine.core.comparison import downsample_trajectory
from derby_engine.core.energy import conservation_status
from derby_engine.core.integrator import run_simulation
from derby_engine.core.summary import describe_build
from derby_engine.core.vehicle import DEFAULT_VEHICLE

logger = logging.getLogger(__name__)


def main() -> None:
    """Run a demonstration of the simulation core."""
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    print(f"Derby Simulation Engine v{__version__}")
    print("=" * 56)

    # -- Load presets ---------------------------------------------------------
    presets = load_track_presets()
    print(f"\nTrack presets: {len(presets)} loaded")
    for i, preset in enumerate(presets, start=1):
        print(f"  T{i:02d}: {preset.name} ({preset.length_m:.2f} m)")

    vehicle = DEFAULT_VEHICLE
    track = presets[0]

    print(f"\nTrack : {track.name}")
    print(f"Car   : {vehicle.name} [{describe_build(vehicle)}]")
    print("-" * 56)

    # -- Simulate a run -------------------------------------------------------
    result = run_simulation(vehicle, track)
    if not result.did_finish:
        logger.warning("%s did not finish within the time ceiling", vehicle.name)

    print(f"\n  {'Time (s)':>8}  {'Pos (m)':>8}  {'Vel (m/s)':>9}  {'Acc (m/s2)':>10}")
    print(f"  {'--------':>8}  {'-------':>8}  {'---------':>9}  {'----------':>10}")
    for point in downsample_trajectory(result, every=20):
        print(
            f"  {point.time:8.2f}  {point.position:8.3f}  "
            f"{point.velocity:9.3f}  {point.acceleration:10.3f}"
        )

    print(f"\nFinish time : {result.finish_time:.4f} s")
    print(
        f"Max speed   : {result.max_velocity:.2f} m/s "
        f"({result.max_speed_mph():.1f} mph)"
    )

    # -- Energy budget --------------------------------------------------------
    energy = result.energy
    print("\nEnergy budget (J)")
    print(f"  Initial PE    : {energy.initial_pe:9.4f}")
    print(f"  Final KE      : {energy.final_ke:9.4f}")
    print(f"  Rotational KE : {energy.rotational_ke:9.4f}")
    print(f"  Friction loss : {energy.work_friction:9.4f}")
    print(f"  Drag loss     : {energy.work_drag:9.4f}")
    print(f"  Scrub loss    : {energy.work_scrub:9.4f}")
    print(f"  Residual      : {energy.energy_error:9.5f}")
    status = conservation_status(energy)
    if status != "ok":
        logger.warning("Energy residual outside tolerance (%s)", status)

    # -- Calibration round trip -----------------------------------------------
    calibration = calibrate_friction(result.finish_time, vehicle, track)
    if calibration.feasible:
        mu_text = f"{calibration.friction:.4f}"
    else:
        mu_text = "infeasible"
    print(
        f"\nCalibrated mu for {result.finish_time:.4f} s: "
        f"{mu_text} (configured {result.friction_coefficient:.4f})"
    )


if __name__ == "__main__":
    sys.exit(main() or 0)
