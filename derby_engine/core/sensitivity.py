"""Parameter sweeps for the derby simulation engine.

These helpers run the integrator over a grid of inputs and collect the
results into numpy arrays.  They back the monotonicity precondition of the
calibrator and the step-size convergence check.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np
from numpy.typing import NDArray

from derby_engine.core.constants import DEFAULT_CONSTANTS, PhysicsConstants
from derby_engine.core.forces import (
    CONFIGURED_FRICTION,
    FrictionOverride,
    FrictionSource,
)
from derby_engine.core.integrator import DEFAULT_DT, run_simulation
from derby_engine.core.track import TrackConfig
from derby_engine.core.vehicle import VehicleConfig

# ---------------------------------------------------------------------------
# Friction sweep
# ---------------------------------------------------------------------------


def friction_sweep(
    vehicle: VehicleConfig,
    track: TrackConfig,
    coefficients: Sequence[float],
    dt: float = DEFAULT_DT,
    constants: PhysicsConstants = DEFAULT_CONSTANTS,
) -> dict[str, Any]:
    """Simulate one run per friction coefficient.

    Args:
        vehicle: Vehicle configuration.
        track: Track configuration.
        coefficients: Friction coefficients to evaluate (non-empty).
        dt: Integrator step size.
        constants: Physical constants table.

    Returns:
        Dictionary containing:
            coefficients  -- The evaluated mu values (NDArray).
            finish_times  -- Finish time per coefficient (NDArray).
            max_velocities -- Peak speed per coefficient (NDArray).
            did_finish    -- Whether each run finished (NDArray of bool).

    Raises:
        ValueError: If *coefficients* is empty.
    """
    if len(coefficients) == 0:
        raise ValueError("coefficients must not be empty.")

    mus: NDArray[np.float64] = np.asarray(coefficients, dtype=np.float64)
    finish_times = np.empty_like(mus)
    max_velocities = np.empty_like(mus)
    did_finish = np.empty(mus.shape, dtype=bool)

    for i, mu in enumerate(mus):
        result = run_simulation(
            vehicle, track, FrictionOverride(float(mu)), dt=dt, constants=constants
        )
        finish_times[i] = result.finish_time
        max_velocities[i] = result.max_velocity
        did_finish[i] = result.did_finish

    return {
        "coefficients": mus,
        "finish_times": finish_times,
        "max_velocities": max_velocities,
        "did_finish": did_finish,
    }


def is_strictly_increasing(values: Sequence[float] | NDArray[np.float64]) -> bool:
    """Return True when every element is greater than its predecessor."""
    arr = np.asarray(values, dtype=np.float64)
    if arr.size < 2:
        return True
    return bool(np.all(np.diff(arr) > 0.0))


# ---------------------------------------------------------------------------
# Step-size convergence
# ---------------------------------------------------------------------------


def step_size_convergence(
    vehicle: VehicleConfig,
    track: TrackConfig,
    steps: Sequence[float],
    friction: FrictionSource = CONFIGURED_FRICTION,
    constants: PhysicsConstants = DEFAULT_CONSTANTS,
) -> dict[str, NDArray[np.float64]]:
    """Run the same configuration at several step sizes.

    Returns:
        Dictionary containing:
            steps         -- The evaluated step sizes (NDArray).
            finish_times  -- Finish time per step size (NDArray).
            energy_errors -- Energy residual per step size (NDArray).
            spread        -- Max minus min finish time (0-d NDArray).

    Raises:
        ValueError: If *steps* is empty.
    """
    if len(steps) == 0:
        raise ValueError("steps must not be empty.")

    dts: NDArray[np.float64] = np.asarray(steps, dtype=np.float64)
    finish_times = np.empty_like(dts)
    energy_errors = np.empty_like(dts)

    for i, step in enumerate(dts):
        result = run_simulation(
            vehicle, track, friction, dt=float(step), constants=constants
        )
        finish_times[i] = result.finish_time
        energy_errors[i] = result.energy.energy_error

    return {
        "steps": dts,
        "finish_times": finish_times,
        "energy_errors": energy_errors,
        "spread": np.ptp(finish_times),
    }
