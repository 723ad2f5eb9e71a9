"""Fixed-step integrator for the derby simulation engine.

A run advances simulated time in fixed steps with a semi-implicit Euler
scheme.  For each step:

    1. Evaluate forces at the centre of mass (nose position + offset).
    2. acceleration = (gravity - friction - drag - scrub) / mass
    3. v_new = max(0, v + a * dt)           -- the car never rolls back
    4. dx = 0.5 * (v + v_new) * dt          -- trapezoidal distance
    5. advance position, velocity and time
    6. accumulate each loss as force_at_step_start * dx
    7. record a trajectory point

The loop stops when the nose reaches the end of the track or when the
simulated time reaches :data:`TIME_CEILING`.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from derby_engine.core.constants import DEFAULT_CONSTANTS, PhysicsConstants
from derby_engine.core.energy import EnergyBudget, LossWork, compute_energy_budget
from derby_engine.core.errors import SimulationInputError, require_finite
from derby_engine.core.forces import (
    CONFIGURED_FRICTION,
    FrictionSource,
    compute_forces,
    effective_friction,
)
from derby_engine.core.track import DEFAULT_TRACK, TrackConfig
from derby_engine.core.vehicle import VehicleConfig

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_DT: float = 0.01  # seconds
TIME_CEILING: float = 10.0  # simulated seconds before a run is abandoned
MIN_DT: float = 1e-5  # caps a run at one million steps

# ---------------------------------------------------------------------------
# Result containers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TrajectoryPoint:
    """State of the car at the end of one integration step."""

    time: float
    position: float
    velocity: float
    acceleration: float


@dataclass(frozen=True)
class SimulationResult:
    """Outcome of a single run.

    Attributes:
        finish_time: Simulated time when the run ended, in seconds.  Equal
            to the ceiling when the car did not finish.
        max_velocity: Highest speed recorded, in m/s.
        trajectory: One :class:`TrajectoryPoint` per step, time-ascending.
        did_finish: True when the nose crossed the end of the track.
        energy: Energy budget of the run.
        friction_coefficient: Axle mu actually used.
        dt: Step size of the run.
    """

    finish_time: float
    max_velocity: float
    trajectory: tuple[TrajectoryPoint, ...]
    did_finish: bool
    energy: EnergyBudget
    friction_coefficient: float
    dt: float

    def max_speed_mph(self, constants: PhysicsConstants = DEFAULT_CONSTANTS) -> float:
        """Return the maximum speed in miles per hour."""
        return self.max_velocity * constants.mps_to_mph

    def as_arrays(self) -> dict[str, NDArray[np.float64]]:
        """Return the trajectory as one numpy array per column."""
        return {
            "time": np.array([p.time for p in self.trajectory], dtype=np.float64),
            "position": np.array(
                [p.position for p in self.trajectory], dtype=np.float64
            ),
            "velocity": np.array(
                [p.velocity for p in self.trajectory], dtype=np.float64
            ),
            "acceleration": np.array(
                [p.acceleration for p in self.trajectory], dtype=np.float64
            ),
        }


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def _validate_step(dt: float) -> float:
    step = require_finite("dt", dt)
    if step <= 0.0:
        raise SimulationInputError(f"dt must be > 0, got {dt}.")
    if step < MIN_DT:
        raise SimulationInputError(f"dt must be >= {MIN_DT:g}, got {dt}.")
    return step


def run_simulation(
    vehicle: VehicleConfig,
    track: TrackConfig = DEFAULT_TRACK,
    friction: FrictionSource = CONFIGURED_FRICTION,
    dt: float = DEFAULT_DT,
    constants: PhysicsConstants = DEFAULT_CONSTANTS,
) -> SimulationResult:
    """Simulate one run of *vehicle* down *track*.

    The computation is pure: identical arguments always produce the same
    trajectory and energy budget.

    Args:
        vehicle: Vehicle configuration.
        track: Track configuration.
        friction: Where the axle friction coefficient comes from.
        dt: Fixed step size in seconds (> 0).
        constants: Physical constants table.

    Returns:
        A :class:`SimulationResult`.  Hitting the time ceiling is a normal
        outcome reported through ``did_finish=False``.

    Raises:
        SimulationInputError: If *dt* is not finite or is below
            :data:`MIN_DT`, or if *friction* is not a friction source.
    """
    step = _validate_step(dt)
    if not isinstance(vehicle, VehicleConfig):
        raise SimulationInputError("vehicle must be a VehicleConfig.")
    if not isinstance(track, TrackConfig):
        raise SimulationInputError("track must be a TrackConfig.")

    mu = effective_friction(vehicle, friction, constants)
    mass = vehicle.mass_kg(constants)
    offset = vehicle.com_offset_m(constants)
    max_steps = math.ceil(TIME_CEILING / step - 1e-9)

    position = 0.0
    velocity = 0.0
    time = 0.0
    work_friction = 0.0
    work_drag = 0.0
    work_scrub = 0.0
    points: list[TrajectoryPoint] = []

    n = 0
    while position < track.length_m and n < max_steps:
        forces = compute_forces(
            vehicle, track, position + offset, velocity, mu, constants
        )
        acceleration = forces.net / mass

        velocity_new = max(0.0, velocity + acceleration * step)
        dx = 0.5 * (velocity + velocity_new) * step

        position += dx
        velocity = velocity_new
        n += 1
        time = n * step

        work_friction += forces.friction * dx
        work_drag += forces.drag * dx
        work_scrub += forces.scrub * dx

        points.append(TrajectoryPoint(time, position, velocity, acceleration))

    did_finish = position >= track.length_m
    losses = LossWork(friction=work_friction, drag=work_drag, scrub=work_scrub)
    energy = compute_energy_budget(
        vehicle, track, position, velocity, losses, constants
    )
    max_velocity = max(p.velocity for p in points)

    if did_finish:
        logger.debug(
            "%s finished %s in %.4f s (mu=%.4f, dt=%g, %d steps)",
            vehicle.name,
            track.name,
            time,
            mu,
            step,
            n,
        )
    else:
        logger.debug(
            "%s stopped at %.3f m of %s after %.1f s (mu=%.4f)",
            vehicle.name,
            position,
            track.name,
            time,
            mu,
        )

    return SimulationResult(
        finish_time=time,
        max_velocity=max_velocity,
        trajectory=tuple(points),
        did_finish=did_finish,
        energy=energy,
        friction_coefficient=mu,
        dt=step,
    )
