"""Friction calibration for the derby simulation engine.

Inverts the integrator: given an observed finish time, bisect on the axle
friction coefficient until a simulated run reproduces it.  The search
relies on finish time being strictly increasing in mu for a fixed vehicle
and track.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from derby_engine.core.constants import DEFAULT_CONSTANTS, PhysicsConstants
from derby_engine.core.errors import SimulationInputError, require_finite
from derby_engine.core.forces import FrictionOverride
from derby_engine.core.integrator import DEFAULT_DT, run_simulation
from derby_engine.core.track import TrackConfig
from derby_engine.core.vehicle import VehicleConfig

logger = logging.getLogger(__name__)

MIN_FRICTION: float = 0.001
MAX_FRICTION: float = 0.2
MAX_ITERATIONS: int = 20
TIME_TOLERANCE: float = 0.001  # seconds


@dataclass(frozen=True)
class CalibrationResult:
    """Outcome of a friction calibration.

    Attributes:
        target_time: Observed finish time being matched, in seconds.
        friction: Calibrated mu, or ``None`` when the target lies outside
            the finish times reachable within the friction bracket.
        iterations: Bisection steps performed.
        converged: True when a run landed within tolerance of the target;
            False for a best estimate after exhausting iterations.
        min_finish_time: Finish time at the low end of the bracket.
        max_finish_time: Finish time at the high end of the bracket.
    """

    target_time: float
    friction: float | None
    iterations: int
    converged: bool
    min_finish_time: float
    max_finish_time: float

    @property
    def feasible(self) -> bool:
        return self.friction is not None

    def to_friction_source(self) -> FrictionOverride:
        """Return the calibrated mu as a friction override for re-running.

        Raises:
            ValueError: If the calibration was infeasible.
        """
        if self.friction is None:
            raise ValueError(
                f"Target time {self.target_time:.4f} s is outside the "
                f"achievable range [{self.min_finish_time:.4f}, "
                f"{self.max_finish_time:.4f}] s."
            )
        return FrictionOverride(self.friction)


def calibrate_friction(
    target_time: float,
    vehicle: VehicleConfig,
    track: TrackConfig,
    *,
    min_friction: float = MIN_FRICTION,
    max_friction: float = MAX_FRICTION,
    max_iterations: int = MAX_ITERATIONS,
    tolerance: float = TIME_TOLERANCE,
    dt: float = DEFAULT_DT,
    constants: PhysicsConstants = DEFAULT_CONSTANTS,
) -> CalibrationResult:
    """Find the friction coefficient that reproduces *target_time*.

    Both ends of the bracket are simulated first.  If the target is faster
    than the low-friction run or slower than the high-friction run, the
    result is infeasible.  Otherwise the bracket is bisected, one full run
    per iteration, until a run finishes within *tolerance* of the target.
    A slow run moves the upper bound down, a fast run moves the lower bound
    up.  After *max_iterations* the final midpoint is returned as a best
    estimate.

    Args:
        target_time: Observed finish time in seconds (> 0).
        vehicle: Vehicle configuration.  Its axle preparation is ignored
            because every run uses an explicit friction override.
        track: Track configuration.
        min_friction: Low end of the friction bracket.
        max_friction: High end of the friction bracket.
        max_iterations: Maximum bisection steps.
        tolerance: Absolute finish-time tolerance in seconds.
        dt: Integrator step size.
        constants: Physical constants table.

    Returns:
        A :class:`CalibrationResult`.  Infeasibility is reported through
        ``friction=None``, never raised.

    Raises:
        SimulationInputError: On a non-positive target time, an invalid
            bracket, or invalid iteration settings.
    """
    target = require_finite("target_time", target_time)
    low = require_finite("min_friction", min_friction)
    high = require_finite("max_friction", max_friction)
    tol = require_finite("tolerance", tolerance)
    if target <= 0.0:
        raise SimulationInputError("target_time must be > 0.")
    if not 0.0 <= low < high:
        raise SimulationInputError("friction bracket must satisfy 0 <= min < max.")
    if max_iterations < 1:
        raise SimulationInputError("max_iterations must be >= 1.")
    if tol <= 0.0:
        raise SimulationInputError("tolerance must be > 0.")

    def finish_time(mu: float) -> float:
        return run_simulation(
            vehicle, track, FrictionOverride(mu), dt=dt, constants=constants
        ).finish_time

    min_time = finish_time(low)
    max_time = finish_time(high)

    if target < min_time or target > max_time:
        logger.info(
            "Target %.4f s infeasible for %s on %s (range %.4f-%.4f s)",
            target,
            vehicle.name,
            track.name,
            min_time,
            max_time,
        )
        return CalibrationResult(
            target_time=target,
            friction=None,
            iterations=0,
            converged=False,
            min_finish_time=min_time,
            max_finish_time=max_time,
        )

    iterations = 0
    while iterations < max_iterations:
        mid = 0.5 * (low + high)
        t = finish_time(mid)
        iterations += 1
        logger.debug("iteration %d: mu=%.6f -> %.4f s", iterations, mid, t)

        if abs(t - target) < tol:
            logger.info("Calibrated mu=%.6f after %d iterations", mid, iterations)
            return CalibrationResult(
                target_time=target,
                friction=mid,
                iterations=iterations,
                converged=True,
                min_finish_time=min_time,
                max_finish_time=max_time,
            )

        if t > target:
            # Too slow: less friction.
            high = mid
        else:
            low = mid

    estimate = 0.5 * (low + high)
    logger.info(
        "Calibration did not reach %.4f s tolerance; best estimate mu=%.6f",
        tol,
        estimate,
    )
    return CalibrationResult(
        target_time=target,
        friction=estimate,
        iterations=iterations,
        converged=False,
        min_finish_time=min_time,
        max_finish_time=max_time,
    )
