"""Energy accounting for the derby simulation engine.

The budget compares the potential energy available at the start gate with
where it ended up: translational and rotational kinetic energy plus the
work done against friction, drag and scrub.  The residual is exposed as a
diagnostic of integration accuracy and is never corrected.
"""

from __future__ import annotations

from dataclasses import dataclass

from derby_engine.core.constants import DEFAULT_CONSTANTS, PhysicsConstants
from derby_engine.core.track import TrackConfig, track_height
from derby_engine.core.vehicle import VehicleConfig

CONSERVATION_TOLERANCE: float = 0.1  # joules


@dataclass(frozen=True)
class LossWork:
    """Work done against each resistive force over a run, in joules."""

    friction: float = 0.0
    drag: float = 0.0
    scrub: float = 0.0

    @property
    def total(self) -> float:
        return self.friction + self.drag + self.scrub


@dataclass(frozen=True)
class EnergyBudget:
    """Energy balance of a completed run, in joules.

    Attributes:
        initial_pe: Potential energy of the centre of mass at the start.
        final_pe: Potential energy of the centre of mass at the end.
        final_ke: Translational kinetic energy at the end.
        rotational_ke: Kinetic energy stored in the spinning wheels.
        work_friction: Work lost to axle friction.
        work_drag: Work lost to aerodynamic drag.
        work_scrub: Work lost to lateral instability.
        total_loss: Sum of the three loss terms.
        energy_error: ``initial_pe - (final_pe + final_ke + rotational_ke
            + total_loss)``.  Positive means energy went missing, negative
            means the integrator created energy.
    """

    initial_pe: float
    final_pe: float
    final_ke: float
    rotational_ke: float
    work_friction: float
    work_drag: float
    work_scrub: float
    total_loss: float
    energy_error: float

    @property
    def friction_efficiency(self) -> float:
        """Fraction of the starting potential energy not lost to friction."""
        if self.initial_pe <= 0.0:
            return 0.0
        return 1.0 - abs(self.work_friction) / self.initial_pe


def compute_energy_budget(
    vehicle: VehicleConfig,
    track: TrackConfig,
    final_position: float,
    final_velocity: float,
    losses: LossWork,
    constants: PhysicsConstants = DEFAULT_CONSTANTS,
) -> EnergyBudget:
    """Derive the energy budget of a run from its end state.

    Heights are evaluated at the centre of mass, i.e. the nose position
    plus the weight-distribution offset.  Rotational energy models each
    wheel as a thin hoop rolling without slip (``0.5 * m * v^2 / 2`` per
    wheel) and is zero in lossless mode.

    Args:
        vehicle: Vehicle configuration of the run.
        track: Track configuration of the run.
        final_position: Nose position when the run ended, in metres.
        final_velocity: Speed when the run ended, in m/s.
        losses: Accumulated work against each resistive force.
        constants: Physical constants table.

    Returns:
        The :class:`EnergyBudget` for the run.
    """
    mass = vehicle.mass_kg(constants)
    offset = vehicle.com_offset_m(constants)

    initial_pe = mass * constants.gravity * track_height(offset, track)
    final_pe = mass * constants.gravity * track_height(final_position + offset, track)
    final_ke = 0.5 * mass * final_velocity * final_velocity

    rotational_ke = 0.0
    if not vehicle.lossless:
        rotational_ke = (
            constants.num_wheels
            * 0.25
            * constants.wheel_mass_kg
            * final_velocity
            * final_velocity
        )

    total_loss = losses.total
    energy_error = initial_pe - (final_pe + final_ke + rotational_ke + total_loss)

    return EnergyBudget(
        initial_pe=initial_pe,
        final_pe=final_pe,
        final_ke=final_ke,
        rotational_ke=rotational_ke,
        work_friction=losses.friction,
        work_drag=losses.drag,
        work_scrub=losses.scrub,
        total_loss=total_loss,
        energy_error=energy_error,
    )


def conservation_status(
    budget: EnergyBudget, tolerance: float = CONSERVATION_TOLERANCE
) -> str:
    """Classify the energy residual of a run.

    Returns:
        ``"ok"`` when ``|energy_error| <= tolerance``, ``"gain"`` when the
        run created energy beyond the tolerance, ``"excess_loss"`` when more
        energy disappeared than the loss terms account for.

    Raises:
        ValueError: If *tolerance* is negative.
    """
    if tolerance < 0.0:
        raise ValueError("tolerance must be >= 0.")
    if abs(budget.energy_error) <= tolerance:
        return "ok"
    if budget.energy_error < 0.0:
        return "gain"
    return "excess_loss"
