"""Per-step force model for the derby simulation engine.

All forces are magnitudes resolved along the track tangent and evaluated
at the vehicle's centre of mass.  Gravity drives the car forward; friction,
drag and scrub oppose the motion.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from derby_engine.core.constants import DEFAULT_CONSTANTS, PhysicsConstants
from derby_engine.core.errors import SimulationInputError, require_finite
from derby_engine.core.track import TrackConfig, slope_angle
from derby_engine.core.vehicle import VehicleConfig

# ---------------------------------------------------------------------------
# Friction source
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConfiguredFriction:
    """Derive mu from the vehicle's axle preparation."""


@dataclass(frozen=True)
class FrictionOverride:
    """Replace the configured mu with an explicit coefficient.

    Attributes:
        coefficient: Axle friction coefficient (>= 0).
    """

    coefficient: float

    def __post_init__(self) -> None:
        value = require_finite("coefficient", self.coefficient)
        if value < 0.0:
            raise SimulationInputError("friction coefficient must be >= 0.")


FrictionSource = ConfiguredFriction | FrictionOverride

CONFIGURED_FRICTION = ConfiguredFriction()


def effective_friction(
    vehicle: VehicleConfig,
    friction: FrictionSource = CONFIGURED_FRICTION,
    constants: PhysicsConstants = DEFAULT_CONSTANTS,
) -> float:
    """Return the axle friction coefficient used for a run.

    An override replaces the value entirely; axle preparation is ignored.
    Otherwise the base coefficient is reduced for sanded axles and for
    graphite.
    """
    if isinstance(friction, FrictionOverride):
        return friction.coefficient
    if not isinstance(friction, ConfiguredFriction):
        raise SimulationInputError(
            "friction must be ConfiguredFriction or FrictionOverride, "
            f"got {type(friction).__name__}."
        )
    mu = constants.base_friction
    if vehicle.axle_sanded:
        mu -= constants.sanded_friction_reduction
    if vehicle.graphite:
        mu -= constants.graphite_friction_reduction
    return max(0.0, mu)


# ---------------------------------------------------------------------------
# Stability
# ---------------------------------------------------------------------------


def stability_factor(
    vehicle: VehicleConfig, constants: PhysicsConstants = DEFAULT_CONSTANTS
) -> float:
    """Return ``(wheelbase / reference_wheelbase) * (1 + cant^2)``."""
    normalized_wheelbase = vehicle.wheelbase_in / constants.reference_wheelbase_in
    return normalized_wheelbase * (1.0 + vehicle.wheel_cant_deg**2)


def instability_coefficient(
    vehicle: VehicleConfig, constants: PhysicsConstants = DEFAULT_CONSTANTS
) -> float:
    """Return the scrub coefficient ``(base + scale * |bias|) / stability``."""
    wobble = vehicle.scrub_base + vehicle.scrub_bias_scale * abs(
        vehicle.left_right_bias
    )
    return wobble / stability_factor(vehicle, constants)


# ---------------------------------------------------------------------------
# Force evaluation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TrackForces:
    """Along-track force magnitudes at one instant, in newtons.

    Attributes:
        gravity: Gravity component along the tangent.
        normal: Normal load on the wheels.
        friction: Axle friction.
        drag: Aerodynamic drag.
        scrub: Lateral-instability loss.
    """

    gravity: float
    normal: float
    friction: float
    drag: float
    scrub: float

    @property
    def net(self) -> float:
        """Gravity minus every resistive force."""
        return self.gravity - self.friction - self.drag - self.scrub


def compute_forces(
    vehicle: VehicleConfig,
    track: TrackConfig,
    com_position: float,
    velocity: float,
    mu: float,
    constants: PhysicsConstants = DEFAULT_CONSTANTS,
) -> TrackForces:
    """Evaluate every force acting on the car at its centre of mass.

    Args:
        vehicle: Vehicle configuration.
        track: Track configuration.
        com_position: Arc-length position of the centre of mass in metres.
        velocity: Current speed in m/s (>= 0).
        mu: Friction coefficient from :func:`effective_friction`.
        constants: Physical constants table.

    Returns:
        A :class:`TrackForces` snapshot.  Friction, drag and scrub are zero
        when ``vehicle.lossless`` is set.
    """
    mass = vehicle.mass_kg(constants)
    theta = slope_angle(com_position, track)

    f_gravity = mass * constants.gravity * math.sin(theta)
    f_normal = mass * constants.gravity * math.cos(theta)

    if vehicle.lossless:
        return TrackForces(
            gravity=f_gravity, normal=f_normal, friction=0.0, drag=0.0, scrub=0.0
        )

    wheel_factor = constants.raised_wheel_factor if vehicle.raised_wheel else 1.0
    cant_penalty = 1.0 + vehicle.wheel_cant_deg * constants.cant_friction_per_degree
    f_friction = mu * f_normal * wheel_factor * cant_penalty

    v_squared = velocity * velocity
    f_drag = (
        0.5
        * constants.air_density
        * vehicle.drag_coefficient
        * constants.frontal_area
        * v_squared
    )
    f_scrub = 0.5 * instability_coefficient(vehicle, constants) * mass * v_squared

    return TrackForces(
        gravity=f_gravity,
        normal=f_normal,
        friction=f_friction,
        drag=f_drag,
        scrub=f_scrub,
    )
