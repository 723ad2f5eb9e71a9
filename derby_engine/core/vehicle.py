"""Vehicle configuration for the derby simulation engine."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any

from derby_engine.core.constants import DEFAULT_CONSTANTS, PhysicsConstants
from derby_engine.core.errors import SimulationInputError, require_finite


@dataclass(frozen=True)
class VehicleConfig:
    """Immutable description of a gravity racer for a single run.

    Units follow the workshop conventions of the hobby: ounces, inches and
    degrees.  Conversion to SI happens through :class:`PhysicsConstants`.

    Attributes:
        name: Display name of the build.
        total_weight_oz: Total mass-bearing weight in ounces (> 0).
        weight_distribution: 0.0 (rear-biased) to 1.0 (front-biased).
        left_right_bias: -1.0 (left) to 1.0 (right), 0.0 is centred.
        axle_sanded: Axles deburred and polished.
        graphite: Graphite lubrication applied.
        wheel_cant_deg: Wheel cant angle in degrees (>= 0).
        raised_wheel: Only three wheels touch the track.
        wheelbase_in: Axle-to-axle distance in inches (> 0).
        drag_coefficient: Aerodynamic drag coefficient (>= 0).
        scrub_base: Base lateral instability ("hunting") coefficient (>= 0).
        scrub_bias_scale: Extra instability per unit of |left_right_bias| (>= 0).
        lossless: Zero every dissipative term (energy-conservation checks).
    """

    name: str = "New Car"
    total_weight_oz: float = 5.0
    weight_distribution: float = 0.2
    left_right_bias: float = 0.0
    axle_sanded: bool = True
    graphite: bool = True
    wheel_cant_deg: float = 1.5
    raised_wheel: bool = True
    wheelbase_in: float = 4.375
    drag_coefficient: float = 0.45
    scrub_base: float = 0.04
    scrub_bias_scale: float = 0.1
    lossless: bool = False

    def __post_init__(self) -> None:
        """Validate vehicle parameters."""
        if not self.name:
            raise SimulationInputError("Vehicle name must not be empty.")
        for flag in ("axle_sanded", "graphite", "raised_wheel", "lossless"):
            if not isinstance(getattr(self, flag), bool):
                raise SimulationInputError(f"{flag} must be a bool.")

        weight = require_finite("total_weight_oz", self.total_weight_oz)
        distribution = require_finite("weight_distribution", self.weight_distribution)
        bias = require_finite("left_right_bias", self.left_right_bias)
        cant = require_finite("wheel_cant_deg", self.wheel_cant_deg)
        wheelbase = require_finite("wheelbase_in", self.wheelbase_in)
        drag = require_finite("drag_coefficient", self.drag_coefficient)
        scrub_base = require_finite("scrub_base", self.scrub_base)
        scrub_scale = require_finite("scrub_bias_scale", self.scrub_bias_scale)

        if weight <= 0.0:
            raise SimulationInputError("total_weight_oz must be > 0.")
        if not 0.0 <= distribution <= 1.0:
            raise SimulationInputError(
                "weight_distribution must be between 0.0 and 1.0."
            )
        if not -1.0 <= bias <= 1.0:
            raise SimulationInputError("left_right_bias must be between -1.0 and 1.0.")
        if cant < 0.0:
            raise SimulationInputError("wheel_cant_deg must be >= 0.")
        if wheelbase <= 0.0:
            raise SimulationInputError("wheelbase_in must be > 0.")
        if drag < 0.0:
            raise SimulationInputError("drag_coefficient must be >= 0.")
        if scrub_base < 0.0:
            raise SimulationInputError("scrub_base must be >= 0.")
        if scrub_scale < 0.0:
            raise SimulationInputError("scrub_bias_scale must be >= 0.")

    def mass_kg(self, constants: PhysicsConstants = DEFAULT_CONSTANTS) -> float:
        """Return the vehicle mass in kilograms."""
        return self.total_weight_oz * constants.oz_to_kg

    def com_offset_m(self, constants: PhysicsConstants = DEFAULT_CONSTANTS) -> float:
        """Return the centre-of-mass offset from the nose, in metres.

        Negative values place the centre of mass behind the nose reference
        point (rear-weighted builds).
        """
        length_m = constants.vehicle_length_in * constants.in_to_m
        return (self.weight_distribution - 0.5) * length_m


DEFAULT_VEHICLE = VehicleConfig()

_VEHICLE_FIELDS: frozenset[str] = frozenset(f.name for f in fields(VehicleConfig))


def make_vehicle(base: VehicleConfig | None = None, **overrides: Any) -> VehicleConfig:
    """Build a :class:`VehicleConfig` from documented defaults plus overrides.

    Args:
        base: Configuration to start from.  Defaults to :data:`DEFAULT_VEHICLE`.
        **overrides: Field values replacing those of *base*.

    Returns:
        A validated, immutable vehicle configuration.

    Raises:
        SimulationInputError: If an override names an unknown field or the
            resulting configuration is invalid.
    """
    unknown = sorted(set(overrides) - _VEHICLE_FIELDS)
    if unknown:
        raise SimulationInputError(
            f"Unknown vehicle field(s): {', '.join(unknown)}"
        )
    return replace(base or DEFAULT_VEHICLE, **overrides)
