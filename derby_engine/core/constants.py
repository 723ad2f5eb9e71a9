"""Physical constants table for the derby simulation engine."""

from __future__ import annotations

from dataclasses import dataclass, fields

from derby_engine.core.errors import SimulationInputError, require_finite


@dataclass(frozen=True)
class PhysicsConstants:
    """Immutable table of physical constants and model coefficients.

    A single instance is passed through the force model, integrator,
    energy accountant and calibrator so that no module reads mutable
    process-wide globals.

    Attributes:
        gravity: Gravitational acceleration in m/s^2.
        air_density: Air density in kg/m^3.
        frontal_area: Frontal area of the car body in m^2.
        oz_to_kg: Ounces to kilograms.
        in_to_m: Inches to metres.
        mps_to_mph: Metres per second to miles per hour.
        vehicle_length_in: Body length used for the centre-of-mass offset.
        reference_wheelbase_in: Wheelbase that yields a stability of 1.0.
        base_friction: Axle friction coefficient of an unprepared car.
        sanded_friction_reduction: Reduction in mu for sanded axles.
        graphite_friction_reduction: Reduction in mu for graphite.
        raised_wheel_factor: Friction multiplier when three wheels bear load.
        cant_friction_per_degree: Friction penalty per degree of wheel cant.
        wheel_mass_kg: Mass of a single wheel (thin hoop).
        num_wheels: Number of wheels contributing rotational energy.
    """

    gravity: float = 9.81
    air_density: float = 1.225
    frontal_area: float = 0.003
    oz_to_kg: float = 0.0283495
    in_to_m: float = 0.0254
    mps_to_mph: float = 2.23694
    vehicle_length_in: float = 7.0
    reference_wheelbase_in: float = 4.375
    base_friction: float = 0.12
    sanded_friction_reduction: float = 0.04
    graphite_friction_reduction: float = 0.05
    raised_wheel_factor: float = 0.75
    cant_friction_per_degree: float = 0.005
    wheel_mass_kg: float = 0.0025
    num_wheels: int = 4

    def __post_init__(self) -> None:
        """Validate that every constant is finite and positive."""
        for f in fields(self):
            value = require_finite(f.name, getattr(self, f.name))
            if value <= 0.0:
                raise SimulationInputError(f"{f.name} must be > 0, got {value}.")
        if int(self.num_wheels) != self.num_wheels:
            raise SimulationInputError("num_wheels must be a whole number.")


DEFAULT_CONSTANTS = PhysicsConstants()
