"""Tests for the vehicle configuration and constants table."""

import pytest

from derby_engine.core.constants import DEFAULT_CONSTANTS, PhysicsConstants
from derby_engine.core.errors import SimulationInputError
from derby_engine.core.vehicle import DEFAULT_VEHICLE, VehicleConfig, make_vehicle

# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def test_factory_defaults() -> None:
    """make_vehicle() without overrides returns the documented defaults."""
    vehicle = make_vehicle()
    assert vehicle == DEFAULT_VEHICLE
    assert vehicle.total_weight_oz == 5.0
    assert vehicle.weight_distribution == 0.2
    assert vehicle.axle_sanded is True
    assert vehicle.graphite is True
    assert vehicle.raised_wheel is True
    assert vehicle.lossless is False


def test_factory_overrides() -> None:
    """Overrides replace only the named fields."""
    vehicle = make_vehicle(name="Heavy", total_weight_oz=6.0)
    assert vehicle.name == "Heavy"
    assert vehicle.total_weight_oz == 6.0
    assert vehicle.wheelbase_in == DEFAULT_VEHICLE.wheelbase_in


def test_factory_from_base() -> None:
    """A base configuration can be extended."""
    base = make_vehicle(graphite=False)
    vehicle = make_vehicle(base, lossless=True)
    assert vehicle.graphite is False
    assert vehicle.lossless is True


def test_factory_unknown_field_rejected() -> None:
    """Unknown fields are an input error, not silently ignored."""
    with pytest.raises(SimulationInputError, match="wheel_colour"):
        make_vehicle(wheel_colour="red")


def test_vehicle_is_immutable() -> None:
    """A configuration cannot change during a run."""
    with pytest.raises(AttributeError):
        DEFAULT_VEHICLE.total_weight_oz = 4.0  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "field, value, match",
    [
        ("total_weight_oz", 0.0, "total_weight_oz"),
        ("wheelbase_in", -1.0, "wheelbase_in"),
        ("weight_distribution", 1.5, "weight_distribution"),
        ("left_right_bias", -1.2, "left_right_bias"),
        ("wheel_cant_deg", -0.5, "wheel_cant_deg"),
        ("drag_coefficient", float("inf"), "finite"),
        ("scrub_base", float("nan"), "finite"),
        ("graphite", "yes", "bool"),
    ],
)
def test_invalid_vehicle_rejected(field: str, value: object, match: str) -> None:
    """Invalid configuration values fail fast with a descriptive error."""
    with pytest.raises(SimulationInputError, match=match):
        make_vehicle(**{field: value})


def test_input_error_is_value_error() -> None:
    """Callers catching ValueError also catch input errors."""
    with pytest.raises(ValueError):
        VehicleConfig(total_weight_oz=-1.0)


# ---------------------------------------------------------------------------
# Derived quantities
# ---------------------------------------------------------------------------


def test_mass_conversion() -> None:
    """Five ounces is about 0.1417 kg."""
    assert abs(DEFAULT_VEHICLE.mass_kg() - 5.0 * 0.0283495) < 1e-12


def test_com_offset_sign() -> None:
    """Rear-weighted builds put the centre of mass behind the nose."""
    rear = make_vehicle(weight_distribution=0.0)
    centred = make_vehicle(weight_distribution=0.5)
    front = make_vehicle(weight_distribution=1.0)
    assert rear.com_offset_m() < 0.0
    assert centred.com_offset_m() == 0.0
    assert front.com_offset_m() > 0.0
    assert abs(front.com_offset_m() - 3.5 * 0.0254) < 1e-12


def test_constants_validated() -> None:
    """Constants must be finite and positive."""
    with pytest.raises(SimulationInputError, match="gravity"):
        PhysicsConstants(gravity=0.0)
    with pytest.raises(SimulationInputError, match="finite"):
        PhysicsConstants(air_density=float("nan"))


def test_default_constants() -> None:
    """The default table matches standard sea-level values."""
    assert DEFAULT_CONSTANTS.gravity == 9.81
    assert DEFAULT_CONSTANTS.air_density == 1.225
    assert DEFAULT_CONSTANTS.num_wheels == 4
