"""Tests for the bisection friction calibrator."""

import pytest

from derby_engine.core.calibration import CalibrationResult, calibrate_friction
from derby_engine.core.errors import SimulationInputError
from derby_engine.core.forces import FrictionOverride
from derby_engine.core.integrator import run_simulation
from derby_engine.core.track import DEFAULT_TRACK
from derby_engine.core.vehicle import DEFAULT_VEHICLE

# ---------------------------------------------------------------------------
# Round trip
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("mu0", [0.03, 0.05, 0.08, 0.11, 0.14, 0.149])
def test_calibration_round_trip(mu0: float) -> None:
    """Calibrating against a simulated time recovers the friction used."""
    target = run_simulation(
        DEFAULT_VEHICLE, DEFAULT_TRACK, FrictionOverride(mu0)
    ).finish_time

    result = calibrate_friction(target, DEFAULT_VEHICLE, DEFAULT_TRACK)

    assert result.feasible
    assert result.friction is not None
    assert abs(result.friction - mu0) < 0.005


def test_calibrated_friction_reproduces_target() -> None:
    """Re-running with the calibrated mu lands within tolerance of the target."""
    target = run_simulation(
        DEFAULT_VEHICLE, DEFAULT_TRACK, FrictionOverride(0.06)
    ).finish_time
    result = calibrate_friction(target, DEFAULT_VEHICLE, DEFAULT_TRACK)

    assert result.converged
    rerun = run_simulation(DEFAULT_VEHICLE, DEFAULT_TRACK, result.to_friction_source())
    assert abs(rerun.finish_time - target) < 0.001


def test_calibration_deterministic() -> None:
    """Same inputs must produce the same calibration."""
    r1 = calibrate_friction(2.6, DEFAULT_VEHICLE, DEFAULT_TRACK)
    r2 = calibrate_friction(2.6, DEFAULT_VEHICLE, DEFAULT_TRACK)
    assert r1 == r2


def test_iteration_cap_returns_best_estimate() -> None:
    """With a single iteration the midpoint is returned unconverged."""
    target = run_simulation(
        DEFAULT_VEHICLE, DEFAULT_TRACK, FrictionOverride(0.03)
    ).finish_time
    result = calibrate_friction(
        target, DEFAULT_VEHICLE, DEFAULT_TRACK, max_iterations=1
    )
    assert result.feasible
    assert not result.converged
    assert result.iterations == 1
    # First midpoint 0.1005 is too slow, so the estimate moves down.
    assert result.friction == pytest.approx((0.001 + 0.1005) / 2)


# ---------------------------------------------------------------------------
# Infeasibility
# ---------------------------------------------------------------------------


def test_target_faster_than_minimum_friction_is_infeasible() -> None:
    """A time quicker than the near-frictionless run cannot be matched."""
    result = calibrate_friction(0.5, DEFAULT_VEHICLE, DEFAULT_TRACK)
    assert not result.feasible
    assert result.friction is None
    assert result.iterations == 0
    assert result.min_finish_time > 0.5


def test_target_slower_than_maximum_friction_is_infeasible() -> None:
    """A time slower than the high-friction run cannot be matched."""
    result = calibrate_friction(20.0, DEFAULT_VEHICLE, DEFAULT_TRACK)
    assert not result.feasible
    assert result.max_finish_time < 20.0


def test_infeasible_result_has_no_friction_source() -> None:
    """An infeasible calibration cannot be turned into an override."""
    result = CalibrationResult(
        target_time=0.5,
        friction=None,
        iterations=0,
        converged=False,
        min_finish_time=2.0,
        max_finish_time=10.0,
    )
    with pytest.raises(ValueError, match="outside the achievable range"):
        result.to_friction_source()


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("target", [0.0, -1.0, float("nan")])
def test_invalid_target_rejected(target: float) -> None:
    """Target times must be finite and positive."""
    with pytest.raises(SimulationInputError):
        calibrate_friction(target, DEFAULT_VEHICLE, DEFAULT_TRACK)


def test_invalid_bracket_rejected() -> None:
    """The friction bracket must be ordered."""
    with pytest.raises(SimulationInputError, match="bracket"):
        calibrate_friction(
            2.5, DEFAULT_VEHICLE, DEFAULT_TRACK, min_friction=0.2, max_friction=0.1
        )
