"""Tests for the fixed-step integrator."""

import numpy as np
import pytest

from derby_engine.core.errors import SimulationInputError
from derby_engine.core.forces import FrictionOverride
from derby_engine.core.integrator import MIN_DT, TIME_CEILING, run_simulation
from derby_engine.core.track import DEFAULT_TRACK
from derby_engine.core.vehicle import DEFAULT_VEHICLE, make_vehicle

# ---------------------------------------------------------------------------
# Basic runs
# ---------------------------------------------------------------------------


def test_default_run_finishes() -> None:
    """The default build completes the standard track well inside 10 s."""
    result = run_simulation(DEFAULT_VEHICLE, DEFAULT_TRACK)
    assert result.did_finish
    assert 1.0 < result.finish_time < 5.0
    assert result.trajectory[-1].position >= DEFAULT_TRACK.length_m
    assert result.friction_coefficient == pytest.approx(0.03)


def test_run_deterministic() -> None:
    """Identical inputs must produce identical results."""
    r1 = run_simulation(DEFAULT_VEHICLE, DEFAULT_TRACK)
    r2 = run_simulation(DEFAULT_VEHICLE, DEFAULT_TRACK)
    assert r1 == r2


def test_time_advances_by_fixed_step() -> None:
    """Every trajectory point is one step after the previous one."""
    result = run_simulation(DEFAULT_VEHICLE, DEFAULT_TRACK, dt=0.005)
    times = result.as_arrays()["time"]
    assert times[0] == pytest.approx(0.005)
    assert np.allclose(np.diff(times), 0.005)
    assert result.finish_time == times[-1]


def test_max_velocity_matches_trajectory() -> None:
    """max_velocity is the largest recorded velocity."""
    result = run_simulation(DEFAULT_VEHICLE, DEFAULT_TRACK)
    assert result.max_velocity == max(p.velocity for p in result.trajectory)
    assert result.max_speed_mph() == pytest.approx(result.max_velocity * 2.23694)


# ---------------------------------------------------------------------------
# Invariants
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("mu", [0.0, 0.03, 0.1, 0.2, 0.6])
def test_position_monotone_and_velocity_non_negative(mu: float) -> None:
    """Position never decreases and velocity is never negative."""
    result = run_simulation(DEFAULT_VEHICLE, DEFAULT_TRACK, FrictionOverride(mu))
    arrays = result.as_arrays()
    assert np.all(np.diff(arrays["position"]) >= 0.0)
    assert np.all(arrays["velocity"] >= 0.0)


def test_monotonicity_higher_friction_is_slower() -> None:
    """Higher friction must result in a slower time."""
    low = run_simulation(DEFAULT_VEHICLE, DEFAULT_TRACK, FrictionOverride(0.05))
    high = run_simulation(DEFAULT_VEHICLE, DEFAULT_TRACK, FrictionOverride(0.1))
    assert high.finish_time > low.finish_time


def test_step_size_convergence() -> None:
    """Finish times at dt=0.01 and dt=0.001 agree within 50 ms."""
    coarse = run_simulation(DEFAULT_VEHICLE, DEFAULT_TRACK, dt=0.01)
    fine = run_simulation(DEFAULT_VEHICLE, DEFAULT_TRACK, dt=0.001)
    assert abs(coarse.finish_time - fine.finish_time) < 0.05


# ---------------------------------------------------------------------------
# Termination
# ---------------------------------------------------------------------------


def test_stuck_car_hits_time_ceiling() -> None:
    """A car that cannot overcome friction stops at the ceiling, no error."""
    result = run_simulation(DEFAULT_VEHICLE, DEFAULT_TRACK, FrictionOverride(1.0))
    assert not result.did_finish
    assert result.finish_time == pytest.approx(TIME_CEILING)
    assert len(result.trajectory) == 1000
    assert result.max_velocity == 0.0


def test_car_stopping_on_flat_does_not_finish() -> None:
    """High friction lets the car leave the ramp but not reach the line."""
    result = run_simulation(DEFAULT_VEHICLE, DEFAULT_TRACK, FrictionOverride(0.2))
    assert not result.did_finish
    assert result.trajectory[-1].velocity == 0.0
    assert DEFAULT_TRACK.ramp_length_m < result.trajectory[-1].position
    assert result.trajectory[-1].position < DEFAULT_TRACK.length_m


@pytest.mark.parametrize("dt", [0.0001, 0.003, 0.05])
def test_run_bounded_by_step_count(dt: float) -> None:
    """No run takes more than ceil(10/dt) steps."""
    result = run_simulation(
        DEFAULT_VEHICLE, DEFAULT_TRACK, FrictionOverride(1.0), dt=dt
    )
    assert len(result.trajectory) <= int(np.ceil(TIME_CEILING / dt)) + 1


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("dt", [0.0, -0.01, float("nan"), float("inf")])
def test_invalid_step_rejected(dt: float) -> None:
    """Non-positive or non-finite step sizes fail fast."""
    with pytest.raises(SimulationInputError, match="dt"):
        run_simulation(DEFAULT_VEHICLE, DEFAULT_TRACK, dt=dt)


@pytest.mark.parametrize("dt", [1e-320, 1e-9, MIN_DT / 2.0])
def test_tiny_step_rejected(dt: float) -> None:
    """Steps below the floor, subnormal ones included, fail fast."""
    with pytest.raises(SimulationInputError, match="dt must be >="):
        run_simulation(DEFAULT_VEHICLE, DEFAULT_TRACK, dt=dt)


def test_raw_friction_value_rejected() -> None:
    """A bare float is not accepted in place of a friction source."""
    with pytest.raises(SimulationInputError):
        run_simulation(DEFAULT_VEHICLE, DEFAULT_TRACK, 0.05)  # type: ignore[arg-type]


def test_lossless_run_is_fastest() -> None:
    """Removing every loss gives a quicker run than any real build."""
    lossless = run_simulation(make_vehicle(lossless=True), DEFAULT_TRACK)
    real = run_simulation(DEFAULT_VEHICLE, DEFAULT_TRACK, FrictionOverride(0.0))
    assert lossless.finish_time < real.finish_time
