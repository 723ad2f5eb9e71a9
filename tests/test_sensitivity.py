"""Tests for friction sweeps and step-size convergence."""

import numpy as np
import pytest

from derby_engine.core.sensitivity import (
    friction_sweep,
    is_strictly_increasing,
    step_size_convergence,
)
from derby_engine.core.track import DEFAULT_TRACK
from derby_engine.core.vehicle import DEFAULT_VEHICLE

# ---------------------------------------------------------------------------
# Friction sweep
# ---------------------------------------------------------------------------


def test_finish_time_strictly_increasing_in_friction() -> None:
    """Finish time grows with every increase in friction."""
    mus = [0.01, 0.03, 0.05, 0.07, 0.09, 0.11]
    sweep = friction_sweep(DEFAULT_VEHICLE, DEFAULT_TRACK, mus)
    assert bool(np.all(sweep["did_finish"]))
    assert is_strictly_increasing(sweep["finish_times"])


def test_sweep_array_shapes() -> None:
    """Every output array has one entry per coefficient."""
    mus = [0.02, 0.06, 0.1]
    sweep = friction_sweep(DEFAULT_VEHICLE, DEFAULT_TRACK, mus)
    for key in ("coefficients", "finish_times", "max_velocities", "did_finish"):
        assert sweep[key].shape == (3,)
    assert np.array_equal(sweep["coefficients"], np.array(mus))


def test_peak_speed_falls_with_friction() -> None:
    """More friction means a lower top speed."""
    sweep = friction_sweep(DEFAULT_VEHICLE, DEFAULT_TRACK, [0.02, 0.12])
    assert sweep["max_velocities"][0] > sweep["max_velocities"][1]


def test_empty_sweep_rejected() -> None:
    """An empty coefficient list is an error."""
    with pytest.raises(ValueError):
        friction_sweep(DEFAULT_VEHICLE, DEFAULT_TRACK, [])


# ---------------------------------------------------------------------------
# Monotonicity helper
# ---------------------------------------------------------------------------


def test_is_strictly_increasing() -> None:
    """Equal neighbours or a drop break strict monotonicity."""
    assert is_strictly_increasing([1.0, 2.0, 3.0])
    assert not is_strictly_increasing([1.0, 1.0, 3.0])
    assert not is_strictly_increasing([1.0, 3.0, 2.0])
    assert is_strictly_increasing([5.0])


# ---------------------------------------------------------------------------
# Step-size convergence
# ---------------------------------------------------------------------------


def test_step_size_convergence_spread() -> None:
    """Finish times across step sizes stay within 50 ms of each other."""
    report = step_size_convergence(DEFAULT_VEHICLE, DEFAULT_TRACK, [0.01, 0.005, 0.001])
    assert report["finish_times"].shape == (3,)
    assert float(report["spread"]) < 0.05


def test_empty_steps_rejected() -> None:
    """An empty step list is an error."""
    with pytest.raises(ValueError):
        step_size_convergence(DEFAULT_VEHICLE, DEFAULT_TRACK, [])
