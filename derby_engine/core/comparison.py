"""Run comparison helpers for the derby simulation engine.

Everything here is read-only over :class:`SimulationResult` values: head
to head deltas, finish-order ranking, trajectory thinning for charts and
the badge rules shown next to a run.  Leaderboard ranking pairs each
result with its build so illegal cars can be filtered out.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from derby_engine.core.integrator import SimulationResult, TrajectoryPoint
from derby_engine.core.vehicle import VehicleConfig

SPEED_DEMON_TIME: float = 2.5  # seconds
ROCKET_SPEED: float = 5.0  # m/s
SMOOTH_EFFICIENCY: float = 0.85

# Race rules for a legal build.
MAX_LEGAL_WEIGHT_OZ: float = 5.0
MIN_LEGAL_WHEELBASE_IN: float = 4.0
MAX_LEGAL_WHEELBASE_IN: float = 4.5


def compare_results(
    result: SimulationResult, reference: SimulationResult
) -> dict[str, float | bool]:
    """Compare a run against a reference run.

    Returns:
        Dictionary containing:
            finish_delta    -- ``result - reference`` finish time (negative
                               means *result* was quicker).
            max_speed_delta -- ``result - reference`` peak speed in m/s.
            faster          -- True when *result* finished first.
    """
    finish_delta = result.finish_time - reference.finish_time
    return {
        "finish_delta": finish_delta,
        "max_speed_delta": result.max_velocity - reference.max_velocity,
        "faster": finish_delta < 0.0,
    }


def _finish_order(result: SimulationResult) -> tuple[bool, float]:
    return (not result.did_finish, result.finish_time)


def rank_results(results: Iterable[SimulationResult]) -> list[SimulationResult]:
    """Order runs by finish time.  Non-finishers go last."""
    return sorted(results, key=_finish_order)


# ---------------------------------------------------------------------------
# Leaderboard
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LeaderboardEntry:
    """A saved run: the build that was raced and what it did."""

    vehicle: VehicleConfig
    result: SimulationResult


def is_legal(vehicle: VehicleConfig) -> bool:
    """Return True when the build meets weight and wheelbase rules.

    A legal car weighs at most 5.0 oz and has a wheelbase between 4.0 and
    4.5 inches, both ends inclusive.
    """
    return (
        vehicle.total_weight_oz <= MAX_LEGAL_WEIGHT_OZ
        and MIN_LEGAL_WHEELBASE_IN <= vehicle.wheelbase_in <= MAX_LEGAL_WHEELBASE_IN
    )


def rank_entries(
    entries: Iterable[LeaderboardEntry], legal_only: bool = True
) -> list[LeaderboardEntry]:
    """Order leaderboard entries by finish time, non-finishers last.

    Args:
        entries: Saved runs to rank.
        legal_only: Drop builds that fail :func:`is_legal` before sorting.
    """
    kept = [e for e in entries if not legal_only or is_legal(e.vehicle)]
    return sorted(kept, key=lambda e: _finish_order(e.result))


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------


def downsample_trajectory(
    result: SimulationResult, every: int = 5
) -> list[TrajectoryPoint]:
    """Keep every *every*-th trajectory point, starting with the first.

    Raises:
        ValueError: If *every* < 1.
    """
    if every < 1:
        raise ValueError("every must be >= 1.")
    return list(result.trajectory[::every])


def award_badges(
    result: SimulationResult, history_best: float | None = None
) -> list[str]:
    """Return the badge labels earned by a run.

    Args:
        result: The run to judge.
        history_best: Best previous finish time, if any.  A quicker run
            earns "New Record!".
    """
    badges: list[str] = []
    if history_best is None or result.finish_time < history_best:
        badges.append("New Record!")
    if result.finish_time < SPEED_DEMON_TIME:
        badges.append("Speed Demon")
    if result.max_velocity > ROCKET_SPEED:
        badges.append("Rocket")
    if result.energy.friction_efficiency > SMOOTH_EFFICIENCY:
        badges.append("Smooth Operator")
    return badges
