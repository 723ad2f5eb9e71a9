"""Core physics modules for the derby simulation engine."""

from derby_engine.core.calibration import CalibrationResult, calibrate_friction
from derby_engine.core.comparison import (
    LeaderboardEntry,
    award_badges,
    compare_results,
    downsample_trajectory,
    is_legal,
    rank_entries,
    rank_results,
)
from derby_engine.core.constants import DEFAULT_CONSTANTS, PhysicsConstants
from derby_engine.core.energy import (
    EnergyBudget,
    LossWork,
    compute_energy_budget,
    conservation_status,
)
from derby_engine.core.errors import SimulationInputError
from derby_engine.core.forces import (
    CONFIGURED_FRICTION,
    ConfiguredFriction,
    FrictionOverride,
    FrictionSource,
    TrackForces,
    compute_forces,
    effective_friction,
    instability_coefficient,
    stability_factor,
)
from derby_engine.core.integrator import (
    DEFAULT_DT,
    MIN_DT,
    TIME_CEILING,
    SimulationResult,
    TrajectoryPoint,
    run_simulation,
)
from derby_engine.core.sensitivity import (
    friction_sweep,
    is_strictly_increasing,
    step_size_convergence,
)
from derby_engine.core.summary import describe_build
from derby_engine.core.track import (
    DEFAULT_TRACK,
    TrackConfig,
    slope_angle,
    track_height,
)
from derby_engine.core.vehicle import DEFAULT_VEHICLE, VehicleConfig, make_vehicle

__all__ = [
    "CONFIGURED_FRICTION",
    "CalibrationResult",
    "ConfiguredFriction",
    "DEFAULT_CONSTANTS",
    "DEFAULT_DT",
    "DEFAULT_TRACK",
    "DEFAULT_VEHICLE",
    "EnergyBudget",
    "FrictionOverride",
    "FrictionSource",
    "LeaderboardEntry",
    "LossWork",
    "MIN_DT",
    "PhysicsConstants",
    "SimulationInputError",
    "SimulationResult",
    "TIME_CEILING",
    "TrackConfig",
    "TrackForces",
    "TrajectoryPoint",
    "VehicleConfig",
    "award_badges",
    "calibrate_friction",
    "compare_results",
    "compute_energy_budget",
    "compute_forces",
    "conservation_status",
    "describe_build",
    "downsample_trajectory",
    "effective_friction",
    "friction_sweep",
    "instability_coefficient",
    "is_legal",
    "is_strictly_increasing",
    "make_vehicle",
    "rank_entries",
    "rank_results",
    "run_simulation",
    "slope_angle",
    "stability_factor",
    "step_size_convergence",
    "track_height",
]
