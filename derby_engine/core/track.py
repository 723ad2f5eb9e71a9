"""Track model and geometry for the derby simulation engine.

The profile is a parabolic ramp followed by a flat run-out.  Positions are
arc lengths measured from the start gate, so the derivative of height with
respect to position is the sine of the slope angle, not its tangent.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from derby_engine.core.errors import SimulationInputError, require_finite


@dataclass(frozen=True)
class TrackConfig:
    """Immutable ramp-then-flat track description.

    Attributes:
        name: Preset or display name.
        length_m: Total track length in metres (> 0).
        start_height_m: Height of the start gate above the flat (> 0).
        ramp_angle_deg: Nominal ramp angle.  Descriptive only; the profile
            is fully defined by start height and ramp length.
        flat_length_m: Length of the flat section (0 <= flat < length).
    """

    name: str
    length_m: float
    start_height_m: float
    ramp_angle_deg: float
    flat_length_m: float

    def __post_init__(self) -> None:
        """Validate track parameters."""
        if not self.name:
            raise SimulationInputError("Track name must not be empty.")
        length = require_finite("length_m", self.length_m)
        height = require_finite("start_height_m", self.start_height_m)
        angle = require_finite("ramp_angle_deg", self.ramp_angle_deg)
        flat = require_finite("flat_length_m", self.flat_length_m)
        if length <= 0.0:
            raise SimulationInputError("length_m must be > 0.")
        if height <= 0.0:
            raise SimulationInputError("start_height_m must be > 0.")
        if not 0.0 < angle < 90.0:
            raise SimulationInputError("ramp_angle_deg must be between 0 and 90.")
        if not 0.0 <= flat < length:
            raise SimulationInputError("flat_length_m must be in [0, length_m).")

    @property
    def ramp_length_m(self) -> float:
        """Arc length of the descending ramp segment."""
        return self.length_m - self.flat_length_m


DEFAULT_TRACK = TrackConfig(
    name="Standard 32ft",
    length_m=9.75,
    start_height_m=1.22,
    ramp_angle_deg=30.0,
    flat_length_m=5.0,
)


def track_height(x: float, track: TrackConfig) -> float:
    """Return the track height at arc-length position *x*.

    ``H * (1 - x/L)^2`` on the ramp, zero on the flat.  Positions behind
    the start gate (a rear-biased centre of mass at the start) are clamped
    to the start height.
    """
    ramp_length = track.ramp_length_m
    if x < 0.0:
        return track.start_height_m
    if x >= ramp_length:
        return 0.0
    p = x / ramp_length
    return track.start_height_m * (1.0 - p) * (1.0 - p)


def slope_angle(x: float, track: TrackConfig) -> float:
    """Return the unsigned slope angle in radians at position *x*.

    The analytic derivative ``-2H(1 - x/L)/L`` is the sine of the angle.
    Its magnitude is clamped to [0, 1] before ``asin``.

    The sign is discarded.  That is only correct while the profile is
    monotonically non-increasing in height; a profile with uphill sections
    would need a signed angle here.
    """
    ramp_length = track.ramp_length_m
    if x >= ramp_length:
        return 0.0
    p = x / ramp_length
    dydx = -2.0 * track.start_height_m * (1.0 - p) / ramp_length
    return math.asin(max(-1.0, min(1.0, abs(dydx))))
