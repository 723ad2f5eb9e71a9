"""Error taxonomy for the derby simulation engine.

Only invalid input is an exception.  Calibration infeasibility and runs
that hit the simulated-time ceiling are ordinary result values.
"""

from __future__ import annotations

import math


class SimulationInputError(ValueError):
    """Raised when a configuration or call argument cannot be simulated."""


def require_finite(name: str, value: float) -> float:
    """Return *value* as a float, raising if it is NaN or infinite.

    Raises:
        SimulationInputError: If *value* is not a finite real number.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SimulationInputError(
            f"{name} must be numeric, got {type(value).__name__}."
        )
    if not math.isfinite(value):
        raise SimulationInputError(f"{name} must be finite, got {value}.")
    return float(value)
