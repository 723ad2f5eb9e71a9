"""Gravity-racer physics engine: trajectory, energy budget and friction calibration."""

__version__ = "0.1.0"
