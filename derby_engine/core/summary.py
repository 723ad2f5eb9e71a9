"""Short human-readable build descriptions."""

from __future__ import annotations

from derby_engine.core.vehicle import VehicleConfig


def describe_build(vehicle: VehicleConfig) -> str:
    """Summarise a vehicle's tuning choices in one line.

    Example: ``"Rear-heavy, Graphite, Sanded, 1.5° Cant, 3-Wheel"``.
    """
    parts: list[str] = []

    if vehicle.weight_distribution < 0.3:
        parts.append("Rear-heavy")
    elif vehicle.weight_distribution > 0.7:
        parts.append("Front-heavy")
    else:
        parts.append("Balanced")

    if vehicle.graphite:
        parts.append("Graphite")
    if vehicle.axle_sanded:
        parts.append("Sanded")
    if not vehicle.graphite and not vehicle.axle_sanded:
        parts.append("Stock")

    if vehicle.wheel_cant_deg > 0.0:
        parts.append(f"{vehicle.wheel_cant_deg:g}° Cant")

    if vehicle.raised_wheel:
        parts.append("3-Wheel")

    if vehicle.wheelbase_in > 4.5:
        parts.append("Long WB")
    if vehicle.wheelbase_in < 4.2:
        parts.append("Short WB")

    return ", ".join(parts)
