"""Configuration loaders for the derby simulation engine."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from derby_engine.core.track import TrackConfig
from derby_engine.core.vehicle import VehicleConfig, make_vehicle

logger = logging.getLogger(__name__)

DATA_DIR: Path = Path(__file__).resolve().parent / "data"
TRACKS_PATH: Path = DATA_DIR / "tracks.yaml"

_REQUIRED_FIELDS: tuple[str, ...] = (
    "name",
    "length_m",
    "start_height_m",
    "ramp_angle_deg",
    "flat_length_m",
)

_NUMERIC_FIELDS: tuple[str, ...] = _REQUIRED_FIELDS[1:]  # all except name


def _read_yaml(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")
    with open(path, encoding="utf-8") as fh:
        return yaml.safe_load(fh)


def load_track_presets(path: Path | None = None) -> list[TrackConfig]:
    """Load track presets from a YAML file.

    Each entry is validated and converted into a :class:`TrackConfig`.

    Args:
        path: Optional override for the presets file path.

    Returns:
        List of :class:`TrackConfig` objects in file order.

    Raises:
        FileNotFoundError: If the presets file does not exist.
        ValueError: If the file has no ``tracks`` list, or an entry is
            missing fields or has non-numeric or out-of-range values.
    """
    presets_path = path or TRACKS_PATH
    data = _read_yaml(presets_path)

    if not isinstance(data, dict) or not isinstance(data.get("tracks"), list):
        raise ValueError(f"{presets_path} must contain a 'tracks' list.")

    entries: list[dict] = data["tracks"]
    tracks: list[TrackConfig] = []

    for idx, entry in enumerate(entries):
        # --- Validate required fields ---
        for field in _REQUIRED_FIELDS:
            if field not in entry:
                raise ValueError(
                    f"Track entry {idx} ({entry.get('name', '<unknown>')}) "
                    f"is missing required field '{field}'"
                )

        # --- Validate numeric types ---
        for field in _NUMERIC_FIELDS:
            val = entry[field]
            if isinstance(val, bool) or not isinstance(val, (int, float)):
                raise ValueError(
                    f"Track entry {idx} ({entry['name']}): "
                    f"'{field}' must be numeric, got {type(val).__name__}"
                )

        # Range checks live in TrackConfig.__post_init__.
        try:
            track = TrackConfig(
                name=str(entry["name"]),
                length_m=float(entry["length_m"]),
                start_height_m=float(entry["start_height_m"]),
                ramp_angle_deg=float(entry["ramp_angle_deg"]),
                flat_length_m=float(entry["flat_length_m"]),
            )
        except ValueError as exc:
            raise ValueError(f"Track entry {idx} ({entry['name']}): {exc}") from exc
        tracks.append(track)

    logger.debug("Loaded %d track presets from %s", len(tracks), presets_path)
    return tracks


def get_track_preset(name: str, path: Path | None = None) -> TrackConfig:
    """Return the preset called *name*.

    Raises:
        KeyError: If no preset has that name.
    """
    for track in load_track_presets(path):
        if track.name == name:
            return track
    raise KeyError(f"Unknown track preset: {name!r}")


def load_vehicle_config(path: Path) -> VehicleConfig:
    """Load a vehicle build from a YAML mapping of field overrides.

    Fields absent from the file keep their documented defaults.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file is not a mapping or a field is invalid.
    """
    data = _read_yaml(path)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping of vehicle fields.")
    vehicle = make_vehicle(**data)
    logger.debug("Loaded vehicle %r from %s", vehicle.name, path)
    return vehicle
