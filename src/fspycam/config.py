"""
Configuration loading/saving.

Pure functions operating on ProjectionSettings.
Settings live in the [projection] table of a TOML file.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, Mapping

import rtoml

from .errors import ConfigurationError
from .types import ProjectionSettings

logger = logging.getLogger(__name__)

FOV_SOURCES = ("fixed", "calibration")


def settings_from_mapping(data: Mapping[str, Any] | None) -> ProjectionSettings:
    """
    Build ProjectionSettings from a plain mapping.

    Unknown keys are logged and ignored.

    Raises:
        ConfigurationError: a recognized option has an invalid value
    """
    if not data:
        return ProjectionSettings()

    known = {f.name for f in fields(ProjectionSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning("Ignoring unknown projection options: %s", ", ".join(unknown))

    defaults = ProjectionSettings()
    try:
        fov_degrees = float(data.get("fov_degrees", defaults.fov_degrees))
        near = float(data.get("near", defaults.near))
        far = float(data.get("far", defaults.far))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid projection option: {e}") from e
    fov_source = data.get("fov_source", defaults.fov_source)

    if not 0 < fov_degrees < 180:
        raise ConfigurationError(f"fov_degrees must be in (0, 180), got {fov_degrees}")
    if not 0 < near < far:
        raise ConfigurationError(f"Need 0 < near < far, got near={near}, far={far}")
    if fov_source not in FOV_SOURCES:
        raise ConfigurationError(
            f"fov_source must be one of {FOV_SOURCES}, got {fov_source!r}"
        )

    return ProjectionSettings(
        fov_degrees=fov_degrees,
        near=near,
        far=far,
        fov_source=fov_source,
    )


def load_projection_settings(path: Path) -> ProjectionSettings:
    """
    Load projection settings from a TOML file.

    Args:
        path: Path to the TOML file

    Returns:
        ProjectionSettings; defaults if the file does not exist
    """
    path = Path(path)
    if not path.exists():
        return ProjectionSettings()

    data = rtoml.load(path)
    return settings_from_mapping(data.get("projection", {}))


def save_projection_settings(settings: ProjectionSettings, path: Path) -> None:
    """
    Save projection settings to a TOML file.

    Args:
        settings: ProjectionSettings dataclass
        path: Path to save the TOML file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        rtoml.dump({"projection": asdict(settings)}, f)
