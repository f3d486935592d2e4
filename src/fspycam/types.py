"""
Core data structures for fspycam.

All types are frozen dataclasses for immutability.
Logic is in separate pure functions - these are data containers only.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Literal, Mapping, Union

import numpy as np

from .errors import ConfigurationError


# ============================================================================
# Calibration Data
# ============================================================================


@dataclass(frozen=True)  # No slots - need properties
class CalibrationRecord:
    """
    Camera calibration exported by fSpy.

    Only the fields needed to build a camera are kept. Angles are in
    radians, as fSpy writes them.
    """

    image_width: int
    image_height: int
    transform_rows: np.ndarray  # (4, 4) camera-to-world, row-major
    horizontal_fov: float | None = None  # radians
    vertical_fov: float | None = None  # radians
    relative_focal_length: float | None = None
    principal_point: tuple[float, float] | None = None  # relative image coords

    @property
    def image_aspect(self) -> float:
        """Aspect of the calibrated image (width / height)."""
        return self.image_width / self.image_height

    @property
    def translation(self) -> np.ndarray:
        """Camera position: rows 0..2 of the last column."""
        return self.transform_rows[0:3, 3].copy()

    @property
    def rotation(self) -> np.ndarray:
        """Upper-left 3x3 block of the transform."""
        return self.transform_rows[0:3, 0:3].copy()


# ============================================================================
# Viewport
# ============================================================================


@dataclass(frozen=True, slots=True)
class ViewportSize:
    """
    Size of the render viewport in pixels.
    """

    width: int
    height: int

    @property
    def aspect(self) -> float:
        return self.width / self.height

    @property
    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0


# ============================================================================
# Projection Configuration
# ============================================================================


DEFAULT_FOV_DEGREES = 62.881853609561645158
DEFAULT_NEAR = 0.01
DEFAULT_FAR = 10000.0


@dataclass(frozen=True, slots=True)
class ProjectionSettings:
    """
    Options for the perspective camera.

    fov_source="fixed" uses fov_degrees for every calibration.
    fov_source="calibration" uses the vertical field of view stored in the
    calibration record.
    """

    fov_degrees: float = DEFAULT_FOV_DEGREES  # vertical
    near: float = DEFAULT_NEAR
    far: float = DEFAULT_FAR
    fov_source: Literal["fixed", "calibration"] = "fixed"


# ============================================================================
# Calibration Sources
# ============================================================================


@dataclass(frozen=True, slots=True)
class InlineSource:
    """
    Calibration data already in memory.

    data is either a parsed CalibrationRecord or the decoded fSpy JSON.
    """

    data: CalibrationRecord | Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class LocationSource:
    """
    Calibration stored at a path or URL that must be fetched.
    """

    location: str


CalibrationSource = Union[InlineSource, LocationSource]


# ============================================================================
# Pure functions
# ============================================================================


def as_calibration_source(obj: Any) -> CalibrationSource:
    """
    Tag host input as an InlineSource or LocationSource.

    Strings and path-like objects are locations; mappings and records are
    inline data. Anything else raises ConfigurationError.
    """
    if isinstance(obj, (InlineSource, LocationSource)):
        return obj
    if isinstance(obj, str):
        return LocationSource(location=obj)
    if isinstance(obj, os.PathLike):
        return LocationSource(location=os.fspath(obj))
    if isinstance(obj, (CalibrationRecord, Mapping)):
        return InlineSource(data=obj)
    raise ConfigurationError(
        "Calibration input must be a path/URL to an fSpy JSON file or the "
        f"parsed JSON data, got {type(obj).__name__}"
    )


def flatten_transform_rows(rows: np.ndarray) -> list[float]:
    """
    Flatten 4x4 rows into one 16-element sequence, row-major.
    """
    return [float(value) for row in rows for value in row]
