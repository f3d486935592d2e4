"""
Error types raised while loading a calibration and building the camera.
"""

from __future__ import annotations


class FSpyCameraError(Exception):
    """Base class for all fspycam errors."""


class ConfigurationError(FSpyCameraError, TypeError):
    """Calibration input is neither parsed data nor a fetchable location."""


class FetchError(FSpyCameraError, OSError):
    """Retrieving the calibration file failed (disk or network)."""


class MalformedDataError(FSpyCameraError, ValueError):
    """Calibration data is missing a required field or has a bad value."""
