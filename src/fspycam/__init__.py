# fspycam - perspective cameras from fSpy calibrations

__version__ = "0.1.0"

# Errors
from fspycam.errors import (
    FSpyCameraError,
    ConfigurationError,
    FetchError,
    MalformedDataError,
)

# Core types
from fspycam.types import (
    CalibrationRecord,
    ViewportSize,
    ProjectionSettings,
    InlineSource,
    LocationSource,
    as_calibration_source,
)

# Loading
from fspycam.loader import (
    parse_calibration,
    read_calibration,
    fetch_calibration,
    resolve_calibration,
)

# Configuration
from fspycam.config import (
    load_projection_settings,
    save_projection_settings,
    settings_from_mapping,
)

# Camera
from fspycam.camera import PerspectiveCamera
from fspycam.viewport import Viewport, WidgetViewport, ResizeSubscription
from fspycam.builder import (
    FSpyCamera,
    CameraStatus,
    build_camera,
    compute_pose,
    compute_zoom,
    resolve_fov,
)

__all__ = [
    # Errors
    "FSpyCameraError",
    "ConfigurationError",
    "FetchError",
    "MalformedDataError",
    # Core types
    "CalibrationRecord",
    "ViewportSize",
    "ProjectionSettings",
    "InlineSource",
    "LocationSource",
    "as_calibration_source",
    # Loading
    "parse_calibration",
    "read_calibration",
    "fetch_calibration",
    "resolve_calibration",
    # Configuration
    "load_projection_settings",
    "save_projection_settings",
    "settings_from_mapping",
    # Camera
    "PerspectiveCamera",
    "Viewport",
    "WidgetViewport",
    "ResizeSubscription",
    "FSpyCamera",
    "CameraStatus",
    "build_camera",
    "compute_pose",
    "compute_zoom",
    "resolve_fov",
]
