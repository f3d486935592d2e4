"""
Camera construction and viewport adaptation.

build_camera() turns a CalibrationRecord into a posed PerspectiveCamera.
FSpyCamera owns one such camera for its lifetime: it resolves the
calibration (inline or via a fetch worker), builds the camera, then keeps
aspect and zoom in step with the viewport.

Zoom compensation: base_aspect is the viewport aspect when the camera was
built. When the viewport becomes wider than that, zoom = aspect / base_aspect
so the vertical framing that matched the calibration image is kept. When it
is narrower or equal, zoom stays 1 and only the aspect changes.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Any, Callable, Mapping

import numpy as np
from PySide6.QtCore import QObject, Signal

from .camera import PerspectiveCamera
from .config import settings_from_mapping
from .errors import FSpyCameraError, MalformedDataError
from .loader import resolve_calibration
from .types import (
    CalibrationRecord,
    CalibrationSource,
    LocationSource,
    ProjectionSettings,
    ViewportSize,
    as_calibration_source,
    flatten_transform_rows,
)
from .viewport import ResizeSubscription, Viewport
from .workers import CalibrationFetchWorker

logger = logging.getLogger(__name__)

CameraCallback = Callable[[PerspectiveCamera], None]


# ============================================================================
# Pure functions
# ============================================================================


def compute_pose(record: CalibrationRecord) -> np.ndarray:
    """
    Load the calibration transform into a 4x4 matrix.

    The rows are flattened row-major and set back in the same order, so the
    result equals transform_rows.
    """
    flat = flatten_transform_rows(record.transform_rows)
    return np.array(flat, dtype=np.float64).reshape(4, 4)


def compute_zoom(current_aspect: float, base_aspect: float) -> float:
    """
    Zoom that keeps the calibrated vertical framing.

    1.0 when the viewport is as wide or narrower than base_aspect,
    current_aspect / base_aspect otherwise.
    """
    if current_aspect <= base_aspect:
        return 1.0
    return current_aspect / base_aspect


def resolve_fov(record: CalibrationRecord, settings: ProjectionSettings) -> float:
    """
    Vertical field of view in degrees for this calibration.
    """
    if settings.fov_source == "calibration":
        if record.vertical_fov is None:
            raise MalformedDataError(
                "fov_source='calibration' but the calibration has no 'verticalFieldOfView'"
            )
        return math.degrees(record.vertical_fov)
    return settings.fov_degrees


def build_camera(
    record: CalibrationRecord,
    viewport_size: ViewportSize,
    settings: ProjectionSettings | None = None,
) -> PerspectiveCamera:
    """
    Create a posed camera for the calibration and viewport.

    Args:
        record: Calibration to match
        viewport_size: Current viewport size, defines the initial aspect
        settings: Projection options (defaults if None)

    Returns:
        PerspectiveCamera with projection matrix up to date
    """
    settings = settings or ProjectionSettings()
    if not viewport_size.is_valid:
        raise ValueError(
            f"Viewport must have positive size, got {viewport_size.width}x{viewport_size.height}"
        )

    pose = compute_pose(record)
    camera = PerspectiveCamera(
        fov=resolve_fov(record, settings),
        aspect=viewport_size.aspect,
        near=settings.near,
        far=settings.far,
    )
    camera.set_position(pose[0, 3], pose[1, 3], pose[2, 3])
    try:
        camera.set_rotation_from_matrix(pose)
    except ValueError as e:
        raise MalformedDataError(f"cameraTransform.rows has no usable rotation: {e}") from e
    camera.update_projection_matrix()
    return camera


def _coerce_settings(options: ProjectionSettings | Mapping[str, Any] | None) -> ProjectionSettings:
    if isinstance(options, ProjectionSettings):
        return options
    return settings_from_mapping(options)


# ============================================================================
# FSpyCamera
# ============================================================================


class CameraStatus(Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    CONSTRUCTED = "constructed"
    FAILED = "failed"
    CLOSED = "closed"


class FSpyCamera(QObject):
    """
    Perspective camera matching an fSpy calibration, kept correct on resize.

    Args:
        source: Path/URL to fSpy JSON, the decoded JSON, a CalibrationRecord,
            or an InlineSource/LocationSource
        surface: Render surface handle; stored for the host, not used here
        callback: Called once with the PerspectiveCamera after construction
        options: ProjectionSettings or a mapping of its fields
        viewport: Resize notification source (a default Viewport if None)
        load_blocking: Resolve a location synchronously instead of in a
            worker thread
    """

    camera_ready = Signal(object)  # PerspectiveCamera
    projection_changed = Signal(float, float)  # aspect, zoom
    error_occurred = Signal(str)

    def __init__(
        self,
        source: Any,
        surface: Any = None,
        callback: CameraCallback | None = None,
        options: ProjectionSettings | Mapping[str, Any] | None = None,
        viewport: Viewport | None = None,
        load_blocking: bool = False,
        parent: QObject | None = None,
    ):
        super().__init__(parent)

        self.surface = surface
        self.callback = callback
        self.viewport = viewport if viewport is not None else Viewport(parent=self)

        self.status = CameraStatus.UNINITIALIZED
        self.record: CalibrationRecord | None = None
        self.pose: np.ndarray | None = None
        self.camera: PerspectiveCamera | None = None
        self.base_aspect: float | None = None
        self.last_error: FSpyCameraError | None = None
        self.settings = ProjectionSettings()

        self._subscription: ResizeSubscription | None = None
        self._worker: CalibrationFetchWorker | None = None

        self._init(source, options, load_blocking)

    def _init(self, source: Any, options: Any, load_blocking: bool) -> None:
        try:
            self.settings = _coerce_settings(options)
            calibration_source: CalibrationSource = as_calibration_source(source)
        except FSpyCameraError as e:
            self._fail(e)
            return

        if isinstance(calibration_source, LocationSource) and not load_blocking:
            self._start_fetch(calibration_source.location)
            return

        try:
            record = resolve_calibration(calibration_source)
        except FSpyCameraError as e:
            self._fail(e)
            return
        self._on_calibration_loaded(record)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _start_fetch(self, location: str) -> None:
        self.status = CameraStatus.LOADING
        self._worker = CalibrationFetchWorker(location)
        self._worker.calibration_loaded.connect(self._on_calibration_loaded)
        self._worker.error.connect(self._on_fetch_error)
        self._worker.start()

    def _on_fetch_error(self, error: FSpyCameraError) -> None:
        if self.status is CameraStatus.CLOSED:
            return
        self._fail(error)

    def _on_calibration_loaded(self, record: CalibrationRecord) -> None:
        if self.status is CameraStatus.CLOSED:
            return
        try:
            self._construct(record)
        except FSpyCameraError as e:
            self._fail(e)
            return
        self._run_callback()
        self.camera_ready.emit(self.camera)

    def _fail(self, error: FSpyCameraError) -> None:
        self.status = CameraStatus.FAILED
        self.last_error = error
        self.camera = None
        logger.error("Cannot create camera: %s", error)
        self.error_occurred.emit(str(error))

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _construct(self, record: CalibrationRecord) -> None:
        size = self.viewport.size()
        if not size.is_valid:
            raise FSpyCameraError(f"Viewport has no area: {size.width}x{size.height}")
        camera = build_camera(record, size, self.settings)

        self.record = record
        self.pose = compute_pose(record)
        self.camera = camera
        self.base_aspect = camera.aspect
        self.status = CameraStatus.CONSTRUCTED

        logger.info(
            "Camera built: fov=%.4f aspect=%.4f (image aspect %.4f) position=%s",
            camera.fov,
            camera.aspect,
            record.image_aspect,
            camera.position.tolist(),
        )

        if self._subscription is None:
            self._subscription = self.viewport.subscribe(self._on_viewport_resized)

    def _run_callback(self) -> None:
        if callable(self.callback):
            self.callback(self.camera)

    # ------------------------------------------------------------------
    # Resize
    # ------------------------------------------------------------------

    def _on_viewport_resized(self, width: int, height: int) -> None:
        self.on_resize(width, height)

    def on_resize(self, width: int, height: int) -> None:
        """
        Recompute aspect and zoom for a new viewport size.
        """
        if self.camera is None or self.base_aspect is None:
            return
        if width <= 0 or height <= 0:
            logger.warning("Ignoring resize to %sx%s", width, height)
            return

        aspect = width / height
        self.camera.aspect = aspect
        self.camera.zoom = compute_zoom(aspect, self.base_aspect)
        self.camera.update_projection_matrix()

        logger.debug("Resize %dx%d: aspect=%.4f zoom=%.4f", width, height, aspect, self.camera.zoom)
        self.projection_changed.emit(aspect, self.camera.zoom)

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    @property
    def is_subscribed(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def close(self) -> None:
        """Stop following viewport resizes."""
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None
        if self._worker is not None and self._worker.isRunning():
            self._worker.wait()
        self.status = CameraStatus.CLOSED

    def __enter__(self) -> "FSpyCamera":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
