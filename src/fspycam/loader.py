"""
Calibration loading.

Pure functions that turn fSpy JSON (already decoded, on disk, or behind a
URL) into a CalibrationRecord.

fSpy JSON fields read here:
    imageWidth, imageHeight        image size in pixels
    cameraTransform.rows           4x4 camera-to-world matrix, row-major
    horizontalFieldOfView          radians (optional)
    verticalFieldOfView            radians (optional)
    relativeFocalLength            (optional)
    principalPoint.x / .y          (optional)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping
from urllib.parse import unquote, urlparse

import numpy as np
import requests

from .errors import FetchError, MalformedDataError
from .types import (
    CalibrationRecord,
    CalibrationSource,
    InlineSource,
    LocationSource,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


# ============================================================================
# Parsing
# ============================================================================


def _require_dimension(data: Mapping[str, Any], key: str) -> int:
    if key not in data:
        raise MalformedDataError(f"Calibration data is missing '{key}'")
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedDataError(f"'{key}' must be a number, got {value!r}")
    if not np.isfinite(value) or value != int(value):
        raise MalformedDataError(f"'{key}' must be a whole number of pixels, got {value!r}")
    if int(value) <= 0:
        raise MalformedDataError(f"'{key}' must be positive, got {value!r}")
    return int(value)


def _optional_float(data: Mapping[str, Any], key: str) -> float | None:
    value = data.get(key)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise MalformedDataError(f"'{key}' must be a number, got {value!r}") from None


def _parse_transform_rows(data: Mapping[str, Any]) -> np.ndarray:
    transform = data.get("cameraTransform")
    if not isinstance(transform, Mapping) or "rows" not in transform:
        raise MalformedDataError("Calibration data is missing 'cameraTransform.rows'")

    try:
        rows = np.array(transform["rows"], dtype=np.float64)
    except (TypeError, ValueError):
        raise MalformedDataError("'cameraTransform.rows' must contain only numbers") from None

    if rows.shape != (4, 4):
        raise MalformedDataError(
            f"'cameraTransform.rows' must be 4 rows of 4 numbers, got shape {rows.shape}"
        )
    if not np.all(np.isfinite(rows)):
        raise MalformedDataError("'cameraTransform.rows' contains non-finite values")

    rows.setflags(write=False)
    return rows


def parse_calibration(data: Mapping[str, Any]) -> CalibrationRecord:
    """
    Build a CalibrationRecord from decoded fSpy JSON.

    Args:
        data: Decoded JSON object

    Returns:
        CalibrationRecord

    Raises:
        MalformedDataError: a required field is missing or invalid
    """
    if not isinstance(data, Mapping):
        raise MalformedDataError(
            f"Calibration data must be a JSON object, got {type(data).__name__}"
        )

    principal_point = None
    pp = data.get("principalPoint")
    if isinstance(pp, Mapping) and "x" in pp and "y" in pp:
        principal_point = (_optional_float(pp, "x"), _optional_float(pp, "y"))

    return CalibrationRecord(
        image_width=_require_dimension(data, "imageWidth"),
        image_height=_require_dimension(data, "imageHeight"),
        transform_rows=_parse_transform_rows(data),
        horizontal_fov=_optional_float(data, "horizontalFieldOfView"),
        vertical_fov=_optional_float(data, "verticalFieldOfView"),
        relative_focal_length=_optional_float(data, "relativeFocalLength"),
        principal_point=principal_point,
    )


# ============================================================================
# Reading / Fetching
# ============================================================================


def read_calibration(path: Path | str) -> CalibrationRecord:
    """
    Load an fSpy JSON file from disk.

    Raises:
        FetchError: the file cannot be read
        MalformedDataError: the file is not valid calibration JSON
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise FetchError(f"Cannot read calibration file {path}: {e}") from e

    # UnicodeDecodeError and JSONDecodeError are both ValueErrors
    try:
        data = json.loads(raw.decode("utf-8"))
    except ValueError as e:
        raise MalformedDataError(f"{path} is not valid JSON: {e}") from e

    logger.debug("Read calibration from %s", path)
    return parse_calibration(data)


def _is_http(location: str) -> bool:
    return urlparse(location).scheme in ("http", "https")


def fetch_calibration(location: str, timeout: float = DEFAULT_TIMEOUT) -> CalibrationRecord:
    """
    Retrieve calibration JSON from a URL or a local path.

    http(s) URLs are fetched with requests; file:// URLs and plain paths
    are read from disk. This blocks - run it in a CalibrationFetchWorker
    from GUI code.

    Raises:
        FetchError: the request or read failed
        MalformedDataError: the response is not valid calibration JSON
    """
    if not _is_http(location):
        parsed = urlparse(location)
        if parsed.scheme == "file":
            return read_calibration(unquote(parsed.path))
        return read_calibration(location)

    logger.info("Fetching calibration from %s", location)
    try:
        response = requests.get(location, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(f"Failed to fetch calibration from {location}: {e}") from e

    try:
        data = response.json()
    except ValueError as e:
        raise MalformedDataError(f"Response from {location} is not valid JSON") from e

    return parse_calibration(data)


def resolve_calibration(
    source: CalibrationSource,
    timeout: float = DEFAULT_TIMEOUT,
) -> CalibrationRecord:
    """
    Resolve any calibration source to a record, synchronously.
    """
    if isinstance(source, LocationSource):
        return fetch_calibration(source.location, timeout=timeout)
    if isinstance(source, InlineSource):
        if isinstance(source.data, CalibrationRecord):
            return source.data
        return parse_calibration(source.data)
    raise TypeError(f"Unsupported calibration source: {source!r}")
