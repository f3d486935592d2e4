"""
Pytest configuration and shared fixtures.
"""

import json
import os
import tempfile
from pathlib import Path

import numpy as np
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that's cleaned up after test."""
    with tempfile.TemporaryDirectory() as td:
        yield Path(td)


@pytest.fixture(scope="session")
def qapp():
    """QApplication for tests that need an event loop or widgets."""
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def sample_transform_rows():
    """Camera at (5, 2, -3), axis-aligned."""
    return [
        [1.0, 0.0, 0.0, 5.0],
        [0.0, 1.0, 0.0, 2.0],
        [0.0, 0.0, 1.0, -3.0],
        [0.0, 0.0, 0.0, 1.0],
    ]


@pytest.fixture
def sample_fspy_json(sample_transform_rows):
    """Decoded fSpy export."""
    return {
        "principalPoint": {"x": 0.0, "y": 0.0},
        "viewTransform": {"rows": np.linalg.inv(sample_transform_rows).tolist()},
        "cameraTransform": {"rows": sample_transform_rows},
        "horizontalFieldOfView": 1.5707963267948966,  # 90 deg
        "verticalFieldOfView": 1.0974744241404365,
        "vanishingPoints": [{"x": 0.5, "y": 0.1}, {"x": -0.7, "y": 0.1}, {"x": 0.0, "y": -4.0}],
        "vanishingPointAxes": ["xNegative", "zNegative", "yPositive"],
        "relativeFocalLength": 1.0,
        "imageWidth": 1920,
        "imageHeight": 1080,
    }


@pytest.fixture
def sample_fspy_file(temp_dir, sample_fspy_json):
    """fSpy export written to disk."""
    path = temp_dir / "camera.json"
    path.write_text(json.dumps(sample_fspy_json), encoding="utf-8")
    return path


@pytest.fixture
def sample_record(sample_fspy_json):
    """Parsed CalibrationRecord."""
    from fspycam.loader import parse_calibration
    return parse_calibration(sample_fspy_json)


@pytest.fixture
def hd_viewport():
    """16:9 viewport."""
    from fspycam.viewport import Viewport
    return Viewport(1600, 900)
