"""
Tests for fspycam.config (TOML projection settings).
"""

import pytest

from fspycam.config import (
    load_projection_settings,
    save_projection_settings,
    settings_from_mapping,
)
from fspycam.errors import ConfigurationError
from fspycam.types import ProjectionSettings


class TestProjectionSettingsToml:
    def test_save_and_load_roundtrip(self, temp_dir):
        original = ProjectionSettings(
            fov_degrees=35.0,
            near=0.1,
            far=250.0,
            fov_source="calibration",
        )
        path = temp_dir / "config" / "camera.toml"
        save_projection_settings(original, path)

        assert path.exists()
        assert load_projection_settings(path) == original

    def test_missing_file_gives_defaults(self, temp_dir):
        assert load_projection_settings(temp_dir / "nope.toml") == ProjectionSettings()

    def test_partial_table(self, temp_dir):
        path = temp_dir / "camera.toml"
        path.write_text("[projection]\nfar = 50.0\n")

        settings = load_projection_settings(path)

        assert settings.far == 50.0
        assert settings.fov_degrees == ProjectionSettings().fov_degrees

    def test_missing_table_gives_defaults(self, temp_dir):
        path = temp_dir / "camera.toml"
        path.write_text("[other]\nvalue = 1\n")
        assert load_projection_settings(path) == ProjectionSettings()


class TestSettingsFromMapping:
    def test_none(self):
        assert settings_from_mapping(None) == ProjectionSettings()

    def test_empty(self):
        assert settings_from_mapping({}) == ProjectionSettings()

    def test_unknown_keys_ignored(self):
        settings = settings_from_mapping({"fov_degrees": 40, "shadows": True})
        assert settings.fov_degrees == 40.0

    @pytest.mark.parametrize(
        "data",
        [
            {"fov_degrees": 0},
            {"fov_degrees": 180},
            {"near": 0},
            {"near": 100.0, "far": 10.0},
            {"fov_source": "lens"},
            {"far": "far away"},
        ],
    )
    def test_invalid_values(self, data):
        with pytest.raises(ConfigurationError):
            settings_from_mapping(data)
