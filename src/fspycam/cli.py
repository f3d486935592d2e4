#!/usr/bin/env python3
"""
fspycam CLI - inspect the camera built from an fSpy calibration.

Usage:
    fspycam inspect CALIBRATION [--viewport WxH] [--config PATH]
    fspycam resize CALIBRATION WxH [WxH ...] [--viewport WxH] [--config PATH]
    fspycam --help

CALIBRATION is a path or http(s) URL to an fSpy JSON export.
"""

import logging
import sys
from pathlib import Path

import numpy as np

from fspycam.builder import FSpyCamera
from fspycam.config import load_projection_settings
from fspycam.errors import FSpyCameraError
from fspycam.viewport import Viewport

DEFAULT_VIEWPORT = (1280, 720)


def _parse_size(text: str) -> tuple[int, int]:
    try:
        width, height = text.lower().split("x")
        return int(width), int(height)
    except ValueError:
        raise ValueError(f"Expected WIDTHxHEIGHT, got {text!r}") from None


def _pop_option(args: list[str], name: str) -> str | None:
    if name not in args:
        return None
    index = args.index(name)
    if index + 1 >= len(args):
        raise ValueError(f"{name} needs a value")
    value = args[index + 1]
    del args[index:index + 2]
    return value


def _build(args: list[str]) -> tuple[FSpyCamera, list[str]]:
    viewport_text = _pop_option(args, "--viewport")
    config_path = _pop_option(args, "--config")
    if not args:
        raise ValueError("Missing CALIBRATION argument")

    width, height = _parse_size(viewport_text) if viewport_text else DEFAULT_VIEWPORT
    settings = load_projection_settings(Path(config_path)) if config_path else None

    rig = FSpyCamera(
        args[0],
        options=settings,
        viewport=Viewport(width, height),
        load_blocking=True,
    )
    if rig.camera is None:
        raise rig.last_error or FSpyCameraError("Camera was not created")
    return rig, args[1:]


def inspect(args: list[str]) -> int:
    rig, _ = _build(args)
    camera = rig.camera
    record = rig.record

    with np.printoptions(precision=6, suppress=True):
        print(f"Image:        {record.image_width}x{record.image_height} "
              f"(aspect {record.image_aspect:.4f})")
        print(f"Position:     {camera.position}")
        print(f"Rotation:\n{camera.rotation}")
        print(f"FOV:          {camera.fov:.6f} deg")
        print(f"Aspect:       {camera.aspect:.6f}")
        print(f"Near/Far:     {camera.near} / {camera.far}")
        print(f"Zoom:         {camera.zoom:.6f}")
        print(f"Projection:\n{camera.projection_matrix}")
    rig.close()
    return 0


def resize(args: list[str]) -> int:
    rig, sizes = _build(args)
    print(f"Base aspect: {rig.base_aspect:.6f}")
    for text in sizes:
        width, height = _parse_size(text)
        rig.viewport.resize(width, height)
        print(f"  {width}x{height}: aspect={rig.camera.aspect:.6f} zoom={rig.camera.zoom:.6f}")
    rig.close()
    return 0


def main():
    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help"):
        print(__doc__)
        return 0

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    command = sys.argv[1]
    args = sys.argv[2:]

    commands = {"inspect": inspect, "resize": resize}
    if command not in commands:
        print(f"Unknown command: {command}")
        print("Run 'fspycam --help' for usage")
        return 1

    try:
        return commands[command](args)
    except (FSpyCameraError, ValueError) as e:
        print(f"ERROR: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
