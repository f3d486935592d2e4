"""
Perspective camera model.

Follows the three.js PerspectiveCamera conventions that fSpy exports
target: vertical field of view in degrees, OpenGL-style clip space, camera
looking down its local -Z axis.
"""

from __future__ import annotations

import math

import numpy as np


class PerspectiveCamera:
    """
    Minimal perspective camera: pose plus projection parameters.

    Changing fov/aspect/near/far/zoom has no effect on projection_matrix
    until update_projection_matrix() is called.
    """

    def __init__(
        self,
        fov: float = 50.0,
        aspect: float = 1.0,
        near: float = 0.1,
        far: float = 2000.0,
    ):
        self.fov = float(fov)  # vertical, degrees
        self.aspect = float(aspect)
        self.near = float(near)
        self.far = float(far)
        self.zoom = 1.0

        self.position = np.zeros(3, dtype=np.float64)
        self.rotation = np.eye(3, dtype=np.float64)
        self.projection_matrix = np.eye(4, dtype=np.float64)

        self.update_projection_matrix()

    def __repr__(self) -> str:
        return (
            f"PerspectiveCamera(fov={self.fov:.4f}, aspect={self.aspect:.4f}, "
            f"near={self.near}, far={self.far}, zoom={self.zoom:.4f}, "
            f"position={self.position.tolist()})"
        )

    # ------------------------------------------------------------------
    # Pose
    # ------------------------------------------------------------------

    def set_position(self, x: float, y: float, z: float) -> None:
        self.position = np.array([x, y, z], dtype=np.float64)

    def set_rotation_from_matrix(self, matrix: np.ndarray) -> None:
        """
        Take orientation from the upper 3x3 of a 4x4 transform.

        Column scale is divided out, so the matrix may carry scale but
        must not be degenerate.
        """
        m = np.asarray(matrix, dtype=np.float64)
        basis = m[0:3, 0:3]
        scale = np.linalg.norm(basis, axis=0)
        if np.any(scale == 0):
            raise ValueError("Cannot extract rotation from a degenerate matrix")
        self.rotation = basis / scale

    @property
    def matrix_world(self) -> np.ndarray:
        """4x4 camera-to-world transform."""
        m = np.eye(4, dtype=np.float64)
        m[0:3, 0:3] = self.rotation
        m[0:3, 3] = self.position
        return m

    @property
    def view_matrix(self) -> np.ndarray:
        """4x4 world-to-camera transform."""
        m = np.eye(4, dtype=np.float64)
        m[0:3, 0:3] = self.rotation.T
        m[0:3, 3] = -self.rotation.T @ self.position
        return m

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------

    def visible_extent(self) -> tuple[float, float]:
        """
        Half-width and half-height of the frustum at the near plane.
        """
        top = self.near * math.tan(math.radians(0.5 * self.fov)) / self.zoom
        return self.aspect * top, top

    def update_projection_matrix(self) -> np.ndarray:
        """
        Recompute projection_matrix from fov, aspect, near, far and zoom.
        """
        half_width, top = self.visible_extent()
        left, right = -half_width, half_width
        bottom = -top
        near, far = self.near, self.far

        p = np.zeros((4, 4), dtype=np.float64)
        p[0, 0] = 2 * near / (right - left)
        p[1, 1] = 2 * near / (top - bottom)
        p[0, 2] = (right + left) / (right - left)
        p[1, 2] = (top + bottom) / (top - bottom)
        p[2, 2] = -(far + near) / (far - near)
        p[2, 3] = -2 * far * near / (far - near)
        p[3, 2] = -1.0

        self.projection_matrix = p
        return p

    def project(self, points: np.ndarray) -> np.ndarray:
        """
        Project world points (n, 3) to normalized device coordinates (n, 3).
        """
        points = np.atleast_2d(np.asarray(points, dtype=np.float64))
        homogeneous = np.hstack([points, np.ones((len(points), 1))])
        clip = (self.projection_matrix @ self.view_matrix @ homogeneous.T).T
        return clip[:, 0:3] / clip[:, 3:4]
