import math
import numpy as np
from pygame.math import Vector3

from core.object3d import Object3D


def perspective_matrix(fov_deg, aspect, near, far):
    """OpenGL-style projection (row-major, column vectors)."""
    f = 1.0 / math.tan(math.radians(fov_deg) / 2.0)
    m = np.zeros((4, 4), dtype=np.float64)
    m[0, 0] = f / aspect
    m[1, 1] = f
    m[2, 2] = (far + near) / (near - far)
    m[2, 3] = (2.0 * far * near) / (near - far)
    m[3, 2] = -1.0
    return m


def look_at_matrix(eye, target, up=(0.0, 1.0, 0.0)):
    """World -> camera matrix for an eye looking at target."""
    eye = np.asarray(eye, dtype=np.float64)
    forward = np.asarray(target, dtype=np.float64) - eye
    length = np.linalg.norm(forward)
    if length < 1e-12:
        forward = np.array([0.0, 0.0, -1.0])
    else:
        forward = forward / length

    up = np.asarray(up, dtype=np.float64)
    right = np.cross(forward, up)
    if np.linalg.norm(right) < 1e-9:
        # looking straight along `up`; nudge the reference axis
        right = np.cross(forward, np.array([0.0, 0.0, -1.0]))
        if np.linalg.norm(right) < 1e-9:
            right = np.cross(forward, np.array([1.0, 0.0, 0.0]))
    right = right / np.linalg.norm(right)
    true_up = np.cross(right, forward)

    m = np.eye(4, dtype=np.float64)
    m[0, :3] = right
    m[1, :3] = true_up
    m[2, :3] = -forward
    m[:3, 3] = -m[:3, :3] @ eye
    return m


class PerspectiveCamera(Object3D):
    def __init__(self, fov=75, aspect=1.0, near=0.1, far=1000.0, position=None):
        super().__init__(position=position, name="Camera")
        self.fov = float(fov)
        self.aspect = float(aspect)
        self.near = float(near)
        self.far = float(far)
        self.up = Vector3(0, 1, 0)
        self.target = Vector3(0, 0, 0)
        self.projection_matrix = np.eye(4)
        self.update_projection_matrix()

    def update_projection_matrix(self):
        """Recompute the projection; call after changing fov/aspect/near/far."""
        self.projection_matrix = perspective_matrix(self.fov, self.aspect, self.near, self.far)

    def look_at(self, target):
        """Aim at a point given in the camera's parent space."""
        self.target = Vector3(target)

    @property
    def view_matrix(self):
        eye = self.world_position()
        offset = eye - self.position
        return look_at_matrix(tuple(eye), tuple(self.target + offset), tuple(self.up))

    @property
    def direction(self):
        """Unit vector the camera is facing, in world space."""
        d = self.target - self.position
        if d.length_squared() == 0:
            return Vector3(0, 0, -1)
        return d.normalize()
