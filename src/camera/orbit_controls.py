"""OrbitControls: drag to orbit, wheel to zoom, around a fixed target.

Input only accumulates pending deltas; ``update()`` (once per frame) applies
them to the camera. With damping enabled each update applies a fraction of
the pending rotation and decays the rest, so motion eases out after the
mouse stops.
"""

from __future__ import annotations

import math

import pygame
from pygame.math import Vector3

from config import ROTATE_SPEED, ZOOM_SPEED

EPS = 1e-6


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


class OrbitControls:
    def __init__(
        self,
        camera,
        element,
        *,
        target=None,
        enable_damping: bool = False,
        damping_factor: float = 0.05,
        enable_pan: bool = True,
        min_distance: float = 0.0,
        max_distance: float = math.inf,
        rotate_speed: float = ROTATE_SPEED,
        zoom_speed: float = ZOOM_SPEED,
    ):
        self.camera = camera
        # anything with a `size` (width, height); drag distances scale by its height
        self.element = element
        self.target = Vector3(target) if target is not None else Vector3(0, 0, 0)
        self.enable_damping = enable_damping
        self.damping_factor = float(damping_factor)
        self.enable_pan = enable_pan
        self.min_distance = float(min_distance)
        self.max_distance = float(max_distance)
        self.rotate_speed = float(rotate_speed)
        self.zoom_speed = float(zoom_speed)

        self._delta_theta = 0.0
        self._delta_phi = 0.0
        self._scale = 1.0
        self._pan_offset = Vector3(0, 0, 0)
        self._state = None  # "rotate" | "pan" while a button is held

        self.camera.look_at(self.target)

    # ------------------------------------------------------------------
    @property
    def _element_height(self) -> float:
        return float(max(1, self.element.size[1]))

    def rotate_left(self, angle: float) -> None:
        self._delta_theta -= angle

    def rotate_up(self, angle: float) -> None:
        self._delta_phi -= angle

    def dolly_in(self, scale: float) -> None:
        self._scale *= scale

    def dolly_out(self, scale: float) -> None:
        self._scale /= scale

    def _zoom_scale(self) -> float:
        return 0.95 ** self.zoom_speed

    def on_mouse_delta(self, dx: float, dy: float) -> None:
        """Feed a drag delta in window pixels."""
        h = self._element_height
        if self._state == "rotate":
            self.rotate_left(2.0 * math.pi * dx / h * self.rotate_speed)
            self.rotate_up(2.0 * math.pi * dy / h * self.rotate_speed)
        elif self._state == "pan":
            self.pan(dx, dy)

    def pan(self, dx: float, dy: float) -> None:
        offset = self.camera.position - self.target
        # half the visible height at the target's depth
        target_distance = offset.length() * math.tan(math.radians(self.camera.fov / 2.0))
        forward = self.camera.direction
        right = forward.cross(Vector3(self.camera.up))
        if right.length_squared() < EPS:
            return
        right = right.normalize()
        up = right.cross(forward)
        h = self._element_height
        self._pan_offset -= right * (2.0 * dx * target_distance / h)
        self._pan_offset += up * (2.0 * dy * target_distance / h)

    def handle_event(self, event) -> None:
        if event.type == pygame.MOUSEBUTTONDOWN:
            if event.button == 1:
                self._state = "rotate"
            elif event.button == 3 and self.enable_pan:
                self._state = "pan"
        elif event.type == pygame.MOUSEBUTTONUP:
            if event.button in (1, 3):
                self._state = None
        elif event.type == pygame.MOUSEMOTION:
            if self._state is not None:
                dx, dy = event.rel
                self.on_mouse_delta(dx, dy)
        elif event.type == pygame.MOUSEWHEEL:
            if event.y > 0:
                self.dolly_in(self._zoom_scale())
            elif event.y < 0:
                self.dolly_out(self._zoom_scale())

    # ------------------------------------------------------------------
    def update(self) -> bool:
        """Apply pending input to the camera. Returns True if it moved."""
        offset = self.camera.position - self.target
        radius = offset.length()
        if radius > EPS:
            theta = math.atan2(offset.x, offset.z)
            phi = math.acos(_clamp(offset.y / radius, -1.0, 1.0))
        else:
            theta, phi = 0.0, math.pi / 2.0

        if self.enable_damping:
            theta += self._delta_theta * self.damping_factor
            phi += self._delta_phi * self.damping_factor
        else:
            theta += self._delta_theta
            phi += self._delta_phi

        phi = _clamp(phi, EPS, math.pi - EPS)
        radius = _clamp(radius * self._scale, self.min_distance, self.max_distance)

        if self.enable_damping:
            self.target += self._pan_offset * self.damping_factor
        else:
            self.target += self._pan_offset

        sin_phi = math.sin(phi)
        new_offset = Vector3(
            radius * sin_phi * math.sin(theta),
            radius * math.cos(phi),
            radius * sin_phi * math.cos(theta),
        )
        old_position = Vector3(self.camera.position)
        self.camera.position = self.target + new_offset
        self.camera.look_at(self.target)

        if self.enable_damping:
            keep = 1.0 - self.damping_factor
            self._delta_theta *= keep
            self._delta_phi *= keep
            self._pan_offset *= keep
        else:
            self._delta_theta = 0.0
            self._delta_phi = 0.0
            self._pan_offset = Vector3(0, 0, 0)
        self._scale = 1.0

        return (self.camera.position - old_position).length_squared() > EPS


__all__ = ["OrbitControls"]
