from __future__ import annotations

from OpenGL.GL import (
    glEnable,
    glDisable,
    glLightfv,
    glLightf,
    glLightModelfv,
    GL_LIGHT0,
    GL_POSITION,
    GL_DIFFUSE,
    GL_SPECULAR,
    GL_AMBIENT,
    GL_CONSTANT_ATTENUATION,
    GL_LINEAR_ATTENUATION,
    GL_QUADRATIC_ATTENUATION,
    GL_LIGHT_MODEL_AMBIENT,
)

from core.object3d import Object3D


class Light(Object3D):
    def __init__(self, color=(1.0, 1.0, 1.0), intensity: float = 1.0, position=None, name: str = ""):
        super().__init__(position=position, name=name)
        self.color = tuple(float(c) for c in color)
        self.intensity = float(intensity)

    @property
    def scaled_color(self) -> tuple[float, float, float, float]:
        r, g, b = (c * self.intensity for c in self.color)
        return (r, g, b, 1.0)


class AmbientLight(Light):
    """Uniform light with no position; feeds the global ambient term."""

    def apply(self) -> None:  # pragma: no cover - visual
        glLightModelfv(GL_LIGHT_MODEL_AMBIENT, self.scaled_color)


class PointLight(Light):
    """Omni light. ``decay`` 0 with ``distance`` 0 means no falloff."""

    def __init__(self, color=(1.0, 1.0, 1.0), intensity: float = 1.0, distance: float = 0.0, decay: float = 0.0, position=None, name: str = ""):
        super().__init__(color=color, intensity=intensity, position=position, name=name)
        self.distance = float(distance)
        self.decay = float(decay)

    def apply(self, index: int = 0) -> None:  # pragma: no cover - visual
        # Expects the view matrix on the modelview stack so the position is in world space
        light = GL_LIGHT0 + index
        p = self.world_position()
        glEnable(light)
        glLightfv(light, GL_POSITION, (p.x, p.y, p.z, 1.0))
        glLightfv(light, GL_DIFFUSE, self.scaled_color)
        glLightfv(light, GL_SPECULAR, self.scaled_color)
        glLightfv(light, GL_AMBIENT, (0.0, 0.0, 0.0, 1.0))
        glLightf(light, GL_CONSTANT_ATTENUATION, 1.0)
        glLightf(light, GL_LINEAR_ATTENUATION, 0.0)
        quadratic = self.decay / (self.distance * self.distance) if self.distance > 0 else 0.0
        glLightf(light, GL_QUADRATIC_ATTENUATION, quadratic)

    @staticmethod
    def disable(index: int = 0) -> None:  # pragma: no cover - visual
        glDisable(GL_LIGHT0 + index)
