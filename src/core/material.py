"""Fixed-function materials.

``MeshStandardMaterial`` takes part in lighting; ``MeshBasicMaterial`` is
drawn at its flat color (the sun). Either may carry a texture map; while the
map is unavailable the surface falls back to the plain color.
"""

from __future__ import annotations

from typing import Optional, Tuple

from OpenGL.GL import (
    glEnable,
    glDisable,
    glColor4f,
    glMaterialfv,
    glTexEnvi,
    GL_LIGHTING,
    GL_TEXTURE_2D,
    GL_FRONT_AND_BACK,
    GL_AMBIENT_AND_DIFFUSE,
    GL_SPECULAR,
    GL_EMISSION,
    GL_TEXTURE_ENV,
    GL_TEXTURE_ENV_MODE,
    GL_MODULATE,
)

Color = Tuple[float, float, float]


class Material:
    lit = False

    def __init__(self, color: Color = (1.0, 1.0, 1.0), map=None) -> None:
        self.color = tuple(float(c) for c in color)
        self.map = map

    def _bind_map(self) -> bool:  # pragma: no cover - visual
        if self.map is None or not self.map.bind():
            glDisable(GL_TEXTURE_2D)
            return False
        glEnable(GL_TEXTURE_2D)
        glTexEnvi(GL_TEXTURE_ENV, GL_TEXTURE_ENV_MODE, GL_MODULATE)
        return True

    def apply(self) -> None:  # pragma: no cover - visual
        raise NotImplementedError

    def release(self) -> None:  # pragma: no cover - visual
        glDisable(GL_TEXTURE_2D)


class MeshBasicMaterial(Material):
    def apply(self) -> None:  # pragma: no cover - visual
        glDisable(GL_LIGHTING)
        self._bind_map()
        glColor4f(*self.color, 1.0)


class MeshStandardMaterial(Material):
    lit = True

    def __init__(self, color: Color = (1.0, 1.0, 1.0), map=None, emissive: Optional[Color] = None) -> None:
        super().__init__(color=color, map=map)
        self.emissive = tuple(emissive) if emissive else (0.0, 0.0, 0.0)

    def apply(self) -> None:  # pragma: no cover - visual
        glEnable(GL_LIGHTING)
        glMaterialfv(GL_FRONT_AND_BACK, GL_AMBIENT_AND_DIFFUSE, (*self.color, 1.0))
        glMaterialfv(GL_FRONT_AND_BACK, GL_SPECULAR, (0.0, 0.0, 0.0, 1.0))
        glMaterialfv(GL_FRONT_AND_BACK, GL_EMISSION, (*self.emissive, 1.0))
        self._bind_map()

    def release(self) -> None:  # pragma: no cover - visual
        super().release()
        glDisable(GL_LIGHTING)
