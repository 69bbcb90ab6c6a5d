"""Sky rendering utilities.

Draws the cube-map environment as a unit cube locked to the camera's
orientation. Call with the projection already loaded; the modelview is
replaced by the view rotation for the duration of the draw.
"""

from __future__ import annotations

import numpy as np

# corners per face, wound to face inward
_CUBE_FACES = (
    ((1, -1, -1), (1, -1, 1), (1, 1, 1), (1, 1, -1)),  # +X
    ((-1, -1, 1), (-1, -1, -1), (-1, 1, -1), (-1, 1, 1)),  # -X
    ((-1, 1, -1), (1, 1, -1), (1, 1, 1), (-1, 1, 1)),  # +Y
    ((-1, -1, 1), (1, -1, 1), (1, -1, -1), (-1, -1, -1)),  # -Y
    ((1, -1, 1), (-1, -1, 1), (-1, 1, 1), (1, 1, 1)),  # +Z
    ((-1, -1, -1), (1, -1, -1), (1, 1, -1), (-1, 1, -1)),  # -Z
)


def rotation_only(view_matrix: np.ndarray) -> np.ndarray:
    """Strip the translation so the sky never moves relative to the eye."""
    m = np.array(view_matrix, dtype=np.float64, copy=True)
    m[:3, 3] = 0.0
    m[3, :3] = 0.0
    return m


class SkyRenderer:
    """Draws a :class:`~textures.texture_utils.CubeTexture` background."""

    def draw(self, cube_texture, view_matrix) -> None:  # pragma: no cover - visual
        from OpenGL.GL import (
            glPushMatrix,
            glPopMatrix,
            glLoadMatrixf,
            glBegin,
            glEnd,
            glVertex3f,
            glTexCoord3f,
            glEnable,
            glDisable,
            glDepthMask,
            glColor4f,
            GL_TEXTURE_CUBE_MAP,
            GL_QUADS,
            GL_DEPTH_TEST,
            GL_LIGHTING,
            GL_CULL_FACE,
            GL_FALSE,
            GL_TRUE,
        )

        if cube_texture is None or not cube_texture.bind():
            return

        glDisable(GL_DEPTH_TEST)
        glDisable(GL_LIGHTING)
        glDisable(GL_CULL_FACE)
        glDepthMask(GL_FALSE)
        glEnable(GL_TEXTURE_CUBE_MAP)
        glColor4f(1.0, 1.0, 1.0, 1.0)

        glPushMatrix()
        glLoadMatrixf(np.ascontiguousarray(rotation_only(view_matrix).T, dtype=np.float32))
        glBegin(GL_QUADS)
        for face in _CUBE_FACES:
            for x, y, z in face:
                glTexCoord3f(x, y, z)
                glVertex3f(x, y, z)
        glEnd()
        glPopMatrix()

        glDisable(GL_TEXTURE_CUBE_MAP)
        glDepthMask(GL_TRUE)
        glEnable(GL_CULL_FACE)
        glEnable(GL_DEPTH_TEST)
