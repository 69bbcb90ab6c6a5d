"""Scene renderer on the fixed-function pipeline.

Tracks the logical size and pixel ratio of the drawing surface and draws a
scene through a camera into either the window or an off-screen render
target. GL state is configured lazily on the first render so the renderer
can be created and resized before the context is current.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
from OpenGL.GL import (
    glEnable,
    glDisable,
    glClear,
    glClearColor,
    glDepthFunc,
    glCullFace,
    glViewport,
    glMatrixMode,
    glLoadMatrixf,
    glLightModeli,
    glShadeModel,
    glBindFramebuffer,
    glClampColor,
    GL_DEPTH_TEST,
    GL_LEQUAL,
    GL_CULL_FACE,
    GL_BACK,
    GL_NORMALIZE,
    GL_MULTISAMPLE,
    GL_COLOR_BUFFER_BIT,
    GL_DEPTH_BUFFER_BIT,
    GL_PROJECTION,
    GL_MODELVIEW,
    GL_LIGHT_MODEL_TWO_SIDE,
    GL_FALSE,
    GL_SMOOTH,
    GL_FRAMEBUFFER,
    GL_CLAMP_VERTEX_COLOR,
    GL_CLAMP_FRAGMENT_COLOR,
)

from core.lights import AmbientLight, PointLight
from core.mesh import Mesh
from render.sky_renderer import SkyRenderer


def _gl_matrix(m: np.ndarray) -> np.ndarray:
    # numpy is row-major, GL expects column-major
    return np.ascontiguousarray(np.asarray(m).T, dtype=np.float32)


class Renderer:
    def __init__(self, size: Tuple[int, int], *, antialias: bool = True, clear_color=(0.0, 0.0, 0.0, 1.0)):
        self.width, self.height = int(size[0]), int(size[1])
        self.pixel_ratio = 1.0
        self.antialias = antialias
        self.clear_color = tuple(clear_color)
        self.sky = SkyRenderer()
        self._gl_ready = False
        self._max_lights = 8

    # ------------------------------------------------------------------
    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def drawing_buffer_size(self) -> Tuple[int, int]:
        return int(self.width * self.pixel_ratio), int(self.height * self.pixel_ratio)

    def set_size(self, width: int, height: int) -> None:
        self.width, self.height = int(width), int(height)

    def set_pixel_ratio(self, ratio: float) -> None:
        self.pixel_ratio = float(ratio)

    # ------------------------------------------------------------------
    def _init_gl(self) -> None:  # pragma: no cover - visual
        glEnable(GL_DEPTH_TEST)
        glDepthFunc(GL_LEQUAL)
        glEnable(GL_CULL_FACE)
        glCullFace(GL_BACK)
        glEnable(GL_NORMALIZE)
        glShadeModel(GL_SMOOTH)
        glLightModeli(GL_LIGHT_MODEL_TWO_SIDE, GL_FALSE)
        if self.antialias:
            glEnable(GL_MULTISAMPLE)
        # let HDR colors through to the half-float targets so bloom can pick them up
        if bool(glClampColor):
            glClampColor(GL_CLAMP_VERTEX_COLOR, GL_FALSE)
            glClampColor(GL_CLAMP_FRAGMENT_COLOR, GL_FALSE)
        self._gl_ready = True

    def set_render_target(self, target) -> None:  # pragma: no cover - visual
        if target is None:
            glBindFramebuffer(GL_FRAMEBUFFER, 0)
            w, h = self.drawing_buffer_size
            glViewport(0, 0, w, h)
        else:
            target.bind()

    def render(self, scene, camera, target: Optional[object] = None) -> None:  # pragma: no cover - visual
        if not self._gl_ready:
            self._init_gl()
        self.set_render_target(target)

        glClearColor(*self.clear_color)
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)

        view = camera.view_matrix
        glMatrixMode(GL_PROJECTION)
        glLoadMatrixf(_gl_matrix(camera.projection_matrix))
        glMatrixMode(GL_MODELVIEW)
        glLoadMatrixf(_gl_matrix(view))

        if scene.background is not None:
            self.sky.draw(scene.background, view)

        meshes = []
        point_index = 0
        for obj in scene.traverse():
            if not obj.visible:
                continue
            if isinstance(obj, AmbientLight):
                obj.apply()
            elif isinstance(obj, PointLight) and point_index < self._max_lights:
                obj.apply(point_index)
                point_index += 1
            elif isinstance(obj, Mesh):
                meshes.append(obj)

        for mesh in meshes:
            mesh.draw()

        for i in range(point_index):
            PointLight.disable(i)
