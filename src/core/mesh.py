"""Sphere geometry and the mesh node that draws it.

Geometry is built eagerly with numpy (interleaved position, normal and UV;
8 floats per vertex) and uploaded to VBOs the first time it is drawn, so
meshes can be assembled before a GL context exists.
"""

from __future__ import annotations

import ctypes
import math
from typing import Optional

import numpy as np
from OpenGL.GL import (
    glGenBuffers,
    glBindBuffer,
    glBufferData,
    glEnableClientState,
    glVertexPointer,
    glNormalPointer,
    glTexCoordPointer,
    glDrawElements,
    glDisableClientState,
    glPushMatrix,
    glPopMatrix,
    glTranslatef,
    GL_ARRAY_BUFFER,
    GL_ELEMENT_ARRAY_BUFFER,
    GL_STATIC_DRAW,
    GL_FLOAT,
    GL_TRIANGLES,
    GL_UNSIGNED_INT,
    GL_VERTEX_ARRAY,
    GL_NORMAL_ARRAY,
    GL_TEXTURE_COORD_ARRAY,
)

from core.object3d import Object3D

STRIDE = 8 * 4  # xyz + normal + uv, float32


class SphereGeometry:
    """UV sphere matching the usual (width, height) segment layout.

    Rows run from the north pole (v = 1) to the south pole (v = 0); each row
    has ``width_segments + 1`` vertices so the texture seam gets its own
    column.
    """

    def __init__(self, radius: float = 1.0, width_segments: int = 32, height_segments: int = 16):
        if radius <= 0:
            raise ValueError(f"sphere radius must be positive, got {radius}")
        self.radius = float(radius)
        self.width_segments = max(3, int(width_segments))
        self.height_segments = max(2, int(height_segments))
        self.vertices, self.indices = self._build()
        self._vbo: Optional[int] = None
        self._ibo: Optional[int] = None

    def _build(self):
        ws, hs = self.width_segments, self.height_segments
        u = np.linspace(0.0, 1.0, ws + 1, dtype=np.float64)
        v = np.linspace(0.0, 1.0, hs + 1, dtype=np.float64)
        phi = u * 2.0 * math.pi  # around the Y axis
        theta = v * math.pi  # from the north pole

        theta_grid, phi_grid = np.meshgrid(theta, phi, indexing="ij")
        nx = -np.cos(phi_grid) * np.sin(theta_grid)
        ny = np.cos(theta_grid)
        nz = np.sin(phi_grid) * np.sin(theta_grid)
        normals = np.stack([nx, ny, nz], axis=-1).reshape(-1, 3)
        positions = normals * self.radius
        uu, vv = np.meshgrid(u, 1.0 - v, indexing="xy")
        uvs = np.stack([uu, vv], axis=-1).reshape(-1, 2)

        vertices = np.hstack([positions, normals, uvs]).astype(np.float32)

        row = ws + 1
        indices = []
        for iy in range(hs):
            for ix in range(ws):
                a = iy * row + ix + 1
                b = iy * row + ix
                c = (iy + 1) * row + ix
                d = (iy + 1) * row + ix + 1
                # pole rows collapse to a single triangle per quad
                if iy != 0:
                    indices.extend((a, b, d))
                if iy != hs - 1:
                    indices.extend((b, c, d))
        return vertices, np.array(indices, dtype=np.uint32)

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def index_count(self) -> int:
        return int(self.indices.shape[0])

    def _upload(self) -> None:  # pragma: no cover - visual
        self._vbo = glGenBuffers(1)
        glBindBuffer(GL_ARRAY_BUFFER, self._vbo)
        glBufferData(GL_ARRAY_BUFFER, self.vertices.nbytes, self.vertices, GL_STATIC_DRAW)
        self._ibo = glGenBuffers(1)
        glBindBuffer(GL_ELEMENT_ARRAY_BUFFER, self._ibo)
        glBufferData(GL_ELEMENT_ARRAY_BUFFER, self.indices.nbytes, self.indices, GL_STATIC_DRAW)

    def draw(self) -> None:  # pragma: no cover - visual
        if self._vbo is None:
            self._upload()
        glBindBuffer(GL_ARRAY_BUFFER, self._vbo)
        glBindBuffer(GL_ELEMENT_ARRAY_BUFFER, self._ibo)

        glEnableClientState(GL_VERTEX_ARRAY)
        glVertexPointer(3, GL_FLOAT, STRIDE, None)
        glEnableClientState(GL_NORMAL_ARRAY)
        glNormalPointer(GL_FLOAT, STRIDE, ctypes.c_void_p(3 * 4))
        glEnableClientState(GL_TEXTURE_COORD_ARRAY)
        glTexCoordPointer(2, GL_FLOAT, STRIDE, ctypes.c_void_p(6 * 4))

        glDrawElements(GL_TRIANGLES, self.index_count, GL_UNSIGNED_INT, None)

        glDisableClientState(GL_TEXTURE_COORD_ARRAY)
        glDisableClientState(GL_NORMAL_ARRAY)
        glDisableClientState(GL_VERTEX_ARRAY)
        glBindBuffer(GL_ELEMENT_ARRAY_BUFFER, 0)
        glBindBuffer(GL_ARRAY_BUFFER, 0)


class Mesh(Object3D):
    def __init__(self, geometry: SphereGeometry, material, position=None, name: str = ""):
        super().__init__(position=position, name=name)
        self.geometry = geometry
        self.material = material

    def draw(self) -> None:  # pragma: no cover - visual
        p = self.world_position()
        glPushMatrix()
        glTranslatef(p.x, p.y, p.z)
        self.material.apply()
        self.geometry.draw()
        self.material.release()
        glPopMatrix()
