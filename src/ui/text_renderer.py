"""Centered text in window pixels, drawn over the finished frame.

Each (text, color) pair is rasterized once with pygame.font and kept as a
GL texture; labels never change, so the cache only grows to one entry per
body.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

import pygame
from OpenGL.GL import (
    glGenTextures,
    glBindTexture,
    glTexImage2D,
    glTexParameteri,
    glPushMatrix,
    glPopMatrix,
    glBegin,
    glEnd,
    glOrtho,
    glLoadIdentity,
    glTexCoord2f,
    glVertex2f,
    glColor4f,
    glBlendFunc,
    glEnable,
    glDisable,
    glMatrixMode,
    GL_TEXTURE_2D,
    GL_TEXTURE_MIN_FILTER,
    GL_TEXTURE_MAG_FILTER,
    GL_LINEAR,
    GL_RGBA,
    GL_UNSIGNED_BYTE,
    GL_BLEND,
    GL_SRC_ALPHA,
    GL_ONE_MINUS_SRC_ALPHA,
    GL_PROJECTION,
    GL_MODELVIEW,
    GL_QUADS,
    GL_DEPTH_TEST,
    GL_LIGHTING,
    GL_CULL_FACE,
)

Color = Tuple[int, int, int, int]


@dataclass
class _Glyphs:
    texture: int
    size: Tuple[int, int]


def centered_origin(x: float, y: float, size: Tuple[int, int]) -> Tuple[float, float]:
    """Top-left corner that centers a ``size`` box on (x, y)."""
    return x - size[0] / 2, y - size[1] / 2


class TextRenderer:
    """Wrap draws in begin()/end(); the font is opened on first draw."""

    def __init__(self, screen_width: int, screen_height: int, size: int = 24) -> None:
        self.width = screen_width
        self.height = screen_height
        self.font_size = size
        self._font = None
        self._cache: Dict[Tuple[str, Color], _Glyphs] = {}

    @property
    def font(self) -> pygame.font.Font:
        if self._font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            self._font = pygame.font.Font(None, self.font_size)
        return self._font

    def set_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def begin(self) -> None:  # pragma: no cover - visual
        # y grows downward, matching pygame window coordinates
        glMatrixMode(GL_PROJECTION)
        glPushMatrix()
        glLoadIdentity()
        glOrtho(0, self.width, self.height, 0, -1, 1)
        glMatrixMode(GL_MODELVIEW)
        glPushMatrix()
        glLoadIdentity()

        glDisable(GL_DEPTH_TEST)
        glDisable(GL_LIGHTING)
        glDisable(GL_CULL_FACE)
        glEnable(GL_BLEND)
        glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)
        glEnable(GL_TEXTURE_2D)

    def end(self) -> None:  # pragma: no cover - visual
        glDisable(GL_TEXTURE_2D)
        glDisable(GL_BLEND)
        glEnable(GL_CULL_FACE)
        glEnable(GL_DEPTH_TEST)
        glPopMatrix()
        glMatrixMode(GL_PROJECTION)
        glPopMatrix()
        glMatrixMode(GL_MODELVIEW)

    def _glyphs(self, text: str, color: Color) -> _Glyphs:  # pragma: no cover - visual
        key = (text, tuple(color))
        glyphs = self._cache.get(key)
        if glyphs is None:
            surf = self.font.render(text, True, color)
            glyphs = _Glyphs(texture=glGenTextures(1), size=surf.get_size())
            glBindTexture(GL_TEXTURE_2D, glyphs.texture)
            glTexImage2D(
                GL_TEXTURE_2D, 0, GL_RGBA, glyphs.size[0], glyphs.size[1], 0,
                GL_RGBA, GL_UNSIGNED_BYTE, pygame.image.tobytes(surf, "RGBA", True),
            )
            glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MIN_FILTER, GL_LINEAR)
            glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MAG_FILTER, GL_LINEAR)
            self._cache[key] = glyphs
        return glyphs

    def draw_centered(self, text: str, x: float, y: float, color: Color) -> None:  # pragma: no cover - visual
        glyphs = self._glyphs(text, color)
        w, h = glyphs.size
        left, top = centered_origin(x, y, glyphs.size)

        glBindTexture(GL_TEXTURE_2D, glyphs.texture)
        glColor4f(1.0, 1.0, 1.0, 1.0)
        glBegin(GL_QUADS)
        # rows were flipped on upload, so v = 1 is the top edge
        glTexCoord2f(0.0, 1.0)
        glVertex2f(left, top)
        glTexCoord2f(1.0, 1.0)
        glVertex2f(left + w, top)
        glTexCoord2f(1.0, 0.0)
        glVertex2f(left + w, top + h)
        glTexCoord2f(0.0, 0.0)
        glVertex2f(left, top + h)
        glEnd()
