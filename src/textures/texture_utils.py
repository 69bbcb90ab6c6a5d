"""Texture loading utilities for OpenGL.

Loading is split in two halves. Decoding the image file happens on a small
worker pool so scene assembly never blocks on disk; the returned texture is
a placeholder that the worker fills in place. Uploading to the GPU happens
lazily on the render thread the first time the texture is bound, because
only that thread owns the GL context.

Missing or corrupt files never raise: the texture ends up ``failed`` and
callers simply draw without it.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, Sequence, Tuple

import pygame
from OpenGL.GL import (
    glGenTextures,
    glBindTexture,
    glTexImage2D,
    glTexParameteri,
    GL_TEXTURE_2D,
    GL_TEXTURE_CUBE_MAP,
    GL_TEXTURE_CUBE_MAP_POSITIVE_X,
    GL_RGBA,
    GL_UNSIGNED_BYTE,
    GL_TEXTURE_MIN_FILTER,
    GL_TEXTURE_MAG_FILTER,
    GL_LINEAR,
    GL_TEXTURE_WRAP_S,
    GL_TEXTURE_WRAP_T,
    GL_TEXTURE_WRAP_R,
    GL_CLAMP_TO_EDGE,
    GL_REPEAT,
)

from config import TEXTURE_WORKERS

PENDING = "pending"
READY = "ready"
FAILED = "failed"

_EXECUTOR: Optional[ThreadPoolExecutor] = None
_EXECUTOR_LOCK = threading.Lock()


def _executor() -> ThreadPoolExecutor:
    global _EXECUTOR
    with _EXECUTOR_LOCK:
        if _EXECUTOR is None:
            _EXECUTOR = ThreadPoolExecutor(
                max_workers=TEXTURE_WORKERS, thread_name_prefix="texture-load"
            )
        return _EXECUTOR


def decode_image(filename: str, flip: bool = True) -> Tuple[bytes, Tuple[int, int]]:
    """Decode an image file into RGBA bytes and its (width, height)."""
    surface = pygame.image.load(filename)
    data = pygame.image.tobytes(surface, "RGBA", flip)
    return data, surface.get_size()


class Texture:
    """2D texture whose pixels arrive asynchronously.

    ``state`` moves once from ``pending`` to ``ready`` or ``failed``. The GL
    object is created on the first successful :meth:`bind`.
    """

    def __init__(self, filename: str, *, flip: bool = True, repeat: bool = True) -> None:
        self.filename = filename
        self.flip = flip
        self.repeat = repeat
        self.state = PENDING
        self.size: Optional[Tuple[int, int]] = None
        self.id: Optional[int] = None
        self.pixels: Optional[bytes] = None
        self._future: Optional[Future] = None
        self._settled = threading.Event()

    @property
    def ready(self) -> bool:
        return self.state == READY

    @property
    def failed(self) -> bool:
        return self.state == FAILED

    def start(self) -> "Texture":
        self._future = _executor().submit(decode_image, self.filename, self.flip)
        self._future.add_done_callback(self._on_decoded)
        return self

    def _on_decoded(self, future: Future) -> None:
        exc = future.exception()
        if exc is not None:
            print(f"Failed to load texture {self.filename}: {exc}")
            self.state = FAILED
        else:
            self.pixels, self.size = future.result()
            self.state = READY
        self._settled.set()

    def wait(self, timeout: Optional[float] = None) -> str:
        """Block until decoding settles; returns the final state."""
        if self._future is not None:
            self._settled.wait(timeout)
        return self.state

    def bind(self) -> bool:  # pragma: no cover - visual
        """Bind for drawing; returns False while the pixels are unavailable."""
        if self.state != READY:
            return False
        if self.id is None:
            self.id = _upload_2d(self.pixels, self.size, self.repeat)
            # GL owns a copy now
            self.pixels = None
        glBindTexture(GL_TEXTURE_2D, self.id)
        return True


class CubeTexture:
    """Six-face cube texture built from :class:`Texture` faces.

    Faces are ordered +X, -X, +Y, -Y, +Z, -Z. Upload waits until every face
    has settled; failed faces are filled black so one missing image only
    darkens its side of the sky.
    """

    def __init__(self, faces: Sequence[Texture]) -> None:
        if len(faces) != 6:
            raise ValueError(f"cube texture needs 6 faces, got {len(faces)}")
        self.faces = list(faces)
        self.id: Optional[int] = None

    @property
    def settled(self) -> bool:
        return all(f.state != PENDING for f in self.faces)

    @property
    def usable(self) -> bool:
        return self.settled and any(f.ready for f in self.faces)

    def wait(self, timeout: Optional[float] = None) -> None:
        for face in self.faces:
            face.wait(timeout)

    def face_data(self) -> list[Tuple[bytes, Tuple[int, int]]]:
        """Pixel data per face, black-filling the ones that failed."""
        size = next(f.size for f in self.faces if f.ready)
        black = bytes(size[0] * size[1] * 4)
        return [(f.pixels, f.size) if f.ready else (black, size) for f in self.faces]

    def bind(self) -> bool:  # pragma: no cover - visual
        if self.id is None:
            if not self.usable:
                return False
            self.id = glGenTextures(1)
            glBindTexture(GL_TEXTURE_CUBE_MAP, self.id)
            for i, (data, (w, h)) in enumerate(self.face_data()):
                glTexImage2D(
                    GL_TEXTURE_CUBE_MAP_POSITIVE_X + i,
                    0,
                    GL_RGBA,
                    w,
                    h,
                    0,
                    GL_RGBA,
                    GL_UNSIGNED_BYTE,
                    data,
                )
            glTexParameteri(GL_TEXTURE_CUBE_MAP, GL_TEXTURE_MIN_FILTER, GL_LINEAR)
            glTexParameteri(GL_TEXTURE_CUBE_MAP, GL_TEXTURE_MAG_FILTER, GL_LINEAR)
            glTexParameteri(GL_TEXTURE_CUBE_MAP, GL_TEXTURE_WRAP_S, GL_CLAMP_TO_EDGE)
            glTexParameteri(GL_TEXTURE_CUBE_MAP, GL_TEXTURE_WRAP_T, GL_CLAMP_TO_EDGE)
            glTexParameteri(GL_TEXTURE_CUBE_MAP, GL_TEXTURE_WRAP_R, GL_CLAMP_TO_EDGE)
            for face in self.faces:
                face.pixels = None
        glBindTexture(GL_TEXTURE_CUBE_MAP, self.id)
        return True


def _upload_2d(data: bytes, size: Tuple[int, int], repeat: bool) -> int:  # pragma: no cover - visual
    width, height = size
    texture_id = glGenTextures(1)
    glBindTexture(GL_TEXTURE_2D, texture_id)
    glTexImage2D(
        GL_TEXTURE_2D,
        0,
        GL_RGBA,
        width,
        height,
        0,
        GL_RGBA,
        GL_UNSIGNED_BYTE,
        data,
    )
    # Linear filtering: planet maps are photographs, not pixel art
    glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MIN_FILTER, GL_LINEAR)
    glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MAG_FILTER, GL_LINEAR)
    wrap = GL_REPEAT if repeat else GL_CLAMP_TO_EDGE
    glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_S, wrap)
    glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_T, GL_CLAMP_TO_EDGE)
    return int(texture_id)


def load_texture(filename: str) -> Texture:
    """Start loading ``filename`` and return its placeholder immediately."""
    return Texture(filename).start()


def load_cube_texture(filenames: Sequence[str]) -> CubeTexture:
    # Cube map faces are addressed top-down, so no vertical flip
    return CubeTexture([Texture(f, flip=False, repeat=False).start() for f in filenames])
