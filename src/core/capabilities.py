"""OpenGL capability probe.

Opens a hidden throwaway window to find out whether an OpenGL context of the
required version can be created, then shuts the display down again so the
real window starts from a clean state.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

import pygame

# half-float render targets and framebuffer objects
REQUIRED_GL_VERSION = (3, 0)

_VERSION_RE = re.compile(r"(\d+)\.(\d+)")


def parse_gl_version(version) -> Optional[Tuple[int, int]]:
    """'4.6.0 NVIDIA 535.54' -> (4, 6); 'OpenGL ES 3.2 Mesa' -> (3, 2)."""
    if version is None:
        return None
    if isinstance(version, bytes):
        version = version.decode("ascii", "replace")
    match = _VERSION_RE.search(version)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


def gl_available(min_version: Tuple[int, int] = REQUIRED_GL_VERSION) -> bool:
    try:
        # a host without libGL fails here rather than at module import
        from OpenGL import error as gl_error
        from OpenGL.GL import glGetString, GL_VERSION
    except ImportError as exc:
        print(f"OpenGL unavailable: {exc}")
        return False

    try:
        pygame.display.init()
        pygame.display.set_mode((1, 1), pygame.OPENGL | pygame.HIDDEN)
        version = parse_gl_version(glGetString(GL_VERSION))
    except (pygame.error, gl_error.Error) as exc:
        print(f"OpenGL unavailable: {exc}")
        return False
    finally:
        pygame.display.quit()

    if version is None:
        print("OpenGL unavailable: no GL_VERSION reported")
        return False
    if version < tuple(min_version):
        print(f"OpenGL {version[0]}.{version[1]} found, {min_version[0]}.{min_version[1]} required")
        return False
    return True
