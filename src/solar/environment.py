"""Star-field background: a six-face cube map."""

from __future__ import annotations

import os
from typing import List

from textures.resourcepath import ENVIRONMENT_EXT, ENVIRONMENT_FACES
from textures.texture_utils import CubeTexture, load_cube_texture


def environment_face_paths(path: str) -> List[str]:
    """The six face files under ``path`` in +x, -x, +y, -y, +z, -z order."""
    return [os.path.join(path, face + ENVIRONMENT_EXT) for face in ENVIRONMENT_FACES]


def create_environment_map(path: str) -> CubeTexture:
    # Faces are not checked here; a missing one is reported by the loader.
    return load_cube_texture(environment_face_paths(path))
