"""Textured planet spheres with a floating name label."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Tuple

from config import BASE_PATH, LABEL_OFFSET
from core.material import MeshStandardMaterial
from core.mesh import Mesh, SphereGeometry
from textures.texture_utils import load_texture
from ui.label_renderer import Label


@dataclass(frozen=True)
class CelestialBody:
    name: str
    radius: float
    texture_path: str
    position: Tuple[float, float, float]

    def __post_init__(self):
        if self.radius <= 0:
            raise ValueError(f"{self.name}: radius must be positive, got {self.radius}")


def create_body(body: CelestialBody, base_path: str = BASE_PATH) -> Mesh:
    """Build the lit sphere for ``body`` with its label as a child.

    The texture loads in the background; until then (or forever, if the
    file is missing) the sphere draws with the plain material color.
    """
    texture = load_texture(os.path.join(base_path, body.texture_path))
    mesh = Mesh(
        SphereGeometry(body.radius, 32, 16),
        MeshStandardMaterial(map=texture),
        position=body.position,
        name=body.name,
    )
    mesh.add(Label(body.name, position=(0.0, body.radius + LABEL_OFFSET, 0.0)))
    return mesh
