from __future__ import annotations

from typing import Tuple

from config import AMBIENT_INTENSITY, POINT_LIGHT_INTENSITY
from core.lights import AmbientLight, PointLight


def create_lights() -> Tuple[AmbientLight, PointLight]:
    """Faint white fill plus the sun's light at the origin.

    The point light has no distance cutoff and no falloff, so every planet
    is lit equally regardless of its distance from the sun.
    """
    ambient = AmbientLight((1.0, 1.0, 1.0), AMBIENT_INTENSITY, name="Ambient light")
    sun_light = PointLight(
        (1.0, 1.0, 1.0),
        POINT_LIGHT_INTENSITY,
        distance=0.0,
        decay=0.0,
        position=(0.0, 0.0, 0.0),
        name="Sun light",
    )
    return ambient, sun_light
