"""Assembles the sun and the inner planets into a scene."""

from __future__ import annotations

from typing import Dict, List, Tuple

from config import BASE_PATH, SUN_COLOR, SUN_RADIUS
from core.material import MeshBasicMaterial
from core.mesh import Mesh, SphereGeometry
from textures import resourcepath as rp

from .bodies import CelestialBody, create_body

PLANETS: Tuple[CelestialBody, ...] = (
    CelestialBody("Mercury", 0.5, rp.MERCURY_TEXTURE_PATH, (10.0, 0.0, 0.0)),
    CelestialBody("Venus", 0.95, rp.VENUS_TEXTURE_PATH, (15.0, 0.0, 0.0)),
    CelestialBody("Earth", 1.0, rp.EARTH_TEXTURE_PATH, (20.0, 0.0, 0.0)),
    CelestialBody("Mars", 0.6, rp.MARS_TEXTURE_PATH, (25.0, 0.0, 0.0)),
)


def create_sun(radius: float = SUN_RADIUS) -> Mesh:
    sun = Mesh(
        SphereGeometry(radius, 32, 16),
        MeshBasicMaterial(color=SUN_COLOR),
        position=(0.0, 0.0, 0.0),
        name="Sun",
    )
    # orbit controls may not get closer than this to the origin
    sun.min_distance = radius * 2
    return sun


def create_solar_system(scene, base_path: str = BASE_PATH) -> Tuple[Dict[str, Mesh], List[str]]:
    """Add the sun and planets to ``scene``.

    Returns the meshes keyed by name (the sun under ``"Sun"``) and the planet
    names in order from the sun outward.
    """
    bodies: Dict[str, Mesh] = {}
    sun = create_sun()
    scene.add(sun)
    bodies[sun.name] = sun

    planet_names: List[str] = []
    for planet in PLANETS:
        mesh = create_body(planet, base_path)
        scene.add(mesh)
        bodies[planet.name] = mesh
        planet_names.append(planet.name)
    return bodies, planet_names
