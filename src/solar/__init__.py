"""Solar package: the scene content builders.

    from solar import create_solar_system, create_lights
"""

from .bodies import CelestialBody, create_body
from .environment import create_environment_map, environment_face_paths
from .lights import create_lights
from .solar_system import PLANETS, create_solar_system, create_sun

__all__ = [
    "CelestialBody",
    "create_body",
    "create_environment_map",
    "environment_face_paths",
    "create_lights",
    "PLANETS",
    "create_solar_system",
    "create_sun",
]
