from .camera import PerspectiveCamera
from .orbit_controls import OrbitControls

__all__ = [
    "PerspectiveCamera",
    "OrbitControls",
]
