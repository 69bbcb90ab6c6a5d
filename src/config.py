import os
from dataclasses import dataclass

WIDTH = 1600
HEIGHT = 900
FULLSCREEN = False
FPS = 61
VSYNC = True
TITLE = "Solar System"
BACKGROUND = (0.0, 0.0, 0.0, 1.0)

# Camera
FOV = 75
NEAR = 0.1
FAR = 1000.0
CAMERA_START = (0.0, 20.0, 0.0)
MAX_PIXEL_RATIO = 2.0

# Orbit controls
CONTROLS_DAMPING = 0.05
CONTROLS_MAX_DISTANCE = 50.0
ROTATE_SPEED = 1.0
ZOOM_SPEED = 1.0

# Bloom
BLOOM_STRENGTH = 0.75
BLOOM_RADIUS = 0.0
BLOOM_THRESHOLD = 1.0

# Lights
AMBIENT_INTENSITY = 0.1
POINT_LIGHT_INTENSITY = 1.0

# Bodies
SUN_RADIUS = 5.0
# Above 1.0 so the sun survives the bloom luminosity threshold
SUN_COLOR = (1.6, 1.3, 0.8)
LABEL_OFFSET = 0.5  # world units between a body's surface and its label
LABEL_FONT_SIZE = 20
LABEL_COLOR = (255, 255, 255, 255)

# Assets, overridable at launch the way a deploy base URL would be
BASE_PATH_ENV = "SOLAR_BASE_PATH"
BASE_PATH = os.environ.get(BASE_PATH_ENV, "./static/")

TEXTURE_WORKERS = 4


@dataclass(frozen=True)
class AppConfig:
    """Everything the engine needs at initialization time.

    One instance lives for the whole process; constructors receive it
    instead of reading module globals.
    """

    width: int = WIDTH
    height: int = HEIGHT
    fullscreen: bool = FULLSCREEN
    fps: int = FPS
    vsync: bool = VSYNC
    title: str = TITLE
    background: tuple[float, float, float, float] = BACKGROUND
    fov: float = FOV
    near: float = NEAR
    far: float = FAR
    camera_start: tuple[float, float, float] = CAMERA_START
    max_pixel_ratio: float = MAX_PIXEL_RATIO
    controls_damping: float = CONTROLS_DAMPING
    controls_max_distance: float = CONTROLS_MAX_DISTANCE
    bloom_strength: float = BLOOM_STRENGTH
    bloom_radius: float = BLOOM_RADIUS
    bloom_threshold: float = BLOOM_THRESHOLD
    base_path: str = BASE_PATH

    @classmethod
    def from_env(cls, environ=None) -> "AppConfig":
        env = os.environ if environ is None else environ
        return cls(base_path=env.get(BASE_PATH_ENV, BASE_PATH))

    def asset_path(self, relative: str) -> str:
        return os.path.join(self.base_path, relative)
