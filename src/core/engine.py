"""Core engine: initialization, frame loop & resize handling.

Separates concerns:
- Engine: owns the window, builds the scene once and drives the loop.
- Scene content: built by the `solar` package (environment, lights, bodies).
- Overlay: name labels drawn by the label renderer after the 3D pass.

Initialization runs in a fixed order: capability check, window, scene
content, camera & controls, render pipeline. When OpenGL is missing only an
error notice is shown and nothing else gets built.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

import pygame

from config import AppConfig
from core.capabilities import gl_available
from core.renderer import Renderer
from core.scene import Scene
from core.window import Window
from camera import OrbitControls, PerspectiveCamera
from render.postprocessing import BloomPass, EffectComposer, RenderPass
from solar import create_environment_map, create_lights, create_solar_system
from textures.resourcepath import ENVIRONMENT_DIR
from ui.label_renderer import LabelRenderer

IDLE = "idle"
RUNNING = "running"

GL_MISSING_MESSAGE = (
    "Your graphics card does not seem to support OpenGL 3.0. "
    "Find out how to get it at https://get.webgl.org/"
)


def log_timing(message: str, start_time: float, end_time: float, log: bool = True) -> None:
    """Logs timing information for initialization phases."""
    if log:
        print(f"{message} took {end_time - start_time:.6f} seconds")


class ElapsedClock:
    """Monotonic frame clock; ``get_delta()`` returns seconds since last call."""

    def __init__(self, now: Callable[[], float] = time.perf_counter) -> None:
        self._now = now
        self._last = now()
        self.elapsed = 0.0

    def get_delta(self) -> float:
        current = self._now()
        delta = max(0.0, current - self._last)
        self._last = current
        self.elapsed += delta
        return delta


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
class Engine:
    def __init__(
        self,
        config: Optional[AppConfig] = None,
        window: Optional[Window] = None,
        capability_check: Callable[[], bool] = gl_available,
    ) -> None:
        self.config = config or AppConfig.from_env()
        self.window = window or Window(
            self.config.width,
            self.config.height,
            title=self.config.title,
            fullscreen=self.config.fullscreen,
            vsync=self.config.vsync,
        )
        self.state = IDLE
        self.elapsed_time = 0.0
        self.clock: Optional[ElapsedClock] = None

        self.scene: Optional[Scene] = None
        self.bodies = {}
        self.planet_names = []
        self.camera: Optional[PerspectiveCamera] = None
        self.controls: Optional[OrbitControls] = None
        self.renderer: Optional[Renderer] = None
        self.composer: Optional[EffectComposer] = None
        self.bloom_pass: Optional[BloomPass] = None
        self.label_renderer: Optional[LabelRenderer] = None

        if not capability_check():
            self.window.show_error_notice(GL_MISSING_MESSAGE)
            return

        if self.window.open() is None:
            print("No display surface to render into; aborting initialization")
            return

        self._build()

    @property
    def ready(self) -> bool:
        return self.composer is not None

    # ------------------------------------------------------------------
    def _build(self) -> None:
        cfg = self.config
        self.width, self.height = self.window.size
        print("Solar System initializing")

        start_time = time.perf_counter()
        self.scene = Scene(background=create_environment_map(cfg.asset_path(ENVIRONMENT_DIR)))
        self.scene.add(*create_lights())
        log_timing("Setting up environment & lights", start_time, time.perf_counter())

        start_time = time.perf_counter()
        self.bodies, self.planet_names = create_solar_system(self.scene, cfg.base_path)
        log_timing("Creating bodies", start_time, time.perf_counter())

        start_time = time.perf_counter()
        self.camera = PerspectiveCamera(
            cfg.fov, self.width / self.height, cfg.near, cfg.far, position=cfg.camera_start
        )
        self.scene.add(self.camera)
        self.controls = OrbitControls(
            self.camera,
            self.window,
            enable_damping=True,
            damping_factor=cfg.controls_damping,
            enable_pan=False,
            min_distance=self.bodies["Sun"].min_distance,
            max_distance=cfg.controls_max_distance,
        )
        log_timing("Setting up camera & controls", start_time, time.perf_counter())

        start_time = time.perf_counter()
        self.label_renderer = LabelRenderer((self.width, self.height))
        self.renderer = Renderer((self.width, self.height), antialias=True, clear_color=cfg.background)
        self.renderer.set_pixel_ratio(self._pixel_ratio())
        self.composer = EffectComposer(self.renderer)
        self.composer.add_pass(RenderPass(self.scene, self.camera))
        self.bloom_pass = BloomPass(
            (self.width, self.height),
            strength=cfg.bloom_strength,
            radius=cfg.bloom_radius,
            threshold=cfg.bloom_threshold,
        )
        self.composer.add_pass(self.bloom_pass)
        log_timing("Setting up render pipeline", start_time, time.perf_counter())

        print("Solar System initialization complete.")

    def _pixel_ratio(self) -> float:
        return min(self.window.device_pixel_ratio, self.config.max_pixel_ratio)

    # ------------------------------------------------------------------
    def start(self) -> None:
        if self.state == RUNNING or not self.ready:
            return
        self.clock = ElapsedClock()
        self.state = RUNNING

    def on_resize(self, width: int, height: int) -> None:
        if not self.ready or width <= 0 or height <= 0:
            return
        self.width, self.height = int(width), int(height)

        self.camera.aspect = self.width / self.height
        self.camera.update_projection_matrix()

        self.renderer.set_size(self.width, self.height)
        self.renderer.set_pixel_ratio(self._pixel_ratio())
        self.composer.set_size(self.width, self.height)
        self.label_renderer.set_size(self.width, self.height)

    def handle_event(self, event) -> bool:
        """Returns False when the event asks the app to close."""
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            return False
        if event.type == pygame.VIDEORESIZE:
            self.on_resize(event.w, event.h)
        elif self.controls is not None:
            self.controls.handle_event(event)
        return True

    def tick(self) -> None:
        self.elapsed_time += self.clock.get_delta()
        self.controls.update()
        self.composer.render()
        self.label_renderer.render(self.scene, self.camera)
        self.window.flip()

    # ------------------------------------------------------------------
    def run(self) -> None:  # pragma: no cover - interactive
        if not self.ready:
            if self.window.notices:
                self.window.wait_for_close()
            return
        self.start()
        while self.state == RUNNING:
            for event in self.window.poll_events():
                if not self.handle_event(event):
                    self.state = IDLE
                    break
            if self.state != RUNNING:
                break
            self.tick()
            self.window.tick(self.config.fps)
        self.window.close()
