"""Display window: the OpenGL surface everything draws into.

Wraps the pygame display so the engine can be given a stand-in in tests.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

import pygame

from config import WIDTH, HEIGHT, TITLE, FULLSCREEN, VSYNC


class Window:
    def __init__(
        self,
        width: int = WIDTH,
        height: int = HEIGHT,
        *,
        title: str = TITLE,
        fullscreen: bool = FULLSCREEN,
        vsync: bool = VSYNC,
    ) -> None:
        self.width = width
        self.height = height
        self.title = title
        self.fullscreen = fullscreen
        self.vsync = vsync
        self.surface: Optional[pygame.Surface] = None
        self.notices: List[str] = []
        self.clock = pygame.time.Clock()

    # ------------------------------------------------------------------
    def open(self) -> Optional[pygame.Surface]:
        """Create the GL display surface; None when it cannot be opened."""
        try:
            pygame.init()
            pygame.display.gl_set_attribute(pygame.GL_DEPTH_SIZE, 24)
            pygame.display.gl_set_attribute(pygame.GL_MULTISAMPLEBUFFERS, 1)
            pygame.display.gl_set_attribute(pygame.GL_MULTISAMPLESAMPLES, 4)
            pygame.display.set_caption(self.title)
            flags = pygame.DOUBLEBUF | pygame.OPENGL | pygame.RESIZABLE
            if self.fullscreen:
                flags |= pygame.FULLSCREEN
            try:
                # vsync: 1 to enable, 0 to disable
                self.surface = pygame.display.set_mode(
                    (self.width, self.height), flags, vsync=(1 if self.vsync else 0)
                )
            except pygame.error:
                # vsync requested but unavailable on this driver
                self.surface = pygame.display.set_mode((self.width, self.height), flags)
        except pygame.error as exc:
            print(f"Could not open display: {exc}")
            self.surface = None
        return self.surface

    @property
    def size(self) -> Tuple[int, int]:
        if self.surface is not None:
            return pygame.display.get_window_size()
        return self.width, self.height

    @property
    def device_pixel_ratio(self) -> float:
        """Drawable pixels per window pixel (>1 on HiDPI displays)."""
        if self.surface is None:
            return 1.0
        win_w, _ = pygame.display.get_window_size()
        draw_w, _ = self.surface.get_size()
        if win_w <= 0:
            return 1.0
        return max(draw_w / win_w, 1.0)

    # ------------------------------------------------------------------
    def poll_events(self):
        return pygame.event.get()

    def flip(self) -> None:  # pragma: no cover - visual
        pygame.display.flip()

    def tick(self, fps: int) -> float:
        """Pace the loop; returns the frame time in seconds."""
        return self.clock.tick(fps) / 1000.0

    def close(self) -> None:
        self.surface = None
        pygame.quit()

    # ------------------------------------------------------------------
    def show_error_notice(self, message: str) -> None:
        """Show a plain (non-GL) window with the message on it."""
        self.notices.append(message)
        print(message)
        try:
            pygame.display.init()
            pygame.font.init()
            screen = pygame.display.set_mode((640, 160))
            pygame.display.set_caption(self.title)
            font = pygame.font.Font(None, 26)
            screen.fill((40, 0, 0))
            text = font.render(message, True, (255, 255, 255))
            screen.blit(text, text.get_rect(center=screen.get_rect().center))
            pygame.display.flip()
        except pygame.error as exc:
            # no display at all; the printed line is all we can do
            print(f"Could not show notice: {exc}")

    def wait_for_close(self) -> None:  # pragma: no cover - interactive
        if not pygame.display.get_init():
            return
        while True:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    pygame.quit()
                    return
                if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    pygame.quit()
                    return
            self.clock.tick(15)
