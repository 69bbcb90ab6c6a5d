"""
Solar System Test Configuration and Fixtures

Provides a headless stand-in for the display window so the engine can be
built and driven without a GL context.
"""

import pytest

from core.window import Window


class HeadlessWindow(Window):
    """Window double: records notices and presents, never touches pygame.display."""

    def __init__(self, width=800, height=600, *, pixel_ratio=1.0, openable=True):
        super().__init__(width, height, title="test")
        self.pixel_ratio = pixel_ratio
        self.openable = openable
        self.opened = False
        self.flips = 0
        self.closed = False
        self.events = []

    def open(self):
        if not self.openable:
            return None
        self.opened = True
        self.surface = object()
        return self.surface

    @property
    def size(self):
        return self.width, self.height

    @property
    def device_pixel_ratio(self):
        return self.pixel_ratio

    def show_error_notice(self, message):
        self.notices.append(message)

    def poll_events(self):
        events, self.events = self.events, []
        return events

    def flip(self):
        self.flips += 1

    def tick(self, fps):
        return 1.0 / fps

    def close(self):
        self.closed = True
        self.surface = None

    def wait_for_close(self):
        self.closed = True


@pytest.fixture
def headless_window():
    return HeadlessWindow()


@pytest.fixture
def asset_config(tmp_path):
    """Config whose asset base path is an empty directory (every texture fails)."""
    from config import AppConfig

    return AppConfig(base_path=str(tmp_path))
