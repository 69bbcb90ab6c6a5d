"""Tests for engine initialization, resize handling and the frame loop."""

from unittest.mock import Mock, call

import pygame
import pytest

from conftest import HeadlessWindow
from core.engine import IDLE, RUNNING, ElapsedClock, Engine
from core.lights import AmbientLight, Light, PointLight
from core.mesh import Mesh


@pytest.fixture
def engine(headless_window, asset_config):
    return Engine(asset_config, window=headless_window, capability_check=lambda: True)


class TestInitialization:
    def test_builds_scene_and_pipeline(self, engine):
        assert engine.ready
        assert engine.state == IDLE
        assert engine.planet_names == ["Mercury", "Venus", "Earth", "Mars"]
        assert engine.camera.parent is engine.scene
        assert tuple(engine.camera.position) == (0, 20, 0)
        assert engine.camera.fov == 75
        assert engine.camera.aspect == pytest.approx(800 / 600)

    def test_scene_contents(self, engine):
        """Exactly one ambient and one point light, the sun and four planets."""
        assert len(engine.scene.find_all(AmbientLight)) == 1
        assert len(engine.scene.find_all(PointLight)) == 1
        assert len(engine.scene.find_all(Light)) == 2
        assert len(engine.scene.find_all(Mesh)) == 5

    def test_controls_configuration(self, engine):
        """Damped, no panning, between twice the sun radius and 50 units."""
        controls = engine.controls
        assert controls.enable_damping is True
        assert controls.damping_factor == pytest.approx(0.05)
        assert controls.enable_pan is False
        assert controls.min_distance == pytest.approx(10.0)
        assert controls.max_distance == pytest.approx(50.0)

    def test_bloom_settings(self, engine):
        assert engine.bloom_pass.strength == pytest.approx(0.75)
        assert engine.bloom_pass.radius == 0.0
        assert engine.bloom_pass.threshold == pytest.approx(1.0)
        assert engine.composer.passes[-1] is engine.bloom_pass

    def test_capability_failure_builds_nothing(self, asset_config):
        """A missing GL context yields exactly one notice and no scene."""
        window = HeadlessWindow()
        engine = Engine(asset_config, window=window, capability_check=lambda: False)
        assert len(window.notices) == 1
        assert window.opened is False
        for attr in ("scene", "camera", "controls", "renderer", "composer", "label_renderer"):
            assert getattr(engine, attr) is None
        engine.start()
        assert engine.state == IDLE

    def test_missing_display_aborts(self, asset_config, capsys):
        window = HeadlessWindow(openable=False)
        engine = Engine(asset_config, window=window, capability_check=lambda: True)
        assert engine.scene is None and engine.renderer is None
        assert window.notices == []
        assert "aborting" in capsys.readouterr().out


class TestResize:
    def test_resize_event_updates_every_consumer(self, asset_config):
        """A window resize reaches camera, renderer, composer and labels together."""
        engine = Engine(asset_config, window=HeadlessWindow(1600, 900), capability_check=lambda: True)
        engine.start()
        assert engine.renderer.size == (1600, 900)
        assert engine.camera.aspect == pytest.approx(1600 / 900)

        resize = pygame.event.Event(pygame.VIDEORESIZE, w=800, h=600, size=(800, 600))
        assert engine.handle_event(resize) is True

        assert engine.camera.aspect == pytest.approx(800 / 600)
        assert engine.renderer.size == (800, 600)
        assert engine.composer.size == (800, 600)
        assert engine.composer.render_target1.size == (800, 600)
        assert engine.label_renderer.size == (800, 600)

    def test_resize_rebuilds_projection(self, engine):
        engine.on_resize(1200, 400)
        assert engine.camera.aspect == pytest.approx(3.0)
        assert engine.camera.projection_matrix[1, 1] / engine.camera.projection_matrix[0, 0] == pytest.approx(3.0)

    def test_pixel_ratio_capped_at_two(self, asset_config):
        window = HeadlessWindow(pixel_ratio=3.0)
        engine = Engine(asset_config, window=window, capability_check=lambda: True)
        assert engine.renderer.pixel_ratio == 2.0
        engine.on_resize(640, 480)
        assert engine.renderer.pixel_ratio == 2.0
        assert engine.composer.render_target1.size == (1280, 960)

    def test_low_pixel_ratio_passes_through(self, asset_config):
        window = HeadlessWindow(pixel_ratio=1.0)
        engine = Engine(asset_config, window=window, capability_check=lambda: True)
        assert engine.renderer.pixel_ratio == 1.0

    @pytest.mark.parametrize("size", [(0, 600), (800, 0), (-1, -1)])
    def test_degenerate_sizes_ignored(self, engine, size):
        engine.on_resize(*size)
        assert engine.renderer.size == (800, 600)
        assert engine.camera.aspect == pytest.approx(800 / 600)

    def test_videoresize_event(self, engine):
        assert engine.handle_event(pygame.event.Event(pygame.VIDEORESIZE, w=1024, h=512, size=(1024, 512)))
        assert engine.label_renderer.size == (1024, 512)


class TestFrameLoop:
    def test_start_moves_to_running_once(self, engine):
        engine.start()
        clock = engine.clock
        assert engine.state == RUNNING
        engine.start()
        assert engine.clock is clock

    def test_tick_order(self, engine):
        """Time, controls, composer, labels, then present."""
        manager = Mock()
        manager.clock.get_delta.return_value = 0.016
        engine.start()
        engine.clock = manager.clock
        engine.controls = manager.controls
        engine.composer = manager.composer
        engine.label_renderer = manager.label_renderer
        engine.window = manager.window

        engine.tick()

        assert manager.mock_calls == [
            call.clock.get_delta(),
            call.controls.update(),
            call.composer.render(),
            call.label_renderer.render(engine.scene, engine.camera),
            call.window.flip(),
        ]
        assert engine.elapsed_time == pytest.approx(0.016)

    def test_quit_and_escape_close(self, engine):
        assert engine.handle_event(pygame.event.Event(pygame.QUIT)) is False
        escape = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE, mod=0, unicode="\x1b", scancode=41)
        assert engine.handle_event(escape) is False

    def test_mouse_events_reach_controls(self, engine):
        engine.controls = Mock()
        event = pygame.event.Event(pygame.MOUSEWHEEL, x=0, y=1)
        assert engine.handle_event(event) is True
        engine.controls.handle_event.assert_called_once_with(event)


class TestElapsedClock:
    def test_accumulates_deltas(self):
        times = iter([1.0, 1.5, 1.75])
        clock = ElapsedClock(now=lambda: next(times))
        assert clock.get_delta() == pytest.approx(0.5)
        assert clock.get_delta() == pytest.approx(0.25)
        assert clock.elapsed == pytest.approx(0.75)
