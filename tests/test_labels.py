"""Tests for label projection and layout."""

import numpy as np
import pytest

from camera import PerspectiveCamera
from core.object3d import Object3D
from core.scene import Scene
from ui.label_renderer import Label, LabelRenderer, project_point
from ui.text_renderer import centered_origin


@pytest.fixture
def camera():
    cam = PerspectiveCamera(75, 800 / 600, 0.1, 1000.0, position=(0, 0, 10))
    cam.look_at((0, 0, 0))
    return cam


def _project(camera, point, size=(800, 600)):
    return project_point(point, camera.view_matrix, camera.projection_matrix, size)


class TestProjectPoint:
    def test_view_axis_projects_to_center(self, camera):
        x, y, depth = _project(camera, (0, 0, 0))
        assert (x, y) == pytest.approx((400, 300))
        assert -1.0 < depth < 1.0

    def test_up_is_towards_top_of_window(self, camera):
        _, y, _ = _project(camera, (0, 1, 0))
        assert y < 300

    def test_behind_camera_hidden(self, camera):
        assert _project(camera, (0, 0, 20)) is None

    def test_beyond_far_plane_hidden(self, camera):
        assert _project(camera, (0, 0, -2000)) is None


class TestLabelRenderer:
    def test_size_follows_set_size(self):
        renderer = LabelRenderer((800, 600))
        renderer.set_size(1024, 768)
        assert renderer.size == (1024, 768)
        assert (renderer.text.width, renderer.text.height) == (1024, 768)

    def test_layout_places_visible_labels(self, camera):
        scene = Scene()
        body = Object3D(position=(0, 0, 0))
        body.add(Label("Earth", position=(0, 1.5, 0)))
        scene.add(body)
        placements = LabelRenderer((800, 600)).layout(scene, camera)
        assert len(placements) == 1
        assert placements[0].label.text == "Earth"
        assert placements[0].x == pytest.approx(400)
        assert placements[0].y < 300

    def test_hidden_parent_hides_label(self, camera):
        scene = Scene()
        body = Object3D()
        body.add(Label("Mars"))
        body.visible = False
        scene.add(body)
        assert LabelRenderer((800, 600)).layout(scene, camera) == []

    def test_farthest_first(self, camera):
        scene = Scene()
        scene.add(Label("near", position=(0, 0, 5)), Label("far", position=(0, 0, -50)))
        placements = LabelRenderer((800, 600)).layout(scene, camera)
        assert [p.label.text for p in placements] == ["far", "near"]

    def test_no_font_needed_to_construct(self):
        renderer = LabelRenderer((800, 600))
        assert renderer.text._font is None


class TestCenteredText:
    def test_box_centered_on_anchor(self):
        assert centered_origin(400, 300, (80, 20)) == (360, 290)

    def test_odd_sizes_keep_half_pixels(self):
        assert centered_origin(10, 10, (5, 3)) == (7.5, 8.5)
