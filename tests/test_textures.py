"""Tests for asynchronous texture decoding."""

import pygame
import pytest

from textures.texture_utils import (
    FAILED,
    READY,
    CubeTexture,
    Texture,
    load_cube_texture,
    load_texture,
)


@pytest.fixture
def image_file(tmp_path):
    """A small 4x2 red BMP on disk."""
    surface = pygame.Surface((4, 2))
    surface.fill((255, 0, 0))
    path = tmp_path / "red.bmp"
    pygame.image.save(surface, str(path))
    return str(path)


class TestTexture:
    def test_loads_in_background(self, image_file):
        texture = load_texture(image_file)
        assert texture.wait(timeout=5) == READY
        assert texture.size == (4, 2)
        assert len(texture.pixels) == 4 * 2 * 4
        assert texture.pixels[:4] == b"\xff\x00\x00\xff"

    def test_missing_file_fails_quietly(self, tmp_path, capsys):
        """A missing file settles as failed and prints one warning."""
        texture = load_texture(str(tmp_path / "nope.jpg"))
        assert texture.wait(timeout=5) == FAILED
        assert texture.pixels is None
        assert "nope.jpg" in capsys.readouterr().out

    def test_placeholder_returned_before_decode(self, image_file):
        texture = Texture(image_file)
        assert texture.state == "pending"
        assert not texture.ready and not texture.failed


class TestCubeTexture:
    def test_needs_six_faces(self):
        with pytest.raises(ValueError):
            CubeTexture([])

    def test_failed_faces_filled_black(self, image_file, tmp_path):
        files = [image_file] * 5 + [str(tmp_path / "missing.jpg")]
        cube = load_cube_texture(files)
        cube.wait(timeout=5)
        assert cube.settled and cube.usable
        data = cube.face_data()
        assert len(data) == 6
        black, size = data[5]
        assert size == (4, 2)
        assert black == bytes(4 * 2 * 4)

    def test_all_faces_missing_is_unusable(self, tmp_path):
        cube = load_cube_texture([str(tmp_path / f"{i}.jpg") for i in range(6)])
        cube.wait(timeout=5)
        assert cube.settled
        assert not cube.usable
