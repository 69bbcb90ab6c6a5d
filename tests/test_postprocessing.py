"""Tests for the bloom post-processing chain."""

from types import SimpleNamespace

import numpy as np
import pytest

from core.renderer import Renderer
from render.postprocessing import BloomPass, EffectComposer, Pass, RenderPass
from render.shaders import gaussian_coefficients, lerp_bloom_factor


class RecordingPass(Pass):
    def __init__(self, log, name, need_swap=True):
        super().__init__()
        self.log = log
        self.name = name
        self.need_swap = need_swap

    def render(self, renderer, write_target, read_target):
        self.log.append((self.name, self.render_to_screen, write_target, read_target))


class TestShaderMath:
    @pytest.mark.parametrize("kernel", [3, 5, 7, 9, 11])
    def test_gaussian_weights_normalized(self, kernel):
        w = gaussian_coefficients(kernel)
        assert len(w) == kernel
        assert w[0] + 2.0 * w[1:].sum() == pytest.approx(1.0, abs=1e-5)
        assert np.all(np.diff(w) < 0)

    def test_radius_zero_keeps_factors(self):
        assert [lerp_bloom_factor(f, 0.0) for f in BloomPass.BLOOM_FACTORS] == list(BloomPass.BLOOM_FACTORS)

    def test_radius_one_mirrors_factors(self):
        assert lerp_bloom_factor(1.0, 1.0) == pytest.approx(0.2)


class TestBloomPass:
    def test_mip_chain_sizes(self):
        bloom = BloomPass((800, 600), strength=0.75, radius=0.0, threshold=1.0)
        assert bloom.bright_target.size == (400, 300)
        assert [t.size for t in bloom.horizontal_targets] == [
            (400, 300), (200, 150), (100, 75), (50, 37), (25, 18),
        ]

    def test_set_size_resizes_chain(self):
        bloom = BloomPass((800, 600))
        bloom.set_size(1600, 1200)
        assert bloom.bright_target.size == (800, 600)
        assert bloom.vertical_targets[4].size == (50, 37)

    def test_constants(self):
        assert BloomPass.KERNEL_SIZES == (3, 5, 7, 9, 11)
        assert BloomPass.BLOOM_FACTORS == (1.0, 0.8, 0.6, 0.4, 0.2)


class TestEffectComposer:
    def test_targets_sized_by_pixel_ratio(self):
        renderer = Renderer((800, 600))
        renderer.set_pixel_ratio(2.0)
        composer = EffectComposer(renderer)
        assert composer.size == (800, 600)
        assert composer.render_target1.size == (1600, 1200)

    def test_set_size_follows_renderer_pixel_ratio(self):
        renderer = Renderer((800, 600))
        composer = EffectComposer(renderer)
        bloom = BloomPass((800, 600))
        composer.add_pass(bloom)
        renderer.set_size(1000, 500)
        renderer.set_pixel_ratio(1.5)
        composer.set_size(1000, 500)
        assert composer.size == (1000, 500)
        assert composer.render_target2.size == (1500, 750)
        assert bloom.resolution == (1500, 750)

    def test_only_last_enabled_pass_renders_to_screen(self):
        log = []
        composer = EffectComposer(Renderer((10, 10)))
        composer.add_pass(RecordingPass(log, "scene", need_swap=False))
        composer.add_pass(RecordingPass(log, "bloom", need_swap=False))
        disabled = RecordingPass(log, "off")
        disabled.enabled = False
        composer.add_pass(disabled)
        composer.render()
        assert [(name, to_screen) for name, to_screen, _, _ in log] == [
            ("scene", False), ("bloom", True),
        ]

    def test_swapping_pass_exchanges_buffers(self):
        log = []
        composer = EffectComposer(Renderer((10, 10)))
        composer.add_pass(RecordingPass(log, "a", need_swap=True))
        composer.add_pass(RecordingPass(log, "b", need_swap=False))
        composer.render()
        (_, _, write_a, read_a), (_, _, write_b, read_b) = log
        assert (write_b, read_b) == (read_a, write_a)

    def test_render_pass_does_not_swap(self):
        assert RenderPass(SimpleNamespace(), SimpleNamespace()).need_swap is False
