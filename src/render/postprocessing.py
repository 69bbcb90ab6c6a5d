"""Post-processing: off-screen render targets, passes and the composer.

The composer owns two ping-pong targets sized ``size * pixel_ratio``. Each
pass reads the previous result and either writes into the other target or,
for the last enabled pass, straight to the window. GL objects are created
on first use, so the whole chain can be built and resized before a context
exists.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from OpenGL.GL import (
    glGenFramebuffers,
    glBindFramebuffer,
    glFramebufferTexture2D,
    glFramebufferRenderbuffer,
    glGenRenderbuffers,
    glBindRenderbuffer,
    glRenderbufferStorage,
    glGenTextures,
    glBindTexture,
    glActiveTexture,
    glTexImage2D,
    glTexParameteri,
    glEnable,
    glDisable,
    glBlendFunc,
    glViewport,
    GL_FRAMEBUFFER,
    GL_RENDERBUFFER,
    GL_COLOR_ATTACHMENT0,
    GL_DEPTH_ATTACHMENT,
    GL_DEPTH_COMPONENT24,
    GL_TEXTURE_2D,
    GL_TEXTURE0,
    GL_RGBA16F,
    GL_RGBA,
    GL_FLOAT,
    GL_TEXTURE_MIN_FILTER,
    GL_TEXTURE_MAG_FILTER,
    GL_TEXTURE_WRAP_S,
    GL_TEXTURE_WRAP_T,
    GL_LINEAR,
    GL_CLAMP_TO_EDGE,
    GL_BLEND,
    GL_ONE,
    GL_DEPTH_TEST,
    GL_LIGHTING,
)

from render.shaders import (
    ShaderProgram,
    COPY_FRAGMENT_SHADER,
    LUMINOSITY_HIGH_PASS_SHADER,
    COMPOSITE_SHADER,
    blur_shader_source,
    draw_fullscreen_quad,
    gaussian_coefficients,
)


class RenderTarget:
    """Framebuffer with a half-float color texture and a depth buffer."""

    def __init__(self, width: int, height: int, *, depth: bool = True) -> None:
        self.width = max(1, int(width))
        self.height = max(1, int(height))
        self.depth = depth
        self.fbo: Optional[int] = None
        self.texture: Optional[int] = None
        self._depth_rb: Optional[int] = None
        self._dirty = True

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def set_size(self, width: int, height: int) -> None:
        width, height = max(1, int(width)), max(1, int(height))
        if (width, height) != (self.width, self.height):
            self.width, self.height = width, height
            self._dirty = True

    def _allocate(self) -> None:  # pragma: no cover - visual
        if self.fbo is None:
            self.fbo = glGenFramebuffers(1)
            self.texture = glGenTextures(1)
            if self.depth:
                self._depth_rb = glGenRenderbuffers(1)

        glBindTexture(GL_TEXTURE_2D, self.texture)
        glTexImage2D(GL_TEXTURE_2D, 0, GL_RGBA16F, self.width, self.height, 0, GL_RGBA, GL_FLOAT, None)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MIN_FILTER, GL_LINEAR)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MAG_FILTER, GL_LINEAR)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_S, GL_CLAMP_TO_EDGE)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_T, GL_CLAMP_TO_EDGE)

        glBindFramebuffer(GL_FRAMEBUFFER, self.fbo)
        glFramebufferTexture2D(GL_FRAMEBUFFER, GL_COLOR_ATTACHMENT0, GL_TEXTURE_2D, self.texture, 0)
        if self.depth:
            glBindRenderbuffer(GL_RENDERBUFFER, self._depth_rb)
            glRenderbufferStorage(GL_RENDERBUFFER, GL_DEPTH_COMPONENT24, self.width, self.height)
            glFramebufferRenderbuffer(GL_FRAMEBUFFER, GL_DEPTH_ATTACHMENT, GL_RENDERBUFFER, self._depth_rb)
        self._dirty = False

    def bind(self) -> None:  # pragma: no cover - visual
        if self._dirty:
            self._allocate()
        glBindFramebuffer(GL_FRAMEBUFFER, self.fbo)
        glViewport(0, 0, self.width, self.height)

    def bind_texture(self, unit: int = 0) -> None:  # pragma: no cover - visual
        glActiveTexture(GL_TEXTURE0 + unit)
        glBindTexture(GL_TEXTURE_2D, self.texture)


class Pass:
    enabled = True
    need_swap = True

    def __init__(self) -> None:
        self.render_to_screen = False

    def set_size(self, width: int, height: int) -> None:
        pass

    def render(self, renderer, write_target: RenderTarget, read_target: RenderTarget) -> None:
        raise NotImplementedError


class RenderPass(Pass):
    """Draws the scene into the read target (or the screen when last)."""

    need_swap = False

    def __init__(self, scene, camera) -> None:
        super().__init__()
        self.scene = scene
        self.camera = camera

    def render(self, renderer, write_target, read_target) -> None:  # pragma: no cover - visual
        renderer.render(self.scene, self.camera, target=None if self.render_to_screen else read_target)


_COPY = ShaderProgram(COPY_FRAGMENT_SHADER)


def _copy_texture(target: Optional[RenderTarget], source: RenderTarget, renderer, *, additive: bool = False) -> None:  # pragma: no cover - visual
    renderer.set_render_target(target)
    _COPY.use()
    source.bind_texture(0)
    _COPY.set_int("tDiffuse", 0)
    _COPY.set_float("opacity", 1.0)
    if additive:
        glEnable(GL_BLEND)
        glBlendFunc(GL_ONE, GL_ONE)
    draw_fullscreen_quad()
    if additive:
        glDisable(GL_BLEND)
    ShaderProgram.stop()


class BloomPass(Pass):
    """Glow around bright regions (mip-chain Gaussian bloom).

    Pixels whose luminance clears ``threshold`` are extracted, blurred at
    five successively halved resolutions and recombined with per-level
    weights shaped by ``radius``; the result is added onto the image at
    ``strength``.
    """

    need_swap = False
    N_MIPS = 5
    KERNEL_SIZES = (3, 5, 7, 9, 11)
    BLOOM_FACTORS = (1.0, 0.8, 0.6, 0.4, 0.2)
    SMOOTH_WIDTH = 0.01

    def __init__(self, resolution: Tuple[int, int], strength: float = 1.0, radius: float = 0.0, threshold: float = 0.0) -> None:
        super().__init__()
        self.strength = float(strength)
        self.radius = float(radius)
        self.threshold = float(threshold)
        self.tint = (1.0, 1.0, 1.0)
        self.resolution = (max(1, int(resolution[0])), max(1, int(resolution[1])))

        rx, ry = self._mip_base(*self.resolution)
        self.bright_target = RenderTarget(rx, ry, depth=False)
        self.horizontal_targets: List[RenderTarget] = []
        self.vertical_targets: List[RenderTarget] = []
        for i in range(self.N_MIPS):
            w, h = self._mip_size(rx, ry, i)
            self.horizontal_targets.append(RenderTarget(w, h, depth=False))
            self.vertical_targets.append(RenderTarget(w, h, depth=False))

        self._high_pass = ShaderProgram(LUMINOSITY_HIGH_PASS_SHADER)
        self._blurs = [ShaderProgram(blur_shader_source(k)) for k in self.KERNEL_SIZES]
        self._coefficients = [gaussian_coefficients(k) for k in self.KERNEL_SIZES]
        self._composite = ShaderProgram(COMPOSITE_SHADER)

    @staticmethod
    def _mip_base(width: int, height: int) -> Tuple[int, int]:
        return max(1, round(width / 2)), max(1, round(height / 2))

    @staticmethod
    def _mip_size(base_w: int, base_h: int, level: int) -> Tuple[int, int]:
        return max(1, base_w >> level), max(1, base_h >> level)

    def set_size(self, width: int, height: int) -> None:
        self.resolution = (max(1, int(width)), max(1, int(height)))
        rx, ry = self._mip_base(*self.resolution)
        self.bright_target.set_size(rx, ry)
        for i in range(self.N_MIPS):
            w, h = self._mip_size(rx, ry, i)
            self.horizontal_targets[i].set_size(w, h)
            self.vertical_targets[i].set_size(w, h)

    def render(self, renderer, write_target, read_target) -> None:  # pragma: no cover - visual
        glDisable(GL_DEPTH_TEST)
        glDisable(GL_LIGHTING)

        # 1. luminosity high pass
        self.bright_target.bind()
        self._high_pass.use()
        read_target.bind_texture(0)
        self._high_pass.set_int("tDiffuse", 0)
        self._high_pass.set_float("luminosityThreshold", self.threshold)
        self._high_pass.set_float("smoothWidth", self.SMOOTH_WIDTH)
        draw_fullscreen_quad()

        # 2. blur each mip level, feeding the previous level's output
        source = self.bright_target
        for i in range(self.N_MIPS):
            blur = self._blurs[i]
            h_target = self.horizontal_targets[i]
            v_target = self.vertical_targets[i]

            h_target.bind()
            blur.use()
            source.bind_texture(0)
            blur.set_int("colorTexture", 0)
            blur.set_vec2("invSize", 1.0 / source.width, 1.0 / source.height)
            blur.set_vec2("direction", 1.0, 0.0)
            blur.set_floats("gaussianCoefficients", self._coefficients[i])
            draw_fullscreen_quad()

            v_target.bind()
            h_target.bind_texture(0)
            blur.set_vec2("invSize", 1.0 / h_target.width, 1.0 / h_target.height)
            blur.set_vec2("direction", 0.0, 1.0)
            draw_fullscreen_quad()
            source = v_target

        # 3. composite every level into the first horizontal target
        self.horizontal_targets[0].bind()
        self._composite.use()
        for i, target in enumerate(self.vertical_targets):
            target.bind_texture(i)
            self._composite.set_int(f"blurTexture{i + 1}", i)
        self._composite.set_float("bloomStrength", self.strength)
        self._composite.set_float("bloomRadius", self.radius)
        self._composite.set_floats("bloomFactors", self.BLOOM_FACTORS)
        self._composite.set_vec3("bloomTintColor", self.tint)
        draw_fullscreen_quad()
        ShaderProgram.stop()
        glActiveTexture(GL_TEXTURE0)

        # 4. add the glow onto the scene
        if self.render_to_screen:
            _copy_texture(None, read_target, renderer)
            _copy_texture(None, self.horizontal_targets[0], renderer, additive=True)
        else:
            _copy_texture(read_target, self.horizontal_targets[0], renderer, additive=True)

        glEnable(GL_DEPTH_TEST)


class EffectComposer:
    """Runs a chain of passes over two ping-pong render targets."""

    def __init__(self, renderer) -> None:
        self.renderer = renderer
        self._width, self._height = renderer.size
        self._pixel_ratio = renderer.pixel_ratio
        w, h = self._effective_size()
        self.render_target1 = RenderTarget(w, h)
        self.render_target2 = RenderTarget(w, h)
        self.write_buffer = self.render_target1
        self.read_buffer = self.render_target2
        self.render_to_screen = True
        self.passes: List[Pass] = []

    def _effective_size(self) -> Tuple[int, int]:
        return (
            max(1, int(self._width * self._pixel_ratio)),
            max(1, int(self._height * self._pixel_ratio)),
        )

    @property
    def size(self) -> Tuple[int, int]:
        return self._width, self._height

    def add_pass(self, p: Pass) -> None:
        self.passes.append(p)
        p.set_size(*self._effective_size())

    def set_size(self, width: int, height: int) -> None:
        self._width, self._height = int(width), int(height)
        # follow the renderer so targets match its drawing buffer
        self._pixel_ratio = self.renderer.pixel_ratio
        w, h = self._effective_size()
        self.render_target1.set_size(w, h)
        self.render_target2.set_size(w, h)
        for p in self.passes:
            p.set_size(w, h)

    def swap_buffers(self) -> None:
        self.read_buffer, self.write_buffer = self.write_buffer, self.read_buffer

    def _last_enabled_index(self) -> int:
        for i in range(len(self.passes) - 1, -1, -1):
            if self.passes[i].enabled:
                return i
        return -1

    def render(self) -> None:
        last = self._last_enabled_index()
        for i, p in enumerate(self.passes):
            if not p.enabled:
                continue
            p.render_to_screen = self.render_to_screen and i == last
            p.render(self.renderer, self.write_buffer, self.read_buffer)
            if p.need_swap:
                self.swap_buffers()
