"""GLSL programs for the post-processing chain.

Programs target GLSL 1.20 so they run on the same compatibility context as
the fixed-function scene pass. Every program shares one vertex shader that
passes the full-screen quad straight through.
"""

from __future__ import annotations

from typing import Dict, Optional, Sequence

import numpy as np
from OpenGL.GL import (
    glUseProgram,
    glGetUniformLocation,
    glUniform1i,
    glUniform1f,
    glUniform2f,
    glUniform3f,
    glUniform1fv,
    glBegin,
    glEnd,
    glTexCoord2f,
    glVertex2f,
    GL_VERTEX_SHADER,
    GL_FRAGMENT_SHADER,
    GL_QUADS,
)
from OpenGL.GL.shaders import compileProgram, compileShader

QUAD_VERTEX_SHADER = """
#version 120
varying vec2 vUv;
void main() {
    vUv = gl_MultiTexCoord0.xy;
    gl_Position = vec4(gl_Vertex.xy, 0.0, 1.0);
}
"""

COPY_FRAGMENT_SHADER = """
#version 120
uniform sampler2D tDiffuse;
uniform float opacity;
varying vec2 vUv;
void main() {
    gl_FragColor = texture2D(tDiffuse, vUv) * opacity;
}
"""

LUMINOSITY_HIGH_PASS_SHADER = """
#version 120
uniform sampler2D tDiffuse;
uniform float luminosityThreshold;
uniform float smoothWidth;
varying vec2 vUv;
void main() {
    vec4 texel = texture2D(tDiffuse, vUv);
    float v = dot(texel.rgb, vec3(0.299, 0.587, 0.114));
    float alpha = smoothstep(luminosityThreshold, luminosityThreshold + smoothWidth, v);
    gl_FragColor = mix(vec4(0.0), texel, alpha);
}
"""

# KERNEL_RADIUS is prepended per mip level
SEPARABLE_BLUR_SHADER = """
uniform sampler2D colorTexture;
uniform vec2 invSize;
uniform vec2 direction;
uniform float gaussianCoefficients[KERNEL_RADIUS];
varying vec2 vUv;
void main() {
    vec3 diffuseSum = texture2D(colorTexture, vUv).rgb * gaussianCoefficients[0];
    for (int i = 1; i < KERNEL_RADIUS; i++) {
        vec2 uvOffset = direction * invSize * float(i);
        vec3 sample1 = texture2D(colorTexture, vUv + uvOffset).rgb;
        vec3 sample2 = texture2D(colorTexture, vUv - uvOffset).rgb;
        diffuseSum += (sample1 + sample2) * gaussianCoefficients[i];
    }
    gl_FragColor = vec4(diffuseSum, 1.0);
}
"""

COMPOSITE_SHADER = """
#version 120
uniform sampler2D blurTexture1;
uniform sampler2D blurTexture2;
uniform sampler2D blurTexture3;
uniform sampler2D blurTexture4;
uniform sampler2D blurTexture5;
uniform float bloomStrength;
uniform float bloomRadius;
uniform float bloomFactors[5];
uniform vec3 bloomTintColor;
varying vec2 vUv;

float lerpBloomFactor(const in float factor) {
    float mirrorFactor = 1.2 - factor;
    return mix(factor, mirrorFactor, bloomRadius);
}

void main() {
    vec4 sum = lerpBloomFactor(bloomFactors[0]) * texture2D(blurTexture1, vUv)
             + lerpBloomFactor(bloomFactors[1]) * texture2D(blurTexture2, vUv)
             + lerpBloomFactor(bloomFactors[2]) * texture2D(blurTexture3, vUv)
             + lerpBloomFactor(bloomFactors[3]) * texture2D(blurTexture4, vUv)
             + lerpBloomFactor(bloomFactors[4]) * texture2D(blurTexture5, vUv);
    gl_FragColor = bloomStrength * vec4(bloomTintColor, 1.0) * sum;
}
"""


def blur_shader_source(kernel_radius: int) -> str:
    return f"#version 120\n#define KERNEL_RADIUS {int(kernel_radius)}\n" + SEPARABLE_BLUR_SHADER


def gaussian_coefficients(kernel_radius: int) -> np.ndarray:
    """One-sided Gaussian weights with sigma = kernel_radius.

    Weight 0 is the center tap; taps 1.. are applied on both sides, so the
    weights are normalized such that ``w[0] + 2 * sum(w[1:]) == 1``.
    """
    sigma = float(kernel_radius)
    i = np.arange(kernel_radius, dtype=np.float64)
    w = 0.39894 * np.exp(-0.5 * i * i / (sigma * sigma)) / sigma
    total = w[0] + 2.0 * w[1:].sum()
    return (w / total).astype(np.float32)


def lerp_bloom_factor(factor: float, radius: float) -> float:
    """CPU mirror of the composite shader's per-mip weighting."""
    mirror = 1.2 - factor
    return factor + (mirror - factor) * radius


class ShaderProgram:
    """Lazily compiled program with cached uniform locations."""

    def __init__(self, fragment_source: str, vertex_source: str = QUAD_VERTEX_SHADER):
        self.vertex_source = vertex_source
        self.fragment_source = fragment_source
        self.program: Optional[int] = None
        self._locations: Dict[str, int] = {}

    def use(self) -> None:  # pragma: no cover - visual
        if self.program is None:
            self.program = compileProgram(
                compileShader(self.vertex_source, GL_VERTEX_SHADER),
                compileShader(self.fragment_source, GL_FRAGMENT_SHADER),
            )
        glUseProgram(self.program)

    def _loc(self, name: str) -> int:  # pragma: no cover - visual
        loc = self._locations.get(name)
        if loc is None:
            loc = glGetUniformLocation(self.program, name)
            self._locations[name] = loc
        return loc

    def set_int(self, name: str, value: int) -> None:  # pragma: no cover - visual
        glUniform1i(self._loc(name), int(value))

    def set_float(self, name: str, value: float) -> None:  # pragma: no cover - visual
        glUniform1f(self._loc(name), float(value))

    def set_vec2(self, name: str, x: float, y: float) -> None:  # pragma: no cover - visual
        glUniform2f(self._loc(name), float(x), float(y))

    def set_vec3(self, name: str, v: Sequence[float]) -> None:  # pragma: no cover - visual
        glUniform3f(self._loc(name), *(float(c) for c in v))

    def set_floats(self, name: str, values: Sequence[float]) -> None:  # pragma: no cover - visual
        arr = np.asarray(values, dtype=np.float32)
        glUniform1fv(self._loc(name), len(arr), arr)

    @staticmethod
    def stop() -> None:  # pragma: no cover - visual
        glUseProgram(0)


def draw_fullscreen_quad() -> None:  # pragma: no cover - visual
    glBegin(GL_QUADS)
    glTexCoord2f(0.0, 0.0)
    glVertex2f(-1.0, -1.0)
    glTexCoord2f(1.0, 0.0)
    glVertex2f(1.0, -1.0)
    glTexCoord2f(1.0, 1.0)
    glVertex2f(1.0, 1.0)
    glTexCoord2f(0.0, 1.0)
    glVertex2f(-1.0, 1.0)
    glEnd()


__all__ = [
    "ShaderProgram",
    "draw_fullscreen_quad",
    "gaussian_coefficients",
    "lerp_bloom_factor",
    "blur_shader_source",
]
