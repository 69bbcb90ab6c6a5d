"""Screen-space name labels anchored to scene-graph nodes.

A ``Label`` is an ordinary child node, so it follows whatever it is attached
to. ``LabelRenderer`` is an independent overlay: each frame it projects
every label anchor through the camera and draws the text centered on the
resulting window pixel, after (and therefore on top of) the 3D pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from config import LABEL_COLOR, LABEL_FONT_SIZE
from core.object3d import Object3D
from ui.text_renderer import TextRenderer


class Label(Object3D):
    def __init__(self, text: str, position=None, color=LABEL_COLOR):
        super().__init__(position=position, name=f"{text} label")
        self.text = text
        self.color = tuple(color)


@dataclass
class LabelPlacement:
    label: Label
    x: float
    y: float
    depth: float  # NDC z in [-1, 1]


def project_point(point, view_matrix, projection_matrix, size) -> Optional[Tuple[float, float, float]]:
    """World point -> (x, y, ndc_z) in window pixels, or None when clipped.

    Points behind the camera or outside the near/far range are hidden;
    x/y may still fall outside the window.
    """
    clip = projection_matrix @ (view_matrix @ np.array([point[0], point[1], point[2], 1.0]))
    w = clip[3]
    if w <= 1e-9:
        return None
    ndc = clip[:3] / w
    if not -1.0 <= ndc[2] <= 1.0:
        return None
    width, height = size
    x = (ndc[0] * 0.5 + 0.5) * width
    y = (-ndc[1] * 0.5 + 0.5) * height
    return float(x), float(y), float(ndc[2])


class LabelRenderer:
    def __init__(self, size: Tuple[int, int] = (1, 1), *, font_size: int = LABEL_FONT_SIZE):
        self.width, self.height = int(size[0]), int(size[1])
        self.text = TextRenderer(self.width, self.height, size=font_size)

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def set_size(self, width: int, height: int) -> None:
        self.width, self.height = int(width), int(height)
        self.text.set_size(self.width, self.height)

    def layout(self, scene, camera) -> List[LabelPlacement]:
        """Visible labels with their window positions, farthest first."""
        view = camera.view_matrix
        projection = camera.projection_matrix
        placements = []
        for obj in scene.traverse():
            if not isinstance(obj, Label) or not self._visible(obj):
                continue
            p = obj.world_position()
            projected = project_point((p.x, p.y, p.z), view, projection, self.size)
            if projected is None:
                continue
            x, y, depth = projected
            placements.append(LabelPlacement(obj, x, y, depth))
        placements.sort(key=lambda pl: pl.depth, reverse=True)
        return placements

    @staticmethod
    def _visible(obj: Object3D) -> bool:
        node = obj
        while node is not None:
            if not node.visible:
                return False
            node = node.parent
        return True

    def render(self, scene, camera) -> None:  # pragma: no cover - visual
        placements = self.layout(scene, camera)
        if not placements:
            return
        # draws over whatever viewport the last 3D pass left on the window
        self.text.begin()
        for pl in placements:
            self.text.draw_centered(pl.label.text, pl.x, pl.y, pl.label.color)
        self.text.end()
