from __future__ import annotations

from typing import List, Optional, Type, TypeVar

from core.object3d import Object3D

T = TypeVar("T", bound=Object3D)


class Scene(Object3D):
    """Root of the scene graph.

    ``background`` is an optional cube texture drawn behind everything.
    Lights, meshes and the camera are ordinary children.
    """

    def __init__(self, background: Optional[object] = None):
        super().__init__(name="Scene")
        self.background = background

    def find_all(self, kind: Type[T]) -> List[T]:
        return [obj for obj in self.traverse() if isinstance(obj, kind)]
