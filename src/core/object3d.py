from __future__ import annotations

from typing import Iterator, List, Optional

from pygame.math import Vector3


class Object3D:
    """Scene-graph node: a local position plus owned children.

    Nodes carry no rotation or scale; a child's world position is its
    parent's world position offset by its own.
    """

    def __init__(self, position=None, name: str = ""):
        self.name = name
        self.position = Vector3(position) if position is not None else Vector3(0, 0, 0)
        self.parent: Optional[Object3D] = None
        self.children: List[Object3D] = []
        self.visible = True

    def add(self, *objects: "Object3D") -> "Object3D":
        for obj in objects:
            if obj is self:
                raise ValueError("an object can't be added as a child of itself")
            if obj.parent is not None:
                obj.parent.remove(obj)
            obj.parent = self
            self.children.append(obj)
        return self

    def remove(self, *objects: "Object3D") -> "Object3D":
        for obj in objects:
            if obj in self.children:
                self.children.remove(obj)
                obj.parent = None
        return self

    def traverse(self) -> Iterator["Object3D"]:
        """Yield this node and every descendant, depth first."""
        yield self
        for child in self.children:
            yield from child.traverse()

    def world_position(self) -> Vector3:
        pos = Vector3(self.position)
        node = self.parent
        while node is not None:
            pos += node.position
            node = node.parent
        return pos

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, position={tuple(self.position)})"
