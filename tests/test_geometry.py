"""Tests for sphere tessellation and the scene graph."""

import numpy as np
import pytest

from core.mesh import Mesh, SphereGeometry
from core.object3d import Object3D
from core.scene import Scene


class TestSphereGeometry:
    """UV sphere vertex and index layout."""

    def test_counts(self):
        geo = SphereGeometry(1.0, 32, 16)
        assert geo.vertex_count == 33 * 17
        # pole rows contribute one triangle per quad, the rest two
        assert geo.index_count == 2880

    def test_vertices_lie_on_radius(self):
        geo = SphereGeometry(2.5, 16, 8)
        positions = geo.vertices[:, 0:3]
        np.testing.assert_allclose(np.linalg.norm(positions, axis=1), 2.5, rtol=1e-5)

    def test_normals_are_unit_and_outward(self):
        geo = SphereGeometry(3.0, 16, 8)
        normals = geo.vertices[:, 3:6]
        np.testing.assert_allclose(np.linalg.norm(normals, axis=1), 1.0, rtol=1e-5)
        np.testing.assert_allclose(geo.vertices[:, 0:3] / 3.0, normals, atol=1e-5)

    def test_uvs_in_unit_range(self):
        uvs = SphereGeometry(1.0).vertices[:, 6:8]
        assert uvs.min() >= 0.0 and uvs.max() <= 1.0

    def test_indices_in_range(self):
        geo = SphereGeometry(1.0, 12, 6)
        assert geo.indices.dtype == np.uint32
        assert geo.indices.max() < geo.vertex_count

    @pytest.mark.parametrize("radius", [0.0, -1.0])
    def test_rejects_non_positive_radius(self, radius):
        with pytest.raises(ValueError):
            SphereGeometry(radius)


class TestSceneGraph:
    """Parenting, traversal and world positions."""

    def test_child_world_position_follows_parent(self):
        parent = Object3D(position=(20, 0, 0))
        child = Object3D(position=(0, 1.5, 0))
        parent.add(child)
        assert tuple(child.world_position()) == pytest.approx((20, 1.5, 0))

    def test_add_reparents(self):
        a, b, child = Object3D(), Object3D(), Object3D()
        a.add(child)
        b.add(child)
        assert child.parent is b
        assert child not in a.children

    def test_cannot_add_self(self):
        node = Object3D()
        with pytest.raises(ValueError):
            node.add(node)

    def test_traverse_is_depth_first(self):
        root = Scene()
        a = Object3D(name="a")
        a1 = Object3D(name="a1")
        b = Object3D(name="b")
        root.add(a, b)
        a.add(a1)
        assert [n.name for n in root.traverse()] == ["Scene", "a", "a1", "b"]

    def test_find_all_by_type(self):
        root = Scene()
        mesh = Mesh(SphereGeometry(1.0, 8, 4), material=None)
        root.add(Object3D(), mesh)
        assert root.find_all(Mesh) == [mesh]
