import numpy as np
import pytest

from yapcsg.geom import point, vclose
from yapcsg.mesh import MeshTriangle, facet_array, mesh_view
from yapcsg.polygon import Facet
from yapcsg.shapes import cube, translate
from yapcsg.solid import FacetSolid, union


def test_mesh_view_cube():
    tris = list(mesh_view(cube(1, 1, 1)))
    assert len(tris) == 12
    assert all(isinstance(t, MeshTriangle) for t in tris)
    normals = {tuple(round(c, 6) for c in t.normal) for t in tris}
    assert len(normals) == 6
    for t in tris:
        if t.v0[2] == 0 and t.v1[2] == 0 and t.v2[2] == 0:
            assert vclose(t.normal, point(0, 0, -1))


def test_mesh_view_skips_degenerate():
    flat = Facet(point(0, 0, 0), point(1, 0, 0), point(2, 0, 0))
    good = Facet(point(0, 0, 0), point(1, 0, 0), point(0, 1, 0))
    tris = list(mesh_view(FacetSolid(3, [flat, good])))
    assert len(tris) == 1
    assert tris[0].v1 == (1, 0, 0)


def test_facet_array():
    arr = facet_array(cube(1, 1, 1))
    assert arr.shape == (12, 3, 3)
    assert arr.dtype == np.float64
    assert arr.min() == 0.0 and arr.max() == 1.0


def test_facet_array_empty():
    assert facet_array(FacetSolid(3, [])).shape == (0, 3, 3)


def test_facet_array_of_boolean():
    u = union(cube(1, 1, 1), translate(cube(1, 1, 1), 0.5, 0.5, 0.5))
    arr = facet_array(u)
    assert arr.ndim == 3 and arr.shape[1:] == (3, 3)
    np.testing.assert_allclose(arr.reshape(-1, 3).min(axis=0), [0, 0, 0], atol=1e-9)
    np.testing.assert_allclose(arr.reshape(-1, 3).max(axis=0), [1.5, 1.5, 1.5], atol=1e-9)
