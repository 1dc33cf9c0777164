import math

import pytest
from yapcsg.geom import *
from yapcsg.shapes import *
from yapcsg.solid import FacetSolid, bounds, union
from yapcsg.geometry_checks import is_watertight, signed_volume, volume


class TestPrimitives:

    def test_cube(self):
        c = cube(1, 2, 3)
        assert c.dim == 3
        assert len(c.facets) == 12
        assert signed_volume(c) == pytest.approx(6.0)
        assert is_watertight(c).ok
        assert bounds(c) == [point(0, 0, 0), point(1, 2, 3)]

    def test_centered_cube(self):
        c = cube(2, 2, 2, center=True)
        assert bounds(c) == [point(-1, -1, -1), point(1, 1, 1)]
        assert signed_volume(c) == pytest.approx(8.0)

    def test_cube_faces_outward(self):
        c = cube(1, 1, 1)
        mid = point(0.5, 0.5, 0.5)
        for f in c.facets:
            assert dot(f.area_vector(), sub(f.v1, mid)) > 0

    @pytest.mark.parametrize('dims', [(0, 1, 1), (1, -1, 1), (1, 1, 0)])
    def test_bad_cube(self, dims):
        with pytest.raises(ValueError):
            cube(*dims)

    def test_rectangle(self):
        r = rectangle(2, 3)
        assert r.dim == 2
        assert len(r.facets) == 2
        for f in r.facets:
            assert f.area_vector()[2] < 0
        assert sum(mag(f.area_vector()) for f in r.facets) / 2.0 == pytest.approx(6.0)

    def test_triangle(self):
        t = triangle(2, 1)
        assert t.dim == 2
        assert len(t.facets) == 1
        assert t.facets[0].area_vector()[2] < 0
        with pytest.raises(ValueError):
            triangle(0, 1)


class TestExtrude:

    def test_box(self):
        e = linear_extrude(rectangle(1, 2), 3)
        assert e.dim == 3
        assert len(e.facets) == 12
        assert is_watertight(e).ok
        assert signed_volume(e) == pytest.approx(6.0)
        assert bounds(e) == [point(0, 0, 0), point(1, 2, 3)]

    def test_slices(self):
        e = linear_extrude(triangle(2, 2), 4, slices=4)
        assert is_watertight(e).ok
        assert signed_volume(e) == pytest.approx(8.0)

    def test_upward_base_is_flipped(self):
        up = FacetSolid(2, [f.flip() for f in rectangle(1, 1).facets])
        assert signed_volume(linear_extrude(up, 1)) == pytest.approx(1.0)

    def test_twist(self):
        e = linear_extrude(rectangle(1, 1), 2, rotation=math.pi / 16, slices=4)
        assert is_watertight(e).ok
        assert signed_volume(e) > 0
        top = [v for f in e.facets for v in f.vertices if close(v[2], 2.0)]
        c, s = math.cos(math.pi / 4), math.sin(math.pi / 4)
        assert any(vclose(v, point(c - s, s + c, 2)) for v in top)

    def test_extrusion_in_boolean(self):
        e = linear_extrude(rectangle(1, 1), 1)
        u = union(e, translate(cube(1, 1, 1), 0.5, 0.5, 0.5))
        assert volume(u) == pytest.approx(1.875, abs=1e-6)

    def test_bad_input(self):
        with pytest.raises(ValueError):
            linear_extrude(cube(1, 1, 1), 1)
        with pytest.raises(ValueError):
            linear_extrude(rectangle(1, 1), 0)
        with pytest.raises(ValueError):
            linear_extrude(rectangle(1, 1), 1, slices=0)


class TestTransforms:

    def test_translate(self):
        c = translate(cube(1, 1, 1), 1, 2, 3)
        assert bounds(c) == [point(1, 2, 3), point(2, 3, 4)]
        r = translate(rectangle(1, 1), 1, 0, 0)
        assert r.dim == 2

    def test_scale(self):
        c = scale(cube(1, 1, 1), 2, 3, 4)
        assert signed_volume(c) == pytest.approx(24.0)

    @pytest.mark.parametrize('factors', [(-1, 1, 1), (1, -2, 1), (-1, -1, -1)])
    def test_mirror_keeps_orientation(self, factors):
        c = scale(cube(1, 1, 1), *factors)
        assert signed_volume(c) == pytest.approx(abs(factors[0] * factors[1] * factors[2]))

    def test_even_mirror(self):
        c = scale(cube(1, 1, 1), -1, -1, 1)
        assert signed_volume(c) == pytest.approx(1.0)

    def test_zero_scale(self):
        with pytest.raises(ValueError):
            scale(cube(1, 1, 1), 0, 1, 1)
