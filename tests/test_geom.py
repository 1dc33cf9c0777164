import pytest
from yapcsg.geom import *


class TestPoints:

    def test_point_coercion(self):
        assert point(1, 2, 3) == (1.0, 2.0, 3.0)
        assert point([1, 2, 3]) == (1.0, 2.0, 3.0)
        assert point(1, 2) == (1.0, 2.0, 0.0)
        assert ispoint(point(1, 2, 3))
        assert not ispoint((1.0, 2.0))
        assert not ispoint('abc')

    def test_vector_ops(self):
        a = point(1, 2, 3)
        b = point(4, 5, 6)
        assert add(a, b) == (5, 7, 9)
        assert sub(b, a) == (3, 3, 3)
        assert dot(a, b) == 32
        assert cross(point(1, 0, 0), point(0, 1, 0)) == (0, 0, 1)
        assert neg(a) == (-1, -2, -3)
        assert scale3(a, 2) == (2, 4, 6)
        assert mul(a, b) == (4, 10, 18)
        assert close(mag(point(3, 4, 0)), 5.0)

    def test_unit(self):
        assert vclose(unit(point(0, 0, 5)), point(0, 0, 1))
        with pytest.raises(ValueError):
            unit(point(0, 0, 0))

    def test_lerp(self):
        assert lerp(point(0, 0, 0), point(2, 4, 6), 0.5) == (1, 2, 3)

    def test_vclose(self):
        assert vclose(point(1, 1, 1), point(1 + epsilon / 2, 1, 1))
        assert not vclose(point(1, 1, 1), point(1.001, 1, 1))


class TestBetween:

    a = point(0, 0, 0)
    b = point(2, 0, 0)

    def test_interior(self):
        assert between(point(1, 0, 0), self.a, self.b)
        assert between(point(0.5, epsilon / 10, 0), self.a, self.b)

    def test_endpoints_excluded(self):
        assert not between(self.a, self.a, self.b)
        assert not between(self.b, self.a, self.b)
        assert not between(point(epsilon / 10, 0, 0), self.a, self.b)

    def test_off_segment(self):
        assert not between(point(3, 0, 0), self.a, self.b)
        assert not between(point(-1, 0, 0), self.a, self.b)
        assert not between(point(1, 0.01, 0), self.a, self.b)

    def test_degenerate_segment(self):
        assert not between(point(0, 0, 0), self.a, self.a)


class TestBoxes:

    def test_bbox(self):
        pts = [point(1, 5, -1), point(-2, 0, 3), point(0, 1, 0)]
        assert bbox(pts) == [point(-2, 0, -1), point(1, 5, 3)]
        assert bbox([]) == []

    def test_inside_inclusive(self):
        box = [point(0, 0, 0), point(1, 1, 1)]
        assert isinsidebbox(box, point(0, 0.5, 1))
        assert isinsidebbox(box, point(1, 1, 1))
        assert not isinsidebbox(box, point(1.01, 0.5, 0.5))

    def test_overlap(self):
        b1 = [point(0, 0, 0), point(1, 1, 1)]
        b2 = [point(0.5, 0.5, 0.5), point(2, 2, 2)]
        b3 = [point(5, 0, 0), point(6, 1, 1)]
        touching = [point(1, 0, 0), point(2, 1, 1)]
        assert boxoverlap(b1, b2)
        assert boxoverlap(b2, b1)
        assert not boxoverlap(b1, b3)
        assert boxoverlap(b1, touching)

    def test_vstr(self):
        assert vstr(point(1, 2, 3)) == '(1, 2, 3)'
        assert vstr([point(0, 0, 0), point(1, 1, 1)]) == '[(0, 0, 0), (1, 1, 1)]'
