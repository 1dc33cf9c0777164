import pytest
from yapcsg.geom import *
from yapcsg.octtree import Octree
from yapcsg.polygon import Facet, valid_facet
from yapcsg.repair import insert_point, insert_points, split_at_points

f = Facet(point(0, 0, 0), point(2, 0, 0), point(0, 2, 0))


def area(facets):
    return sum(mag(g.area_vector()) for g in facets) / 2.0


def same_winding(facets, normal):
    return all(dot(g.area_vector(), normal) > 0 for g in facets)


class TestInsertPoint:

    @pytest.mark.parametrize('p', [point(1, 0, 0), point(1, 1, 0), point(0, 1, 0)])
    def test_edge_points(self, p):
        parts = insert_point(f, p)
        assert len(parts) == 2
        assert close(area(parts), 2.0)
        assert same_winding(parts, point(0, 0, 1))
        assert all(p in g.vertices for g in parts)

    def test_vertex_is_not_split(self):
        assert insert_point(f, point(2, 0, 0)) == [f]

    def test_interior_point_is_not_split(self):
        assert insert_point(f, point(0.5, 0.5, 0)) == [f]

    def test_off_plane_point(self):
        assert insert_point(f, point(1, 0, 1)) == [f]


class TestInsertPoints:

    def test_no_candidates(self):
        t = Octree([point(10, 10, 10)])
        assert insert_points(f, t) == [f]

    def test_corners_only(self):
        t = Octree(list(f.vertices))
        assert insert_points(f, t) == [f]

    def test_one_junction(self):
        t = Octree(list(f.vertices) + [point(1, 0, 0)])
        parts = insert_points(f, t)
        assert len(parts) == 2
        assert close(area(parts), 2.0)

    def test_all_edges(self):
        mids = [point(1, 0, 0), point(1, 1, 0), point(0, 1, 0)]
        t = Octree(list(f.vertices) + mids)
        parts = insert_points(f, t)
        assert len(parts) == 4
        assert close(area(parts), 2.0)
        assert same_winding(parts, point(0, 0, 1))
        # no indexed point is left on the edge of a fragment
        for g in parts:
            assert valid_facet(g)
            for p in mids:
                assert insert_point(g, p) == [g]

    def test_several_points_on_one_edge(self):
        pts = [point(0.5, 0, 0), point(1, 0, 0), point(1.5, 0, 0)]
        parts = split_at_points(f, pts)
        assert len(parts) == 4
        assert close(area(parts), 2.0)
        bottom = sorted(v for g in parts for v in g.vertices if v[1] == 0 and v[0] > 0)
        for p in pts:
            assert p in bottom

    def test_degenerate_fragments_dropped(self):
        # a point just outside tolerance of a corner leaves a sliver
        near = point(2 - 6e-6, 0, 0)
        parts = split_at_points(f, [near])
        assert parts == [Facet(f.v1, near, f.v3)]
