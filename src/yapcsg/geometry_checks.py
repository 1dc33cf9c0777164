"""Validation helpers for yapCSG meshes.

Each check accepts either a solid or a sequence of facets.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import List

from yapcsg.geom import add, bbox, cross, dot, epsilon, isinsidebbox, scale3, sub
from yapcsg.polygon import Facet


def _facets_of(x) -> List[Facet]:
    from yapcsg.solid import facets, issolid

    if issolid(x):
        return list(facets(x))
    return list(x)


def _point_to_key(p, tol=epsilon):
    """Convert a point to a hashable key for edge/vertex identification,
    rounding coordinates to the tolerance grid."""
    return (round(p[0] / tol), round(p[1] / tol), round(p[2] / tol))


def _canonical_edge_key(p1, p2, tol=epsilon):
    """edge key with the endpoints in sorted order, so (p1,p2) and
    (p2,p1) map to the same edge"""
    k1 = _point_to_key(p1, tol)
    k2 = _point_to_key(p2, tol)
    return (min(k1, k2), max(k1, k2))


def edge_census(x, tol: float = epsilon) -> Counter:
    """count the facets sharing each (undirected) edge"""
    edges: Counter = Counter()
    for f in _facets_of(x):
        for a, b in f.edges:
            edges[_canonical_edge_key(a, b, tol)] += 1
    return edges


def is_watertight(x, tol: float = epsilon) -> "CheckResult":
    """A mesh is watertight if every edge is shared by exactly two facets."""
    edges = edge_census(x, tol)
    boundary = [edge for edge, count in edges.items() if count == 1]
    invalid = [edge for edge, count in edges.items() if count > 2]

    warnings: List[str] = []
    ok = True
    if not edges:
        warnings.append('no facets found')
    if boundary:
        ok = False
        warnings.append(f'{len(boundary)} boundary edges detected')
    if invalid:
        ok = False
        warnings.append(f'{len(invalid)} edges with multiplicity >2')
    return CheckResult(ok, warnings)


def signed_volume(x) -> float:
    """Volume enclosed by a closed mesh, by the divergence theorem: each
    facet contributes the signed volume of the tetrahedron it forms with
    the origin.  Negative for an inside-out mesh."""
    total = 0.0
    for f in _facets_of(x):
        total += dot(f.v1, cross(sub(f.v2, f.v1), sub(f.v3, f.v1))) / 6.0
    return total


def volume(x) -> float:
    """Volume enclosed by a closed mesh.

    >>> from yapcsg.shapes import cube
    >>> abs(volume(cube(2, 2, 2)) - 8.0) < 0.001
    True
    """
    return abs(signed_volume(x))


## ray hits are resolved far more finely than mesh vertices are merged
_DEFAULT_RAY_TOL = 1e-7

_DIRECTIONS = ((1.0, 0.0, 0.0), (-1.0, 0.0, 0.0),
               (0.0, 1.0, 0.0), (0.0, -1.0, 0.0),
               (0.0, 0.0, 1.0), (0.0, 0.0, -1.0))


def _ray_triangle_intersection(origin, direction, f: Facet, tol=epsilon):
    """Moller-Trumbore; return the ray parameter of the hit or None"""
    e1 = sub(f.v2, f.v1)
    e2 = sub(f.v3, f.v1)
    h = cross(direction, e2)
    a = dot(e1, h)
    if abs(a) < tol:
        return None
    inv = 1.0 / a
    s = sub(origin, f.v1)
    u = inv * dot(s, h)
    if u < -tol or u > 1.0 + tol:
        return None
    q = cross(s, e1)
    v = inv * dot(direction, q)
    if v < -tol or u + v > 1.0 + tol:
        return None
    t = inv * dot(e2, q)
    if t < -tol:
        return None
    return t


def _group_hits(hits, tol):
    if not hits:
        return []
    hits.sort(key=lambda x: x[0])
    groups = [[hits[0]]]
    for hit in hits[1:]:
        if abs(hit[0] - groups[-1][-1][0]) <= tol:
            groups[-1].append(hit)
        else:
            groups.append([hit])
    return groups


def contains_point(x, p, tol: float = _DEFAULT_RAY_TOL) -> bool:
    """Point membership by ray parity.

    Rays are cast along the six axis directions; the point is inside
    only if every ray crosses the boundary an odd number of times.  Hits
    at the same distance (a ray through a shared edge) with the same
    crossing sense count once.  Points on the boundary are inside.
    """
    tris = _facets_of(x)
    if not tris:
        return False
    box = bbox(v for f in tris for v in f.vertices)
    grown = [sub(box[0], (tol, tol, tol)), add(box[1], (tol, tol, tol))]
    if not isinsidebbox(grown, p):
        return False

    for direction in _DIRECTIONS:
        hits = []
        for f in tris:
            t = _ray_triangle_intersection(p, direction, f, tol)
            if t is None:
                continue
            if t <= tol:
                return True
            normal = cross(sub(f.v2, f.v1), sub(f.v3, f.v1))
            sign = -1 if dot(normal, direction) > 0 else 1
            hits.append((t, sign))
        parity = 0
        for group in _group_hits(hits, tol):
            if sum(hit[1] for hit in group) != 0:
                parity ^= 1
        if parity == 0:
            return False
    return True


def centroid(f: Facet):
    return scale3(add(f.v1, add(f.v2, f.v3)), 1.0 / 3.0)


@dataclass
class CheckResult:
    ok: bool
    warnings: List[str]

    def __bool__(self) -> bool:
        return self.ok


__all__ = [
    'CheckResult',
    'edge_census',
    'is_watertight',
    'signed_volume',
    'volume',
    'contains_point',
    'centroid',
]
