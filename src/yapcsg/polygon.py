"""Planes, convex polygons and triangular facets for yapCSG.

``Polygon`` is the unit the BSP tree works with; ``Facet`` is the
terminal, exported representation.  Both are immutable: flipping,
moving or splitting always produces new values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from yapcsg.geom import (Vec3, add, cross, dot, epsilon, lerp, mag, mul,
                         neg, sub, unit, vclose, vmax, vmin)

## classification of a point or polygon against a plane.  SPANNING is
## FRONT | BACK, so per-vertex types can be or-ed together.
COPLANAR = 0
FRONT = 1
BACK = 2
SPANNING = 3


@dataclass(frozen=True)
class Plane:
    """Oriented plane in Hessian normal form, ``normal . p == w``."""

    normal: Vec3
    w: float

    @classmethod
    def from_points(cls, a, b, c, tol: float = epsilon) -> "Plane":
        try:
            n = unit(cross(sub(b, a), sub(c, a)), tol * tol)
        except ValueError:
            raise ValueError('degenerate points passed to Plane.from_points')
        return cls(n, dot(n, a))

    def flip(self) -> "Plane":
        return Plane(neg(self.normal), -self.w)

    def distance(self, p) -> float:
        """signed distance of ``p``, positive in front of the plane"""
        return dot(self.normal, p) - self.w


@dataclass(frozen=True)
class Polygon:
    """Planar, convex vertex loop.  Counter-clockwise winding, seen from
    the front, faces outward.  The plane is derived from the first three
    vertices unless one is supplied, as it is for split fragments."""

    vertices: Tuple[Vec3, ...]
    plane: Optional[Plane] = field(default=None, compare=False)

    def __post_init__(self):
        if len(self.vertices) < 3:
            raise ValueError('polygon needs at least three vertices')
        object.__setattr__(self, 'vertices', tuple(self.vertices))
        if self.plane is None:
            v = self.vertices
            object.__setattr__(self, 'plane', Plane.from_points(v[0], v[1], v[2]))

    @property
    def normal(self) -> Vec3:
        return self.plane.normal

    def flip(self) -> "Polygon":
        return Polygon(tuple(reversed(self.vertices)), self.plane.flip())

    def facets(self, tol: float = epsilon) -> List["Facet"]:
        return facets_from_vertices(self.vertices, tol)


@dataclass(frozen=True)
class Facet:
    """Exactly three points; the terminal representation of a mesh."""

    v1: Vec3
    v2: Vec3
    v3: Vec3

    @property
    def vertices(self) -> Tuple[Vec3, Vec3, Vec3]:
        return (self.v1, self.v2, self.v3)

    @property
    def edges(self):
        return ((self.v1, self.v2), (self.v2, self.v3), (self.v3, self.v1))

    @property
    def min_bound(self) -> Vec3:
        return vmin(vmin(self.v1, self.v2), self.v3)

    @property
    def max_bound(self) -> Vec3:
        return vmax(vmax(self.v1, self.v2), self.v3)

    def area_vector(self) -> Vec3:
        """cross product of the two edges leaving ``v1``; twice the area
        in magnitude, outward for counter-clockwise winding"""
        return cross(sub(self.v2, self.v1), sub(self.v3, self.v1))

    def normal(self, tol: float = epsilon) -> Vec3:
        return unit(self.area_vector(), tol * tol)

    def flip(self) -> "Facet":
        return Facet(self.v1, self.v3, self.v2)

    def moved(self, x=0.0, y=0.0, z=0.0) -> "Facet":
        d = (x, y, z)
        return Facet(add(self.v1, d), add(self.v2, d), add(self.v3, d))

    def scaled(self, x=1.0, y=1.0, z=1.0) -> "Facet":
        s = (x, y, z)
        return Facet(mul(self.v1, s), mul(self.v2, s), mul(self.v3, s))

    def polygon(self) -> Polygon:
        return Polygon(self.vertices)


def valid_facet(f: Facet, tol: float = epsilon) -> bool:
    """A facet is valid if no two of its vertices are approximately
    equal and it does not collapse onto a line."""
    if vclose(f.v1, f.v2, tol) or vclose(f.v1, f.v3, tol) or vclose(f.v2, f.v3, tol):
        return False
    longest = max(mag(sub(a, b)) for a, b in f.edges)
    # twice the area over the longest edge is the smallest height
    return mag(f.area_vector()) > tol * longest


def facets_from_vertices(vertices: Sequence[Vec3], tol: float = epsilon) -> List[Facet]:
    """fan-triangulate a convex vertex loop, dropping invalid facets"""
    if len(vertices) < 3:
        return []
    anchor = vertices[0]
    result = []
    for i in range(1, len(vertices) - 1):
        f = Facet(anchor, vertices[i], vertices[i + 1])
        if valid_facet(f, tol):
            result.append(f)
    return result


def polygon_from_facet(f: Facet, tol: float = epsilon) -> Optional[Polygon]:
    """lift a facet to a polygon, or ``None`` if it is degenerate"""
    if not valid_facet(f, tol):
        return None
    try:
        return Polygon(f.vertices, Plane.from_points(f.v1, f.v2, f.v3, tol))
    except ValueError:
        return None


def classify_point(plane: Plane, p, tol: float = epsilon) -> int:
    d = plane.distance(p)
    if d > tol:
        return FRONT
    if d < -tol:
        return BACK
    return COPLANAR


def classify_polygon(plane: Plane, polygon: Polygon, tol: float = epsilon) -> int:
    ptype = COPLANAR
    for v in polygon.vertices:
        ptype |= classify_point(plane, v, tol)
    return ptype


def split_polygon(plane: Plane, polygon: Polygon, tol: float = epsilon):
    """Classify ``polygon`` against ``plane`` and split it if needed.

    Returns four lists, ``(coplanar_front, coplanar_back, front, back)``.
    A polygon lying in the plane goes to ``coplanar_front`` if it faces
    the same way as the plane, otherwise to ``coplanar_back``.  A
    spanning polygon is cut at each crossing edge; the crossing point is
    the same object in both fragments.
    """
    coplanar_front: List[Polygon] = []
    coplanar_back: List[Polygon] = []
    front: List[Polygon] = []
    back: List[Polygon] = []

    types = [classify_point(plane, v, tol) for v in polygon.vertices]
    ptype = COPLANAR
    for t in types:
        ptype |= t

    if ptype == COPLANAR:
        if dot(plane.normal, polygon.normal) > 0:
            coplanar_front.append(polygon)
        else:
            coplanar_back.append(polygon)
    elif ptype == FRONT:
        front.append(polygon)
    elif ptype == BACK:
        back.append(polygon)
    else:
        f = []
        b = []
        verts = polygon.vertices
        n = len(verts)
        for i in range(n):
            j = (i + 1) % n
            ti = types[i]
            tj = types[j]
            vi = verts[i]
            vj = verts[j]
            if ti != BACK:
                f.append(vi)
            if ti != FRONT:
                b.append(vi)
            if (ti | tj) == SPANNING:
                t = (plane.w - dot(plane.normal, vi)) / dot(plane.normal, sub(vj, vi))
                v = lerp(vi, vj, t)
                f.append(v)
                b.append(v)
        if len(f) >= 3:
            front.append(Polygon(tuple(f), polygon.plane))
        if len(b) >= 3:
            back.append(Polygon(tuple(b), polygon.plane))

    return coplanar_front, coplanar_back, front, back


def polygons_from_facets(facets: Iterable[Facet], tol: float = epsilon) -> List[Polygon]:
    result = []
    for f in facets:
        p = polygon_from_facet(f, tol)
        if p is not None:
            result.append(p)
    return result
