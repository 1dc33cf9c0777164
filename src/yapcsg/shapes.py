"""Shape generators and soup transforms.

These produce the ``FacetSolid`` soups the boolean operations start
from.  Two-dimensional shapes lie in the XY plane and face down (-z),
the orientation ``linear_extrude`` expects for its base.
"""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

from yapcsg.geom import Vec3, epsilon, point, vclose
from yapcsg.polygon import Facet, facets_from_vertices, valid_facet
from yapcsg.solid import FacetSolid, Solid, map_facets


def rectangle(width, height) -> FacetSolid:
    """``width`` x ``height`` rectangle with a corner at the origin"""
    if width <= 0 or height <= 0:
        raise ValueError('bad rectangle dimensions')
    loop = [point(0, 0, 0), point(0, height, 0),
            point(width, height, 0), point(width, 0, 0)]
    return FacetSolid(2, facets_from_vertices(loop))


def triangle(base, height) -> FacetSolid:
    """right triangle with legs along x (``base``) and y (``height``)"""
    if base <= 0 or height <= 0:
        raise ValueError('bad triangle dimensions')
    loop = [point(0, 0, 0), point(0, height, 0), point(base, height, 0)]
    return FacetSolid(2, facets_from_vertices(loop))


def cube(x, y, z, center=False) -> FacetSolid:
    """rectangular box of twelve outward-facing facets, with its lower
    corner at the origin or, if ``center`` is true, centered on it"""
    if x <= 0 or y <= 0 or z <= 0:
        raise ValueError('bad cube dimensions')
    x0, y0, z0 = (-x / 2.0, -y / 2.0, -z / 2.0) if center else (0.0, 0.0, 0.0)
    x1, y1, z1 = x0 + x, y0 + y, z0 + z
    c = [point(x0, y0, z0), point(x1, y0, z0), point(x1, y1, z0), point(x0, y1, z0),
         point(x0, y0, z1), point(x1, y0, z1), point(x1, y1, z1), point(x0, y1, z1)]
    # counter-clockwise seen from outside
    faces = [(0, 3, 2, 1),  # bottom
             (4, 5, 6, 7),  # top
             (0, 1, 5, 4),  # front
             (2, 3, 7, 6),  # back
             (1, 2, 6, 5),  # right
             (0, 4, 7, 3)]  # left
    result = []
    for face in faces:
        result.extend(facets_from_vertices([c[i] for i in face]))
    return FacetSolid(3, result)


def _perimeter(base: Sequence[Facet], tol: float) -> List[Tuple[Vec3, Vec3]]:
    """directed edges used by exactly one facet of ``base``"""
    edges = [e for f in base for e in f.edges]

    def count(a, b):
        return sum(1 for c, d in edges
                   if (vclose(c, a, tol) and vclose(d, b, tol)) or
                   (vclose(c, b, tol) and vclose(d, a, tol)))

    return [(a, b) for a, b in edges if count(a, b) == 1]


def linear_extrude(obj: FacetSolid, length, rotation=0.0, slices=1,
                   tol: float = epsilon) -> FacetSolid:
    """Extrude a two-dimensional soup along +z.

    ``rotation`` is the twist in radians applied per slice.  The base
    keeps (or is given) its downward orientation and the top is a
    flipped copy, so the result faces outward.
    """
    if not isinstance(obj, FacetSolid) or obj.dim != 2:
        raise ValueError('linear_extrude requires a two-dimensional soup')
    if length <= 0 or slices < 1:
        raise ValueError('bad extrusion parameters')

    base = [f if f.area_vector()[2] <= 0 else f.flip() for f in obj.facets]

    def position(i, v):
        angle = i * rotation
        ca, sa = math.cos(angle), math.sin(angle)
        return (v[0] * ca - v[1] * sa, v[0] * sa + v[1] * ca, i * length / slices)

    sides = []
    for i in range(slices):
        for a, b in _perimeter(base, tol):
            ab, bb = position(i, a), position(i, b)
            at, bt = position(i + 1, a), position(i + 1, b)
            if rotation == 0.0:
                sides.extend(facets_from_vertices([bb, ab, at, bt], tol))
            else:
                for f in (Facet(bb, ab, at), Facet(bb, at, bt)):
                    if valid_facet(f, tol):
                        sides.append(f)

    bottom = [Facet(position(0, f.v1), position(0, f.v2), position(0, f.v3)) for f in base]
    top = [Facet(position(slices, f.v1), position(slices, f.v2),
                 position(slices, f.v3)).flip() for f in base]
    return FacetSolid(3, bottom + sides + top)


def translate(obj: Solid, x=0.0, y=0.0, z=0.0) -> FacetSolid:
    return map_facets(obj, lambda f: f.moved(x, y, z))


def scale(obj: Solid, x=1.0, y=1.0, z=1.0) -> FacetSolid:
    """Scale a solid about the origin.  A mirroring scale (an odd number
    of negative factors) also flips every facet to keep them facing
    outward."""
    if x == 0 or y == 0 or z == 0:
        raise ValueError('scale factors must be nonzero')
    mirrored = ((x < 0) + (y < 0) + (z < 0)) % 2 == 1
    if mirrored:
        return map_facets(obj, lambda f: f.scaled(x, y, z).flip())
    return map_facets(obj, lambda f: f.scaled(x, y, z))


__all__ = ['rectangle', 'triangle', 'cube', 'linear_extrude', 'translate', 'scale']
