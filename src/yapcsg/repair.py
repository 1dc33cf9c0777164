"""Crack (T-junction) repair for triangulated BSP solids.

Merging BSP trees leaves vertices of one facet lying on the interior
of a neighbouring facet's edge.  Splitting the neighbour at each such
vertex makes the vertex a declared corner on both sides, so that every
edge of the mesh is shared by exactly two facets again.
"""

from __future__ import annotations

from typing import List, Sequence

from yapcsg.geom import Vec3, add, between, epsilon, sub
from yapcsg.octtree import Octree
from yapcsg.polygon import Facet, valid_facet


def insert_point(facet: Facet, p: Vec3, tol: float = epsilon) -> List[Facet]:
    """Split ``facet`` at ``p`` if ``p`` lies strictly inside one of its
    edges, otherwise return the facet unchanged.  Both halves keep the
    winding of the original."""
    v1, v2, v3 = facet.v1, facet.v2, facet.v3
    if between(p, v1, v2, tol):
        return [Facet(v1, p, v3), Facet(p, v2, v3)]
    if between(p, v2, v3, tol):
        return [Facet(v1, v2, p), Facet(p, v3, v1)]
    if between(p, v3, v1, tol):
        return [Facet(v1, v2, p), Facet(v2, v3, p)]
    return [facet]


def insert_points(facet: Facet, octree: Octree, tol: float = epsilon) -> List[Facet]:
    """Split ``facet`` at every indexed point lying on one of its edges.

    Fragments are re-tested until no candidate point lies on an edge of
    any surviving fragment.  Invalid fragments are discarded.
    """
    d = (tol, tol, tol)
    candidates = octree.contained(sub(facet.min_bound, d), add(facet.max_bound, d))
    if not candidates:
        return [facet]
    return split_at_points(facet, candidates, tol)


def split_at_points(facet: Facet, candidates: Sequence[Vec3],
                    tol: float = epsilon) -> List[Facet]:
    done: List[Facet] = []
    pending = [facet]
    while pending:
        f = pending.pop()
        for p in candidates:
            parts = insert_point(f, p, tol)
            if len(parts) > 1:
                # reversed so the first half is examined first
                pending.extend(part for part in reversed(parts) if valid_facet(part, tol))
                break
        else:
            done.append(f)
    return done
