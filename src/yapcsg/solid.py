"""Solids and the boolean operations on them.

A solid is one of two variants:

``FacetSolid``
    an unstructured triangle soup, two- or three-dimensional, as
    produced by the shape generators and the soup transforms.

``BSPSolid``
    a three-dimensional solid backed by a ``BSPTree``, as produced by
    the boolean operations.

Operations dispatch on the variant.  None of them mutate an operand;
each returns a new solid, or a ``Future`` resolving to one.  Trees are
built lazily, only when a boolean operation actually needs them, and
the independent steps of a boolean run concurrently on a ``TaskPool``.

The boolean operations come in two forms: ``union_async`` and friends
return a ``concurrent.futures.Future``, while ``union`` and friends
wait for the result.  ::

    a = cube(1, 1, 1)
    b = translate(cube(1, 1, 1), 0.5, 0.5, 0.5)
    mesh = facets(union(a, b))
"""

from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass, field
from functools import cached_property
from typing import Callable, Iterable, Optional, Sequence, Tuple, Union

import numpy as np

from yapcsg.bsp import BSPTree
from yapcsg.geom import Vec3, boxoverlap, epsilon, vmax, vmin
from yapcsg.logging_utils import get_logger
from yapcsg.octtree import Octree
from yapcsg.polygon import (Facet, Polygon, facets_from_vertices,
                            polygons_from_facets, valid_facet)
from yapcsg.repair import insert_points
from yapcsg.tasks import TaskPool, completed, default_pool

logger = get_logger('yapcsg.solid')

_INF = float('inf')
_EMPTY_MIN = (_INF, _INF, _INF)
_EMPTY_MAX = (-_INF, -_INF, -_INF)


def _fold_bounds(points: Iterable[Vec3]) -> Tuple[Vec3, Vec3]:
    lo, hi = _EMPTY_MIN, _EMPTY_MAX
    for p in points:
        lo = vmin(lo, p)
        hi = vmax(hi, p)
    return lo, hi


@dataclass(frozen=True)
class FacetSolid:
    """Triangle soup tagged with its dimension (2 or 3)."""

    dim: int
    facets: Tuple[Facet, ...] = field(repr=False)

    def __post_init__(self):
        if self.dim not in (2, 3):
            raise ValueError('bad solid dimension: ' + str(self.dim))
        object.__setattr__(self, 'facets', tuple(self.facets))

    @cached_property
    def _bounds(self) -> Tuple[Vec3, Vec3]:
        return _fold_bounds(v for f in self.facets for v in f.vertices)

    @property
    def min_bound(self) -> Vec3:
        return self._bounds[0]

    @property
    def max_bound(self) -> Vec3:
        return self._bounds[1]


@dataclass(frozen=True, eq=False)
class BSPSolid:
    """Three-dimensional solid backed by a BSP tree."""

    tree: BSPTree

    @property
    def dim(self) -> int:
        return 3

    @cached_property
    def vertices(self) -> Tuple[Vec3, ...]:
        return tuple(v for p in self.tree.all_polygons() for v in p.vertices)

    @cached_property
    def _bounds(self) -> Tuple[Vec3, Vec3]:
        return _fold_bounds(self.vertices)

    @property
    def min_bound(self) -> Vec3:
        return self._bounds[0]

    @property
    def max_bound(self) -> Vec3:
        return self._bounds[1]


Solid = Union[FacetSolid, BSPSolid]


def issolid(x) -> bool:
    return isinstance(x, (FacetSolid, BSPSolid))


def _check(x, name):
    if not issolid(x):
        raise ValueError('bad solid passed to ' + name)


def _require_3d(x, name):
    _check(x, name)
    if x.dim != 3:
        raise ValueError('{} requires three-dimensional solids'.format(name))


## constructors
## ------------


def from_facets(facets: Iterable[Facet], dim: int = 3) -> FacetSolid:
    return FacetSolid(dim, tuple(facets))


def from_vertices(vertices: Sequence[Vec3], dim: int = 3,
                  tol: float = epsilon) -> FacetSolid:
    """fan-triangulate a single convex vertex loop into a soup"""
    return FacetSolid(dim, facets_from_vertices(vertices, tol))


def from_polygons(polygons: Iterable[Polygon], dim: int = 3,
                  tol: float = epsilon) -> FacetSolid:
    result = []
    for p in polygons:
        result.extend(p.facets(tol))
    return FacetSolid(dim, result)


## bounds
## ------


def min_bound(s: Solid) -> Vec3:
    _check(s, 'min_bound')
    return s.min_bound


def max_bound(s: Solid) -> Vec3:
    _check(s, 'max_bound')
    return s.max_bound


def bounds(s: Solid):
    """return the axis-aligned bounding box ``[min, max]`` of a solid"""
    _check(s, 'bounds')
    return [s.min_bound, s.max_bound]


def overlaps(a: Solid, b: Solid) -> bool:
    """may the solids overlap, judging by their bounding boxes?"""
    return boxoverlap(bounds(a), bounds(b))


def _signed_volume(facets: Iterable[Facet]) -> float:
    from yapcsg.geometry_checks import signed_volume
    return signed_volume(facets)


def is_empty(s: Solid) -> bool:
    """does ``s`` enclose nothing at all?"""
    _check(s, 'is_empty')
    if isinstance(s, BSPSolid):
        return len(s.tree) == 0
    return not s.facets


def _empty() -> FacetSolid:
    return FacetSolid(3, ())


def _bsp_solid(tree: BSPTree) -> BSPSolid:
    # a tree that kept its planes but lost every polygon would still
    # clip later operands
    if len(tree) == 0:
        return BSPSolid(BSPTree())
    return BSPSolid(tree)


def is_complement(s: Solid, tol: float = epsilon) -> bool:
    """Is ``s`` inside out, i.e. the unbounded complement of a finite
    solid?  Judged by the sign of its enclosed volume."""
    _check(s, 'is_complement')
    if s.dim != 3:
        return False
    if isinstance(s, BSPSolid):
        tris = []
        for p in s.tree.all_polygons():
            tris.extend(p.facets(tol))
        return _signed_volume(tris) < -tol
    return _signed_volume(s.facets) < -tol


## trees
## -----


def solid_tree(s: Solid, tol: float = epsilon) -> BSPTree:
    """return the BSP tree of a three-dimensional solid, building it from
    the facets of a soup"""
    _check(s, 'solid_tree')
    if isinstance(s, BSPSolid):
        return s.tree
    if s.dim != 3:
        raise ValueError('cannot convert 2D solid to a BSP tree')
    tree = BSPTree.from_polygons(polygons_from_facets(s.facets, tol), tol)
    logger.debug('built tree from %d facets: %r', len(s.facets), tree)
    return tree


def tree_future(s: Solid, pool: Optional[TaskPool] = None,
                tol: float = epsilon) -> Future:
    _check(s, 'tree_future')
    if isinstance(s, BSPSolid):
        return completed(s.tree)
    if s.dim != 3:
        raise ValueError('cannot convert 2D solid to a BSP tree')
    pool = pool or default_pool()
    return pool.submit(solid_tree, s, tol)


## invert and merge
## ----------------


def invert(s: Solid) -> Solid:
    """return the complement of ``s``: a soup with every facet flipped,
    or a BSP solid with its tree inverted"""
    _check(s, 'invert')
    if isinstance(s, BSPSolid):
        return _bsp_solid(s.tree.inverted())
    return FacetSolid(s.dim, [f.flip() for f in s.facets])


def merge_async(a: Solid, b: Solid, pool: Optional[TaskPool] = None,
                tol: float = epsilon) -> Future:
    """Combine two solids without any clipping.  Two soups are
    concatenated; otherwise both sides are normalised into trees and the
    second is merged into the first."""
    _check(a, 'merge')
    _check(b, 'merge')
    pool = pool or default_pool()
    if isinstance(a, FacetSolid) and isinstance(b, FacetSolid):
        if a.dim != b.dim:
            raise ValueError('cannot merge solids of different dimensions')

        def concat():
            return FacetSolid(a.dim, a.facets + b.facets)

        return pool.submit(concat)

    _require_3d(a, 'merge')
    _require_3d(b, 'merge')

    def join(left, right):
        return _bsp_solid(left.merge(right, tol))

    return pool.after(join, tree_future(a, pool, tol), tree_future(b, pool, tol))


def merge(a: Solid, b: Solid, pool: Optional[TaskPool] = None,
          tol: float = epsilon) -> Solid:
    return merge_async(a, b, pool, tol).result()


## boolean operations
## ------------------


def union_async(a: Solid, b: Solid, pool: Optional[TaskPool] = None,
                tol: float = epsilon) -> Future:
    """Union of two three-dimensional solids.

    Solids with disjoint bounding boxes are simply merged.  Otherwise
    both trees are built concurrently, the part of each operand inside
    the other is clipped away, and the shared boundary is reattached
    with the correct orientation.
    """
    _require_3d(a, 'union')
    _require_3d(b, 'union')
    pool = pool or default_pool()

    if is_empty(a):
        return completed(b)
    if is_empty(b):
        return completed(a)

    # a complement is unbounded, so its bounding box proves nothing
    if (not overlaps(a, b) and not is_complement(a, tol)
            and not is_complement(b, tol)):
        logger.debug('union: disjoint bounds, merging without clipping')
        return merge_async(a, b, pool, tol)

    def clip(tree, by):
        return tree.clip(by, tol)

    def clip_inverted(tree, by):
        return tree.inverted().clip(by, tol)

    def join(tree, shared):
        merged = tree.merge(shared.inverted(), tol)
        logger.debug('union: merged tree %r', merged)
        return _bsp_solid(merged)

    left = tree_future(a, pool, tol)
    right = tree_future(b, pool, tol)
    left_clipped = pool.after(clip, left, right)
    right_clipped = pool.after(clip, right, left_clipped)
    invert_clipped = pool.after(clip_inverted, right_clipped, left_clipped)
    return pool.after(join, left_clipped, invert_clipped)


def intersect_async(a: Solid, b: Solid, pool: Optional[TaskPool] = None,
                    tol: float = epsilon) -> Future:
    """``invert(union(invert(a), invert(b)))``"""
    _require_3d(a, 'intersect')
    _require_3d(b, 'intersect')
    pool = pool or default_pool()
    if is_empty(a) or is_empty(b):
        return completed(_empty())
    return pool.after(invert, union_async(invert(a), invert(b), pool, tol))


def minus_async(a: Solid, b: Solid, pool: Optional[TaskPool] = None,
                tol: float = epsilon) -> Future:
    """``invert(union(invert(a), b))``"""
    _require_3d(a, 'minus')
    _require_3d(b, 'minus')
    pool = pool or default_pool()
    # the complement of nothing is not representable, so these two
    # cases never reach the inverted pipeline
    if is_empty(a):
        return completed(_empty())
    if is_empty(b):
        return completed(a)
    return pool.after(invert, union_async(invert(a), b, pool, tol))


def union(a: Solid, b: Solid, pool: Optional[TaskPool] = None,
          tol: float = epsilon) -> Solid:
    return union_async(a, b, pool, tol).result()


def intersect(a: Solid, b: Solid, pool: Optional[TaskPool] = None,
              tol: float = epsilon) -> Solid:
    return intersect_async(a, b, pool, tol).result()


def minus(a: Solid, b: Solid, pool: Optional[TaskPool] = None,
          tol: float = epsilon) -> Solid:
    return minus_async(a, b, pool, tol).result()


## facets
## ------


def facets(s: Solid, pool: Optional[TaskPool] = None,
           tol: float = epsilon) -> Tuple[Facet, ...]:
    """Return the triangles of a solid.  For a BSP solid these are the
    triangulated tree polygons with every T-junction repaired, so that
    meshes produced by the boolean operations are watertight."""
    _check(s, 'facets')
    if isinstance(s, FacetSolid):
        return tuple(f for f in s.facets if valid_facet(f, tol))

    polygons = s.tree.all_polygons()
    if not polygons:
        return ()
    coords = np.array([v for p in polygons for v in p.vertices], dtype=float)
    unique = np.unique(coords, axis=0)
    octree = Octree([tuple(row) for row in unique.tolist()])

    def repair(polygon):
        result = []
        for f in polygon.facets(tol):
            result.extend(insert_points(f, octree, tol))
        return result

    pool = pool or default_pool()
    chunks = pool.map(repair, polygons)
    result = tuple(f for chunk in chunks for f in chunk)
    logger.debug('facets: %d polygons, %d vertices, %d facets after repair',
                 len(polygons), len(unique), len(result))
    return result


## soup transforms
## ---------------


def map_facets(s: Solid, fn: Callable[[Facet], Facet],
               pool: Optional[TaskPool] = None, tol: float = epsilon) -> FacetSolid:
    return FacetSolid(s.dim, [fn(f) for f in facets(s, pool, tol)])


def filter_facets(s: Solid, pred: Callable[[Facet], bool],
                  pool: Optional[TaskPool] = None, tol: float = epsilon) -> FacetSolid:
    return FacetSolid(s.dim, [f for f in facets(s, pool, tol) if pred(f)])


__all__ = [
    'FacetSolid', 'BSPSolid', 'Solid', 'issolid',
    'from_facets', 'from_vertices', 'from_polygons',
    'min_bound', 'max_bound', 'bounds', 'overlaps', 'is_empty', 'is_complement',
    'solid_tree', 'tree_future', 'invert', 'merge', 'merge_async',
    'union', 'union_async', 'intersect', 'intersect_async',
    'minus', 'minus_async', 'facets', 'map_facets', 'filter_facets',
]
