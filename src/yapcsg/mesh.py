"""Utilities for working with triangulated views of yapCSG solids."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np

from yapcsg.geom import Vec3, epsilon


@dataclass(frozen=True)
class MeshTriangle:
    """Immutable triangle with its unit normal, as exported."""

    normal: Vec3
    v0: Vec3
    v1: Vec3
    v2: Vec3


def mesh_view(obj, tol: float = epsilon) -> Iterator[MeshTriangle]:
    """Yield the repaired facets of a solid with their unit normals.

    Facets with degenerate geometry (zero area) are skipped silently.
    """
    from yapcsg.solid import facets

    for f in facets(obj, tol=tol):
        try:
            n = f.normal(tol)
        except ValueError:
            continue
        yield MeshTriangle(n, f.v1, f.v2, f.v3)


def facet_array(obj, tol: float = epsilon) -> np.ndarray:
    """Return the facets of a solid as an ``(n, 3, 3)`` float array of
    vertex coordinates."""
    from yapcsg.solid import facets

    tris = facets(obj, tol=tol)
    if not tris:
        return np.zeros((0, 3, 3), dtype=float)
    return np.array([f.vertices for f in tris], dtype=float)


__all__ = ['MeshTriangle', 'mesh_view', 'facet_array']
