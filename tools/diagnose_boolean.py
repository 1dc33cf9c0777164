#!/usr/bin/env python3
"""Diagnose boolean meshes produced by yapCSG."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from yapcsg.geometry_checks import edge_census, signed_volume
from yapcsg.logging_utils import configure_logging
from yapcsg.shapes import cube, translate
from yapcsg.solid import bounds, facets, intersect, minus, union

_OPERATIONS = {'union': union, 'intersection': intersect, 'difference': minus}


def _build_solids(kind: str, offset: float):
    if kind == 'cube':
        a = cube(1, 1, 1)
        b = translate(cube(1, 1, 1), offset, offset, offset)
    elif kind == 'slab':
        a = cube(2, 2, 2)
        b = translate(cube(4, 0.5, 0.5), -1.0, 0.75, 0.75)
    else:
        raise ValueError(f'unsupported shape kind: {kind!r}')
    return a, b


def main():
    parser = argparse.ArgumentParser(description='Diagnose boolean mesh quality.')
    parser.add_argument('--shapes', choices=['cube', 'slab'], required=True)
    parser.add_argument('--operation', choices=sorted(_OPERATIONS), default='union')
    parser.add_argument('--offset', type=float, default=0.5, help='offset of the second cube')
    parser.add_argument('--log-level', default='WARNING')
    parser.add_argument('--json', type=Path, help='write diagnostics JSON to path')
    args = parser.parse_args()

    configure_logging(args.log_level)
    a, b = _build_solids(args.shapes, args.offset)
    result = _OPERATIONS[args.operation](a, b)

    tris = facets(result)
    edges = edge_census(tris)
    box = bounds(result)
    diagnostics = {
        'triangles': len(tris),
        'edges': len(edges),
        'boundary_edges': sum(1 for c in edges.values() if c == 1),
        'nonmanifold_edges': sum(1 for c in edges.values() if c > 2),
        'volume': signed_volume(tris),
        'bounds': [list(box[0]), list(box[1])],
    }

    print(json.dumps(diagnostics, indent=2))

    if args.json:
        args.json.parent.mkdir(parents=True, exist_ok=True)
        args.json.write_text(json.dumps(diagnostics, indent=2))


if __name__ == '__main__':
    main()
