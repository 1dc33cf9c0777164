"""STL import and export for yapCSG solids.

Export writes ``mesh_view(solid)``, i.e. the repaired facets of any
solid with their unit normals.  Import returns a three-dimensional
``FacetSolid`` whose orientation comes from the stored winding.
"""

from __future__ import annotations

import re
import struct
from contextlib import contextmanager
from typing import Iterable, List

from yapcsg.mesh import MeshTriangle, mesh_view
from yapcsg.polygon import Facet
from yapcsg.solid import FacetSolid

_HEADER = 80
_COUNT = struct.Struct('<I')
_RECORD = struct.Struct('<12fH')

_ASCII_FACET = ('  facet normal {n[0]:.6e} {n[1]:.6e} {n[2]:.6e}\n'
                '    outer loop\n'
                '      vertex {a[0]:.6e} {a[1]:.6e} {a[2]:.6e}\n'
                '      vertex {b[0]:.6e} {b[1]:.6e} {b[2]:.6e}\n'
                '      vertex {c[0]:.6e} {c[1]:.6e} {c[2]:.6e}\n'
                '    endloop\n'
                '  endfacet\n')


@contextmanager
def _stream(path_or_file, mode):
    """yield ``path_or_file`` itself if it is already a stream, otherwise
    open it, closing it again afterwards"""
    attr = 'read' if 'r' in mode else 'write'
    if hasattr(path_or_file, attr):
        yield path_or_file
        return
    kwargs = {} if 'b' in mode else {'encoding': 'ascii'}
    with open(path_or_file, mode, **kwargs) as f:
        yield f


def write_stl(obj, path_or_file, *, binary: bool = True, name: str = 'yapCSG') -> None:
    """Write the facets of ``obj`` to STL.

    ``path_or_file`` is a filesystem path or an open stream, binary for
    binary output and text for ASCII output.
    """
    triangles = list(mesh_view(obj))
    if binary:
        with _stream(path_or_file, 'wb') as out:
            _write_binary(triangles, out, name)
    else:
        with _stream(path_or_file, 'w') as out:
            _write_ascii(triangles, out, name)


def _write_binary(triangles: List[MeshTriangle], out, name: str) -> None:
    out.write(name.encode('ascii', errors='replace')[:_HEADER].ljust(_HEADER, b' '))
    out.write(_COUNT.pack(len(triangles)))
    for tri in triangles:
        out.write(_RECORD.pack(*tri.normal, *tri.v0, *tri.v1, *tri.v2, 0))


def _write_ascii(triangles: Iterable[MeshTriangle], out, name: str) -> None:
    out.write('solid {}\n'.format(name))
    for tri in triangles:
        out.write(_ASCII_FACET.format(n=tri.normal, a=tri.v0, b=tri.v1, c=tri.v2))
    out.write('endsolid {}\n'.format(name))


## import
## ------


def _is_binary_stl(data: bytes) -> bool:
    """An ASCII file starts with ``solid``, but so do some binary
    headers; those are recognised by a record count that matches the
    file size and the absence of ASCII keywords."""
    if len(data) < _HEADER + _COUNT.size:
        return False
    if not data[:_HEADER].lstrip().lower().startswith(b'solid'):
        return True
    (count,) = _COUNT.unpack_from(data, _HEADER)
    if len(data) != _HEADER + _COUNT.size + count * _RECORD.size:
        return False
    head = data[_HEADER + _COUNT.size:200]
    return b'facet' not in head and b'vertex' not in head


def _parse_binary_stl(data: bytes) -> List[Facet]:
    (count,) = _COUNT.unpack_from(data, _HEADER)
    start = _HEADER + _COUNT.size
    if len(data) < start + count * _RECORD.size:
        raise ValueError('truncated binary STL: expected {} facets'.format(count))
    facets = []
    for i in range(count):
        v = _RECORD.unpack_from(data, start + i * _RECORD.size)
        facets.append(Facet(v[3:6], v[6:9], v[9:12]))
    return facets


_NUM = r'([-+]?[\d.]+(?:[eE][-+]?\d+)?)'
_VERTEX = r'vertex\s+' + r'\s+'.join([_NUM] * 3)
_ASCII_PATTERN = re.compile(
    r'facet\s+normal\s+\S+\s+\S+\s+\S+\s+outer\s+loop\s+' +
    r'\s+'.join([_VERTEX] * 3) + r'\s+endloop\s+endfacet',
    re.IGNORECASE)


def _parse_ascii_stl(text: str) -> List[Facet]:
    facets = []
    for m in _ASCII_PATTERN.finditer(text):
        v = tuple(float(g) for g in m.groups())
        facets.append(Facet(v[0:3], v[3:6], v[6:9]))
    return facets


def read_stl(path_or_file) -> FacetSolid:
    """Read a binary or ASCII STL file into a three-dimensional soup.
    The stored normals are ignored; facet winding defines orientation."""
    with _stream(path_or_file, 'rb') as f:
        data = f.read()
    if isinstance(data, str):
        data = data.encode('ascii', errors='replace')

    if _is_binary_stl(data):
        facets = _parse_binary_stl(data)
    else:
        facets = _parse_ascii_stl(data.decode('ascii', errors='replace'))
    return FacetSolid(3, facets)


__all__ = ['write_stl', 'read_stl']
