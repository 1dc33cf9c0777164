## foundational vector geometry for yapCSG
## Copyright (c) 2020 Richard DeVaul

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
# 
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
# 
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""foundational vector geometry for **yapCSG**

====================
OVERVIEW
====================

The yapcsg.geom module provides the tolerance constant and the
scalar and vector operations that every other part of the kernel is
built on.

constants
=========

yapcsg.geom provides the "constant" ``epsilon``.  Every comparison in
the kernel is made against a tolerance, and every function that makes
one accepts a ``tol`` keyword that defaults to ``epsilon``.  Pass a
different value explicitly rather than redefining the constant.

points
======

Points (and vectors) are immutable tuples of three floats, ``(x, y, z)``.
The ``point()`` convenience function builds one from just about any
plausible set of arguments; unspecified coordinates are set to 0.  Two
points are approximately equal when every coordinate differs by less
than the tolerance.  ::

   pnt1 = point(0,0)
   pnt2 = point(2.0,-2.0,5.0)
   pnt3 = point([1.0, 2.0, 3.0])

bounding boxes
==============

A bounding box is a list of two points spanning the "lower bottom
left" to "upper top right" of a figure, *e.g.* ``bbx =
[(xmin,ymin,zmin),(xmax,ymax,zmax)]``.

"""

from __future__ import annotations

from math import sqrt
from typing import Iterable, List, Sequence, Tuple

Vec3 = Tuple[float, float, float]

## constants
epsilon = 0.000005

## operations on scalars
## -----------------------


def isgoodnum(n):
    """ determine if an argument is actually a scalar number, and not boolean
    """
    return (not isinstance(n, bool)) and isinstance(n, (int, float))


def close(a, b, tol=epsilon):
    """ are two scalars the same within ``tol``
    """
    return abs(a - b) < tol


## operations on points and vectors
## ---------------------------------


def point(a=0.0, b=0.0, c=0.0) -> Vec3:
    """Convenience function for making a point from practically anything:
    three numbers, or a sequence with at least two numbers.
    """
    if isinstance(a, (tuple, list)):
        if len(a) < 2:
            raise ValueError('bad sequence passed to point: ' + str(a))
        z = a[2] if len(a) > 2 else 0.0
        return (float(a[0]), float(a[1]), float(z))
    if not (isgoodnum(a) and isgoodnum(b) and isgoodnum(c)):
        raise ValueError('bad coordinates passed to point')
    return (float(a), float(b), float(c))


def ispoint(x):
    """check to see if argument is a proper point for our purposes"""
    return (isinstance(x, tuple) and len(x) == 3 and
            isgoodnum(x[0]) and isgoodnum(x[1]) and isgoodnum(x[2]))


def add(a, b) -> Vec3:
    """ 3 vector, `a + b`"""
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def sub(a, b) -> Vec3:
    """ 3 vector, `a - b`"""
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def scale3(a, c) -> Vec3:
    """ 3 vector ``a`` times scalar ``c``"""
    return (a[0] * c, a[1] * c, a[2] * c)


def mul(a, b) -> Vec3:
    """ component-wise 3 vector multiplication"""
    return (a[0] * b[0], a[1] * b[1], a[2] * b[2])


def neg(a) -> Vec3:
    return (-a[0], -a[1], -a[2])


def dot(a, b):
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a, b) -> Vec3:
    return (a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0])


def mag(a):
    return sqrt(dot(a, a))


def dist(a, b):
    """ distance between two points"""
    return mag(sub(a, b))


def unit(a, tol=epsilon) -> Vec3:
    """return the unit vector in the direction of ``a``, raise
    ``ValueError`` for a vector shorter than ``tol``"""
    m = mag(a)
    if m < tol:
        raise ValueError('zero-length vector passed to unit')
    return (a[0] / m, a[1] / m, a[2] / m)


def lerp(a, b, t) -> Vec3:
    """linear interpolation from ``a`` (t=0) to ``b`` (t=1)"""
    return (a[0] + (b[0] - a[0]) * t,
            a[1] + (b[1] - a[1]) * t,
            a[2] + (b[2] - a[2]) * t)


def vclose(a, b, tol=epsilon):
    """are two points approximately equal, coordinate by coordinate"""
    return (abs(a[0] - b[0]) < tol and
            abs(a[1] - b[1]) < tol and
            abs(a[2] - b[2]) < tol)


def vmin(a, b) -> Vec3:
    return (min(a[0], b[0]), min(a[1], b[1]), min(a[2], b[2]))


def vmax(a, b) -> Vec3:
    return (max(a[0], b[0]), max(a[1], b[1]), max(a[2], b[2]))


## Is point ``p`` strictly between ``a`` and ``b``?  That is, does it
## lie on the segment, within ``tol`` of the line through both points,
## without being approximately equal to either endpoint.
def between(p, a, b, tol=epsilon):
    """determine if point ``p`` lies on the open segment from ``a`` to
    ``b`` to within ``tol``"""
    ab = sub(b, a)
    len2 = dot(ab, ab)
    if len2 <= tol * tol:
        return False
    ap = sub(p, a)
    t = dot(ap, ab) / len2
    if t <= 0.0 or t >= 1.0:
        return False
    if vclose(p, a, tol) or vclose(p, b, tol):
        return False
    return mag(cross(ab, ap)) <= tol * sqrt(len2)


## bounding boxes
## --------------


def bbox(points: Iterable[Sequence[float]]) -> List[Vec3]:
    """return the bounding box ``[min, max]`` of a collection of points,
    or the empty list if there are none"""
    box = []
    for p in points:
        if not box:
            box = [point(p), point(p)]
        else:
            box = [vmin(box[0], p), vmax(box[1], p)]
    return box


def isinsidebbox(bbx, p):
    """inclusive test of point ``p`` against bounding box ``bbx``"""
    return (bbx[0][0] <= p[0] <= bbx[1][0] and
            bbx[0][1] <= p[1] <= bbx[1][1] and
            bbx[0][2] <= p[2] <= bbx[1][2])


def boxoverlap(bbx1, bbx2):
    """determine if two 3D bounding boxes overlap.  Boxes that merely
    touch are considered to overlap."""
    return not (bbx1[1][0] < bbx2[0][0] or bbx1[1][1] < bbx2[0][1] or
                bbx1[1][2] < bbx2[0][2] or bbx1[0][0] > bbx2[1][0] or
                bbx1[0][1] > bbx2[1][1] or bbx1[0][2] > bbx2[1][2])


def vstr(a):
    """return a compact string representation of a point, a box, or a
    list of either"""
    if isinstance(a, tuple) and len(a) == 3 and all(map(isgoodnum, a)):
        return '({:.6g}, {:.6g}, {:.6g})'.format(*a)
    if isinstance(a, (list, tuple)):
        return '[' + ', '.join(vstr(x) for x in a) + ']'
    return str(a)
