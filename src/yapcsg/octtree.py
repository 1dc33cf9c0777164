## octtree representation for yapCSG vertex sets
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

"""octtree representation for yapCSG vertex sets"""

from yapcsg.geom import *

# Octants are numbered by the sides of the center split a point falls
# on, one bit per axis: bit 0 is set for x >= cx, bit 1 for y >= cy and
# bit 2 for z >= cz.  A point exactly on a split plane always goes to
# the upper octant, so every point belongs to exactly one child.

def point2oct(p,center):
    """return the octant (0 to 7) of point ``p`` relative to ``center``"""
    return ((1 if p[0] >= center[0] else 0) |
            (2 if p[1] >= center[1] else 0) |
            (4 if p[2] >= center[2] else 0))

def box2boxes(bbox,center):
    """Take a 3D bounding box and return the center-split octree
    decomposition of the box as a list of eight ``[box, center]``
    pairs, indexed by octant number.
    """
    def boxmid(box):
        return scale3(add(box[0],box[1]),0.5)

    if not isinsidebbox(bbox,center):
        raise ValueError('center point does not lie inside the bounding box')

    lows = (bbox[0],center)
    highs = (center,bbox[1])

    boxes = []
    for i in range(8):
        sx = i & 1
        sy = (i >> 1) & 1
        sz = (i >> 2) & 1
        box = [point(lows[sx][0],lows[sy][1],lows[sz][2]),
               point(highs[sx][0],highs[sy][1],highs[sz][2])]
        boxes.append([box,boxmid(box)])
    return boxes

def bboxdim(box):
    """ return length, width, and height of a bounding box"""

    length = box[1][0] - box[0][0]
    width = box[1][1] - box[0][1]
    height = box[1][2] - box[0][2]
    return [length, width, height]

def bbox2cube(box,pad=epsilon):
    """grow a bounding box into a cube with the same center, with
    ``pad`` added on every side"""
    dims = bboxdim(box)
    half = max(dims)*0.5 + pad
    mid = scale3(add(box[0],box[1]),0.5)
    return [sub(mid,(half,half,half)),
            add(mid,(half,half,half))]


class OctNode():

    """Octree node: a leaf holds points, an internal node holds up to
    eight children, indexed by octant, with ``None`` for empty octants.
    """

    __slots__ = ('box','center','points','children')

    def __init__(self,box,center):
        self.box = box
        self.center = center
        self.points = []
        self.children = None

    @property
    def isleaf(self):
        return self.children is None


class Octree():

    """Point octree.  Built once from a collection of points and
    read-only afterwards, so it can be queried concurrently."""

    def __init__(self,points,capacity=8,maxdepth=16):

        if not isinstance(capacity,int) or capacity < 1:
            raise ValueError('bad capacity value: '+str(capacity))
        if not isinstance(maxdepth,int) or maxdepth < 1:
            raise ValueError('bad max depth value: '+str(maxdepth))

        self.__capacity = capacity
        self.__maxdepth = maxdepth
        self.__depth = 0
        self.__points = [point(p) for p in points]
        self.__root = None

        if self.__points:
            box = bbox2cube(bbox(self.__points))
            self.__root = self.__build(box,self.__points)

    def __build(self,box,points,depth=0):
        center = scale3(add(box[0],box[1]),0.5)
        node = OctNode(box,center)
        if depth > self.__depth:
            self.__depth = depth
        if len(points) <= self.__capacity or depth >= self.__maxdepth:
            node.points = list(points)
            return node

        buckets = [[] for _ in range(8)]
        for p in points:
            buckets[point2oct(p,center)].append(p)

        subboxes = box2boxes(box,center)
        node.children = [None]*8
        for i in range(8):
            if buckets[i]:
                node.children[i] = self.__build(subboxes[i][0],buckets[i],
                                                depth+1)
        return node

    def __repr__(self):
        return 'Octree(points={},capacity={},depth={})'.format(
            len(self.__points),self.__capacity,self.__depth)

    def __len__(self):
        return len(self.__points)

    @property
    def depth(self):
        return self.__depth

    @property
    def capacity(self):
        return self.__capacity

    @property
    def maxdepth(self):
        return self.__maxdepth

    @property
    def root(self):
        return self.__root

    def contained(self,minp,maxp):
        """return every indexed point lying inside the box spanned by
        ``minp`` and ``maxp``, boundaries included, or the empty list if
        none.
        """
        query = [minp,maxp]
        found = []
        if self.__root is None:
            return found
        stack = [self.__root]
        while stack:
            node = stack.pop()
            if not boxoverlap(node.box,query):
                continue
            if node.isleaf:
                for p in node.points:
                    if isinsidebbox(query,p):
                        found.append(p)
            else:
                for child in node.children:
                    if child is not None:
                        stack.append(child)
        return found
