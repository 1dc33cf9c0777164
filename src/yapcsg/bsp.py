"""Binary space partition trees of polygons.

A ``BSPTree`` is a boundary representation of a solid.  Each node
holds a partitioning plane, the polygons lying in that plane, and
optional front and back subtrees.  An absent front subtree is outside
the solid, an absent back subtree is inside it.

All operations return new trees and leave their operands untouched.
They walk the tree with explicit work stacks rather than recursion,
since a tree built from a finely tessellated solid can be far deeper
than the interpreter's recursion limit.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from yapcsg.geom import epsilon
from yapcsg.polygon import Plane, Polygon, split_polygon


class BSPNode:
    """single tree node; only mutated while the owning operation runs"""

    __slots__ = ('plane', 'polygons', 'front', 'back')

    def __init__(self, plane: Plane, polygons=None, front=None, back=None):
        self.plane = plane
        self.polygons: List[Polygon] = list(polygons) if polygons else []
        self.front: Optional[BSPNode] = front
        self.back: Optional[BSPNode] = back

    def __repr__(self):
        return 'BSPNode(plane={}, polygons={})'.format(self.plane, len(self.polygons))


def _copy(root: Optional[BSPNode], invert=False) -> Optional[BSPNode]:
    """deep copy of a subtree, optionally flipping every plane and
    polygon and swapping the front and back subtrees"""
    if root is None:
        return None

    def clone(node):
        if invert:
            return BSPNode(node.plane.flip(), [p.flip() for p in node.polygons])
        return BSPNode(node.plane, node.polygons)

    new_root = clone(root)
    stack = [(root, new_root)]
    while stack:
        old, new = stack.pop()
        front, back = old.front, old.back
        if invert:
            front, back = back, front
        if front is not None:
            new.front = clone(front)
            stack.append((front, new.front))
        if back is not None:
            new.back = clone(back)
            stack.append((back, new.back))
    return new_root


def _insert(root: Optional[BSPNode], polygons: Sequence[Polygon],
            tol: float) -> Optional[BSPNode]:
    """Insert ``polygons`` into the subtree at ``root`` (in place),
    growing nodes at absent subtrees.  Returns the (possibly new) root."""
    if not polygons:
        return root
    if root is None:
        root = BSPNode(polygons[0].plane)
    stack = [(root, list(polygons))]
    while stack:
        node, polys = stack.pop()
        front: List[Polygon] = []
        back: List[Polygon] = []
        for poly in polys:
            cf, cb, f, b = split_polygon(node.plane, poly, tol)
            node.polygons.extend(cf)
            node.polygons.extend(cb)
            front.extend(f)
            back.extend(b)
        if back:
            if node.back is None:
                node.back = BSPNode(back[0].plane)
            stack.append((node.back, back))
        if front:
            if node.front is None:
                node.front = BSPNode(front[0].plane)
            stack.append((node.front, front))
    return root


def clip_polygons(root: Optional[BSPNode], polygons: Sequence[Polygon],
                  tol: float = epsilon) -> List[Polygon]:
    """Return the parts of ``polygons`` lying outside the solid
    represented by the subtree at ``root``, in a stable order."""
    if root is None:
        return list(polygons)
    result: List[Polygon] = []
    stack = [(root, list(polygons))]
    while stack:
        node, polys = stack.pop()
        front: List[Polygon] = []
        back: List[Polygon] = []
        for poly in polys:
            cf, cb, f, b = split_polygon(node.plane, poly, tol)
            front.extend(cf)
            back.extend(cb)
            front.extend(f)
            back.extend(b)
        # back work is pushed first so the whole front subtree is
        # emitted before anything from the back
        if back and node.back is not None:
            stack.append((node.back, back))
        if front:
            if node.front is None:
                result.extend(front)
            else:
                stack.append((node.front, front))
    return result


class BSPTree:
    """Immutable BSP tree.  An empty tree (no root) represents empty
    space: clipping by it removes nothing."""

    __slots__ = ('_root',)

    def __init__(self, root: Optional[BSPNode] = None):
        self._root = root

    @classmethod
    def from_polygons(cls, polygons: Iterable[Polygon], tol: float = epsilon) -> "BSPTree":
        return cls(_insert(None, list(polygons), tol))

    @property
    def root(self) -> Optional[BSPNode]:
        return self._root

    @property
    def empty(self) -> bool:
        return self._root is None

    def nodes(self):
        """iterate over the nodes, depth first, front before back"""
        stack = [self._root] if self._root is not None else []
        while stack:
            node = stack.pop()
            yield node
            if node.back is not None:
                stack.append(node.back)
            if node.front is not None:
                stack.append(node.front)

    def all_polygons(self) -> List[Polygon]:
        result: List[Polygon] = []
        for node in self.nodes():
            result.extend(node.polygons)
        return result

    def depth(self) -> int:
        if self._root is None:
            return 0
        deepest = 0
        stack = [(self._root, 1)]
        while stack:
            node, d = stack.pop()
            deepest = max(deepest, d)
            for child in (node.front, node.back):
                if child is not None:
                    stack.append((child, d + 1))
        return deepest

    def clip(self, other: "BSPTree", tol: float = epsilon) -> "BSPTree":
        """Return a tree with the structure of this one holding only the
        parts of its polygons that lie outside ``other``."""
        root = _copy(self._root)
        if root is None:
            return BSPTree()
        stack = [root]
        while stack:
            node = stack.pop()
            node.polygons = clip_polygons(other._root, node.polygons, tol)
            if node.back is not None:
                stack.append(node.back)
            if node.front is not None:
                stack.append(node.front)
        return BSPTree(root)

    def inverted(self) -> "BSPTree":
        """Return the complementary solid: planes and polygons flipped,
        front and back swapped."""
        return BSPTree(_copy(self._root, invert=True))

    def merge(self, other: "BSPTree", tol: float = epsilon) -> "BSPTree":
        """Insert the polygons of ``other`` into a copy of this tree.
        Structural concatenation, not a boolean operation."""
        return BSPTree(_insert(_copy(self._root), other.all_polygons(), tol))

    def __len__(self):
        return sum(len(node.polygons) for node in self.nodes())

    def __repr__(self):
        return 'BSPTree(polygons={}, depth={})'.format(len(self), self.depth())
