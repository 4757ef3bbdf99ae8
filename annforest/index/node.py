"""
Tree Nodes

A tree is a root Node. A Node is either a Leaf (a bounded bag of point
indexes into the shared vector store) or an Inner node (a HyperPlane plus
the two subtrees it separates). Every Inner owns its children outright; no
subtree is shared between parents or between trees.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union

from annforest.index.hyperplane import HyperPlane


@dataclass(frozen=True, slots=True)
class Leaf:
    """Terminal bucket of point indexes, in partition order."""
    indexes: tuple[int, ...]

    def __len__(self) -> int:
        return len(self.indexes)


@dataclass(frozen=True, slots=True)
class Inner:
    """
    Split node.

    Attributes:
        hyperplane: Plane the partition was split on
        below: Subtree of indexes not above the plane at build time
        above: Subtree of indexes strictly above it
    """
    hyperplane: HyperPlane
    below: "Node"
    above: "Node"


Node = Union[Leaf, Inner]


def iter_leaves(root: Node) -> Iterator[tuple[Leaf, int]]:
    """Yield ``(leaf, depth)`` pairs, below-branch first (root depth is 0)."""
    stack: list[tuple[Node, int]] = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, Leaf):
            yield node, depth
        else:
            stack.append((node.above, depth + 1))
            stack.append((node.below, depth + 1))


def leaf_indexes(root: Node) -> list[int]:
    """All indexes stored under ``root``, concatenated leaf by leaf."""
    out: list[int] = []
    for leaf, _ in iter_leaves(root):
        out.extend(leaf.indexes)
    return out


def tree_depth(root: Node) -> int:
    return max(depth for _, depth in iter_leaves(root))
