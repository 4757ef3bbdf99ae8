"""
Forest Candidate Search

Descends each tree toward the query's region of space and gathers point
indexes from the leaves it reaches. The descent is greedy and budgeted: the
branch the query falls on is searched first, and the opposite branch only
makes up any shortfall. A query lying close to a splitting plane can
therefore miss its true nearest leaf in a given tree; other trees in the
forest compensate.
"""

from __future__ import annotations

from concurrent.futures import Executor
from typing import Optional, Sequence

from annforest.core.types import Vector
from annforest.index.candidates import CandidateSet
from annforest.index.node import Leaf, Node


def search_candidates(
    query: Vector,
    num_candidates: int,
    node: Node,
    accumulator: CandidateSet,
) -> int:
    """
    Collect up to ``num_candidates`` indexes from one tree.

    Args:
        query: Query point
        num_candidates: Budget for this subtree
        node: Subtree root
        accumulator: Shared candidate set to insert into

    Returns:
        Number of indexes taken from leaves under ``node`` (indexes already
        present in the accumulator still count)
    """
    if isinstance(node, Leaf):
        taken = node.indexes[: max(num_candidates, 0)]
        accumulator.update(taken)
        return len(taken)

    if node.hyperplane.point_is_above(query):
        primary, alternate = node.above, node.below
    else:
        primary, alternate = node.below, node.above

    found = search_candidates(query, num_candidates, primary, accumulator)
    if found < num_candidates:
        found += search_candidates(query, num_candidates - found, alternate, accumulator)
    return found


def collect_candidates(
    query: Vector,
    num_candidates: int,
    trees: Sequence[Node],
    executor: Optional[Executor] = None,
) -> CandidateSet:
    """
    Run search_candidates on every tree into one shared CandidateSet.

    Trees are searched concurrently when an executor is given, sequentially
    otherwise. Exceptions raised in a worker propagate to the caller.
    """
    accumulator = CandidateSet()
    if executor is None or len(trees) <= 1:
        for tree in trees:
            search_candidates(query, num_candidates, tree, accumulator)
        return accumulator

    futures = [
        executor.submit(search_candidates, query, num_candidates, tree, accumulator)
        for tree in trees
    ]
    for future in futures:
        future.result()
    return accumulator
