"""
Random Projection Tree Builder

Recursively partitions a set of point indexes with randomly sampled
hyperplanes until every partition fits in a leaf.

Algorithm:
    1. Sample two distinct points of the partition
    2. Split on their perpendicular bisector
    3. Recurse into both sides

Degenerate splits (one side empty, e.g. all sampled points identical) are
resampled up to ``split_retries`` times, after which the partition is kept as
an oversized leaf. Partitions that reach ``max_depth`` are kept as leaves too,
so recursion always terminates within the interpreter's stack limit.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from annforest.core.types import Vector
from annforest.index.hyperplane import HyperPlane
from annforest.index.node import Inner, Leaf, Node

logger = logging.getLogger(__name__)

DEFAULT_SPLIT_RETRIES = 5
DEFAULT_MAX_DEPTH = 256


def construct_hyperplane(
    indexes: Sequence[int],
    all_vectors: np.ndarray,
    rng: np.random.Generator,
) -> tuple[HyperPlane, list[int], list[int]]:
    """
    Split a partition on the bisector of two randomly chosen members.

    Args:
        indexes: Partition to split (at least 2 entries)
        all_vectors: Shared [n, d] vector matrix the indexes address
        rng: Per-tree random generator

    Returns:
        (hyperplane, above_indexes, below_indexes); both lists keep the
        relative order of ``indexes``

    Raises:
        ValueError: If fewer than 2 indexes are given
    """
    if len(indexes) < 2:
        raise ValueError(f"need at least 2 indexes to split, got {len(indexes)}")

    first, second = rng.choice(len(indexes), size=2, replace=False)
    hyperplane = HyperPlane.from_points(
        Vector.from_numpy(all_vectors[indexes[first]]),
        Vector.from_numpy(all_vectors[indexes[second]]),
    )

    mask = hyperplane.above_mask(all_vectors[list(indexes)])
    above: list[int] = []
    below: list[int] = []
    for idx, is_above in zip(indexes, mask.tolist()):
        if is_above:
            above.append(idx)
        else:
            below.append(idx)
    return hyperplane, above, below


def construct_tree(
    max_size: int,
    indexes: Sequence[int],
    all_vectors: np.ndarray,
    rng: np.random.Generator,
    *,
    split_retries: int = DEFAULT_SPLIT_RETRIES,
    max_depth: int = DEFAULT_MAX_DEPTH,
    _depth: int = 0,
) -> Node:
    """
    Build a tree over ``indexes``.

    Args:
        max_size: Leaf capacity (>= 1)
        indexes: Point indexes to partition
        all_vectors: Shared [n, d] vector matrix
        rng: Per-tree random generator
        split_retries: Extra samples allowed after a degenerate split
        max_depth: Depth at which a partition becomes a leaf unconditionally

    Returns:
        Root node; small partitions come back as a Leaf holding ``indexes``
        verbatim
    """
    if len(indexes) <= max_size:
        return Leaf(tuple(indexes))

    if _depth >= max_depth:
        logger.debug("Depth limit %d reached with %d points", max_depth, len(indexes))
        return Leaf(tuple(indexes))

    for _ in range(split_retries + 1):
        hyperplane, above, below = construct_hyperplane(indexes, all_vectors, rng)
        if above and below:
            break
    else:
        logger.debug(
            "No separating split after %d attempts, keeping %d points in one leaf",
            split_retries + 1,
            len(indexes),
        )
        return Leaf(tuple(indexes))

    return Inner(
        hyperplane=hyperplane,
        below=construct_tree(
            max_size, below, all_vectors, rng,
            split_retries=split_retries, max_depth=max_depth, _depth=_depth + 1,
        ),
        above=construct_tree(
            max_size, above, all_vectors, rng,
            split_retries=split_retries, max_depth=max_depth, _depth=_depth + 1,
        ),
    )
