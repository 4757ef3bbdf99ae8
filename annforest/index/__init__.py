"""
Index Module: Random Projection Forest

Provides:
    - ANNIndex / construct_index: forest build and query entry points
    - HyperPlane, Leaf, Inner: tree building blocks
    - construct_hyperplane / construct_tree: randomized tree builder
    - search_candidates / CandidateSet: per-tree candidate search
    - Distance kernels: squared Euclidean
"""

from annforest.index.distance import (
    sq_euclidean,
    sq_euclidean_batch,
    rank_by_distance,
)
from annforest.index.hyperplane import HyperPlane
from annforest.index.node import Inner, Leaf, Node, iter_leaves, leaf_indexes, tree_depth
from annforest.index.builder import construct_hyperplane, construct_tree
from annforest.index.storage import VectorStore
from annforest.index.candidates import CandidateSet
from annforest.index.query import collect_candidates, search_candidates
from annforest.index.forest import ANNIndex, construct_index

__all__ = [
    # Forest
    "ANNIndex",
    "construct_index",
    # Tree structure
    "HyperPlane",
    "Inner",
    "Leaf",
    "Node",
    "iter_leaves",
    "leaf_indexes",
    "tree_depth",
    # Builder
    "construct_hyperplane",
    "construct_tree",
    "VectorStore",
    # Query
    "CandidateSet",
    "collect_candidates",
    "search_candidates",
    # Distance
    "sq_euclidean",
    "sq_euclidean_batch",
    "rank_by_distance",
]
