"""
Vectorized Distance Kernels

Exact re-ranking of forest candidates works on a gathered [n, d] block of
stored vectors at once rather than calling Vector.sq_euc_dis per candidate.

Optimizations:
    - NumPy broadcasting for batch operations
    - Squared distances only; ranking never needs the sqrt
"""

from __future__ import annotations

from typing import Union

import numpy as np

VectorLike = Union[np.ndarray, list[float]]


def sq_euclidean(a: VectorLike, b: VectorLike) -> float:
    """
    Squared L2 distance between two vectors.

    Formula: ||a - b||² = Σ(aᵢ - bᵢ)²
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    diff = a - b
    return float(np.dot(diff, diff))


def sq_euclidean_batch(query: VectorLike, vectors: VectorLike) -> np.ndarray:
    """
    Squared L2 distance between a query and a batch of vectors.

    Args:
        query: Query vector (1D, shape [d])
        vectors: Candidate vectors (2D, shape [n, d])

    Returns:
        Distances (1D, shape [n]), all >= 0

    Complexity: O(n × d)
    """
    query = np.asarray(query, dtype=np.float64)
    vectors = np.asarray(vectors, dtype=np.float64)
    if vectors.shape[0] == 0:
        return np.empty(0, dtype=np.float64)

    # Difference form: a stored copy of the query scores exactly 0.0
    diff = vectors - query
    return np.einsum("ij,ij->i", diff, diff)


def rank_by_distance(distances: np.ndarray, k: int) -> np.ndarray:
    """
    Positions of the k smallest distances, nearest first.

    Uses a partial sort when k is much smaller than the candidate count.
    """
    n = distances.shape[0]
    if k <= 0 or n == 0:
        return np.empty(0, dtype=np.intp)
    if k < n:
        top = np.argpartition(distances, k - 1)[:k]
        return top[np.argsort(distances[top], kind="stable")]
    return np.argsort(distances, kind="stable")
