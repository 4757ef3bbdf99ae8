"""
Core Type Definitions: Vectors, Queries and Results

Vector is the fixed-dimension point every other component works on. It wraps
a read-only float64 numpy array so instances can be shared between build and
query threads without copying or locking.

Thread Safety:
    - Vector, SearchHit, IndexStats are immutable
    - SearchQuery / SearchResults are plain per-call value objects
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import (
    Any,
    Hashable,
    Iterator,
    Optional,
    Sequence,
    TypeAlias,
    Union,
)

import numpy as np

# Opaque caller-supplied identifier, stored verbatim alongside each vector.
ExternalId: TypeAlias = Hashable


# =============================================================================
# VECTOR: IMMUTABLE FIXED-DIMENSION POINT
# =============================================================================
@dataclass(frozen=True, slots=True, eq=False)
class Vector:
    """
    Immutable N-dimensional point.

    Two vectors are equal iff every component compares equal, so
    ``-0.0 == 0.0`` holds and a NaN component never equals anything.

    Supported Input Types:
        - list[float] / tuple[float, ...]
        - numpy.ndarray (any numeric dtype, 1-D, copied)
    """
    _data: np.ndarray

    @classmethod
    def from_list(cls, values: Sequence[float]) -> "Vector":
        return cls.from_numpy(np.asarray(values, dtype=np.float64))

    @classmethod
    def from_numpy(cls, arr: np.ndarray) -> "Vector":
        """
        Create from a numpy array.

        The data is copied to float64 and frozen, so later writes to ``arr``
        never leak into the vector.

        Raises:
            ValueError: If ``arr`` is not one-dimensional
        """
        data = np.array(arr, dtype=np.float64)
        if data.ndim != 1:
            raise ValueError(f"Expected a 1-D vector, got shape {data.shape}")
        data.flags.writeable = False
        return cls(_data=data)

    @classmethod
    def coerce(cls, value: "VectorLike") -> "Vector":
        """Normalize any accepted input to a Vector."""
        if isinstance(value, Vector):
            return value
        if isinstance(value, np.ndarray):
            return cls.from_numpy(value)
        return cls.from_list(list(value))

    # -------------------------------------------------------------------------
    # Arithmetic primitives
    # -------------------------------------------------------------------------
    def subtract_from(self, other: "Vector") -> "Vector":
        """Component-wise ``self - other``."""
        return Vector.from_numpy(self._data - other._data)

    def avg(self, other: "Vector") -> "Vector":
        """Component-wise mean of ``self`` and ``other``."""
        return Vector.from_numpy((self._data + other._data) / 2.0)

    def dot_product(self, other: "Vector") -> float:
        return float(np.dot(self._data, other._data))

    def sq_euc_dis(self, other: "Vector") -> float:
        """Squared Euclidean distance (no sqrt, ordering is preserved)."""
        diff = self._data - other._data
        return float(np.dot(diff, diff))

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------
    @property
    def dimension(self) -> int:
        return int(self._data.shape[0])

    def to_numpy(self) -> np.ndarray:
        """Read-only view of the components."""
        return self._data

    def to_list(self) -> list[float]:
        return self._data.tolist()

    def key(self) -> tuple[float, ...]:
        """Hashable key with the same equality semantics as the vector."""
        return tuple(self._data.tolist())

    def __len__(self) -> int:
        return self.dimension

    def __getitem__(self, idx: int) -> float:
        return float(self._data[idx])

    def __iter__(self) -> Iterator[float]:
        return iter(self._data.tolist())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return self.dimension == other.dimension and bool(
            np.all(self._data == other._data)
        )

    def __hash__(self) -> int:
        return hash(self.key())

    def __repr__(self) -> str:
        return f"Vector({self._data.tolist()!r})"


VectorLike = Union[Vector, Sequence[float], np.ndarray]


# =============================================================================
# SEARCH QUERY
# =============================================================================
@dataclass(slots=True)
class SearchQuery:
    """
    Approximate k-NN query.

    Attributes:
        vector: Query point (Vector, list of floats or numpy array)
        k: Number of results to return
        num_candidates: Per-tree candidate budget; defaults to k. Raising it
            visits more leaves per tree and improves recall.
        include_vectors: Attach the stored vector to each hit
    """
    vector: VectorLike
    k: int = 10
    num_candidates: Optional[int] = None
    include_vectors: bool = False

    def get_vector(self) -> Vector:
        return Vector.coerce(self.vector)

    @property
    def candidate_budget(self) -> int:
        if self.num_candidates is None:
            return self.k
        return max(self.num_candidates, self.k)


# =============================================================================
# SEARCH RESULT: SINGLE MATCH
# =============================================================================
@dataclass(frozen=True, slots=True)
class SearchHit:
    """
    Single ranked match.

    Attributes:
        id: External identifier supplied at build time
        distance: Squared Euclidean distance to the query (>= 0)
        rank: Position in the result list (0-indexed)
        vector: Stored vector, when requested
    """
    id: ExternalId
    distance: float
    rank: int = 0
    vector: Optional[Vector] = None

    def as_tuple(self) -> tuple[ExternalId, float]:
        return (self.id, self.distance)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "distance": self.distance,
            "rank": self.rank,
        }
        if self.vector is not None:
            result["vector"] = self.vector.to_list()
        return result


# =============================================================================
# SEARCH RESULTS: RANKED RESPONSE
# =============================================================================
@dataclass(slots=True)
class SearchResults:
    """
    Ranked matches plus query metadata.

    Attributes:
        matches: Hits sorted by non-decreasing distance
        query_time_ms: Wall time spent on the query
        total_candidates: Distinct candidates scored before truncation
    """
    matches: list[SearchHit] = field(default_factory=list)
    query_time_ms: float = 0.0
    total_candidates: int = 0

    def __len__(self) -> int:
        return len(self.matches)

    def __iter__(self) -> Iterator[SearchHit]:
        return iter(self.matches)

    def __getitem__(self, idx: int) -> SearchHit:
        return self.matches[idx]

    @property
    def ids(self) -> list[ExternalId]:
        return [m.id for m in self.matches]

    @property
    def distances(self) -> list[float]:
        return [m.distance for m in self.matches]

    def as_tuples(self) -> list[tuple[ExternalId, float]]:
        return [m.as_tuple() for m in self.matches]

    def to_dict(self) -> dict[str, Any]:
        return {
            "matches": [m.to_dict() for m in self.matches],
            "query_time_ms": self.query_time_ms,
            "total_candidates": self.total_candidates,
        }


# =============================================================================
# INDEX STATISTICS
# =============================================================================
@dataclass(frozen=True, slots=True)
class IndexStats:
    """
    Shape of a built forest.

    Attributes:
        total_vectors: Distinct vectors stored
        duplicates_dropped: Input pairs removed by deduplication
        dimension: Vector dimension (0 for an empty index)
        num_trees: Trees in the forest
        total_leaves: Leaves summed over all trees
        largest_leaf: Size of the biggest leaf in any tree
        max_depth: Depth of the deepest leaf in any tree (root = 0)
        build_time_ms: Forest construction time
    """
    total_vectors: int
    duplicates_dropped: int
    dimension: int
    num_trees: int
    total_leaves: int
    largest_leaf: int
    max_depth: int
    build_time_ms: float = 0.0

    @property
    def mean_leaves_per_tree(self) -> float:
        if self.num_trees == 0:
            return 0.0
        return self.total_leaves / self.num_trees

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_vectors": self.total_vectors,
            "duplicates_dropped": self.duplicates_dropped,
            "dimension": self.dimension,
            "num_trees": self.num_trees,
            "total_leaves": self.total_leaves,
            "mean_leaves_per_tree": self.mean_leaves_per_tree,
            "largest_leaf": self.largest_leaf,
            "max_depth": self.max_depth,
            "build_time_ms": self.build_time_ms,
        }
