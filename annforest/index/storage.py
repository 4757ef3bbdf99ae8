"""
Deduplicated Vector Storage

Holds the index-addressed vectors and their external ids. Position ``i`` of
``values`` and of ``ids`` always describe the same point, and leaf indexes in
every tree address this store.

Deduplication keeps the first occurrence of each distinct vector value and
drops later duplicates together with their ids. Exact duplicates would
otherwise produce zero-width splits and waste leaf capacity.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

from annforest.core.errors import AnnForestError, BuildError, Err, Ok, Result
from annforest.core.types import ExternalId, Vector, VectorLike

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class VectorStore:
    """
    Immutable vector/id storage shared by every tree and query thread.

    Attributes:
        values: Read-only float64 matrix, shape [n, dimension]
        ids: External ids, parallel to ``values``
        dimension: Vector dimension (0 when empty and not configured)
        duplicates_dropped: Input pairs removed by deduplication
    """
    values: np.ndarray
    ids: tuple[ExternalId, ...]
    dimension: int
    duplicates_dropped: int = 0
    _id_to_idx: dict[ExternalId, int] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_pairs(
        cls,
        vectors: Sequence[VectorLike],
        vector_ids: Sequence[ExternalId],
        dimension: Optional[int] = None,
    ) -> Result["VectorStore", AnnForestError]:
        """
        Validate and deduplicate (vector, id) pairs.

        Args:
            vectors: Input points, all of the same dimension
            vector_ids: One opaque id per vector
            dimension: Required dimension; inferred from the first vector if None

        Returns:
            VectorStore, or a BuildError on length/dimension mismatch or
            on an input that is not a flat numeric vector
        """
        if len(vectors) != len(vector_ids):
            return Err(BuildError.length_mismatch(len(vectors), len(vector_ids)))

        points: list[Vector] = []
        for position, value in enumerate(vectors):
            try:
                points.append(Vector.coerce(value))
            except (TypeError, ValueError) as exc:
                return Err(BuildError.invalid_vector(position, str(exc)))

        expected = dimension
        if expected is None:
            expected = points[0].dimension if points else 0
        for position, point in enumerate(points):
            if point.dimension != expected:
                return Err(BuildError.dimension_mismatch(expected, point.dimension, position))

        seen: set[tuple[float, ...]] = set()
        kept_rows: list[np.ndarray] = []
        kept_ids: list[ExternalId] = []
        for point, vid in zip(points, vector_ids):
            key = point.key()
            if key in seen:
                continue
            seen.add(key)
            kept_rows.append(point.to_numpy())
            kept_ids.append(vid)

        if kept_rows:
            values = np.vstack(kept_rows)
        else:
            values = np.empty((0, expected), dtype=np.float64)
        values.flags.writeable = False

        dropped = len(points) - len(kept_rows)
        if dropped:
            logger.debug("Dropped %d duplicate vectors of %d", dropped, len(points))

        id_to_idx: dict[ExternalId, int] = {}
        for idx, vid in enumerate(kept_ids):
            id_to_idx.setdefault(vid, idx)

        return Ok(cls(
            values=values,
            ids=tuple(kept_ids),
            dimension=expected,
            duplicates_dropped=dropped,
            _id_to_idx=id_to_idx,
        ))

    def __len__(self) -> int:
        return len(self.ids)

    def vector(self, idx: int) -> Vector:
        return Vector.from_numpy(self.values[idx])

    def index_of(self, vector_id: ExternalId) -> Optional[int]:
        """Position of the first stored vector carrying ``vector_id``."""
        return self._id_to_idx.get(vector_id)

    @property
    def all_indexes(self) -> list[int]:
        return list(range(len(self.ids)))
