"""
Protocol Definitions: Structural Subtyping for Pluggable Indexes

Lets callers depend on the query surface rather than on ANNIndex itself, so
an exact brute-force index (for recall measurement) or another ANN backend can
stand in.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import (
    TYPE_CHECKING,
    Protocol,
    runtime_checkable,
)

if TYPE_CHECKING:
    from annforest.core.errors import QueryError, Result
    from annforest.core.types import (
        ExternalId,
        IndexStats,
        SearchQuery,
        SearchResults,
        VectorLike,
    )


# =============================================================================
# APPROXIMATE INDEX PROTOCOL
# =============================================================================
@runtime_checkable
class ApproximateIndexProtocol(Protocol):
    """
    Protocol for read-only nearest neighbor indexes.

    Implementations:
        - ANNIndex: random projection forest
    """

    @property
    def dimension(self) -> int:
        """Vector dimensionality."""
        ...

    @property
    def count(self) -> int:
        """Number of stored vectors."""
        ...

    @abstractmethod
    def search(self, query: "SearchQuery") -> "Result[SearchResults, QueryError]":
        """Ranked search returning hits and query metadata."""
        ...

    @abstractmethod
    def search_approximate(
        self, query: "VectorLike", k: int
    ) -> "list[tuple[ExternalId, float]]":
        """Top-k (id, distance) pairs, nearest first."""
        ...

    @abstractmethod
    def stats(self) -> "IndexStats":
        """Index statistics."""
        ...
