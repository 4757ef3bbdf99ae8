"""
annforest: Approximate Nearest Neighbor Search with Random Projection Forests

Features:
    - Forest of independently built random hyperplane trees
    - Exact-value deduplication before indexing
    - Parallel tree construction and per-tree parallel candidate search
    - Exact squared-Euclidean re-ranking of the candidate union

Usage:
    from annforest import construct_index

    index = construct_index(
        num_trees=10,
        max_size=16,
        vectors=[[0.0, 0.0], [10.0, 10.0], [10.1, 10.1]],
        vector_ids=[1, 2, 3],
    ).unwrap()

    index.search_approximate([9.9, 9.9], k=2)  # [(2, 0.02), (3, 0.08)]
"""

from __future__ import annotations

__version__ = "0.1.0"

# Core types (numpy only)
from annforest.core.types import (
    ExternalId,
    Vector,
    SearchQuery,
    SearchHit,
    SearchResults,
    IndexStats,
)
from annforest.core.errors import (
    Result,
    Ok,
    Err,
    ErrorCode,
    AnnForestError,
    BuildError,
    ConfigError,
    QueryError,
)
from annforest.core.config import ForestConfig, LoggingConfig


# Index implementation (lazy-loaded on first access)
def __getattr__(name: str):
    """Lazy import of the index modules."""
    if name == "ANNIndex":
        from annforest.index.forest import ANNIndex
        return ANNIndex
    if name == "construct_index":
        from annforest.index.forest import construct_index
        return construct_index
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Version
    "__version__",
    # Core types
    "ExternalId",
    "Vector",
    "SearchQuery",
    "SearchHit",
    "SearchResults",
    "IndexStats",
    # Error handling
    "Result",
    "Ok",
    "Err",
    "ErrorCode",
    "AnnForestError",
    "BuildError",
    "ConfigError",
    "QueryError",
    # Config
    "ForestConfig",
    "LoggingConfig",
    # Index (lazy)
    "ANNIndex",
    "construct_index",
]
