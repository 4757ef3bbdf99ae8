"""
Core Module: Types, Errors, and Configuration

Foundational abstractions shared by the index and query layers. Depends on
numpy only.
"""

from annforest.core.types import (
    ExternalId,
    Vector,
    VectorLike,
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
from annforest.core.config import (
    ForestConfig,
    LoggingConfig,
)
from annforest.core.protocols import ApproximateIndexProtocol

__all__ = [
    # Types
    "ExternalId",
    "Vector",
    "VectorLike",
    "SearchQuery",
    "SearchHit",
    "SearchResults",
    "IndexStats",
    # Errors
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
    # Protocols
    "ApproximateIndexProtocol",
]
