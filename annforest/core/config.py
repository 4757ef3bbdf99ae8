"""
Configuration Classes: Forest Build and Logging Settings

Provides structured configuration with validation for:
    - Forest construction (tree count, leaf capacity, parallelism)
    - Logging output
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


# =============================================================================
# FOREST CONFIGURATION
# =============================================================================
@dataclass(frozen=True, slots=True)
class ForestConfig:
    """
    Random projection forest configuration.

    Parameters:
        num_trees: Trees in the forest. More trees raise recall and the
            build/query cost.
        max_size: Leaf capacity. Smaller leaves partition more finely but
            need more trees for the same recall.
        dimension: Expected vector dimension; inferred from the data if None
        seed: Root seed for reproducible forests; fresh entropy if None
        max_workers: Thread pool size for build and query (1 = sequential)
        split_retries: Resamples allowed when a split leaves a side empty
        max_depth: Depth at which a partition becomes a leaf regardless of size
    """
    num_trees: int = 10
    max_size: int = 16
    dimension: Optional[int] = None
    seed: Optional[int] = None
    max_workers: Optional[int] = None
    split_retries: int = 5
    max_depth: int = 256

    def validate(self) -> Optional[str]:
        if self.num_trees <= 0:
            return f"num_trees must be > 0, got {self.num_trees}"
        if self.max_size <= 0:
            return f"max_size must be > 0, got {self.max_size}"
        if self.dimension is not None and self.dimension < 1:
            return f"dimension must be >= 1, got {self.dimension}"
        if self.max_workers is not None and self.max_workers < 1:
            return f"max_workers must be >= 1, got {self.max_workers}"
        if self.split_retries < 0:
            return f"split_retries must be >= 0, got {self.split_retries}"
        if self.max_depth < 1:
            return f"max_depth must be >= 1, got {self.max_depth}"
        return None

    @property
    def sequential(self) -> bool:
        return self.max_workers == 1

    @classmethod
    def from_env(cls) -> "ForestConfig":
        seed = os.getenv("ANNFOREST_SEED")
        workers = os.getenv("ANNFOREST_MAX_WORKERS")
        return cls(
            num_trees=int(os.getenv("ANNFOREST_NUM_TREES", "10")),
            max_size=int(os.getenv("ANNFOREST_MAX_SIZE", "16")),
            seed=int(seed) if seed else None,
            max_workers=int(workers) if workers else None,
        )


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================
@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Log output settings consumed by observability.logging.setup_logging."""
    level: str = "INFO"
    json: bool = True

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("ANNFOREST_LOG_LEVEL", "INFO").upper(),
            json=os.getenv("ANNFOREST_LOG_JSON", "1").lower() not in ("0", "false", "no"),
        )
