"""
Random Projection Forest Index

An ANNIndex is a forest of independently built random projection trees over
one deduplicated, read-only vector store.

Build:
    1. Validate configuration (before any work starts)
    2. Deduplicate (vector, id) pairs into a VectorStore
    3. Build ``num_trees`` trees in parallel, one random generator per tree
    4. Assemble the forest once every tree has finished

Query:
    1. Search every tree in parallel into one shared CandidateSet
    2. Score each distinct candidate by exact squared Euclidean distance
    3. Sort ascending and truncate to k

Thread Safety:
    The index is immutable after build. Any number of threads may query it
    concurrently; the only shared mutable state is the per-query CandidateSet.
"""

from __future__ import annotations

import dataclasses
import threading
import time
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, Optional, Sequence

import numpy as np

from annforest.core.config import ForestConfig
from annforest.core.errors import (
    AnnForestError,
    BuildError,
    ConfigError,
    Err,
    Ok,
    QueryError,
    Result,
)
from annforest.core.types import (
    ExternalId,
    IndexStats,
    SearchHit,
    SearchQuery,
    SearchResults,
    Vector,
    VectorLike,
)
from annforest.index.builder import construct_tree
from annforest.index.distance import rank_by_distance, sq_euclidean_batch
from annforest.index.node import Node, iter_leaves
from annforest.index.query import collect_candidates
from annforest.index.storage import VectorStore
from annforest.observability.logging import StructuredLogger

logger = StructuredLogger(__name__)


# =============================================================================
# FOREST CONSTRUCTION
# =============================================================================
def _tree_generators(config: ForestConfig) -> list[np.random.Generator]:
    """One independent generator per tree, spawned from a single root seed."""
    root = np.random.SeedSequence(config.seed)
    return [np.random.default_rng(child) for child in root.spawn(config.num_trees)]


def _build_trees(store: VectorStore, config: ForestConfig) -> list[Node]:
    all_indexes = store.all_indexes

    def build_one(rng: np.random.Generator) -> Node:
        return construct_tree(
            config.max_size,
            all_indexes,
            store.values,
            rng,
            split_retries=config.split_retries,
            max_depth=config.max_depth,
        )

    generators = _tree_generators(config)
    if config.sequential or config.num_trees == 1:
        return [build_one(rng) for rng in generators]

    with ThreadPoolExecutor(
        max_workers=config.max_workers,
        thread_name_prefix="annforest-build",
    ) as pool:
        return list(pool.map(build_one, generators))


def construct_index(
    num_trees: int,
    max_size: int,
    vectors: Sequence[VectorLike],
    vector_ids: Sequence[ExternalId],
    *,
    config: Optional[ForestConfig] = None,
) -> Result["ANNIndex", AnnForestError]:
    """
    Build a forest index from parallel vector / id sequences.

    Args:
        num_trees: Trees in the forest (> 0)
        max_size: Leaf capacity (> 0)
        vectors: Input points, all the same dimension
        vector_ids: Opaque id per vector
        config: Further settings (seed, workers, ...); its num_trees and
            max_size are overridden by the positional arguments

    Returns:
        Ok(ANNIndex), or Err(ConfigError / BuildError) before any tree is built
    """
    base = config or ForestConfig()
    return ANNIndex.build(
        vectors,
        vector_ids,
        dataclasses.replace(base, num_trees=num_trees, max_size=max_size),
    )


# =============================================================================
# ANN INDEX
# =============================================================================
class ANNIndex:
    """
    Read-only approximate nearest neighbor index.

    Features:
        - Independent random trees for recall through redundancy
        - Parallel build and per-tree parallel candidate search
        - Exact re-ranking of the candidate union

    Usage:
        index = construct_index(10, 16, vectors, ids).unwrap()
        index.search_approximate([0.1, 0.2], k=5)  # [(id, sq_distance), ...]
    """

    __slots__ = (
        "_config",
        "_store",
        "_trees",
        "_build_time_ms",
        "_executor",
        "_executor_lock",
        "_executor_users",
    )

    def __init__(
        self,
        store: VectorStore,
        trees: Sequence[Node],
        config: ForestConfig,
        build_time_ms: float = 0.0,
    ) -> None:
        self._config = config
        self._store = store
        self._trees: tuple[Node, ...] = tuple(trees)
        self._build_time_ms = build_time_ms

        # Query pool, created on first parallel query
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()
        # Searches currently holding each pool
        self._executor_users: dict[Executor, int] = {}

    @classmethod
    def build(
        cls,
        vectors: Sequence[VectorLike],
        vector_ids: Sequence[ExternalId],
        config: Optional[ForestConfig] = None,
    ) -> Result["ANNIndex", AnnForestError]:
        """Build an index using every setting from ``config``."""
        config = config or ForestConfig()
        if error_msg := config.validate():
            return Err(ConfigError.from_message(error_msg))

        store_result = VectorStore.from_pairs(vectors, vector_ids, config.dimension)
        if store_result.is_err():
            return store_result
        store = store_result.unwrap()

        start_time = time.perf_counter()
        trees = _build_trees(store, config)
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            "Forest built",
            num_trees=len(trees),
            max_size=config.max_size,
            total_vectors=len(store),
            duplicates_dropped=store.duplicates_dropped,
            dimension=store.dimension,
            build_time_ms=round(elapsed_ms, 3),
        )
        return Ok(cls(store, trees, config, build_time_ms=elapsed_ms))

    # =========================================================================
    # PROPERTIES
    # =========================================================================
    @property
    def config(self) -> ForestConfig:
        return self._config

    @property
    def dimension(self) -> int:
        return self._store.dimension

    @property
    def count(self) -> int:
        """Number of distinct stored vectors."""
        return len(self._store)

    @property
    def num_trees(self) -> int:
        return len(self._trees)

    @property
    def trees(self) -> tuple[Node, ...]:
        return self._trees

    @property
    def values(self) -> np.ndarray:
        """Deduplicated vectors, read-only, shape [count, dimension]."""
        return self._store.values

    @property
    def ids(self) -> tuple[ExternalId, ...]:
        return self._store.ids

    def __len__(self) -> int:
        return self.count

    # =========================================================================
    # SEARCH
    # =========================================================================
    def search(self, query: SearchQuery) -> Result[SearchResults, QueryError]:
        """
        Approximate k-NN search.

        Returns:
            Hits sorted by non-decreasing squared distance, at most ``k`` of
            them. Empty for ``k <= 0`` or an empty index.
        """
        start_time = time.perf_counter()

        if query.k <= 0 or self.count == 0:
            return Ok(SearchResults())

        try:
            query_vec = query.get_vector()
        except (TypeError, ValueError) as exc:
            return Err(QueryError.invalid_vector(str(exc)))
        if query_vec.dimension != self.dimension:
            return Err(QueryError.dimension_mismatch(self.dimension, query_vec.dimension))

        executor = self._acquire_executor()
        try:
            candidates = collect_candidates(
                query_vec,
                query.candidate_budget,
                self._trees,
                executor,
            )
        finally:
            self._release_executor(executor)
        candidate_idx = np.asarray(candidates.snapshot(), dtype=np.intp)

        distances = sq_euclidean_batch(query_vec.to_numpy(), self._store.values[candidate_idx])
        order = rank_by_distance(distances, query.k)

        matches: list[SearchHit] = []
        for rank, pos in enumerate(order.tolist()):
            idx = int(candidate_idx[pos])
            matches.append(SearchHit(
                id=self._store.ids[idx],
                distance=float(distances[pos]),
                rank=rank,
                vector=self._store.vector(idx) if query.include_vectors else None,
            ))

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        return Ok(SearchResults(
            matches=matches,
            query_time_ms=elapsed_ms,
            total_candidates=len(candidate_idx),
        ))

    def search_approximate(self, query: VectorLike, k: int) -> list[tuple[ExternalId, float]]:
        """
        Top-k ``(id, squared distance)`` pairs, nearest first.

        Raises:
            RuntimeError: If the query is not a flat vector or its dimension
                does not match the index
        """
        if k <= 0:
            return []
        return self.search(SearchQuery(vector=query, k=k)).unwrap().as_tuples()

    # =========================================================================
    # GET
    # =========================================================================
    def get_vector(self, vector_id: ExternalId) -> Result[Vector, BuildError]:
        """Stored vector for ``vector_id`` (the first one kept, if repeated)."""
        idx = self._store.index_of(vector_id)
        if idx is None:
            return Err(BuildError.id_not_found(vector_id))
        return Ok(self._store.vector(idx))

    # =========================================================================
    # STATS
    # =========================================================================
    def stats(self) -> IndexStats:
        total_leaves = 0
        largest_leaf = 0
        max_depth = 0
        for tree in self._trees:
            for leaf, depth in iter_leaves(tree):
                total_leaves += 1
                largest_leaf = max(largest_leaf, len(leaf))
                max_depth = max(max_depth, depth)

        return IndexStats(
            total_vectors=self.count,
            duplicates_dropped=self._store.duplicates_dropped,
            dimension=self.dimension,
            num_trees=self.num_trees,
            total_leaves=total_leaves,
            largest_leaf=largest_leaf,
            max_depth=max_depth,
            build_time_ms=self._build_time_ms,
        )

    # =========================================================================
    # QUERY POOL
    # =========================================================================
    def _acquire_executor(self) -> Optional[Executor]:
        """Lease the query pool for one search; pair with ``_release_executor``."""
        if self._config.sequential or self.num_trees <= 1:
            return None
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._config.max_workers,
                    thread_name_prefix="annforest-query",
                )
                self._executor_users[self._executor] = 0
            self._executor_users[self._executor] += 1
            return self._executor

    def _release_executor(self, executor: Optional[Executor]) -> None:
        if executor is None:
            return
        with self._executor_lock:
            self._executor_users[executor] -= 1
            # A pool detached by close() is shut down by its last user
            retired = executor is not self._executor and self._executor_users[executor] == 0
            if retired:
                del self._executor_users[executor]
        if retired:
            executor.shutdown(wait=True)

    def close(self) -> None:
        """
        Shut down the query thread pool. Later queries start a new one.

        Searches already running keep the pool until they finish; it is shut
        down when the last of them returns.
        """
        with self._executor_lock:
            executor, self._executor = self._executor, None
            idle = executor is not None and self._executor_users[executor] == 0
            if idle:
                del self._executor_users[executor]
        if idle:
            executor.shutdown(wait=True)

    def __enter__(self) -> "ANNIndex":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"ANNIndex(count={self.count}, dimension={self.dimension}, "
            f"num_trees={self.num_trees}, max_size={self._config.max_size})"
        )
