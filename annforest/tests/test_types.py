"""
Unit Tests: Core Types

Tests:
    - Vector construction, arithmetic and equality semantics
    - SearchQuery candidate budget
    - SearchHit / SearchResults serialization
    - IndexStats derived fields
"""

import pytest
import numpy as np

from annforest.core.types import (
    IndexStats,
    SearchHit,
    SearchQuery,
    SearchResults,
    Vector,
)


class TestVectorConstruction:
    """Tests for Vector creation."""

    def test_from_list(self):
        """Test creation from Python list."""
        vec = Vector.from_list([1.0, 2.0, 3.0])

        assert vec.dimension == 3
        assert len(vec) == 3
        assert vec.to_list() == [1.0, 2.0, 3.0]

    def test_from_numpy_copies(self):
        """Test that later writes to the source array do not leak in."""
        arr = np.array([1.0, 2.0], dtype=np.float32)
        vec = Vector.from_numpy(arr)
        arr[0] = 99.0

        assert vec[0] == 1.0
        assert vec.to_numpy().dtype == np.float64

    def test_immutable_data(self):
        """Test that the backing array is read-only."""
        vec = Vector.from_list([1.0, 2.0])

        with pytest.raises(ValueError):
            vec.to_numpy()[0] = 5.0

    def test_coerce(self):
        """Test normalization of accepted input types."""
        vec = Vector.from_list([1.0, 2.0])

        assert Vector.coerce(vec) is vec
        assert Vector.coerce([1.0, 2.0]) == vec
        assert Vector.coerce(np.array([1.0, 2.0])) == vec
        assert Vector.coerce((1, 2)) == vec

    @pytest.mark.parametrize("value", [
        np.ones((2, 2)),
        np.array(3.0),
        [[1.0, 1.0], [1.0, 1.0]],
    ])
    def test_rejects_non_flat_input(self, value):
        """Test that matrices and scalars are not flattened into vectors."""
        with pytest.raises(ValueError, match="1-D"):
            Vector.coerce(value)

    def test_iteration(self):
        """Test iteration over components."""
        vec = Vector.from_list([4.0, 5.0])
        assert list(vec) == [4.0, 5.0]


class TestVectorArithmetic:
    """Tests for Vector arithmetic primitives."""

    def test_subtract_from(self):
        a = Vector.from_list([5.0, 3.0])
        b = Vector.from_list([1.0, 1.0])

        assert a.subtract_from(b).to_list() == [4.0, 2.0]

    def test_avg(self):
        a = Vector.from_list([0.0, 4.0])
        b = Vector.from_list([2.0, 0.0])

        assert a.avg(b).to_list() == [1.0, 2.0]

    def test_dot_product(self):
        a = Vector.from_list([1.0, 2.0, 3.0])
        b = Vector.from_list([4.0, 5.0, 6.0])

        assert a.dot_product(b) == 32.0

    def test_sq_euc_dis(self):
        """Test squared distance (3-4-5 triangle)."""
        a = Vector.from_list([0.0, 0.0])
        b = Vector.from_list([3.0, 4.0])

        assert a.sq_euc_dis(b) == 25.0
        assert b.sq_euc_dis(a) == 25.0
        assert a.sq_euc_dis(a) == 0.0


class TestVectorEquality:
    """Tests for component-wise equality."""

    def test_equal_components(self):
        a = Vector.from_list([1.0, 2.0])
        b = Vector.from_list([1.0, 2.0])

        assert a == b
        assert hash(a) == hash(b)

    def test_different_components(self):
        assert Vector.from_list([1.0, 2.0]) != Vector.from_list([1.0, 2.5])

    def test_different_dimension(self):
        assert Vector.from_list([1.0]) != Vector.from_list([1.0, 0.0])

    def test_signed_zero_equal(self):
        """Test that -0.0 and 0.0 compare equal, as components do."""
        a = Vector.from_list([-0.0, 1.0])
        b = Vector.from_list([0.0, 1.0])

        assert a == b
        assert hash(a) == hash(b)
        assert a.key() == b.key()

    def test_nan_never_equal(self):
        a = Vector.from_list([float("nan")])

        assert a != Vector.from_list([float("nan")])

    def test_not_equal_to_list(self):
        assert Vector.from_list([1.0]) != [1.0]


class TestSearchQuery:
    """Tests for SearchQuery."""

    def test_default_budget_is_k(self):
        query = SearchQuery(vector=[0.0, 1.0], k=7)
        assert query.candidate_budget == 7

    def test_budget_never_below_k(self):
        query = SearchQuery(vector=[0.0, 1.0], k=7, num_candidates=3)
        assert query.candidate_budget == 7

    def test_raised_budget(self):
        query = SearchQuery(vector=[0.0, 1.0], k=7, num_candidates=50)
        assert query.candidate_budget == 50

    def test_get_vector(self):
        query = SearchQuery(vector=np.array([1.0, 2.0]), k=1)
        assert query.get_vector() == Vector.from_list([1.0, 2.0])


class TestSearchResults:
    """Tests for SearchHit and SearchResults."""

    def test_hit_to_dict(self):
        hit = SearchHit(id="doc-1", distance=0.5, rank=0)

        assert hit.as_tuple() == ("doc-1", 0.5)
        assert hit.to_dict() == {"id": "doc-1", "distance": 0.5, "rank": 0}

    def test_hit_to_dict_with_vector(self):
        hit = SearchHit(id=1, distance=0.0, vector=Vector.from_list([1.0]))
        assert hit.to_dict()["vector"] == [1.0]

    def test_results_accessors(self):
        results = SearchResults(
            matches=[
                SearchHit(id="a", distance=0.1, rank=0),
                SearchHit(id="b", distance=0.4, rank=1),
            ],
            total_candidates=5,
        )

        assert len(results) == 2
        assert results.ids == ["a", "b"]
        assert results.distances == [0.1, 0.4]
        assert results.as_tuples() == [("a", 0.1), ("b", 0.4)]
        assert results[1].id == "b"
        assert results.to_dict()["total_candidates"] == 5

    def test_empty_results(self):
        results = SearchResults()

        assert len(results) == 0
        assert results.as_tuples() == []


class TestIndexStats:
    """Tests for IndexStats."""

    def test_mean_leaves(self):
        stats = IndexStats(
            total_vectors=100,
            duplicates_dropped=0,
            dimension=8,
            num_trees=4,
            total_leaves=40,
            largest_leaf=10,
            max_depth=6,
        )

        assert stats.mean_leaves_per_tree == 10.0
        assert stats.to_dict()["num_trees"] == 4

    def test_mean_leaves_no_trees(self):
        stats = IndexStats(
            total_vectors=0,
            duplicates_dropped=0,
            dimension=0,
            num_trees=0,
            total_leaves=0,
            largest_leaf=0,
            max_depth=0,
        )
        assert stats.mean_leaves_per_tree == 0.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
