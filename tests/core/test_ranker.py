"""
Test suite for the cosine similarity ranker.

Covers self-similarity, dimension checks, ordering and tie-breaks,
threshold monotonicity and the clamp/label helpers.

System role: Verification of ranking semantics
"""

import numpy as np
import pytest

from memory_backend.core.exceptions import DimensionMismatchError
from memory_backend.core.ranker import (
    RankCandidate,
    clamp_limit,
    clamp_threshold,
    cosine_similarity,
    rank,
    relevance_level,
)


class TestCosineSimilarity:
    """Test suite for cosine_similarity()."""

    @pytest.mark.parametrize(
        "vector",
        [[1.0, 2.0, 3.0], [0.5, -0.25, 8.0], [1e-6, 3.0, -2.0, 7.5]],
    )
    def test_vector_is_fully_similar_to_itself(self, vector: list[float]) -> None:
        """Test self-similarity is 1.0."""
        # Act
        score = cosine_similarity(vector, vector)

        # Assert
        assert score == 1.0

    def test_opposite_vectors_score_minus_one(self) -> None:
        """Test opposite directions score -1.0."""
        assert cosine_similarity([1.0, 0.0], [-2.0, 0.0]) == pytest.approx(-1.0)

    def test_orthogonal_vectors_score_zero(self) -> None:
        """Test orthogonal vectors score 0.0."""
        assert cosine_similarity([1.0, 0.0], [0.0, 5.0]) == pytest.approx(0.0)

    def test_zero_vector_scores_zero(self) -> None:
        """Test zero-norm input scores 0.0 instead of dividing by zero."""
        assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0

    def test_mismatched_lengths_raise(self) -> None:
        """Test differing lengths raise DimensionMismatchError."""
        # Act / Assert
        with pytest.raises(DimensionMismatchError) as exc_info:
            cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0])

        assert exc_info.value.expected == 3
        assert exc_info.value.actual == 2


class TestRank:
    """Test suite for rank()."""

    def test_single_self_candidate_scores_one(self, at) -> None:
        """Test rank([a], [(id, a)], 0.0) yields score 1.0."""
        # Arrange
        a = [0.3, 0.1, -0.7, 0.2]

        # Act
        matches = rank(a, [RankCandidate(id=1, vector=a, created_at=at())], 0.0)

        # Assert
        assert len(matches) == 1
        assert matches[0].id == 1
        assert matches[0].score == 1.0

    def test_exact_duplicate_survives_threshold_one(self, at) -> None:
        """Test a stored copy of a high-dimensional query clears threshold 1.0."""
        # Arrange
        rng = np.random.default_rng(7)
        vectors = rng.normal(size=(50, 1536)).tolist()

        # Act / Assert
        for vector in vectors:
            matches = rank(vector, [RankCandidate(id=1, vector=vector, created_at=at())], 1.0)
            assert len(matches) == 1
            assert matches[0].score == 1.0

    def test_negated_vector_scores_exactly_minus_one(self) -> None:
        """Test an exactly opposite high-dimensional vector scores -1.0."""
        rng = np.random.default_rng(11)
        vector = rng.normal(size=1536)

        assert cosine_similarity(vector.tolist(), (-vector).tolist()) == -1.0

    def test_empty_candidates_return_empty(self, query) -> None:
        """Test no candidates yields no matches."""
        assert rank(query, [], 0.0) == []

    def test_candidate_length_mismatch_raises(self, query, at) -> None:
        """Test a candidate of the wrong length raises DimensionMismatchError."""
        # Arrange
        candidates = [
            RankCandidate(id=1, vector=query, created_at=at()),
            RankCandidate(id=2, vector=[1.0, 0.0], created_at=at()),
        ]

        # Act / Assert
        with pytest.raises(DimensionMismatchError) as exc_info:
            rank(query, candidates, 0.0)

        assert exc_info.value.details["candidate_id"] == 2

    def test_results_sorted_by_score_descending(self, query, similar_vector, at) -> None:
        """Test output is non-increasing by score."""
        # Arrange
        scores = [0.3, 0.95, 0.7, 0.81, 0.5, 0.99]
        candidates = [
            RankCandidate(id=i, vector=similar_vector(s), created_at=at(i))
            for i, s in enumerate(scores, start=1)
        ]

        # Act
        matches = rank(query, candidates, 0.0)

        # Assert
        result_scores = [m.score for m in matches]
        assert result_scores == sorted(result_scores, reverse=True)
        assert [m.id for m in matches] == [6, 2, 4, 3, 5, 1]

    def test_scores_below_threshold_are_excluded(self, query, similar_vector, at) -> None:
        """Test candidates strictly below threshold are dropped."""
        # Arrange
        candidates = [
            RankCandidate(id=1, vector=similar_vector(0.9), created_at=at()),
            RankCandidate(id=2, vector=similar_vector(0.6), created_at=at()),
        ]

        # Act
        matches = rank(query, candidates, 0.7)

        # Assert
        assert [m.id for m in matches] == [1]

    def test_raising_threshold_never_adds_results(self, query, similar_vector, at) -> None:
        """Test result count is monotonic non-increasing in threshold."""
        # Arrange
        candidates = [
            RankCandidate(id=i, vector=similar_vector(s), created_at=at(i))
            for i, s in enumerate([0.1, 0.45, 0.6, 0.72, 0.88, 0.97], start=1)
        ]

        # Act
        counts = [len(rank(query, candidates, t)) for t in (0.0, 0.2, 0.5, 0.7, 0.9, 1.0)]

        # Assert
        assert counts == sorted(counts, reverse=True)

    def test_equal_scores_prefer_most_recent(self, query, at) -> None:
        """Test ties are broken by created_at descending."""
        # Arrange
        candidates = [
            RankCandidate(id=1, vector=query, created_at=at(0)),
            RankCandidate(id=2, vector=query, created_at=at(10)),
        ]

        # Act
        matches = rank(query, candidates, 0.0)

        # Assert
        assert [m.id for m in matches] == [2, 1]

    def test_equal_scores_and_times_prefer_highest_id(self, query, at) -> None:
        """Test full ties are broken by id descending."""
        # Arrange
        candidates = [
            RankCandidate(id=3, vector=query, created_at=at()),
            RankCandidate(id=9, vector=query, created_at=at()),
            RankCandidate(id=5, vector=query, created_at=at()),
        ]

        # Act
        matches = rank(query, candidates, 0.0)

        # Assert
        assert [m.id for m in matches] == [9, 5, 3]

    def test_zero_norm_candidate_scores_zero(self, query, at) -> None:
        """Test a zero-norm candidate is kept at score 0.0 when threshold allows."""
        # Arrange
        candidates = [RankCandidate(id=1, vector=[0.0, 0.0, 0.0, 0.0], created_at=at())]

        # Act
        matches = rank(query, candidates, 0.0)

        # Assert
        assert len(matches) == 1
        assert matches[0].score == 0.0

    def test_same_input_gives_same_output(self, query, similar_vector, at) -> None:
        """Test ranking is deterministic."""
        # Arrange
        candidates = [
            RankCandidate(id=i, vector=similar_vector(s), created_at=at(i % 2))
            for i, s in enumerate([0.8, 0.8, 0.75, 0.9, 0.9], start=1)
        ]

        # Act
        first = rank(query, candidates, 0.5)
        second = rank(query, list(reversed(candidates)), 0.5)

        # Assert
        assert first == second


class TestClampsAndLabels:
    """Test suite for clamp_limit(), clamp_threshold() and relevance_level()."""

    @pytest.mark.parametrize(
        "requested, expected",
        [(-3, 1), (0, 1), (1, 1), (7, 7), (20, 20), (21, 20), (500, 20)],
    )
    def test_clamp_limit(self, requested: int, expected: int) -> None:
        assert clamp_limit(requested) == expected

    def test_clamp_limit_respects_custom_upper_bound(self) -> None:
        assert clamp_limit(50, upper=10) == 10

    @pytest.mark.parametrize(
        "requested, expected",
        [(-0.5, 0.0), (0.0, 0.0), (0.42, 0.42), (1.0, 1.0), (1.7, 1.0)],
    )
    def test_clamp_threshold(self, requested: float, expected: float) -> None:
        assert clamp_threshold(requested) == expected

    @pytest.mark.parametrize(
        "score, level",
        [
            (0.95, "very_high"),
            (0.9, "very_high"),
            (0.85, "high"),
            (0.75, "good"),
            (0.65, "moderate"),
            (0.2, "low"),
        ],
    )
    def test_relevance_level(self, score: float, level: str) -> None:
        assert relevance_level(score) == level
