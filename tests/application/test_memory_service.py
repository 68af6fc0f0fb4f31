"""
Test suite for MemoryService.

Tests parameter defaults and clamping, score rounding, recommendation and
suggestion shaping, and the semantic/keyword selection of search_context.
Runs against the in-memory record store.

System role: Verification of memory retrieval orchestration
"""

import pytest

from memory_backend.core.exceptions import (
    DimensionMismatchError,
    InvalidQueryError,
    NotFoundError,
)
from memory_backend.core.recommendation import Recommendation
from memory_backend.application.services.memory_service import MemoryService


@pytest.fixture
def service(memory_store, memory_settings) -> MemoryService:
    return MemoryService(memory_store, memory_settings)


@pytest.fixture
async def stocked_store(memory_store, similar_vector):
    """Three embedded summaries (0.92, 0.81, 0.55) and one without embedding."""
    for text, score in (("sleep trouble", 0.92), ("work stress", 0.81), ("weekend plans", 0.55)):
        await memory_store.create_summary(text, [], similar_vector(score))
    await memory_store.create_summary("unembedded anxiety note", [])
    return memory_store


class TestEffectiveParams:
    """Test suite for limit and threshold defaults and clamps."""

    @pytest.mark.parametrize("requested, expected", [(None, 5), (0, 1), (-4, 1), (7, 7), (50, 20)])
    def test_effective_limit(self, service, requested, expected) -> None:
        assert service.effective_limit(requested) == expected

    @pytest.mark.parametrize(
        "requested, expected",
        [(None, 0.7), (-0.3, 0.0), (0.0, 0.0), (0.45, 0.45), (1.7, 1.0)],
    )
    def test_effective_threshold(self, service, requested, expected) -> None:
        assert service.effective_threshold(requested) == expected


class TestSemanticSearch:
    """Test suite for MemoryService.semantic_search()."""

    @pytest.mark.asyncio
    async def test_results_are_ranked_and_rounded(self, service, stocked_store, query) -> None:
        """Test default threshold keeps two results with scores rounded to 4 places."""
        # Act
        response = await service.semantic_search(query, message="can't sleep")

        # Assert
        assert response.query == "can't sleep"
        assert [r.summary_text for r in response.results] == ["sleep trouble", "work stress"]
        assert [r.similarity_score for r in response.results] == [0.92, 0.81]
        assert response.total_matches == 2
        assert response.recommendation == Recommendation.STRONG.value
        assert response.suggestion is None
        assert response.search_params.limit == 5
        assert response.search_params.similarity_threshold == 0.7

    @pytest.mark.asyncio
    async def test_empty_result_carries_guidance(self, service, stocked_store, query) -> None:
        """Test a strict threshold yields an empty, well-formed response."""
        # Act
        response = await service.semantic_search(query, threshold=0.95)

        # Assert
        assert response.results == []
        assert response.total_matches == 0
        assert response.recommendation == Recommendation.NONE.value
        assert response.suggestion == "Try lowering the similarity threshold for broader results"

    @pytest.mark.asyncio
    async def test_empty_store_suggests_new_topic(self, service, query) -> None:
        # Act
        response = await service.semantic_search(query, threshold=0.3)

        # Assert
        assert response.results == []
        assert response.suggestion == "This may be a new topic with no historical context"

    @pytest.mark.asyncio
    async def test_limit_is_clamped(self, service, stocked_store, query) -> None:
        # Act
        response = await service.semantic_search(query, limit=0, threshold=0.0)

        # Assert
        assert response.search_params.limit == 1
        assert len(response.results) == 1

    @pytest.mark.asyncio
    async def test_wrong_length_query_rejected(self, service, stocked_store) -> None:
        # Act
        with pytest.raises(InvalidQueryError) as exc_info:
            await service.semantic_search([1.0, 0.0, 0.0])

        # Assert
        assert exc_info.value.details["expected"] == 4
        assert exc_info.value.details["actual"] == 3

    @pytest.mark.asyncio
    async def test_band_uses_unrounded_scores(self, service, memory_store, similar_vector, query) -> None:
        """Test a score just under 0.85 stays RELEVANT even though it displays as 0.85."""
        # Arrange
        await memory_store.create_summary("almost strong", [], similar_vector(0.849996))

        # Act
        response = await service.semantic_search(query, threshold=0.5)

        # Assert
        assert [r.similarity_score for r in response.results] == [0.85]
        assert response.recommendation == Recommendation.RELEVANT.value


class TestKeywordSearch:
    """Test suite for MemoryService.keyword_search()."""

    @pytest.mark.asyncio
    async def test_keyword_search(self, service, stocked_store) -> None:
        # Act
        response = await service.keyword_search("  ANXIETY ")

        # Assert
        assert response.query == "ANXIETY"
        assert [r.summary_text for r in response.results] == ["unembedded anxiety note"]
        assert response.results[0].has_embedding is False
        assert response.note == "Results are from text matching, not semantic similarity"

    @pytest.mark.asyncio
    async def test_blank_query_rejected(self, service) -> None:
        with pytest.raises(InvalidQueryError):
            await service.keyword_search("   ")


class TestSearchContext:
    """Test suite for MemoryService.search_context()."""

    @pytest.mark.asyncio
    async def test_semantic_when_embeddings_exist(self, service, stocked_store, query) -> None:
        # Act
        response = await service.search_context("can't sleep", query_embedding=query)

        # Assert
        assert response.mode == "semantic"
        assert response.keyword is None
        assert response.semantic.total_matches == 2
        assert response.recommendation == response.semantic.recommendation

    @pytest.mark.asyncio
    async def test_keyword_without_embedding(self, service, stocked_store) -> None:
        # Act
        response = await service.search_context("anxiety")

        # Assert
        assert response.mode == "keyword"
        assert response.semantic is None
        assert response.keyword.total_matches == 1
        assert response.recommendation == Recommendation.LOOSE.value

    @pytest.mark.asyncio
    async def test_keyword_when_no_summary_is_embedded(self, service, memory_store, query) -> None:
        """Test an embedding alone does not force semantic mode on an unembedded corpus."""
        # Arrange
        await memory_store.create_summary("only text", [])

        # Act
        response = await service.search_context("nothing here", query_embedding=query)

        # Assert
        assert response.mode == "keyword"
        assert response.keyword.results == []
        assert response.recommendation == Recommendation.NONE.value

    @pytest.mark.asyncio
    async def test_semantic_can_be_disabled(self, service, stocked_store, query) -> None:
        # Act
        response = await service.search_context(
            "sleep",
            query_embedding=query,
            allow_semantic=False,
        )

        # Assert
        assert response.mode == "keyword"
        assert [r.summary_text for r in response.keyword.results] == ["sleep trouble"]


class TestSummaryManagement:
    """Test suite for summary creation, embedding and backlog."""

    @pytest.mark.asyncio
    async def test_set_embedding_returns_updated_view(self, service, query) -> None:
        # Arrange
        created = await service.create_summary("pending", ["t1"])

        # Act
        view = await service.set_embedding(created.id, query)

        # Assert
        assert created.has_embedding is False
        assert view.has_embedding is True
        assert (await service.coverage()).with_embedding == 1

    @pytest.mark.asyncio
    async def test_set_embedding_errors(self, service, query) -> None:
        # Arrange
        created = await service.create_summary("pending", [])

        # Act / Assert
        with pytest.raises(DimensionMismatchError):
            await service.set_embedding(created.id, [1.0, 0.0])
        with pytest.raises(NotFoundError):
            await service.set_embedding(999, query)

    @pytest.mark.asyncio
    async def test_pending_and_coverage(self, service, stocked_store) -> None:
        # Act
        pending = await service.pending_summaries()
        coverage = await service.coverage()

        # Assert
        assert pending.count == 1
        assert pending.summaries[0].summary_text == "unembedded anxiety note"
        assert coverage.total == 4
        assert coverage.without_embedding == 1
        assert coverage.coverage_ratio == 0.75
        assert coverage.semantic_search_ready is True

    @pytest.mark.asyncio
    async def test_summaries_for_turn(self, service) -> None:
        # Arrange
        await service.create_summary("mentions turn", ["t-1", "t-2"])
        await service.create_summary("unrelated", ["t-3"])

        # Act
        views = await service.summaries_for_turn("t-2")

        # Assert
        assert [v.summary_text for v in views] == ["mentions turn"]
