"""
Memory retrieval service orchestrator.

Wraps the retrieval engine for callers: applies defaults and clamps,
rounds scores, attaches recommendation and suggestion, and decides between
semantic and keyword search.

Dependencies: memory_backend.core, memory_backend.configs
System role: Memory retrieval use case orchestration
"""

import logging
from typing import Sequence

from memory_backend.configs import get_settings
from memory_backend.configs.memory import MemorySettings
from memory_backend.core.ranker import clamp_limit, clamp_threshold
from memory_backend.core.recommendation import Recommendation, recommend, suggest_next_step
from memory_backend.core.record_store import RecordStore
from memory_backend.core.retrieval import RetrievalEngine
from memory_backend.models.memory import (
    ContextSearchResponse,
    EmbeddingCoverage,
    KeywordSearchResponse,
    PendingSummariesResponse,
    SearchParams,
    SemanticSearchResponse,
    SummaryView,
)

logger = logging.getLogger(__name__)

SCORE_DECIMALS = 4


class MemoryService:
    """Memory retrieval service orchestrator."""

    def __init__(self, store: RecordStore, settings: MemorySettings | None = None) -> None:
        """
        Initialize memory service over a record store.

        Args:
            store: Record store implementation
            settings: Retrieval settings (defaults to application settings)
        """
        self.settings = settings or get_settings().memory
        self.engine = RetrievalEngine(store, self.settings.embedding_dimension)

    def effective_limit(self, limit: int | None) -> int:
        requested = self.settings.default_limit if limit is None else limit
        return clamp_limit(requested, upper=self.settings.max_limit)

    def effective_threshold(self, threshold: float | None) -> float:
        requested = self.settings.default_threshold if threshold is None else threshold
        return clamp_threshold(requested)

    async def semantic_search(
        self,
        query_embedding: Sequence[float],
        message: str | None = None,
        limit: int | None = None,
        threshold: float | None = None,
        include_turns: bool = False,
    ) -> SemanticSearchResponse:
        """
        Ranked semantic search with caller guidance.

        An empty result is a normal response: it carries the "no historical
        context" recommendation and a suggestion for the next step.

        Args:
            query_embedding: Pre-computed embedding of the message
            message: Message the embedding was computed from (echoed back)
            limit: Requested result count (clamped to 1..max_limit)
            threshold: Requested minimum similarity (clamped to 0.0-1.0)
            include_turns: Attach the referenced turns to each result

        Returns:
            SemanticSearchResponse: Results, effective params and recommendation

        Raises:
            InvalidQueryError: Malformed query embedding
            StoreUnavailableError: Record store unreachable
        """
        eff_limit = self.effective_limit(limit)
        eff_threshold = self.effective_threshold(threshold)

        results = await self.engine.semantic_search_enriched(
            query_embedding,
            limit=eff_limit,
            threshold=eff_threshold,
            include_turns=include_turns,
        )
        recommendation = recommend([r.similarity_score for r in results])
        for result in results:
            result.similarity_score = round(result.similarity_score, SCORE_DECIMALS)

        return SemanticSearchResponse(
            query=message,
            results=results,
            total_matches=len(results),
            search_params=SearchParams(
                limit=eff_limit,
                similarity_threshold=eff_threshold,
                include_turns=include_turns,
            ),
            recommendation=recommendation.value,
            suggestion=None if results else suggest_next_step(eff_threshold),
        )

    async def keyword_search(self, query: str, limit: int | None = None) -> KeywordSearchResponse:
        """
        Substring search over summary text, newest first.

        Raises:
            InvalidQueryError: Blank query
        """
        requested = self.settings.default_keyword_limit if limit is None else limit
        eff_limit = clamp_limit(requested, upper=self.settings.max_limit)

        summaries = await self.engine.keyword_search(query, eff_limit)
        return KeywordSearchResponse(
            query=query.strip(),
            results=[SummaryView.from_record(s) for s in summaries],
            total_matches=len(summaries),
        )

    async def search_context(
        self,
        message: str,
        query_embedding: Sequence[float] | None = None,
        limit: int | None = None,
        threshold: float | None = None,
        include_turns: bool = False,
        allow_semantic: bool = True,
    ) -> ContextSearchResponse:
        """
        Pick semantic or keyword search for an incoming message.

        Semantic search runs when an embedding is supplied, semantic search is
        allowed and at least one summary carries an embedding. Otherwise the
        message text is used for keyword search.

        Args:
            message: Incoming message
            query_embedding: Embedding of the message, if available
            limit: Requested result count
            threshold: Requested minimum similarity (semantic mode only)
            include_turns: Attach referenced turns (semantic mode only)
            allow_semantic: Set False to force keyword search

        Returns:
            ContextSearchResponse: Response of whichever mode ran
        """
        use_semantic = False
        if allow_semantic and query_embedding is not None:
            coverage = await self.engine.embedding_coverage()
            use_semantic = coverage.semantic_search_ready

        logger.info(
            f"{__name__}:search_context - Selected search mode",
            extra={"mode": "semantic" if use_semantic else "keyword"},
        )

        if use_semantic:
            semantic = await self.semantic_search(
                query_embedding,
                message=message,
                limit=limit,
                threshold=threshold,
                include_turns=include_turns,
            )
            return ContextSearchResponse(
                mode="semantic",
                semantic=semantic,
                recommendation=semantic.recommendation,
            )

        keyword = await self.keyword_search(message, limit=limit)
        # Unscored text matches never count as strong or relevant context
        recommendation = Recommendation.LOOSE if keyword.results else Recommendation.NONE
        return ContextSearchResponse(
            mode="keyword",
            keyword=keyword,
            recommendation=recommendation.value,
        )

    async def coverage(self) -> EmbeddingCoverage:
        return await self.engine.embedding_coverage()

    async def create_summary(
        self,
        summary_text: str,
        turn_ids: Sequence[str],
        embedding: Sequence[float] | None = None,
    ) -> SummaryView:
        summary = await self.engine.create_summary(summary_text, turn_ids, embedding)
        return SummaryView.from_record(summary)

    async def get_summary(self, summary_id: int) -> SummaryView:
        return SummaryView.from_record(await self.engine.get_summary(summary_id))

    async def set_embedding(self, summary_id: int, embedding: Sequence[float]) -> SummaryView:
        """
        Attach an embedding and return the updated summary.

        Raises:
            DimensionMismatchError: Wrong vector length
            NotFoundError: Unknown summary
        """
        await self.engine.set_embedding(summary_id, embedding)
        return await self.get_summary(summary_id)

    async def pending_summaries(self, limit: int = 100) -> PendingSummariesResponse:
        summaries = await self.engine.summaries_without_embedding(limit)
        return PendingSummariesResponse(
            summaries=[SummaryView.from_record(s) for s in summaries],
            count=len(summaries),
        )

    async def summaries_for_turn(self, turn_id: str) -> list[SummaryView]:
        summaries = await self.engine.summaries_for_turn(turn_id)
        return [SummaryView.from_record(s) for s in summaries]
