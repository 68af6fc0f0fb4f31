"""
Retrieval engine for conversation memory.

Validates query vectors, loads embedded summaries from the record store,
ranks them with the similarity ranker and optionally enriches the results
with the original turns. Holds no state between calls.

Dependencies: numpy, memory_backend.core.ranker, memory_backend.core.record_store
System role: Semantic and keyword search over conversation summaries
"""

import logging
from typing import Sequence

import numpy as np

from memory_backend.core.exceptions import (
    DimensionMismatchError,
    InvalidQueryError,
    NotFoundError,
)
from memory_backend.core.ranker import RankCandidate, rank, relevance_level
from memory_backend.core.record_store import RecordStore
from memory_backend.models.memory import EmbeddingCoverage, RankedSummary, TurnSnapshot
from memory_backend.models.records import SummaryRecord

logger = logging.getLogger(__name__)


class RetrievalEngine:
    """Ranked semantic search, keyword fallback and summary bookkeeping."""

    def __init__(self, store: RecordStore, embedding_dimension: int) -> None:
        """
        Initialize engine over a record store.

        Args:
            store: Record store implementation
            embedding_dimension: Length every embedding must have
        """
        self.store = store
        self.embedding_dimension = embedding_dimension

    def validate_query_vector(self, query_vector: Sequence[float] | None) -> np.ndarray:
        """
        Check a query embedding before it reaches the store.

        Args:
            query_vector: Candidate query embedding

        Returns:
            np.ndarray: The vector as float64

        Raises:
            InvalidQueryError: Empty, non-numeric, wrong-length, non-finite or zero vector
        """
        if query_vector is None or len(query_vector) == 0:
            raise InvalidQueryError(
                "Query embedding (array of numbers) is required",
                field="query_embedding",
            )

        try:
            vector = np.asarray(query_vector, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidQueryError(
                "Query embedding must contain only numbers",
                field="query_embedding",
            ) from e

        if vector.ndim != 1 or vector.size != self.embedding_dimension:
            raise InvalidQueryError(
                f"Invalid embedding dimension: expected {self.embedding_dimension}, "
                f"got {len(query_vector)}",
                field="query_embedding",
                details={"expected": self.embedding_dimension, "actual": len(query_vector)},
            )
        if not np.all(np.isfinite(vector)):
            raise InvalidQueryError(
                "Query embedding contains NaN or infinite values",
                field="query_embedding",
            )
        if not np.any(vector):
            raise InvalidQueryError(
                "Query embedding has zero magnitude",
                field="query_embedding",
            )
        return vector

    def _check_embedding(self, embedding: Sequence[float], summary_id: int | None = None) -> None:
        if len(embedding) != self.embedding_dimension:
            details = {"summary_id": summary_id} if summary_id is not None else None
            raise DimensionMismatchError(
                expected=self.embedding_dimension,
                actual=len(embedding),
                details=details,
            )
        try:
            vector = np.asarray(embedding, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidQueryError("Embedding must contain only numbers", field="embedding") from e
        if not np.all(np.isfinite(vector)):
            raise InvalidQueryError(
                "Embedding contains NaN or infinite values",
                field="embedding",
                details={"summary_id": summary_id} if summary_id is not None else None,
            )

    async def semantic_search(
        self,
        query_vector: Sequence[float],
        limit: int,
        threshold: float,
    ) -> list[RankedSummary]:
        """
        Return summaries most similar to the query, best first.

        Args:
            query_vector: Query embedding
            limit: Maximum number of results (>= 1)
            threshold: Minimum cosine similarity

        Returns:
            list[RankedSummary]: At most limit results; empty when nothing matches

        Raises:
            InvalidQueryError: Malformed vector or limit < 1
            StoreUnavailableError: Record store unreachable
        """
        vector = self.validate_query_vector(query_vector)
        if limit < 1:
            raise InvalidQueryError("limit must be at least 1", field="limit")

        summaries = await self.store.list_summaries_with_embedding()
        by_id = {s.id: s for s in summaries}
        candidates = [
            RankCandidate(id=s.id, vector=s.embedding, created_at=s.created_at)
            for s in summaries
        ]
        matches = rank(vector, candidates, threshold)[:limit]

        logger.info(
            f"{__name__}:semantic_search - Ranked summaries",
            extra={
                "candidates": len(candidates),
                "matches": len(matches),
                "limit": limit,
                "threshold": threshold,
            },
        )

        results = []
        for match in matches:
            summary = by_id[match.id]
            results.append(
                RankedSummary(
                    id=summary.id,
                    summary_text=summary.summary_text,
                    turn_ids=list(summary.turn_ids),
                    similarity_score=match.score,
                    relevance_level=relevance_level(match.score),
                    created_at=summary.created_at,
                )
            )
        return results

    async def semantic_search_enriched(
        self,
        query_vector: Sequence[float],
        limit: int,
        threshold: float,
        include_turns: bool,
    ) -> list[RankedSummary]:
        """
        Semantic search that can attach each result's referenced turns.

        Referenced turns for all results are fetched in a single store call
        and attached in stored chronological order. Ids that no longer
        resolve (deleted sessions) are skipped.

        Args:
            query_vector: Query embedding
            limit: Maximum number of results (>= 1)
            threshold: Minimum cosine similarity
            include_turns: Attach original turns to each result

        Returns:
            list[RankedSummary]: Ranked results, enriched when requested
        """
        results = await self.semantic_search(query_vector, limit, threshold)
        if not include_turns or not results:
            return results

        wanted = list(dict.fromkeys(tid for r in results for tid in r.turn_ids))
        if not wanted:
            return results

        turns = await self.store.get_turns_by_ids(wanted)
        missing = len(wanted) - len(turns)
        if missing:
            logger.debug(
                f"{__name__}:semantic_search_enriched - Skipping unresolved turn references",
                extra={"missing": missing},
            )

        for result in results:
            referenced = set(result.turn_ids)
            result.turns = [TurnSnapshot.from_record(t) for t in turns if t.turn_id in referenced]
        return results

    async def keyword_search(self, query: str, limit: int) -> list[SummaryRecord]:
        """
        Case-insensitive substring search over summary text, newest first.

        Args:
            query: Search term (matched literally)
            limit: Maximum number of results (>= 1)

        Returns:
            list[SummaryRecord]: Matching summaries

        Raises:
            InvalidQueryError: Blank query or limit < 1
        """
        term = (query or "").strip()
        if not term:
            raise InvalidQueryError("Search query is required", field="search_query")
        if limit < 1:
            raise InvalidQueryError("limit must be at least 1", field="limit")

        summaries = await self.store.search_summaries_by_text(term, limit)
        logger.info(
            f"{__name__}:keyword_search - Text search complete",
            extra={"matches": len(summaries), "limit": limit},
        )
        return summaries

    async def embedding_coverage(self) -> EmbeddingCoverage:
        """Count summaries with and without embeddings."""
        total = await self.store.count_summaries()
        with_embedding = await self.store.count_summaries_with_embedding()
        return EmbeddingCoverage(total=total, with_embedding=with_embedding)

    async def set_embedding(self, summary_id: int, embedding: Sequence[float]) -> None:
        """
        Attach an embedding to an existing summary.

        Args:
            summary_id: Summary primary key
            embedding: Vector of the configured dimension

        Raises:
            DimensionMismatchError: Wrong vector length (checked before store access)
            InvalidQueryError: Non-numeric, NaN or infinite values
            NotFoundError: Unknown summary id
        """
        self._check_embedding(embedding, summary_id)
        updated = await self.store.set_summary_embedding(summary_id, [float(x) for x in embedding])
        if not updated:
            raise NotFoundError("Summary", summary_id)
        logger.info(
            f"{__name__}:set_embedding - Embedding stored",
            extra={"summary_id": summary_id},
        )

    async def create_summary(
        self,
        summary_text: str,
        turn_ids: Sequence[str],
        embedding: Sequence[float] | None = None,
    ) -> SummaryRecord:
        """
        Persist a summary produced by the summarization process.

        Raises:
            InvalidQueryError: Blank summary text, or an embedding with NaN or infinite values
            DimensionMismatchError: Embedding of the wrong length
        """
        if not summary_text or not summary_text.strip():
            raise InvalidQueryError("Summary text is required", field="summary_text")
        if embedding is not None:
            self._check_embedding(embedding)
            embedding = [float(x) for x in embedding]

        summary = await self.store.create_summary(summary_text, list(turn_ids), embedding)
        logger.info(
            f"{__name__}:create_summary - Summary created",
            extra={"summary_id": summary.id, "turn_count": len(summary.turn_ids)},
        )
        return summary

    async def get_summary(self, summary_id: int) -> SummaryRecord:
        summary = await self.store.get_summary(summary_id)
        if summary is None:
            raise NotFoundError("Summary", summary_id)
        return summary

    async def summaries_without_embedding(self, limit: int = 100) -> list[SummaryRecord]:
        """Backlog of summaries waiting for an embedding, oldest first."""
        if limit < 1:
            raise InvalidQueryError("limit must be at least 1", field="limit")
        return await self.store.list_summaries_without_embedding(limit)

    async def summaries_for_turn(self, turn_id: str) -> list[SummaryRecord]:
        return await self.store.list_summaries_for_turn(turn_id)
