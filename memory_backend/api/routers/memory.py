"""
Memory retrieval API endpoints.

Routes:
- POST /memory/search - Ranked semantic search (optionally enriched with turns)
- POST /memory/search/text - Keyword search over summary text
- POST /memory/context - Automatic semantic/keyword selection
- GET /memory/stats - Embedding coverage
- GET /memory/summaries/pending - Summaries waiting for an embedding
- POST /memory/summaries - Create summary
- GET /memory/summaries/{summary_id} - Get summary
- PUT /memory/summaries/{summary_id}/embedding - Attach embedding
- GET /memory/summaries/by-turn/{turn_id} - Summaries referencing a turn

Dependencies: memory_backend.application.services.memory_service, memory_backend.models
System role: Memory retrieval HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from memory_backend.api.deps import get_memory_service
from memory_backend.api.error_handling import handle_memory_errors
from memory_backend.application.services.memory_service import MemoryService
from memory_backend.models.memory import (
    ContextSearchRequest,
    ContextSearchResponse,
    CreateSummaryRequest,
    EmbeddingCoverage,
    KeywordSearchRequest,
    KeywordSearchResponse,
    PendingSummariesResponse,
    SemanticSearchRequest,
    SemanticSearchResponse,
    SetEmbeddingRequest,
    SummaryView,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/memory", tags=["memory"])


@router.post("/search", response_model=SemanticSearchResponse)
@handle_memory_errors
async def semantic_search(
    request: SemanticSearchRequest,
    memory_service: MemoryService = Depends(get_memory_service),
) -> SemanticSearchResponse:
    """
    Find past summaries most similar to a message embedding.

    Args:
        request: Query embedding with optional limit, threshold and include_turns
        memory_service: Injected MemoryService

    Returns:
        SemanticSearchResponse: Ranked results with recommendation

    Raises:
        HTTPException(400): Malformed embedding
        HTTPException(503): Record store unavailable
    """
    return await memory_service.semantic_search(
        request.query_embedding,
        message=request.message,
        limit=request.limit,
        threshold=request.similarity_threshold,
        include_turns=request.include_turns,
    )


@router.post("/search/text", response_model=KeywordSearchResponse)
@handle_memory_errors
async def keyword_search(
    request: KeywordSearchRequest,
    memory_service: MemoryService = Depends(get_memory_service),
) -> KeywordSearchResponse:
    """Substring search over summary text, newest first."""
    return await memory_service.keyword_search(request.search_query, limit=request.limit)


@router.post("/context", response_model=ContextSearchResponse)
@handle_memory_errors
async def search_context(
    request: ContextSearchRequest,
    memory_service: MemoryService = Depends(get_memory_service),
) -> ContextSearchResponse:
    """Semantic search when possible, keyword search otherwise."""
    return await memory_service.search_context(
        request.message,
        query_embedding=request.query_embedding,
        limit=request.limit,
        threshold=request.similarity_threshold,
        include_turns=request.include_turns,
        allow_semantic=request.allow_semantic,
    )


@router.get("/stats", response_model=EmbeddingCoverage)
@handle_memory_errors
async def embedding_stats(
    memory_service: MemoryService = Depends(get_memory_service),
) -> EmbeddingCoverage:
    """Summary counts with and without embeddings."""
    return await memory_service.coverage()


@router.get("/summaries/pending", response_model=PendingSummariesResponse)
@handle_memory_errors
async def pending_summaries(
    limit: int = Query(default=100, ge=1, le=1000),
    memory_service: MemoryService = Depends(get_memory_service),
) -> PendingSummariesResponse:
    """Backlog for the embedding job, oldest first."""
    return await memory_service.pending_summaries(limit)


@router.post("/summaries", response_model=SummaryView, status_code=status.HTTP_201_CREATED)
@handle_memory_errors
async def create_summary(
    request: CreateSummaryRequest,
    memory_service: MemoryService = Depends(get_memory_service),
) -> SummaryView:
    """
    Persist a summary.

    Raises:
        HTTPException(400): Blank text or wrong embedding length
    """
    return await memory_service.create_summary(
        request.summary_text,
        request.turn_ids,
        request.embedding,
    )


@router.get("/summaries/by-turn/{turn_id}", response_model=list[SummaryView])
@handle_memory_errors
async def summaries_for_turn(
    turn_id: str,
    memory_service: MemoryService = Depends(get_memory_service),
) -> list[SummaryView]:
    """Summaries that reference a turn, newest first."""
    return await memory_service.summaries_for_turn(turn_id)


@router.get("/summaries/{summary_id}", response_model=SummaryView)
@handle_memory_errors
async def get_summary(
    summary_id: int,
    memory_service: MemoryService = Depends(get_memory_service),
) -> SummaryView:
    """
    Get a summary by id.

    Raises:
        HTTPException(404): Summary not found
    """
    return await memory_service.get_summary(summary_id)


@router.put("/summaries/{summary_id}/embedding", response_model=SummaryView)
@handle_memory_errors
async def set_embedding(
    summary_id: int,
    request: SetEmbeddingRequest,
    memory_service: MemoryService = Depends(get_memory_service),
) -> SummaryView:
    """
    Attach an embedding to a summary.

    Raises:
        HTTPException(400): Wrong embedding length
        HTTPException(404): Summary not found
    """
    return await memory_service.set_embedding(summary_id, request.embedding)
