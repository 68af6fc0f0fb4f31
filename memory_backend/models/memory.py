"""
Memory retrieval domain models and schemas.

Request/response schemas for semantic search, keyword search, coverage
diagnostics and summary management.

Dependencies: pydantic, memory_backend.models.records
System role: Memory retrieval API contracts
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, computed_field

from memory_backend.models.records import SummaryRecord, TurnRecord, TurnRole


class TurnSnapshot(BaseModel):
    """Original turn attached to an enriched search result."""

    id: int
    turn_id: str
    role: TurnRole
    content: str
    created_at: datetime

    @classmethod
    def from_record(cls, turn: TurnRecord) -> "TurnSnapshot":
        return cls(
            id=turn.id,
            turn_id=turn.turn_id,
            role=turn.role,
            content=turn.content,
            created_at=turn.created_at,
        )


class RankedSummary(BaseModel):
    """Summary that cleared the similarity threshold."""

    id: int
    summary_text: str
    turn_ids: list[str]
    similarity_score: float = Field(description="Cosine similarity to the query")
    relevance_level: str = Field(description="very_high, high, good, moderate or low")
    created_at: datetime
    turns: list[TurnSnapshot] = Field(
        default_factory=list,
        description="Referenced turns in chronological order (enriched searches only)",
    )


class SummaryView(BaseModel):
    """Summary without its embedding payload."""

    id: int
    summary_text: str
    turn_ids: list[str]
    has_embedding: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, summary: SummaryRecord) -> "SummaryView":
        return cls(
            id=summary.id,
            summary_text=summary.summary_text,
            turn_ids=list(summary.turn_ids),
            has_embedding=summary.has_embedding,
            created_at=summary.created_at,
            updated_at=summary.updated_at,
        )


class EmbeddingCoverage(BaseModel):
    """How many summaries can take part in semantic search."""

    total: int
    with_embedding: int

    @computed_field
    @property
    def without_embedding(self) -> int:
        return self.total - self.with_embedding

    @computed_field
    @property
    def coverage_ratio(self) -> float | None:
        if self.total == 0:
            return None
        return round(self.with_embedding / self.total, 4)

    @computed_field
    @property
    def semantic_search_ready(self) -> bool:
        return self.with_embedding > 0


class SemanticSearchRequest(BaseModel):
    """Request schema for ranked semantic search."""

    message: str | None = Field(default=None, description="Message the embedding was computed from")
    query_embedding: list[float] = Field(description="Pre-computed embedding of the message")
    limit: int | None = Field(default=None, description="Maximum results (clamped to 1-20)")
    similarity_threshold: float | None = Field(
        default=None,
        description="Minimum cosine similarity (clamped to 0.0-1.0)",
    )
    include_turns: bool = Field(
        default=False,
        description="Attach the original turns referenced by each summary",
    )


class SearchParams(BaseModel):
    """Effective parameters after clamping."""

    limit: int
    similarity_threshold: float
    include_turns: bool


class SemanticSearchResponse(BaseModel):
    """Ranked results plus guidance. Same shape whether or not anything matched."""

    query: str | None = None
    results: list[RankedSummary]
    total_matches: int
    search_params: SearchParams
    recommendation: str
    suggestion: str | None = None


class KeywordSearchRequest(BaseModel):
    """Request schema for substring search over summary text."""

    search_query: str = Field(description="Keywords or phrase to look for")
    limit: int | None = Field(default=None, description="Maximum results (clamped to 1-20)")


class KeywordSearchResponse(BaseModel):
    """Unscored keyword matches, newest first."""

    query: str
    results: list[SummaryView]
    total_matches: int
    note: str = "Results are from text matching, not semantic similarity"


class ContextSearchRequest(BaseModel):
    """Request schema for automatic semantic/keyword selection."""

    message: str = Field(description="Incoming message; used verbatim for keyword fallback")
    query_embedding: list[float] | None = Field(default=None, description="Embedding of the message, if available")
    limit: int | None = None
    similarity_threshold: float | None = None
    include_turns: bool = False
    allow_semantic: bool = Field(default=True, description="Set false to force keyword search")


class ContextSearchResponse(BaseModel):
    """Result of automatic mode selection."""

    mode: Literal["semantic", "keyword"]
    semantic: SemanticSearchResponse | None = None
    keyword: KeywordSearchResponse | None = None
    recommendation: str


class CreateSummaryRequest(BaseModel):
    """Request schema for persisting a summary."""

    summary_text: str
    turn_ids: list[str] = Field(default_factory=list)
    embedding: list[float] | None = None


class SetEmbeddingRequest(BaseModel):
    """Request schema for attaching an embedding to a summary."""

    embedding: list[float]


class PendingSummariesResponse(BaseModel):
    """Backlog of summaries without embeddings."""

    summaries: list[SummaryView]
    count: int
