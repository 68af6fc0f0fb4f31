"""
Cosine similarity ranking over summary embeddings.

Scores every candidate against a query vector in one vectorised pass,
drops candidates under the threshold and returns a deterministic ordering.
No I/O and no state: safe to call concurrently and repeatedly.

Dependencies: numpy, memory_backend.core.exceptions
System role: Similarity ranker for semantic search
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

import numpy as np

from memory_backend.core.exceptions import DimensionMismatchError

MIN_LIMIT = 1
MAX_LIMIT = 20
MIN_THRESHOLD = 0.0
MAX_THRESHOLD = 1.0

# Float error on parallel vectors is a few ulps; anything this close to +-1 is exact.
UNIT_TOLERANCE = 1e-9


@dataclass(frozen=True)
class RankCandidate:
    """Summary id with its embedding and creation time (tie-break key)."""

    id: int
    vector: Sequence[float]
    created_at: datetime


@dataclass(frozen=True)
class RankedMatch:
    """Candidate that cleared the threshold, with its cosine similarity."""

    id: int
    score: float
    created_at: datetime


def _snap_unit(scores: np.ndarray) -> np.ndarray:
    scores = np.clip(scores, -1.0, 1.0)
    scores = np.where(np.isclose(scores, 1.0, rtol=0.0, atol=UNIT_TOLERANCE), 1.0, scores)
    return np.where(np.isclose(scores, -1.0, rtol=0.0, atol=UNIT_TOLERANCE), -1.0, scores)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Compute cosine similarity dot(a, b) / (|a| * |b|).

    Args:
        a: First vector
        b: Second vector

    Returns:
        float: Similarity in [-1.0, 1.0]; 0.0 if either vector has zero norm

    Raises:
        DimensionMismatchError: If the vectors differ in length
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise DimensionMismatchError(expected=va.size, actual=vb.size)

    denom = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if denom == 0.0:
        return 0.0
    return float(_snap_unit(np.asarray(np.dot(va, vb) / denom)))


def rank(
    query: Sequence[float],
    candidates: Sequence[RankCandidate],
    threshold: float,
) -> list[RankedMatch]:
    """
    Rank candidates by cosine similarity to the query.

    Candidates scoring strictly below threshold are excluded. The rest are
    ordered by score descending, then most recent created_at, then highest id,
    so equal inputs always produce the same ordering.

    Args:
        query: Query embedding
        candidates: Summaries carrying embeddings
        threshold: Minimum similarity to keep a candidate

    Returns:
        list[RankedMatch]: Matches in relevance order (possibly empty)

    Raises:
        DimensionMismatchError: If any candidate length differs from the query
    """
    if not candidates:
        return []

    q = np.asarray(query, dtype=np.float64)
    for candidate in candidates:
        if len(candidate.vector) != q.size:
            raise DimensionMismatchError(
                expected=q.size,
                actual=len(candidate.vector),
                details={"candidate_id": candidate.id},
            )

    matrix = np.asarray([c.vector for c in candidates], dtype=np.float64)
    dots = matrix @ q
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(q)
    with np.errstate(divide="ignore", invalid="ignore"):
        scores = np.where(norms > 0, dots / norms, 0.0)
    scores = _snap_unit(scores)

    matches = [
        RankedMatch(id=c.id, score=float(score), created_at=c.created_at)
        for c, score in zip(candidates, scores)
        if float(score) >= threshold
    ]
    matches.sort(key=lambda m: (m.score, m.created_at, m.id), reverse=True)
    return matches


def clamp_limit(limit: int, upper: int = MAX_LIMIT) -> int:
    """Clamp a requested result count into [MIN_LIMIT, upper]."""
    return min(max(MIN_LIMIT, int(limit)), upper)


def clamp_threshold(threshold: float) -> float:
    """Clamp a requested similarity threshold into [0.0, 1.0]."""
    return min(max(MIN_THRESHOLD, float(threshold)), MAX_THRESHOLD)


def relevance_level(score: float) -> str:
    """
    Label a similarity score for display.

    Args:
        score: Cosine similarity

    Returns:
        str: very_high, high, good, moderate or low
    """
    if score >= 0.9:
        return "very_high"
    if score >= 0.8:
        return "high"
    if score >= 0.7:
        return "good"
    if score >= 0.6:
        return "moderate"
    return "low"
