"""
Recommendation policy for ranked search results.

Turns the score distribution of a result set into guidance on how the
assistant should use the retrieved history. Never touches storage.

Dependencies: None (pure domain layer)
System role: Caller guidance for semantic search responses
"""

from enum import Enum
from statistics import fmean
from typing import Iterable

STRONG_CONTEXT_MIN = 0.85
RELEVANT_CONTEXT_MIN = 0.70
BROAD_SEARCH_THRESHOLD = 0.5


class Recommendation(str, Enum):
    """Qualitative bands, selected by mean similarity score."""

    STRONG = "strong historical context, reference directly"
    RELEVANT = "relevant context, consider incorporating"
    LOOSE = "loosely related, may not be directly relevant"
    NONE = "no historical context, treat as new topic"


def recommend(scores: Iterable[float]) -> Recommendation:
    """
    Pick a recommendation band from result scores.

    Args:
        scores: Similarity scores of the returned results

    Returns:
        Recommendation: NONE for an empty input, otherwise the band of the mean
    """
    values = list(scores)
    if not values:
        return Recommendation.NONE

    mean_score = fmean(values)
    if mean_score >= STRONG_CONTEXT_MIN:
        return Recommendation.STRONG
    if mean_score >= RELEVANT_CONTEXT_MIN:
        return Recommendation.RELEVANT
    return Recommendation.LOOSE


def suggest_next_step(threshold: float) -> str:
    """
    Advice for a search that returned nothing.

    Args:
        threshold: Effective similarity threshold of the empty search

    Returns:
        str: Suggestion for the caller
    """
    if threshold > BROAD_SEARCH_THRESHOLD:
        return "Try lowering the similarity threshold for broader results"
    return "This may be a new topic with no historical context"
