"""Ranking, truncation and facet aggregation."""

from collections import Counter
from typing import Optional

from .constants import SORT_KEYS, WILLINGNESS_RANK
from .models import CandidateRecord

# Sort keys; each yields a value where smaller sorts first
SORT_FUNCTIONS = {
    "matchScore": lambda c: -c.match_score,
    "distance": lambda c: c.distance,
    "willingness": lambda c: -WILLINGNESS_RANK.get(c.willingness, 0),
    "confidence": lambda c: -c.confidence,
}

assert set(SORT_FUNCTIONS) == set(SORT_KEYS)


def sort_candidates(candidates: list[CandidateRecord], sort_by: str = "matchScore") -> list[CandidateRecord]:
    """
    Order candidates by the requested key.

    matchScore, willingness and confidence sort descending, distance
    ascending. The sort is stable, so ties keep merge order.

    Raises:
        ValueError: If sort_by is not a known key
    """
    try:
        key = SORT_FUNCTIONS[sort_by]
    except KeyError:
        raise ValueError(f"Unknown sort key: {sort_by}") from None
    return sorted(candidates, key=key)


def truncate(candidates: list[CandidateRecord], max_results: Optional[int]) -> list[CandidateRecord]:
    if max_results is None:
        return list(candidates)
    return candidates[:max_results]


def build_facets(candidates: list[CandidateRecord]) -> dict:
    """
    Count candidates per relationship type, source, willingness and gender.

    Returns:
        Dictionary of facet name -> {value: count}
    """
    return {
        "relationship_type": dict(Counter(c.relationship_type for c in candidates)),
        "source": dict(Counter(c.source_id for c in candidates)),
        "willingness": dict(Counter(c.willingness for c in candidates)),
        "gender": dict(Counter(c.gender for c in candidates)),
    }
