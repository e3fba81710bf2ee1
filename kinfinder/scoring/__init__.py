"""Scoring module for candidate suitability."""

from .match import (
    MATCH_WEIGHTS,
    calculate_match_score,
    get_match_breakdown,
    round_half_up,
    score_candidates,
)

__all__ = [
    "MATCH_WEIGHTS",
    "calculate_match_score",
    "get_match_breakdown",
    "round_half_up",
    "score_candidates",
]
