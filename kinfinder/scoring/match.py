"""Match score calculation - How suitable is this candidate?"""

import logging

from ..models import CandidateRecord

logger = logging.getLogger(__name__)


# Weights in hundredths so the weighted sum stays exact
MATCH_WEIGHTS = {
    "kinship_score": 35,
    "cultural_fit_score": 20,
    "commitment_score": 25,
    "support_system_score": 15,
    "training_score": 5,
}

FACTOR_LABELS = {
    "kinship_score": "Kinship",
    "cultural_fit_score": "Cultural fit",
    "commitment_score": "Commitment",
    "support_system_score": "Support system",
    "training_score": "Training",
}

assert sum(MATCH_WEIGHTS.values()) == 100


def round_half_up(numerator: int, denominator: int = 1) -> int:
    """
    Round a non-negative fraction to the nearest integer, halves going up.

    Python's round() uses banker's rounding, so 0.5 -> 0 and 2.5 -> 2.
    Scores must round 0.5 upward instead.

    Examples:
        round_half_up(8650, 100) -> 87
        round_half_up(195, 2) -> 98
    """
    return (2 * numerator + denominator) // (2 * denominator)


def _subscore(candidate: CandidateRecord, name: str) -> int:
    value = getattr(candidate, name, None)
    return int(value) if value else 0


def calculate_match_score(candidate: CandidateRecord) -> int:
    """
    Calculate the match score for a candidate.

    The match score is a fixed weighted average of the five sub-scores:
    35% kinship, 20% cultural fit, 25% commitment, 15% support system
    and 5% training. Missing sub-scores count as zero. Confidence,
    distance and willingness play no part.

    Args:
        candidate: The candidate to score

    Returns:
        Match score from 0-100
    """
    weighted = sum(
        weight * _subscore(candidate, name) for name, weight in MATCH_WEIGHTS.items()
    )
    return min(round_half_up(weighted, 100), 100)


def score_candidates(candidates: list[CandidateRecord]) -> list[CandidateRecord]:
    """
    Recompute match_score on every candidate in place.

    Args:
        candidates: Candidates to score

    Returns:
        The same list, for chaining
    """
    for candidate in candidates:
        candidate.match_score = calculate_match_score(candidate)
    logger.debug("Scored %d candidates", len(candidates))
    return candidates


def get_match_breakdown(candidate: CandidateRecord) -> dict:
    """
    Get a detailed breakdown of match score components.

    Args:
        candidate: The candidate to analyze

    Returns:
        Dictionary with the total and one entry per weighted factor
    """
    breakdown = {
        "total": calculate_match_score(candidate),
        "components": [],
    }

    for name, weight in MATCH_WEIGHTS.items():
        value = _subscore(candidate, name)
        breakdown["components"].append({
            "factor": FACTOR_LABELS[name],
            "score": value,
            "weight": weight / 100,
            "points": weight * value / 100,
        })

    return breakdown
