"""
Candidate filtering.

Every predicate is independent, so the pipeline result does not depend on
the order they run in. Note the asymmetry between allow-sets:

- relationship types, sources and genders: ``None`` admits everything,
  an empty list admits nothing
- religions, languages and willingness levels: an empty list means
  "no filter"
"""

import logging
import re
from typing import Callable, Iterable, Optional

from .models import CandidateRecord, SearchRequest

logger = logging.getLogger(__name__)

Predicate = Callable[[CandidateRecord], bool]

_QUALIFIER = re.compile(r"\s*\(.*?\)\s*")


def normalize_language(language: str) -> str:
    """
    Normalize a language name for comparison.

    Examples:
        "Spanish (conversational)" -> "spanish"
        " KOREAN " -> "korean"
    """
    return _QUALIFIER.sub(" ", language or "").strip().lower()


def _allow(values: Optional[Iterable[str]]) -> Optional[set[str]]:
    return None if values is None else set(values)


class FilterPipeline:
    """
    Conjunction of the request's filters.

    Usage:
        pipeline = FilterPipeline(request, enabled_sources={"clearview-data"})
        kept = pipeline.apply(candidates)
    """

    def __init__(self, request: SearchRequest, enabled_sources: Optional[Iterable[str]] = None):
        self.request = request
        self.relationship_types = _allow(request.relationship_types)
        self.genders = _allow(request.genders)
        # Sources are filtered against the already-resolved active set
        self.sources = _allow(enabled_sources)
        self.religions = {r.strip().lower() for r in request.religions}
        self.languages = {normalize_language(lang) for lang in request.languages}
        self.willingness_levels = {w.lower() for w in request.willingness_levels}
        self.relationship_query = (request.relationship_query or "").strip().lower()
        age_min, age_max = request.age_range
        self.age_min = age_min
        self.age_max = age_max

    def matches_relationship(self, candidate: CandidateRecord) -> bool:
        if self.relationship_types is None:
            return True
        return candidate.relationship_type in self.relationship_types

    def matches_source(self, candidate: CandidateRecord) -> bool:
        if self.sources is None:
            return True
        return candidate.source_id in self.sources

    def matches_confidence(self, candidate: CandidateRecord) -> bool:
        return candidate.confidence >= self.request.min_confidence

    def matches_age(self, candidate: CandidateRecord) -> bool:
        return self.age_min <= candidate.age <= self.age_max

    def matches_gender(self, candidate: CandidateRecord) -> bool:
        if self.genders is None:
            return True
        return candidate.gender in self.genders

    def matches_religion(self, candidate: CandidateRecord) -> bool:
        if not self.religions:
            return True
        return (candidate.religion or "").strip().lower() in self.religions

    def matches_language(self, candidate: CandidateRecord) -> bool:
        if not self.languages:
            return True
        spoken = {normalize_language(lang) for lang in candidate.languages}
        return bool(spoken & self.languages)

    def matches_willingness(self, candidate: CandidateRecord) -> bool:
        if not self.willingness_levels:
            return True
        return candidate.willingness.lower() in self.willingness_levels

    def matches_query(self, candidate: CandidateRecord) -> bool:
        if not self.relationship_query:
            return True
        label = (candidate.relationship_label or "").lower()
        return (
            self.relationship_query in candidate.relationship_type.lower()
            or self.relationship_query in label
        )

    @property
    def predicates(self) -> list[Predicate]:
        return [
            self.matches_relationship,
            self.matches_source,
            self.matches_confidence,
            self.matches_age,
            self.matches_gender,
            self.matches_religion,
            self.matches_language,
            self.matches_willingness,
            self.matches_query,
        ]

    def accepts(self, candidate: CandidateRecord) -> bool:
        return all(predicate(candidate) for predicate in self.predicates)

    def apply(self, candidates: list[CandidateRecord]) -> list[CandidateRecord]:
        """
        Keep the candidates that pass every filter, preserving order.

        Args:
            candidates: Scored candidate pool

        Returns:
            Filtered list
        """
        predicates = self.predicates
        kept = [c for c in candidates if all(p(c) for p in predicates)]
        logger.info("Filtered %d candidates down to %d", len(candidates), len(kept))
        return kept


def filter_candidates(
    candidates: list[CandidateRecord],
    request: SearchRequest,
    enabled_sources: Optional[Iterable[str]] = None,
) -> list[CandidateRecord]:
    """Convenience wrapper around FilterPipeline.apply."""
    return FilterPipeline(request, enabled_sources).apply(candidates)
