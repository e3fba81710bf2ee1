"""
Programmatic API for the kinship discovery engine.

Usage:
    from kinfinder import search_candidates

    result = search_candidates("CASE-1042", relationship_types=["Parent", "Sibling"])
    strong = [c for c in result.results if c.match_score > 85]
"""

import asyncio
import logging
from typing import Optional

from .config import Settings, load_config
from .models import SearchRequest, SearchResult
from .orchestrator import SearchOrchestrator, build_default_orchestrator

logger = logging.getLogger(__name__)


def build_request(
    case_id: str,
    settings: Optional[Settings] = None,
    relationship_types: Optional[list[str]] = None,
    sources: Optional[list[str]] = None,
    min_confidence: Optional[int] = None,
    age_range: Optional[tuple[int, int]] = None,
    genders: Optional[list[str]] = None,
    religions: Optional[list[str]] = None,
    languages: Optional[list[str]] = None,
    sort_by: str = "matchScore",
    max_results: Optional[int] = None,
    focus_age: Optional[int] = 35,
    focus_name: Optional[str] = None,
    willingness_levels: Optional[list[str]] = None,
    relationship_query: Optional[str] = None,
) -> SearchRequest:
    """Build a SearchRequest, filling unset defaults from settings."""
    settings = settings or Settings()
    return SearchRequest(
        case_id=case_id,
        relationship_types=relationship_types,
        sources=sources,
        min_confidence=settings.default_min_confidence if min_confidence is None else min_confidence,
        age_range=tuple(age_range) if age_range else (settings.default_age_min, settings.default_age_max),
        genders=genders,
        religions=list(religions or []),
        languages=list(languages or []),
        sort_by=sort_by,
        max_results=max_results,
        focus_age=focus_age,
        focus_name=focus_name,
        willingness_levels=list(willingness_levels or []),
        relationship_query=relationship_query,
    )


def search_candidates(
    case_id: str,
    orchestrator: Optional[SearchOrchestrator] = None,
    config_path: Optional[str] = None,
    seed: Optional[int] = None,
    **filters,
) -> SearchResult:
    """
    Search for kinship candidates for a case.

    Args:
        case_id: Case identifier of the focus person
        orchestrator: Orchestrator to use (a default one is built if not provided)
        config_path: Optional path to YAML config
        seed: Seed for synthetic providers, for reproducible pools
        **filters: Any SearchRequest field (relationship_types, sources,
            min_confidence, age_range, genders, religions, languages,
            sort_by, max_results, focus_age, focus_name,
            willingness_levels, relationship_query)

    Returns:
        SearchResult sorted by the requested key

    Raises:
        ValidationError: If the filters are malformed

    Example:
        result = search_candidates("GG-2000-01", relationship_types=["Parent"])
        for c in result.results:
            print(f"{c.full_name}: {c.match_score}")
    """
    settings = load_config(config_path) if config_path else Settings()
    if orchestrator is None:
        orchestrator = build_default_orchestrator(settings, seed=seed)

    request = build_request(case_id, settings=settings, **filters)
    result = asyncio.run(orchestrator.search(request))

    logger.info(
        "Case %s: %d of %d candidates returned (%s)",
        case_id,
        len(result.results),
        result.total_count,
        result.status.value,
    )
    return result
