"""Deduplication logic for merging candidates from multiple providers."""

import logging
from typing import Callable, Iterable

from .models import CandidateRecord

logger = logging.getLogger(__name__)


def merge_candidates(
    contributions: Iterable[tuple[str, list[CandidateRecord]]],
    priority_rank: Callable[[str], tuple],
) -> list[CandidateRecord]:
    """
    Merge per-source candidate lists, keeping one record per record_id.

    Sources are merged in priority order (lowest number first, ties by
    catalog position), so the first copy of a record_id seen is the one
    from the highest-ranked provider. Within a source, the first copy wins.

    Args:
        contributions: (source_id, candidates) pairs in any order
        priority_rank: Sort key for a source id, e.g. SourceCatalog.priority_rank

    Returns:
        Merged list: higher-priority sources first, provider order within each
    """
    ordered = sorted(contributions, key=lambda item: priority_rank(item[0]))

    seen: dict[str, CandidateRecord] = {}
    merged: list[CandidateRecord] = []
    total = 0

    for source_id, candidates in ordered:
        for candidate in candidates:
            total += 1
            kept = seen.get(candidate.record_id)
            if kept is not None:
                logger.debug(
                    "Dropping duplicate %s from %s (kept copy from %s)",
                    candidate.record_id,
                    source_id,
                    kept.source_id,
                )
                continue
            seen[candidate.record_id] = candidate
            merged.append(candidate)

    logger.info("Merged %d candidates down to %d unique records", total, len(merged))
    return merged
