"""
kinfinder - Kinship candidate discovery engine.

Query configured providers for a focus person's relatives and support
network, score each candidate for placement suitability, then filter,
rank and export the results.

CLI Usage:
    kinfinder search CASE-1042 --relationship Parent --relationship Sibling
    kinfinder search GG-2000-01 -f csv -o results.csv
    kinfinder sources enable gilmore-girls-demo
    kinfinder web  # Start HTTP API

Library Usage:
    from kinfinder import search_candidates

    result = search_candidates("CASE-1042", min_confidence=80, max_results=10)

    for c in result.results:
        print(f"{c.full_name}: {c.match_score}")
"""

__version__ = "1.0.0"

# Semantic versioning
# MAJOR.MINOR.PATCH
VERSION_INFO = {
    "major": 1,
    "minor": 0,
    "patch": 0,
    "release": "stable",  # stable, beta, alpha
}


def get_version() -> str:
    """Get full version string."""
    version = f"{VERSION_INFO['major']}.{VERSION_INFO['minor']}.{VERSION_INFO['patch']}"
    if VERSION_INFO["release"] != "stable":
        version += f"-{VERSION_INFO['release']}"
    return version


from kinfinder.api import search_candidates
from kinfinder.models import CandidateRecord, SearchRequest, SearchResult, SearchStatus

__all__ = [
    "search_candidates",
    "CandidateRecord",
    "SearchRequest",
    "SearchResult",
    "SearchStatus",
    "__version__",
    "get_version",
    "VERSION_INFO",
]
