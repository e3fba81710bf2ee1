"""Data models for the kinship discovery engine."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from .constants import DEFAULT_AGE_RANGE, DEFAULT_MIN_CONFIDENCE


@dataclass
class SourceConfig:
    """A discovery provider as configured in the source catalog."""

    id: str
    name: str
    type: str = ""
    enabled: bool = True
    priority: int = 0
    cost_per_search: Optional[float] = None
    terms_url: Optional[str] = None
    description: str = ""
    icon: str = ""
    sample_data: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage and JSON output."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "enabled": self.enabled,
            "priority": self.priority,
            "cost_per_search": self.cost_per_search,
            "terms_url": self.terms_url,
            "description": self.description,
            "icon": self.icon,
            "sample_data": self.sample_data,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SourceConfig":
        """Build from a stored dictionary, ignoring unknown keys."""
        return cls(
            id=data["id"],
            name=data.get("name") or data["id"],
            type=data.get("type", ""),
            enabled=data.get("enabled", True) is not False,
            priority=int(data.get("priority", 0)),
            cost_per_search=data.get("cost_per_search"),
            terms_url=data.get("terms_url"),
            description=data.get("description", ""),
            icon=data.get("icon", ""),
            sample_data=data.get("sample_data") or {},
        )


@dataclass
class CandidateRecord:
    """One discovered person, scoped to a single search invocation."""

    id: str
    record_id: str
    source_id: str
    first_name: str
    last_name: str
    age: int
    gender: str
    relationship_type: str

    source_name: str = ""
    relationship_label: Optional[str] = None
    religion: Optional[str] = None
    languages: list[str] = field(default_factory=list)

    # Sub-scores (0-100)
    kinship_score: int = 0
    cultural_fit_score: int = 0
    commitment_score: int = 0
    support_system_score: int = 0
    training_score: int = 0

    # Derived from sub-scores by the scoring engine
    match_score: int = 0
    # Provider-reported data quality, independent of match_score
    confidence: int = 0

    distance: float = 0.0
    willingness: str = "Unknown"
    phone: str = ""
    email: str = ""
    city: str = ""
    state: str = ""
    notes: str = ""
    last_updated: Optional[date] = None

    details: dict = field(default_factory=dict)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "record_id": self.record_id,
            "source": {"id": self.source_id, "name": self.source_name or self.source_id},
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "age": self.age,
            "gender": self.gender,
            "relationship_type": self.relationship_type,
            "relationship_label": self.relationship_label,
            "religion": self.religion,
            "languages": list(self.languages),
            "scores": {
                "match": self.match_score,
                "kinship": self.kinship_score,
                "cultural_fit": self.cultural_fit_score,
                "commitment": self.commitment_score,
                "support_system": self.support_system_score,
                "training": self.training_score,
            },
            "confidence": self.confidence,
            "distance": self.distance,
            "willingness": self.willingness,
            "contact": {
                "phone": self.phone,
                "email": self.email,
                "city": self.city,
                "state": self.state,
            },
            "notes": self.notes,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
            "details": self.details,
        }


@dataclass
class SearchRequest:
    """
    Caller-supplied search parameters.

    Allow-set conventions differ by dimension: ``None`` for relationship
    types, sources and genders means "all", while an empty list excludes
    everything. Religions, languages and willingness levels treat an empty
    list as "no filter".
    """

    case_id: str
    relationship_types: Optional[list[str]] = None
    sources: Optional[list[str]] = None
    min_confidence: int = DEFAULT_MIN_CONFIDENCE
    age_range: tuple[int, int] = DEFAULT_AGE_RANGE
    genders: Optional[list[str]] = None
    religions: list[str] = field(default_factory=list)
    languages: list[str] = field(default_factory=list)
    sort_by: str = "matchScore"
    max_results: Optional[int] = None

    # Focus person, used by synthetic providers
    focus_age: Optional[int] = 35
    focus_name: Optional[str] = None

    willingness_levels: list[str] = field(default_factory=list)
    relationship_query: Optional[str] = None

    # Searches supersede only earlier searches with the same session id
    session_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "case_id": self.case_id,
            "relationship_types": self.relationship_types,
            "sources": self.sources,
            "min_confidence": self.min_confidence,
            "age_range": list(self.age_range),
            "genders": self.genders,
            "religions": self.religions,
            "languages": self.languages,
            "sort_by": self.sort_by,
            "max_results": self.max_results,
            "focus_age": self.focus_age,
            "focus_name": self.focus_name,
            "willingness_levels": self.willingness_levels,
            "relationship_query": self.relationship_query,
            "session_id": self.session_id,
        }


class SearchStatus(Enum):
    OK = "ok"
    EMPTY = "empty"
    UNAVAILABLE = "unavailable"
    SUPERSEDED = "superseded"


@dataclass
class SearchResult:
    """Ordered search outcome plus aggregate breakdowns."""

    results: list[CandidateRecord] = field(default_factory=list)
    total_count: int = 0
    facets: dict = field(default_factory=dict)
    status: SearchStatus = SearchStatus.OK
    errors: list[str] = field(default_factory=list)
    sources_queried: list[str] = field(default_factory=list)
    request_id: int = 0

    @property
    def is_unavailable(self) -> bool:
        return self.status == SearchStatus.UNAVAILABLE

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "request_id": self.request_id,
            "status": self.status.value,
            "total_count": self.total_count,
            "returned_count": len(self.results),
            "sources_queried": list(self.sources_queried),
            "errors": list(self.errors),
            "facets": self.facets,
            "results": [candidate.to_dict() for candidate in self.results],
        }
