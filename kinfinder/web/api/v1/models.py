"""Pydantic models for API v1."""

from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from kinfinder.constants import DEFAULT_AGE_RANGE, DEFAULT_MIN_CONFIDENCE
from kinfinder.models import SearchRequest


class SearchPayload(BaseModel):
    """Search request payload."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "case_id": "GG-2000-01",
                "relationship_types": ["Parent"],
                "sources": ["all-enabled"],
                "min_confidence": 70,
                "sort_by": "matchScore",
                "max_results": 20,
            }
        }
    )

    case_id: str = Field(min_length=1)
    relationship_types: Optional[List[str]] = None
    sources: Optional[List[str]] = None
    min_confidence: int = DEFAULT_MIN_CONFIDENCE
    age_range: Tuple[int, int] = DEFAULT_AGE_RANGE
    genders: Optional[List[str]] = None
    religions: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    sort_by: str = "matchScore"
    max_results: Optional[int] = None
    focus_age: Optional[int] = 35
    focus_name: Optional[str] = None
    willingness_levels: List[str] = Field(default_factory=list)
    relationship_query: Optional[str] = None
    session_id: Optional[str] = Field(
        default=None,
        description="Searches sharing a session id supersede each other; omitted means a fresh session per call",
    )

    def to_request(self) -> SearchRequest:
        data = self.model_dump()
        data["session_id"] = self.session_id or uuid4().hex
        return SearchRequest(**data)


class ErrorResponse(BaseModel):
    """Field-level validation failure."""
    field: str
    reason: str


class SourceResponse(BaseModel):
    """Catalog entry."""
    id: str
    name: str
    type: str
    enabled: bool
    priority: int
    cost_per_search: Optional[float] = None
    terms_url: Optional[str] = None
    description: str = ""
    icon: str = ""
    sample_data: Dict[str, Any] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    sources_enabled: int
    uptime_seconds: int
