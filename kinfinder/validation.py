"""Request and configuration-patch validation."""

import math
from typing import Any, Iterable, Optional

from .constants import (
    ALL_ENABLED,
    GENDERS,
    RELATIONSHIP_TYPES,
    SORT_KEYS,
    WILLINGNESS_LEVELS,
)
from .models import SearchRequest


class ValidationError(ValueError):
    """A request or patch field failed validation."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")

    def to_dict(self) -> dict:
        return {"field": self.field, "reason": self.reason}


def parse_finite_number(field: str, value: Any) -> float:
    """
    Parse a numeric patch value, rejecting NaN and infinities.

    Args:
        field: Field name used in the error
        value: Raw value (number or numeric string)

    Returns:
        The parsed float

    Raises:
        ValidationError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise ValidationError(field, "must be a number")
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        raise ValidationError(field, "must be a number") from None
    if not math.isfinite(parsed):
        raise ValidationError(field, "must be a finite number")
    return parsed


def parse_priority(value: Any) -> int:
    """Parse a priority value; it must be a finite whole number."""
    parsed = parse_finite_number("priority", value)
    if not parsed.is_integer():
        raise ValidationError("priority", "must be a whole number")
    return int(parsed)


def _check_allow_set(field: str, values: Optional[Iterable[str]], allowed: Iterable[str]) -> None:
    if values is None:
        return
    if isinstance(values, str):
        raise ValidationError(field, "must be a list, not a string")
    known = set(allowed)
    unknown = [v for v in values if v not in known]
    if unknown:
        raise ValidationError(field, f"unknown value(s): {', '.join(map(str, unknown))}")


def _check_percentage(field: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, "must be an integer")
    if not 0 <= value <= 100:
        raise ValidationError(field, "must be between 0 and 100")


def validate_request(request: SearchRequest, known_sources: Optional[Iterable[str]] = None) -> None:
    """
    Validate a search request before any provider is called.

    Args:
        request: Request to validate
        known_sources: Source ids present in the catalog (skips the check if None)

    Raises:
        ValidationError: On the first malformed field
    """
    if not request.case_id or not str(request.case_id).strip():
        raise ValidationError("case_id", "is required")

    _check_allow_set("relationship_types", request.relationship_types, RELATIONSHIP_TYPES)
    _check_allow_set("genders", request.genders, GENDERS)
    _check_allow_set("willingness_levels", request.willingness_levels, WILLINGNESS_LEVELS)

    if request.sources is not None and known_sources is not None:
        _check_allow_set("sources", request.sources, [*known_sources, ALL_ENABLED])

    _check_percentage("min_confidence", request.min_confidence)

    try:
        age_min, age_max = request.age_range
    except (TypeError, ValueError):
        raise ValidationError("age_range", "must be a [min, max] pair") from None
    for bound in (age_min, age_max):
        if isinstance(bound, bool) or not isinstance(bound, int) or bound < 0:
            raise ValidationError("age_range", "bounds must be non-negative integers")
    if age_min > age_max:
        raise ValidationError("age_range", "min must not exceed max")

    if request.sort_by not in SORT_KEYS:
        raise ValidationError("sort_by", f"must be one of {', '.join(SORT_KEYS)}")

    if request.max_results is not None:
        if isinstance(request.max_results, bool) or not isinstance(request.max_results, int):
            raise ValidationError("max_results", "must be an integer")
        if request.max_results < 1:
            raise ValidationError("max_results", "must be at least 1")

    if request.focus_age is not None:
        if isinstance(request.focus_age, bool) or not isinstance(request.focus_age, int):
            raise ValidationError("focus_age", "must be an integer")
        if not 0 <= request.focus_age <= 120:
            raise ValidationError("focus_age", "must be between 0 and 120")
