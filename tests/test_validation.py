"""Tests for search request validation."""

import pytest

from kinfinder.models import SearchRequest
from kinfinder.validation import (
    ValidationError,
    parse_finite_number,
    parse_priority,
    validate_request,
)

KNOWN = ["gilmore-girls-demo", "clearview-data"]


def assert_invalid(request, field):
    with pytest.raises(ValidationError) as exc_info:
        validate_request(request, KNOWN)
    assert exc_info.value.field == field


class TestValidateRequest:
    """Test request field checks."""

    def test_defaults_are_valid(self):
        """A bare request with only a case id passes."""
        validate_request(SearchRequest(case_id="CASE-1"), KNOWN)

    def test_case_id_required(self):
        assert_invalid(SearchRequest(case_id=""), "case_id")
        assert_invalid(SearchRequest(case_id="   "), "case_id")

    def test_unknown_relationship_type(self):
        assert_invalid(SearchRequest(case_id="C", relationship_types=["Parent", "Landlord"]), "relationship_types")

    def test_string_allow_set_rejected(self):
        """A bare string is not an allow-set."""
        assert_invalid(SearchRequest(case_id="C", relationship_types="Parent"), "relationship_types")

    def test_unknown_gender(self):
        assert_invalid(SearchRequest(case_id="C", genders=["X"]), "genders")

    def test_unknown_willingness(self):
        assert_invalid(SearchRequest(case_id="C", willingness_levels=["Eager"]), "willingness_levels")

    def test_unknown_source(self):
        assert_invalid(SearchRequest(case_id="C", sources=["nowhere"]), "sources")

    def test_all_enabled_sentinel_accepted(self):
        validate_request(SearchRequest(case_id="C", sources=["all-enabled"]), KNOWN)

    def test_sources_unchecked_without_catalog(self):
        """Source ids are only checked when the known ids are supplied."""
        validate_request(SearchRequest(case_id="C", sources=["nowhere"]))

    @pytest.mark.parametrize("value", [-1, 101, 70.5, True, "70"])
    def test_min_confidence_bounds(self, value):
        assert_invalid(SearchRequest(case_id="C", min_confidence=value), "min_confidence")

    def test_min_confidence_edges_valid(self):
        validate_request(SearchRequest(case_id="C", min_confidence=0), KNOWN)
        validate_request(SearchRequest(case_id="C", min_confidence=100), KNOWN)

    def test_age_range_inverted(self):
        assert_invalid(SearchRequest(case_id="C", age_range=(50, 20)), "age_range")

    def test_age_range_negative(self):
        assert_invalid(SearchRequest(case_id="C", age_range=(-1, 20)), "age_range")

    def test_age_range_not_a_pair(self):
        assert_invalid(SearchRequest(case_id="C", age_range=(18,)), "age_range")

    def test_age_range_single_age(self):
        """min == max is a valid one-year window."""
        validate_request(SearchRequest(case_id="C", age_range=(40, 40)), KNOWN)

    def test_unknown_sort_key(self):
        assert_invalid(SearchRequest(case_id="C", sort_by="age"), "sort_by")

    def test_max_results_positive(self):
        assert_invalid(SearchRequest(case_id="C", max_results=0), "max_results")
        validate_request(SearchRequest(case_id="C", max_results=1), KNOWN)

    def test_focus_age_bounds(self):
        assert_invalid(SearchRequest(case_id="C", focus_age=121), "focus_age")
        validate_request(SearchRequest(case_id="C", focus_age=None), KNOWN)


class TestNumberParsing:
    """Test numeric patch value parsing."""

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), "nan", "inf"])
    def test_non_finite_rejected(self, value):
        with pytest.raises(ValidationError):
            parse_finite_number("cost_per_search", value)

    @pytest.mark.parametrize("value", [None, "abc", True, [1]])
    def test_non_numeric_rejected(self, value):
        with pytest.raises(ValidationError):
            parse_finite_number("cost_per_search", value)

    def test_numeric_string_accepted(self):
        assert parse_finite_number("cost_per_search", "1.25") == 1.25

    def test_priority_whole_numbers(self):
        assert parse_priority(3) == 3
        assert parse_priority("4") == 4
        assert parse_priority(2.0) == 2

    def test_priority_fraction_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_priority(2.5)
        assert exc_info.value.field == "priority"

    def test_error_to_dict(self):
        error = ValidationError("priority", "must be a whole number")
        assert error.to_dict() == {"field": "priority", "reason": "must be a whole number"}
        assert str(error) == "priority: must be a whole number"
