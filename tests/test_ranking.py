"""Tests for deduplication, sorting, truncation and facets."""

import pytest

from kinfinder.catalog import SourceCatalog
from kinfinder.dedup import merge_candidates
from kinfinder.models import CandidateRecord
from kinfinder.ranking import build_facets, sort_candidates, truncate


def make_candidate(**overrides) -> CandidateRecord:
    data = dict(
        id="c-1",
        record_id="REC00001",
        source_id="clearview-data",
        first_name="Mary",
        last_name="Smith",
        age=40,
        gender="F",
        relationship_type="Parent",
    )
    data.update(overrides)
    return CandidateRecord(**data)


def ids(candidates):
    return [c.id for c in candidates]


class TestMergeCandidates:
    """Test record_id deduplication by provider priority."""

    def test_lower_priority_number_wins(self):
        """The copy from the higher-ranked source is kept."""
        catalog = SourceCatalog()
        contributions = [
            ("heartland-outreach-network", [make_candidate(id="h-0", record_id="R1", source_id="heartland-outreach-network")]),
            ("clearview-data", [make_candidate(id="c-0", record_id="R1")]),
        ]
        merged = merge_candidates(contributions, catalog.priority_rank)
        assert ids(merged) == ["c-0"]

    def test_priority_tie_uses_catalog_order(self):
        """Equal priorities fall back to catalog position."""
        catalog = SourceCatalog()
        catalog.update("heartland-outreach-network", {"priority": 1})
        contributions = [
            ("heartland-outreach-network", [make_candidate(id="h-0", record_id="R1", source_id="heartland-outreach-network")]),
            ("clearview-data", [make_candidate(id="c-0", record_id="R1")]),
        ]
        merged = merge_candidates(contributions, catalog.priority_rank)
        assert ids(merged) == ["c-0"]

    def test_first_seen_within_source(self):
        """Duplicates inside one provider keep the first copy."""
        catalog = SourceCatalog()
        contributions = [
            ("clearview-data", [
                make_candidate(id="first", record_id="R1"),
                make_candidate(id="second", record_id="R1"),
                make_candidate(id="other", record_id="R2"),
            ]),
        ]
        merged = merge_candidates(contributions, catalog.priority_rank)
        assert ids(merged) == ["first", "other"]

    def test_sources_merged_in_priority_order(self):
        """Higher-priority sources come first in the merged list."""
        catalog = SourceCatalog()
        contributions = [
            ("safegenerations-gpa-ks", [make_candidate(id="s-0", record_id="S1")]),
            ("gilmore-girls-demo", [make_candidate(id="g-0", record_id="G1")]),
            ("clearview-data", [make_candidate(id="c-0", record_id="C1")]),
        ]
        merged = merge_candidates(contributions, catalog.priority_rank)
        assert ids(merged) == ["g-0", "c-0", "s-0"]


class TestSortCandidates:
    """Test sort keys and stability."""

    @pytest.fixture
    def pool(self):
        return [
            make_candidate(id="a", match_score=80, distance=50.0, willingness="Medium", confidence=90),
            make_candidate(id="b", match_score=92, distance=300.0, willingness="Unknown", confidence=75),
            make_candidate(id="c", match_score=80, distance=5.0, willingness="High", confidence=99),
            make_candidate(id="d", match_score=70, distance=120.0, willingness="Low", confidence=80),
        ]

    def test_match_score_descending_stable(self, pool):
        """Ties on match score keep input order."""
        assert ids(sort_candidates(pool, "matchScore")) == ["b", "a", "c", "d"]

    def test_distance_ascending(self, pool):
        assert ids(sort_candidates(pool, "distance")) == ["c", "a", "d", "b"]

    def test_willingness_rank(self, pool):
        """High > Medium > Low > Unknown."""
        assert ids(sort_candidates(pool, "willingness")) == ["c", "a", "d", "b"]

    def test_confidence_descending(self, pool):
        assert ids(sort_candidates(pool, "confidence")) == ["c", "a", "d", "b"]

    def test_unknown_key_rejected(self, pool):
        with pytest.raises(ValueError):
            sort_candidates(pool, "age")

    def test_does_not_mutate_input(self, pool):
        before = ids(pool)
        sort_candidates(pool, "distance")
        assert ids(pool) == before


class TestTruncateAndFacets:
    """Test result capping and facet counts."""

    def test_truncate(self):
        pool = [make_candidate(id=str(i)) for i in range(5)]
        assert ids(truncate(pool, 2)) == ["0", "1"]
        assert len(truncate(pool, None)) == 5
        assert len(truncate(pool, 10)) == 5

    def test_facets(self):
        pool = [
            make_candidate(relationship_type="Parent", gender="F", willingness="High"),
            make_candidate(relationship_type="Parent", gender="M", willingness="High",
                           source_id="social-courts"),
            make_candidate(relationship_type="Cousin", gender="M", willingness="Low"),
        ]
        facets = build_facets(pool)

        assert facets["relationship_type"] == {"Parent": 2, "Cousin": 1}
        assert facets["gender"] == {"F": 1, "M": 2}
        assert facets["willingness"] == {"High": 2, "Low": 1}
        assert facets["source"] == {"clearview-data": 2, "social-courts": 1}

    def test_facets_empty(self):
        assert build_facets([]) == {"relationship_type": {}, "source": {}, "willingness": {}, "gender": {}}
