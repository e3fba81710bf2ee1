"""
Fixture provider.

Serves hand-curated candidate pools for specific case ids. Fixtures are
YAML files under ``providers/data``; each declares the ``case_id`` it
answers for and an ordered list of residents.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Optional

import yaml

from ..models import CandidateRecord, SearchRequest, SourceConfig
from ..scoring import round_half_up
from .base import CandidateProvider, ProviderError

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"

DEFAULT_LAST_UPDATED = date(2025, 9, 1)


def load_fixture(path: Path) -> dict:
    """
    Load one fixture file.

    Raises:
        ProviderError: If the file is missing or malformed
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ProviderError(f"Cannot load fixture {path.name}: {e}") from e

    if not isinstance(data, dict) or "case_id" not in data or not isinstance(data.get("residents"), list):
        raise ProviderError(f"Fixture {path.name} needs a case_id and a residents list")
    return data


def fixture_confidence(kinship: int, cultural_fit: int) -> int:
    """Confidence for curated records: mean of kinship and cultural fit, capped at 99."""
    return min(99, round_half_up(kinship + cultural_fit, 2))


def resident_to_candidate(resident: dict, index: int, source: SourceConfig) -> CandidateRecord:
    """Convert one fixture resident into a CandidateRecord."""
    first_name, _, rest = resident["name"].partition(" ")
    scores = resident.get("scores", {})
    address = resident.get("address", {})

    last_updated = resident.get("last_updated") or DEFAULT_LAST_UPDATED
    if isinstance(last_updated, str):
        last_updated = date.fromisoformat(last_updated)

    kinship = int(scores.get("kinship", 0))
    cultural_fit = int(scores.get("cultural_fit", 0))

    return CandidateRecord(
        id=f"sh-contact-{index}",
        record_id=f"STARS-{index + 1:03d}",
        source_id=source.id,
        source_name=source.name,
        first_name=first_name,
        last_name=rest or resident["name"],
        age=int(resident["age"]),
        gender=resident["gender"],
        relationship_type=resident["relationship_type"],
        relationship_label=resident.get("relationship_label"),
        religion=resident.get("religion"),
        languages=list(resident.get("languages", [])),
        kinship_score=kinship,
        cultural_fit_score=cultural_fit,
        commitment_score=int(scores.get("commitment", 0)),
        support_system_score=int(scores.get("support_system", 0)),
        training_score=int(scores.get("training", 0)),
        confidence=fixture_confidence(kinship, cultural_fit),
        distance=float(resident.get("distance", 0)),
        willingness=resident.get("willingness", "Unknown"),
        phone=resident.get("phone", ""),
        email=resident.get("email", ""),
        city=address.get("city", ""),
        state=address.get("state", ""),
        notes=resident.get("notes", ""),
        last_updated=last_updated,
        details={
            "occupation": resident.get("occupation"),
            "employer": resident.get("employer"),
            "availability": resident.get("availability"),
            "strengths": list(resident.get("strengths", [])),
            "community_roles": list(resident.get("community_roles", [])),
            "support_capacity": resident.get("support_capacity"),
            "address": dict(address),
        },
    )


class FixtureProvider(CandidateProvider):
    """
    Returns curated pools for case ids that have a fixture.

    Any other case id gets an empty contribution.

    Usage:
        provider = FixtureProvider()
        provider.generate(SearchRequest(case_id="GG-2000-01"), source)
    """

    name = "fixture"

    def __init__(self, data_dir: Optional[Path] = None):
        self.data_dir = Path(data_dir) if data_dir else DATA_DIR
        self._fixtures: Optional[dict[str, dict]] = None

    @property
    def fixtures(self) -> dict[str, dict]:
        """Fixtures keyed by case id, loaded on first access."""
        if self._fixtures is None:
            self._fixtures = {}
            for path in sorted(self.data_dir.glob("*.yaml")):
                data = load_fixture(path)
                self._fixtures[str(data["case_id"])] = data
            logger.debug("Loaded %d fixtures from %s", len(self._fixtures), self.data_dir)
        return self._fixtures

    def case_ids(self) -> list[str]:
        return list(self.fixtures)

    def generate(self, request: SearchRequest, source: SourceConfig) -> list[CandidateRecord]:
        fixture = self.fixtures.get(request.case_id)
        if fixture is None:
            logger.debug("No fixture for case %s", request.case_id)
            return []

        candidates = [
            resident_to_candidate(resident, index, source)
            for index, resident in enumerate(fixture["residents"])
        ]
        logger.info("Fixture %s supplied %d candidates", fixture.get("scenario", request.case_id), len(candidates))
        return candidates
