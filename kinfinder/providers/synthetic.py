"""Synthetic candidate provider backed by a seedable random source."""

import logging
import random
from datetime import date, timedelta
from typing import Callable, Optional

from ..config import (
    BASELINE_KINSHIP_SCORE,
    CITIES,
    FIRST_NAMES,
    KINSHIP_SCORES,
    LANGUAGE_SETS,
    LAST_NAMES,
    RECORD_NOTES,
    RELIGIONS,
    STATES,
    SUBSCORE_RANGE_OVERRIDES,
    SUBSCORE_RANGES,
    WILLINGNESS_DRAW,
)
from ..constants import GENDERS, RELATIONSHIP_TYPES
from ..models import CandidateRecord, SearchRequest, SourceConfig
from .base import CandidateProvider

logger = logging.getLogger(__name__)

POOL_SIZE = (25, 40)
CONFIDENCE_RANGE = (70, 99)
DISTANCE_RANGE = (1, 500)

# Age when no focus age is known
UNANCHORED_AGE = (25, 59)

SHARED_SURNAME_TYPES = {"Parent", "Sibling"}


def _clamp(value: int, low: Optional[int] = None, high: Optional[int] = None) -> int:
    if low is not None:
        value = max(low, value)
    if high is not None:
        value = min(high, value)
    return value


def relative_age(relationship_type: str, focus_age: Optional[int], rng: random.Random) -> int:
    """
    Draw an age for a relative of someone aged ``focus_age``.

    Each type applies its own offset window and clamp, e.g. parents are
    25-44 years older but never over 60, cousins are within 10 years and
    kept between 20 and 55.
    """
    if focus_age is None:
        return rng.randint(*UNANCHORED_AGE)

    base = focus_age
    if relationship_type == "Parent":
        age = _clamp(base + 25 + rng.randrange(20), high=60)
    elif relationship_type == "Child":
        age = _clamp(base - 25 - rng.randrange(15), low=0)
    elif relationship_type == "Sibling":
        age = _clamp(base + rng.randrange(15) - 7, low=20)
    elif relationship_type == "Grandparent":
        age = _clamp(base + 45 + rng.randrange(20), high=75)
    elif relationship_type == "Grandchild":
        age = _clamp(base - 50 - rng.randrange(15), low=0)
    elif relationship_type == "Spouse/Partner":
        age = base + rng.randint(-3, 3)
    elif relationship_type == "Aunt/Uncle":
        age = _clamp(base + 15 + rng.randrange(20), high=55)
    elif relationship_type == "Cousin":
        age = _clamp(base + rng.randrange(20) - 10, low=20, high=55)
    else:
        age = _clamp(base + rng.randrange(20) - 10, low=25, high=55)

    return max(0, age)


def subscore_range(relationship_type: str, name: str) -> tuple[int, int]:
    overrides = SUBSCORE_RANGE_OVERRIDES.get(relationship_type, {})
    return overrides.get(name, SUBSCORE_RANGES[name])


def random_phone(rng: random.Random) -> str:
    return f"({rng.randint(100, 999)}) {rng.randint(100, 999)}-{rng.randint(1000, 9999)}"


class SyntheticProvider(CandidateProvider):
    """
    Generates a plausible random pool of relatives and contacts.

    Every field is populated from fixed reference lists. Pass a seeded
    ``random.Random`` (or ``seed``) for reproducible pools.
    """

    name = "synthetic"

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self.rng = rng if rng is not None else random.Random(seed)
        self.today = today or date.today

    def generate_person(
        self,
        index: int,
        relationship_type: str,
        request: SearchRequest,
        source: SourceConfig,
    ) -> CandidateRecord:
        rng = self.rng

        gender = rng.choice(GENDERS)
        first_name = rng.choice(FIRST_NAMES[gender])
        if relationship_type in SHARED_SURNAME_TYPES and request.focus_name:
            last_name = request.focus_name.split()[-1]
        else:
            last_name = rng.choice(LAST_NAMES)

        kinship = KINSHIP_SCORES.get(relationship_type, BASELINE_KINSHIP_SCORE)
        subscores = {
            name: rng.randint(*subscore_range(relationship_type, name))
            for name in SUBSCORE_RANGES
        }

        today = self.today()
        return CandidateRecord(
            id=f"{source.id}-{index}",
            record_id=f"{source.id.upper()}-{index:05d}",
            source_id=source.id,
            source_name=source.name,
            first_name=first_name,
            last_name=last_name,
            age=relative_age(relationship_type, request.focus_age, rng),
            gender=gender,
            relationship_type=relationship_type,
            relationship_label=relationship_type,
            religion=rng.choice(RELIGIONS),
            languages=list(rng.choice(LANGUAGE_SETS)),
            kinship_score=kinship,
            confidence=rng.randint(*CONFIDENCE_RANGE),
            distance=float(rng.randint(*DISTANCE_RANGE)),
            willingness=rng.choice(WILLINGNESS_DRAW),
            phone=random_phone(rng),
            email=f"{first_name.lower()}.{last_name.lower().replace(' ', '')}@email.com",
            city=rng.choice(CITIES),
            state=rng.choice(STATES),
            notes=rng.choice(RECORD_NOTES),
            last_updated=today - timedelta(days=rng.randrange(365)),
            details={"last_contact": (today - timedelta(days=rng.randrange(90))).isoformat()},
            **subscores,
        )

    def generate(self, request: SearchRequest, source: SourceConfig) -> list[CandidateRecord]:
        size = self.rng.randint(*POOL_SIZE)
        candidates = [
            self.generate_person(i, self.rng.choice(RELATIONSHIP_TYPES), request, source)
            for i in range(size)
        ]
        logger.info("Generated %d synthetic candidates for %s", len(candidates), source.id)
        return candidates
