"""
Source catalog.

Holds the configured discovery providers (enabled flag, priority, cost,
terms) and the provider implementations registered against them. Entries
are persisted through an injected key-value store and merged over the
built-in defaults on load.
"""

from __future__ import annotations

import copy
import dataclasses
import logging
from typing import Any, Iterable, Optional

from .constants import ALL_ENABLED
from .models import SourceConfig
from .store import KeyValueStore, MemoryStore
from .validation import ValidationError, parse_finite_number, parse_priority

logger = logging.getLogger(__name__)


STORAGE_KEY = "search_sources"

DEMO_SOURCE_ID = "gilmore-girls-demo"
DEMO_CASE_ID = "GG-2000-01"

# Ids that used to ship as defaults; stored copies are dropped on load
RETIRED_SOURCE_IDS = {"safegeneration-outreach"}

DEFAULT_SOURCES = [
    {
        "id": DEMO_SOURCE_ID,
        "name": "Stars Hollow Community Network (Demo)",
        "description": (
            "Demo dataset featuring Lorelai and Rory Gilmore's Stars Hollow network. "
            "Enable to prioritize the scripted demo search results."
        ),
        "type": "Demo Scenario",
        "priority": 0,
        "enabled": False,
        "cost_per_search": None,
        "terms_url": "https://example.com/stars-hollow-network-terms",
        "icon": "\U0001F31F",
        "sample_data": {
            "scenario": "Gilmore Girls Demo",
            "caseId": DEMO_CASE_ID,
            "focusFamily": "Gilmore",
            "usageNotes": [
                "Best used for product demos and training sessions.",
                "Disable after demo to return to randomized search results.",
                f'Pairs with case id "{DEMO_CASE_ID}" for automatic activation.',
            ],
        },
    },
    {
        "id": "clearview-data",
        "name": "ClearView Data Cooperative",
        "description": "Nationwide utility, credit header, and public records aggregation.",
        "type": "Data Co-op",
        "priority": 1,
        "enabled": True,
        "cost_per_search": 1.5,
        "terms_url": "https://example.com/clearview-terms",
        "sample_data": {
            "fullName": "Jordan Elise Monroe",
            "age": 36,
            "currentAddress": {"city": "Raleigh", "state": "NC", "postalCode": "27606"},
            "lastSeen": "2025-05-02",
        },
    },
    {
        "id": "safegenerations-gpa-ks",
        "name": "SafeGenerations GPA (KS)",
        "description": (
            "Live integration with the Kansas Guided Practice Application tenant "
            "managed by SafeGenerations."
        ),
        "type": "Platform Integration",
        "priority": 2,
        "enabled": True,
        "cost_per_search": None,
        "terms_url": "https://example.com/sg-gpa-ks-terms",
        "sample_data": {
            "gpaInstance": "ks-guidedpractice",
            "environment": "production",
            "datasetScope": ["case-notes", "placement-history", "contact-logs"],
            "queryModes": ["person-id", "family-group-id", "placement-id"],
        },
    },
    {
        "id": "heartland-outreach-network",
        "name": "Heartland Outreach Network",
        "description": (
            "Regional partner team specializing in kinship outreach, door knocks, "
            "and sustained follow-up campaigns."
        ),
        "type": "Human Outreach",
        "priority": 3,
        "enabled": True,
        "cost_per_search": 35.0,
        "terms_url": "https://example.com/heartland-outreach-terms",
        "sample_data": {
            "coordinator": "Lenora Whitfield",
            "coverageStates": ["KS", "MO", "NE"],
            "averageFirstContactHours": 26,
        },
    },
    {
        "id": "social-courts",
        "name": "Social Courts Network",
        "description": "Siblings, foster placements, and legal guardians from partner jurisdictions.",
        "type": "Court Data",
        "priority": 4,
        "enabled": False,
        "cost_per_search": 0.75,
        "terms_url": "https://example.com/social-courts-terms",
        "sample_data": {
            "caseNumber": "SCN-2024-117482",
            "alerts": ["Pending court review scheduled 2025-11-03"],
        },
    },
]

# camelCase keys accepted in patches and stored entries
FIELD_ALIASES = {
    "costPerSearch": "cost_per_search",
    "termsUrl": "terms_url",
    "sampleData": "sample_data",
}

PATCHABLE_FIELDS = {
    "name",
    "type",
    "enabled",
    "priority",
    "cost_per_search",
    "terms_url",
    "description",
    "icon",
    "sample_data",
}


class CatalogError(Exception):
    """Base error for source catalog operations."""


class SourceNotFoundError(CatalogError):
    """No source with the requested id."""

    def __init__(self, source_id: str):
        self.source_id = source_id
        super().__init__(f"Unknown source: {source_id}")


def _normalize_keys(data: dict) -> dict:
    return {FIELD_ALIASES.get(key, key): value for key, value in data.items()}


def parse_source_patch(source_id: str, patch: dict) -> dict:
    """
    Validate and normalize a partial source update.

    Args:
        source_id: Id of the entry being patched
        patch: Raw patch (snake_case or camelCase keys)

    Returns:
        Normalized patch with parsed values

    Raises:
        ValidationError: On any unknown, immutable or malformed field
    """
    if not isinstance(patch, dict):
        raise ValidationError("patch", "must be an object")

    parsed: dict[str, Any] = {}
    for key, value in _normalize_keys(patch).items():
        if key == "id":
            if value != source_id:
                raise ValidationError("id", "cannot be changed")
            continue
        if key not in PATCHABLE_FIELDS:
            raise ValidationError(key, "unknown field")

        if key == "priority":
            parsed[key] = parse_priority(value)
        elif key == "cost_per_search":
            if value is None:
                parsed[key] = None
            else:
                cost = parse_finite_number(key, value)
                if cost < 0:
                    raise ValidationError(key, "must not be negative")
                parsed[key] = cost
        elif key == "enabled":
            if not isinstance(value, bool):
                raise ValidationError(key, "must be true or false")
            parsed[key] = value
        elif key == "sample_data":
            if not isinstance(value, dict):
                raise ValidationError(key, "must be an object")
            parsed[key] = copy.deepcopy(value)
        elif key == "terms_url":
            if value is not None and not isinstance(value, str):
                raise ValidationError(key, "must be a string")
            parsed[key] = value
        elif key == "name":
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(key, "must be a non-empty string")
            parsed[key] = value
        else:
            if not isinstance(value, str):
                raise ValidationError(key, "must be a string")
            parsed[key] = value

    return parsed


class SourceCatalog:
    """
    Ordered collection of SourceConfig entries plus their providers.

    The catalog is read-only during a search; updates go through
    ``update()`` which validates before mutating and persists afterwards.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        defaults: Optional[list[dict]] = None,
    ):
        self.store = store if store is not None else MemoryStore()
        self._defaults = copy.deepcopy(DEFAULT_SOURCES if defaults is None else defaults)
        self._providers: dict[str, Any] = {}
        self._sources: list[SourceConfig] = []
        self.reload()

    def reload(self) -> None:
        """Re-read stored entries and merge them over the defaults."""
        stored = self.store.get(STORAGE_KEY)
        if stored is not None and not isinstance(stored, list):
            logger.warning("Ignoring malformed stored catalog (%s)", type(stored).__name__)
            stored = None

        entries = [dict(item) for item in self._defaults]
        if stored:
            by_id = {}
            for item in stored:
                if not isinstance(item, dict) or not item.get("id"):
                    continue
                source_id = item["id"]
                if source_id in RETIRED_SOURCE_IDS:
                    logger.debug("Dropping retired source %s", source_id)
                    continue
                fields = {k: v for k, v in _normalize_keys(item).items() if k in PATCHABLE_FIELDS}
                try:
                    parsed = parse_source_patch(source_id, fields)
                except ValidationError as e:
                    logger.warning("Skipping stored entry for %s: %s", source_id, e)
                    continue
                by_id[source_id] = {"id": source_id, **parsed}

            default_ids = {entry["id"] for entry in entries}
            entries = [{**entry, **by_id.get(entry["id"], {})} for entry in entries]
            entries.extend(item for source_id, item in by_id.items() if source_id not in default_ids)

        self._sources = [SourceConfig.from_dict(entry) for entry in entries]
        logger.debug("Loaded %d sources", len(self._sources))

    def _persist(self) -> None:
        self.store.set(STORAGE_KEY, [source.to_dict() for source in self._sources])

    def list(self) -> list[SourceConfig]:
        """All entries in stored order."""
        return list(self._sources)

    def get(self, source_id: str) -> Optional[SourceConfig]:
        """Entry by id, or None when absent."""
        for source in self._sources:
            if source.id == source_id:
                return source
        return None

    def require(self, source_id: str) -> SourceConfig:
        """Entry by id; raises SourceNotFoundError when absent."""
        source = self.get(source_id)
        if source is None:
            raise SourceNotFoundError(source_id)
        return source

    def ids(self) -> list[str]:
        return [source.id for source in self._sources]

    def update(self, source_id: str, patch: dict) -> SourceConfig:
        """
        Merge patch fields into an entry and persist the catalog.

        Args:
            source_id: Entry to update
            patch: Fields to change

        Returns:
            The updated entry

        Raises:
            SourceNotFoundError: If the id is unknown
            ValidationError: If the patch is malformed (nothing is changed)
        """
        current = self.require(source_id)
        changes = parse_source_patch(source_id, patch)

        updated = dataclasses.replace(current, **changes)
        index = self._sources.index(current)
        self._sources[index] = updated
        self._persist()

        logger.info("Updated source %s: %s", source_id, ", ".join(sorted(changes)) or "no changes")
        return updated

    def active(self, allow_set: Optional[Iterable[str]] = None) -> list[SourceConfig]:
        """
        Enabled sources permitted by the allow-set, in priority order.

        ``None`` or an allow-set containing ``"all-enabled"`` admits every
        enabled source; an empty allow-set admits none. Ties on priority
        keep catalog order.
        """
        if allow_set is None:
            allowed = None
        else:
            allowed = set(allow_set)
            if ALL_ENABLED in allowed:
                allowed = None

        selected = [
            source for source in self._sources
            if source.enabled and (allowed is None or source.id in allowed)
        ]
        return sorted(selected, key=lambda source: self.priority_rank(source.id))

    def priority_rank(self, source_id: str) -> tuple[int, int]:
        """Sort key for a source: (priority, catalog position). Unknown ids sort last."""
        for index, source in enumerate(self._sources):
            if source.id == source_id:
                return (source.priority, index)
        return (2**31, len(self._sources))

    def register_provider(self, source_id: str, provider: Any) -> None:
        """Attach a candidate provider to a catalog entry."""
        self.require(source_id)
        self._providers[source_id] = provider

    def provider_for(self, source_id: str) -> Optional[Any]:
        return self._providers.get(source_id)
