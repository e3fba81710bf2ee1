"""Configuration settings for the kinship discovery engine."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

load_dotenv()


@dataclass
class Settings:
    """Unified settings with YAML override support."""

    # Provider fan-out
    provider_timeout: float = 5.0  # seconds per provider call
    provider_attempts: int = 2
    retry_backoff: float = 0.1  # seconds, doubled per attempt

    # Request defaults
    default_min_confidence: int = 70
    default_age_min: int = 18
    default_age_max: int = 70
    default_max_results: Optional[int] = 50

    # Source catalog persistence (CLI and web)
    sources_store_path: str = field(
        default_factory=lambda: os.environ.get(
            "KINFINDER_SOURCES_FILE",
            str(Path.home() / ".kinfinder" / "sources.json"),
        )
    )

    # Seed for synthetic providers (None = nondeterministic)
    seed: Optional[int] = None


def load_config(path: Optional[str] = None) -> Settings:
    """
    Load settings from YAML file with environment overrides.

    Priority: environment > config file > defaults

    Args:
        path: Path to YAML config file (optional)

    Returns:
        Settings instance with merged configuration
    """
    settings = Settings()

    if path:
        config_path = Path(path)
        if config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}

            for key, value in data.items():
                if hasattr(settings, key):
                    setattr(settings, key, value)

    # Environment overrides (always win)
    if os.environ.get("KINFINDER_PROVIDER_TIMEOUT"):
        settings.provider_timeout = float(os.environ["KINFINDER_PROVIDER_TIMEOUT"])
    if os.environ.get("KINFINDER_SOURCES_FILE"):
        settings.sources_store_path = os.environ["KINFINDER_SOURCES_FILE"]
    if os.environ.get("KINFINDER_SEED"):
        settings.seed = int(os.environ["KINFINDER_SEED"])

    return settings


# Reference lists for synthetic candidate generation

FIRST_NAMES = {
    "M": ["James", "John", "Robert", "Michael", "William", "David", "Richard", "Joseph", "Thomas", "Charles"],
    "F": ["Mary", "Patricia", "Jennifer", "Linda", "Barbara", "Elizabeth", "Susan", "Jessica", "Sarah", "Karen"],
}

LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis", "Rodriguez", "Martinez",
    "Hernandez", "Lopez", "Gonzalez", "Wilson", "Anderson", "Thomas", "Taylor", "Moore", "Jackson", "Martin",
]

CITIES = [
    "Los Angeles", "Chicago", "Houston", "Phoenix", "Philadelphia", "San Antonio",
    "San Diego", "Dallas", "San Jose", "Austin", "Jacksonville", "Fort Worth",
]

STATES = ["CA", "TX", "FL", "NY", "PA", "IL", "OH", "GA", "NC", "MI"]

# Repeated entries weight the draw
RELIGIONS = [
    "Christian", "Christian", "Christian",
    "Catholic", "Catholic",
    "Non-denominational", "Non-denominational",
    "Baptist", "Methodist", "Lutheran",
    "Jewish", "Muslim", "Hindu", "Buddhist",
    "Spiritual but not religious",
    "No religious affiliation",
    "Prefer not to say",
]

LANGUAGE_SETS = [
    ["English"],
    ["English"],
    ["English"],
    ["English", "Spanish"],
    ["English", "Spanish"],
    ["Spanish", "English"],
    ["English", "Mandarin"],
    ["English", "French"],
    ["English", "Vietnamese"],
    ["English", "Arabic"],
    ["English", "Tagalog"],
    ["English", "Korean"],
    ["English", "German"],
    ["English", "Russian"],
    ["Spanish"],
    ["Mandarin", "English"],
]

WILLINGNESS_DRAW = ["High", "High", "Medium", "Medium", "Low", "Unknown"]

RECORD_NOTES = [
    "Last known address verified",
    "Phone number updated 6 months ago",
    "Email bounced - needs verification",
    "Currently enrolled in services",
    "Has legal guardian appointed",
    "Placement pending court approval",
    "Active case manager assigned",
    "Recent contact attempted",
    "Successful outreach last month",
    "No recent contact - phone disconnected",
]

# Kinship score by relationship type; anything not listed gets the baseline
KINSHIP_SCORES = {
    "Parent": 95,
    "Grandparent": 90,
    "Sibling": 85,
    "Aunt/Uncle": 80,
    "Cousin": 70,
}
BASELINE_KINSHIP_SCORE = 60

# Inclusive (low, high) bounds for the randomly drawn sub-scores
SUBSCORE_RANGES = {
    "cultural_fit_score": (80, 99),
    "commitment_score": (70, 99),
    "support_system_score": (70, 99),
    "training_score": (60, 99),
}

# Per-type overrides of SUBSCORE_RANGES
SUBSCORE_RANGE_OVERRIDES = {
    "Family Friend": {"commitment_score": (60, 89)},
    "Support Network": {"commitment_score": (60, 89)},
    "Community Partner": {"commitment_score": (60, 89), "support_system_score": (60, 89)},
    "Mentor": {"training_score": (75, 99)},
    "Educator": {"training_score": (75, 99)},
    "Grandchild": {"training_score": (40, 79)},
    "Child": {"training_score": (40, 79)},
}
