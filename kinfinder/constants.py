"""
Enumerations shared across the discovery engine.

Relationship types, willingness levels and sort keys are fixed vocabularies;
candidate records and search requests are validated against them.
"""

RELATIONSHIP_TYPES = [
    "Parent",
    "Child",
    "Sibling",
    "Grandparent",
    "Grandchild",
    "Aunt/Uncle",
    "Niece/Nephew",
    "Cousin",
    "Spouse/Partner",
    "Family Friend",
    "Support Network",
    "Community Partner",
    "Mentor",
    "Educator",
]

# Non-kin relationships that share the baseline kinship score
WEAK_TIE_TYPES = {
    "Family Friend",
    "Support Network",
    "Community Partner",
    "Mentor",
    "Educator",
}

GENDERS = ["M", "F"]

WILLINGNESS_LEVELS = ["High", "Medium", "Low", "Unknown"]

WILLINGNESS_RANK = {
    "High": 3,
    "Medium": 2,
    "Low": 1,
    "Unknown": 0,
}

SORT_KEYS = ["matchScore", "distance", "willingness", "confidence"]

# Allow-set sentinel meaning "every enabled source"
ALL_ENABLED = "all-enabled"

DEFAULT_MIN_CONFIDENCE = 70
DEFAULT_AGE_RANGE = (18, 70)

CSV_HEADERS = [
    "Name",
    "Relationship",
    "Age",
    "Gender",
    "City",
    "State",
    "Phone",
    "Email",
    "Confidence",
    "Source",
    "Notes",
]

# Status messages surfaced by the CLI and HTTP API
MESSAGES = {
    "ok": "Search complete",
    "empty": "No candidates matched the current filters",
    "unavailable": "No results - search unavailable",
    "superseded": "Search superseded by a newer request",
}
