"""Candidate providers."""

from .base import CandidateProvider, ProviderError, ProviderUnavailable
from .fixture import FixtureProvider
from .synthetic import SyntheticProvider

__all__ = [
    "CandidateProvider",
    "FixtureProvider",
    "ProviderError",
    "ProviderUnavailable",
    "SyntheticProvider",
]
