"""Base class for candidate providers."""

import asyncio
import logging
from abc import ABC, abstractmethod

from ..models import CandidateRecord, SearchRequest, SourceConfig

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Base exception for provider failures. Treated as transient and retried."""
    pass


class ProviderUnavailable(ProviderError):
    """Provider cannot serve requests right now."""
    pass


class CandidateProvider(ABC):
    """
    A source of candidate records.

    Subclasses implement ``generate()``; the search fan-out awaits
    ``fetch()``, which runs generation in a worker thread by default so a
    slow provider cannot stall the others.
    """

    name = "provider"

    @abstractmethod
    def generate(self, request: SearchRequest, source: SourceConfig) -> list[CandidateRecord]:
        """
        Produce candidates for a request.

        Args:
            request: The validated search request
            source: Catalog entry this provider is registered under

        Returns:
            Candidate records with sub-scores and confidence populated
        """

    async def fetch(self, request: SearchRequest, source: SourceConfig) -> list[CandidateRecord]:
        candidates = await asyncio.to_thread(self.generate, request, source)
        logger.debug("%s returned %d candidates for %s", self.name, len(candidates), source.id)
        return candidates
