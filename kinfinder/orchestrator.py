"""Search orchestrator: provider fan-out, merge, score, filter and rank."""

import asyncio
import logging
import random
from typing import Optional

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .catalog import DEMO_SOURCE_ID, SourceCatalog
from .config import Settings
from .dedup import merge_candidates
from .filters import FilterPipeline
from .models import CandidateRecord, SearchRequest, SearchResult, SearchStatus, SourceConfig
from .providers import (
    CandidateProvider,
    FixtureProvider,
    ProviderError,
    ProviderUnavailable,
    SyntheticProvider,
)
from .ranking import build_facets, sort_candidates, truncate
from .scoring import score_candidates
from .store import KeyValueStore
from .validation import validate_request

logger = logging.getLogger(__name__)

DEFAULT_SESSION = "default"


class SearchOrchestrator:
    """
    Runs searches against the providers registered in a source catalog.

    Features:
    - Concurrent fan-out with a per-provider timeout
    - Retries on transient provider errors
    - Failing providers are dropped, not fatal
    - Last request wins per session: a search that finishes after a newer
      one was issued for the same ``session_id`` comes back superseded and
      leaves ``latest`` untouched. Searches in different sessions never
      supersede each other.
    """

    def __init__(self, catalog: SourceCatalog, settings: Optional[Settings] = None):
        self.catalog = catalog
        self.settings = settings or Settings()
        self.latest: Optional[SearchResult] = None
        self._last_request_id = 0
        # session -> newest request id still in flight
        self._in_flight: dict[str, int] = {}

    def _next_request_id(self, session: str) -> int:
        self._last_request_id += 1
        self._in_flight[session] = self._last_request_id
        return self._last_request_id

    def is_current(self, request_id: int, session: str = DEFAULT_SESSION) -> bool:
        return self._in_flight.get(session) == request_id

    def _release(self, request_id: int, session: str) -> bool:
        """Finish a request; returns False if a newer one in its session replaced it."""
        if not self.is_current(request_id, session):
            return False
        del self._in_flight[session]
        return True

    async def fetch_from(
        self,
        source: SourceConfig,
        provider: CandidateProvider,
        request: SearchRequest,
    ) -> list[CandidateRecord]:
        """
        Fetch from one provider with timeout and retries.

        Raises:
            ProviderUnavailable: Once retries are exhausted or on a
                non-transient error, chained to the underlying exception
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(max(1, self.settings.provider_attempts)),
            wait=wait_exponential(multiplier=self.settings.retry_backoff, max=2),
            retry=retry_if_exception_type((ProviderError, asyncio.TimeoutError)),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    if attempt.retry_state.attempt_number > 1:
                        logger.debug("Retrying %s (attempt %d)", source.id, attempt.retry_state.attempt_number)
                    return await asyncio.wait_for(
                        provider.fetch(request, source),
                        timeout=self.settings.provider_timeout,
                    )
        except Exception as e:
            raise ProviderUnavailable(str(e) or type(e).__name__) from e

    async def search(self, request: SearchRequest) -> SearchResult:
        """
        Run one search.

        Args:
            request: Search parameters

        Returns:
            SearchResult; never raises for provider failures

        Raises:
            ValidationError: If the request is malformed (before any provider call)
        """
        validate_request(request, self.catalog.ids())
        session = request.session_id or DEFAULT_SESSION
        request_id = self._next_request_id(session)

        active = self.catalog.active(request.sources)
        queried = []
        for source in active:
            provider = self.catalog.provider_for(source.id)
            if provider is None:
                logger.debug("Source %s has no provider registered", source.id)
                continue
            queried.append((source, provider))

        sources_queried = [source.id for source, _ in queried]
        logger.info("Search %d for case %s: querying %s", request_id, request.case_id, sources_queried or "nothing")

        try:
            outcomes = await asyncio.gather(
                *(self.fetch_from(source, provider, request) for source, provider in queried),
                return_exceptions=True,
            )
        finally:
            current = self._release(request_id, session)

        if not current:
            logger.info("Search %d superseded in session %s, discarding", request_id, session)
            return SearchResult(
                status=SearchStatus.SUPERSEDED,
                sources_queried=sources_queried,
                request_id=request_id,
            )

        contributions = []
        errors = []
        for (source, _), outcome in zip(queried, outcomes):
            if isinstance(outcome, ProviderUnavailable):
                logger.warning("Provider %s failed: %s", source.id, outcome)
                errors.append(f"{source.id}: {outcome}")
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                contributions.append((source.id, outcome))

        if queried and not contributions:
            result = SearchResult(
                status=SearchStatus.UNAVAILABLE,
                errors=errors,
                sources_queried=sources_queried,
                request_id=request_id,
            )
            self.latest = result
            return result

        result = self.aggregate(request, contributions, [source.id for source in active])
        result.errors = errors
        result.sources_queried = sources_queried
        result.request_id = request_id

        self.latest = result
        return result

    def aggregate(
        self,
        request: SearchRequest,
        contributions: list[tuple[str, list[CandidateRecord]]],
        enabled_sources: list[str],
    ) -> SearchResult:
        """
        Merge, score, filter, sort and truncate provider output.

        Args:
            request: Search parameters
            contributions: (source_id, candidates) per provider that answered
            enabled_sources: Ids of the sources the request resolved to

        Returns:
            SearchResult with total_count taken before truncation
        """
        merged = merge_candidates(contributions, self.catalog.priority_rank)
        score_candidates(merged)

        filtered = FilterPipeline(request, enabled_sources).apply(merged)
        ordered = sort_candidates(filtered, request.sort_by)

        return SearchResult(
            results=truncate(ordered, request.max_results),
            total_count=len(filtered),
            facets=build_facets(filtered),
            status=SearchStatus.OK if filtered else SearchStatus.EMPTY,
        )


def build_default_orchestrator(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
    seed: Optional[int] = None,
) -> SearchOrchestrator:
    """
    Create an orchestrator over the built-in catalog.

    The demo source gets the fixture provider; every other source gets its
    own synthetic provider. With a seed, each synthetic provider is seeded
    from it and its source id, so pools are reproducible.

    Args:
        settings: Settings (defaults if not provided)
        store: Catalog store (in-memory if not provided)
        seed: Seed for synthetic providers (falls back to settings.seed)
    """
    settings = settings or Settings()
    if seed is None:
        seed = settings.seed

    catalog = SourceCatalog(store)
    for source in catalog.list():
        if source.id == DEMO_SOURCE_ID:
            catalog.register_provider(source.id, FixtureProvider())
            continue
        rng = random.Random(f"{seed}:{source.id}") if seed is not None else random.Random()
        catalog.register_provider(source.id, SyntheticProvider(rng=rng))

    return SearchOrchestrator(catalog, settings)
