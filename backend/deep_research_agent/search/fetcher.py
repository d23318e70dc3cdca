"""
Rate-limited access to a search provider.

Every call waits a fixed delay first, throttling signals are retried with a
linearly growing wait (base delay x attempt number) up to ``max_retries``
times, and a bounded semaphore caps simultaneous provider calls for the run.
Exhausted retries degrade to "no data", never to an exception.
"""
import threading
import time
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

from deep_research_agent.exceptions import RateLimitedError
from deep_research_agent.logging import get_logger
from deep_research_agent.models import SearchResult, WebDocument
from deep_research_agent.search.base import SearchProvider

logger = get_logger(__name__)

R = TypeVar("R")


class RateLimitedFetcher:
    """
    Per-run wrapper around a SearchProvider.

    Holds the run's search cache. Cache keys are the exact query strings, so
    queries differing only in case or whitespace are fetched separately.
    """

    def __init__(
        self,
        provider: SearchProvider,
        search_delay: float = 2.0,
        fetch_delay: float = 1.0,
        retry_base_delay: float = 2.0,
        max_retries: int = 3,
        concurrency_limit: int = 1,
    ):
        """
        Args:
            provider: Search provider adapter
            search_delay: Seconds to wait before every search call
            fetch_delay: Seconds to wait before every content fetch
            retry_base_delay: Base wait multiplied by the retry attempt number
            max_retries: Retries allowed after a throttled call
            concurrency_limit: Maximum simultaneous provider calls
        """
        self.provider = provider
        self.search_delay = search_delay
        self.fetch_delay = fetch_delay
        self.retry_base_delay = retry_base_delay
        self.max_retries = max_retries
        self._slots = threading.BoundedSemaphore(max(1, concurrency_limit))
        self._cache: Dict[str, List[SearchResult]] = {}
        self._cache_lock = threading.Lock()

    def _call(self, operation: Callable[[str], R], argument: str, delay: float, default: R, kind: str) -> Tuple[R, bool]:
        """
        Run one provider call with pacing and throttling retries.

        Returns:
            Tuple of (result, completed) where completed is False when the call
            degraded to ``default``
        """
        with self._slots:
            for attempt in range(self.max_retries + 1):
                if delay > 0:
                    time.sleep(delay)
                try:
                    return operation(argument), True
                except RateLimitedError as e:
                    if attempt >= self.max_retries:
                        logger.warning(
                            "rate_limit_retries_exhausted",
                            kind=kind,
                            target=argument,
                            provider=self.provider.name,
                            retries=self.max_retries,
                            error=str(e),
                        )
                        return default, False
                    wait = self.retry_base_delay * (attempt + 1)
                    logger.info(
                        "rate_limited_retrying",
                        kind=kind,
                        target=argument,
                        provider=self.provider.name,
                        attempt=attempt + 1,
                        wait_seconds=wait,
                    )
                    time.sleep(wait)
                except Exception as e:
                    logger.warning(
                        "provider_call_failed",
                        kind=kind,
                        target=argument,
                        provider=self.provider.name,
                        error=str(e),
                        exc_info=True,
                    )
                    return default, False
        return default, False

    def search(self, query: str) -> List[SearchResult]:
        """
        Search with caching, pacing and backoff.

        Args:
            query: Search query text (used verbatim as cache key)

        Returns:
            Search results, empty when the provider had none or gave up
        """
        with self._cache_lock:
            cached = self._cache.get(query)
        if cached is not None:
            logger.debug("search_cache_hit", query=query)
            return list(cached)

        results, completed = self._call(self.provider.search, query, self.search_delay, [], "search")
        results = list(results or [])
        if completed:
            with self._cache_lock:
                self._cache[query] = results
        return list(results)

    def fetch_content(self, url: str) -> Optional[WebDocument]:
        """
        Fetch page content with pacing and backoff.

        Args:
            url: Page URL

        Returns:
            The document, or None
        """
        document, _ = self._call(self.provider.fetch_content, url, self.fetch_delay, None, "fetch_content")
        return document

    def cached_queries(self) -> List[str]:
        """Queries currently held in the cache."""
        with self._cache_lock:
            return list(self._cache)
