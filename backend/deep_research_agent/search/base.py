"""
Search provider capability interface.

Every backend maps its own response fields onto SearchResult / WebDocument.
Adapters swallow ordinary provider failures (logged, returned as an empty list
or None); throttling is the one signal raised, as RateLimitedError, so the
fetcher can back off.
"""
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from deep_research_agent.models import SearchResult, WebDocument

RATE_LIMIT_MARKERS = ("429", "rate limit", "rate-limit", "too many requests")


class SearchProvider(ABC):
    """Capability shape consumed by the engine: search plus content fetch."""

    name: str = "search"

    @abstractmethod
    def search(self, query: str) -> List[SearchResult]:
        """
        Run a web search.

        Args:
            query: Search query text

        Returns:
            Canonical search results, empty when the provider has none

        Raises:
            RateLimitedError: If the provider signals throttling
        """

    @abstractmethod
    def fetch_content(self, url: str) -> Optional[WebDocument]:
        """
        Fetch the readable content of a page.

        Args:
            url: Page URL

        Returns:
            The document, or None when no text could be retrieved

        Raises:
            RateLimitedError: If the provider signals throttling
        """


def is_rate_limit_error(error: Any) -> bool:
    """
    Detect a provider throttling signal on an exception or error payload.

    Args:
        error: Exception (or error object) returned by a provider SDK

    Returns:
        True for HTTP 429 or a "rate limit" style message
    """
    status = getattr(error, "status_code", None)
    if status is None:
        status = getattr(getattr(error, "response", None), "status_code", None)
    if status == 429:
        return True
    message = str(error).lower()
    return any(marker in message for marker in RATE_LIMIT_MARKERS)


def read_field(item: Any, *names: str, default: Any = None) -> Any:
    """
    Read the first present, non-empty field from a dict or an SDK object.

    Args:
        item: Provider response item (dict or attribute object)
        *names: Candidate field names in priority order
        default: Value returned when none is present

    Returns:
        The field value or default
    """
    if item is None:
        return default
    for name in names:
        value = item.get(name) if isinstance(item, dict) else getattr(item, name, None)
        if value not in (None, ""):
            return value
    return default
