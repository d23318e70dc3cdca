"""
Firecrawl search provider (crawl-based).

Uses the firecrawl-py SDK for search and page scraping. The SDK has returned
both plain dicts and typed response objects across versions, so responses are
read through ``read_field``.
"""
from typing import Any, List, Optional

from firecrawl import Firecrawl

from deep_research_agent.exceptions import RateLimitedError
from deep_research_agent.logging import get_logger
from deep_research_agent.models import SearchResult, WebDocument
from deep_research_agent.search.base import SearchProvider, is_rate_limit_error, read_field

logger = get_logger(__name__)


def _search_items(response: Any) -> List[Any]:
    """Pull the list of web hits out of a search response."""
    if response is None:
        return []
    data = read_field(response, "web", "data", default=[])
    if not isinstance(data, list):
        data = read_field(data, "web", default=[])
    return list(data or [])


def _to_search_result(item: Any) -> Optional[SearchResult]:
    metadata = read_field(item, "metadata")
    url = read_field(item, "url") or read_field(metadata, "url", "source_url", "sourceURL")
    if not url:
        return None
    return SearchResult(
        title=read_field(item, "title", default="") or read_field(metadata, "title", default=""),
        url=url,
        snippet=read_field(item, "description", "snippet", default=""),
    )


def _to_document(response: Any) -> Optional[WebDocument]:
    document = read_field(response, "data", default=response)
    text = read_field(document, "markdown", "content")
    if not text:
        return None
    metadata = read_field(document, "metadata")
    return WebDocument(title=read_field(metadata, "title", default="") or "", text=text)


class FirecrawlSearchProvider(SearchProvider):
    """Search and scrape through the Firecrawl API."""

    name = "firecrawl"

    def __init__(self, api_key: str, max_results: int = 10, client: Optional[Firecrawl] = None):
        """
        Args:
            api_key: Firecrawl API key
            max_results: Maximum hits requested per search
            client: Pre-built SDK client (creates one from api_key if None)
        """
        self._client = client if client is not None else Firecrawl(api_key=api_key)
        self.max_results = max_results

    def search(self, query: str) -> List[SearchResult]:
        try:
            response = self._client.search(query=query, limit=self.max_results)
        except Exception as e:
            if is_rate_limit_error(e):
                raise RateLimitedError(str(e), provider=self.name) from e
            logger.warning("firecrawl_search_failed", query=query, error=str(e))
            return []
        results = [result for result in map(_to_search_result, _search_items(response)) if result]
        logger.debug("firecrawl_search_completed", query=query, result_count=len(results))
        return results

    def fetch_content(self, url: str) -> Optional[WebDocument]:
        try:
            response = self._client.scrape(url, formats=["markdown"])
        except Exception as e:
            if is_rate_limit_error(e):
                raise RateLimitedError(str(e), provider=self.name) from e
            logger.warning("firecrawl_scrape_failed", url=url, error=str(e))
            return None
        document = _to_document(response)
        if document is None:
            logger.debug("firecrawl_scrape_empty", url=url)
        return document
