"""
Tavily search provider (search-API based).

Wraps the langchain-tavily TavilySearch and TavilyExtract tools.
"""
from typing import Any, Dict, List, Optional

from langchain_core.tools import ToolException
from langchain_tavily import TavilyExtract, TavilySearch

from deep_research_agent.exceptions import RateLimitedError
from deep_research_agent.logging import get_logger
from deep_research_agent.models import SearchResult, WebDocument
from deep_research_agent.search.base import SearchProvider, is_rate_limit_error, read_field

logger = get_logger(__name__)


class TavilySearchProvider(SearchProvider):
    """Search and extract through the Tavily API."""

    name = "tavily"

    def __init__(
        self,
        api_key: str,
        max_results: int = 10,
        search_tool: Optional[Any] = None,
        extract_tool: Optional[Any] = None,
    ):
        """
        Args:
            api_key: Tavily API key
            max_results: Maximum hits requested per search
            search_tool: Pre-built TavilySearch tool (creates one if None)
            extract_tool: Pre-built TavilyExtract tool (creates one if None)
        """
        self._search_tool = search_tool if search_tool is not None else TavilySearch(
            max_results=max_results,
            topic="general",
            search_depth="advanced",
            tavily_api_key=api_key,
        )
        self._extract_tool = extract_tool if extract_tool is not None else TavilyExtract(
            extract_depth="basic",
            tavily_api_key=api_key,
        )
        self._titles: Dict[str, str] = {}

    def _raise_if_throttled(self, error: Any) -> None:
        if is_rate_limit_error(error):
            raise RateLimitedError(str(error), provider=self.name)

    def search(self, query: str) -> List[SearchResult]:
        try:
            response = self._search_tool.invoke({"query": query})
        except ToolException as e:
            # raised by the tool when Tavily has no results
            logger.debug("tavily_search_no_results", query=query, error=str(e))
            return []
        except Exception as e:
            self._raise_if_throttled(e)
            logger.warning("tavily_search_failed", query=query, error=str(e))
            return []
        if isinstance(response, dict) and response.get("error"):
            self._raise_if_throttled(response["error"])
            logger.warning("tavily_search_failed", query=query, error=str(response["error"]))
            return []

        results: List[SearchResult] = []
        for item in read_field(response, "results", default=[]) or []:
            url = read_field(item, "url")
            if not url:
                continue
            title = read_field(item, "title", default="")
            self._titles[url] = title
            results.append(SearchResult(title=title, url=url, snippet=read_field(item, "content", default="")))
        logger.debug("tavily_search_completed", query=query, result_count=len(results))
        return results

    def fetch_content(self, url: str) -> Optional[WebDocument]:
        try:
            response = self._extract_tool.invoke({"urls": [url]})
        except ToolException as e:
            logger.debug("tavily_extract_no_results", url=url, error=str(e))
            return None
        except Exception as e:
            self._raise_if_throttled(e)
            logger.warning("tavily_extract_failed", url=url, error=str(e))
            return None
        if isinstance(response, dict) and response.get("error"):
            self._raise_if_throttled(response["error"])
            logger.warning("tavily_extract_failed", url=url, error=str(response["error"]))
            return None

        for item in read_field(response, "results", default=[]) or []:
            text = read_field(item, "raw_content", "rawContent")
            if text:
                title = read_field(read_field(item, "metadata"), "title") or self._titles.get(url) or url
                return WebDocument(title=title, text=text)
        return None
