"""Search module.

This module contains the search provider interface, its Firecrawl and Tavily
implementations, and the rate-limited fetcher.
"""
from deep_research_agent.search.base import SearchProvider, is_rate_limit_error
from deep_research_agent.search.factory import create_fetcher, create_search_provider
from deep_research_agent.search.fetcher import RateLimitedFetcher

__all__ = [
    "SearchProvider",
    "RateLimitedFetcher",
    "is_rate_limit_error",
    "create_search_provider",
    "create_fetcher",
]
