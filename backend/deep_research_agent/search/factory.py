"""
Search provider construction from a resolved configuration.
"""
from deep_research_agent.config.resolver import ResearchConfiguration
from deep_research_agent.models import SearchProviderName
from deep_research_agent.search.base import SearchProvider
from deep_research_agent.search.fetcher import RateLimitedFetcher


def create_search_provider(configuration: ResearchConfiguration, api_key: str) -> SearchProvider:
    """
    Create the adapter for the configured backend.

    Args:
        configuration: Resolved run configuration
        api_key: Credential for the configured search provider

    Returns:
        SearchProvider implementation
    """
    if configuration.search_provider == SearchProviderName.TAVILY:
        from deep_research_agent.search.tavily import TavilySearchProvider
        return TavilySearchProvider(api_key=api_key, max_results=configuration.max_search_results)
    from deep_research_agent.search.firecrawl import FirecrawlSearchProvider
    return FirecrawlSearchProvider(api_key=api_key, max_results=configuration.max_search_results)


def create_fetcher(configuration: ResearchConfiguration, provider: SearchProvider) -> RateLimitedFetcher:
    """
    Wrap a provider with the run's pacing and retry settings.

    Args:
        configuration: Resolved run configuration
        provider: Search provider adapter

    Returns:
        RateLimitedFetcher owned by one run
    """
    return RateLimitedFetcher(
        provider,
        search_delay=configuration.search_call_delay_seconds,
        fetch_delay=configuration.fetch_call_delay_seconds,
        retry_base_delay=configuration.retry_base_delay_seconds,
        max_retries=configuration.max_retries,
        concurrency_limit=configuration.concurrency_limit,
    )
