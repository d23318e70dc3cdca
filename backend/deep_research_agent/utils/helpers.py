"""
Helper functions for engine operations.
Extracted from node implementations to keep nodes concise and maintainable.
"""
from datetime import datetime
from typing import Iterable, Optional
from urllib.parse import urlparse

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_groq import ChatGroq

from deep_research_agent.models import SearchResult


def format_date() -> str:
    """Format current date as 'MM DD YY'."""
    return datetime.now().strftime("%m %d %y")


def create_llm_model(
    model_id: str,
    provider: str,
    api_key: Optional[str] = None,
    temperature: float = 0.0,
    max_tokens: Optional[int] = None,
) -> BaseChatModel:
    """
    Create a LangChain chat model for a provider.

    Args:
        model_id: Model identifier passed to the provider
        provider: "groq", "openai" or "anthropic"
        api_key: Provider API key (the SDK reads its environment variable if None)
        temperature: Sampling temperature
        max_tokens: Maximum tokens in the response

    Returns:
        Chat model instance

    Raises:
        ValueError: If the provider is unknown
    """
    kwargs = {"model": model_id, "temperature": temperature}
    if max_tokens:
        kwargs["max_tokens"] = max_tokens
    if api_key:
        kwargs["api_key"] = api_key
    if provider == "groq":
        return ChatGroq(**kwargs)
    if provider == "openai":
        from langchain_openai import ChatOpenAI
        return ChatOpenAI(**kwargs)
    if provider == "anthropic":
        from langchain_anthropic import ChatAnthropic
        return ChatAnthropic(**kwargs)
    raise ValueError(f"Unknown model provider: {provider}")


def truncate_text(text: str, limit: int) -> str:
    """Cut text to at most ``limit`` characters."""
    if limit <= 0 or len(text) <= limit:
        return text
    return text[:limit]


def format_search_url_markdown(url: str) -> str:
    """
    Format a URL into a markdown link with a clean display domain.

    Args:
        url: The full URL to format (e.g., 'https://www.example.com/path')

    Returns:
        Markdown string (e.g., '[example.com](https://www.example.com/path)')
    """
    try:
        parsed = urlparse(url)
        domain = parsed.netloc
        if domain.startswith("www."):
            domain = domain[4:]
        return f"[{domain or url}]({url})"
    except ValueError:
        return f"[{url}]({url})"


def format_search_results(results: Iterable[SearchResult], query: str) -> str:
    """Format search results as markdown source text for the section writer."""
    content = f"--- Results for '{query}' ---\n"
    for r in results:
        title = r.title or "Untitled"
        if r.url:
            content += f"Title: [{title}]({r.url})\n"
        else:
            content += f"Title: {title}\n"
        content += f"Content: {r.snippet}\n\n"
    return content
