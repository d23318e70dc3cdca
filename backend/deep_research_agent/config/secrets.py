"""
Provider credential lookup.

Keys are taken from the request credentials first and the environment second.
A missing key for a provider the run needs fails fast with ConfigurationError,
before any network call is made.
"""
from typing import Mapping, Optional

from dotenv import load_dotenv

from deep_research_agent.config.settings import Settings
from deep_research_agent.exceptions import ConfigurationError

load_dotenv()

PROVIDER_ENV_KEYS = {
    "groq": "GROQ_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "firecrawl": "FIRECRAWL_API_KEY",
    "tavily": "TAVILY_API_KEY",
}

PROVIDER_LABELS = {
    "groq": "Groq",
    "openai": "OpenAI",
    "anthropic": "Anthropic",
    "firecrawl": "Firecrawl",
    "tavily": "Tavily",
}


def get_api_key(provider: str, credentials: Mapping[str, str], settings: Settings) -> Optional[str]:
    """
    Look up the API key for a provider.

    Args:
        provider: Provider name (e.g. "tavily")
        credentials: Per-request credentials keyed by provider name
        settings: Settings instance carrying environment-supplied keys

    Returns:
        The API key, or None if neither source has one
    """
    key = (credentials.get(provider) or "").strip()
    if key:
        return key
    return getattr(settings, f"{provider}_api_key", None)


def require_api_key(provider: str, credentials: Mapping[str, str], settings: Settings) -> str:
    """
    Look up the API key for a provider, failing if it is missing.

    Args:
        provider: Provider name (e.g. "tavily")
        credentials: Per-request credentials keyed by provider name
        settings: Settings instance carrying environment-supplied keys

    Returns:
        The API key

    Raises:
        ConfigurationError: If no key is configured for the provider
    """
    if provider not in PROVIDER_ENV_KEYS:
        raise ConfigurationError(f"Provider {provider} is not supported.")
    key = get_api_key(provider, credentials, settings)
    if not key:
        label = PROVIDER_LABELS[provider]
        raise ConfigurationError(
            f"{label} API key is not set. Pass it in the request credentials or set {PROVIDER_ENV_KEYS[provider]}.",
            details={"provider": provider},
        )
    return key
