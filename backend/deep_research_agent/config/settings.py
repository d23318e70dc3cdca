"""
Application settings configuration.

Manages model, search-provider, pacing and report defaults. Uses Pydantic
BaseSettings so every value can be overridden from the environment or a
``.env`` file; per-request overrides are layered on top by the resolver.
"""
from typing import Optional

from pydantic import ConfigDict, field_validator
from pydantic_settings import BaseSettings

DEFAULT_REPORT_STRUCTURE = """Use this structure to create a report on the user-provided topic:

1. Introduction (no research needed)
   - Brief overview of the topic area

2. Main Body Sections:
   - Each section should focus on a sub-topic of the user-provided topic

3. Conclusion
   - Aim for 1 structural element (either a list or table) that distills the main body sections
   - Provide a concise summary of the report"""


class Settings(BaseSettings):
    """
    Process-level defaults for research runs.

    Enum-like values (search provider, report mode) are kept as plain text so an
    unrecognized environment value never prevents startup; the configuration
    resolver replaces it with the default.
    """

    # Model configuration
    model_name: str = "openai/gpt-oss-120b"
    temperature: float = 0.0
    max_tokens: int = 4000

    # Pipeline configuration
    search_provider: str = "firecrawl"
    report_mode: str = "narrative"
    number_of_queries: int = 2
    concurrency_limit: int = 1
    report_structure: str = DEFAULT_REPORT_STRUCTURE

    # Search and content limits
    max_search_results: int = 10
    top_k_results: int = 3
    max_document_chars: int = 10_000

    # Rate limiting
    search_call_delay_seconds: float = 2.0
    fetch_call_delay_seconds: float = 1.0
    retry_base_delay_seconds: float = 2.0
    max_retries: int = 3

    # Provider credentials
    groq_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    firecrawl_api_key: Optional[str] = None
    tavily_api_key: Optional[str] = None

    log_level: str = "INFO"

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra environment variables not defined in this class
        protected_namespaces=(),
    )

    @field_validator(
        "groq_api_key",
        "openai_api_key",
        "anthropic_api_key",
        "firecrawl_api_key",
        "tavily_api_key",
        mode="before",
    )
    @classmethod
    def blank_key_is_missing(cls, v):
        """
        Treat empty or whitespace-only keys as unset.

        Args:
            v: The value provided (or None)

        Returns:
            The stripped key, or None
        """
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v
