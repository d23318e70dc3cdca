"""
Configuration resolution for a single research run.

Merges three layers into one immutable ResearchConfiguration:
per-request value > environment value (Settings) > hard-coded default.
Unrecognized enum values are ignored at whichever layer they appear, so the
next layer applies; resolution never raises for them.
"""
from enum import Enum
from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict

from deep_research_agent.config.settings import Settings
from deep_research_agent.logging import get_logger
from deep_research_agent.models import ReportMode, ResearchParams, SearchProviderName

logger = get_logger(__name__)

MIN_CONCURRENCY = 1
MAX_CONCURRENCY = 3

E = TypeVar("E", bound=Enum)


class ResearchConfiguration(BaseModel):
    """Resolved, immutable settings for one run."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_id: str
    search_provider: SearchProviderName
    report_mode: ReportMode
    depth: int
    breadth: int
    number_of_queries: int
    concurrency_limit: int
    report_structure: str
    temperature: float
    max_tokens: int
    max_search_results: int
    top_k_results: int
    max_document_chars: int
    search_call_delay_seconds: float
    fetch_call_delay_seconds: float
    retry_base_delay_seconds: float
    max_retries: int


def _field_default(name: str):
    """Hard-coded default declared on Settings."""
    return Settings.model_fields[name].default


def _resolve_enum(enum_cls: Type[E], field: str, request_value: Optional[str], env_value: Optional[str]) -> E:
    """
    Pick the first recognized value in precedence order.

    Args:
        enum_cls: Enum type of the field
        field: Field name, for logging
        request_value: Per-request value (None when not supplied)
        env_value: Environment-supplied value

    Returns:
        The resolved enum member
    """
    for source, value in (("request", request_value), ("environment", env_value)):
        if value is None:
            continue
        try:
            return enum_cls(str(value).strip().lower())
        except ValueError:
            logger.debug("invalid_enum_value_ignored", field=field, source=source, value=str(value))
    return enum_cls(_field_default(field))


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def resolve_configuration(params: ResearchParams, settings: Optional[Settings] = None) -> ResearchConfiguration:
    """
    Resolve the configuration for one run.

    Args:
        params: Per-request parameters and overrides
        settings: Environment-level settings (creates default if None)

    Returns:
        Immutable ResearchConfiguration
    """
    if settings is None:
        settings = Settings()

    search_provider = _resolve_enum(
        SearchProviderName, "search_provider", params.search_provider, settings.search_provider
    )
    report_mode = _resolve_enum(ReportMode, "report_mode", params.report_mode, settings.report_mode)

    model_id = (params.model_id or "").strip() or settings.model_name
    number_of_queries = params.number_of_queries if params.number_of_queries is not None else settings.number_of_queries
    concurrency = params.concurrency_limit if params.concurrency_limit is not None else settings.concurrency_limit
    report_structure = params.report_structure or settings.report_structure

    configuration = ResearchConfiguration(
        model_id=model_id,
        search_provider=search_provider,
        report_mode=report_mode,
        depth=params.depth,
        breadth=params.breadth,
        number_of_queries=max(1, number_of_queries),
        concurrency_limit=_clamp(concurrency, MIN_CONCURRENCY, MAX_CONCURRENCY),
        report_structure=report_structure,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
        max_search_results=max(1, settings.max_search_results),
        top_k_results=max(1, settings.top_k_results),
        max_document_chars=max(1, settings.max_document_chars),
        search_call_delay_seconds=max(0.0, settings.search_call_delay_seconds),
        fetch_call_delay_seconds=max(0.0, settings.fetch_call_delay_seconds),
        retry_base_delay_seconds=max(0.0, settings.retry_base_delay_seconds),
        max_retries=max(0, settings.max_retries),
    )
    logger.debug(
        "configuration_resolved",
        model_id=configuration.model_id,
        search_provider=configuration.search_provider.value,
        report_mode=configuration.report_mode.value,
        depth=configuration.depth,
        breadth=configuration.breadth,
    )
    return configuration
