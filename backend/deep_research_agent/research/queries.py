"""
Query generation for topics and report sections.

Always yields at least one query: when the model output holds nothing usable,
a deterministic fallback set built from the topic (and section) is returned.
"""
from typing import List, Optional

from deep_research_agent.llm import ModelInvoker
from deep_research_agent.logging import get_logger
from deep_research_agent.models import SearchQueries, Section
from deep_research_agent.parsing import extract
from deep_research_agent.prompts.research import RESEARCH_SYSTEM_PROMPT, SEARCH_QUERIES_PROMPT_TEMPLATE
from deep_research_agent.prompts.sections import SECTION_QUERY_WRITER_PROMPT_TEMPLATE
from deep_research_agent.utils.helpers import format_date

logger = get_logger(__name__)


def fallback_queries(topic: str, section: Optional[Section] = None) -> List[str]:
    """
    Deterministic queries used when the model produced none.

    Args:
        topic: Research topic
        section: Section being researched, if any

    Returns:
        Non-empty list of query strings
    """
    topic = topic.strip()
    if section is None:
        return [f"{topic} overview", f"{topic} explanation", f"{topic} guide"]
    name = section.name.strip()
    description = section.description.strip()
    queries = [f"{topic} {name}", f"{name} {description}".strip(), f"{topic} {name} explained"]
    return [q for q in queries if q]


def _build_prompt(topic: str, count: int, section: Optional[Section]) -> str:
    if section is None:
        return SEARCH_QUERIES_PROMPT_TEMPLATE.format(
            current_date=format_date(),
            number_of_queries=count,
            topic=topic,
        )
    return SECTION_QUERY_WRITER_PROMPT_TEMPLATE.format(
        current_date=format_date(),
        number_of_queries=count,
        topic=topic,
        section_name=section.name,
        section_description=section.description,
    )


def _dedupe(queries: List[str]) -> List[str]:
    seen = set()
    unique = []
    for query in queries:
        if query not in seen:
            seen.add(query)
            unique.append(query)
    return unique


def generate_queries(model: ModelInvoker, topic: str, count: int, section: Optional[Section] = None) -> List[str]:
    """
    Ask the model for search queries.

    Args:
        model: Model capability
        topic: Research topic (or topic plus refined direction)
        count: Maximum number of queries to return
        section: Section context for the section pipeline

    Returns:
        Between 1 and ``count`` stripped, non-empty queries
    """
    count = max(1, count)
    prompt = _build_prompt(topic, count, section)
    try:
        raw = model.invoke(RESEARCH_SYSTEM_PROMPT, prompt)
    except Exception as e:
        logger.warning("query_generation_failed", topic=topic, section=section.name if section else None, error=str(e))
        raw = ""

    queries = _dedupe(extract(raw, SearchQueries()).texts())
    if not queries:
        queries = fallback_queries(topic, section)
        logger.info("query_generation_fallback_used", topic=topic, section=section.name if section else None)
    queries = queries[:count]
    logger.debug("queries_generated", topic=topic, count=len(queries))
    return queries
