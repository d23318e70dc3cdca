"""
Field-name normalization table.

Models return the same logical field under several spellings
("searchQuery", "query", "text"...). Every parsed payload goes through
``normalize_fields`` before validation so callers only ever see the
canonical names.
"""
from typing import AbstractSet, Any, Dict

FIELD_ALIASES: Dict[str, str] = {
    # query lists
    "searchQueries": "queries",
    "search_queries": "queries",
    # single query
    "searchQuery": "search_query",
    "query": "search_query",
    "text": "search_query",
    "q": "search_query",
    # grader
    "followUpQueries": "follow_up_queries",
    "follow_ups": "follow_up_queries",
    "followups": "follow_up_queries",
    # planner
    "researchNeeded": "research",
    "research_needed": "research",
    "needs_research": "research",
    "plan": "description",
}


def normalize_fields(value: Any, declared: AbstractSet[str] = frozenset()) -> Any:
    """
    Recursively rename aliased keys to their canonical names.

    A key that is already present in canonical form wins over its aliases,
    and an alias that the target shape declares as a field of its own
    (``WebDocument.text``) is left alone.

    Args:
        value: Parsed JSON value (dict, list or scalar)
        declared: Field names of the target model and its nested models

    Returns:
        A new value with canonical keys; scalars are returned unchanged
    """
    if isinstance(value, list):
        return [normalize_fields(item, declared) for item in value]
    if not isinstance(value, dict):
        return value

    def is_alias(key: Any) -> bool:
        return isinstance(key, str) and key in FIELD_ALIASES and key not in declared

    normalized: Dict[str, Any] = {}
    for key, item in value.items():
        if isinstance(key, str) and not is_alias(key):
            normalized[key] = normalize_fields(item, declared)
    for key, item in value.items():
        if is_alias(key):
            normalized.setdefault(FIELD_ALIASES[key], normalize_fields(item, declared))
    return normalized
