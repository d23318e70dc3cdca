"""
Tests for field-name normalization.
"""
from deep_research_agent.parsing import FIELD_ALIASES, normalize_fields


def test_normalize_renames_aliases_recursively():
    """Test that aliases are renamed at every nesting level."""
    value = {"searchQueries": [{"searchQuery": "a"}, {"q": "b"}]}

    assert normalize_fields(value) == {"queries": [{"search_query": "a"}, {"search_query": "b"}]}


def test_canonical_key_wins_over_alias():
    """Test that an already canonical key is not overwritten by an alias."""
    value = {"search_query": "canonical", "query": "alias"}

    assert normalize_fields(value) == {"search_query": "canonical"}


def test_planner_aliases():
    """Test the planner's field spellings."""
    value = {"name": "Intro", "researchNeeded": False, "plan": "Overview"}

    assert normalize_fields(value) == {"name": "Intro", "research": False, "description": "Overview"}


def test_scalars_unchanged():
    """Test that scalars pass through."""
    assert normalize_fields("text") == "text"
    assert normalize_fields(3) == 3


def test_alias_table_targets_are_canonical():
    """Test that no alias maps onto another alias."""
    assert not set(FIELD_ALIASES.values()) & set(FIELD_ALIASES)


def test_declared_fields_are_not_renamed():
    """Test that an alias the target shape declares keeps its name."""
    value = {"title": "T", "text": "body", "q": "x"}

    assert normalize_fields(value, {"title", "text"}) == {"title": "T", "text": "body", "search_query": "x"}
