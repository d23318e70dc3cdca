"""
Tests for the resilient model-output extractor.
"""
import pytest

from deep_research_agent.models import SearchQueries, SectionContent, SectionGrade, SectionPlan, WebDocument
from deep_research_agent.parsing import extract, extract_text_field, parse_json_safely
from deep_research_agent.parsing.extractor import is_rejected, normalize_quotes


def queries_of(raw) -> list:
    return extract(raw, SearchQueries()).texts()


def test_extract_strict_json():
    """Test that well-formed JSON is parsed directly."""
    raw = '{"queries": [{"search_query": "solar cells"}, {"search_query": "perovskite"}]}'

    assert queries_of(raw) == ["solar cells", "perovskite"]


def test_extract_json_inside_prose_and_fence():
    """Test that stray prose and code fences around the payload are ignored."""
    raw = 'Sure! Here are your queries:\n```json\n{"queries": [{"search_query": "wind farms"}]}\n```\nGood luck.'

    assert queries_of(raw) == ["wind farms"]


def test_extract_single_quoted_literal():
    """Test that Python-style single quotes are normalized."""
    raw = "{'queries': [{'search_query': 'tidal energy'}]}"

    assert queries_of(raw) == ["tidal energy"]


def test_extract_bare_list_of_strings():
    """Test that a plain JSON list of strings fills the query list."""
    assert queries_of('["geothermal", "hydropower"]') == ["geothermal", "hydropower"]


def test_extract_field_aliases():
    """Test that aliased field names are mapped to canonical ones."""
    raw = '{"searchQueries": [{"query": "battery storage"}, {"searchQuery": "grid scale"}]}'

    assert queries_of(raw) == ["battery storage", "grid scale"]


def test_extract_unescaped_newlines_in_strings():
    """Test that literal newlines inside string values are tolerated."""
    raw = '{"content": "First line\nSecond line"}'

    assert extract(raw, SectionContent()).content == "First line\nSecond line"


def test_extract_first_object_array_from_broken_text():
    """Test recovery of an array of objects from otherwise unparseable output."""
    raw = 'Plan: [{"name": "Intro", "research": false}, {"name": "Body"}] and then {broken'

    plan = extract(raw, SectionPlan())

    assert [s.name for s in plan.sections] == ["Intro", "Body"]
    assert plan.sections[0].research is False


def test_extract_content_field_from_malformed_object():
    """Test that a quoted content field is recovered from invalid JSON."""
    raw = '{"content": "The \\"best\\" section", "extra": oops}'

    assert extract(raw, SectionContent()).content == 'The "best" section'


def test_extract_plain_prose_fills_text_field():
    """Test that prose without brackets becomes the content."""
    raw = "Solar adoption grew sharply in 2024."

    assert extract(raw, SectionContent()).content == raw


@pytest.mark.parametrize("raw", [None, "", "   ", 42, ["not", "text"]])
def test_extract_non_text_returns_fallback(raw):
    """Test that empty and non-text input resolves to the fallback."""
    fallback = SearchQueries()

    assert extract(raw, fallback) is fallback


@pytest.mark.parametrize(
    "raw",
    [
        "NaN",
        "-Infinity",
        '"Infinity"',
        '{"grade": NaN}',
        '{"queries": [Infinity]}',
        '{"grade": "NaN"}',
        "{\"content\": \"a\x00b\"}",
    ],
)
def test_extract_rejects_non_finite_and_nul(raw):
    """Test that non-finite constants and NUL characters yield the fallback."""
    fallback = SectionGrade(grade="fail")

    assert extract(raw, fallback) is fallback


def test_extract_allows_prose_mentioning_infinity():
    """Test that prose merely mentioning Infinity is not rejected."""
    raw = "The universe may extend to Infinity."

    assert extract(raw, SectionContent()).content == raw


def test_extract_grade_plain_word():
    """Test that a bare grade word is recovered."""
    assert extract("fail", SectionGrade()).grade == "fail"
    assert extract("PASS", SectionGrade()).grade == "pass"


def test_extract_grade_with_plain_string_follow_ups():
    """Test that follow-up queries given as strings are accepted."""
    raw = '{"grade": "Fail", "follow_up_queries": ["solar subsidies 2025"]}'

    grade = extract(raw, SectionGrade())

    assert grade.grade == "fail"
    assert grade.follow_up_queries[0].search_query == "solar subsidies 2025"


def test_extract_unreadable_grade_is_fallback():
    """Test that output with no usable grade leaves the fallback."""
    grade = extract('{"verdict": "great"}', SectionGrade())

    assert grade.grade == "pass"


def test_extract_is_idempotent():
    """Test that extracting the serialized result gives the same value."""
    first = extract('Here: {"queries": ["a", "b"]}', SearchQueries())
    second = extract(first.model_dump_json(), SearchQueries())

    assert first == second


@pytest.mark.parametrize(
    "raw",
    ['{"queries": [', "}}}{{{", "[[[[", '{"a": "\\', "'''", "```", "{'x': }", "\\u0000"],
)
def test_extract_never_raises(raw):
    """Test totality on malformed input."""
    result = extract(raw, SearchQueries())

    assert isinstance(result, SearchQueries)


def test_parse_json_safely():
    """Test the strict-parse step exposed on its own."""
    assert parse_json_safely('text {"a": 1} text') == {"a": 1}
    assert parse_json_safely("{'a': True, b: None}") == {"a": True, "b": None}
    assert parse_json_safely("no json here") is None
    assert parse_json_safely('{"a": Infinity}') is None
    assert parse_json_safely("42") is None


def test_normalize_quotes_leaves_double_quoted_text():
    """Test that text inside double quotes is untouched."""
    assert normalize_quotes("""{"it's": 'fine'}""") == """{"it's": "fine"}"""


def test_extract_text_field_from_json():
    """Test that the prose body is pulled out of a JSON response."""
    assert extract_text_field('{"content": "Useful analysis."}') == "Useful analysis."


def test_extract_text_field_returns_raw_prose():
    """Test that prose without structure is returned as-is."""
    raw = "Plain analysis of the page."

    assert extract_text_field(raw) == raw


def test_extract_text_field_rejected_input():
    """Test that rejected input gives an empty string."""
    assert extract_text_field("NaN") == ""
    assert extract_text_field(None) == ""


def test_extract_keeps_non_finite_words_inside_strings():
    """Test that NaN inside a string value is ordinary text."""
    raw = '{"content": "Measured ratios were 1.2, NaN, 3.4 across sites."}'

    assert extract_text_field(raw) == "Measured ratios were 1.2, NaN, 3.4 across sites."
    assert extract(raw, SectionContent()).content == "Measured ratios were 1.2, NaN, 3.4 across sites."


def test_extract_keeps_bracketed_prose_mentioning_nan():
    """Test that prose with a citation marker before NaN is not rejected."""
    raw = "Key figures [1]: NaN readings were dropped from the survey."

    assert not is_rejected(raw)
    assert extract_text_field(raw) == raw


@pytest.mark.parametrize(
    "raw",
    ['{"a": [1, NaN]}', '{"a": -Infinity }', "{'grade': 'NaN'}", '[ "Infinity" ]'],
)
def test_is_rejected_whole_non_finite_values(raw):
    """Test that non-finite tokens in value position are rejected, quoted or not."""
    assert is_rejected(raw)


def test_extract_keeps_declared_alias_named_fields():
    """Test that a field the target declares is not renamed as an alias."""
    document = WebDocument(title="T", text="body")

    assert extract(document.model_dump_json(), WebDocument(text="fallback")) == document


@pytest.mark.parametrize("fallback", [SectionPlan(), SearchQueries()])
def test_extract_prose_into_textless_shape_is_fallback(fallback):
    """Test that bracket-free prose never lands in a shape without a text field."""
    assert extract("just some words about planning", fallback) is fallback
