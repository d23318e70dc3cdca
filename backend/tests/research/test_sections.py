"""
Tests for section planning, writing and grading.
"""
import pytest

from deep_research_agent.models import Section, SectionGrade
from deep_research_agent.research.sections import (
    NO_SOURCES_TEXT,
    default_plan,
    follow_up_texts,
    format_research_materials,
    grade_section,
    plan_sections,
    write_final_section,
    write_section,
)

PLAN = """Here is the plan:
[
  {"name": "Introduction", "description": "Overview", "research": false},
  {"name": "Technology", "description": "How it works", "research": true},
  {"name": "  ", "description": "Nameless"},
  {"name": "Conclusion", "plan": "Summary", "researchNeeded": false}
]"""


def test_plan_sections_parses_plan(make_model):
    """Test that planned sections are parsed, nameless ones dropped."""
    model = make_model({"plan": PLAN})

    sections = plan_sections(model, "solar power", "Intro, body, conclusion")

    assert [s.name for s in sections] == ["Introduction", "Technology", "Conclusion"]
    assert [s.research for s in sections] == [False, True, False]
    assert sections[2].description == "Summary"
    assert all(s.content == "" for s in sections)
    assert "Intro, body, conclusion" in model.calls_of("plan")[0]["prompt"]


@pytest.mark.parametrize("reply", ["[]", "no plan", RuntimeError("model down")])
def test_plan_sections_default_plan(make_model, reply):
    """Test the default plan when the planner yields nothing."""
    sections = plan_sections(make_model({"plan": reply}), "solar power", "structure")

    assert [s.name for s in sections] == [s.name for s in default_plan("solar power")]
    assert [s.research for s in sections] == [False, True, False]


def test_write_section_uses_sources(make_model):
    """Test that the writer receives the sources and returns the content."""
    model = make_model({"write_section": '{"content": "Panels convert light."}'})
    section = Section(name="Technology", description="How it works")

    content = write_section(model, "solar power", section, "--- Results ---")

    assert content == "Panels convert light."
    assert "--- Results ---" in model.calls_of("write_section")[0]["prompt"]


def test_write_section_keeps_quotes_and_links(make_model):
    """Test that quoted titles and markdown links survive writing."""
    reply = 'Adoption rose, per the "Global Energy Review" ([iea.org](https://iea.org)).'
    model = make_model({"write_section": reply, "final_section": reply})
    section = Section(name="Technology", description="How it works")

    assert write_section(model, "solar power", section, "--- Results ---") == reply
    assert write_final_section(model, "solar power", Section(name="Conclusion", research=False), "") == reply


def test_write_section_without_sources(make_model):
    """Test the placeholder shown when no sources were found."""
    model = make_model()

    write_section(model, "solar power", Section(name="Technology"), "")

    assert NO_SOURCES_TEXT in model.calls_of("write_section")[0]["prompt"]


def test_write_section_raises_on_model_error(make_model):
    """Test that writer failures propagate to the node."""
    with pytest.raises(RuntimeError):
        write_section(make_model({"write_section": RuntimeError("down")}), "t", Section(name="S"), "")


def test_grade_section(make_model):
    """Test that grades and follow-ups are parsed."""
    model = make_model({"grade": '{"grade": "fail", "follow_up_queries": [{"search_query": "panel costs"}]}'})

    grade = grade_section(model, "solar power", Section(name="Costs", content="Draft"), "sources")

    assert grade.grade == "fail"
    assert follow_up_texts(grade) == ["panel costs"]
    assert "WRITTEN SECTION:\nDraft" in model.calls_of("grade")[0]["prompt"]


def test_grade_section_unreadable_is_pass(make_model):
    """Test that unreadable grader output counts as a pass."""
    grade = grade_section(make_model({"grade": "I think it is fine overall."}), "t", Section(name="S"), "")

    assert grade.grade == "pass"


def test_follow_up_texts_drops_blanks():
    """Test that blank follow-ups are ignored."""
    grade = SectionGrade(grade="fail", follow_up_queries=["  ", " panel costs "])

    assert follow_up_texts(grade) == ["panel costs"]
    assert follow_up_texts(None) == []


def test_write_final_section_gets_materials(make_model):
    """Test that final sections are written from the research materials."""
    model = make_model({"final_section": '{"content": "In summary..."}'})
    materials = format_research_materials(
        [Section(name="Technology", content="Panels convert light."), Section(name="Empty", content="")]
    )

    content = write_final_section(model, "solar power", Section(name="Conclusion", research=False), materials)

    assert content == "In summary..."
    prompt = model.calls_of("final_section")[0]["prompt"]
    assert "## Technology\n\nPanels convert light." in prompt
    assert "## Empty" not in prompt


def test_format_research_materials_empty():
    """Test the placeholder when no research content exists."""
    assert format_research_materials([]) == NO_SOURCES_TEXT
