"""
Tests for reflection, refinement and report assembly.
"""
from deep_research_agent.models import Section
from deep_research_agent.prompts.sections import CONTENT_NOT_AVAILABLE
from deep_research_agent.research.reflection import NO_FINDINGS_TEXT, refine, reflect
from deep_research_agent.research.report import (
    assemble_narrative_report,
    assemble_section_report,
    no_findings_report,
)


def test_reflect_with_findings(make_model):
    """Test that reflection sees every finding."""
    model = make_model({"reflection": "  Missing cost data.  "})

    reflection = reflect(model, "solar power", ["Finding one", "Finding two"])

    assert reflection == "Missing cost data."
    prompt = model.calls_of("reflection")[0]["prompt"]
    assert "Finding one\n\nFinding two" in prompt


def test_reflect_with_no_findings(make_model):
    """Test that an empty findings list is valid input."""
    model = make_model()

    reflect(model, "solar power", [])

    assert NO_FINDINGS_TEXT in model.calls_of("reflection")[0]["prompt"]


def test_refine_includes_reflection(make_model):
    """Test that refinement receives the reflection block."""
    model = make_model({"refine": "Look at storage costs."})

    direction = refine(model, "solar power", ["Finding"], "Missing cost data.")

    assert direction == "Look at storage costs."
    prompt = model.calls_of("refine")[0]["prompt"]
    assert "Reflection on Current Findings:\nMissing cost data." in prompt


def test_refine_without_reflection(make_model):
    """Test that refinement works without a reflection."""
    model = make_model()

    refine(model, "solar power", ["Finding"])

    assert "Reflection on Current Findings" not in model.calls_of("refine")[0]["prompt"]


def test_narrative_report_with_findings(make_model):
    """Test that the report prompt carries findings and reflections."""
    model = make_model({"report": "# Solar Report\n\nBody"})

    report = assemble_narrative_report(model, "solar power", ["F1", "F2"], ["R1"])

    assert report == "# Solar Report\n\nBody"
    prompt = model.calls_of("report")[0]["prompt"]
    assert "F1\n\nF2\n\nResearch Process Reflections:\nR1" in prompt


def test_narrative_report_without_findings_skips_model(make_model):
    """Test the deterministic report when nothing was found."""
    model = make_model()

    report = assemble_narrative_report(model, "solar power", ["", "  "], ["R1"])

    assert report == no_findings_report("solar power")
    assert "# Research Report: solar power" in report
    assert "No information was found for this topic." in report
    assert model.calls == []


def test_section_report_keeps_plan_order_and_placeholders():
    """Test headings in plan order with a placeholder for empty sections."""
    sections = [
        Section(name="Introduction", content="Intro text"),
        Section(name="Findings", content=""),
        Section(name="Conclusion", content="  Wrap up  "),
    ]

    report = assemble_section_report(sections)

    assert report == (
        "# Introduction\n\nIntro text\n\n"
        f"# Findings\n\n{CONTENT_NOT_AVAILABLE}\n\n"
        "# Conclusion\n\nWrap up"
    )
