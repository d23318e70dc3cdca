"""
Section pipeline components: planning, writing and grading report sections.
"""
from typing import List, Optional, Sequence

from deep_research_agent.llm import ModelInvoker
from deep_research_agent.logging import get_logger
from deep_research_agent.models import Section, SectionGrade, SectionPlan
from deep_research_agent.parsing import extract, extract_text_field
from deep_research_agent.prompts.research import RESEARCH_SYSTEM_PROMPT
from deep_research_agent.prompts.sections import (
    FINAL_SECTION_WRITER_PROMPT_TEMPLATE,
    REPORT_PLANNER_PROMPT_TEMPLATE,
    SECTION_GRADER_PROMPT_TEMPLATE,
    SECTION_WRITER_PROMPT_TEMPLATE,
)
from deep_research_agent.utils.helpers import format_date

logger = get_logger(__name__)

NO_SOURCES_TEXT = "(no sources found)"


def default_plan(topic: str) -> List[Section]:
    """Three-section plan used when the planner yields nothing."""
    return [
        Section(name="Introduction", description=f"Background and scope of {topic}.", research=False),
        Section(name="Main Findings", description=f"Key facts, developments and analysis of {topic}.", research=True),
        Section(name="Conclusion", description=f"Summary of the findings on {topic}.", research=False),
    ]


def plan_sections(model: ModelInvoker, topic: str, report_structure: str) -> List[Section]:
    """
    Plan the report sections.

    Args:
        model: Model capability
        topic: Research topic
        report_structure: Outline the plan should follow

    Returns:
        Planned sections with empty content. Falls back to ``default_plan``
        when the model fails or returns no named sections.
    """
    prompt = REPORT_PLANNER_PROMPT_TEMPLATE.format(
        current_date=format_date(),
        topic=topic,
        report_structure=report_structure,
    )
    try:
        raw = model.invoke(RESEARCH_SYSTEM_PROMPT, prompt)
    except Exception as e:
        logger.warning("report_planning_failed", topic=topic, error=str(e))
        return default_plan(topic)

    plan = extract(raw, SectionPlan())
    sections = [
        Section(name=s.name.strip(), description=s.description.strip(), research=s.research)
        for s in plan.sections
        if s.name and s.name.strip()
    ]
    if not sections:
        logger.info("default_plan_used", topic=topic)
        return default_plan(topic)
    logger.info("report_planned", topic=topic, sections=len(sections), research_sections=sum(s.research for s in sections))
    return sections


def write_section(model: ModelInvoker, topic: str, section: Section, sources: str) -> str:
    """
    Write a research section from its gathered sources.

    Returns:
        Section body, empty when nothing could be recovered
    """
    prompt = SECTION_WRITER_PROMPT_TEMPLATE.format(
        current_date=format_date(),
        topic=topic,
        section_name=section.name,
        section_description=section.description,
        sources=sources or NO_SOURCES_TEXT,
    )
    raw = model.invoke(RESEARCH_SYSTEM_PROMPT, prompt)
    return extract_text_field(raw, "content").strip()


def grade_section(model: ModelInvoker, topic: str, section: Section, sources: str) -> SectionGrade:
    """
    Grade a written section.

    Output that cannot be read as a grade counts as a pass.
    """
    prompt = SECTION_GRADER_PROMPT_TEMPLATE.format(
        current_date=format_date(),
        topic=topic,
        section_name=section.name,
        section_description=section.description,
        section_content=section.content,
        sources=sources or NO_SOURCES_TEXT,
    )
    raw = model.invoke(RESEARCH_SYSTEM_PROMPT, prompt)
    return extract(raw, SectionGrade())


def format_research_materials(sections: Sequence[Section]) -> str:
    """Render completed research sections as context for the final writers."""
    parts = [f"## {s.name}\n\n{s.content.strip()}" for s in sections if s.content and s.content.strip()]
    return "\n\n".join(parts) or NO_SOURCES_TEXT


def write_final_section(model: ModelInvoker, topic: str, section: Section, research_materials: str) -> str:
    """
    Write a section that needs no web research.

    Args:
        model: Model capability
        topic: Research topic
        section: Section to write
        research_materials: Rendered research sections

    Returns:
        Section body, empty when nothing could be recovered
    """
    prompt = FINAL_SECTION_WRITER_PROMPT_TEMPLATE.format(
        current_date=format_date(),
        topic=topic,
        section_name=section.name,
        section_description=section.description,
        research_materials=research_materials,
    )
    raw = model.invoke(RESEARCH_SYSTEM_PROMPT, prompt)
    return extract_text_field(raw, "content").strip()


def follow_up_texts(grade: Optional[SectionGrade]) -> List[str]:
    if grade is None:
        return []
    return [q.search_query.strip() for q in grade.follow_up_queries if q.search_query and q.search_query.strip()]
