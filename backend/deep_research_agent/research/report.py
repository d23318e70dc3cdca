"""
Report assembly for both pipeline variants.
"""
from typing import List, Sequence

from deep_research_agent.llm import ModelInvoker
from deep_research_agent.logging import get_logger
from deep_research_agent.models import Section
from deep_research_agent.prompts.research import (
    FINAL_REPORT_PROMPT_TEMPLATE,
    NO_FINDINGS_REPORT_TEMPLATE,
    REFLECTIONS_SECTION_HEADER,
    RESEARCH_SYSTEM_PROMPT,
)
from deep_research_agent.prompts.sections import CONTENT_NOT_AVAILABLE
from deep_research_agent.utils.helpers import format_date

logger = get_logger(__name__)


def no_findings_report(topic: str) -> str:
    """Deterministic report for a run that found nothing."""
    return NO_FINDINGS_REPORT_TEMPLATE.format(topic=topic)


def assemble_narrative_report(model: ModelInvoker, topic: str, findings: List[str], reflections: List[str]) -> str:
    """
    Write the flat narrative report.

    Args:
        model: Model capability
        topic: Research topic
        findings: Ordered findings of the run
        reflections: Reflections produced after each round

    Returns:
        Markdown report. When there are no findings the model is not called.
    """
    usable = [f for f in findings if f and f.strip()]
    if not usable:
        logger.info("no_findings_report", topic=topic)
        return no_findings_report(topic)

    material = "\n\n".join(usable)
    notes = [r for r in reflections if r and r.strip()]
    if notes:
        material += f"\n\n{REFLECTIONS_SECTION_HEADER}:\n" + "\n\n".join(notes)

    prompt = FINAL_REPORT_PROMPT_TEMPLATE.format(current_date=format_date(), topic=topic, findings=material)
    report = model.invoke(RESEARCH_SYSTEM_PROMPT, prompt).strip()
    logger.info("narrative_report_written", topic=topic, findings=len(usable), chars=len(report))
    return report


def render_section(section: Section) -> str:
    content = section.content.strip() if section.content else ""
    return f"# {section.name}\n\n{content or CONTENT_NOT_AVAILABLE}"


def assemble_section_report(sections: Sequence[Section]) -> str:
    """
    Concatenate sections in plan order, one heading each.

    A section without content keeps its heading and gets a placeholder.
    """
    return "\n\n".join(render_section(section) for section in sections)
