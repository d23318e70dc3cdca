"""
Reflection and refinement between research rounds.

Both are free-text model round-trips; an empty findings list is valid input.
"""
from typing import List

from deep_research_agent.llm import ModelInvoker
from deep_research_agent.logging import get_logger
from deep_research_agent.prompts.research import (
    REFINE_RESEARCH_PROMPT_TEMPLATE,
    REFLECTION_BLOCK_TEMPLATE,
    REFLECTION_PROMPT_TEMPLATE,
    RESEARCH_SYSTEM_PROMPT,
)
from deep_research_agent.utils.helpers import format_date

logger = get_logger(__name__)

NO_FINDINGS_TEXT = "(no findings yet)"


def join_findings(findings: List[str]) -> str:
    """Join findings with blank lines; a placeholder when there are none."""
    text = "\n\n".join(f for f in findings if f and f.strip())
    return text or NO_FINDINGS_TEXT


def reflect(model: ModelInvoker, topic: str, findings: List[str]) -> str:
    """
    Ask the model what is still missing from the findings.

    Args:
        model: Model capability
        topic: Research topic
        findings: All findings collected so far

    Returns:
        Reflection text
    """
    prompt = REFLECTION_PROMPT_TEMPLATE.format(
        current_date=format_date(),
        topic=topic,
        findings=join_findings(findings),
    )
    reflection = model.invoke(RESEARCH_SYSTEM_PROMPT, prompt).strip()
    logger.debug("reflection_completed", topic=topic, findings=len(findings), chars=len(reflection))
    return reflection


def refine(model: ModelInvoker, topic: str, findings: List[str], reflection: str = "") -> str:
    """
    Ask the model for the next research direction.

    Args:
        model: Model capability
        topic: Research topic
        findings: All findings collected so far
        reflection: Reflection produced for the same findings

    Returns:
        Refined research direction text
    """
    findings_text = join_findings(findings)
    if reflection:
        findings_text = REFLECTION_BLOCK_TEMPLATE.format(findings=findings_text, reflection=reflection)
    prompt = REFINE_RESEARCH_PROMPT_TEMPLATE.format(
        current_date=format_date(),
        topic=topic,
        findings=findings_text,
    )
    direction = model.invoke(RESEARCH_SYSTEM_PROMPT, prompt).strip()
    logger.debug("refinement_completed", topic=topic, chars=len(direction))
    return direction
